from starlette.testclient import TestClient

from app.main import create_app


class TestCreateApp:
    def test_database_follows_factory_settings(self, settings, tmp_path):
        db_path = tmp_path / "asylum.db"
        app = create_app(settings.model_copy(update={"DATABASE_URL": f"sqlite:///{db_path}", "SEED_DATABASE": True}))

        assert str(app.state.engine.url) == f"sqlite:///{db_path}"

        # Runs the lifespan: tables and seed data land in the configured file
        with TestClient(app) as client:
            servers = client.get("/api/servers").json()

        assert len(servers) == 2
        assert db_path.exists()
