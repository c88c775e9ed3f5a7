from sqlmodel import select

from app.db.seed import BATTLEPASS_LEVEL_COUNT, seed_database
from app.models.battlepass import BattlepassLevel
from app.models.server import Server


class TestSeedDatabase:
    def test_seeds_empty_tables(self, db):
        seed_database(db)

        servers = db.exec(select(Server)).all()
        assert [s.map for s in servers] == ["Livonia", "Chernarus"]
        assert servers[0].features == ["PvPvE", "Full cars", "Economy"]

        levels = db.exec(select(BattlepassLevel).order_by(BattlepassLevel.level)).all()
        assert len(levels) == BATTLEPASS_LEVEL_COUNT
        assert levels[0].free_reward == "Level 1 Scrap"
        assert levels[-1].premium_reward == "Level 50 Tactical Gear"

    def test_is_idempotent(self, db):
        seed_database(db)
        seed_database(db)

        assert len(db.exec(select(Server)).all()) == 2
        assert len(db.exec(select(BattlepassLevel)).all()) == BATTLEPASS_LEVEL_COUNT

    def test_leaves_existing_rows_alone(self, db):
        db.add(Server(name="Custom", map="Sakhal", description="Frozen", multiplier="5x", features=[]))
        db.commit()

        seed_database(db)

        assert [s.name for s in db.exec(select(Server)).all()] == ["Custom"]
