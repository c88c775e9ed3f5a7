from app.models.support import SupportRequest

TICKET = {"category": "bug", "subject": "Car vanished", "message": "My truck despawned after restart."}


class TestSubmitSupportRequest:
    def test_anonymous_submit(self, client, db):
        response = client.post("/api/support", json={**TICKET, "discord_username": "survivor"})

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Support request submitted successfully"}
        ticket = db.get(SupportRequest, 1)
        assert ticket.status == "pending"
        assert ticket.discord_username == "survivor"
        assert ticket.created_at is not None

    def test_missing_required_field(self, client):
        response = client.post("/api/support", json={"category": "bug", "subject": "Car vanished"})

        assert response.status_code == 400
        assert response.json() == {"message": "Invalid input", "field": "message"}

    def test_blank_required_field(self, client):
        response = client.post("/api/support", json={**TICKET, "subject": ""})
        assert response.status_code == 400


class TestSupportAdmin:
    def test_list_requires_admin(self, client):
        assert client.get("/api/support").status_code == 401

    def test_list_newest_first(self, client, admin_headers):
        client.post("/api/support", json={**TICKET, "subject": "first"})
        client.post("/api/support", json={**TICKET, "subject": "second"})

        response = client.get("/api/support", headers=admin_headers)

        assert response.status_code == 200
        assert [t["subject"] for t in response.json()] == ["second", "first"]

    def test_update_status(self, client, admin_headers):
        client.post("/api/support", json=TICKET)

        response = client.patch("/api/support/1", json={"status": "resolved"}, headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["status"] == "resolved"

    def test_unknown_status(self, client, admin_headers):
        client.post("/api/support", json=TICKET)
        response = client.patch("/api/support/1", json={"status": "ignored"}, headers=admin_headers)
        assert response.status_code == 400

    def test_update_missing_ticket(self, client, admin_headers):
        response = client.patch("/api/support/42", json={"status": "resolved"}, headers=admin_headers)
        assert response.status_code == 404
