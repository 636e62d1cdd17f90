"""Integration tests for admin authentication and poll management."""
import pytest

from globalpoll.core.identity import Identity
from globalpoll.db.models import Comment, Poll, Vote
from globalpoll.services.admin import ensure_default_admin
from globalpoll.services.comment import submit_comment
from globalpoll.services.vote import submit_vote


@pytest.mark.integration
class TestAdminAuth:
    def test_login_sets_cookie(self, client, db_session):
        ensure_default_admin(db_session)

        response = client.post("/api/admin/auth", json={"username": "admin", "password": "admin123"})

        assert response.status_code == 200
        assert response.json()["message"] == "Login successful"
        assert response.json()["admin"]["username"] == "admin"
        assert "admin_token" in response.cookies

    def test_cookie_grants_access(self, client, db_session):
        ensure_default_admin(db_session)
        client.post("/api/admin/auth", json={"username": "admin", "password": "admin123"})

        assert client.get("/api/admin/polls").status_code == 200

    def test_invalid_credentials(self, client, db_session):
        ensure_default_admin(db_session)
        response = client.post("/api/admin/auth", json={"username": "admin", "password": "wrong"})
        assert response.status_code == 401
        assert response.json() == {"message": "Invalid credentials"}

    def test_admin_routes_require_cookie(self, client):
        response = client.get("/api/admin/polls")
        assert response.status_code == 401
        assert response.json() == {"message": "Not authenticated"}

    def test_logout(self, admin_client):
        response = admin_client.post("/api/admin/logout")
        assert response.status_code == 200
        assert response.json() == {"message": "Logged out successfully"}


@pytest.mark.integration
class TestAdminPolls:
    def test_create_poll(self, admin_client):
        response = admin_client.post(
            "/api/admin/polls",
            json={"question": "Four-day week?", "category": "custom", "customCategory": "Work"},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["isActive"] is True
        assert data["customCategory"] == "Work"
        assert admin_client.get("/api/polls").json()["id"] == data["id"]

    def test_create_archives_previous_poll(self, admin_client, active_poll):
        admin_client.post("/api/admin/polls", json={"question": "Next?"})

        history = admin_client.get("/api/polls/history").json()
        assert [p["id"] for p in history] == [active_poll.id]

    def test_create_requires_question(self, admin_client):
        response = admin_client.post("/api/admin/polls", json={"question": ""})
        assert response.status_code == 400

    def test_list_polls_with_counts(self, admin_client, db_session, active_poll):
        submit_vote(db_session, active_poll.id, True, Identity("10.0.0.1", "a" * 64))

        rows = admin_client.get("/api/admin/polls").json()

        assert rows[0]["id"] == active_poll.id
        assert rows[0]["voteCount"] == 1
        assert rows[0]["commentCount"] == 0

    def test_poll_detail_lists_votes_without_identity(self, admin_client, db_session, active_poll):
        submit_vote(db_session, active_poll.id, False, Identity("10.0.0.1", "a" * 64))

        data = admin_client.get(f"/api/admin/polls/{active_poll.id}").json()

        assert len(data["votes"]) == 1
        assert data["votes"][0]["answer"] is False
        assert "ipAddress" not in data["votes"][0]

    def test_activate_old_poll(self, admin_client):
        p1 = admin_client.post("/api/admin/polls", json={"question": "P1?"}).json()
        p2 = admin_client.post("/api/admin/polls", json={"question": "P2?"}).json()

        response = admin_client.patch(f"/api/admin/polls/{p1['id']}", json={"isActive": True})

        assert response.status_code == 200
        assert response.json()["isActive"] is True
        assert admin_client.get("/api/polls").json()["id"] == p1["id"]
        history_ids = [p["id"] for p in admin_client.get("/api/polls/history").json()]
        assert p2["id"] in history_ids

    def test_delete_poll_cascades(self, admin_client, db_session, active_poll):
        submit_vote(db_session, active_poll.id, True, Identity("10.0.0.1", "a" * 64))
        submit_comment(db_session, active_poll.id, "bye", True, Identity("10.0.0.1", "a" * 64))

        response = admin_client.delete(f"/api/admin/polls/{active_poll.id}")

        assert response.status_code == 200
        assert response.json() == {"message": "Poll deleted successfully"}
        assert db_session.query(Poll).count() == 0
        assert db_session.query(Vote).count() == 0
        assert db_session.query(Comment).count() == 0
        assert admin_client.get("/api/polls").status_code == 404

    def test_unknown_poll(self, admin_client):
        assert admin_client.delete("/api/admin/polls/999").status_code == 404
        assert admin_client.patch("/api/admin/polls/999", json={"isActive": True}).status_code == 404


@pytest.mark.integration
class TestAdminPollUpdateValidation:
    def test_empty_question_rejected(self, admin_client, active_poll):
        response = admin_client.patch(f"/api/admin/polls/{active_poll.id}", json={"question": ""})
        assert response.status_code == 400
        assert "question" in response.json()["message"]

    def test_whitespace_question_rejected(self, admin_client, active_poll):
        response = admin_client.patch(f"/api/admin/polls/{active_poll.id}", json={"question": "   "})
        assert response.status_code == 400
        assert response.json() == {"message": "Question is required"}
