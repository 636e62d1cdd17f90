"""Integration tests for comments."""
import pytest


@pytest.mark.integration
class TestComments:
    def test_create_comment(self, client, active_poll, headers_for):
        response = client.post(
            "/api/comments",
            json={"pollId": active_poll.id, "content": "Bikes first", "answer": True},
            headers=headers_for("203.0.113.1"),
        )

        assert response.status_code == 201
        data = response.json()
        assert data["content"] == "Bikes first"
        assert data["isYours"] is True
        assert "ipAddress" not in data

    def test_one_comment_per_identity(self, client, active_poll, headers_for):
        body = {"pollId": active_poll.id, "content": "first", "answer": True}
        client.post("/api/comments", json=body, headers=headers_for("203.0.113.1"))

        response = client.post(
            "/api/comments",
            json={**body, "content": "second"},
            headers=headers_for("203.0.113.1"),
        )

        assert response.status_code == 400
        assert response.json() == {"message": "You have already submitted a comment for this poll"}

    def test_too_long(self, client, active_poll):
        response = client.post(
            "/api/comments",
            json={"pollId": active_poll.id, "content": "x" * 281, "answer": True},
        )
        assert response.status_code == 400
        assert response.json() == {"message": "Comment is too long (max 280 characters)"}

    def test_unknown_poll(self, client):
        response = client.post("/api/comments", json={"pollId": 999, "content": "hi", "answer": True})
        assert response.status_code == 404

    def test_list_flags_own_comment(self, client, active_poll, headers_for):
        client.post(
            "/api/comments",
            json={"pollId": active_poll.id, "content": "mine", "answer": True},
            headers=headers_for("203.0.113.1"),
        )
        client.post(
            "/api/comments",
            json={"pollId": active_poll.id, "content": "theirs", "answer": False},
            headers=headers_for("203.0.113.2"),
        )

        response = client.get(
            "/api/comments",
            params={"pollId": active_poll.id},
            headers=headers_for("203.0.113.1"),
        )

        assert response.status_code == 200
        rows = {c["content"]: c for c in response.json()}
        assert rows["mine"]["isYours"] is True
        assert rows["theirs"]["isYours"] is False
        assert all("deviceFingerprint" not in c for c in rows.values())
