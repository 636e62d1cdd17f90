"""Integration tests for the public poll endpoints."""
import pytest
from datetime import timedelta

from globalpoll.core.identity import Identity
from globalpoll.core.utils import utcnow
from globalpoll.services.poll import create_poll
from globalpoll.services.vote import submit_vote


@pytest.mark.integration
class TestActivePoll:
    def test_no_active_poll(self, client):
        response = client.get("/api/polls")
        assert response.status_code == 404
        assert response.json() == {"message": "No active poll found"}

    def test_active_poll_with_statistics(self, client, db_session, active_poll):
        for n in range(3):
            submit_vote(db_session, active_poll.id, True, Identity(f"10.0.0.{n}", f"{n:064x}"))
        submit_vote(db_session, active_poll.id, False, Identity("10.0.0.9", "f" * 64))

        response = client.get("/api/polls")

        assert response.status_code == 200
        data = response.json()
        assert data["id"] == active_poll.id
        assert data["question"] == "Should cities ban cars downtown?"
        assert data["category"] == "politics"
        assert "expiresAt" in data
        assert data["statistics"] == {
            "totalVotes": 4,
            "yesVotes": 3,
            "noVotes": 1,
            "yesPercentage": 75,
            "noPercentage": 25,
        }

    def test_zero_votes(self, client, active_poll):
        stats = client.get("/api/polls").json()["statistics"]
        assert stats["totalVotes"] == 0
        assert stats["yesPercentage"] == 0
        assert stats["noPercentage"] == 0


@pytest.mark.integration
class TestHistory:
    def test_empty(self, client):
        response = client.get("/api/polls/history")
        assert response.status_code == 200
        assert response.json() == []

    def test_lists_archived_polls_newest_first(self, client, db_session):
        first = create_poll(db_session, "First?", now=utcnow() - timedelta(hours=2))
        second = create_poll(db_session, "Second?", now=utcnow() - timedelta(hours=1))
        create_poll(db_session, "Current?")

        data = client.get("/api/polls/history").json()

        assert [p["id"] for p in data] == [second.id, first.id]
        assert all("statistics" in p for p in data)


@pytest.mark.integration
class TestEmbed:
    def test_embed_payload(self, client, active_poll):
        response = client.get("/api/embed")
        assert response.status_code == 200
        data = response.json()
        assert set(data) == {"id", "question", "category", "customCategory", "statistics"}

    def test_embed_without_active_poll(self, client):
        assert client.get("/api/embed").status_code == 404


@pytest.mark.integration
class TestHealth:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["database"]["status"] == "connected"
        assert data["rate_limiter"] == "InMemoryRateLimiter"

    def test_unknown_route_uses_message_body(self, client):
        response = client.get("/api/nope")
        assert response.status_code == 404
        assert "message" in response.json()

    def test_responses_carry_request_id(self, client):
        response = client.get("/api/polls/history")
        assert response.headers["X-Request-ID"]
        assert response.headers["X-API-Version"]
