"""Unit tests for vote service."""
import pytest
from unittest.mock import Mock
from sqlalchemy.exc import IntegrityError

from globalpoll.core.exceptions import ConflictError, NotFoundError, PollClosedError
from globalpoll.core.identity import Identity
from globalpoll.db.models import Poll, Vote
from globalpoll.services.poll import create_poll, set_active
from globalpoll.services.vote import (
    ALREADY_VOTED,
    ALREADY_VOTED_DEVICE,
    check_vote_status,
    submit_vote,
)

ALICE = Identity(ip_address="10.0.0.1", device_fingerprint="a" * 64)


@pytest.mark.unit
class TestSubmitVote:
    def test_records_vote(self, db_session):
        poll = create_poll(db_session, "Q?")
        vote = submit_vote(db_session, poll.id, True, ALICE)
        assert vote.id is not None
        assert vote.answer is True
        assert vote.ip_address == ALICE.ip_address

    def test_same_ip_rejected(self, db_session):
        poll = create_poll(db_session, "Q?")
        submit_vote(db_session, poll.id, True, ALICE)

        other_device = Identity(ip_address=ALICE.ip_address, device_fingerprint="b" * 64)
        with pytest.raises(ConflictError, match=ALREADY_VOTED):
            submit_vote(db_session, poll.id, False, other_device)

    def test_same_device_other_ip_rejected(self, db_session):
        poll = create_poll(db_session, "Q?")
        submit_vote(db_session, poll.id, True, ALICE)

        roaming = Identity(ip_address="192.0.2.50", device_fingerprint=ALICE.device_fingerprint)
        with pytest.raises(ConflictError, match=ALREADY_VOTED_DEVICE):
            submit_vote(db_session, poll.id, True, roaming)

    def test_vote_is_never_updated(self, db_session):
        poll = create_poll(db_session, "Q?")
        submit_vote(db_session, poll.id, True, ALICE)
        with pytest.raises(ConflictError):
            submit_vote(db_session, poll.id, False, ALICE)

        votes = db_session.query(Vote).all()
        assert len(votes) == 1
        assert votes[0].answer is True

    def test_same_identity_can_vote_on_another_poll(self, db_session):
        first = create_poll(db_session, "First?")
        submit_vote(db_session, first.id, True, ALICE)
        set_active(db_session, first.id, False)
        second = create_poll(db_session, "Second?")

        assert submit_vote(db_session, second.id, False, ALICE).poll_id == second.id

    def test_inactive_poll(self, db_session):
        poll = create_poll(db_session, "Q?")
        set_active(db_session, poll.id, False)
        with pytest.raises(PollClosedError, match="This poll has expired"):
            submit_vote(db_session, poll.id, True, ALICE)

    def test_unknown_poll(self, db_session):
        with pytest.raises(NotFoundError):
            submit_vote(db_session, 12345, True, ALICE)

    def test_constraint_race_reported_as_duplicate(self):
        """A unique-constraint failure on commit surfaces as ConflictError."""
        poll = Mock(spec=Poll)
        poll.is_active = True

        query = Mock()
        query.filter.return_value = query
        query.order_by.return_value = query
        query.first.side_effect = [poll, None]

        mock_db = Mock()
        mock_db.query.return_value = query
        mock_db.commit.side_effect = IntegrityError(
            "statement", {}, Exception('duplicate key value violates unique constraint "uq_vote_poll_ip"')
        )

        with pytest.raises(ConflictError, match=ALREADY_VOTED):
            submit_vote(mock_db, 1, True, ALICE)
        mock_db.rollback.assert_called_once()


@pytest.mark.unit
class TestCheckVoteStatus:
    def test_no_vote(self, db_session):
        poll = create_poll(db_session, "Q?")
        assert check_vote_status(db_session, poll.id, ALICE) is None

    def test_matches_on_device_alone(self, db_session):
        poll = create_poll(db_session, "Q?")
        submit_vote(db_session, poll.id, False, ALICE)

        roaming = Identity(ip_address="192.0.2.50", device_fingerprint=ALICE.device_fingerprint)
        vote = check_vote_status(db_session, poll.id, roaming)
        assert vote is not None
        assert vote.answer is False
