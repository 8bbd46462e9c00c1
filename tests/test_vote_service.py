import logging

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from app.core.exceptions import (
    InvalidArgumentException,
    ResourceConflictException,
    ResourceNotFoundException,
)
from app.modules.restaurants.models import Restaurant
from app.modules.reviews.models import Review
from app.modules.users.models import User
from app.modules.votes.models import Vote, VoteType
from app.modules.votes.schemas import VoteOutcome
from app.services.votes.vote_service import VoteService, parse_vote_type


@pytest.fixture
def service(session):
    return VoteService(session)


def _detached_user(session, user_id):
    # Loaded then expunged: later commits and request-scoped session closes
    # leave its columns readable whatever order fixtures are set up in.
    user = session.get(User, user_id)
    session.expunge(user)
    return user


@pytest.fixture
def alice(session, test_user):
    return _detached_user(session, test_user["id"])


@pytest.fixture
def bob(session, test_user2):
    return _detached_user(session, test_user2["id"])


def _vote_rows(session, review_id):
    return session.scalars(select(Vote).where(Vote.review_id == review_id)).all()


def _counts(service, review_id):
    counts = service.get_vote_counts(review_id)
    return counts.upvotes, counts.downvotes


def test_vote_scenario_create_toggle_create_switch(service, alice, test_review):
    review_id = test_review["id"]

    first = service.submit_vote(review_id=review_id, current_user=alice, vote_type="upvote")
    assert first.outcome == VoteOutcome.CREATED
    assert _counts(service, review_id) == (1, 0)

    second = service.submit_vote(review_id=review_id, current_user=alice, vote_type="upvote")
    assert second.outcome == VoteOutcome.REMOVED
    assert second.id is None
    assert _counts(service, review_id) == (0, 0)

    third = service.submit_vote(
        review_id=review_id, current_user=alice, vote_type="downvote"
    )
    assert third.outcome == VoteOutcome.CREATED
    assert _counts(service, review_id) == (0, 1)

    fourth = service.submit_vote(review_id=review_id, current_user=alice, vote_type="upvote")
    assert fourth.outcome == VoteOutcome.UPDATED
    assert fourth.vote_type == VoteType.UPVOTE
    assert _counts(service, review_id) == (1, 0)


def test_same_vote_twice_leaves_no_row(service, session, alice, test_review):
    for _ in range(2):
        service.submit_vote(
            review_id=test_review["id"], current_user=alice, vote_type="downvote"
        )
    assert _vote_rows(session, test_review["id"]) == []


def test_switch_keeps_vote_identity(service, session, alice, test_review):
    created = service.submit_vote(
        review_id=test_review["id"], current_user=alice, vote_type="upvote"
    )
    original = session.get(Vote, created.id)
    created_at = original.created_at

    switched = service.submit_vote(
        review_id=test_review["id"], current_user=alice, vote_type="downvote"
    )

    assert switched.outcome == VoteOutcome.UPDATED
    assert switched.id == created.id
    rows = _vote_rows(session, test_review["id"])
    assert len(rows) == 1
    session.refresh(rows[0])
    assert rows[0].id == created.id
    assert rows[0].vote_type == VoteType.DOWNVOTE
    assert rows[0].created_at == created_at
    assert rows[0].updated_at is not None


def test_switch_moves_score_by_two(service, alice, bob, test_review):
    review_id = test_review["id"]
    service.submit_vote(review_id=review_id, current_user=bob, vote_type="upvote")
    service.submit_vote(review_id=review_id, current_user=alice, vote_type="upvote")
    assert service.get_vote_counts(review_id).score == 2

    service.submit_vote(review_id=review_id, current_user=alice, vote_type="downvote")
    assert service.get_vote_counts(review_id).score == 0


def test_counts_match_distinct_voters(service, session, alice, bob, test_review):
    review_id = test_review["id"]
    service.submit_vote(review_id=review_id, current_user=alice, vote_type="upvote")
    service.submit_vote(review_id=review_id, current_user=bob, vote_type="downvote")
    service.submit_vote(review_id=review_id, current_user=bob, vote_type="upvote")

    counts = service.get_vote_counts(review_id)
    voters = session.scalar(
        select(func.count(func.distinct(Vote.voter_user_id))).where(
            Vote.review_id == review_id
        )
    )
    assert counts.upvotes + counts.downvotes == voters == 2
    assert (counts.upvotes, counts.downvotes, counts.score) == (2, 0, 2)


@pytest.mark.parametrize("bad_value", ["like", "UPVOTE", "", None, "up vote"])
def test_invalid_vote_type_is_rejected(service, alice, test_review, bad_value):
    with pytest.raises(InvalidArgumentException) as exc:
        service.submit_vote(
            review_id=test_review["id"], current_user=alice, vote_type=bad_value
        )
    assert exc.value.status_code == 400
    assert exc.value.details["field"] == "vote_type"


def test_parse_vote_type_accepts_enum_and_string():
    assert parse_vote_type(VoteType.DOWNVOTE) is VoteType.DOWNVOTE
    assert parse_vote_type("upvote") is VoteType.UPVOTE


def test_vote_on_missing_review(service, alice):
    with pytest.raises(ResourceNotFoundException):
        service.submit_vote(review_id=999999, current_user=alice, vote_type="upvote")


def test_database_rejects_second_row_for_pair(session, alice, test_review):
    session.add(Vote(review_id=test_review["id"], voter_user_id=alice.id, vote_type=VoteType.UPVOTE))
    session.commit()

    session.add(
        Vote(
            review_id=test_review["id"],
            voter_user_id=alice.id,
            vote_type=VoteType.DOWNVOTE,
        )
    )
    with pytest.raises(IntegrityError):
        session.commit()
    session.rollback()


def test_insert_race_is_redecided_once(service, session, alice, test_review, monkeypatch):
    original = VoteService._decide
    calls = []

    def flaky_decide(self, review_id, voter_user_id, chosen):
        calls.append(chosen)
        if len(calls) == 1:
            raise IntegrityError("INSERT INTO votes", {}, Exception("UNIQUE constraint failed"))
        return original(self, review_id, voter_user_id, chosen)

    monkeypatch.setattr(VoteService, "_decide", flaky_decide)
    result = service.submit_vote(
        review_id=test_review["id"], current_user=alice, vote_type="upvote"
    )

    assert len(calls) == 2
    assert result.outcome == VoteOutcome.CREATED
    assert len(_vote_rows(session, test_review["id"])) == 1


def test_repeated_insert_race_raises_conflict(service, alice, test_review, monkeypatch):
    def always_conflicts(self, review_id, voter_user_id, chosen):
        raise IntegrityError("INSERT INTO votes", {}, Exception("UNIQUE constraint failed"))

    monkeypatch.setattr(VoteService, "_decide", always_conflicts)
    with pytest.raises(ResourceConflictException) as exc:
        service.submit_vote(
            review_id=test_review["id"], current_user=alice, vote_type="downvote"
        )
    assert exc.value.status_code == 409


def test_vote_from_deleted_voter_is_not_retried(service, session, test_review, caplog):
    ghost = User(
        id=987654,
        username="ghost",
        email="ghost@example.com",
        hashed_password="not-a-real-hash",
    )
    caplog.set_level(logging.WARNING, logger="app.services.votes.vote_service")

    with pytest.raises(ResourceNotFoundException) as exc:
        service.submit_vote(
            review_id=test_review["id"], current_user=ghost, vote_type="upvote"
        )

    assert exc.value.status_code == 404
    assert exc.value.message == "User not found"
    rejected = [r for r in caplog.records if "rejected" in r.getMessage()]
    assert len(rejected) == 1
    assert _vote_rows(session, test_review["id"]) == []


def test_remove_vote(service, session, alice, test_review):
    service.submit_vote(review_id=test_review["id"], current_user=alice, vote_type="upvote")
    service.remove_vote(review_id=test_review["id"], current_user=alice)
    assert _vote_rows(session, test_review["id"]) == []

    with pytest.raises(ResourceNotFoundException) as exc:
        service.remove_vote(review_id=test_review["id"], current_user=alice)
    assert exc.value.message == "Vote not found"


def test_get_user_vote(service, alice, bob, test_review):
    service.submit_vote(review_id=test_review["id"], current_user=alice, vote_type="downvote")

    mine = service.get_user_vote(review_id=test_review["id"], current_user=alice)
    assert mine.has_voted is True
    assert mine.vote_type == VoteType.DOWNVOTE

    theirs = service.get_user_vote(review_id=test_review["id"], current_user=bob)
    assert theirs.has_voted is False
    assert theirs.vote_type is None


def test_reads_on_missing_review(service, alice):
    with pytest.raises(ResourceNotFoundException):
        service.get_vote_counts(424242)
    with pytest.raises(ResourceNotFoundException):
        service.get_user_vote(review_id=424242, current_user=alice)
    with pytest.raises(ResourceNotFoundException):
        service.list_votes_for_review(424242)


def test_list_votes(service, session, alice, bob, test_reviews):
    first, second, _ = test_reviews
    service.submit_vote(review_id=first["id"], current_user=alice, vote_type="upvote")
    service.submit_vote(review_id=second["id"], current_user=alice, vote_type="downvote")
    service.submit_vote(review_id=first["id"], current_user=bob, vote_type="downvote")

    on_first = service.list_votes_for_review(first["id"])
    assert [v.voter_user_id for v in on_first] == [alice.id, bob.id]

    by_alice = service.list_votes_for_user(alice)
    assert [(v.review_id, v.vote_type) for v in by_alice] == [
        (first["id"], VoteType.UPVOTE),
        (second["id"], VoteType.DOWNVOTE),
    ]


def test_deleting_review_cascades_to_votes(service, session, alice, bob, test_review):
    service.submit_vote(review_id=test_review["id"], current_user=alice, vote_type="upvote")
    service.submit_vote(review_id=test_review["id"], current_user=bob, vote_type="upvote")

    session.delete(session.get(Review, test_review["id"]))
    session.commit()

    assert session.scalar(select(func.count(Vote.id))) == 0


def test_deleting_restaurant_cascades_to_reviews_and_votes(
    service, session, alice, test_restaurant, test_review
):
    service.submit_vote(review_id=test_review["id"], current_user=alice, vote_type="downvote")

    session.delete(session.get(Restaurant, test_restaurant["id"]))
    session.commit()

    assert session.scalar(select(func.count(Review.id))) == 0
    assert session.scalar(select(func.count(Vote.id))) == 0


def test_vote_changes_are_logged(service, alice, test_review, caplog):
    caplog.set_level(logging.INFO, logger="app.services.votes.vote_service")
    service.submit_vote(review_id=test_review["id"], current_user=alice, vote_type="upvote")
    service.submit_vote(review_id=test_review["id"], current_user=alice, vote_type="downvote")
    service.submit_vote(review_id=test_review["id"], current_user=alice, vote_type="downvote")

    messages = [r.getMessage() for r in caplog.records if r.name.endswith("vote_service")]
    assert any(m.startswith("Vote created") for m in messages)
    assert any(m.startswith("Vote updated") for m in messages)
    assert any(m.startswith("Vote removed") for m in messages)
