import pytest


def _vote(client, review_id, vote_type, headers=None):
    return client.post(
        "/api/votes",
        json={"review_id": review_id, "vote_type": vote_type},
        headers=headers,
    )


def _counts(client, review_id):
    res = client.get(f"/api/votes/review/{review_id}/counts")
    assert res.status_code == 200
    body = res.json()
    return body["upvotes"], body["downvotes"]


def test_first_vote_is_created(authorized_client, test_review, test_user):
    res = _vote(authorized_client, test_review.id, "upvote")

    assert res.status_code == 201
    body = res.json()
    assert body["outcome"] == "created"
    assert body["message"] == "Successfully added upvote"
    assert body["vote_type"] == "upvote"
    assert body["review_id"] == test_review.id
    assert body["voter_user_id"] == test_user.id
    assert isinstance(body["id"], int)


def test_full_vote_sequence_over_http(authorized_client, test_review):
    steps = [
        ("upvote", 201, "created", (1, 0)),
        ("upvote", 200, "removed", (0, 0)),
        ("downvote", 201, "created", (0, 1)),
        ("upvote", 200, "updated", (1, 0)),
    ]
    for vote_type, status_code, outcome, counts in steps:
        res = _vote(authorized_client, test_review.id, vote_type)
        assert res.status_code == status_code
        assert res.json()["outcome"] == outcome
        assert _counts(authorized_client, test_review.id) == counts


def test_toggle_off_and_switch_messages(authorized_client, test_review):
    _vote(authorized_client, test_review.id, "downvote")

    switched = _vote(authorized_client, test_review.id, "upvote")
    assert switched.json()["message"] == "Successfully changed vote to upvote"

    removed = _vote(authorized_client, test_review.id, "upvote")
    body = removed.json()
    assert body["message"] == "Successfully removed upvote"
    assert body["id"] is None
    assert body["vote_type"] is None


def test_vote_accepts_camel_case_fields(authorized_client, test_review):
    res = authorized_client.post(
        "/api/votes", json={"reviewId": test_review.id, "voteType": "downvote"}
    )
    assert res.status_code == 201
    assert res.json()["vote_type"] == "downvote"


@pytest.mark.parametrize("vote_type", ["like", "Upvote", ""])
def test_invalid_vote_type(authorized_client, test_review, vote_type):
    res = _vote(authorized_client, test_review.id, vote_type)

    assert res.status_code == 400
    body = res.json()
    assert body["success"] is False
    assert body["error"]["code"] == "invalid_argument"
    assert body["error"]["details"]["field"] == "vote_type"


def test_missing_vote_fields(authorized_client, test_review):
    res = authorized_client.post("/api/votes", json={"review_id": test_review.id})

    assert res.status_code == 400
    fields = [e["field"] for e in res.json()["error"]["details"]["errors"]]
    assert "vote_type" in fields


def test_vote_on_unknown_review(authorized_client):
    res = _vote(authorized_client, 987654, "upvote")

    assert res.status_code == 404
    assert res.json()["error"]["code"] == "resource_not_found"


def test_vote_requires_authentication(client, test_review):
    res = _vote(client, test_review.id, "upvote")

    assert res.status_code == 401
    assert res.headers["WWW-Authenticate"] == "Bearer"


def test_vote_with_bad_token(client, test_review):
    res = _vote(client, test_review.id, "upvote", headers={"Authorization": "Bearer nope"})

    assert res.status_code == 401
    assert res.json()["error"]["code"] == "invalid_token"


def test_voters_are_independent(client, test_review, auth_headers, auth_headers2):
    assert _vote(client, test_review.id, "upvote", headers=auth_headers).status_code == 201
    assert _vote(client, test_review.id, "downvote", headers=auth_headers2).status_code == 201

    res = client.get(f"/api/votes/review/{test_review.id}/counts")
    assert res.json() == {
        "review_id": test_review.id,
        "upvotes": 1,
        "downvotes": 1,
        "score": 0,
    }


def test_vote_through_review_path(authorized_client, test_review):
    url = f"/api/reviews/{test_review.id}/vote"

    created = authorized_client.post(url, json={"vote_type": "upvote"})
    assert created.status_code == 201
    assert created.json()["outcome"] == "created"

    switched = authorized_client.post(url, json={"voteType": "downvote"})
    assert switched.status_code == 200
    assert switched.json()["outcome"] == "updated"

    counts = authorized_client.get(f"/api/reviews/{test_review.id}/votes")
    assert counts.status_code == 200
    assert counts.json()["score"] == -1


def test_remove_vote_endpoint(authorized_client, test_review):
    _vote(authorized_client, test_review.id, "upvote")

    res = authorized_client.delete(f"/api/votes/review/{test_review.id}")
    assert res.status_code == 204
    assert _counts(authorized_client, test_review.id) == (0, 0)

    again = authorized_client.delete(f"/api/votes/review/{test_review.id}")
    assert again.status_code == 404
    assert again.json()["error"]["message"] == "Vote not found"


def test_user_vote_status(authorized_client, test_review):
    url = f"/api/votes/review/{test_review.id}/user"

    before = authorized_client.get(url)
    assert before.status_code == 200
    assert before.json() == {
        "review_id": test_review.id,
        "vote_type": None,
        "has_voted": False,
    }

    _vote(authorized_client, test_review.id, "downvote")
    after = authorized_client.get(url).json()
    assert after["has_voted"] is True
    assert after["vote_type"] == "downvote"


def test_list_votes_endpoints(client, test_reviews, auth_headers, auth_headers2, test_user):
    first, second, _ = test_reviews
    _vote(client, first.id, "upvote", headers=auth_headers)
    _vote(client, second.id, "downvote", headers=auth_headers)
    _vote(client, first.id, "downvote", headers=auth_headers2)

    on_first = client.get(f"/api/votes/review/{first.id}")
    assert on_first.status_code == 200
    assert [v["vote_type"] for v in on_first.json()] == ["upvote", "downvote"]

    mine = client.get("/api/votes/user", headers=auth_headers)
    assert mine.status_code == 200
    assert {v["review_id"] for v in mine.json()} == {first.id, second.id}
    assert all(v["voter_user_id"] == test_user.id for v in mine.json())


def test_counts_for_unknown_review(client):
    res = client.get("/api/votes/review/123456/counts")
    assert res.status_code == 404


def test_votes_disappear_with_review(client, test_review, auth_headers, auth_headers2):
    _vote(client, test_review.id, "upvote", headers=auth_headers)

    # test_user2 wrote the fixture review
    res = client.delete(f"/api/reviews/{test_review.id}", headers=auth_headers2)
    assert res.status_code == 204

    mine = client.get("/api/votes/user", headers=auth_headers)
    assert mine.json() == []
