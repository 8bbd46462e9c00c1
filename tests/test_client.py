import json

import httpx
import pytest

from app.client import (
    ApiError,
    CredentialProvider,
    FileTokenStore,
    MemoryTokenStore,
    ReviewPlatformClient,
)


@pytest.fixture
def api(client):
    return ReviewPlatformClient(client)


def test_memory_token_store():
    store = MemoryTokenStore()
    assert store.get() is None

    store.set("abc")
    assert store.get() == "abc"

    store.clear()
    assert store.get() is None


def test_file_token_store(tmp_path):
    path = tmp_path / "session" / "token.json"
    store = FileTokenStore(path)
    assert store.get() is None

    store.set("abc")
    assert json.loads(path.read_text()) == {"access_token": "abc"}
    assert FileTokenStore(path).get() == "abc"

    store.clear()
    assert not path.exists()
    store.clear()


def test_file_token_store_ignores_garbage(tmp_path):
    path = tmp_path / "token.json"
    path.write_text("{not json")

    assert FileTokenStore(path).get() is None


def test_credential_provider_headers():
    credentials = CredentialProvider()
    assert credentials.auth_headers() == {}
    assert credentials.is_authenticated is False

    credentials.save("tok")
    assert credentials.auth_headers() == {"Authorization": "Bearer tok"}
    assert credentials.is_authenticated is True


def test_api_error_from_envelope():
    response = httpx.Response(
        404,
        json={
            "success": False,
            "error": {"code": "resource_not_found", "message": "Review not found", "details": {}},
        },
    )

    error = ApiError.from_response(response)

    assert error.status_code == 404
    assert error.code == "resource_not_found"
    assert error.message == "Review not found"


def test_api_error_from_plain_response():
    error = ApiError.from_response(httpx.Response(502, text="Bad Gateway"))

    assert error.code == "http_error"
    assert error.message == "Bad Gateway"


def test_client_login_and_vote_flow(api, test_user, test_review):
    token = api.login(test_user.username, test_user.password)
    assert token["user_id"] == test_user.id
    assert api.credentials.token == token["access_token"]
    assert api.me()["username"] == test_user.username

    created = api.vote(test_review.id, "upvote")
    assert created["outcome"] == "created"
    assert api.get_my_vote(test_review.id)["vote_type"] == "upvote"

    switched = api.vote(test_review.id, "downvote")
    assert switched["outcome"] == "updated"
    assert api.get_vote_counts(test_review.id)["score"] == -1

    assert api.remove_vote(test_review.id) is None
    assert api.get_my_vote(test_review.id)["has_voted"] is False


def test_client_restaurant_and_review_flow(api):
    api.register("carla", "carla@example.com", "secret123")
    api.login("carla", "secret123")

    restaurant = api.create_restaurant(
        name="Client Bistro",
        description="Made through the client",
        latitude=48.85,
        longitude=2.35,
        image=b"\xff\xd8\xff" + b"\x00" * 16,
    )
    assert api.search_restaurants("bistro")[0]["id"] == restaurant["id"]
    assert api.list_restaurants(name="Client Bistro")["total"] == 1

    review = api.create_review(restaurant["id"], "Solid", 4)
    listing = api.list_reviews(restaurant["id"], sort_by="date")
    assert [r["id"] for r in listing["reviews"]] == [review["id"]]

    api.delete_review(review["id"])
    api.delete_restaurant(restaurant["id"])
    with pytest.raises(ApiError) as exc:
        api.get_restaurant(restaurant["id"])
    assert exc.value.status_code == 404


def test_client_raises_api_error(api, test_user, test_review):
    api.login(test_user.username, test_user.password)

    with pytest.raises(ApiError) as exc:
        api.vote(test_review.id, "sideways")

    assert exc.value.status_code == 400
    assert exc.value.code == "invalid_argument"
    assert exc.value.details["field"] == "vote_type"


def test_client_drops_rejected_token(client):
    credentials = CredentialProvider(MemoryTokenStore("stale-token"))
    api = ReviewPlatformClient(client, credentials)

    with pytest.raises(ApiError) as exc:
        api.me()

    assert exc.value.status_code == 401
    assert credentials.is_authenticated is False


def test_client_logout(api, test_user):
    api.login(test_user.username, test_user.password)
    api.logout()

    with pytest.raises(ApiError) as exc:
        api.me()
    assert exc.value.status_code == 401
