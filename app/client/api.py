"""Synchronous HTTP client for the restaurant review API, built on httpx."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Union

import httpx

from .credentials import CredentialProvider

logger = logging.getLogger(__name__)

API_PREFIX = "/api"


class ApiError(Exception):
    """A non-2xx response, decoded from the server's error envelope."""

    def __init__(self, status_code: int, code: str, message: str, details=None):
        super().__init__(f"{status_code} {code}: {message}")
        self.status_code = status_code
        self.code = code
        self.message = message
        self.details = details or {}

    @classmethod
    def from_response(cls, response: httpx.Response) -> "ApiError":
        try:
            body = response.json()
        except ValueError:
            body = None
        error = body.get("error") if isinstance(body, dict) else None
        if isinstance(error, dict):
            return cls(
                response.status_code,
                error.get("code") or "http_error",
                error.get("message") or response.reason_phrase,
                error.get("details"),
            )
        return cls(
            response.status_code, "http_error", response.text or response.reason_phrase
        )


class ReviewPlatformClient:
    """Talks to the API on behalf of whoever the credential provider holds a token for.

    Pass a base URL to let the client own its `httpx.Client`, or pass an
    existing client (for example FastAPI's `TestClient`) to share it.
    """

    def __init__(
        self,
        base_url_or_client: Union[str, httpx.Client],
        credentials: Optional[CredentialProvider] = None,
        *,
        timeout: float = 10.0,
    ):
        if isinstance(base_url_or_client, httpx.Client):
            self._http = base_url_or_client
            self._owns_http = False
        else:
            self._http = httpx.Client(base_url=base_url_or_client, timeout=timeout)
            self._owns_http = True
        self.credentials = credentials or CredentialProvider()

    # ----- Plumbing -----
    def close(self) -> None:
        if self._owns_http:
            self._http.close()

    def __enter__(self) -> "ReviewPlatformClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _request(self, method: str, path: str, **kwargs) -> Any:
        headers = {**self.credentials.auth_headers(), **kwargs.pop("headers", {})}
        response = self._http.request(
            method, f"{API_PREFIX}{path}", headers=headers, **kwargs
        )
        if response.status_code == 401 and self.credentials.is_authenticated:
            # An expired or revoked token is useless; drop it.
            logger.info("Discarding rejected credentials")
            self.credentials.clear()
        if response.is_error:
            raise ApiError.from_response(response)
        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    # ----- Auth -----
    def register(self, username: str, email: str, password: str) -> Dict[str, Any]:
        return self._request(
            "POST",
            "/auth/register",
            json={"username": username, "email": email, "password": password},
        )

    def login(self, username: str, password: str) -> Dict[str, Any]:
        token = self._request(
            "POST", "/auth/login", json={"username": username, "password": password}
        )
        self.credentials.save(token["access_token"])
        return token

    def logout(self) -> None:
        self.credentials.clear()

    def me(self) -> Dict[str, Any]:
        return self._request("GET", "/auth/me")

    # ----- Restaurants -----
    def list_restaurants(
        self, *, name: Optional[str] = None, skip: int = 0, limit: int = 100
    ) -> Dict[str, Any]:
        params: Dict[str, Any] = {"skip": skip, "limit": limit}
        if name:
            params["name"] = name
        return self._request("GET", "/restaurants", params=params)

    def search_restaurants(self, query: str):
        return self._request("GET", "/restaurants/search", params={"q": query})

    def get_restaurant(self, restaurant_id: int) -> Dict[str, Any]:
        return self._request("GET", f"/restaurants/{restaurant_id}")

    def create_restaurant(
        self,
        *,
        name: str,
        description: str,
        latitude: float,
        longitude: float,
        image: bytes,
        filename: str = "image.jpg",
        content_type: str = "image/jpeg",
    ) -> Dict[str, Any]:
        return self._request(
            "POST",
            "/restaurants",
            data={
                "name": name,
                "description": description,
                "latitude": str(latitude),
                "longitude": str(longitude),
            },
            files={"image": (filename, image, content_type)},
        )

    def delete_restaurant(self, restaurant_id: int) -> None:
        self._request("DELETE", f"/restaurants/{restaurant_id}")

    # ----- Reviews -----
    def create_review(
        self, restaurant_id: int, content: str, rating: int
    ) -> Dict[str, Any]:
        return self._request(
            "POST",
            "/reviews",
            json={"restaurant_id": restaurant_id, "content": content, "rating": rating},
        )

    def list_reviews(
        self,
        restaurant_id: int,
        *,
        page: int = 1,
        limit: int = 10,
        sort_by: str = "votes",
    ) -> Dict[str, Any]:
        return self._request(
            "GET",
            f"/reviews/restaurant/{restaurant_id}",
            params={"page": page, "limit": limit, "sort_by": sort_by},
        )

    def delete_review(self, review_id: int) -> None:
        self._request("DELETE", f"/reviews/{review_id}")

    # ----- Votes -----
    def vote(self, review_id: int, vote_type: str) -> Dict[str, Any]:
        return self._request(
            "POST", "/votes", json={"review_id": review_id, "vote_type": vote_type}
        )

    def remove_vote(self, review_id: int) -> None:
        self._request("DELETE", f"/votes/review/{review_id}")

    def get_vote_counts(self, review_id: int) -> Dict[str, Any]:
        return self._request("GET", f"/votes/review/{review_id}/counts")

    def get_my_vote(self, review_id: int) -> Dict[str, Any]:
        return self._request("GET", f"/votes/review/{review_id}/user")


__all__ = ["ApiError", "ReviewPlatformClient", "API_PREFIX"]
