# sweetshop/client/api.py
"""
HTTP wrapper around the Sweet Shop API.

Holds the bearer token, attaches it to protected calls and turns error
responses into exceptions:

  - 401 -> the stored token is cleared and NotAuthenticated is raised
           (callers should send the user back to login)
  - any other non-2xx -> ApiError with the server's `detail` message

The transport is anything with a requests-style
`request(method, url, json=..., params=..., headers=...)`; a
requests.Session by default, FastAPI's TestClient in tests.
"""
import requests

DEFAULT_BASE_URL = "http://localhost:8000/api"


class ApiError(Exception):
    def __init__(self, message: str, status: int):
        super().__init__(message)
        self.message = message
        self.status = status


class NotAuthenticated(ApiError):
    def __init__(self):
        super().__init__("Unauthorized", 401)


def _error_message(response) -> str:
    try:
        data = response.json()
    except ValueError:
        data = None
    detail = data.get("detail") if isinstance(data, dict) else None
    if isinstance(detail, str) and detail:
        return detail
    if detail:
        return "Invalid request"
    return "Request failed"


class SweetShopApi:
    def __init__(self, base_url: str = DEFAULT_BASE_URL, http=None):
        self.base_url = base_url.rstrip("/")
        self.http = http or requests.Session()
        self.token: str | None = None

    # ----- Plumbing -----

    def _request(self, method: str, endpoint: str, requires_auth: bool = True, **kwargs):
        headers = {"Content-Type": "application/json"}
        if requires_auth and self.token:
            headers["Authorization"] = f"Bearer {self.token}"

        response = self.http.request(
            method, f"{self.base_url}{endpoint}", headers=headers, **kwargs
        )

        if response.status_code == 401:
            self.token = None
            raise NotAuthenticated()

        if not 200 <= response.status_code < 300:
            raise ApiError(_error_message(response), response.status_code)

        if not response.content:
            return None
        return response.json()

    # ----- Auth -----

    def register(self, name: str, email: str, password: str) -> dict:
        return self._request(
            "POST",
            "/auth/register",
            requires_auth=False,
            json={"name": name, "email": email, "password": password},
        )

    def login(self, email: str, password: str) -> str:
        data = self._request(
            "POST",
            "/auth/login",
            requires_auth=False,
            json={"email": email, "password": password},
        )
        self.token = data["token"]
        return self.token

    def logout(self) -> None:
        self.token = None

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None

    def me(self) -> dict:
        return self._request("GET", "/auth/me")

    # ----- Sweets -----

    def list_sweets(self) -> list[dict]:
        return self._request("GET", "/sweets")

    def search_sweets(
        self,
        name: str | None = None,
        category: str | None = None,
        min_price: float | None = None,
        max_price: float | None = None,
    ) -> list[dict]:
        params = {}
        if name:
            params["name"] = name
        if category:
            params["category"] = category
        if min_price is not None:
            params["minPrice"] = min_price
        if max_price is not None:
            params["maxPrice"] = max_price
        return self._request("GET", "/sweets/search", params=params)

    def create_sweet(self, sweet: dict) -> dict:
        return self._request("POST", "/sweets", json=sweet)

    def update_sweet(self, sweet_id: str, changes: dict) -> dict:
        return self._request("PUT", f"/sweets/{sweet_id}", json=changes)

    def delete_sweet(self, sweet_id: str) -> None:
        self._request("DELETE", f"/sweets/{sweet_id}")

    def purchase_sweet(self, sweet_id: str) -> dict:
        return self._request("POST", f"/sweets/{sweet_id}/purchase")

    def restock_sweet(self, sweet_id: str, amount: int = 1) -> dict:
        return self._request("POST", f"/sweets/{sweet_id}/restock", json={"amount": amount})
