"""HTTP client for the DevTrack REST API."""

import logging

import httpx

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "http://localhost:5000"


class ApiError(Exception):
    """Non-2xx answer from the API."""

    def __init__(self, status_code: int, message: str):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message

    @property
    def is_auth_error(self) -> bool:
        return self.status_code == 401


class DevTrackClient:
    def __init__(
        self,
        base_url: str = DEFAULT_API_URL,
        token: str | None = None,
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ):
        self.token = token
        self._http = httpx.Client(base_url=base_url, timeout=timeout, transport=transport)

    def close(self) -> None:
        self._http.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def _request(self, method: str, path: str, **kwargs):
        headers = kwargs.pop("headers", {})
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"

        response = self._http.request(method, path, headers=headers, **kwargs)
        if response.is_error:
            raise ApiError(response.status_code, _error_message(response))
        if not response.content:
            return None
        if response.headers.get("content-type", "").startswith("application/json"):
            return response.json()
        return response.content

    # ── Auth ─────────────────────────────────────────────
    def signup(self, name: str, email: str, password: str) -> dict:
        data = self._request("POST", "/api/auth/signup", json={"name": name, "email": email, "password": password})
        self.token = data["token"]
        return data

    def login(self, email: str, password: str) -> dict:
        data = self._request("POST", "/api/auth/login", json={"email": email, "password": password})
        self.token = data["token"]
        return data

    def me(self) -> dict:
        return self._request("GET", "/api/users/me")

    def update_me(self, name: str) -> dict:
        return self._request("PATCH", "/api/users/me", json={"name": name})

    # ── Tasks ────────────────────────────────────────────
    def list_tasks(self, status: str | None = None, priority: str | None = None) -> list[dict]:
        params = {k: v for k, v in {"status": status, "priority": priority}.items() if v}
        return self._request("GET", "/api/tasks", params=params)

    def create_task(self, title: str, **fields) -> dict:
        return self._request("POST", "/api/tasks", json={"title": title, **fields})

    def update_task(self, task_id: str, **fields) -> dict:
        return self._request("PATCH", f"/api/tasks/{task_id}", json=fields)

    def delete_task(self, task_id: str) -> dict:
        return self._request("DELETE", f"/api/tasks/{task_id}")

    # ── Analytics ────────────────────────────────────────
    def summary(self) -> dict:
        return self._request("GET", "/api/analytics/summary")

    def csv_report(self) -> str:
        body = self._request("GET", "/api/analytics/reports/csv")
        return body.decode("utf-8") if isinstance(body, bytes) else (body or "")


def _error_message(response: httpx.Response) -> str:
    if response.status_code == 404:
        return "Not found"
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict):
        return str(body.get("error") or body.get("detail") or body)
    return str(body)
