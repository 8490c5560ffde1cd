"""HTTP client for the PROVIQUIZ API.

Requests are sent once; there is no automatic retry. Failures are raised as
:class:`ApiError` carrying a message fit to show the user.
"""

from typing import Any

import httpx

from app.client.auth_storage import AuthStorage

DEFAULT_BASE_URL = "http://localhost:8000/api"
REQUEST_FAILED = "Request failed."
GENERIC_FAILURE = "Something went wrong."


class ApiError(Exception):
    def __init__(self, message: str, status_code: int | None = None, payload: Any = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload


def get_api_error_message(error: BaseException) -> str:
    """
    Turn any request failure into a user-facing message.

    Preference order: the server's ``message`` field, its ``error`` field, the
    transport error text, then a generic fallback.
    """
    if isinstance(error, ApiError):
        return error.message
    if isinstance(error, httpx.HTTPStatusError):
        try:
            data = error.response.json()
        except ValueError:
            data = None
        if isinstance(data, dict):
            for field in ("message", "error"):
                value = data.get(field)
                if isinstance(value, str) and value:
                    return value
        return str(error) or REQUEST_FAILED
    if isinstance(error, httpx.HTTPError):
        return str(error) or REQUEST_FAILED
    return str(error) or GENERIC_FAILURE


class ProviquizClient:
    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        storage: AuthStorage | None = None,
        timeout: float = 15.0,
        transport: httpx.BaseTransport | None = None,
    ):
        self.storage = storage or AuthStorage()
        self._http = httpx.Client(base_url=base_url, timeout=timeout, transport=transport)

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "ProviquizClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _request(self, method: str, path: str, **kwargs) -> Any:
        headers = kwargs.pop("headers", {})
        token = self.storage.read_token()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        try:
            response = self._http.request(method, path, headers=headers, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ApiError(get_api_error_message(e), e.response.status_code, _json_or_none(e.response)) from e
        except httpx.HTTPError as e:
            raise ApiError(get_api_error_message(e)) from e
        return response.json()

    # Auth

    def login(self, email: str, password: str, remember_me: bool = True) -> dict[str, Any]:
        data = self._request("POST", "/auth/login", json={"email": email, "password": password})
        self.storage.write_token(data["token"], remember_me)
        self.storage.write_user(data["user"])
        return data["user"]

    def register(self, email: str, password: str, name: str | None = None) -> dict[str, Any]:
        data = self._request(
            "POST", "/auth/register", json={"email": email, "password": password, "name": name}
        )
        self.storage.write_token(data["token"])
        self.storage.write_user(data["user"])
        return data["user"]

    def me(self) -> dict[str, Any]:
        return self._request("GET", "/auth/me")

    def logout(self) -> None:
        self.storage.logout()

    # Exams

    def start_exam(
        self,
        limit: int | None = None,
        range_start: int | None = None,
        range_end: int | None = None,
        image_filter: str = "all",
    ) -> dict[str, Any]:
        params: dict[str, Any] = {"imageFilter": image_filter}
        if limit is not None:
            params["limit"] = limit
        if range_start is not None:
            params["rangeStart"] = range_start
        if range_end is not None:
            params["rangeEnd"] = range_end
        return self._request("GET", "/exams/start", params=params)

    def submit_exam(self, payload: dict[str, Any]) -> dict[str, Any]:
        return self._request("POST", "/exams/submit", json=payload)

    def my_exams(self) -> list[dict[str, Any]]:
        return self._request("GET", "/exams/mine")

    def exam_stats(self) -> dict[str, Any]:
        return self._request("GET", "/exams/stats")


def _json_or_none(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None
