import logging

import requests

logger = logging.getLogger(__name__)


class ApiError(Exception):
    def __init__(self, status_code, message, details=None):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.details = details

    def __str__(self):
        return f"[{self.status_code}] {self.message}"


class ApiClient:
    """
    Thin HTTP client for the booking API.

    Unwraps the ``{"status": "success", "data": ...}`` envelope and raises
    :class:`ApiError` for every non-2xx answer. Pass ``session`` to reuse a
    connection pool or to substitute a fake in tests.
    """

    def __init__(self, base_url, session=None, token=None, timeout=10):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.token = token
        self.timeout = timeout

    def _headers(self):
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def request(self, method, endpoint, params=None, json=None):
        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        try:
            response = self.session.request(
                method,
                url,
                params=params,
                json=json,
                headers=self._headers(),
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            logger.error("%s %s failed: %s", method, url, e)
            raise ApiError(None, f"Connection error: {e}") from e

        if response.status_code == 204:
            return None

        try:
            body = response.json()
        except ValueError:
            body = None

        if not 200 <= response.status_code < 300:
            message = None
            details = None
            if isinstance(body, dict):
                message = body.get("message") or body.get("error")
                details = body.get("details")
            raise ApiError(response.status_code, message or response.reason or "Request failed", details)

        if isinstance(body, dict) and "data" in body:
            return body["data"]
        return body

    def get(self, endpoint, params=None):
        return self.request("GET", endpoint, params=params)

    def post(self, endpoint, data=None):
        return self.request("POST", endpoint, json=data or {})

    def patch(self, endpoint, data=None):
        return self.request("PATCH", endpoint, json=data or {})

    def delete(self, endpoint):
        return self.request("DELETE", endpoint)

    def login(self, email, password):
        data = self.post("/auth/login", {"email": email, "password": password})
        self.token = data["token"]
        return data["user"]

    def logout(self):
        self.token = None

    def health(self):
        return self.get("/health")
