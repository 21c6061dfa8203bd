# fintrack/frontend/api_client.py
import os
from typing import Any, Dict, List, Optional

import requests

API_BASE = os.environ.get("FINTRACK_API_URL", "http://localhost:5000")


class ApiClientError(Exception):
    """A failed API call. ``status`` is None when the server was unreachable."""

    def __init__(self, status: Optional[int], message: str):
        super().__init__(message)
        self.status = status
        self.message = message

    @property
    def is_auth_error(self) -> bool:
        return self.status == 401


class ClientSession:
    """Who is logged in on this browser tab: the bearer token and the user record."""

    def __init__(self, token: Optional[str] = None, user: Optional[Dict[str, Any]] = None):
        self.token = token
        self.user = user

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    @property
    def display_name(self) -> str:
        if not self.user:
            return ""
        return self.user.get("name") or self.user.get("email", "")

    def clear(self):
        self.token = None
        self.user = None


def safe_json(resp):
    try:
        return resp.json()
    except ValueError:
        return None


class ApiClient:
    def __init__(self, session: ClientSession, base_url: str = API_BASE, timeout: float = 10):
        self.session = session
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _headers(self) -> Dict[str, str]:
        headers = {}
        if self.session.token:
            headers["Authorization"] = f"Bearer {self.session.token}"
        return headers

    def request(self, method: str, path: str, json=None, params=None):
        url = self.base_url + path
        try:
            response = requests.request(
                method.upper(), url,
                headers=self._headers(), json=json, params=params, timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise ApiClientError(None, f"Connection failed: {e}") from e

        if not 200 <= response.status_code < 300:
            payload = safe_json(response) or {}
            message = payload.get("message") if isinstance(payload, dict) else None
            raise ApiClientError(response.status_code, message or f"Request failed ({response.status_code})")
        return response

    def _json(self, method, path, json=None, params=None):
        return safe_json(self.request(method, path, json=json, params=params))

    # ---------------- Auth ----------------
    def register(self, name: str, email: str, password: str) -> Dict[str, Any]:
        return self._json("POST", "/api/auth/register", json={"name": name, "email": email, "password": password})

    def login(self, email: str, password: str) -> Dict[str, Any]:
        payload = self._json("POST", "/api/auth/login", json={"email": email, "password": password}) or {}
        token = payload.pop("token", None)
        if not token:
            raise ApiClientError(None, "Login response did not contain a token")
        self.session.token = token
        self.session.user = payload
        return payload

    def logout(self):
        self.session.clear()

    def profile(self) -> Dict[str, Any]:
        user = self._json("GET", "/api/auth/profile")
        self.session.user = user
        return user

    # ---------------- Transactions ----------------
    def list_transactions(self, **filters) -> List[Dict[str, Any]]:
        params = {k: v for k, v in filters.items() if v not in (None, "")}
        return self._json("GET", "/api/transactions", params=params) or []

    def add_transaction(self, type: str, category: str, amount: float,
                        description: Optional[str] = None, date: Optional[str] = None) -> Dict[str, Any]:
        body: Dict[str, Any] = {"type": type, "category": category, "amount": amount}
        if description:
            body["description"] = description
        if date:
            body["date"] = date
        return self._json("POST", "/api/transactions", json=body)

    def delete_transaction(self, tx_id) -> Dict[str, Any]:
        return self._json("DELETE", f"/api/transactions/{tx_id}")

    def stats(self, month: Optional[int] = None, year: Optional[int] = None) -> Dict[str, Any]:
        params = {"month": month, "year": year} if month and year else None
        return self._json("GET", "/api/transactions/stats", params=params)

    def monthly_stats(self) -> List[Dict[str, Any]]:
        return self._json("GET", "/api/transactions/stats/monthly") or []

    # ---------------- Categories ----------------
    def list_categories(self) -> List[Dict[str, Any]]:
        return self._json("GET", "/api/categories") or []

    def add_category(self, name: str, type: str) -> Dict[str, Any]:
        return self._json("POST", "/api/categories", json={"name": name, "type": type})

    def delete_category(self, category_id) -> Dict[str, Any]:
        return self._json("DELETE", f"/api/categories/{category_id}")
