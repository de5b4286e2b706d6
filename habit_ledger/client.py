"""Habit Ledger API client.

This module defines a thin client around the Habit Ledger REST API
using the ``requests`` library.  It is what the command line front end
and the :class:`~habit_ledger.range_fetcher.RangeFetcher` talk to.

Every high-level method returns a tuple ``(result, error)``.  On
success ``error`` is ``None``; on failure ``result`` is an empty value
and ``error`` is a dictionary with the keys ``status_code`` (``None``
for connection problems) and ``message``.

Authentication uses a bearer token.  Pass ``api_key`` when a token is
already known (see ``create_token.py``) or call :meth:`login` with the
owner's credentials; the token is then kept for subsequent calls.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

import requests
from requests.adapters import DEFAULT_POOLSIZE, HTTPAdapter


logger = logging.getLogger(__name__)

ApiError = Dict[str, Any]


class HabitLedgerAPIError(Exception):
    """Raised by :meth:`HabitLedgerAPI.raise_for_error` for a failed call."""

    def __init__(self, error: ApiError) -> None:
        super().__init__(error.get("message") or "request failed")
        self.status_code = error.get("status_code")
        self.message = error.get("message")


class HabitLedgerAPI:
    """Client for interacting with the Habit Ledger API."""

    def __init__(
        self,
        *,
        base_url: str,
        api_key: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: float = 15,
    ) -> None:
        """Initialise the API client.

        Args:
            base_url: Base URL including the version prefix, e.g.
                ``http://localhost:8000/api/v1``.
            api_key: Optional bearer token sent with every request.
            session: Optional requests session.  If not supplied a
                session will be created automatically.
            timeout: Per-request timeout in seconds.
        """
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.session = session or requests.Session()
        self.timeout = timeout

    def widen_pool(self, size: int) -> None:
        """Let up to ``size`` threads share the session without dropping connections.

        Only applies to a real :class:`requests.Session`; the default
        adapter keeps ``DEFAULT_POOLSIZE`` connections per host.
        """
        if size <= DEFAULT_POOLSIZE or not isinstance(self.session, requests.Session):
            return
        adapter = HTTPAdapter(pool_maxsize=size)
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)

    # ------------------------------------------------------------------
    # Low level HTTP helpers
    # ------------------------------------------------------------------
    def _request(
        self, method: str, path: str, *, params: Dict[str, Any] | None = None,
        json_body: Any | None = None
    ) -> Tuple[Optional[Any], Optional[ApiError]]:
        """Perform an HTTP request to the API.

        Args:
            method: HTTP method (``GET``, ``POST``, ``DELETE``).
            path: Path relative to :attr:`base_url` (e.g. ``/habits``).
            params: Query parameters to include in the request.
            json_body: JSON body to send with the request.
        Returns:
            A tuple ``(data, error)``.  ``data`` is the parsed JSON body
            (``None`` for empty responses).
        """
        url = f"{self.base_url}{path}"
        headers: Dict[str, str] = {}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                params=params,
                json=json_body,
                headers=headers,
                timeout=self.timeout,
            )
            response.raise_for_status()
            if response.content:
                return response.json(), None
            return None, None
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            message = ""
            if exc.response is not None:
                try:
                    body = exc.response.json()
                    message = body.get("detail") if isinstance(body, dict) else body
                except ValueError:
                    message = exc.response.text
            if not message:
                message = str(exc)
            logger.error("API request failed (%s): %s", status, message)
            return None, {"status_code": status, "message": str(message)}
        except requests.RequestException as exc:
            logger.error("API request failed: %s", exc)
            return None, {"status_code": None, "message": str(exc)}

    @staticmethod
    def raise_for_error(error: Optional[ApiError]) -> None:
        """Raise :class:`HabitLedgerAPIError` if ``error`` is set."""
        if error is not None:
            raise HabitLedgerAPIError(error)

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------
    def login(self, username: str, password: str) -> Tuple[Optional[str], Optional[ApiError]]:
        """Log in as the owner and remember the returned token."""
        data, error = self._request(
            "POST", "/auth/login", json_body={"username": username, "password": password}
        )
        if error:
            return None, error
        token = (data or {}).get("access_token")
        if not token:
            return None, {"status_code": None, "message": "Login response carried no token"}
        self.api_key = token
        return token, None

    # ------------------------------------------------------------------
    # Habit operations
    # ------------------------------------------------------------------
    def list_habits(self, date: str) -> Tuple[List[Dict[str, Any]], Optional[ApiError]]:
        """Return the records stored for ``date``."""
        data, error = self._request("GET", f"/habits/{date}")
        if error:
            return [], error
        return data if isinstance(data, list) else [], None

    def list_habits_range(self, start: str, end: str) -> Tuple[List[Dict[str, Any]], Optional[ApiError]]:
        """Return every record from ``start`` to ``end`` with a single request."""
        data, error = self._request("GET", "/habits", params={"start": start, "end": end})
        if error:
            return [], error
        return data if isinstance(data, list) else [], None

    def create_habit(
        self,
        date: str,
        name: str,
        note: Optional[str] = None,
        completed: bool = True,
    ) -> Tuple[Optional[str], Optional[ApiError]]:
        """Record a habit completion and return the new id."""
        payload: Dict[str, Any] = {"date": date, "name": name, "completed": completed}
        if note is not None:
            payload["note"] = note
        data, error = self._request("POST", "/habits", json_body=payload)
        if error:
            return None, error
        return (data or {}).get("id"), None

    def delete_habit(self, habit_id: str) -> Tuple[bool, Optional[ApiError]]:
        """Delete a record by id.  A 404 error means it was already gone."""
        _, error = self._request("DELETE", f"/habits/{habit_id}")
        if error:
            return False, error
        return True, None

    # ------------------------------------------------------------------
    # Derived views
    # ------------------------------------------------------------------
    def get_trends(self) -> Tuple[List[Dict[str, Any]], Optional[ApiError]]:
        """Return ``[{date, count}]`` most recent first."""
        data, error = self._request("GET", "/trends")
        if error:
            return [], error
        return data if isinstance(data, list) else [], None

    def get_suggestions(self) -> Tuple[List[Dict[str, Any]], Optional[ApiError]]:
        """Return ``[{name, note}]`` sorted by name."""
        data, error = self._request("GET", "/habits/suggestions")
        if error:
            return [], error
        return data if isinstance(data, list) else [], None
