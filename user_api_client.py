"""User API client.

This module defines a simple client wrapper around the REST API served
by ``user_api.app.main``.  It uses the ``requests`` library internally
to make HTTP calls and exposes one method per endpoint:

* :meth:`get_user` – fetch a single user by its identifier.
* :meth:`list_users` – fetch a page of users and the total count.
* :meth:`create_user` – create a new user.
* :meth:`update_user` – change a user's name and/or email.
* :meth:`delete_user` – delete a user.

Every method returns a tuple ``(data, error)``.  On success ``error`` is
``None``; on failure ``data`` is empty and ``error`` is a dictionary
with the keys ``status_code``, ``message`` and ``code`` taken from the
API's error body where available.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

import requests


logger = logging.getLogger(__name__)

ApiError = Dict[str, Any]


class UserAPIClient:
    """Client for the ``/api/v1/users`` endpoints."""

    def __init__(
        self,
        *,
        base_url: str,
        session: Optional[requests.Session] = None,
        timeout: float = 15,
        api_prefix: str = "/api/v1",
    ) -> None:
        """Initialise the API client.

        Args:
            base_url: Base URL of the server, e.g. ``http://localhost:8000``.
            session: Optional requests session.  If not supplied a
                session will be created automatically.
            timeout: Timeout in seconds applied to every request.
            api_prefix: Path prefix of the versioned API.
        """
        self.base_url = base_url.rstrip("/") + api_prefix
        self.session = session or requests.Session()
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Low level HTTP helpers
    # ------------------------------------------------------------------
    def _request(
        self, method: str, path: str, *, params: Dict[str, Any] | None = None,
        json_body: Any | None = None
    ) -> Tuple[Optional[Any], Optional[ApiError]]:
        """Perform an HTTP request to the API.

        Returns:
            A tuple ``(data, error)``. ``data`` contains the parsed JSON
            response on success (``None`` for empty bodies) and ``error``
            is ``None``.  On failure ``data`` is ``None``.
        """
        url = f"{self.base_url}{path}"
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                params=params,
                json=json_body,
                timeout=self.timeout,
            )
            response.raise_for_status()
            if response.content:
                return response.json(), None
            return None, None
        except requests.HTTPError as exc:
            return None, self._error_from_response(exc)
        except requests.RequestException as exc:
            logger.error("API request failed: %s", exc)
            return None, {"status_code": None, "message": str(exc), "code": None}

    @staticmethod
    def _error_from_response(exc: requests.HTTPError) -> ApiError:
        response = exc.response
        status = response.status_code if response is not None else None
        message = ""
        code = None
        if response is not None:
            try:
                err_json = response.json()
            except ValueError:
                message = response.text
            else:
                if isinstance(err_json, dict):
                    message = err_json.get("message") or str(err_json.get("detail") or "")
                    code = err_json.get("code")
        if not message:
            message = str(exc)
        logger.error("API request failed (%s): %s", status, message)
        return {"status_code": status, "message": message, "code": code}

    # ------------------------------------------------------------------
    # User operations
    # ------------------------------------------------------------------
    def get_user(self, user_id: int) -> Tuple[Optional[Dict[str, Any]], Optional[ApiError]]:
        return self._request("GET", f"/users/{user_id}")

    def list_users(
        self, limit: Optional[int] = None, offset: Optional[int] = None
    ) -> Tuple[Dict[str, Any], Optional[ApiError]]:
        """Retrieve a page of users.

        ``limit`` and ``offset`` are only sent when given, so the server
        applies its own defaults otherwise.

        Returns:
            A tuple ``(page, error)`` where ``page`` has the keys
            ``users``, ``total``, ``limit`` and ``offset``.
        """
        params = {}
        if limit is not None:
            params["limit"] = limit
        if offset is not None:
            params["offset"] = offset
        data, error = self._request("GET", "/users", params=params or None)
        if error:
            return {"users": [], "total": 0, "limit": limit, "offset": offset}, error
        return data, None

    def create_user(self, name: str, email: str) -> Tuple[Optional[Dict[str, Any]], Optional[ApiError]]:
        return self._request("POST", "/users", json_body={"name": name, "email": email})

    def update_user(
        self, user_id: int, *, name: Optional[str] = None, email: Optional[str] = None
    ) -> Tuple[Optional[Dict[str, Any]], Optional[ApiError]]:
        """Update a user.  Only the fields that are given are sent."""
        payload: Dict[str, str] = {}
        if name is not None:
            payload["name"] = name
        if email is not None:
            payload["email"] = email
        return self._request("PUT", f"/users/{user_id}", json_body=payload)

    def delete_user(self, user_id: int) -> Tuple[bool, Optional[ApiError]]:
        _, error = self._request("DELETE", f"/users/{user_id}")
        if error:
            return False, error
        return True, None


__all__: List[str] = ["UserAPIClient"]
