"""requests-based client for the freight REST backend."""

from __future__ import annotations

import logging
import os
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

import requests

from freightdesk.api.exceptions import FreightAPIError
from freightdesk.settings.registry import SettingsRegistry
from freightdesk.utils.helpers import join_api_url

LOGGER = logging.getLogger(__name__)

TokenProvider = Callable[[], str]

DEFAULT_TIMEOUT_SEC = 15


class ApiClient:
    """Sends JSON requests to ``base_url + api_code + endpoint`` with a bearer token.

    The token is requested from ``token_provider`` on every call so a token
    refreshed elsewhere is picked up without rebuilding the client.
    """

    def __init__(
        self,
        base_url: str,
        *,
        token_provider: TokenProvider | None = None,
        timeout: float = DEFAULT_TIMEOUT_SEC,
        session: Any | None = None,
    ) -> None:
        self.base_url = base_url
        self.timeout = timeout
        self._token_provider = token_provider or (lambda: "")
        self._session = session or requests.Session()

    def get(self, endpoint: str, api_code: str) -> Any:
        return self._request("GET", join_api_url(self.base_url, api_code, endpoint))

    def post(self, endpoint: str, payload: Any, api_code: str) -> Any:
        return self._request(
            "POST", join_api_url(self.base_url, api_code, endpoint), payload=payload
        )

    def post_external(
        self,
        url: str,
        payload: Any,
        *,
        headers: Optional[Mapping[str, str]] = None,
        auth: Optional[Tuple[str, str]] = None,
    ) -> Any:
        """POSTs to a third-party URL with caller-supplied credentials only."""

        return self._request(
            "POST",
            url,
            payload=payload,
            headers=dict(headers or {}),
            auth=auth,
            with_token=False,
        )

    def close(self) -> None:
        self._session.close()

    # ----------------------------------------------------------------- helpers
    def _headers(self, with_token: bool) -> Dict[str, str]:
        headers = {
            "Accept": "application/json",
            "Content-Type": "application/json",
        }
        if with_token:
            headers["Authorization"] = f"Bearer {self._token_provider()}"
        return headers

    def _request(
        self,
        method: str,
        url: str,
        *,
        payload: Any = None,
        headers: Optional[Dict[str, str]] = None,
        auth: Optional[Tuple[str, str]] = None,
        with_token: bool = True,
    ) -> Any:
        request_headers = self._headers(with_token)
        request_headers.update(headers or {})
        try:
            response = self._session.request(
                method,
                url,
                headers=request_headers,
                json=payload,
                auth=auth,
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            LOGGER.error("%s %s failed with status %s: %s", method, url, status, exc)
            raise FreightAPIError(str(exc), status_code=status) from exc
        except requests.RequestException as exc:
            LOGGER.error("%s %s failed: %s", method, url, exc)
            raise FreightAPIError(str(exc)) from exc

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            LOGGER.error("%s %s returned invalid JSON: %s", method, url, exc)
            raise FreightAPIError(
                f"Invalid JSON in response from {url}", status_code=response.status_code
            ) from exc


def create_api_client(settings: SettingsRegistry, session: Any | None = None) -> ApiClient:
    """Builds the client from the ``api`` settings group."""

    token_env = settings.get_value("api", "token_env", default="FREIGHTDESK_API_TOKEN")
    return ApiClient(
        settings.get_value("api", "base_url"),
        token_provider=lambda: os.environ.get(token_env, ""),
        timeout=int(settings.get_value("api", "timeout_sec", default=DEFAULT_TIMEOUT_SEC)),
        session=session,
    )
