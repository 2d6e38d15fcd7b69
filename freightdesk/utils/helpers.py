"""Small formatting helpers shared by the API layer and the UI."""

from __future__ import annotations

from typing import Any

_HTTP_SCHEMES = ("http://", "https://")


def join_api_url(base_url: str, api_code: str, endpoint: str) -> str:
    """Builds ``base_url + api_code + endpoint`` with a single slash between parts.

    The API group code is appended to the base URL verbatim, so both
    ``https://host/api:`` + ``abc`` and ``https://host/`` + ``api:abc`` work.
    """

    base = base_url.strip()
    if base and not base.lower().startswith(_HTTP_SCHEMES):
        base = f"https://{base}"
    prefix = f"{base}{api_code.strip()}".rstrip("/")
    path = endpoint.strip()
    if not path:
        return prefix
    return f"{prefix}/{path.lstrip('/')}"


def display_value(value: Any, placeholder: str = "-") -> str:
    """Renders empty values as a placeholder."""

    if value is None:
        return placeholder
    text = str(value).strip()
    return text or placeholder
