"""Exceptions raised by the API layer."""

from __future__ import annotations

from typing import Optional

from freightdesk.exceptions import FreightDeskError


class FreightAPIError(FreightDeskError):
    """A remote call failed: transport error, non-2xx status or malformed payload."""

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        self.status_code = status_code
        super().__init__(message)
