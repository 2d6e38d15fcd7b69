"""Base error of the application."""

from __future__ import annotations


class FreightDeskError(Exception):
    """Base class of FreightDesk domain errors."""
