"""FreightDesk: desktop desk for tracked cargo containers."""

__version__ = "0.3.0"
