"""Debounced shipment search."""
