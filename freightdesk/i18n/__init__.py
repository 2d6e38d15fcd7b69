"""UI string tables."""
