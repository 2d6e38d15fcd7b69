"""Push-style container updates."""
