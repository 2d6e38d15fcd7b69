"""REST access to the freight backend."""
