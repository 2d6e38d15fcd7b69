"""PySide6 desktop shell."""
