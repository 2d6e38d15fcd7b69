"""Tracked containers: models, pagination and the container store."""
