"""Settings subsystem: typed groups persisted to config.json."""
