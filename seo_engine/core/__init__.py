"""Core infrastructure: config-bound database, logging and errors."""
