"""Core infrastructure: configuration, logging, errors and scheduling."""
