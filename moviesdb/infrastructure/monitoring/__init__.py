"""Logging setup and the logging observer for API call events."""
