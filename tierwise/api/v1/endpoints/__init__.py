"""Endpoint modules for API version 1."""
