"""HTTP API of the application."""
