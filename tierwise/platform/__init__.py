"""Platform services."""
