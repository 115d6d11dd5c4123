"""Adapters implementing domain ports (account REST API, local settings)."""
