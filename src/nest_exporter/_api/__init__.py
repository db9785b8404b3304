"""Endpoint modules for the Nest REST API."""
