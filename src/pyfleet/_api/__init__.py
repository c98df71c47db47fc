"""Endpoint modules for the external HTTP services."""
