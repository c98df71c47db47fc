"""Ingestion layer.

This package contains adapters that turn raw vehicle payloads (HTTP
responses, static dataset files) into validated trajectories.
"""

__all__: list[str] = []
