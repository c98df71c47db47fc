"""State/store layer.

This package is the single source of truth for the trajectories of the
current viewing session.
"""
