"""Application-facing helpers (headless)."""
