"""Small cross-layer helpers (logging setup)."""
