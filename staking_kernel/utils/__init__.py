"""Utility helpers (hashing)."""
