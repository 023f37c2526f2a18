"""Dependency identifier canonicalization."""

from __future__ import annotations


def normalize_dependency_id(value: str) -> str:
    """Trim surrounding whitespace and lower-case."""
    return value.strip().lower()
