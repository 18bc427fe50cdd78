"""Callsign normalization.

Callsigns are case-insensitive identities; every lookup and write goes
through normalize_callsign() first.
"""

from __future__ import annotations


def normalize_callsign(callsign: str) -> str:
    """Normalize a callsign to uppercase for case-insensitive identity."""
    return callsign.upper()


def same_callsign(a: str, b: str) -> bool:
    """Compare two callsigns case-insensitively."""
    return normalize_callsign(a) == normalize_callsign(b)
