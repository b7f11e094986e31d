"""Utility helpers: random generator construction."""

from infrastructure.utils.seeding import make_rng

__all__ = [
    "make_rng",
]
