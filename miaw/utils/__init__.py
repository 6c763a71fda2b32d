"""Utility helpers."""

from miaw.utils.ids import IdFactory, generate_id

__all__ = ["IdFactory", "generate_id"]
