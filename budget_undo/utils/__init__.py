"""Utility modules"""
from budget_undo.utils.currency import to_unit, to_milliunits

__all__ = [
    "to_unit",
    "to_milliunits",
]
