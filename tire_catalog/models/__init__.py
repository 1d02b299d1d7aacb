"""
Data models for the tire catalogue.

This module contains pure data classes with no business logic.
"""

from .catalog import Group, Item, RawProduct, RawVariant

__all__ = ['RawVariant', 'RawProduct', 'Item', 'Group']
