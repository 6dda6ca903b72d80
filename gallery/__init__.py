"""
Presentation helpers for gallery entries.
"""

from .cards import Card, CardLayout, build_card, format_card

__all__ = ['Card', 'CardLayout', 'build_card', 'format_card']
