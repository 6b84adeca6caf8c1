"""
Interactive prompts for gmana.
"""

from .select import Choice, multiselect, select

__all__ = ['Choice', 'multiselect', 'select']
