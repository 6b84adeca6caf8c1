"""
Password history for gmana.

Provides a bounded, newest-first log of generated passwords.
"""

from .manager import HistoryEntry, HistoryManager, get_history_manager

__all__ = ['HistoryEntry', 'HistoryManager', 'get_history_manager']
