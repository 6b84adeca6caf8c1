"""
Configuration management for gmana.

Provides persisted defaults for password generation and CLI behavior.
"""

from .manager import Config, ConfigManager, get_config_manager

__all__ = ['Config', 'ConfigManager', 'get_config_manager']
