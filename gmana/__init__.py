"""
gmana - a password generator CLI.
"""

__version__ = "1.0.0"
