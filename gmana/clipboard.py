"""
Clipboard access for gmana.
"""

import logging
import pyperclip

logger = logging.getLogger(__name__)


def copy_to_clipboard(text: str) -> bool:
    """
    Copy text to the system clipboard.

    Args:
        text: Text to copy

    Returns:
        True if copied, False if no clipboard backend is usable
    """
    try:
        pyperclip.copy(text)
        logger.debug("Copied %d characters to clipboard", len(text))
        return True
    except pyperclip.PyperclipException as e:
        logger.warning(f"Could not copy to clipboard: {e}")
        return False
