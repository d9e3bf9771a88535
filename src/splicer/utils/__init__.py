"""Utility modules for splicer.

Provides:
- text: gap-character predicate and control-character escaping
- logger: get_logger for logging
"""

from splicer.utils.logger import get_logger
from splicer.utils.text import GAP_CHARS, escape_control, is_gap_text

__all__ = [
    "GAP_CHARS",
    "escape_control",
    "get_logger",
    "is_gap_text",
]
