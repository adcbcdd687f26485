"""
Codec defaults.

These are the values an option falls back to when the caller leaves it unset.
"""

DEFAULT_DELIMITER = ","
DEFAULT_QUOTE_CHAR = '"'
DEFAULT_LINE_END = "\n"  # use "\r\n" for Windows-style output
DEFAULT_HAS_HEADER = False
DEFAULT_STRICT = False

# The parser accepts both regardless of line_end
LINE_TERMINATORS = frozenset({"\n", "\r"})

SURPLUS_KEY_PREFIX = "f_"
