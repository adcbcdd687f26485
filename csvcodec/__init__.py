"""
Configurable CSV codec.

Modules:
    models      - CsvOptions and API request/response models
    codec       - parser, field escaper and generator
    main        - FastAPI application exposing the codec
    log_config  - logging setup
"""

from .codec import (
    CsvCodec,
    CsvParseError,
    create,
    escape_field,
    generate,
    generate_records,
    parse,
)
from .models import CsvOptions

__version__ = "1.0.1"

__all__ = [
    "CsvCodec",
    "CsvOptions",
    "CsvParseError",
    "create",
    "escape_field",
    "generate",
    "generate_records",
    "parse",
]
