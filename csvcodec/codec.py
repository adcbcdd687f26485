"""
Core CSV conversion logic.

Responsibilities:
- parsing text into rows (or header-keyed records)
- escaping individual fields
- generating text from rows (or records)
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from .models import CsvOptions, FieldValue
from .rules import LINE_TERMINATORS, SURPLUS_KEY_PREFIX

logger = logging.getLogger(__name__)

OptionsLike = Optional[Union[CsvOptions, Mapping[str, Any]]]
Table = List[List[str]]
Records = List[Dict[str, str]]


class CsvParseError(ValueError):
    """Malformed input rejected by a strict-mode parse."""

    def __init__(self, message: str, *, line: int, column: int, offset: int):
        super().__init__(f"{message} (line {line}, column {column})")
        self.line = line
        self.column = column
        self.offset = offset


def _to_record(header: Sequence[str], row: Sequence[str]) -> Dict[str, str]:
    record: Dict[str, str] = {}
    for j, value in enumerate(row):
        key = header[j] if j < len(header) else f"{SURPLUS_KEY_PREFIX}{j + 1}"
        record[key] = value
    return record


def parse(text: str, options: OptionsLike = None) -> Union[Table, Records]:
    """
    Parse CSV text into rows, or into records when has_header is set.

    Rules:
    - A doubled quote inside a quoted field is one literal quote.
    - Any other quote toggles the quoted state and is dropped. This includes a
      quote in the middle of an unquoted field, which is tolerated.
    - Delimiters and line terminators inside quotes are literal; a quoted
      terminator (\\n, \\r or \\r\\n) is stored as \\n.
    - \\r\\n counts as one terminator.
    - Trailing content without a terminator still forms a final row.
    - An unterminated quoted field runs to the end of the input.

    With strict=True, malformed quoting raises CsvParseError instead.
    """
    opts = CsvOptions.build(options)
    delimiter = opts.delimiter
    quote_char = opts.quote_char
    strict = opts.strict

    rows: Table = []
    row: List[str] = []
    chars: List[str] = []
    in_quotes = False
    quoted = False  # current field has had a quoted section
    i, length = 0, len(text)
    line, line_start = 1, 0
    quote_opened = (1, 1, 0)

    def fail(message: str, at: int) -> CsvParseError:
        return CsvParseError(message, line=line, column=at - line_start + 1, offset=at)

    while i < length:
        c = text[i]

        if c == quote_char:
            if in_quotes and text[i + 1:i + 2] == quote_char:
                chars.append(quote_char)
                i += 2
                continue
            if strict and not in_quotes and (chars or quoted):
                raise fail("unexpected quote inside unquoted field", i)
            in_quotes = not in_quotes
            if in_quotes:
                quote_opened = (line, i - line_start + 1, i)
            quoted = True
            i += 1
            continue

        if strict and quoted and not in_quotes and c != delimiter and c not in LINE_TERMINATORS:
            raise fail("unexpected character after closing quote", i)

        if c == delimiter:
            if in_quotes:
                chars.append(c)
            else:
                row.append("".join(chars))
                chars = []
                quoted = False
            i += 1

        elif c in LINE_TERMINATORS:
            if c == "\r" and text[i + 1:i + 2] == "\n":
                i += 1
            if in_quotes:
                chars.append("\n")
            else:
                row.append("".join(chars))
                chars = []
                quoted = False
                rows.append(row)
                row = []
            i += 1
            line, line_start = line + 1, i

        else:
            chars.append(c)
            i += 1

    if strict and in_quotes:
        line_no, column, offset = quote_opened
        raise CsvParseError("unterminated quoted field", line=line_no, column=column, offset=offset)

    if chars or row:
        row.append("".join(chars))
        rows.append(row)

    logger.debug("parsed %d rows, %d fields", len(rows), sum(len(r) for r in rows))

    if opts.has_header and rows:
        header = rows.pop(0)
        return [_to_record(header, r) for r in rows]

    return rows


def escape_field(value: FieldValue, options: OptionsLike = None) -> str:
    """
    Render one field for output.

    None becomes an empty field. Booleans, ints and floats are emitted in their
    canonical form and never inspected or quoted. Strings are quoted (with
    embedded quotes doubled) only when they contain the delimiter, the quote
    character, \\n or \\r.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if not isinstance(value, str):
        raise TypeError(f"unsupported field type: {type(value).__name__}")

    opts = CsvOptions.build(options)
    special = opts.special_chars
    if not any(ch in special for ch in value):
        return value

    quote_char = opts.quote_char
    return quote_char + value.replace(quote_char, quote_char * 2) + quote_char


def generate(rows: Iterable[Sequence[FieldValue]], options: OptionsLike = None) -> str:
    """Join escaped fields with the delimiter and lines with line_end (no trailing terminator)."""
    opts = CsvOptions.build(options)
    lines = [opts.delimiter.join(escape_field(field, opts) for field in row) for row in rows]
    logger.debug("generated %d lines", len(lines))
    return opts.line_end.join(lines)


def generate_records(
    records: Iterable[Mapping[str, FieldValue]],
    options: OptionsLike = None,
    fieldnames: Optional[Sequence[str]] = None,
) -> str:
    """
    Generate text with a header line from key -> value records.

    Without fieldnames the header is every key in first-seen order. Keys a
    record lacks become empty fields; keys outside the header are dropped.
    """
    records = list(records)
    if fieldnames is None:
        fieldnames = list(dict.fromkeys(key for record in records for key in record))
    header = list(fieldnames)
    if not header and not records:
        return ""

    rows: List[List[FieldValue]] = [list(header)]
    rows.extend([record.get(key) for key in header] for record in records)
    return generate(rows, options)


class CsvCodec:
    """A parser/generator pair bound to one immutable CsvOptions."""

    __slots__ = ("options",)

    def __init__(self, options: OptionsLike = None, **overrides: Any):
        self.options = CsvOptions.build(options, **overrides)

    def __repr__(self) -> str:
        return f"CsvCodec({self.options!r})"

    def parse(self, text: str) -> Union[Table, Records]:
        return parse(text, self.options)

    def generate(self, rows: Iterable[Sequence[FieldValue]]) -> str:
        return generate(rows, self.options)

    def generate_records(
        self,
        records: Iterable[Mapping[str, FieldValue]],
        fieldnames: Optional[Sequence[str]] = None,
    ) -> str:
        return generate_records(records, self.options, fieldnames)

    def escape(self, value: FieldValue) -> str:
        return escape_field(value, self.options)


def create(options: OptionsLike = None, **overrides: Any) -> CsvCodec:
    """Build a codec from optional options plus keyword overrides."""
    return CsvCodec(options, **overrides)
