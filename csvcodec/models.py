from __future__ import annotations

from typing import Any, Dict, FrozenSet, List, Mapping, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PrivateAttr,
    field_validator,
    model_validator,
)

from .rules import (
    DEFAULT_DELIMITER,
    DEFAULT_HAS_HEADER,
    DEFAULT_LINE_END,
    DEFAULT_QUOTE_CHAR,
    DEFAULT_STRICT,
    LINE_TERMINATORS,
)

FieldValue = Union[str, int, float, bool, None]


class CsvOptions(BaseModel):
    """
    Immutable codec configuration.

    delimiter and quote_char are single characters that must differ from each
    other. line_end only affects generation; the parser accepts \\n, \\r and
    \\r\\n whatever it is set to.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    delimiter: str = Field(default=DEFAULT_DELIMITER)
    quote_char: str = Field(default=DEFAULT_QUOTE_CHAR)
    line_end: str = Field(default=DEFAULT_LINE_END, min_length=1)
    has_header: bool = DEFAULT_HAS_HEADER
    strict: bool = DEFAULT_STRICT

    _special_chars: FrozenSet[str] = PrivateAttr(default=frozenset())

    @field_validator("delimiter", "quote_char")
    @classmethod
    def _single_char(cls, v: str) -> str:
        if len(v) != 1:
            raise ValueError("must be exactly one character")
        if v in LINE_TERMINATORS:
            raise ValueError("must not be a line terminator")
        return v

    @model_validator(mode="after")
    def _distinct_chars(self) -> "CsvOptions":
        if self.delimiter == self.quote_char:
            raise ValueError("delimiter and quote_char must differ")
        return self

    def model_post_init(self, __context: Any) -> None:
        self._special_chars = frozenset({self.delimiter, self.quote_char}) | LINE_TERMINATORS

    @property
    def special_chars(self) -> FrozenSet[str]:
        """Characters that force a text field to be quoted."""
        return self._special_chars

    @classmethod
    def build(
        cls,
        options: Optional[Union["CsvOptions", Mapping[str, Any]]] = None,
        **overrides: Any,
    ) -> "CsvOptions":
        """Overlay options and keyword overrides onto the defaults."""
        if isinstance(options, CsvOptions):
            if not overrides:
                return options
            merged = options.model_dump()
        else:
            merged = dict(options or {})
        merged.update(overrides)
        return cls(**merged)


class GenerateRequest(BaseModel):
    rows: List[List[FieldValue]]
    options: Dict[str, Any] = Field(default_factory=dict)


class ParseResponse(BaseModel):
    rows: List[Union[Dict[str, str], List[str]]]
    row_count: int
    has_header: bool = False


class HealthResponse(BaseModel):
    ok: bool = True
