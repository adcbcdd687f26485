import pytest
from pydantic import ValidationError

from csvcodec import CsvOptions, create


def test_defaults():
    opts = CsvOptions()
    assert opts.delimiter == ","
    assert opts.quote_char == '"'
    assert opts.line_end == "\n"
    assert opts.has_header is False
    assert opts.strict is False


def test_special_chars_derived_from_options():
    opts = CsvOptions(delimiter=";", quote_char="'")
    assert opts.special_chars == frozenset({";", "'", "\n", "\r"})


def test_build_overlays_partial_options():
    opts = CsvOptions.build({"delimiter": "|"}, has_header=True)
    assert opts.delimiter == "|"
    assert opts.quote_char == '"'
    assert opts.has_header is True


def test_build_returns_existing_instance_without_overrides():
    opts = CsvOptions(delimiter=";")
    assert CsvOptions.build(opts) is opts
    assert CsvOptions.build(opts, strict=True).delimiter == ";"


def test_options_are_frozen():
    opts = CsvOptions()
    with pytest.raises(ValidationError):
        opts.delimiter = ";"


@pytest.mark.parametrize(
    "kwargs",
    [
        {"delimiter": ""},
        {"delimiter": "::"},
        {"quote_char": "''"},
        {"delimiter": "\n"},
        {"quote_char": "\r"},
        {"delimiter": '"'},
        {"delimiter": "'", "quote_char": "'"},
        {"line_end": ""},
        {"separator": ";"},
    ],
)
def test_invalid_options_rejected(kwargs):
    with pytest.raises(ValidationError):
        CsvOptions(**kwargs)


def test_create_binds_options():
    codec = create({"delimiter": "\t"}, line_end="\r\n")
    assert codec.options.delimiter == "\t"
    assert codec.options.line_end == "\r\n"
    assert "delimiter='\\t'" in repr(codec)
