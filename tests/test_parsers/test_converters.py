from datetime import datetime
from pathlib import Path

import pytest

from argdict.exceptions import InvalidValueError
from argdict.parser import Converter, ValueKind, convert


# --- Tests ---
@pytest.mark.parametrize(
    "raw, kind, expected",
    [
        ("42", ValueKind.INTEGER, 42),
        ("-7", ValueKind.INTEGER, -7),
        ("3.14", ValueKind.FLOAT, 3.14),
        ("-1e3", ValueKind.FLOAT, -1000.0),
        ("hello", ValueKind.STRING, "hello"),
        ("", ValueKind.STRING, ""),
        ("True", ValueKind.BOOLEAN, True),
        ("no", ValueKind.BOOLEAN, False),
        ("./config.yml", ValueKind.PATH, Path("./config.yml")),
    ],
)
def test_convert_basic(raw, kind, expected):
    assert convert(raw, kind) == expected


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("true", True),
        ("TRUE", True),
        ("1", True),
        ("Yes", True),
        ("false", False),
        ("False", False),
        ("0", False),
        ("NO", False),
    ],
)
def test_convert_boolean(raw, expected):
    assert convert(raw, "boolean") is expected


@pytest.mark.parametrize("raw", ["on", "off", "maybe", "", "2"])
def test_convert_boolean_failure(raw):
    with pytest.raises(InvalidValueError) as excinfo:
        convert(raw, ValueKind.BOOLEAN)
    assert excinfo.value.kind is ValueKind.BOOLEAN
    assert excinfo.value.raw == raw


@pytest.mark.parametrize("raw", ["abc", "1.5", "", "0x10"])
def test_convert_integer_non_numeric(raw):
    with pytest.raises(InvalidValueError) as excinfo:
        convert(raw, ValueKind.INTEGER)
    assert excinfo.value.kind is ValueKind.INTEGER
    assert "not a valid integer" in str(excinfo.value)


def test_convert_integer_overflow():
    assert convert(str(2**63 - 1), ValueKind.INTEGER) == 2**63 - 1
    assert convert(str(-(2**63)), ValueKind.INTEGER) == -(2**63)
    with pytest.raises(InvalidValueError) as excinfo:
        convert(str(2**63), ValueKind.INTEGER)
    assert "out of range" in str(excinfo.value)
    with pytest.raises(InvalidValueError):
        convert(str(-(2**63) - 1), ValueKind.INTEGER)


def test_convert_float_failure():
    with pytest.raises(InvalidValueError) as excinfo:
        convert("fast", ValueKind.FLOAT)
    assert excinfo.value.kind is ValueKind.FLOAT


def test_convert_choice():
    choices = ("fast", "slow")
    assert convert("fast", ValueKind.CHOICE, choices) == "fast"
    with pytest.raises(InvalidValueError) as excinfo:
        convert("medium", ValueKind.CHOICE, choices)
    assert excinfo.value.choices == choices
    assert "{fast, slow}" in str(excinfo.value)

    # Choices are case-sensitive
    with pytest.raises(InvalidValueError):
        convert("FAST", ValueKind.CHOICE, choices)


def test_convert_path_empty():
    assert convert("", ValueKind.PATH) == Path("")
    with pytest.raises(InvalidValueError) as excinfo:
        convert("", ValueKind.PATH, allow_empty=False)
    assert excinfo.value.kind is ValueKind.PATH


def test_convert_datetime():
    assert convert("2025-01-02", ValueKind.DATETIME) == datetime(2025, 1, 2)
    with pytest.raises(InvalidValueError):
        convert("not a date", ValueKind.DATETIME)


def test_converter_is_bound_once():
    converter = Converter(ValueKind.CHOICE, ("a", "b"))
    assert converter("a") == "a"
    assert converter == Converter(ValueKind.CHOICE, ("a", "b"))
    with pytest.raises(InvalidValueError):
        converter("c")


@pytest.mark.parametrize(
    "name, expected",
    [
        ("int", ValueKind.INTEGER),
        ("str", ValueKind.STRING),
        ("Boolean", ValueKind.BOOLEAN),
        ("enum", ValueKind.CHOICE),
        ("path", ValueKind.PATH),
    ],
)
def test_value_kind_aliases(name, expected):
    assert ValueKind(name) is expected


def test_value_kind_invalid():
    with pytest.raises(ValueError):
        ValueKind("complex")
