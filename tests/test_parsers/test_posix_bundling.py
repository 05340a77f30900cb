import pytest

from argdict.parser import DiagnosticKind, OptionTable, option, parse


@pytest.fixture
def table():
    return OptionTable.build(
        [
            option("-a", "--alpha"),
            option("-b", "--beta"),
            option("-c", "--charlie"),
            option("-o", "--output", arity="one"),
        ]
    )


def test_posix_bundling(table):
    """Flags stack inside a single short cluster."""
    result = parse(table, ["-abc"])
    assert result["alpha"] is True
    assert result["beta"] is True
    assert result["charlie"] is True
    assert result["output"] is None


def test_posix_bundling_last_has_value(table):
    result = parse(table, ["-abo", "out.txt"])
    assert result["alpha"] is True
    assert result["beta"] is True
    assert result["output"] == "out.txt"


def test_posix_bundling_attached_value(table):
    result = parse(table, ["-co=out.txt"])
    assert result["charlie"] is True
    assert result["output"] == "out.txt"

    result = parse(table, ["-o=a=b"])
    assert result["output"] == "a=b"


def test_posix_bundling_value_not_last(table):
    outcome = parse(table, ["-oab", "out.txt"])
    error = outcome.first
    assert error.kind is DiagnosticKind.MISSING_VALUE
    assert error.option == "output"
    assert error.index == 0
    assert "'-o'" in error.message


def test_posix_bundling_flag_with_attached_value(table):
    outcome = parse(table, ["-ab=1"])
    assert outcome.first.kind is DiagnosticKind.UNEXPECTED_VALUE
    assert outcome.first.option == "beta"


def test_posix_bundling_unknown_member(table):
    outcome = parse(table, ["-abx"])
    error = outcome.first
    assert error.kind is DiagnosticKind.UNKNOWN_OPTION
    assert error.raw == "-abx"
    assert error.index == 0
    assert "-x" in error.message
    # Nothing from a rejected cluster is applied.
    assert outcome.partial["alpha"] is False


def test_posix_bundling_repeated_member(table):
    outcome = parse(table, ["-aba"])
    assert outcome.first.kind is DiagnosticKind.DUPLICATE_OPTION
    assert outcome.first.option == "alpha"


def test_posix_bundling_value_swallows_next_token(table):
    result = parse(table, ["-ao", "-x"])
    assert result["output"] == "-x"


def test_posix_bundling_value_stops_at_known_option(table):
    outcome = parse(table, ["-ao", "-b"])
    assert outcome.first.kind is DiagnosticKind.MISSING_VALUE
    assert outcome.first.index == 0
