import pytest

from argdict.parser import (
    DiagnosticKind,
    OptionTable,
    UnknownOptionPolicy,
    option,
    parse,
)


@pytest.fixture
def table():
    return OptionTable.build(
        [
            option("-v", "--verbose"),
            option("--version"),
            option("--count", arity="one", kind="integer"),
        ]
    )


@pytest.mark.parametrize("args", [["--zzz"], ["-x"], ["-vx"], ["--=x"]])
def test_error_policy_rejects_unknown(table, args):
    outcome = parse(table, args)
    assert outcome.first.kind is DiagnosticKind.UNKNOWN_OPTION
    assert outcome.first.raw == args[0]
    assert outcome.first.index == 0


def test_error_policy_suggests(table):
    outcome = parse(table, ["--verbos"])
    error = outcome.first
    assert error.kind is DiagnosticKind.UNKNOWN_OPTION
    assert error.candidates[0] == "--verbose"
    assert "Did you mean" in error.message


def test_passthrough_keeps_unmatched_tokens(table):
    result = parse(table, ["--zzz", "-v", "-x"], unknown_options="passthrough")
    assert result.ok
    assert result["verbose"] is True
    assert result.positionals == ("--zzz", "-x")
    assert len(result.warnings) == 2
    assert "'--zzz'" in result.warnings[0]


def test_passthrough_cluster_is_kept_whole(table):
    result = parse(table, ["-vx"], unknown_options=UnknownOptionPolicy.PASSTHROUGH)
    assert result.positionals == ("-vx",)
    assert result["verbose"] is False


def test_passthrough_still_reports_near_misses(table):
    outcome = parse(table, ["--verbos"], unknown_options="passthrough")
    assert outcome.first.kind is DiagnosticKind.UNKNOWN_OPTION
    assert "--verbose" in outcome.first.candidates

    outcome = parse(table, ["--count=3", "--coun"], unknown_options="passthrough")
    assert outcome.first.kind is DiagnosticKind.UNKNOWN_OPTION
    assert outcome.first.index == 1


def test_abbreviations(table):
    assert parse(table, ["--verb"], allow_abbrev=True)["verbose"] is True
    assert parse(table, ["--co", "3"], allow_abbrev=True)["count"] == 3

    outcome = parse(table, ["--verb"])
    assert outcome.first.kind is DiagnosticKind.UNKNOWN_OPTION


def test_ambiguous_abbreviation(table):
    outcome = parse(table, ["--ver"], allow_abbrev=True)
    error = outcome.first
    assert error.kind is DiagnosticKind.UNKNOWN_OPTION
    assert error.candidates == ("--verbose", "--version")


def test_invalid_policy(table):
    with pytest.raises(ValueError):
        parse(table, ["-v"], unknown_options="ignore")
