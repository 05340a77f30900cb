import pytest

from argdict.parser import DiagnosticKind, Diagnostics, OptionTable, option, parse


@pytest.fixture
def table():
    return OptionTable.build(
        [
            option("-c", "--count", arity="one", kind="integer"),
            option("-v", "--verbose"),
            option(
                "--mode",
                arity="one",
                kind="choice",
                choices=("fast", "slow"),
                required=True,
            ),
            option("--name", arity="one"),
        ]
    )


ARGS = ["-c", "abc", "-v", "-v", "--zzz", "--name", "x"]


def test_fail_fast_reports_first(table):
    outcome = parse(table, ARGS)
    assert isinstance(outcome, Diagnostics)
    assert len(outcome) == 1
    assert outcome.first.kind is DiagnosticKind.INVALID_VALUE


def test_collect_all_reports_everything(table):
    outcome = parse(table, ARGS, collect_all=True)
    assert outcome.kinds == (
        DiagnosticKind.INVALID_VALUE,
        DiagnosticKind.DUPLICATE_OPTION,
        DiagnosticKind.UNKNOWN_OPTION,
        DiagnosticKind.MISSING_REQUIRED_OPTION,
    )
    assert [error.index for error in outcome] == [1, 3, 4, len(ARGS)]


def test_collect_all_keeps_partial_result(table):
    outcome = parse(table, ARGS, collect_all=True)
    partial = outcome.partial
    assert partial["verbose"] is True
    assert partial["name"] == "x"
    assert partial["count"] is None
    assert partial["mode"] is None


def test_first_error_is_the_same_in_both_modes(table):
    fail_fast = parse(table, ARGS)
    collected = parse(table, ARGS, collect_all=True)
    assert fail_fast.first == collected.first


def test_collect_all_clean_input_is_a_result(table):
    result = parse(table, ["--mode", "fast", "-c", "2"], collect_all=True)
    assert result.ok
    assert result["count"] == 2


def test_failed_occurrence_does_not_keep_list_default():
    table = OptionTable.build(
        [option("--tag", arity="many", kind="integer", repeatable=True, default=["9"])]
    )
    outcome = parse(table, ["--tag", "x", "--tag", "1"], collect_all=True)
    assert outcome.kinds == (DiagnosticKind.INVALID_VALUE,)
    assert outcome.partial["tag"] == (1,)


def test_unexpected_value_counts_as_given():
    table = OptionTable.build([option("--force", required=True)])
    outcome = parse(table, ["--force=yes"], collect_all=True)
    assert outcome.kinds == (DiagnosticKind.UNEXPECTED_VALUE,)
    assert outcome.first.option == "force"
    assert outcome.partial["force"] is False
