from datetime import datetime
from pathlib import Path

import pytest

from argdict.exceptions import TableConflictError, UnknownOptionError
from argdict.parser import ExclusiveGroup, OptionDescriptor, OptionTable, option


def test_build_and_lookup():
    table = OptionTable.build(
        [
            option("-v", "--verbose"),
            option("-c", "--count", arity="one", kind="integer", default="5"),
        ]
    )
    assert len(table) == 2
    assert [desc.name for desc in table] == ["verbose", "count"]
    assert table.resolve("-c") is table["count"]
    assert table.resolve("--verbose") is table.get("verbose")
    assert table.get("missing") is None
    assert "--count" in table
    assert "--missing" not in table
    assert table.default_for("count") == 5
    assert table.default_for("verbose") is False
    assert table.converter(table["count"])("12") == 12


def test_table_is_read_only():
    table = OptionTable.build([option("-v", "--verbose")])
    with pytest.raises(TypeError):
        table.aliases["-x"] = table["verbose"]


@pytest.mark.parametrize(
    "descriptors",
    [
        [option("-v", "--verbose"), option("-v", "--version")],
        [option("--verbose"), option("--loud", name="verbose")],
        [OptionDescriptor("1st", ("--first",))],
        [OptionDescriptor("bad name", ("--bad",))],
        [OptionDescriptor("empty", ())],
    ],
)
def test_conflicting_names_and_aliases(descriptors):
    with pytest.raises(TableConflictError):
        OptionTable.build(descriptors)


@pytest.mark.parametrize(
    "alias",
    ["verbose", "-vv", "--", "---x", "--a=b", "--a b", "-=", "- "],
)
def test_malformed_alias(alias):
    with pytest.raises(TableConflictError):
        OptionTable.build([OptionDescriptor("opt", (alias,))])


def test_alias_conflict_names_existing_option():
    with pytest.raises(TableConflictError) as excinfo:
        OptionTable.build([option("-v", "--verbose"), option("-v", "--version")])
    assert "already used by option 'verbose'" in str(excinfo.value)
    assert excinfo.value.option == "version"


@pytest.mark.parametrize(
    "desc",
    [
        option("-v", kind="integer"),
        option("-v", choices=("a", "b")),
        option("-v", default="yes"),
        option("-v", repeatable=True, default=True),
    ],
)
def test_invalid_flag(desc):
    with pytest.raises(TableConflictError):
        OptionTable.build([desc])


@pytest.mark.parametrize(
    "desc",
    [
        option("--mode", arity="one", kind="choice"),
        option("--mode", arity="one", kind="choice", choices=("a", "a")),
        option("--mode", arity="one", kind="choice", choices=(1, 2)),
        option("--mode", arity="one", choices=("a", "b")),
    ],
)
def test_invalid_choices(desc):
    with pytest.raises(TableConflictError):
        OptionTable.build([desc])


@pytest.mark.parametrize(
    "desc",
    [
        option("--count", arity="one", kind="integer", default="many"),
        option("--mode", arity="one", kind="choice", choices=("a", "b"), default="c"),
        option("--mode", arity="one", kind="choice", choices=("a", "b"), default=1),
        option("--tag", arity="many", default="a"),
        option("--num", arity="many", kind="integer", default=["1", "x"]),
        option("--count", arity="one", kind="integer", default=3.5),
        option("--count", arity="one", kind="integer", default=True),
        option("--count", arity="one", kind="integer", default=2**63),
        option("--ratio", arity="one", kind="float", default=False),
        option("--out", arity="one", kind="path", default=3),
        option("--name", arity="one", default=7),
        option("--num", arity="many", kind="integer", default=[1, 2.5]),
    ],
)
def test_invalid_defaults(desc):
    with pytest.raises(TableConflictError):
        OptionTable.build([desc])


def test_defaults_are_converted():
    table = OptionTable.build(
        [
            option("--num", arity="many", kind="integer", default=["1", 2]),
            option("--tag", arity="many"),
            option("-I", arity="one", repeatable=True),
            option("--mode", arity="one", kind="choice", choices=("a", "b"), default="b"),
            option("-v", "--verbose", repeatable=True),
            option("--color", default=True),
        ]
    )
    assert table.default_for("num") == [1, 2]
    assert table.default_for("tag") == []
    assert table.default_for("i") == []
    assert table.default_for("mode") == "b"
    assert table.default_for("verbose") == 0
    assert table.default_for("color") is True


def test_typed_defaults_are_kept():
    table = OptionTable.build(
        [
            option("--ratio", arity="one", kind="float", default=2),
            option("--out", arity="one", kind="path", default=Path("out.txt")),
            option("--since", arity="one", kind="datetime", default=datetime(2024, 1, 2)),
            option("--dry-run", arity="one", kind="boolean", default=False),
        ]
    )
    assert table.default_for("ratio") == 2.0
    assert isinstance(table.default_for("ratio"), float)
    assert table.default_for("out") == Path("out.txt")
    assert table.default_for("since") == datetime(2024, 1, 2)
    assert table.default_for("dry_run") is False


def test_groups():
    table = OptionTable.build(
        [
            option("--json", group="format"),
            option("--yaml", group="format"),
            option("--stdout", group="dest"),
            option("--file", arity="one", group="dest"),
        ],
        groups=[ExclusiveGroup("format", required=True)],
    )
    assert [desc.name for desc in table.members_of("format")] == ["json", "yaml"]
    assert table.members_of("missing") == ()
    assert table.required_groups == (ExclusiveGroup("format", required=True),)
    assert set(table.groups) == {"format", "dest"}


@pytest.mark.parametrize(
    "descriptors, groups",
    [
        ([option("--json", group="format")], []),
        ([option("--json", group="format", required=True), option("--yaml", group="format")], []),
        ([option("--json"), option("--yaml")], [ExclusiveGroup("format")]),
        (
            [option("--json", group="format"), option("--yaml", group="format")],
            [ExclusiveGroup("format"), ExclusiveGroup("format", required=True)],
        ),
    ],
)
def test_invalid_groups(descriptors, groups):
    with pytest.raises(TableConflictError):
        OptionTable.build(descriptors, groups=groups)


def test_add_help():
    table = OptionTable.build([option("-v", "--verbose")], add_help=True)
    assert table.help_option is table["help"]
    assert table.resolve("-h") is table.help_option
    assert table.descriptors[0].name == "help"

    with pytest.raises(TableConflictError):
        OptionTable.build([option("-h", "--host", arity="one")], add_help=True)


def test_resolve_unknown_suggests():
    table = OptionTable.build([option("-v", "--verbose"), option("--version")])

    with pytest.raises(UnknownOptionError) as excinfo:
        table.resolve("--verbos")
    assert excinfo.value.candidates[0] == "--verbose"
    assert "Did you mean" in str(excinfo.value)

    with pytest.raises(UnknownOptionError) as excinfo:
        table.resolve("--zzz")
    assert excinfo.value.candidates == ()

    assert table.suggest("--") == []


def test_resolve_abbreviations():
    table = OptionTable.build([option("-v", "--verbose"), option("--version")])

    with pytest.raises(UnknownOptionError):
        table.resolve("--verb")
    assert table.resolve("--verb", allow_abbrev=True).name == "verbose"
    assert table.resolve("--vers", allow_abbrev=True).name == "version"

    with pytest.raises(UnknownOptionError) as excinfo:
        table.resolve("--ver", allow_abbrev=True)
    assert excinfo.value.candidates == ("--verbose", "--version")


def test_abbreviation_of_one_option_with_several_aliases():
    table = OptionTable.build([option("--color", "--colour")])
    assert table.resolve("--col", allow_abbrev=True).name == "color"


def test_build_rejects_non_descriptors():
    with pytest.raises(TableConflictError):
        OptionTable.build([{"name": "verbose"}])
