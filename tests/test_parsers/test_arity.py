import pytest

from argdict.parser import Arity


def test_arity():
    arity = Arity.MANY
    assert arity == Arity.MANY
    assert arity != Arity.ONE
    assert arity != "many"
    assert arity.value == "many"
    assert str(arity) == "many"
    assert len(Arity.choices()) == 3


@pytest.mark.parametrize(
    "value, expected",
    [
        ("zero", Arity.ZERO),
        ("flag", Arity.ZERO),
        ("0", Arity.ZERO),
        (0, Arity.ZERO),
        ("ONE", Arity.ONE),
        (" single ", Arity.ONE),
        (1, Arity.ONE),
        ("+", Arity.MANY),
        ("list", Arity.MANY),
    ],
)
def test_arity_aliases(value, expected):
    assert Arity(value) is expected


def test_arity_invalid():
    with pytest.raises(ValueError) as excinfo:
        Arity("two")
    assert "Must be one of: zero, one, many" in str(excinfo.value)

    with pytest.raises(ValueError):
        Arity(None)


def test_takes_value():
    assert not Arity.ZERO.takes_value
    assert Arity.ONE.takes_value
    assert Arity.MANY.takes_value
