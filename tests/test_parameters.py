import pytest
from core.parameters.resolver import evaluate, resolve
from core.parameters.values import is_number, parse_value
from core.safe_math import parse_expr
from core.exceptions import ParameterError


@pytest.mark.parametrize("text, expected", [
    ("10", 10.0),
    ("-2.5", -2.5),
    ("1e3", 1000.0),
    ("10k", 10e3),
    ("4.7u", 4.7e-6),
    ("1Meg", 1e6),
    ("3MEG", 3e6),
    ("100n", 100e-9),
    ("2m", 2e-3),
    ("5p", 5e-12),
    ("1G", 1e9),
])
def test_parse_value_si_suffixes(text, expected):
    assert parse_value(text) == pytest.approx(expected)


def test_parse_value_units():
    assert parse_value("4.7 kohm") == pytest.approx(4700.0)
    assert parse_value("10 nF") == pytest.approx(1e-8)


def test_parse_value_rejects_garbage():
    with pytest.raises(ParameterError):
        parse_value("ten ohms and a bit")
    assert not is_number("abc(")
    assert is_number(" 12 ")


def test_resolve_numeric():
    assert resolve({"a": 1, "b": "2k"}) == {"a": 1.0, "b": 2000.0}


def test_resolve_dependencies():
    params = resolve({"C0": "tau / R0", "tau": "1m", "R0": "1k"})
    assert params["C0"] == pytest.approx(1e-6)


def test_resolve_functions():
    params = resolve({"f0": "1 / (2 * pi * sqrt(L * C))", "L": 1e-3, "C": 1e-6})
    assert params["f0"] == pytest.approx(5032.92, rel=1e-5)


def test_resolve_names_shadowing_sympy_constants():
    params = resolve({"I": 2, "E": "3 * I"})
    assert params["E"] == pytest.approx(6.0)


def test_resolve_circular():
    with pytest.raises(ParameterError, match="Circular"):
        resolve({"a": "b + 1", "b": "a * 2"})


def test_resolve_undefined_name():
    with pytest.raises(ParameterError, match="undefined name 'z'"):
        resolve({"a": "z + 1"})


def test_resolve_bad_type():
    with pytest.raises(ParameterError, match="Unsupported type"):
        resolve({"a": [1, 2]})


def test_evaluate_against_params():
    assert evaluate("2 * R0", {"R0": 50.0}) == pytest.approx(100.0)
    assert evaluate("10k", {}) == pytest.approx(1e4)


def test_parse_expr_rejects_bad_syntax():
    with pytest.raises(ValueError):
        parse_expr("2 * (3 +")


def test_si_suffix_is_not_a_parameter_reference():
    params = resolve({"k": 2, "m": 3, "R0": "1k", "C0": "10m", "R1": "k * R0"})
    assert params["R0"] == pytest.approx(1e3)
    assert params["C0"] == pytest.approx(1e-2)
    assert params["R1"] == pytest.approx(2e3)
    assert evaluate("4.7k", {"k": 5.0}) == pytest.approx(4.7e3)
