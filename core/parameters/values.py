# core/parameters/values.py
"""
Numeric literal parsing for netlist values.

SPICE-style SI suffixes ("10k", "4.7u", "1Meg") are handled directly;
anything else with letters is handed to Pint ("4.7 kohm", "10nF") and
converted to base units.
"""
import re
from typing import Optional, Union

from pint import UnitRegistry

from core.exceptions import ParameterError

ureg = UnitRegistry()

SI_PREFIXES = {
    "f": 1e-15,
    "p": 1e-12,
    "n": 1e-9,
    "u": 1e-6,
    "µ": 1e-6,
    "m": 1e-3,
    "k": 1e3,
    "Meg": 1e6,
    "MEG": 1e6,
    "meg": 1e6,
    "G": 1e9,
    "T": 1e12,
}

_NUMBER_SUFFIX = re.compile(
    r"""^\s*
        ([-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)   # mantissa with optional exponent
        \s*
        ([A-Za-zµ]*)                                  # optional SI prefix
        \s*$""",
    re.VERBOSE,
)


def si_literal(text: str) -> Optional[float]:
    """Value of a plain number with an optional SI prefix ("4.7k"), else None."""
    match = _NUMBER_SUFFIX.match(text)
    if match:
        number, prefix = match.groups()
        if not prefix:
            return float(number)
        if prefix in SI_PREFIXES:
            return float(number) * SI_PREFIXES[prefix]
    return None


def parse_value(text: Union[str, int, float]) -> float:
    """
    Convert a netlist value to a float.

    Raises:
        ParameterError: If the text is neither a number with a known SI
            prefix nor a quantity Pint understands.
    """
    if isinstance(text, (int, float)):
        return float(text)

    literal = si_literal(text)
    if literal is not None:
        return literal

    try:
        quantity = ureg.Quantity(text)
    except Exception as exc:
        raise ParameterError(f"Invalid value '{text}': {exc}") from exc
    return float(quantity.to_base_units().magnitude)


def is_number(s: str) -> bool:
    try:
        parse_value(s)
        return True
    except ParameterError:
        return False
