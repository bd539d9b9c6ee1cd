"""
Input coercion for form- and command-line-entered numbers.

Field staff type numbers with either decimal separator ("3,5" or "3.5") and
leave optional fields blank, so raw text is normalised here before it
reaches a calculator.
"""

import math
from typing import List, Optional

from models.errors import CalculationError


def parse_number(text, name: str = "Value", default: Optional[float] = None) -> Optional[float]:
    """
    Parse a number, accepting ',' as the decimal separator.

    Args:
        text: Raw input; numbers pass through unchanged.
        name: Field name used in the error message.
        default: Returned for None or blank input.

    Returns:
        The parsed float, or ``default`` for blank input.

    Raises:
        CalculationError: If the text is not a finite number.
    """
    if text is None:
        return default
    if isinstance(text, (int, float)):
        value = float(text)
    else:
        cleaned = str(text).strip().replace(",", ".")
        if cleaned == "":
            return default
        try:
            value = float(cleaned)
        except ValueError:
            raise CalculationError(f"{name} is not a valid number: '{text}'.")
    if math.isnan(value) or math.isinf(value):
        raise CalculationError(f"{name} is not a valid number: '{text}'.")
    return value


def parse_readings(texts, name: str = "Reading") -> List[Optional[float]]:
    """Parse a series of readings, keeping blanks as None."""
    return [parse_number(t, f"{name} {i + 1}") for i, t in enumerate(texts)]
