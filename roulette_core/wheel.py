"""
European single-zero wheel: pocket colors, physical order and the draw.
"""

from dataclasses import dataclass
from typing import FrozenSet, Tuple

from .models import Color, InvalidNumberError


# Red numbers on the European wheel
RED_NUMBERS: FrozenSet[int] = frozenset({
    1, 3, 5, 7, 9, 12, 14, 16, 18, 19, 21, 23, 25, 27, 30, 32, 34, 36
})
BLACK_NUMBERS: FrozenSet[int] = frozenset(range(1, 37)) - RED_NUMBERS

# Clockwise, starting at 0
WHEEL_ORDER: Tuple[int, ...] = (
    0, 32, 15, 19, 4, 21, 2, 25, 17, 34, 6, 27, 13, 36, 11, 30, 8, 23, 10,
    5, 24, 16, 33, 1, 20, 14, 31, 9, 22, 18, 29, 7, 28, 12, 35, 3, 26,
)

POCKETS = len(WHEEL_ORDER)


def _check_number(number) -> int:
    if isinstance(number, bool) or not isinstance(number, int):
        raise InvalidNumberError(f"Invalid number format: {number!r}")
    if not 0 <= number <= 36:
        raise InvalidNumberError(f"Number {number} is out of range (0-36)")
    return number


def color_of(number: int) -> Color:
    """
    Color of a pocket.

    Raises:
        InvalidNumberError: If the number is not an int in 0-36
    """
    _check_number(number)
    if number == 0:
        return Color.GREEN
    if number in RED_NUMBERS:
        return Color.RED
    return Color.BLACK


def wheel_position(number: int) -> int:
    """Index of a number around the wheel."""
    return WHEEL_ORDER.index(_check_number(number))


@dataclass(frozen=True)
class Outcome:
    """The result of one spin. Color is always derived from the number."""
    number: int

    def __post_init__(self):
        _check_number(self.number)

    @property
    def color(self) -> Color:
        return color_of(self.number)

    def __str__(self) -> str:
        return f"{self.number} ({self.color.value})"


def draw(rng) -> Outcome:
    """
    Spin the wheel.

    Args:
        rng: Random source with a ``randint(a, b)`` method, e.g. random.Random

    Returns:
        Outcome uniformly distributed over 0-36
    """
    return Outcome(rng.randint(0, POCKETS - 1))
