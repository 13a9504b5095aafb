"""
Payout evaluation for each bet type.

Every evaluator returns the net multiplier for a bet against the drawn number:
winnings credited are ``stake * multiplier``. The stake itself is taken from the
balance before the spin and is not part of the multiplier, so a straight-up
win pays 35 (not 36) and an even-money win pays 1 (not 2).
"""

from typing import Callable, Dict, Optional

from .models import Bet, BetType, Color, UnknownBetTypeError
from .wheel import color_of


Evaluator = Callable[[Bet, int, Color], int]

PAYOUTS: Dict[BetType, int] = {
    BetType.NUMBER: 35,
    BetType.COLOR: 1,
    BetType.ODD_EVEN: 1,
    BetType.LOW_HIGH: 1,
    BetType.DOZEN: 2,
    BetType.COLUMN: 2,
}

DOZEN_RANGES = {
    "1st": range(1, 13),
    "2nd": range(13, 25),
    "3rd": range(25, 37),
}

LOW_HIGH_RANGES = {
    "low": range(1, 19),
    "high": range(19, 37),
}


def column_of(number: int) -> int:
    """Table column (1-3) of a nonzero number."""
    return (number - 1) % 3 + 1


def evaluate_number(bet: Bet, winning_number: int, winning_color: Color) -> int:
    """Straight-up: pays when the drawn number is the chosen one, zero included."""
    if int(bet.choice) == winning_number:
        return PAYOUTS[BetType.NUMBER]
    return 0


def evaluate_color(bet: Bet, winning_number: int, winning_color: Color) -> int:
    """Red/black: pays when the drawn color matches."""
    # Green is never a valid choice, so zero always loses
    if winning_color.value == bet.choice:
        return PAYOUTS[BetType.COLOR]
    return 0


def evaluate_odd_even(bet: Bet, winning_number: int, winning_color: Color) -> int:
    """Odd/even on nonzero numbers."""
    if winning_number == 0:
        return 0
    parity = "even" if winning_number % 2 == 0 else "odd"
    if parity == bet.choice:
        return PAYOUTS[BetType.ODD_EVEN]
    return 0


def evaluate_low_high(bet: Bet, winning_number: int, winning_color: Color) -> int:
    """Low (1-18) or high (19-36)."""
    if winning_number in LOW_HIGH_RANGES[bet.choice]:
        return PAYOUTS[BetType.LOW_HIGH]
    return 0


def evaluate_dozen(bet: Bet, winning_number: int, winning_color: Color) -> int:
    """1st, 2nd or 3rd group of twelve."""
    if winning_number in DOZEN_RANGES[bet.choice]:
        return PAYOUTS[BetType.DOZEN]
    return 0


def evaluate_column(bet: Bet, winning_number: int, winning_color: Color) -> int:
    """col1, col2 or col3 of the table layout."""
    if winning_number == 0:
        return 0
    if f"col{column_of(winning_number)}" == bet.choice:
        return PAYOUTS[BetType.COLUMN]
    return 0


EVALUATORS: Dict[BetType, Evaluator] = {
    BetType.NUMBER: evaluate_number,
    BetType.COLOR: evaluate_color,
    BetType.ODD_EVEN: evaluate_odd_even,
    BetType.LOW_HIGH: evaluate_low_high,
    BetType.DOZEN: evaluate_dozen,
    BetType.COLUMN: evaluate_column,
}

_missing = set(BetType) - set(EVALUATORS)
if _missing:
    raise RuntimeError(f"No evaluator registered for: {sorted(t.value for t in _missing)}")


def evaluate(bet: Bet, winning_number: int, winning_color: Optional[Color] = None) -> int:
    """
    Net multiplier of a bet against a drawn number.

    Args:
        bet: The wager
        winning_number: Drawn number (0-36)
        winning_color: Drawn color; derived from the number when omitted

    Returns:
        0 on a loss, otherwise the bet type's net payout

    Raises:
        UnknownBetTypeError: If no evaluator handles the bet's type
        InvalidNumberError: If the number is outside 0-36
    """
    evaluator = EVALUATORS.get(getattr(bet, "bet_type", None))
    if evaluator is None:
        raise UnknownBetTypeError(f"Cannot evaluate bet: {bet!r}")

    if winning_color is None:
        winning_color = color_of(winning_number)
    return evaluator(bet, winning_number, winning_color)
