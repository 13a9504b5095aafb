"""
Round settlement engine for the European roulette game.
Settles a round of bets against one spin and tracks the session bankroll.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Tuple
import logging
import random

from .evaluators import EVALUATORS, evaluate
from .models import Bet, Color, InsufficientFundsError, UnknownBetTypeError
from .wheel import Outcome, draw


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BetResult:
    """Outcome of a single bet within a round."""
    bet: Bet
    multiplier: int
    payout: int

    @property
    def won(self) -> bool:
        return self.multiplier > 0


@dataclass(frozen=True)
class SettlementResult:
    """Everything a caller needs to report a settled round."""
    starting_balance: int
    new_balance: int
    outcome: Outcome
    per_bet: Tuple[BetResult, ...]
    total_stake: int
    total_winnings: int

    @property
    def outcome_number(self) -> int:
        return self.outcome.number

    @property
    def outcome_color(self) -> Color:
        return self.outcome.color

    @property
    def net(self) -> int:
        """Winnings minus stakes."""
        return self.total_winnings - self.total_stake

    @property
    def gross_return(self) -> int:
        """Money handed back this round, the committed stake included."""
        return self.total_winnings + self.total_stake

    @property
    def is_bust(self) -> bool:
        return self.new_balance <= 0


def total_stake(bets: Sequence[Bet]) -> int:
    """Sum of the stakes of a sequence of bets."""
    return sum(bet.stake for bet in bets)


def settle(balance: int, bets: Sequence[Bet], rng) -> SettlementResult:
    """
    Settle one round.

    Stakes are committed before the spin, every bet is evaluated against the
    single drawn outcome and the winnings are credited once. Nothing outside
    the returned value is modified.

    Args:
        balance: Balance before the round, in pennies
        bets: Bets of the round, in placement order
        rng: Random source passed to the wheel

    Returns:
        SettlementResult

    Raises:
        ValueError: If no bets are given
        UnknownBetTypeError: If a bet cannot be evaluated
        InsufficientFundsError: If the stakes exceed the balance
    """
    bets = tuple(bets)
    if not bets:
        raise ValueError("Cannot settle a round without bets")

    for bet in bets:
        if not isinstance(bet, Bet) or bet.bet_type not in EVALUATORS:
            raise UnknownBetTypeError(f"Refusing to settle unknown bet: {bet!r}")

    stake = total_stake(bets)
    if stake > balance:
        raise InsufficientFundsError(
            f"Insufficient funds: stakes {stake} exceed balance {balance}"
        )

    committed = balance - stake
    outcome = draw(rng)
    color = outcome.color

    results: List[BetResult] = []
    winnings = 0
    for bet in bets:
        multiplier = evaluate(bet, outcome.number, color)
        payout = bet.stake * multiplier
        winnings += payout
        results.append(BetResult(bet=bet, multiplier=multiplier, payout=payout))
        logger.debug(f"{bet.label} stake={bet.stake} -> x{multiplier} = {payout}")

    return SettlementResult(
        starting_balance=balance,
        new_balance=committed + winnings,
        outcome=outcome,
        per_bet=tuple(results),
        total_stake=stake,
        total_winnings=winnings,
    )


@dataclass
class GameSession:
    """
    A player's session at the table.
    Owns the balance between rounds; each round is settled by ``settle``.
    """
    starting_balance: int
    rng: random.Random = field(default_factory=random.Random)
    balance: int = field(init=False)
    history: List[SettlementResult] = field(default_factory=list, init=False)

    def __post_init__(self):
        if isinstance(self.starting_balance, bool) or not isinstance(self.starting_balance, int):
            raise ValueError("Starting balance must be a whole number of pennies")
        if self.starting_balance <= 0:
            raise ValueError("Starting balance must be positive")
        self.balance = self.starting_balance

    @property
    def is_over(self) -> bool:
        """True once the player has no funds left."""
        return self.balance <= 0

    @property
    def profit_loss(self) -> int:
        return self.balance - self.starting_balance

    def remaining_for(self, bets: Sequence[Bet]) -> int:
        """Funds still available for another bet in the round being built."""
        return self.balance - total_stake(bets)

    def play_round(self, bets: Sequence[Bet]) -> SettlementResult:
        """
        Settle a round and adopt its new balance.

        The balance is left untouched when settlement raises.
        """
        result = settle(self.balance, bets, self.rng)
        self.balance = result.new_balance
        self.history.append(result)

        logger.info(
            f"Round {len(self.history)}: {result.outcome} | "
            f"staked {result.total_stake} won {result.total_winnings} "
            f"balance {result.new_balance}"
        )
        if result.is_bust:
            logger.info("Balance exhausted")
        return result

    def get_statistics(self) -> Dict[str, float]:
        """Session statistics, amounts in pennies."""
        total_wagered = sum(r.total_stake for r in self.history)
        total_won = sum(r.total_winnings for r in self.history)
        biggest = max((b.payout for r in self.history for b in r.per_bet), default=0)

        return {
            'rounds': len(self.history),
            'starting_balance': self.starting_balance,
            'current_balance': self.balance,
            'profit_loss': self.profit_loss,
            'total_wagered': total_wagered,
            'total_won': total_won,
            'biggest_payout': biggest,
            'roi': self.profit_loss / self.starting_balance * 100
        }
