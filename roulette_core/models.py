"""
Data models for the European roulette game.
Immutable, validated dataclasses for wagers plus the game configuration.
"""

import json
import logging
import math
from dataclasses import asdict, dataclass, fields
from enum import Enum
from pathlib import Path
from typing import Dict, FrozenSet, Optional, Union


logger = logging.getLogger(__name__)


class Color(Enum):
    """Pocket colors."""
    RED = "red"
    BLACK = "black"
    GREEN = "green"


class BetType(Enum):
    """Wager categories accepted at the table."""
    NUMBER = "number"        # straight up, 35:1
    COLOR = "color"          # 1:1
    ODD_EVEN = "odd_even"    # 1:1
    LOW_HIGH = "low_high"    # 1:1
    DOZEN = "dozen"          # 2:1
    COLUMN = "column"        # 2:1


VALID_CHOICES: Dict[BetType, FrozenSet[str]] = {
    BetType.NUMBER: frozenset(str(n) for n in range(37)),
    BetType.COLOR: frozenset({"red", "black"}),
    BetType.ODD_EVEN: frozenset({"odd", "even"}),
    BetType.LOW_HIGH: frozenset({"low", "high"}),
    BetType.DOZEN: frozenset({"1st", "2nd", "3rd"}),
    BetType.COLUMN: frozenset({"col1", "col2", "col3"}),
}


# ============================================================================
# EXCEPTIONS
# ============================================================================

class RouletteError(Exception):
    """Base exception for roulette errors."""
    pass


class InvalidNumberError(RouletteError, ValueError):
    """Raised for a wheel number outside 0-36."""
    pass


class InvalidBetError(RouletteError, ValueError):
    """Raised when a wager has a malformed choice or stake."""
    pass


class UnknownBetTypeError(InvalidBetError):
    """Raised when a wager names a type outside the fixed set."""
    pass


class InsufficientFundsError(RouletteError):
    """Raised when the stakes of a round exceed the available balance."""
    pass


class ConfigurationError(RouletteError):
    """Raised when configuration is invalid."""
    pass


# ============================================================================
# BET
# ============================================================================

def parse_bet_type(value: Union[str, BetType]) -> BetType:
    """
    Resolve a bet type from its name.

    Raises:
        UnknownBetTypeError: If the name is not one of the six categories
    """
    if isinstance(value, BetType):
        return value
    try:
        return BetType(str(value).strip().lower())
    except ValueError:
        raise UnknownBetTypeError(f"Unknown bet type: {value!r}") from None


def _normalise_choice(bet_type: BetType, choice) -> str:
    text = str(choice).strip().lower()
    if bet_type is BetType.NUMBER and text.isascii() and text.isdigit():
        # "07" and "7" name the same pocket
        text = str(int(text))
    return text


@dataclass(frozen=True)
class Bet:
    """
    A single wager placed in a round.

    Stakes are integer pennies. Instances can only hold one of the six known
    bet types with a choice valid for it.
    """
    bet_type: BetType
    choice: str
    stake: int

    def __post_init__(self):
        if not isinstance(self.bet_type, BetType):
            raise UnknownBetTypeError(f"Unknown bet type: {self.bet_type!r}")

        if self.choice not in VALID_CHOICES[self.bet_type]:
            raise InvalidBetError(
                f"Invalid choice {self.choice!r} for {self.bet_type.value} bet"
            )

        # bool is an int subclass; True is not a stake
        if isinstance(self.stake, bool) or not isinstance(self.stake, int):
            raise InvalidBetError(f"Stake must be a whole number of pennies: {self.stake!r}")
        if self.stake <= 0:
            raise InvalidBetError(f"Stake must be positive: {self.stake}")

    @classmethod
    def create(
        cls,
        bet_type: Union[str, BetType],
        choice,
        stake: int,
        available: Optional[int] = None
    ) -> 'Bet':
        """
        Build a validated bet from collector input.

        Args:
            bet_type: Bet type name ("number", "color", ...) or BetType
            choice: Type-specific choice, e.g. "17", "red", "2nd", "col3"
            stake: Stake in pennies
            available: Funds still available in the round, if limited

        Returns:
            Bet instance

        Raises:
            UnknownBetTypeError: If the type is not recognised
            InvalidBetError: If the choice or stake is invalid
        """
        resolved = parse_bet_type(bet_type)
        bet = cls(resolved, _normalise_choice(resolved, choice), stake)

        if available is not None and bet.stake > available:
            raise InvalidBetError(
                f"Stake {bet.stake} exceeds available funds {available}"
            )
        return bet

    @property
    def label(self) -> str:
        return f"{self.bet_type.value} {self.choice}"


# ============================================================================
# CONFIGURATION
# ============================================================================

def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass
class GameConfig:
    """Game configuration."""
    starting_balance: int = 10000  # £100.00
    spin_delay: float = 0.12
    fast_spin_delay: float = 0.01
    min_spin_hops: int = 14
    max_spin_hops: int = 21
    table_width: int = 80
    use_color: bool = True
    seed: Optional[int] = None  # None: time-based

    def __post_init__(self):
        if not _is_int(self.starting_balance):
            raise ConfigurationError("starting_balance must be an integer number of pennies")
        for name in ("spin_delay", "fast_spin_delay"):
            value = getattr(self, name)
            if not (_is_int(value) or isinstance(value, float)) or not math.isfinite(value):
                raise ConfigurationError(f"{name} must be a number of seconds")
        for name in ("min_spin_hops", "max_spin_hops", "table_width"):
            if not _is_int(getattr(self, name)):
                raise ConfigurationError(f"{name} must be an integer")
        if not isinstance(self.use_color, bool):
            raise ConfigurationError("use_color must be true or false")
        if self.seed is not None and not _is_int(self.seed):
            raise ConfigurationError("seed must be an integer or null")

        if self.starting_balance <= 0:
            raise ConfigurationError("starting_balance must be positive")
        if self.spin_delay < 0 or self.fast_spin_delay < 0:
            raise ConfigurationError("spin delays cannot be negative")
        if not 0 < self.min_spin_hops <= self.max_spin_hops:
            raise ConfigurationError("spin hops must satisfy 0 < min_spin_hops <= max_spin_hops")
        if self.table_width <= 0:
            raise ConfigurationError("table_width must be positive")

    @classmethod
    def from_file(cls, file_path: Path) -> 'GameConfig':
        """Load configuration from JSON file."""
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except FileNotFoundError:
            logger.warning(f"Config file not found: {file_path}. Using defaults.")
            return cls()
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON in config file: {e}")

        if not isinstance(data, dict):
            raise ConfigurationError("Config file must contain a JSON object")

        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigurationError(f"Unknown config keys: {', '.join(sorted(unknown))}")

        return cls(**data)

    def save_to_file(self, file_path: Path) -> None:
        """Save configuration to JSON file."""
        with open(file_path, 'w', encoding='utf-8') as f:
            json.dump(self.to_dict(), f, indent=2, ensure_ascii=False)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return asdict(self)
