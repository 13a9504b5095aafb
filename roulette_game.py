#!/usr/bin/env python3
"""
European Roulette - terminal edition

Interactive roulette table for the terminal. The player starts with a
bankroll, places one or more bets per round (straight number, color,
odd/even, low/high, dozen or column) and the wheel settles them until the
money runs out or the player walks away.

All amounts are handled as integer pennies; ``money`` is the only place they
are turned into pounds for display.
"""

import argparse
import logging
import os
import random
import sys
import time
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from pathlib import Path
from typing import List, Optional, Sequence

from rich.align import Align
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from roulette_core.engine import GameSession, SettlementResult, total_stake
from roulette_core.evaluators import PAYOUTS
from roulette_core.models import (
    Bet, BetType, Color, ConfigurationError, GameConfig, InsufficientFundsError,
    InvalidBetError
)
from roulette_core.wheel import POCKETS, WHEEL_ORDER, color_of, wheel_position


logger = logging.getLogger(__name__)

COLOR_STYLES = {
    Color.RED: "bold red",
    Color.BLACK: "bold bright_black",
    Color.GREEN: "bold green",
}

BET_TYPE_PROMPT = "Choose bet type (number/color/odd_even/low_high/dozen/column): "

CHOICE_PROMPTS = {
    BetType.COLOR: ("Pick a color (red/black): ", ["red", "black"]),
    BetType.ODD_EVEN: ("Pick (odd/even): ", ["odd", "even"]),
    BetType.LOW_HIGH: ("Pick (low/high): ", ["low", "high"]),
    BetType.DOZEN: ("Pick dozen (1st/2nd/3rd): ", ["1st", "2nd", "3rd"]),
    BetType.COLUMN: ("Pick column (col1/col2/col3): ", ["col1", "col2", "col3"]),
}

LEGEND = [
    ("Col1 / Col2 / Col3", BetType.COLUMN),
    ("1-12 / 13-24 / 25-36 (dozens)", BetType.DOZEN),
    ("Low (1-18) / High (19-36)", BetType.LOW_HIGH),
    ("Odd / Even", BetType.ODD_EVEN),
    ("Red / Black", BetType.COLOR),
    ("Straight (single number)", BetType.NUMBER),
]


# ============================================================================
# MONEY
# ============================================================================

def money(pennies: int, signed: bool = False) -> str:
    """Format pennies as pounds, e.g. 12345 -> '£123.45'."""
    if pennies < 0:
        sign = "-"
    elif signed:
        sign = "+"
    else:
        sign = ""
    pounds, pence = divmod(abs(pennies), 100)
    return f"{sign}£{pounds}.{pence:02d}"


def parse_amount(text: str) -> int:
    """
    Parse an amount typed in pounds into pennies.

    Accepts "2.50", "3", "£4" and "1,5". Fractions of a penny round half up.

    Raises:
        InvalidBetError: If the text is not a positive amount
    """
    cleaned = text.strip().lstrip("£").replace(",", ".")
    try:
        value = Decimal(cleaned)
        if not value.is_finite():
            raise InvalidOperation
        pennies = int((value * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    except InvalidOperation:
        raise InvalidBetError(f"Invalid amount: {text!r}") from None

    if pennies <= 0:
        raise InvalidBetError("Amount must be positive")
    return pennies


# ============================================================================
# GAME
# ============================================================================

class RouletteGame:
    """Interactive session loop: collects bets, spins and reports results."""

    def __init__(
        self,
        config: GameConfig,
        console: Optional[Console] = None,
        rng: Optional[random.Random] = None,
        fast: bool = False
    ):
        """
        Initialize the game.

        Args:
            config: Configuration object
            console: Console to talk to, a new one when omitted
            rng: Random source for the wheel
            fast: Use the short spin animation delay
        """
        self.config = config
        self.console = console or Console(no_color=not config.use_color, highlight=False)
        self.session = GameSession(config.starting_balance, rng or random.Random())
        self.spin_delay = config.fast_spin_delay if fast else config.spin_delay
        self.logger = logging.getLogger(self.__class__.__name__)

    # ------------------------------------------------------------------
    # Main loop
    # ------------------------------------------------------------------

    def run(self) -> None:
        """Run rounds until the player quits or runs out of funds."""
        self.console.print(Panel.fit(
            "[bold cyan]European Roulette[/bold cyan]\n"
            "[dim]Single zero, straight-up pays 35:1[/dim]",
            border_style="cyan"
        ))

        while True:
            try:
                if self.session.is_over:
                    self.console.print("[bold red]Game Over - you're out of funds[/bold red]")
                    break

                self.console.print(f"Current balance: [cyan]{money(self.session.balance)}[/cyan]")
                answer = self.console.input(
                    "Type '1' to play roulette or anything else to quit: "
                ).strip()

                if answer != "1":
                    self.console.print("OK bye bye")
                    break

                self.play_round()

            except KeyboardInterrupt:
                self.console.print("\n[yellow]Interrupted by user.[/yellow]")
                break
            except EOFError:
                break

        self._display_final_summary()

    def play_round(self) -> Optional[SettlementResult]:
        """
        Play one round against the current balance.

        Returns:
            The settlement, or None if the round was not played
        """
        self._display_table()

        bets = self._collect_bets()
        if not bets:
            self.console.print("No bets placed. Balance unchanged.")
            return None

        self._display_bets(bets)

        try:
            result = self.session.play_round(bets)
        except (InsufficientFundsError, InvalidBetError) as e:
            self.console.print(f"[red]ERROR: {escape(str(e))}[/red]")
            self.console.print("Round rejected. Balance unchanged.")
            self.logger.error(str(e))
            return None

        self._spin_animation(result.outcome_number)
        self._display_result(result)
        return result

    # ------------------------------------------------------------------
    # Bet collection
    # ------------------------------------------------------------------

    def _collect_bets(self) -> List[Bet]:
        """Collect bets until the player stops or the round's funds run out."""
        bets: List[Bet] = []

        while True:
            bets.append(self._collect_bet(self.session.remaining_for(bets)))

            if self.session.remaining_for(bets) <= 0:
                self.console.print("You've used all available funds for this round.")
                break

            if not self._ask_yes_no("Add another bet? (y/n): "):
                break

        return bets

    def _collect_bet(self, remaining: int) -> Bet:
        """Prompt for one bet whose stake fits in ``remaining``."""
        bet_type = BetType(self._ask_one_of(BET_TYPE_PROMPT, [t.value for t in BetType]))

        if bet_type is BetType.NUMBER:
            choice = str(self._ask_int_in_range("Pick a number (0-36): ", 0, 36))
        else:
            prompt, choices = CHOICE_PROMPTS[bet_type]
            choice = self._ask_one_of(prompt, choices)

        stake = self._ask_stake(remaining)
        return Bet.create(bet_type, choice, stake, available=remaining)

    def _ask_one_of(self, prompt: str, choices: Sequence[str]) -> str:
        while True:
            answer = self.console.input(prompt).strip().lower()
            if answer in choices:
                return answer
            self.console.print(f"[red]invalid input, please enter one of: {', '.join(choices)}[/red]")

    def _ask_int_in_range(self, prompt: str, low: int, high: int) -> int:
        while True:
            answer = self.console.input(prompt).strip()
            if answer.isascii() and answer.isdigit() and low <= int(answer) <= high:
                return int(answer)
            self.console.print("[red]invalid input[/red]")

    def _ask_yes_no(self, prompt: str) -> bool:
        while True:
            answer = self.console.input(prompt).strip().lower()
            if answer in ("y", "yes"):
                return True
            if answer in ("n", "no"):
                return False
            self.console.print("[red]Please enter y/n.[/red]")

    def _ask_stake(self, remaining: int) -> int:
        """Prompt for a stake in pounds; returns pennies within ``remaining``."""
        while True:
            answer = self.console.input(f"Stake £ (available {money(remaining)}): ")
            try:
                pennies = parse_amount(answer)
            except InvalidBetError:
                pennies = 0

            if 0 < pennies <= remaining:
                return pennies
            self.console.print("[red]Invalid amount. Must be > 0 and <= available.[/red]")

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def _pocket(self, number: int) -> Text:
        return Text(f"{number:2d}", style=COLOR_STYLES[color_of(number)])

    def _print_centered(self, renderable) -> None:
        """Print a renderable centered within the configured table width."""
        self.console.print(Align.center(renderable), width=self.config.table_width)

    def _display_table(self) -> None:
        """Show the betting layout and the payout legend."""
        table = Table(title="Roulette Table", show_lines=False)
        for name in ("Col1", "Col2", "Col3"):
            table.add_column(name, justify="center")

        table.add_row("", self._pocket(0), "", end_section=True)
        for row in range(1, 13):
            table.add_row(*(self._pocket(3 * row - offset) for offset in (2, 1, 0)))

        legend = Table(title="Types of play & payouts", show_header=False, box=None, padding=(0, 1))
        legend.add_column(style="dim")
        legend.add_column(justify="right", style="cyan")
        for label, bet_type in LEGEND:
            legend.add_row(label, f"{PAYOUTS[bet_type]}:1")

        self.console.print()
        self._print_centered(table)
        self._print_centered(legend)
        self.console.print()

    def _display_bets(self, bets: Sequence[Bet]) -> None:
        table = Table(title="Your bets this round")
        table.add_column("Type")
        table.add_column("Choice")
        table.add_column("Stake", justify="right")

        for bet in bets:
            table.add_row(bet.bet_type.value, bet.choice, money(bet.stake))

        table.caption = f"Total stake: {money(total_stake(bets))}"
        self._print_centered(table)

    def _spin_animation(self, final_number: int) -> None:
        """Roll along the wheel and stop on the drawn number."""
        hops = self.session.rng.randint(self.config.min_spin_hops, self.config.max_spin_hops)
        start = (wheel_position(final_number) - hops) % POCKETS

        self.console.print("Spinning the wheel...")
        for step in range(hops + 1):
            number = WHEEL_ORDER[(start + step) % POCKETS]
            color = color_of(number)
            tick = f"[{number:2d} {color.value:>5}]"

            if step == hops:
                self.console.print(Text(tick, style=COLOR_STYLES[color]))
            else:
                self.console.print(Text(tick, style="dim"), Text(" -> ", style="dim"), sep="", end="")
                time.sleep(self.spin_delay)

    def _display_result(self, result: SettlementResult) -> None:
        header = Text("\nResult: ", style="bold")
        header.append(str(result.outcome), style=COLOR_STYLES[result.outcome_color])
        self.console.print(header)

        table = Table(show_header=True, box=None, padding=(0, 1))
        table.add_column("Bet")
        table.add_column("Choice")
        table.add_column("Stake", justify="right")
        table.add_column("Net", justify="right")
        table.add_column("Payout", justify="right")

        for bet_result in result.per_bet:
            style = "green" if bet_result.won else "dim"
            table.add_row(
                bet_result.bet.bet_type.value,
                bet_result.bet.choice,
                money(bet_result.bet.stake),
                f"x{bet_result.multiplier}",
                money(bet_result.payout),
                style=style,
            )
        self.console.print(table)

        net_color = "green" if result.net >= 0 else "red"
        self.console.print(
            f"\nSummary: Staked {money(result.total_stake)} | "
            f"Returned {money(result.gross_return)} | "
            f"Net [{net_color}]{money(result.net, signed=True)}[/{net_color}] | "
            f"New balance [cyan]{money(result.new_balance)}[/cyan]\n"
        )

    def _display_final_summary(self) -> None:
        """Display final session summary."""
        stats = self.session.get_statistics()

        self.console.print("\n" + "=" * 70)
        self.console.print("[bold cyan]SESSION SUMMARY[/bold cyan]")
        self.console.print("=" * 70)

        summary = Table(show_header=True, box=None)
        summary.add_column("Metric", style="bold")
        summary.add_column("Value", justify="right")

        profit_loss = stats['profit_loss']
        pl_color = "green" if profit_loss >= 0 else "red"

        summary.add_row("Rounds played", str(stats['rounds']))
        summary.add_row("Starting balance", money(stats['starting_balance']))
        summary.add_row("Final balance", money(stats['current_balance']))
        summary.add_row("Result", f"[{pl_color}]{money(profit_loss, signed=True)}[/{pl_color}]")
        summary.add_row("ROI", f"[{pl_color}]{stats['roi']:+.2f}%[/{pl_color}]")
        summary.add_row("Total staked", money(stats['total_wagered']))
        summary.add_row("Total won", money(stats['total_won']))
        summary.add_row("Biggest payout", money(stats['biggest_payout']))

        self.console.print(summary)
        self.console.print("\n[dim]Thanks for playing![/dim]")


# ============================================================================
# MAIN ENTRY POINT
# ============================================================================

def setup_logging(level: int = logging.WARNING) -> None:
    """Setup logging configuration."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)]
    )


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Play European roulette in the terminal.")
    parser.add_argument("--seed", type=int, default=None,
                        help="RNG seed for a reproducible game (0 = time-based)")
    parser.add_argument("--fast", action="store_true", help="faster spin animation")
    parser.add_argument("--no-color", action="store_true", help="disable colored output")
    parser.add_argument("--balance", type=str, default=None,
                        help="starting balance in pounds, e.g. 250.00")
    parser.add_argument("--config", type=Path, default=Path("config.json"),
                        help="path of the JSON config file (default: config.json)")
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="log round results (-v) or every bet (-vv)")
    return parser.parse_args(argv)


def load_config(args: argparse.Namespace) -> GameConfig:
    """
    Load the config file, writing defaults when it is missing,
    then apply command line overrides.

    Raises:
        ConfigurationError: If the file or an override is invalid
    """
    config_path: Path = args.config
    if config_path.exists():
        config = GameConfig.from_file(config_path)
    else:
        config = GameConfig()
        try:
            config.save_to_file(config_path)
        except OSError as e:
            logger.warning(f"Could not write default config to {config_path}: {e}")

    if args.seed is not None:
        config.seed = args.seed or None
    if args.no_color or os.environ.get("NO_COLOR"):
        config.use_color = False
    if args.balance is not None:
        try:
            config.starting_balance = parse_amount(args.balance)
        except InvalidBetError as e:
            raise ConfigurationError(f"Invalid --balance: {e}") from None

    return config


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    level = {0: logging.WARNING, 1: logging.INFO}.get(args.verbose, logging.DEBUG)
    setup_logging(level)

    try:
        config = load_config(args)
    except ConfigurationError as e:
        Console(stderr=True).print(f"[red]Configuration error: {escape(str(e))}[/red]")
        return 2

    rng = random.Random(config.seed) if config.seed else random.Random()
    game = RouletteGame(config, rng=rng, fast=args.fast)
    game.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
