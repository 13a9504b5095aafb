#!/usr/bin/env python3
"""
Tests for the terminal front end: money formatting, input parsing,
configuration loading and scripted play through the rich console.

Run with: python -m pytest test_roulette_game.py -v
"""

import io
import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from rich.console import Console

from roulette_core.models import BetType, ConfigurationError, GameConfig, InvalidBetError
from roulette_game import RouletteGame, load_config, money, parse_amount, parse_args
from test_roulette_core import ScriptedRandom


def make_game(draws, inputs, **config_overrides):
    """Build a game on an in-memory console with scripted draws and answers."""
    config = GameConfig(spin_delay=0, fast_spin_delay=0, **config_overrides)
    console = Console(file=io.StringIO(), width=120, no_color=True, highlight=False)
    game = RouletteGame(config, console=console, rng=ScriptedRandom(draws))
    input_patch = patch.object(console, "input", side_effect=inputs)
    return game, input_patch


def output_of(game):
    return game.console.file.getvalue()


class TestMoney(unittest.TestCase):
    """Test currency formatting."""

    def test_format(self):
        """Test pennies to pounds."""
        self.assertEqual(money(12345), "£123.45")
        self.assertEqual(money(10000), "£100.00")
        self.assertEqual(money(5), "£0.05")
        self.assertEqual(money(0), "£0.00")

    def test_signs(self):
        """Test negative and signed output."""
        self.assertEqual(money(-250), "-£2.50")
        self.assertEqual(money(250, signed=True), "+£2.50")
        self.assertEqual(money(-250, signed=True), "-£2.50")


class TestParseAmount(unittest.TestCase):
    """Test parsing typed amounts."""

    def test_valid_amounts(self):
        """Test amounts in pounds."""
        self.assertEqual(parse_amount("2.50"), 250)
        self.assertEqual(parse_amount("3"), 300)
        self.assertEqual(parse_amount(" £4 "), 400)
        self.assertEqual(parse_amount("1,5"), 150)
        self.assertEqual(parse_amount("0.10"), 10)

    def test_rounding(self):
        """Test fractions of a penny round half up."""
        self.assertEqual(parse_amount("0.005"), 1)
        self.assertEqual(parse_amount("1.234"), 123)

    def test_invalid_amounts(self):
        """Test rejected input."""
        for text in ("", "abc", "0", "-5", "0.001", "nan", "inf", "1e999"):
            with self.assertRaises(InvalidBetError, msg=text):
                parse_amount(text)


class TestConfigLoading(unittest.TestCase):
    """Test command line and config file handling."""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.path = Path(self.tmp.name) / "config.json"

    def tearDown(self):
        self.tmp.cleanup()

    def test_defaults_written_when_missing(self):
        """Test a missing config file is created."""
        args = parse_args(["--config", str(self.path)])
        config = load_config(args)

        self.assertTrue(self.path.exists())
        self.assertEqual(config.starting_balance, 10000)

    def test_overrides(self):
        """Test command line overrides."""
        args = parse_args([
            "--config", str(self.path), "--seed", "42", "--no-color", "--balance", "250.00",
        ])
        config = load_config(args)

        self.assertEqual(config.seed, 42)
        self.assertFalse(config.use_color)
        self.assertEqual(config.starting_balance, 25000)

    def test_seed_zero_is_time_based(self):
        """Test seed 0."""
        GameConfig(seed=5).save_to_file(self.path)
        config = load_config(parse_args(["--config", str(self.path), "--seed", "0"]))
        self.assertIsNone(config.seed)

    def test_no_color_environment(self):
        """Test the NO_COLOR convention."""
        with patch.dict(os.environ, {"NO_COLOR": "1"}):
            config = load_config(parse_args(["--config", str(self.path)]))
        self.assertFalse(config.use_color)

    def test_invalid_balance(self):
        """Test a bad --balance value."""
        with self.assertRaises(ConfigurationError):
            load_config(parse_args(["--config", str(self.path), "--balance", "lots"]))


class TestRouletteGame(unittest.TestCase):
    """Scripted play through the console."""

    def setUp(self):
        sleep_patch = patch("roulette_game.time.sleep")
        sleep_patch.start()
        self.addCleanup(sleep_patch.stop)

    def test_single_number_round(self):
        """Test a winning straight-up bet and quitting."""
        game, inputs = make_game([17, 14], ["1", "number", "17", "5", "n", "q"])
        with inputs:
            game.run()

        out = output_of(game)
        self.assertEqual(game.session.balance, 27000)
        self.assertIn("[17 black]", out)
        self.assertIn("x35", out)
        self.assertIn("New balance £270.00", out)
        self.assertIn("Net +£170.00", out)
        self.assertIn("OK bye bye", out)

    def test_reprompts_and_multiple_bets(self):
        """Test invalid answers are re-asked and bets accumulate."""
        answers = [
            "1",
            "roulette", "color", "green", "red", "abc", "500", "10",
            "maybe", "y",
            "dozen", "2nd", "90",
            "quit",
        ]
        game, inputs = make_game([14, 20], answers)
        with inputs as mocked:
            game.run()

        out = output_of(game)
        # red pays 1:1 on £10, second dozen pays 2:1 on £90
        self.assertEqual(game.session.balance, 19000)
        self.assertIn("invalid input", out)
        self.assertIn("Invalid amount", out)
        self.assertIn("Please enter y/n.", out)
        self.assertIn("You've used all available funds for this round.", out)
        self.assertEqual(mocked.call_count, len(answers))

    def test_non_ascii_digit_reprompts(self):
        """Test a superscript digit at the number prompt is asked again."""
        game, inputs = make_game([17, 14], ["1", "number", "\u00b2", "17", "5", "n", "q"])
        with inputs:
            game.run()

        self.assertIn("invalid input", output_of(game))
        self.assertEqual(game.session.balance, 27000)
        self.assertIn("OK bye bye", output_of(game))

    def test_stake_prompt_shows_remaining_funds(self):
        """Test the second bet is limited by what the first left over."""
        answers = ["1", "color", "black", "60", "y", "odd_even", "odd", "50", "40"]
        game, inputs = make_game([0, 14], answers)
        with inputs as mocked:
            game.run()

        prompts = [c.args[0] for c in mocked.call_args_list]
        self.assertIn("Stake £ (available £40.00): ", prompts)
        # zero: both outside bets lose
        self.assertEqual(game.session.balance, 0)

    def test_game_over(self):
        """Test the session ends when the balance is gone."""
        game, inputs = make_game([0, 14], ["1", "column", "col2", "10"], starting_balance=1000)
        with inputs:
            game.run()

        out = output_of(game)
        self.assertTrue(game.session.is_over)
        self.assertIn("Game Over - you're out of funds", out)
        self.assertIn("SESSION SUMMARY", out)

    def test_quit_immediately(self):
        """Test leaving before playing."""
        game, inputs = make_game([], ["no"])
        with inputs:
            game.run()

        self.assertEqual(game.session.balance, 10000)
        self.assertEqual(game.session.history, [])

    def test_interrupt_mid_round(self):
        """Test Ctrl-C while betting leaves the balance untouched."""
        game, inputs = make_game([], ["1", "color", KeyboardInterrupt()])
        with inputs:
            game.run()

        self.assertEqual(game.session.balance, 10000)
        self.assertIn("Interrupted by user.", output_of(game))

    def test_end_of_input(self):
        """Test EOF ends the session with a summary."""
        game, inputs = make_game([], [EOFError()])
        with inputs:
            game.run()

        self.assertIn("SESSION SUMMARY", output_of(game))

    def test_table_shows_layout_and_payouts(self):
        """Test the betting table."""
        game, _ = make_game([], [])
        game._display_table()

        out = output_of(game)
        self.assertIn("Roulette Table", out)
        self.assertIn("35:1", out)
        self.assertIn("36", out)

    def test_table_centered_in_configured_width(self):
        """Test the layout is centered within table_width."""
        game, _ = make_game([], [], table_width=60)
        game._display_table()

        lines = [line for line in output_of(game).splitlines() if line.strip()]
        self.assertTrue(lines)
        self.assertTrue(all(len(line.rstrip()) <= 60 for line in lines))
        title = next(line for line in lines if "Roulette Table" in line)
        self.assertGreater(len(title) - len(title.lstrip()), 0)

    def test_collect_bet_builds_validated_bet(self):
        """Test a single collected bet."""
        game, inputs = make_game([], ["LOW_HIGH", "High", "2.50"])
        with inputs:
            bet = game._collect_bet(1000)

        self.assertEqual(bet.bet_type, BetType.LOW_HIGH)
        self.assertEqual(bet.choice, "high")
        self.assertEqual(bet.stake, 250)


if __name__ == '__main__':
    unittest.main(verbosity=2)
