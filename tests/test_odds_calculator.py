"""Unit tests for the inverse-frequency odds calculator.

Test Strategy:
1. Formula: (window + slots) / (1 + count) per slot
2. Window: only the newest `window_size` outcomes count
3. Purity: same input, same output, input untouched
4. Helpers used by placement and the board (price, streak, hot slot)
"""
import copy

import pytest

from betpool.services.odds_calculator import compute_odds, price_for_slot, streak_for_slot, hot_slot

SLOTS = ["08:00", "09:00", "10:00", "11:00", "12:00", "13:00"]
WINDOW = 7


def outcomes(*slots):
    """History newest first, one day apart."""
    return [{"date": f"2025-03-{20 - i:02d}", "slot": slot} for i, slot in enumerate(slots)]


class TestComputeOdds:
    """Test suite for compute_odds."""

    def test_empty_history_gives_every_slot_the_top_multiplier(self):
        odds = compute_odds([], SLOTS, WINDOW)

        assert list(odds) == SLOTS
        assert all(value == 13.0 for value in odds.values())

    def test_multiplier_shrinks_with_frequency(self):
        history = outcomes("09:00", "09:00", "09:00", "10:00", "11:00", "09:00", "10:00")

        odds = compute_odds(history, SLOTS, WINDOW)

        assert odds["09:00"] == pytest.approx(13 / 5)
        assert odds["10:00"] == pytest.approx(13 / 3)
        assert odds["11:00"] == pytest.approx(13 / 2)
        assert odds["08:00"] == 13.0

    def test_unseen_slot_has_the_maximum_multiplier(self):
        history = outcomes("08:00", "09:00", "10:00", "11:00", "12:00", "08:00", "09:00", "10:00")

        odds = compute_odds(history, SLOTS, WINDOW)

        assert odds["13:00"] == max(odds.values())

    def test_outcomes_beyond_the_window_are_ignored(self):
        recent = ["10:00", "10:00", "11:00", "09:00", "10:00", "12:00", "08:00"]
        history_a = outcomes(*recent, "13:00", "13:00", "13:00")
        history_b = outcomes(*recent, "09:00", "10:00")

        assert compute_odds(history_a, SLOTS, WINDOW) == compute_odds(history_b, SLOTS, WINDOW)

    def test_is_pure(self):
        history = outcomes("09:00", "10:00", "10:00")
        snapshot = copy.deepcopy(history)

        first = compute_odds(history, SLOTS, WINDOW)
        second = compute_odds(history, SLOTS, WINDOW)

        assert first == second
        assert history == snapshot

    def test_unknown_labels_do_not_count(self):
        odds = compute_odds(outcomes("07:30", "09:00"), SLOTS, WINDOW)

        assert set(odds) == set(SLOTS)
        assert odds["09:00"] == pytest.approx(13 / 2)

    def test_accepts_rows_with_a_slot_attribute(self):
        class Row:
            def __init__(self, slot):
                self.slot = slot

        odds = compute_odds([Row("12:00"), Row("12:00")], SLOTS, WINDOW)

        assert odds["12:00"] == pytest.approx(13 / 3)

    def test_margin_constant_replaces_the_window_in_the_numerator(self):
        odds = compute_odds(outcomes("09:00"), SLOTS, WINDOW, margin_constant=4)

        assert odds["09:00"] == pytest.approx(10 / 2)
        assert odds["08:00"] == 10.0


class TestBoardHelpers:

    def test_price_is_rounded_to_cents(self):
        assert price_for_slot({"09:00": 13 / 3}, "09:00") == 4.33

    def test_price_falls_back_to_default(self):
        assert price_for_slot({}, "09:00") == 1.5
        assert price_for_slot({}, "09:00", default=2.0) == 2.0

    def test_streak_counts_consecutive_recent_outcomes(self):
        history = outcomes("11:00", "11:00", "09:00", "11:00")

        assert streak_for_slot(history, "11:00") == 2
        assert streak_for_slot(history, "09:00") == 0

    def test_hot_slot_is_lowest_multiplier(self):
        odds = compute_odds(outcomes("10:00", "10:00", "09:00"), SLOTS, WINDOW)

        assert hot_slot(odds) == "10:00"
        assert hot_slot({}) is None
