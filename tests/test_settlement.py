"""
Unit Tests: Settlement Engine

Test cases:
- No winners: whole pot rolls over
- Winners: payout at stamped odds minus house margin, rollover absorbs the gap
- Reversal restores rows and takes back the rollover change
- Rounding to cents
"""
from dataclasses import dataclass

import pytest

from betpool.services.settlement import (
    settle,
    unsettle,
    apply_rollover,
    round_money,
    winner_payout,
    WagerUpdate,
)

DATE = "2025-03-14"
MARGIN = 0.12


@dataclass
class Row:
    id: str
    amount: float
    slot: str
    odds: float = 2.0
    status: str = "open"
    payout: float = 0.0


def apply(rows, result):
    """Write a settlement result back onto rows, the way the service does."""
    by_id = {r.id: r for r in rows}
    for update in result.updates:
        by_id[update.id].status = update.status
        by_id[update.id].payout = update.payout


class TestSettle:

    def test_no_open_wagers_is_a_noop(self):
        rows = [Row("a", 10, "09:00", status="won", payout=17.6)]

        result = settle(DATE, "09:00", rows, MARGIN)

        assert result.updates == []
        assert result.rollover_delta == 0

    def test_no_winners_rolls_the_whole_pot_over(self):
        rows = [Row("a", 10, "08:00"), Row("b", 5, "09:00")]

        result = settle(DATE, "10:00", rows, MARGIN)

        assert result.updates == [
            WagerUpdate(id="a", status="lost", payout=0.0),
            WagerUpdate(id="b", status="lost", payout=0.0),
        ]
        assert result.rollover_delta == 15

    def test_single_winner_with_margin(self):
        rows = [Row("a", 10, "10:00", odds=2.0)]

        result = settle(DATE, "10:00", rows, MARGIN)

        assert result.updates == [WagerUpdate(id="a", status="won", payout=17.6)]
        assert result.rollover_delta == pytest.approx(-7.6)
        assert round_money(result.rollover_delta) == result.rollover_delta

    def test_winners_and_losers(self):
        rows = [
            Row("a", 10, "10:00", odds=4.33),
            Row("b", 5, "10:00", odds=13.0),
            Row("c", 20, "09:00", odds=2.6),
        ]

        result = settle(DATE, "10:00", rows, MARGIN)
        statuses = {u.id: (u.status, u.payout) for u in result.updates}

        # 10 * 4.33 * 0.88 = 38.104 ; 5 * 13 * 0.88 = 57.2
        assert statuses["a"] == ("won", 38.1)
        assert statuses["b"] == ("won", 57.2)
        assert statuses["c"] == ("lost", 0.0)
        assert result.total_paid == 95.3
        assert result.rollover_delta == pytest.approx(35 - 95.3)

    def test_settled_wagers_are_left_alone(self):
        rows = [Row("a", 10, "10:00"), Row("b", 10, "10:00", status="won", payout=17.6)]

        result = settle(DATE, "10:00", rows, MARGIN)

        assert [u.id for u in result.updates] == ["a"]

    def test_payouts_and_delta_carry_at_most_two_decimals(self):
        rows = [Row("a", 3.33, "11:00", odds=3.17), Row("b", 7.77, "12:00", odds=1.91)]

        result = settle(DATE, "11:00", rows, 0.125)

        for value in [u.payout for u in result.updates] + [result.rollover_delta]:
            assert round(value, 2) == value

    def test_payout_never_negative(self):
        assert winner_payout(10, 2.0, 1.5) == 0.0


class TestUnsettle:

    def test_round_trip_restores_rows_and_rollover(self):
        rows = [
            Row("a", 10, "10:00", odds=2.0),
            Row("b", 5, "09:00", odds=6.5),
            Row("c", 7.5, "10:00", odds=4.33),
        ]
        applied = settle(DATE, "10:00", rows, MARGIN)
        apply(rows, applied)

        reversed_ = unsettle(DATE, rows)
        apply(rows, reversed_)

        assert reversed_.rollover_delta == -applied.rollover_delta
        assert all(r.status == "open" and r.payout == 0 for r in rows)

    def test_round_trip_without_winners(self):
        rows = [Row("a", 10, "08:00"), Row("b", 5, "09:00")]
        applied = settle(DATE, "10:00", rows, MARGIN)
        apply(rows, applied)

        reversed_ = unsettle(DATE, rows)

        assert reversed_.rollover_delta == -15
        assert {u.status for u in reversed_.updates} == {"open"}

    def test_open_wagers_are_not_touched(self):
        rows = [Row("a", 10, "10:00", status="won", payout=17.6), Row("late", 4, "10:00")]

        result = unsettle(DATE, rows)

        assert [u.id for u in result.updates] == ["a"]
        assert result.rollover_delta == pytest.approx(7.6)

    def test_reversal_uses_persisted_payouts(self):
        # a hand-edited payout shifts the reversal by the same amount
        rows = [Row("a", 10, "10:00", status="won", payout=20.0)]

        assert unsettle(DATE, rows).rollover_delta == 10.0


class TestRollover:

    def test_floor_at_zero(self):
        assert apply_rollover(5.0, -7.6) == 0.0

    def test_adds_and_rounds(self):
        assert apply_rollover(0.1, 0.2) == 0.3
        assert apply_rollover(15.0, -7.6) == 7.4
