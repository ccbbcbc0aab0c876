"""
Settlement of a day's wagers against the recorded outcome, and its reversal.

Both functions are pure: they take wager rows already loaded by the caller and
return the status/payout each row should get plus the signed amount to add to
the rollover. Persisting the rows and applying the delta (floored at zero) is
the caller's job.

Winners are paid off the odds stamped on the wager when it was placed, minus
the house margin. That does not balance against the pot, so whatever is left
over (or missing) moves the rollover:

    rollover_delta = pot - sum(payouts)

Reversal recomputes that same quantity from the settled rows instead of
storing it, so hand-edited payouts would make a reversal drift.
"""
from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Iterable, List, Protocol

from betpool.models import WAGER_OPEN, WAGER_WON, WAGER_LOST

CENT = Decimal("0.01")


class SettleableWager(Protocol):
    id: Any
    amount: float
    slot: str
    odds: float
    status: str
    payout: float


@dataclass(frozen=True)
class WagerUpdate:
    """New status and payout for one wager row."""
    id: Any
    status: str
    payout: float


@dataclass
class SettlementResult:
    """Rows to persist and the signed change to the rollover."""
    date: str
    updates: List[WagerUpdate] = field(default_factory=list)
    rollover_delta: float = 0.0

    @property
    def winners(self) -> List[WagerUpdate]:
        return [u for u in self.updates if u.status == WAGER_WON]

    @property
    def total_paid(self) -> float:
        return round_money(sum(u.payout for u in self.winners))


def round_money(value: float) -> float:
    """Round to cents, halves away from zero."""
    return float(Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP))


def winner_payout(amount: float, odds: float, house_margin: float) -> float:
    """Gross return at the stamped odds, less the house cut, never negative."""
    gross = amount * odds
    cut = gross * house_margin
    return max(0.0, round_money(gross - cut))


def settle(
    date: str,
    winning_slot: str,
    wagers: Iterable[SettleableWager],
    house_margin: float,
) -> SettlementResult:
    """
    Resolve the open wagers of ``date`` against ``winning_slot``.

    Wagers that are not open are ignored; a date that was settled before must
    be reversed with :func:`unsettle` first.
    """
    open_wagers = [w for w in wagers if w.status == WAGER_OPEN]
    result = SettlementResult(date=date)
    if not open_wagers:
        return result

    winners = [w for w in open_wagers if w.slot == winning_slot]
    losers = [w for w in open_wagers if w.slot != winning_slot]
    pot = sum(w.amount for w in open_wagers)

    paid = 0.0
    for wager in winners:
        payout = winner_payout(wager.amount, wager.odds, house_margin)
        paid += payout
        result.updates.append(WagerUpdate(id=wager.id, status=WAGER_WON, payout=payout))

    for wager in losers:
        result.updates.append(WagerUpdate(id=wager.id, status=WAGER_LOST, payout=0.0))

    # no winners: the whole pot rolls over
    result.rollover_delta = round_money(pot - paid)
    return result


def unsettle(date: str, wagers: Iterable[SettleableWager]) -> SettlementResult:
    """
    Undo the settlement of ``date``: reopen every settled wager and take back
    the rollover change the settlement made.
    """
    settled = [w for w in wagers if w.status != WAGER_OPEN]
    result = SettlementResult(date=date)
    if not settled:
        return result

    pot = sum(w.amount for w in settled)
    paid = sum(w.payout for w in settled if w.status == WAGER_WON)

    result.updates = [WagerUpdate(id=w.id, status=WAGER_OPEN, payout=0.0) for w in settled]
    result.rollover_delta = -round_money(pot - paid)
    return result


def apply_rollover(current: float, delta: float) -> float:
    """New rollover balance after ``delta``, floored at zero."""
    return max(0.0, round_money(current + delta))
