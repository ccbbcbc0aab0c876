"""
Service tying the odds and settlement core to the database.

Every public method runs inside one request and commits once, so the rollover
read-modify-write and the wager row updates land together.
"""
import logging
import math
import uuid
from datetime import date as date_type, datetime, timezone
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from betpool.core import metrics
from betpool.core.config import Settings, settings as default_settings
from betpool.core.errors import InvalidPayloadError, NotFoundError
from betpool.models import Wager, WAGER_OPEN
from betpool.repositories import WagerRepository, OutcomeRepository, MetaRepository
from betpool.services.odds_calculator import compute_odds, price_for_slot, streak_for_slot, hot_slot
from betpool.services.settlement import settle, unsettle, apply_rollover, round_money, SettlementResult

logger = logging.getLogger(__name__)


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _parse_date(value) -> str:
    """Normalise a date or a YYYY-MM-DD string; anything else is rejected whole."""
    if isinstance(value, date_type):
        return value.isoformat()
    if not value or not isinstance(value, str):
        raise InvalidPayloadError()
    try:
        return datetime.strptime(value, "%Y-%m-%d").date().isoformat()
    except ValueError:
        raise InvalidPayloadError()


class PoolService:
    """Betting pool operations: pricing, placement, outcomes and settlement."""

    def __init__(self, db: Session, settings: Optional[Settings] = None):
        self.db = db
        self.settings = settings or default_settings
        self.wagers = WagerRepository(db)
        self.outcomes = OutcomeRepository(db)
        self.meta = MetaRepository(db)

    # ========================================================================
    # Read side
    # ========================================================================

    def get_history(self, limit: Optional[int] = None) -> List[dict]:
        """Recorded outcomes, newest date first."""
        rows = self.outcomes.recent(limit or self.settings.HISTORY_LIMIT)
        return [row.to_dict() for row in rows]

    def current_odds(self, history: Optional[List[dict]] = None) -> Dict[str, float]:
        if history is None:
            history = self.get_history()
        return compute_odds(
            history,
            self.settings.SLOT_OPTIONS,
            self.settings.HISTORY_WINDOW,
        )

    def get_rollover(self) -> float:
        return self.meta.get_rollover()

    def compose_state(self) -> dict:
        """Everything the board needs in one payload."""
        history = self.get_history()
        odds = self.current_odds(history)
        rollover = self.get_rollover()
        return {
            "history": history,
            "bets": [w.to_dict() for w in self.wagers.find_newest_first()],
            "rollover": rollover,
            "odds": odds,
            "stats": {
                "streak_slot": self.settings.STREAK_SLOT,
                "streak": streak_for_slot(history, self.settings.STREAK_SLOT),
                "hot_slot": hot_slot(odds),
                "pot": round_money(self.wagers.open_stake_total() + rollover),
                "history_display": history[:self.settings.HISTORY_DISPLAY],
            },
        }

    # ========================================================================
    # Wagers
    # ========================================================================

    def place_wager(
        self,
        bettor: str,
        amount: float,
        slot: str,
        date,
        topic: Optional[str] = None,
    ) -> Wager:
        """
        Place a wager priced at the odds of this moment.

        The price is frozen on the row; later outcomes never change it.
        """
        bettor = (bettor or "").strip()
        if not bettor or slot not in self.settings.SLOT_OPTIONS:
            raise InvalidPayloadError()
        if amount is None or not math.isfinite(amount):
            raise InvalidPayloadError()
        stake = round_money(amount)
        # a stake that rounds to zero cents is no stake
        if stake <= 0:
            raise InvalidPayloadError()
        wager_date = _parse_date(date)

        odds = price_for_slot(self.current_odds(), slot, self.settings.DEFAULT_ODDS)
        wager = self.wagers.create(
            id=str(uuid.uuid4()),
            bettor=bettor,
            amount=stake,
            slot=slot,
            date=wager_date,
            odds=odds,
            status=WAGER_OPEN,
            payout=0.0,
            created_at=_utc_now_iso(),
            topic=(topic or "").strip() or None,
        )
        self.wagers.save()

        metrics.record_wager_placed(slot)
        logger.info(
            f"Wager {wager.id} placed by {bettor}: {wager.amount} on {slot} for {wager_date} at x{odds}",
            extra={"wager_id": wager.id, "bettor": bettor, "amount": wager.amount,
                   "slot": slot, "date": wager_date, "odds": odds},
        )
        return wager

    def delete_wager(self, wager_id: str) -> None:
        """
        Remove a wager.

        A settled wager's date is reversed first and re-settled without it, so
        its stake stops counting towards the rollover.
        """
        wager = self.wagers.find_by_id(wager_id)
        if wager is None:
            raise NotFoundError(f"Wager {wager_id} not found")

        wager_date = wager.date
        was_settled = wager.status != WAGER_OPEN
        if was_settled:
            self._reverse_date(wager_date)

        self.wagers.delete_instance(wager)
        self.wagers.flush()

        if was_settled:
            outcome = self.outcomes.find_by_date(wager_date)
            if outcome is not None:
                self._settle_date(wager_date, outcome.slot)

        self.wagers.save()
        metrics.record_wager_removed()
        logger.info(f"Wager {wager_id} removed ({wager_date})", extra={"wager_id": wager_id, "date": wager_date})

    # ========================================================================
    # Outcomes
    # ========================================================================

    def record_outcome(self, date, slot: str) -> SettlementResult:
        """
        Record (or overwrite) the outcome of a date and settle its wagers.

        Overwriting reverses the previous settlement before settling again.
        """
        if slot not in self.settings.SLOT_OPTIONS:
            raise InvalidPayloadError()
        outcome_date = _parse_date(date)

        if self.outcomes.find_by_date(outcome_date) is not None:
            self._reverse_date(outcome_date)

        self.outcomes.upsert(outcome_date, slot, _utc_now_iso())
        result = self._settle_date(outcome_date, slot)
        self.outcomes.save()

        logger.info(f"Outcome for {outcome_date} recorded as {slot}", extra={"date": outcome_date, "slot": slot})
        return result

    def delete_outcome(self, date) -> SettlementResult:
        """Delete the outcome of a date and reopen its wagers."""
        outcome_date = _parse_date(date)
        outcome = self.outcomes.find_by_date(outcome_date)
        if outcome is None:
            raise NotFoundError(f"No outcome recorded for {outcome_date}")

        result = self._reverse_date(outcome_date)
        self.outcomes.delete_instance(outcome)
        self.outcomes.save()

        logger.info(
            f"Outcome for {outcome_date} deleted, {len(result.updates)} wagers reopened",
            extra={"date": outcome_date, "wagers": len(result.updates)},
        )
        return result

    # ========================================================================
    # Settlement plumbing
    # ========================================================================

    def adjust_rollover(self, delta: float) -> float:
        """Apply a signed delta to the rollover (floored at zero), flushed but uncommitted."""
        current = self.meta.get_rollover()
        updated = apply_rollover(current, delta)
        self.meta.set_rollover(updated)
        self.meta.flush()
        metrics.update_rollover(updated)
        if delta:
            logger.info(
                f"Rollover {current:.2f} -> {updated:.2f} (delta {delta:+.2f})",
                extra={"rollover": updated, "rollover_delta": delta},
            )
        return updated

    def _apply_updates(self, result: SettlementResult) -> None:
        by_id = {w.id: w for w in self.wagers.find_by_date(result.date)}
        for update in result.updates:
            wager = by_id[update.id]
            wager.status = update.status
            wager.payout = update.payout
        self.adjust_rollover(result.rollover_delta)
        self.wagers.flush()

    def _settle_date(self, date: str, slot: str) -> SettlementResult:
        open_wagers = self.wagers.find_open_for_date(date)
        result = settle(date, slot, open_wagers, self.settings.HOUSE_MARGIN)
        if not result.updates:
            return result

        self._apply_updates(result)
        metrics.record_settlement(len(result.winners), result.total_paid)
        logger.info(
            f"Settled {len(result.updates)} wagers for {date} on {slot}: "
            f"{len(result.winners)} winners, paid {result.total_paid:.2f}, "
            f"rollover delta {result.rollover_delta:+.2f}",
            extra={"date": date, "slot": slot, "wagers": len(result.updates), "winners": len(result.winners),
                   "paid": result.total_paid, "rollover_delta": result.rollover_delta},
        )
        return result

    def _reverse_date(self, date: str) -> SettlementResult:
        settled = self.wagers.find_settled_for_date(date)
        result = unsettle(date, settled)
        if not result.updates:
            return result

        self._apply_updates(result)
        metrics.record_reversal()
        logger.info(
            f"Reversed settlement of {len(result.updates)} wagers for {date}, "
            f"rollover delta {result.rollover_delta:+.2f}",
            extra={"date": date, "wagers": len(result.updates), "rollover_delta": result.rollover_delta},
        )
        return result
