"""
Prometheus metrics for the betting pool.

Metrics exposed:
- Wager placement counters per slot
- Settlement and reversal counters
- Money paid out to winners
- Current rollover balance
"""
from prometheus_client import Counter, Gauge

wagers_placed_total = Counter(
    "wagers_placed_total",
    "Total wagers placed",
    ["slot"]
)

wagers_removed_total = Counter(
    "wagers_removed_total",
    "Total wagers removed by an admin"
)

settlements_total = Counter(
    "settlements_total",
    "Total settlements applied",
    ["result"]
)

settlement_reversals_total = Counter(
    "settlement_reversals_total",
    "Total settlements reversed"
)

payouts_total = Counter(
    "payouts_total",
    "Total money paid out to winning wagers"
)

rollover_balance = Gauge(
    "rollover_balance",
    "Current rollover balance carried forward"
)


def record_wager_placed(slot: str):
    """Record a newly placed wager."""
    wagers_placed_total.labels(slot=slot).inc()


def record_wager_removed():
    """Record an admin wager removal."""
    wagers_removed_total.inc()


def record_settlement(winner_count: int, paid: float):
    """Record an applied settlement and the money it paid out."""
    settlements_total.labels(result="winners" if winner_count else "no_winners").inc()
    if paid > 0:
        payouts_total.inc(paid)


def record_reversal():
    """Record a reversed settlement."""
    settlement_reversals_total.inc()


def update_rollover(value: float):
    """Publish the current rollover balance."""
    rollover_balance.set(value)
