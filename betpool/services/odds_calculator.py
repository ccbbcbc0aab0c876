"""Inverse-frequency odds for time slots.

Slots that came up often in the recent history get a lower multiplier; a slot
that never came up gets the highest one. The numerator is fixed, so the house's
exposure stays bounded without estimating real probabilities.
"""
from typing import Iterable, Mapping, Optional, Sequence, Union, Dict, Any

HistoryEntry = Union[Mapping[str, Any], Any]


def _slot_of(entry: HistoryEntry) -> Optional[str]:
    if isinstance(entry, Mapping):
        return entry.get("slot")
    return getattr(entry, "slot", None)


def compute_odds(
    history: Sequence[HistoryEntry],
    slots: Sequence[str],
    window_size: int,
    margin_constant: Optional[int] = None,
) -> Dict[str, float]:
    """
    Calculate the payout multiplier for every slot.

    ``history`` must already be ordered newest first; only the first
    ``window_size`` entries are looked at. Entries may be outcome rows or dicts
    with a ``slot`` key. Labels that are not in ``slots`` are ignored.

    multiplier = (K + len(slots)) / (1 + count), with K = margin_constant,
    or window_size when no constant is given.

    Returns:
        Dict of slot -> multiplier, in slot order
    """
    numerator = (window_size if margin_constant is None else margin_constant) + len(slots)

    counts = {slot: 0 for slot in slots}
    for entry in list(history)[:max(window_size, 0)]:
        slot = _slot_of(entry)
        if slot in counts:
            counts[slot] += 1

    return {slot: numerator / (1 + counts[slot]) for slot in slots}


def price_for_slot(odds: Mapping[str, float], slot: str, default: float = 1.5) -> float:
    """Odds a new wager on ``slot`` is stamped with (2 decimals)."""
    return round(odds.get(slot, default), 2)


def streak_for_slot(history: Iterable[HistoryEntry], slot: str) -> int:
    """Number of consecutive most-recent outcomes that landed on ``slot``."""
    streak = 0
    for entry in history:
        if _slot_of(entry) != slot:
            break
        streak += 1
    return streak


def hot_slot(odds: Mapping[str, float]) -> Optional[str]:
    """The slot with the lowest multiplier, i.e. the current favourite."""
    if not odds:
        return None
    return min(odds.items(), key=lambda item: item[1])[0]
