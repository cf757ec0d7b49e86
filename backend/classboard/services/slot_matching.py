"""Decide whether a schedule entry occupies a given time slot.

Entries are matched through an ordered chain of strategies. The first
strategy that reaches a verdict wins; a strategy that cannot judge the
entry (the field it relies on is absent) passes to the next one.

1. ``time_slot_id`` equality. An entry carrying an id is never matched by
   a later strategy.
2. Label of the attached time slot object.
3. Legacy free-text ``time``: equal to the slot start time or label, or
   starting with the start time (``"09:00-10:00"`` is the 09:00 slot).
"""

from __future__ import annotations

from enum import Enum
from typing import Callable, Iterable

from classboard.schemas.schedule import ScheduleEntry
from classboard.schemas.time_slot import TimeSlotOut


class SlotMatch(str, Enum):
    match = "match"
    mismatch = "mismatch"
    not_applicable = "not_applicable"


MatchStrategy = Callable[[ScheduleEntry, TimeSlotOut], SlotMatch]


def match_by_time_slot_id(entry: ScheduleEntry, slot: TimeSlotOut) -> SlotMatch:
    if not entry.time_slot_id:
        return SlotMatch.not_applicable
    return SlotMatch.match if entry.time_slot_id == slot.id else SlotMatch.mismatch


def match_by_attached_label(entry: ScheduleEntry, slot: TimeSlotOut) -> SlotMatch:
    if entry.time_slot is None:
        return SlotMatch.not_applicable
    return SlotMatch.match if entry.time_slot.label == slot.label else SlotMatch.mismatch


def match_by_legacy_time(entry: ScheduleEntry, slot: TimeSlotOut) -> SlotMatch:
    if not entry.time:
        return SlotMatch.not_applicable
    text = entry.time.strip()
    if text == slot.start_time or text == slot.label or text.startswith(slot.start_time):
        return SlotMatch.match
    return SlotMatch.mismatch


DEFAULT_STRATEGIES: tuple[MatchStrategy, ...] = (
    match_by_time_slot_id,
    match_by_attached_label,
    match_by_legacy_time,
)


def resolve_slot_match(
    entry: ScheduleEntry,
    slot: TimeSlotOut,
    strategies: Iterable[MatchStrategy] = DEFAULT_STRATEGIES,
) -> SlotMatch:
    for strategy in strategies:
        verdict = strategy(entry, slot)
        if verdict is not SlotMatch.not_applicable:
            return verdict
    return SlotMatch.not_applicable


def entry_matches_slot(entry: ScheduleEntry, day: str, slot: TimeSlotOut) -> bool:
    if entry.day != day:
        return False
    return resolve_slot_match(entry, slot) is SlotMatch.match


def find_time_slot(time_slots: Iterable[TimeSlotOut], *, label: str | None = None, slot_id: str | None = None) -> TimeSlotOut | None:
    for slot in time_slots:
        if slot_id is not None and slot.id == slot_id:
            return slot
        if label is not None and slot.label == label:
            return slot
    return None
