from __future__ import annotations

import itertools
import logging
import uuid

from classboard.core.config import get_settings
from classboard.schemas.pending_change import ChangeType, PendingChange

logger = logging.getLogger(__name__)


def temporary_id_prefix() -> str:
    return get_settings().temp_schedule_prefix


def is_temporary_id(schedule_id: str | None) -> bool:
    return bool(schedule_id) and schedule_id.startswith(temporary_id_prefix())


def new_temporary_id() -> str:
    return f"{temporary_id_prefix()}{uuid.uuid4().hex[:12]}"


class PendingChangeLedger:
    """Staged schedule mutations awaiting an explicit commit.

    CREATE entries live in an append-only list; UPDATE/DELETE entries are
    keyed by the persisted schedule id so a later change to the same row
    replaces the earlier one in place. Every entry carries a sequence number
    taken at first append, which gives the replay order.
    """

    def __init__(self) -> None:
        self._sequence = itertools.count()
        self._creates: list[tuple[int, PendingChange]] = []
        self._by_schedule: dict[str, tuple[int, PendingChange]] = {}
        # Temp-targeted changes with no originating CREATE; dropped at commit.
        self._orphans: list[tuple[int, PendingChange]] = []

    def append(self, change: PendingChange) -> None:
        if change.type is ChangeType.create:
            self._creates.append((next(self._sequence), change))
            return

        if not change.schedule_id:
            raise ValueError(f"{change.type.value} change requires a schedule id")

        if is_temporary_id(change.schedule_id):
            self._absorb_temporary(change)
            return

        existing = self._by_schedule.get(change.schedule_id)
        if existing is not None:
            logger.debug("Replacing pending change for schedule %s", change.schedule_id)
            self._by_schedule[change.schedule_id] = (existing[0], change)
        else:
            self._by_schedule[change.schedule_id] = (next(self._sequence), change)

    def _absorb_temporary(self, change: PendingChange) -> None:
        for index, (seq, create) in enumerate(self._creates):
            if create.temp_id != change.schedule_id:
                continue
            if change.type is ChangeType.delete:
                del self._creates[index]
                logger.debug("Dropped CREATE %s cancelled before commit", change.schedule_id)
            else:
                folded = create.model_copy(update={
                    "day": change.day,
                    "time_slot_id": change.time_slot_id,
                    "time_slot_label": change.time_slot_label,
                    "room_id": change.room_id,
                })
                self._creates[index] = (seq, folded)
                logger.debug("Folded UPDATE of %s into its pending CREATE", change.schedule_id)
            return
        self._orphans.append((next(self._sequence), change))

    def acknowledge(self, change: PendingChange) -> None:
        """Forget one entry that has already been handled by a commit."""
        self._creates = [item for item in self._creates if item[1] is not change]
        self._orphans = [item for item in self._orphans if item[1] is not change]
        for schedule_id, (_, pending) in list(self._by_schedule.items()):
            if pending is change:
                del self._by_schedule[schedule_id]

    def clear(self) -> None:
        self._creates.clear()
        self._by_schedule.clear()
        self._orphans.clear()

    def entries(self) -> list[PendingChange]:
        ordered = sorted(
            itertools.chain(self._creates, self._by_schedule.values(), self._orphans),
            key=lambda item: item[0],
        )
        return [change for _, change in ordered]

    def has_pending(self, schedule_id: str | None) -> bool:
        if not schedule_id:
            return False
        if schedule_id in self._by_schedule:
            return True
        return any(create.temp_id == schedule_id for _, create in self._creates)

    def __len__(self) -> int:
        return len(self._creates) + len(self._by_schedule) + len(self._orphans)

    def __bool__(self) -> bool:
        return len(self) > 0
