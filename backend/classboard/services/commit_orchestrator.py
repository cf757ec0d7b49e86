from __future__ import annotations

import logging
from dataclasses import dataclass, field

from classboard.core.exceptions import (
    AppError,
    CommitAbortedError,
    CommitRefreshError,
    ResourceNotFoundError,
    ScheduleValidationError,
)
from classboard.schemas.class_entity import ClassEntity
from classboard.schemas.pending_change import ChangeType, PendingChange
from classboard.schemas.schedule import ScheduleEntry
from classboard.services.grid_controller import GridController, TimetableSnapshot
from classboard.services.pending_changes import is_temporary_id
from classboard.services.schedule_gateway import ScheduleGateway

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReplayOutcome:
    change: PendingChange
    reason: str = ""
    schedule_id: str | None = None


@dataclass
class CommitReport:
    applied: list[ReplayOutcome] = field(default_factory=list)
    skipped: list[ReplayOutcome] = field(default_factory=list)
    failed: list[ReplayOutcome] = field(default_factory=list)

    @property
    def is_clean(self) -> bool:
        return not self.failed

    def summary(self) -> str:
        parts = [f"{len(self.applied)} applied"]
        if self.skipped:
            parts.append(f"{len(self.skipped)} skipped")
        if self.failed:
            parts.append(f"{len(self.failed)} failed")
        return ", ".join(parts)


def join_schedules(classes: list[ClassEntity], schedules: list[ScheduleEntry]) -> list[ClassEntity]:
    by_class: dict[str, list[ScheduleEntry]] = {}
    for entry in schedules:
        by_class.setdefault(entry.class_id, []).append(entry)
    return [cls.model_copy(update={"schedules": by_class.get(cls.id, [])}) for cls in classes]


class CommitOrchestrator:
    """Replays a grid session's pending changes against the backend.

    Replay is strictly sequential in ledger order. NotFound on UPDATE or
    DELETE is a benign skip; validation failures are reported per entry;
    any other error aborts the rest of the replay. Created schedules take
    their persisted ids in the view even when replay aborts. The view
    model is rebuilt from the server after a completed commit.
    """

    def __init__(self, gateway: ScheduleGateway):
        self.gateway = gateway

    def fetch_snapshot(self) -> TimetableSnapshot:
        classes = self.gateway.list_classes()
        schedules = self.gateway.list_schedules()
        rooms = self.gateway.list_rooms()
        time_slots = self.gateway.list_time_slots()
        teachers = self.gateway.list_teachers(include_workload=True)
        return TimetableSnapshot(
            classes=join_schedules(classes, schedules),
            time_slots=time_slots,
            rooms=rooms,
            teachers=teachers,
        )

    def refresh(self, controller: GridController) -> None:
        controller.load(self.fetch_snapshot())

    def commit(self, controller: GridController) -> CommitReport:
        ledger = controller.session.ledger
        report = CommitReport()
        changes = ledger.entries()
        logger.info("Committing %d pending change(s)", len(changes))

        for change in changes:
            try:
                outcome = self._replay(change)
            except ResourceNotFoundError as exc:
                if change.type is ChangeType.create:
                    self._abort(controller, report, change, exc)
                logger.warning("Skipping %s: %s", change.describe(), exc.message)
                report.skipped.append(ReplayOutcome(change, exc.message))
            except ScheduleValidationError as exc:
                logger.warning("Rejected %s: %s", change.describe(), exc.message)
                report.failed.append(ReplayOutcome(change, exc.message))
            except AppError as exc:
                self._abort(controller, report, change, exc)
            else:
                if outcome.reason:
                    report.skipped.append(outcome)
                else:
                    report.applied.append(outcome)

        self._adopt_created(controller, report)
        ledger.clear()
        logger.info("Commit finished: %s", report.summary())
        try:
            self.refresh(controller)
        except AppError as exc:
            logger.exception("Reload after commit failed")
            raise CommitRefreshError(
                f"Changes saved ({report.summary()}) but reloading failed: {exc.message}",
                report=report,
                cause=exc,
            ) from exc
        return report

    def cancel(self, controller: GridController) -> None:
        discarded = len(controller.session.ledger)
        controller.session.ledger.clear()
        logger.info("Discarded %d pending change(s)", discarded)
        self.refresh(controller)

    def _replay(self, change: PendingChange) -> ReplayOutcome:
        if change.type is ChangeType.create:
            if not change.day or not change.time_slot_id:
                raise ScheduleValidationError(
                    f"Cannot schedule {change.class_name}: day and time slot are required"
                )
            created = self.gateway.create_schedule(change.class_id, change.day, change.time_slot_id, change.room_id)
            return ReplayOutcome(change, schedule_id=created.id)

        if is_temporary_id(change.schedule_id):
            logger.debug("Dropping %s against unsaved schedule %s", change.type.value, change.schedule_id)
            return ReplayOutcome(change, "schedule was never saved")

        if change.type is ChangeType.update:
            self.gateway.update_schedule(change.schedule_id, change.day, change.time_slot_id, change.room_id)
        else:
            self.gateway.delete_schedule(change.schedule_id)
        return ReplayOutcome(change, schedule_id=change.schedule_id)

    @staticmethod
    def _adopt_created(controller: GridController, report: CommitReport) -> None:
        for outcome in report.applied:
            if outcome.change.type is ChangeType.create and outcome.change.temp_id and outcome.schedule_id:
                controller.adopt_schedule_id(outcome.change.temp_id, outcome.schedule_id)

    def _abort(self, controller: GridController, report: CommitReport, change: PendingChange, exc: AppError) -> None:
        # Handled entries leave the ledger; the failing one and the rest stay for retry.
        ledger = controller.session.ledger
        for outcome in (*report.applied, *report.skipped, *report.failed):
            ledger.acknowledge(outcome.change)
        self._adopt_created(controller, report)
        logger.exception("Commit aborted at %s", change.describe())
        raise CommitAbortedError(
            f"Saving stopped at '{change.describe()}': {exc.message}",
            report=report,
            cause=exc,
        ) from exc
