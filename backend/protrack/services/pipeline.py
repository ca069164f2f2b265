"""
Pipeline state machine.

A unit of work moves Demand -> Planned (job card) -> Actual entry -> Approved
-> Crushed. Each stage shows its records in a *pending* and a *history*
bucket. Bucketing is driven by markers the store writes (plan dates, approval
timestamps); a record whose plan marker for a stage is blank is not yet
eligible and appears in neither bucket of that stage.

Transitions only move forward and are only ever triggered by an explicit
action against a record sitting in the stage's pending bucket.
"""
from enum import Enum
from typing import Any, Callable, Dict, Iterable, Optional, Sequence

from protrack.core.exceptions import BusinessRuleViolationException, EntityNotFoundException
from protrack.schemas.actual_entry import ActualEntry
from protrack.schemas.common import StageBuckets
from protrack.schemas.job_card import JobCard
from protrack.schemas.production_order import ProductionOrder

JOB_CARD_PENDING_STATUS = "PENDING"


class PipelineStage(str, Enum):
    PLANNING = "planning"
    ENTRY = "entry"
    APPROVAL = "approval"
    CRUSHING = "crushing"


class Bucket(str, Enum):
    PENDING = "pending"
    HISTORY = "history"


class EntryState(str, Enum):
    LOGGED = "logged"
    AWAITING_APPROVAL = "awaiting_approval"
    APPROVED = "approved"
    AWAITING_CRUSHING = "awaiting_crushing"
    CRUSHED = "crushed"


def is_set(value: Optional[str]) -> bool:
    return value is not None and str(value).strip() != ""


def _marker_bucket(planned: Optional[str], done: Optional[str]) -> Optional[Bucket]:
    if not is_set(planned):
        return None
    return Bucket.HISTORY if is_set(done) else Bucket.PENDING


def job_card_open_for_entry(card: JobCard) -> bool:
    return (
        card.status.strip().upper() == JOB_CARD_PENDING_STATUS
        and is_set(card.planned_at)
        and not card.marked_complete
    )


def _planning(order: ProductionOrder) -> Optional[Bucket]:
    return _marker_bucket(order.planned_at, order.actual_at)


def _entry(card: JobCard) -> Optional[Bucket]:
    return Bucket.PENDING if job_card_open_for_entry(card) else Bucket.HISTORY


def _approval(entry: ActualEntry) -> Optional[Bucket]:
    return _marker_bucket(entry.stage1_planned_at, entry.stage1_approved_at)


def _crushing(entry: ActualEntry) -> Optional[Bucket]:
    return _marker_bucket(entry.stage2_planned_at, entry.stage2_approved_at)


_BUCKETERS: Dict[PipelineStage, Callable[[Any], Optional[Bucket]]] = {
    PipelineStage.PLANNING: _planning,
    PipelineStage.ENTRY: _entry,
    PipelineStage.APPROVAL: _approval,
    PipelineStage.CRUSHING: _crushing,
}


def bucket_for(record: Any, stage: PipelineStage) -> Optional[Bucket]:
    return _BUCKETERS[stage](record)


def partition(records: Iterable[Any], stage: PipelineStage) -> StageBuckets:
    buckets = StageBuckets()
    for record in records:
        bucket = bucket_for(record, stage)
        if bucket is Bucket.PENDING:
            buckets.pending.append(record)
        elif bucket is Bucket.HISTORY:
            buckets.history.append(record)
    return buckets


def ensure_pending(record: Any, stage: PipelineStage, label: str) -> None:
    bucket = bucket_for(record, stage)
    if bucket is Bucket.PENDING:
        return
    serial = getattr(record, "serial", "")
    if bucket is None:
        raise BusinessRuleViolationException(f"{label} '{serial}' is not yet eligible for {stage.value}.")
    raise BusinessRuleViolationException(f"{label} '{serial}' has already passed {stage.value}.")


def select_pending(
    records: Sequence[Any],
    stage: PipelineStage,
    label: str,
    serial: str = "",
    row_index: Optional[int] = None,
) -> Any:
    """Pick the record an action at ``stage`` applies to.

    Serials are not unique on the sheet (a retried submission appends a second
    row), so the sheet row wins when given. Among rows sharing a serial the one
    still pending is chosen; more than one pending match is ambiguous.
    """
    wanted = serial.strip()
    if row_index is not None:
        candidates = [r for r in records if r.row_index == row_index and (not wanted or r.serial == wanted)]
    else:
        candidates = [r for r in records if wanted and r.serial == wanted]
    if not candidates:
        raise EntityNotFoundException(label, wanted if row_index is None else f"row {row_index}")

    pending = [r for r in candidates if bucket_for(r, stage) is Bucket.PENDING]
    if len(pending) > 1:
        rows = ", ".join(str(r.row_index) for r in pending)
        raise BusinessRuleViolationException(
            f"{label} '{wanted}' matches rows {rows} awaiting {stage.value}; choose a row."
        )
    record = pending[0] if pending else candidates[0]
    ensure_pending(record, stage, label)
    return record


def lifecycle_state(entry: ActualEntry) -> EntryState:
    if is_set(entry.stage2_planned_at):
        return EntryState.CRUSHED if is_set(entry.stage2_approved_at) else EntryState.AWAITING_CRUSHING
    if is_set(entry.stage1_planned_at):
        return EntryState.APPROVED if is_set(entry.stage1_approved_at) else EntryState.AWAITING_APPROVAL
    return EntryState.LOGGED

