from __future__ import annotations

from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Optional

from ..common.validators import to_decimal
from ..compensation.model import CompensationConfig
from ..core.constants import MAX_DAILY_HOURS
from ..core.enums import AttendanceStatus, DayKind
from ..core.exceptions import ValidationError
from .model import AttendanceRecord, DayClassification

_SECONDS_PER_HOUR = Decimal("3600")
_NOT_WORKED = {AttendanceStatus.REJECTED, AttendanceStatus.ABSENT}


def validate_record(record: AttendanceRecord) -> None:
    """Reject malformed rows before they reach classification."""

    where = f"staff {record.staff_id}"
    if not isinstance(record.work_date, date) or isinstance(record.work_date, datetime):
        raise ValidationError(f"{where}: work_date must be a date (got {record.work_date!r})")
    where = f"staff {record.staff_id} on {record.work_date.isoformat()}"

    if not isinstance(record.status, AttendanceStatus):
        raise ValidationError(f"{where}: unknown attendance status {record.status!r}")
    if record.punch_in is not None and not isinstance(record.punch_in, datetime):
        raise ValidationError(f"{where}: punch_in must be a datetime")
    if record.punch_out is not None and not isinstance(record.punch_out, datetime):
        raise ValidationError(f"{where}: punch_out must be a datetime")
    if record.punch_out is not None and record.punch_in is None:
        raise ValidationError(f"{where}: punch_out without punch_in")
    if record.punch_in and record.punch_out and record.punch_out < record.punch_in:
        raise ValidationError(f"{where}: punch_out is earlier than punch_in")

    hours = effective_working_hours(record)
    if hours is not None and (hours < 0 or hours > MAX_DAILY_HOURS):
        raise ValidationError(f"{where}: working_hours must be between 0 and 24 (got {hours})")


def effective_working_hours(record: AttendanceRecord) -> Optional[Decimal]:
    """Stored hours, or hours derived from both punches; None for an open session."""

    if record.working_hours is not None:
        return to_decimal(record.working_hours, "working_hours")
    if record.punch_in and record.punch_out:
        seconds = int((record.punch_out - record.punch_in).total_seconds())
        return Decimal(seconds) / _SECONDS_PER_HOUR
    return None


def late_minutes_for(record: AttendanceRecord, config: CompensationConfig) -> int:
    if record.punch_in is None or config.shift_start is None:
        return 0
    allowed = datetime.combine(record.work_date, config.shift_start, tzinfo=record.punch_in.tzinfo)
    allowed += timedelta(minutes=config.grace_minutes)
    if record.punch_in <= allowed:
        return 0
    return int((record.punch_in - allowed).total_seconds() // 60)


def classify(record: AttendanceRecord, config: CompensationConfig) -> DayClassification:
    """Label one day PRESENT / HALF_DAY / ABSENT.

    An open session (punch-in, no punch-out, no stored hours) counts as
    PRESENT. LEAVE is a paid day with no hours, lateness or overtime.
    """

    validate_record(record)

    if record.status == AttendanceStatus.LEAVE:
        return DayClassification(work_date=record.work_date, kind=DayKind.PRESENT)
    if record.status in _NOT_WORKED:
        return DayClassification(work_date=record.work_date, kind=DayKind.ABSENT)
    if record.status == AttendanceStatus.PENDING and not config.count_pending_attendance:
        return DayClassification(work_date=record.work_date, kind=DayKind.ABSENT)
    if record.punch_in is None:
        return DayClassification(work_date=record.work_date, kind=DayKind.ABSENT)

    hours = effective_working_hours(record)
    late = late_minutes_for(record, config)

    if hours is not None and hours < config.half_day_threshold_hours:
        return DayClassification(
            work_date=record.work_date,
            kind=DayKind.HALF_DAY,
            working_hours=hours,
            late_minutes=late,
        )

    worked = hours if hours is not None else Decimal("0")
    overtime = max(Decimal("0"), worked - config.standard_hours_per_day)
    return DayClassification(
        work_date=record.work_date,
        kind=DayKind.PRESENT,
        working_hours=worked,
        overtime_hours=overtime,
        late_minutes=late,
    )
