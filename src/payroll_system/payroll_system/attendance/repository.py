from __future__ import annotations

from typing import Protocol, Sequence

from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def list_for_staff_month(self, *, staff_id: int, month: int, year: int) -> Sequence[AttendanceRecord]:
        """Attendance rows of one staff member for a month, ordered by date."""

        raise NotImplementedError
