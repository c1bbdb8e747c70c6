"""Monthly attendance records as returned by the remote API.

When a worker has no attendance for a month the server answers with a
placeholder record (id 0, or no salary and no work dates). That placeholder
is mapped to ``None`` here so it cannot leak into payroll sums.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Iterable

from pydantic import Field

from brickdesk.domain.wire import ApiModel, Money


class WorkDate(ApiModel):
    id: int | None = None
    work_date: str
    work_quantity: Decimal = Decimal("0")
    work_overtime: Decimal = Decimal("0")


class AttendanceRecord(ApiModel):
    id: int
    worker_id: int
    work_dates: list[WorkDate] = Field(default_factory=list, alias="daysOff")
    monthly_salary: Money = Decimal("0")
    salary_paid: Money = Decimal("0")
    calculation_month: str = ""

    @property
    def outstanding(self) -> Decimal:
        return self.monthly_salary - self.salary_paid

    @property
    def overtime_hours(self) -> Decimal:
        return sum((wd.work_overtime for wd in self.work_dates), Decimal("0"))


def _is_placeholder(record: AttendanceRecord) -> bool:
    return record.id == 0 or (record.monthly_salary == 0 and not record.work_dates)


def parse_attendance(raw: dict[str, Any] | None) -> AttendanceRecord | None:
    """Return the worker's record, or ``None`` when no attendance is on file."""
    if not raw:
        return None
    record = AttendanceRecord.model_validate(raw)
    if _is_placeholder(record):
        return None
    return record


def payroll_outstanding(records: Iterable[AttendanceRecord | None]) -> Decimal:
    return sum((r.outstanding for r in records if r is not None), Decimal("0"))
