from brickdesk.domain.attendance.records import (
    AttendanceRecord,
    WorkDate,
    parse_attendance,
    payroll_outstanding,
)

__all__ = ["AttendanceRecord", "WorkDate", "parse_attendance", "payroll_outstanding"]
