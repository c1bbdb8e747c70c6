from __future__ import annotations

from decimal import Decimal

from brickdesk.domain.attendance import parse_attendance, payroll_outstanding


def _raw(**overrides) -> dict:
    raw = {
        "id": 12,
        "workerId": 3,
        "daysOff": [
            {"workDate": "2026-10-01", "workQuantity": 1, "workOvertime": 2},
            {"workDate": "2026-10-02", "workQuantity": 1, "workOvertime": 0.5},
        ],
        "monthlySalary": 8000000,
        "salaryPaid": 3000000,
        "calculationMonth": "2026-10",
    }
    raw.update(overrides)
    return raw


def test_parse_attendance_reads_record():
    record = parse_attendance(_raw())
    assert record is not None
    assert record.worker_id == 3
    assert len(record.work_dates) == 2
    assert record.overtime_hours == Decimal("2.5")
    assert record.outstanding == Decimal("5000000")


def test_placeholder_records_mean_no_attendance_on_file():
    assert parse_attendance(None) is None
    assert parse_attendance({}) is None
    assert parse_attendance(_raw(id=0)) is None
    assert parse_attendance(_raw(monthlySalary=0, daysOff=[])) is None


def test_payroll_outstanding_skips_missing_records():
    records = [
        parse_attendance(_raw()),
        parse_attendance(_raw(id=0, monthlySalary=9000000, salaryPaid=0)),
        parse_attendance(_raw(id=13, workerId=4, monthlySalary=6000000, salaryPaid=6000000)),
    ]
    assert records[1] is None
    assert payroll_outstanding(records) == Decimal("5000000")
