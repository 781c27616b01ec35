"""Boundary adapter for raw attendance payloads.

Upstream records arrive in several shapes (admin screens, supervisor apps,
imports). Everything is mapped here into AttendanceRecord so the rest of the
code only sees the canonical AttendanceStatus.

Fallback order:
    employee id: employeeId -> employee._id -> employee (when a string)
    site name:   siteName -> site -> department -> "Unknown Site"
    site id:     siteId -> site name, lower-cased with whitespace runs as "-"
    department:  department -> "General"
    date:        date -> workDate (ISO, time part ignored)
"""

from __future__ import annotations

import logging
import re
from typing import Any, Iterable, Mapping, Optional

from ..common.datetime_utils import coerce_date
from ..core.constants import GENERAL_DEPARTMENT, UNKNOWN_SITE
from ..core.enums import AttendanceStatus
from .model import AttendanceRecord

logger = logging.getLogger(__name__)

_STATUS_ALIASES = {
    "present": AttendanceStatus.PRESENT,
    "absent": AttendanceStatus.ABSENT,
    "half-day": AttendanceStatus.HALF_DAY,
    "halfday": AttendanceStatus.HALF_DAY,
    "half_day": AttendanceStatus.HALF_DAY,
    "half day": AttendanceStatus.HALF_DAY,
    "leave": AttendanceStatus.LEAVE,
}

_WS = re.compile(r"\s+")


def parse_status(raw: Any) -> AttendanceStatus:
    """Case-insensitive status parsing; anything unrecognized counts as absent."""

    if isinstance(raw, AttendanceStatus):
        return raw
    key = str(raw or "").strip().lower()
    status = _STATUS_ALIASES.get(key)
    if status is None:
        if key:
            logger.debug("Unrecognized attendance status %r counted as absent", raw)
        return AttendanceStatus.ABSENT
    return status


def site_key(value: str) -> str:
    return _WS.sub("-", str(value).strip()).lower()


def _first(*values: Any) -> Optional[str]:
    for v in values:
        if v is None:
            continue
        s = str(v).strip()
        if s:
            return s
    return None


def _employee_id(raw: Mapping[str, Any]) -> Optional[str]:
    employee = raw.get("employee")
    nested = employee.get("_id") if isinstance(employee, Mapping) else None
    plain = employee if isinstance(employee, (str, int)) else None
    return _first(raw.get("employeeId"), raw.get("employee_id"), nested, plain)


def normalize_record(raw: Mapping[str, Any]) -> Optional[AttendanceRecord]:
    """Map one raw payload to AttendanceRecord; None when it cannot be used."""

    employee_id = _employee_id(raw)
    work_date = coerce_date(raw.get("date") or raw.get("workDate") or raw.get("work_date"))
    if not employee_id or not work_date:
        return None

    site_name = _first(raw.get("siteName"), raw.get("site_name"), raw.get("site"), raw.get("department")) or UNKNOWN_SITE
    site_id = site_key(_first(raw.get("siteId"), raw.get("site_id")) or site_name)

    return AttendanceRecord(
        attendance_id=raw.get("attendanceId") or raw.get("attendance_id"),
        employee_id=employee_id,
        employee_name=_first(raw.get("employeeName"), raw.get("employee_name"), raw.get("name")),
        work_date=work_date,
        status=parse_status(raw.get("status")),
        site_id=site_id,
        site_name=site_name,
        department=_first(raw.get("department")) or GENERAL_DEPARTMENT,
    )


def normalize_records(rows: Iterable[Mapping[str, Any]]) -> list[AttendanceRecord]:
    """Normalize many payloads, skipping (and logging) malformed ones."""

    out: list[AttendanceRecord] = []
    skipped = 0
    for raw in rows:
        if not isinstance(raw, Mapping):
            skipped += 1
            continue
        record = normalize_record(raw)
        if record is None:
            skipped += 1
            continue
        out.append(record)
    if skipped:
        logger.warning("Skipped %d malformed attendance records", skipped)
    return out
