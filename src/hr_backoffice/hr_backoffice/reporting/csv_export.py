"""CSV/XLSX export helpers shared by the payroll and reporting controllers.

Rows are comma separated with the header first. Fields are quoted only when
they need it (commas, quotes, line breaks), so numbers always appear bare.
"""

from __future__ import annotations

import csv
import io
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Iterable, Mapping, Optional, Sequence

import pandas as pd
from flask import Response, send_file

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _cell(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, Decimal):
        return format(value, "f")
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    return value


def _xlsx_cell(value: Any) -> Any:
    if isinstance(value, Decimal):
        return float(value)
    return _cell(value)


def to_csv(rows: Iterable[Mapping[str, Any]], columns: Sequence[str]) -> str:
    out = io.StringIO()
    writer = csv.DictWriter(
        out,
        fieldnames=list(columns),
        extrasaction="ignore",
        quoting=csv.QUOTE_MINIMAL,
        lineterminator="\n",
    )
    writer.writeheader()
    for row in rows:
        writer.writerow({c: _cell(row.get(c)) for c in columns})
    return out.getvalue()


def payroll_filename(month: Optional[str], ext: str = "csv") -> str:
    return f"payroll-{month or 'all'}.{ext}"


def attendance_filename(report_type: str, start: date, end: date) -> str:
    return f"{report_type}-attendance-{start.isoformat()}-{end.isoformat()}.csv"


def csv_response(text: str, filename: str) -> Response:
    return Response(
        text.encode("utf-8-sig"),
        mimetype="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


def xlsx_response(rows: Sequence[Mapping[str, Any]], columns: Sequence[str], filename: str, *, sheet: str):
    df = pd.DataFrame([{c: _xlsx_cell(r.get(c)) for c in columns} for r in rows], columns=list(columns))

    output = io.BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name=sheet)
    output.seek(0)
    return send_file(output, download_name=filename, as_attachment=True, mimetype=XLSX_MIMETYPE)
