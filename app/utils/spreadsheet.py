"""일괄 가져오기 행 파싱/변환 유틸리티 모듈.

Bulk import row helpers.
Turns uploaded files (.xlsx via openpyxl, .csv, .json) into loosely-typed
row dicts and coerces them into validated record data. A row that fails
coercion raises RowError; importers record it as skipped and continue
with the rest of the batch.

Header names are normalized (lower-case, spaces/underscores removed), so
"zoneId", "zone_id" and "Zone ID" all read as ``zoneid``.
"""

import csv
import json
from io import BytesIO, StringIO
from typing import Any

from openpyxl import load_workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.worksheet.worksheet import Worksheet

from app.utils.constants import (
    FACILITY_STATUSES,
    FacilityType,
    StaffRole,
    StaffStatus,
    resolve_facility_type,
)
from app.utils.validation import parse_finite

# 시설 가져오기 헤더 — Facility import columns (code or name identifies the facility)
FACILITY_COLUMNS: list[str] = ["code", "type", "zoneId", "lat", "lng", "status"]
# 스태프 가져오기 헤더 — Staff import columns
STAFF_COLUMNS: list[str] = ["name", "phone", "email", "role", "zone", "department", "status"]


class RowError(ValueError):
    """행 변환 실패 — 배치 전체를 중단하지 않고 건너뜀 (Row skipped, batch continues)."""


def normalize_header(value: Any) -> str:
    return str(value or "").strip().lower().replace("_", "").replace(" ", "")


def _text(row: dict[str, Any], *keys: str) -> str:
    for key in keys:
        value = row.get(key)
        if value is not None and str(value).strip():
            return str(value).strip()
    return ""


def read_xlsx_rows(content: bytes) -> list[tuple[int, dict[str, Any]]]:
    """첫 시트의 1행을 헤더로 하여 (행 번호, 행 딕셔너리) 목록을 반환합니다.

    Read the first sheet of a workbook. Row 1 is the header; fully empty
    rows are dropped.

    Raises:
        ValueError: 헤더가 없거나 파일을 읽을 수 없을 때
    """
    try:
        wb = load_workbook(filename=BytesIO(content), read_only=True, data_only=True)
    except Exception as exc:  # openpyxl raises several unrelated types for bad files
        raise ValueError(f"Unreadable workbook: {exc}") from exc

    try:
        ws = wb[wb.sheetnames[0]]
        rows = ws.iter_rows(values_only=True)
        header_row = next(rows, None)
        if header_row is None:
            raise ValueError("Workbook has no header row")
        headers: list[str] = [normalize_header(h) for h in header_row]

        result: list[tuple[int, dict[str, Any]]] = []
        for row_num, values in enumerate(rows, start=2):
            if values is None or all(v is None or str(v).strip() == "" for v in values):
                continue
            row: dict[str, Any] = {
                headers[i]: values[i] for i in range(min(len(headers), len(values))) if headers[i]
            }
            result.append((row_num, row))
        return result
    finally:
        wb.close()


def read_delimited_rows(filename: str, content: bytes) -> list[tuple[int, dict[str, Any]]]:
    """.csv 또는 .json 파일을 행 목록으로 읽습니다.

    CSV files without a recognizable header are read positionally as
    ``name,description,lat,lng``. JSON files must hold a list of objects.

    Raises:
        ValueError: 형식이 잘못되었을 때 (Invalid file format)
    """
    try:
        text: str = content.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise ValueError("File must be UTF-8 encoded") from exc

    if filename.lower().endswith(".json"):
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid JSON: {exc.msg}") from exc
        if not isinstance(data, list):
            raise ValueError("JSON import must be a list of objects")
        return [
            (i, {normalize_header(k): v for k, v in item.items()} if isinstance(item, dict) else {})
            for i, item in enumerate(data, start=1)
        ]

    lines: list[list[str]] = [r for r in csv.reader(StringIO(text)) if any(c.strip() for c in r)]
    if not lines:
        return []
    first: list[str] = [normalize_header(c) for c in lines[0]]
    if "name" in first:
        headers, body, start = first, lines[1:], 2
    else:
        headers, body, start = ["name", "description", "lat", "lng"], lines, 1
    return [
        (row_num, {headers[i]: cells[i].strip() for i in range(min(len(headers), len(cells)))})
        for row_num, cells in enumerate(body, start=start)
    ]


def coerce_facility_row(row: dict[str, Any]) -> dict[str, Any]:
    """시설 행을 검증/변환합니다.

    Row contract: ``{code|name, type, zoneId, lat, lng, status}``. lat/lng
    must parse as finite numbers; blank status defaults to the first entry
    of the type's vocabulary.

    Returns:
        dict: code, type, zone_ref, lat, lng, status

    Raises:
        RowError: 필수 값 누락, 좌표 오류, 어휘 외 상태
    """
    code: str = _text(row, "code", "name")
    if not code:
        raise RowError("Missing code")

    facility_type: FacilityType | None = resolve_facility_type(_text(row, "type"))
    if facility_type is None:
        raise RowError(f"Unknown facility type '{_text(row, 'type')}'")

    zone_ref: str = _text(row, "zoneid", "zone")
    if not zone_ref:
        raise RowError("Missing zoneId")

    lat: float | None = parse_finite(row.get("lat"))
    lng: float | None = parse_finite(row.get("lng"))
    if lat is None or lng is None:
        raise RowError("lat/lng must be finite numbers")

    vocabulary: tuple[str, ...] = FACILITY_STATUSES[facility_type]
    status: str = _text(row, "status").lower() or vocabulary[0]
    if status not in vocabulary:
        raise RowError(f"Status '{status}' is not valid for {facility_type.value}")

    return {
        "code": code,
        "type": facility_type.value,
        "zone_ref": zone_ref,
        "lat": lat,
        "lng": lng,
        "status": status,
    }


def coerce_zone_row(row: dict[str, Any]) -> dict[str, Any]:
    """구역 행 변환 — name 필수, lat/lng 유한 실수 필수."""
    name: str = _text(row, "name")
    if not name:
        raise RowError("Missing name")
    lat: float | None = parse_finite(row.get("lat"))
    lng: float | None = parse_finite(row.get("lng"))
    if lat is None or lng is None:
        raise RowError("lat/lng must be finite numbers")
    return {"name": name, "description": _text(row, "description"), "lat": lat, "lng": lng}


def coerce_staff_row(row: dict[str, Any]) -> dict[str, Any]:
    """스태프 행 변환 — name/email/phone 필수, 역할/상태는 어휘로 정규화."""
    name: str = _text(row, "name")
    email: str = _text(row, "email")
    phone: str = _text(row, "phone", "mobile", "number")
    if not name or not email or not phone:
        raise RowError("name, email and phone are required")

    role_raw: str = _text(row, "role").lower() or StaffRole.STAFF.value
    if role_raw not in {r.value for r in StaffRole}:
        raise RowError(f"Unknown role '{role_raw}'")
    status_raw: str = _text(row, "status").lower() or StaffStatus.ACTIVE.value
    if status_raw not in {s.value for s in StaffStatus}:
        raise RowError(f"Unknown status '{status_raw}'")

    return {
        "name": name,
        "email": email,
        "phone": phone,
        "role": role_raw,
        "zone": _text(row, "zone") or "General",
        "department": _text(row, "department") or "General",
        "status": status_raw,
    }


def style_headers(ws: Worksheet, headers: list[str], color: str = "2D3436") -> None:
    """1행에 굵은 흰 글씨 헤더를 씁니다 (Bold white header row)."""
    header_font = Font(bold=True, color="FFFFFF", size=11)
    header_fill = PatternFill(start_color=color, end_color=color, fill_type="solid")
    for col_idx, header in enumerate(headers, 1):
        cell = ws.cell(row=1, column=col_idx, value=header)
        cell.font = header_font
        cell.fill = header_fill
        cell.alignment = Alignment(horizontal="center")


def set_widths(ws: Worksheet, widths: list[int]) -> None:
    for i, w in enumerate(widths, 1):
        ws.column_dimensions[ws.cell(row=1, column=i).column_letter].width = w
