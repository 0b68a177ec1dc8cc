"""XLSX export of module records."""
from __future__ import annotations

import io
import json
from typing import Any, Dict, List, Optional, Sequence

import openpyxl
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

HIDDEN_COLUMNS = ("createdBy", "updatedBy")


def _cell_value(value: Any) -> Any:
    if isinstance(value, (list, dict)):
        return json.dumps(value)
    return value


def export_columns(records: Sequence[Dict[str, Any]], fields: Optional[List[Dict[str, Any]]] = None):
    """(key, header) pairs: configured fields first, then any other keys present in the records."""
    columns = [("id", "ID")]
    seen = {"id", *HIDDEN_COLUMNS}
    for field in fields or []:
        name = field.get("name")
        if name and name not in seen:
            columns.append((name, field.get("label") or name))
            seen.add(name)
    for record in records:
        for key in record:
            if key not in seen and not key.startswith("_"):
                columns.append((key, key))
                seen.add(key)
    return columns


def export_records_xlsx(module_name: str, records: Sequence[Dict[str, Any]], fields=None) -> bytes:
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = module_name[:31]

    columns = export_columns(records, fields)
    for col_num, (_, header) in enumerate(columns, 1):
        cell = ws.cell(row=1, column=col_num, value=header)
        cell.fill = PatternFill(start_color="366092", end_color="366092", fill_type="solid")
        cell.font = Font(bold=True, color="FFFFFF")
        cell.alignment = Alignment(horizontal="center", vertical="center")

    for row_num, record in enumerate(records, 2):
        for col_num, (key, _) in enumerate(columns, 1):
            ws.cell(row=row_num, column=col_num, value=_cell_value(record.get(key)))

    for col_num, (key, header) in enumerate(columns, 1):
        longest = max([len(str(header))] + [len(str(record.get(key) or "")) for record in records])
        ws.column_dimensions[get_column_letter(col_num)].width = min(longest + 2, 50)

    output = io.BytesIO()
    wb.save(output)
    return output.getvalue()
