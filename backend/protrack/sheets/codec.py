"""
Spreadsheet row codec.

Decoding turns the raw cell grid returned by the gateway into typed records.
It never raises on bad data: short rows, blank identifiers and repeated
header/banner rows are dropped, and numeric cells that do not parse read as 0.

Encoding produces the positional rows the store's insert endpoint expects;
column order is the wire contract and must not change.
"""
import math
import re
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence, Tuple

from protrack.schemas.actual_entry import ActualEntry
from protrack.schemas.common import MaterialLine
from protrack.schemas.crushing import CrushingEntry
from protrack.schemas.job_card import JobCard
from protrack.schemas.production_order import ProductionOrder, ProductionStatus, derive_status
from protrack.sheets.layout import (
    ACTUAL_LAYOUT,
    CRUSHING_LAYOUT,
    FINISHED_GOOD_SLOTS,
    JOB_CARD_LAYOUT,
    PRODUCTION_LAYOUT,
    RAW_MATERIAL_SLOTS,
    SheetKind,
    SheetLayout,
)
from protrack.sheets.schema import TableSchema, cell_text, resolve_schema

Row = Sequence[Any]

_LEADING_NUMBER = re.compile(r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_YES = {"yes", "y", "true"}
_COMPLETE = "COMPLETE"


def parse_float(value: Any, default: Optional[float] = 0.0) -> Optional[float]:
    """Leading-number parse ("12.5 kg" -> 12.5); ``default`` for anything else."""
    if isinstance(value, bool) or value is None:
        return default
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        match = _LEADING_NUMBER.match(str(value))
        if not match:
            return default
        number = float(match.group(0))
    if math.isnan(number) or math.isinf(number):
        return default
    return number


def cell(row: Optional[Row], index: int) -> str:
    if row is None or index < 0 or index >= len(row):
        return ""
    return cell_text(row[index])


def _marker(row: Row, index: int) -> Optional[str]:
    text = cell(row, index).strip()
    return text or None


def is_data_row(row: Optional[Row], layout: SheetLayout, schema: TableSchema) -> bool:
    if not row or len(row) < layout.min_row_length:
        return False
    identifier = cell(row, schema.column(layout.identifier_field))
    if not identifier.strip():
        return False
    for sentinel in layout.sentinels:
        if sentinel in identifier:
            return False
    return True


def iter_data_rows(
    rows: Sequence[Row], layout: SheetLayout, schema: Optional[TableSchema] = None
) -> Iterator[Tuple[int, Row, TableSchema]]:
    """Yield ``(sheet_row_number, row, schema)`` for every accepted data row."""
    schema = schema or resolve_schema(rows, layout)
    for offset, row in enumerate(rows[schema.data_start_row:]):
        if is_data_row(row, layout, schema):
            yield schema.sheet_row_number(offset), row, schema


def column_values(rows: Sequence[Row], layout: SheetLayout) -> Tuple[TableSchema, List[str]]:
    """Distinct non-blank values of a lookup column, in sheet order."""
    schema = resolve_schema(rows, layout)
    column = schema.column(layout.identifier_field)
    values: Dict[str, None] = {}
    for row in rows[schema.data_start_row:]:
        value = cell(row, column).strip()
        if value and value not in ("undefined", "null"):
            values.setdefault(value)
    return schema, list(values)


def _num(value: float) -> Any:
    return int(value) if float(value).is_integer() else value


def _material_lines(row: Row, slots: Sequence[Tuple[int, int]]) -> List[MaterialLine]:
    lines = []
    for name_col, qty_col in slots:
        name = cell(row, name_col).strip()
        if name:
            lines.append(MaterialLine(name=name, qty=parse_float(cell(row, qty_col))))
    return lines


def _padded(lines: Sequence[MaterialLine], slots: int) -> List[MaterialLine]:
    padded = list(lines[:slots])
    padded.extend(MaterialLine() for _ in range(slots - len(padded)))
    return padded


# ── Decoders ─────────────────────────────────────────────────────────────────

def decode_production_orders(rows: Sequence[Row]) -> List[ProductionOrder]:
    orders = []
    for row_number, row, schema in iter_data_rows(rows, PRODUCTION_LAYOUT):
        col = schema.column
        target_qty = parse_float(cell(row, col("target_qty")))
        total_made = parse_float(cell(row, col("total_made")))
        pending = parse_float(cell(row, col("pending")), default=target_qty)
        status = ProductionStatus.parse(cell(row, col("status"))) or derive_status(total_made, pending)
        orders.append(
            ProductionOrder(
                serial=cell(row, col("serial")).strip(),
                created_at=cell(row, col("created_at")),
                name=cell(row, col("name")),
                target_qty=target_qty,
                notes=cell(row, col("notes")),
                total_planned=parse_float(cell(row, col("total_planned"))),
                total_made=total_made,
                pending=pending,
                status=status,
                planned_at=_marker(row, col("planned_at")),
                actual_at=_marker(row, col("actual_at")),
                row_index=row_number,
            )
        )
    return orders


def decode_job_cards(rows: Sequence[Row]) -> List[JobCard]:
    cards = []
    for row_number, row, schema in iter_data_rows(rows, JOB_CARD_LAYOUT):
        col = schema.column
        planned_qty = parse_float(cell(row, col("planned_qty")))
        made_text = cell(row, col("actual_made")).strip()
        marked_complete = made_text.upper() == _COMPLETE
        cards.append(
            JobCard(
                serial=cell(row, col("serial")).strip(),
                created_at=cell(row, col("created_at")),
                production_order_ref=cell(row, col("production_order_ref")).strip(),
                supervisor=cell(row, col("supervisor")),
                product_name=cell(row, col("product_name")),
                planned_qty=planned_qty,
                production_date=cell(row, col("production_date")),
                actual_made=0 if marked_complete else parse_float(made_text),
                pending_qty=parse_float(cell(row, col("pending_qty")), default=planned_qty),
                status=cell(row, col("status")).strip().upper(),
                planned_at=_marker(row, col("planned_at")),
                marked_complete=marked_complete,
                row_index=row_number,
            )
        )
    return cards


def decode_actual_entries(rows: Sequence[Row], schema: Optional[TableSchema] = None) -> List[ActualEntry]:
    entries = []
    for row_number, row, resolved in iter_data_rows(rows, ACTUAL_LAYOUT, schema):
        col = resolved.column
        entries.append(
            ActualEntry(
                serial=cell(row, col("serial")).strip(),
                created_at=cell(row, col("created_at")),
                job_card_ref=cell(row, col("job_card_ref")).strip(),
                production_order_ref=cell(row, col("production_order_ref")).strip(),
                supervisor=cell(row, col("supervisor")),
                date=cell(row, col("date")),
                product_name=cell(row, col("product_name")),
                qty_produced=parse_float(cell(row, col("qty_produced"))),
                raw_materials=_material_lines(row, RAW_MATERIAL_SLOTS),
                has_end_product=cell(row, col("has_end_product")).strip().lower() in _YES,
                end_product=MaterialLine(
                    name=cell(row, col("end_product_name")),
                    qty=parse_float(cell(row, col("end_product_qty"))),
                ),
                narration=cell(row, col("narration")),
                start_reading=parse_float(cell(row, col("start_reading"))),
                end_reading=parse_float(cell(row, col("end_reading"))),
                # Blank hours are derived from the meter readings.
                machine_running_hours=parse_float(cell(row, col("machine_running_hours")), default=None),
                start_photo_url=cell(row, col("start_photo_url")),
                end_photo_url=cell(row, col("end_photo_url")),
                stage1_planned_at=_marker(row, col("stage1_planned_at")),
                stage1_approved_at=_marker(row, col("stage1_approved_at")),
                stage2_planned_at=_marker(row, col("stage2_planned_at")),
                stage2_approved_at=_marker(row, col("stage2_approved_at")),
                row_index=row_number,
            )
        )
    return entries


def decode_crushing_entries(rows: Sequence[Row]) -> List[CrushingEntry]:
    entries = []
    for row_number, row, schema in iter_data_rows(rows, CRUSHING_LAYOUT):
        col = schema.column
        created_at = cell(row, col("created_at")).strip()
        entries.append(
            CrushingEntry(
                serial=created_at,
                created_at=created_at,
                date=cell(row, col("date")),
                production_date=cell(row, col("production_date")),
                product_name=cell(row, col("product_name")),
                input_qty=parse_float(cell(row, col("input_qty"))),
                finished_goods=_material_lines(row, FINISHED_GOOD_SLOTS),
                start_photo_url=cell(row, col("start_photo_url")),
                end_photo_url=cell(row, col("end_photo_url")),
                remarks=cell(row, col("remarks")),
                machine_running_hours=parse_float(cell(row, col("machine_running_hours"))),
                row_index=row_number,
            )
        )
    return entries


DECODERS: Dict[SheetKind, Callable[[Sequence[Row]], list]] = {
    SheetKind.PRODUCTION: decode_production_orders,
    SheetKind.JOB_CARD: decode_job_cards,
    SheetKind.ACTUAL: decode_actual_entries,
    SheetKind.CRUSHING: decode_crushing_entries,
}


def decode_rows(rows: Sequence[Row], kind: SheetKind) -> list:
    return DECODERS[kind](rows or [])


# ── Encoders ─────────────────────────────────────────────────────────────────

def encode_demand_row(created_at: str, serial: str, name: str, qty: float, notes: str = "") -> List[Any]:
    return [created_at, serial, name, _num(qty), notes, 0, 0, _num(qty), "PENDING", "", ""]


def encode_job_card_row(card: JobCard) -> List[Any]:
    return [
        card.created_at,
        card.serial,
        card.production_order_ref,
        card.supervisor,
        card.product_name,
        _num(card.planned_qty),
        card.production_date,
    ]


def encode_actual_entry_row(entry: ActualEntry) -> List[Any]:
    rm = _padded(entry.raw_materials, len(RAW_MATERIAL_SLOTS))
    hours = _num(entry.machine_running_hours or 0)
    return [
        entry.created_at,
        entry.job_card_ref,
        entry.supervisor,
        entry.date,
        entry.product_name,
        _num(entry.qty_produced),
        rm[0].name, _num(rm[0].qty),
        rm[1].name, _num(rm[1].qty),
        rm[2].name, _num(rm[2].qty),
        "Yes" if entry.has_end_product else "No",
        entry.end_product.name,
        _num(entry.end_product.qty),
        entry.narration,
        entry.serial,
        _num(entry.start_reading),
        entry.start_photo_url,
        _num(entry.end_reading),
        entry.end_photo_url,
        hours,
        rm[3].name, _num(rm[3].qty),
        rm[4].name, _num(rm[4].qty),
        hours,
        entry.production_order_ref,
    ]


def encode_crushing_row(entry: CrushingEntry) -> List[Any]:
    fg = _padded(entry.finished_goods, len(FINISHED_GOOD_SLOTS))
    row: List[Any] = [
        entry.created_at,
        entry.date,
        entry.production_date,
        entry.product_name,
        _num(entry.input_qty),
    ]
    for good in fg:
        row.extend([good.name, _num(good.qty)])
    row.extend([
        entry.start_photo_url,
        entry.end_photo_url,
        entry.remarks,
        _num(entry.machine_running_hours),
    ])
    return row
