"""
Sheet names and column contracts of the spreadsheet store.

Everything the codec knows about where data sits in a sheet lives here:
the default first data row, the fixed column of every field, the marker cells
that relocate a column when the header layout drifts, and the substrings that
identify repeated header/banner rows.

Column indices are 0-based; the gateway's ``update_cell`` takes 1-based ones.
"""
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Tuple


class SheetName(str, Enum):
    SEMI_PRODUCTION = "Semi Production"
    SEMI_JOB_CARD = "Semi Job Card"
    SEMI_ACTUAL = "Semi Actual"
    CRUSHING_ACTUAL = "Crushing_actual"
    # The store really spells it this way.
    CRUSHING_ITEMS = "Crusing Items Name"
    MASTER = "Master"
    USER = "USER"


class SheetKind(str, Enum):
    PRODUCTION = "production"
    JOB_CARD = "job_card"
    ACTUAL = "actual"
    CRUSHING = "crushing"


@dataclass(frozen=True)
class MarkerSpec:
    """A header cell that pins ``field`` to the column it is found in."""

    field: str
    tokens: Tuple[str, ...]
    exact: bool = True

    def matches(self, text: str) -> bool:
        normalized = text.strip().lower()
        if not normalized:
            return False
        if self.exact:
            return normalized in self.tokens
        return any(token in normalized for token in self.tokens)


@dataclass(frozen=True)
class SheetLayout:
    sheet: SheetName
    default_start_row: int
    columns: Mapping[str, int]
    identifier_field: str = "serial"
    min_row_length: int = 1
    markers: Tuple[MarkerSpec, ...] = ()
    sentinels: Tuple[str, ...] = ()
    scan_rows: int = 10


def _columns(**fields: int) -> Mapping[str, int]:
    return MappingProxyType(dict(fields))


PRODUCTION_LAYOUT = SheetLayout(
    sheet=SheetName.SEMI_PRODUCTION,
    default_start_row=4,
    columns=_columns(
        created_at=0,
        serial=1,
        name=2,
        target_qty=3,
        notes=4,
        total_planned=5,
        total_made=6,
        pending=7,
        status=8,
        planned_at=9,
        actual_at=10,
    ),
    min_row_length=5,
    sentinels=("SF-Sr No", "Semi Production", "Devshree", "Actual", "Form"),
)

JOB_CARD_LAYOUT = SheetLayout(
    sheet=SheetName.SEMI_JOB_CARD,
    default_start_row=4,
    columns=_columns(
        created_at=0,
        serial=1,
        production_order_ref=2,
        supervisor=3,
        product_name=4,
        planned_qty=5,
        production_date=6,
        actual_made=7,
        pending_qty=8,
        status=9,
        planned_at=10,
    ),
    min_row_length=2,
    sentinels=("Semi Job Card", "Devshree", "Actual"),
)

# (name column, qty column) per raw material slot, in slot order.
RAW_MATERIAL_SLOTS: Tuple[Tuple[int, int], ...] = ((6, 7), (8, 9), (10, 11), (22, 23), (24, 25))

ACTUAL_LAYOUT = SheetLayout(
    sheet=SheetName.SEMI_ACTUAL,
    default_start_row=4,
    columns=_columns(
        created_at=0,
        job_card_ref=1,
        supervisor=2,
        date=3,
        product_name=4,
        qty_produced=5,
        has_end_product=12,
        end_product_name=13,
        end_product_qty=14,
        narration=15,
        serial=16,
        start_reading=17,
        start_photo_url=18,
        end_reading=19,
        end_photo_url=20,
        machine_running_hours=21,
        machine_running=26,
        production_order_ref=27,
        stage1_planned_at=28,
        stage1_approved_at=29,
        stage2_planned_at=30,
        stage2_approved_at=31,
    ),
    identifier_field="job_card_ref",
    min_row_length=5,
    markers=(
        MarkerSpec("stage1_planned_at", ("planned1",)),
        MarkerSpec("stage1_approved_at", ("actual1",)),
        MarkerSpec("stage2_planned_at", ("planned2",)),
        MarkerSpec("stage2_approved_at", ("actual2",)),
    ),
    sentinels=("Semi Finished Entry", "Devshree", "Form", "Actual"),
)

# (name column, qty column) per finished good slot.
FINISHED_GOOD_SLOTS: Tuple[Tuple[int, int], ...] = ((5, 6), (7, 8), (9, 10), (11, 12))

CRUSHING_LAYOUT = SheetLayout(
    sheet=SheetName.CRUSHING_ACTUAL,
    default_start_row=1,
    columns=_columns(
        created_at=0,
        date=1,
        production_date=2,
        product_name=3,
        input_qty=4,
        start_photo_url=13,
        end_photo_url=14,
        remarks=15,
        machine_running_hours=16,
    ),
    identifier_field="created_at",
    min_row_length=5,
    sentinels=("Timestamp", "Devshree", "Form", "Actual"),
)

CRUSHING_ITEMS_LAYOUT = SheetLayout(
    sheet=SheetName.CRUSHING_ITEMS,
    default_start_row=1,
    columns=_columns(product_name=0),
    identifier_field="product_name",
    markers=(MarkerSpec("product_name", ("crushing product name",), exact=False),),
    scan_rows=20,
)

# Finished-good dropdowns sit in every other column of the items sheet.
CRUSHING_ITEM_COLUMNS: Tuple[int, ...] = (0, 2, 4, 6, 8)

SUPERVISOR_LAYOUT = SheetLayout(
    sheet=SheetName.MASTER,
    default_start_row=1,
    columns=_columns(supervisor=0),
    identifier_field="supervisor",
    markers=(MarkerSpec("supervisor", ("supervisor", "name"), exact=False),),
    scan_rows=5,
)

RAW_MATERIAL_LAYOUT = SheetLayout(
    sheet=SheetName.MASTER,
    default_start_row=1,
    columns=_columns(raw_material=0),
    identifier_field="raw_material",
    markers=(MarkerSpec("raw_material", ("raw material", "material name"), exact=False),),
    scan_rows=5,
)

USER_LAYOUT = SheetLayout(
    sheet=SheetName.USER,
    default_start_row=1,
    columns=_columns(username=0, password=1, name=2, page_access=3),
    identifier_field="username",
)

LAYOUTS = {
    SheetKind.PRODUCTION: PRODUCTION_LAYOUT,
    SheetKind.JOB_CARD: JOB_CARD_LAYOUT,
    SheetKind.ACTUAL: ACTUAL_LAYOUT,
    SheetKind.CRUSHING: CRUSHING_LAYOUT,
}
