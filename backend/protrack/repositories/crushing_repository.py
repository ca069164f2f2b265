from protrack.repositories.base import SheetRepository
from protrack.schemas.crushing import CrushingEntry
from protrack.sheets.layout import CRUSHING_LAYOUT, SheetKind


class CrushingRepository(SheetRepository[CrushingEntry]):
    layout = CRUSHING_LAYOUT
    kind = SheetKind.CRUSHING
