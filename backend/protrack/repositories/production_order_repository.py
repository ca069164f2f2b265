from protrack.repositories.base import SheetRepository
from protrack.schemas.production_order import ProductionOrder
from protrack.sheets.layout import PRODUCTION_LAYOUT, SheetKind


class ProductionOrderRepository(SheetRepository[ProductionOrder]):
    layout = PRODUCTION_LAYOUT
    kind = SheetKind.PRODUCTION
