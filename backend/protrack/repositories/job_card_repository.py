from protrack.repositories.base import SheetRepository
from protrack.schemas.job_card import JobCard
from protrack.sheets.layout import JOB_CARD_LAYOUT, SheetKind


class JobCardRepository(SheetRepository[JobCard]):
    layout = JOB_CARD_LAYOUT
    kind = SheetKind.JOB_CARD
