"""
Serial numbers for new records: ``SF-101``, ``SJC-382``, ``SA-007``.

The next serial is one past the highest numeric suffix currently visible in
the governing sheet, so gaps and out-of-order rows do not matter. Suffixes at
or below the policy floor are not counted; when none remain the seed is
issued. Reading the sheet may fail; generation then falls back to the seed so
that entry creation is never blocked.
"""
import logging
import re
from dataclasses import dataclass
from typing import Iterable, Optional

from protrack.core.exceptions import GatewayException
from protrack.repositories.actual_entry_repository import ActualEntryRepository
from protrack.repositories.base import SheetRepository
from protrack.repositories.job_card_repository import JobCardRepository
from protrack.repositories.production_order_repository import ProductionOrderRepository
from protrack.sheets.gateway import SheetsGateway

logger = logging.getLogger(__name__)

_SUFFIX = re.compile(r"^\s*([+-]?\d+)")


@dataclass(frozen=True)
class SerialPolicy:
    prefix: str
    seed: int
    floor: int = 0
    width: int = 0

    def format(self, number: int) -> str:
        return f"{self.prefix}{str(number).zfill(self.width)}"


PRODUCTION_SERIALS = SerialPolicy(prefix="SF-", seed=100)
JOB_CARD_SERIALS = SerialPolicy(prefix="SJC-", seed=381, floor=380)
ACTUAL_ENTRY_SERIALS = SerialPolicy(prefix="SA-", seed=1, width=3)


def max_suffix(values: Iterable[str], prefix: str) -> Optional[int]:
    highest = None
    for value in values:
        if not value or not value.startswith(prefix):
            continue
        match = _SUFFIX.match(value[len(prefix):])
        if not match:
            continue
        number = int(match.group(1))
        if highest is None or number > highest:
            highest = number
    return highest


def next_serial(values: Iterable[str], policy: SerialPolicy) -> str:
    highest = max_suffix(values, policy.prefix)
    if highest is None or highest <= policy.floor:
        return policy.format(policy.seed)
    return policy.format(highest + 1)


class SerialNumberService:
    def __init__(self, gateway: SheetsGateway):
        self._orders = ProductionOrderRepository(gateway)
        self._job_cards = JobCardRepository(gateway)
        self._entries = ActualEntryRepository(gateway)

    async def next_production_serial(self) -> str:
        return await self._next(self._orders, PRODUCTION_SERIALS)

    async def next_job_card_serial(self) -> str:
        return await self._next(self._job_cards, JOB_CARD_SERIALS)

    async def next_actual_entry_serial(self) -> str:
        return await self._next(self._entries, ACTUAL_ENTRY_SERIALS)

    async def _next(self, repo: SheetRepository, policy: SerialPolicy) -> str:
        try:
            records = await repo.list_all()
        except GatewayException as exc:
            logger.warning(
                "serial_seed_fallback sheet=%s seed=%s error=%s",
                repo.sheet_name,
                policy.format(policy.seed),
                exc,
            )
            return policy.format(policy.seed)
        return next_serial((record.serial for record in records), policy)
