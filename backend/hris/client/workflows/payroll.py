"""Payroll settings overview: TER rates, progressive brackets and PTKP."""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from hris.client.http import ApiError, Notifier
from hris.client.services.payroll_settings import PayrollSettingsService

logger = logging.getLogger("hris.client.payroll")

LOAD_ERROR_MESSAGE = "Gagal memuat data pengaturan payroll"
SEED_ERROR_MESSAGE = "Gagal menginisialisasi data"

TER_PAGE_SIZE = 20
BRACKET_PAGE_SIZE = 10
PTKP_PAGE_SIZE = 20


@dataclass
class PayrollOverview:
    ter_rates: List[dict] = field(default_factory=list)
    tax_brackets: List[dict] = field(default_factory=list)
    ptkp: List[dict] = field(default_factory=list)
    ter_total_pages: int = 1
    brackets_total_pages: int = 1
    ptkp_total_pages: int = 1
    error: Optional[str] = None

    @property
    def loaded(self) -> bool:
        return self.error is None


async def load_payroll_overview(
    service: PayrollSettingsService,
    ter_page: int = 1,
    brackets_page: int = 1,
    ptkp_page: int = 1,
    ter_category: Optional[str] = None,
    notifier: Optional[Notifier] = None,
) -> PayrollOverview:
    """
    Fetch the three tables concurrently.

    All or nothing: when any fetch fails the overview carries only the
    error, never a partial set of tables.
    """
    notify = notifier or service.api.notify
    try:
        ter, brackets, ptkp = await asyncio.gather(
            service.tax_configurations(page=ter_page, limit=TER_PAGE_SIZE, category=ter_category or None),
            service.tax_brackets(page=brackets_page, limit=BRACKET_PAGE_SIZE),
            service.ptkp_list(page=ptkp_page, limit=PTKP_PAGE_SIZE),
        )
    except ApiError as e:
        logger.error(f"Failed to fetch payroll settings: {e.message}")
        notify(LOAD_ERROR_MESSAGE)
        return PayrollOverview(error=LOAD_ERROR_MESSAGE)

    return PayrollOverview(
        ter_rates=ter.items,
        tax_brackets=brackets.items,
        ptkp=ptkp.items,
        ter_total_pages=ter.pagination.total_pages or 1,
        brackets_total_pages=brackets.pagination.total_pages or 1,
        ptkp_total_pages=ptkp.pagination.total_pages or 1,
    )


async def seed_all_tax_data(service: PayrollSettingsService, notifier: Optional[Notifier] = None) -> str:
    """Seed every tax table and summarize how many rows were added."""
    notify = notifier or service.api.notify
    try:
        result = await service.seed_all()
    except ApiError as e:
        logger.error(f"Failed to seed tax data: {e.message}")
        notify(e.message or SEED_ERROR_MESSAGE)
        return SEED_ERROR_MESSAGE
    message = (
        f"Berhasil! TER: {result['ter_rates']['created']} baru, "
        f"Brackets: {result['tax_brackets']['created']} baru, "
        f"PTKP: {result['ptkp']['created']} baru"
    )
    notify(message)
    return message
