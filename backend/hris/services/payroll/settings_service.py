"""
Payroll settings per company and the shared tax tables.

Seeding inserts statutory rows that are missing and leaves existing rows
untouched, so it is safe to run repeatedly.
"""

import logging
from typing import Dict, List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from hris.core.audit import AuditLogger
from hris.core.exceptions import BusinessRuleError, ConflictError, NotFoundError
from hris.models.company import Company
from hris.models.payroll import PTKP, PayrollSetting, TaxBracket, TaxConfiguration
from hris.models.user import User
from hris.services.pagination import PageParams, apply_updates, paginate
from hris.services.payroll import calculator
from hris.services.payroll.tax_tables import PROGRESSIVE_BRACKETS, ptkp_amounts, ter_rows

logger = logging.getLogger("hris.payroll")


class PayrollSettingsService:
    def __init__(self, db: AsyncSession):
        self.db = db

    # ---------------------------------------------------- company settings

    async def get_company_settings(self, company_id: int) -> PayrollSetting:
        result = await self.db.execute(
            select(PayrollSetting).where(PayrollSetting.company_id == company_id)
        )
        settings_row = result.scalar_one_or_none()
        if settings_row is None:
            raise NotFoundError(f"Payroll settings for company {company_id} not found")
        return settings_row

    async def init_company_settings(self, company_id: int) -> PayrollSetting:
        """Get the company's settings, creating them with defaults if missing."""
        result = await self.db.execute(
            select(PayrollSetting).where(PayrollSetting.company_id == company_id)
        )
        settings_row = result.scalar_one_or_none()
        if settings_row:
            return settings_row

        if await self.db.get(Company, company_id) is None:
            raise NotFoundError(f"Company {company_id} not found")

        settings_row = PayrollSetting(company_id=company_id)
        self.db.add(settings_row)
        await self.db.commit()
        await self.db.refresh(settings_row)
        logger.info(f"Initialized payroll settings for company {company_id}")
        return settings_row

    async def create_company_settings(self, company_id: int, values: dict, actor: User) -> PayrollSetting:
        existing = await self.db.execute(
            select(PayrollSetting.id).where(PayrollSetting.company_id == company_id)
        )
        if existing.scalar_one_or_none() is not None:
            raise ConflictError(f"Payroll settings for company {company_id} already exist")
        if await self.db.get(Company, company_id) is None:
            raise NotFoundError(f"Company {company_id} not found")

        settings_row = PayrollSetting(company_id=company_id, **values)
        self.db.add(settings_row)
        AuditLogger.log(
            self.db,
            action="payroll.settings.create",
            user_id=actor.id,
            username=actor.email,
            resource_type="payroll_settings",
            resource_id=company_id,
        )
        await self._commit()
        await self.db.refresh(settings_row)
        return settings_row

    async def update_company_settings(
        self, company_id: int, changes: dict, actor: User, create_missing: bool = False
    ) -> PayrollSetting:
        if create_missing:
            settings_row = await self.init_company_settings(company_id)
        else:
            settings_row = await self.get_company_settings(company_id)

        apply_updates(settings_row, changes)
        AuditLogger.log(
            self.db,
            action="payroll.settings.update",
            user_id=actor.id,
            username=actor.email,
            resource_type="payroll_settings",
            resource_id=company_id,
            metadata=changes,
        )
        await self.db.commit()
        await self.db.refresh(settings_row)
        return settings_row

    async def reset_company_settings(self, company_id: int, actor: User) -> PayrollSetting:
        settings_row = await self.get_company_settings(company_id)
        await self.db.delete(settings_row)
        await self.db.flush()

        fresh = PayrollSetting(company_id=company_id)
        self.db.add(fresh)
        AuditLogger.log(
            self.db,
            action="payroll.settings.reset",
            user_id=actor.id,
            username=actor.email,
            resource_type="payroll_settings",
            resource_id=company_id,
        )
        await self.db.commit()
        await self.db.refresh(fresh)
        return fresh

    # -------------------------------------------------------- TER rates

    async def list_tax_configurations(
        self, params: PageParams, category: Optional[str] = None, is_active: Optional[bool] = None
    ) -> Tuple[List[TaxConfiguration], int]:
        query = select(TaxConfiguration)
        if category:
            query = query.where(TaxConfiguration.category == category.upper())
        if is_active is not None:
            query = query.where(TaxConfiguration.is_active == is_active)
        query = query.order_by(TaxConfiguration.category, TaxConfiguration.min_income)
        return await paginate(self.db, query, params)

    async def get_tax_configuration(self, config_id: int) -> TaxConfiguration:
        return await self._get(TaxConfiguration, config_id, "Tax configuration")

    async def create_tax_configuration(self, values: dict) -> TaxConfiguration:
        _check_range(values.get("min_income"), values.get("max_income"))
        return await self._create(TaxConfiguration, values)

    async def update_tax_configuration(self, config_id: int, changes: dict) -> TaxConfiguration:
        row = await self.get_tax_configuration(config_id)
        _check_range(changes.get("min_income", row.min_income), changes.get("max_income", row.max_income))
        return await self._update(row, changes)

    async def delete_tax_configuration(self, config_id: int) -> None:
        await self._delete(await self.get_tax_configuration(config_id))

    async def seed_tax_configurations(self) -> Dict[str, int]:
        result = await self.db.execute(select(TaxConfiguration.category, TaxConfiguration.min_income))
        existing = {(category, float(min_income)) for category, min_income in result.all()}

        created = skipped = 0
        for category in ("A", "B", "C"):
            for lower, upper, rate in ter_rows(category):
                if (category, float(lower)) in existing:
                    skipped += 1
                    continue
                self.db.add(TaxConfiguration(
                    category=category,
                    min_income=lower,
                    max_income=upper,
                    rate=rate,
                    description=f"TER {category} PP 58/2023",
                    is_active=True,
                ))
                created += 1
        await self.db.commit()
        logger.info(f"Seeded TER rates: created={created} skipped={skipped}")
        return {"created": created, "skipped": skipped}

    # ---------------------------------------------------- tax brackets

    async def list_tax_brackets(
        self, params: PageParams, is_active: Optional[bool] = None
    ) -> Tuple[List[TaxBracket], int]:
        query = select(TaxBracket)
        if is_active is not None:
            query = query.where(TaxBracket.is_active == is_active)
        return await paginate(self.db, query.order_by(TaxBracket.bracket_order), params)

    async def get_tax_bracket(self, bracket_id: int) -> TaxBracket:
        return await self._get(TaxBracket, bracket_id, "Tax bracket")

    async def create_tax_bracket(self, values: dict) -> TaxBracket:
        _check_range(values.get("min_income"), values.get("max_income"))
        return await self._create(TaxBracket, values)

    async def update_tax_bracket(self, bracket_id: int, changes: dict) -> TaxBracket:
        row = await self.get_tax_bracket(bracket_id)
        _check_range(changes.get("min_income", row.min_income), changes.get("max_income", row.max_income))
        return await self._update(row, changes)

    async def delete_tax_bracket(self, bracket_id: int) -> None:
        await self._delete(await self.get_tax_bracket(bracket_id))

    async def seed_tax_brackets(self) -> Dict[str, int]:
        result = await self.db.execute(select(TaxBracket.min_income))
        existing = {float(value) for (value,) in result.all()}

        created = skipped = 0
        for order, (lower, upper, rate) in enumerate(PROGRESSIVE_BRACKETS, start=1):
            if float(lower) in existing:
                skipped += 1
                continue
            self.db.add(TaxBracket(
                min_income=lower,
                max_income=upper,
                rate=rate,
                bracket_order=order,
                description="PPh 21 UU HPP",
                is_active=True,
            ))
            created += 1
        await self.db.commit()
        logger.info(f"Seeded tax brackets: created={created} skipped={skipped}")
        return {"created": created, "skipped": skipped}

    # ------------------------------------------------------------- PTKP

    async def list_ptkp(
        self, params: PageParams, is_active: Optional[bool] = None
    ) -> Tuple[List[PTKP], int]:
        query = select(PTKP)
        if is_active is not None:
            query = query.where(PTKP.is_active == is_active)
        return await paginate(self.db, query.order_by(PTKP.amount, PTKP.status), params)

    async def get_ptkp(self, ptkp_id: int) -> PTKP:
        return await self._get(PTKP, ptkp_id, "PTKP")

    async def get_ptkp_by_status(self, status: str) -> PTKP:
        result = await self.db.execute(select(PTKP).where(PTKP.status == status.upper()))
        row = result.scalar_one_or_none()
        if row is None:
            raise NotFoundError(f"PTKP status {status} not found")
        return row

    async def create_ptkp(self, values: dict) -> PTKP:
        values = {**values, "status": values["status"].upper()}
        return await self._create(PTKP, values)

    async def update_ptkp(self, ptkp_id: int, changes: dict) -> PTKP:
        return await self._update(await self.get_ptkp(ptkp_id), changes)

    async def delete_ptkp(self, ptkp_id: int) -> None:
        await self._delete(await self.get_ptkp(ptkp_id))

    async def seed_ptkp(self) -> Dict[str, int]:
        result = await self.db.execute(select(PTKP.status))
        existing = {status for (status,) in result.all()}

        created = skipped = 0
        for status, description, amount in ptkp_amounts():
            if status in existing:
                skipped += 1
                continue
            self.db.add(PTKP(status=status, description=description, amount=amount, is_active=True))
            created += 1
        await self.db.commit()
        logger.info(f"Seeded PTKP: created={created} skipped={skipped}")
        return {"created": created, "skipped": skipped}

    async def seed_all(self) -> Dict[str, Dict[str, int]]:
        return {
            "ter_rates": await self.seed_tax_configurations(),
            "tax_brackets": await self.seed_tax_brackets(),
            "ptkp": await self.seed_ptkp(),
        }

    # ------------------------------------------------------ calculations

    async def calculate_ter(self, gross_monthly: float, ptkp_status: str) -> dict:
        category = calculator.ter_category(ptkp_status)
        result = await self.db.execute(
            select(TaxConfiguration).where(
                TaxConfiguration.category == category,
                TaxConfiguration.is_active.is_(True),
            )
        )
        rate = calculator.find_ter_rate(result.scalars().all(), gross_monthly)
        return {
            "gross_monthly": gross_monthly,
            "ptkp_status": ptkp_status.upper(),
            "category": category,
            "rate": rate,
            "tax_amount": calculator.round_amount(gross_monthly * rate),
        }

    async def calculate_progressive(self, pkp: float) -> dict:
        result = await self.db.execute(select(TaxBracket).where(TaxBracket.is_active.is_(True)))
        brackets = result.scalars().all()
        if not brackets:
            raise NotFoundError("No tax brackets configured. Seed them first.")
        return calculator.calculate_progressive_tax(brackets, pkp)

    # ------------------------------------------------------------ helpers

    async def _get(self, model, obj_id: int, label: str):
        obj = await self.db.get(model, obj_id, populate_existing=True)
        if obj is None:
            raise NotFoundError(f"{label} {obj_id} not found")
        return obj

    async def _create(self, model, values: dict):
        obj = model(**values)
        self.db.add(obj)
        await self._commit()
        await self.db.refresh(obj)
        return obj

    async def _update(self, obj, changes: dict):
        apply_updates(obj, changes)
        await self._commit()
        await self.db.refresh(obj)
        return obj

    async def _delete(self, obj) -> None:
        await self.db.delete(obj)
        await self.db.commit()

    async def _commit(self) -> None:
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictError("Record conflicts with an existing entry")


def _check_range(min_income, max_income) -> None:
    if min_income is not None and max_income is not None and float(max_income) < float(min_income):
        raise BusinessRuleError("max_income cannot be lower than min_income", code="INVALID_RANGE")
