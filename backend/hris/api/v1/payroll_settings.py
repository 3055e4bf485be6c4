"""
Payroll configuration: per-company settings, TER rates, progressive
brackets, PTKP amounts and the tax calculators built on them.
"""

from typing import Any, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from hris.api.deps import get_db, get_page_params, require_permission
from hris.models.user import User
from hris.schemas.common import ApiResponse, MessageResponse, PaginatedResponse, ok, paginated
from hris.schemas.payroll import (
    PTKPCreate,
    PTKPOut,
    PTKPUpdate,
    PayrollSettingCreate,
    PayrollSettingOut,
    PayrollSettingUpdate,
    ProgressiveTaxResult,
    SeedAllResult,
    SeedResult,
    TaxBracketCreate,
    TaxBracketOut,
    TaxBracketUpdate,
    TaxConfigurationCreate,
    TaxConfigurationOut,
    TaxConfigurationUpdate,
    TERCalculationResult,
)
from hris.services.pagination import PageParams
from hris.services.payroll.settings_service import PayrollSettingsService

router = APIRouter()

read_payroll = require_permission("payroll:read")
manage_payroll = require_permission("payroll:manage")


# ---------------------------------------------------------------- company settings

@router.get("/company/{company_id}", response_model=ApiResponse[PayrollSettingOut])
async def get_company_settings(
    company_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(read_payroll),
) -> Any:
    return ok(await PayrollSettingsService(db).get_company_settings(company_id))


@router.get("/company/{company_id}/init", response_model=ApiResponse[PayrollSettingOut])
async def init_company_settings(
    company_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(read_payroll),
) -> Any:
    """Return the company's settings, creating defaults on first access."""
    return ok(await PayrollSettingsService(db).init_company_settings(company_id))


@router.post("", response_model=ApiResponse[PayrollSettingOut], status_code=201)
async def create_company_settings(
    payload: PayrollSettingCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(manage_payroll),
) -> Any:
    values = payload.model_dump(exclude_none=True)
    company_id = values.pop("company_id")
    settings_row = await PayrollSettingsService(db).create_company_settings(company_id, values, current_user)
    return ok(settings_row, message="Payroll settings created")


@router.put("/company/{company_id}", response_model=ApiResponse[PayrollSettingOut])
async def update_company_settings(
    company_id: int,
    payload: PayrollSettingUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(manage_payroll),
) -> Any:
    settings_row = await PayrollSettingsService(db).update_company_settings(
        company_id, payload.model_dump(exclude_unset=True), current_user
    )
    return ok(settings_row, message="Payroll settings updated")


@router.patch("/company/{company_id}", response_model=ApiResponse[PayrollSettingOut])
async def upsert_company_settings(
    company_id: int,
    payload: PayrollSettingUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(manage_payroll),
) -> Any:
    settings_row = await PayrollSettingsService(db).update_company_settings(
        company_id, payload.model_dump(exclude_unset=True), current_user, create_missing=True
    )
    return ok(settings_row, message="Payroll settings saved")


@router.post("/company/{company_id}/reset", response_model=ApiResponse[PayrollSettingOut])
async def reset_company_settings(
    company_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(manage_payroll),
) -> Any:
    settings_row = await PayrollSettingsService(db).reset_company_settings(company_id, current_user)
    return ok(settings_row, message="Payroll settings reset to defaults")


# ---------------------------------------------------------------- TER rates

@router.get("/tax-configurations", response_model=PaginatedResponse[TaxConfigurationOut])
async def list_tax_configurations(
    category: Optional[str] = None,
    is_active: Optional[bool] = None,
    params: PageParams = Depends(get_page_params),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(read_payroll),
) -> Any:
    items, total = await PayrollSettingsService(db).list_tax_configurations(params, category, is_active)
    return paginated(items, params.page, params.limit, total)


@router.post("/tax-configurations/seed", response_model=ApiResponse[SeedResult])
async def seed_tax_configurations(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(manage_payroll),
) -> Any:
    return ok(await PayrollSettingsService(db).seed_tax_configurations(), message="TER rates seeded")


@router.get("/tax-configurations/{config_id}", response_model=ApiResponse[TaxConfigurationOut])
async def get_tax_configuration(
    config_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(read_payroll),
) -> Any:
    return ok(await PayrollSettingsService(db).get_tax_configuration(config_id))


@router.post("/tax-configurations", response_model=ApiResponse[TaxConfigurationOut], status_code=201)
async def create_tax_configuration(
    payload: TaxConfigurationCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(manage_payroll),
) -> Any:
    row = await PayrollSettingsService(db).create_tax_configuration(payload.model_dump())
    return ok(row, message="TER rate created")


@router.put("/tax-configurations/{config_id}", response_model=ApiResponse[TaxConfigurationOut])
async def update_tax_configuration(
    config_id: int,
    payload: TaxConfigurationUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(manage_payroll),
) -> Any:
    row = await PayrollSettingsService(db).update_tax_configuration(
        config_id, payload.model_dump(exclude_unset=True)
    )
    return ok(row, message="TER rate updated")


@router.delete("/tax-configurations/{config_id}", response_model=MessageResponse)
async def delete_tax_configuration(
    config_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(manage_payroll),
) -> Any:
    await PayrollSettingsService(db).delete_tax_configuration(config_id)
    return {"success": True, "message": "TER rate deleted"}


# ---------------------------------------------------------------- tax brackets

@router.get("/tax-brackets", response_model=PaginatedResponse[TaxBracketOut])
async def list_tax_brackets(
    is_active: Optional[bool] = None,
    params: PageParams = Depends(get_page_params),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(read_payroll),
) -> Any:
    items, total = await PayrollSettingsService(db).list_tax_brackets(params, is_active)
    return paginated(items, params.page, params.limit, total)


@router.post("/tax-brackets/seed", response_model=ApiResponse[SeedResult])
async def seed_tax_brackets(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(manage_payroll),
) -> Any:
    return ok(await PayrollSettingsService(db).seed_tax_brackets(), message="Tax brackets seeded")


@router.get("/tax-brackets/{bracket_id}", response_model=ApiResponse[TaxBracketOut])
async def get_tax_bracket(
    bracket_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(read_payroll),
) -> Any:
    return ok(await PayrollSettingsService(db).get_tax_bracket(bracket_id))


@router.post("/tax-brackets", response_model=ApiResponse[TaxBracketOut], status_code=201)
async def create_tax_bracket(
    payload: TaxBracketCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(manage_payroll),
) -> Any:
    row = await PayrollSettingsService(db).create_tax_bracket(payload.model_dump())
    return ok(row, message="Tax bracket created")


@router.put("/tax-brackets/{bracket_id}", response_model=ApiResponse[TaxBracketOut])
async def update_tax_bracket(
    bracket_id: int,
    payload: TaxBracketUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(manage_payroll),
) -> Any:
    row = await PayrollSettingsService(db).update_tax_bracket(
        bracket_id, payload.model_dump(exclude_unset=True)
    )
    return ok(row, message="Tax bracket updated")


@router.delete("/tax-brackets/{bracket_id}", response_model=MessageResponse)
async def delete_tax_bracket(
    bracket_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(manage_payroll),
) -> Any:
    await PayrollSettingsService(db).delete_tax_bracket(bracket_id)
    return {"success": True, "message": "Tax bracket deleted"}


# ---------------------------------------------------------------- PTKP

@router.get("/ptkp", response_model=PaginatedResponse[PTKPOut])
async def list_ptkp(
    is_active: Optional[bool] = None,
    params: PageParams = Depends(get_page_params),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(read_payroll),
) -> Any:
    items, total = await PayrollSettingsService(db).list_ptkp(params, is_active)
    return paginated(items, params.page, params.limit, total)


@router.post("/ptkp/seed", response_model=ApiResponse[SeedResult])
async def seed_ptkp(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(manage_payroll),
) -> Any:
    return ok(await PayrollSettingsService(db).seed_ptkp(), message="PTKP seeded")


@router.get("/ptkp/status/{ptkp_status}", response_model=ApiResponse[PTKPOut])
async def get_ptkp_by_status(
    ptkp_status: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(read_payroll),
) -> Any:
    return ok(await PayrollSettingsService(db).get_ptkp_by_status(ptkp_status))


@router.get("/ptkp/{ptkp_id}", response_model=ApiResponse[PTKPOut])
async def get_ptkp(
    ptkp_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(read_payroll),
) -> Any:
    return ok(await PayrollSettingsService(db).get_ptkp(ptkp_id))


@router.post("/ptkp", response_model=ApiResponse[PTKPOut], status_code=201)
async def create_ptkp(
    payload: PTKPCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(manage_payroll),
) -> Any:
    values = payload.model_dump()
    values["status"] = values["status"].upper()
    return ok(await PayrollSettingsService(db).create_ptkp(values), message="PTKP created")


@router.put("/ptkp/{ptkp_id}", response_model=ApiResponse[PTKPOut])
async def update_ptkp(
    ptkp_id: int,
    payload: PTKPUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(manage_payroll),
) -> Any:
    row = await PayrollSettingsService(db).update_ptkp(ptkp_id, payload.model_dump(exclude_unset=True))
    return ok(row, message="PTKP updated")


@router.delete("/ptkp/{ptkp_id}", response_model=MessageResponse)
async def delete_ptkp(
    ptkp_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(manage_payroll),
) -> Any:
    await PayrollSettingsService(db).delete_ptkp(ptkp_id)
    return {"success": True, "message": "PTKP deleted"}


# ---------------------------------------------------------------- calculations

@router.get("/calculate/ter", response_model=ApiResponse[TERCalculationResult])
async def calculate_ter(
    gross_monthly: float = Query(..., ge=0),
    ptkp_status: str = Query(...),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(read_payroll),
) -> Any:
    return ok(await PayrollSettingsService(db).calculate_ter(gross_monthly, ptkp_status))


@router.get("/calculate/progressive", response_model=ApiResponse[ProgressiveTaxResult])
async def calculate_progressive(
    pkp: float = Query(..., ge=0),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(read_payroll),
) -> Any:
    return ok(await PayrollSettingsService(db).calculate_progressive(pkp))


@router.post("/seed-all", response_model=ApiResponse[SeedAllResult])
async def seed_all(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(manage_payroll),
) -> Any:
    return ok(await PayrollSettingsService(db).seed_all(), message="Payroll tax tables seeded")
