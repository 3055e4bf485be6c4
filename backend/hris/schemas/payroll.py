from datetime import date, datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

TERCategory = Literal["A", "B", "C"]
RoundingMethod = Literal["round", "floor", "ceil"]


class PayrollSettingFields(BaseModel):
    bpjs_kesehatan_employee_rate: Optional[float] = Field(None, ge=0, le=1)
    bpjs_kesehatan_employer_rate: Optional[float] = Field(None, ge=0, le=1)
    bpjs_kesehatan_max_salary: Optional[float] = Field(None, ge=0)
    bpjs_jht_employee_rate: Optional[float] = Field(None, ge=0, le=1)
    bpjs_jht_employer_rate: Optional[float] = Field(None, ge=0, le=1)
    bpjs_jp_employee_rate: Optional[float] = Field(None, ge=0, le=1)
    bpjs_jp_employer_rate: Optional[float] = Field(None, ge=0, le=1)
    bpjs_jp_max_salary: Optional[float] = Field(None, ge=0)
    bpjs_jkk_rate: Optional[float] = Field(None, ge=0, le=1)
    bpjs_jkm_rate: Optional[float] = Field(None, ge=0, le=1)
    use_ter_method: Optional[bool] = None
    position_cost_rate: Optional[float] = Field(None, ge=0, le=1)
    position_cost_max: Optional[float] = Field(None, ge=0)
    overtime_rate_first_hour: Optional[float] = Field(None, ge=0)
    overtime_rate_next_hours: Optional[float] = Field(None, ge=0)
    payroll_cutoff_day: Optional[int] = Field(None, ge=1, le=31)
    payment_day: Optional[int] = Field(None, ge=1, le=31)
    rounding_method: Optional[RoundingMethod] = None
    rounding_precision: Optional[int] = Field(None, ge=0, le=4)
    currency: Optional[str] = None


class PayrollSettingCreate(PayrollSettingFields):
    company_id: int


class PayrollSettingUpdate(PayrollSettingFields):
    pass


class PayrollSettingOut(PayrollSettingFields):
    id: int
    company_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class TaxConfigurationCreate(BaseModel):
    category: TERCategory
    min_income: float = Field(..., ge=0)
    max_income: Optional[float] = Field(None, ge=0)
    rate: float = Field(..., ge=0, le=1)
    effective_date: Optional[date] = None
    description: Optional[str] = None
    is_active: bool = True


class TaxConfigurationUpdate(BaseModel):
    category: Optional[TERCategory] = None
    min_income: Optional[float] = Field(None, ge=0)
    max_income: Optional[float] = Field(None, ge=0)
    rate: Optional[float] = Field(None, ge=0, le=1)
    effective_date: Optional[date] = None
    description: Optional[str] = None
    is_active: Optional[bool] = None


class TaxConfigurationOut(TaxConfigurationCreate):
    id: int

    class Config:
        from_attributes = True


class TaxBracketCreate(BaseModel):
    min_income: float = Field(..., ge=0)
    max_income: Optional[float] = Field(None, ge=0)
    rate: float = Field(..., ge=0, le=1)
    bracket_order: int = Field(..., ge=1)
    description: Optional[str] = None
    is_active: bool = True


class TaxBracketUpdate(BaseModel):
    min_income: Optional[float] = Field(None, ge=0)
    max_income: Optional[float] = Field(None, ge=0)
    rate: Optional[float] = Field(None, ge=0, le=1)
    bracket_order: Optional[int] = Field(None, ge=1)
    description: Optional[str] = None
    is_active: Optional[bool] = None


class TaxBracketOut(TaxBracketCreate):
    id: int

    class Config:
        from_attributes = True


class PTKPCreate(BaseModel):
    status: str
    description: Optional[str] = None
    amount: float = Field(..., ge=0)
    is_active: bool = True


class PTKPUpdate(BaseModel):
    description: Optional[str] = None
    amount: Optional[float] = Field(None, ge=0)
    is_active: Optional[bool] = None


class PTKPOut(PTKPCreate):
    id: int

    class Config:
        from_attributes = True


class TERCalculationRequest(BaseModel):
    gross_monthly: float = Field(..., ge=0)
    ptkp_status: str


class TERCalculationResult(BaseModel):
    gross_monthly: float
    ptkp_status: str
    category: str
    rate: float
    tax_amount: float


class ProgressiveTaxRequest(BaseModel):
    pkp: float = Field(..., ge=0)


class BracketTax(BaseModel):
    min_income: float
    max_income: Optional[float] = None
    rate: float
    taxable_amount: float
    tax: float


class ProgressiveTaxResult(BaseModel):
    pkp: float
    total_tax: float
    effective_rate: float
    breakdown: List[BracketTax]


class SeedResult(BaseModel):
    created: int
    skipped: int


class SeedAllResult(BaseModel):
    ter_rates: SeedResult
    tax_brackets: SeedResult
    ptkp: SeedResult
