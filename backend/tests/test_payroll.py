"""
Tests for hris/services/payroll - PPh 21 calculations and tax table seeding.
"""
from types import SimpleNamespace

import pytest


def _brackets():
    from hris.services.payroll.tax_tables import PROGRESSIVE_BRACKETS

    return [
        SimpleNamespace(min_income=lower, max_income=upper, rate=rate, bracket_order=order)
        for order, (lower, upper, rate) in enumerate(PROGRESSIVE_BRACKETS, start=1)
    ]


class TestTerCategory:
    """PTKP status maps onto TER categories A, B and C."""

    @pytest.mark.parametrize(
        "status,category",
        [("TK/0", "A"), ("K/0", "A"), ("tk/2", "B"), ("K/2", "B"), ("K/3", "C")],
    )
    def test_known_statuses(self, status, category):
        from hris.services.payroll.calculator import ter_category

        assert ter_category(status) == category

    def test_unknown_status(self):
        from hris.core.exceptions import BusinessRuleError
        from hris.services.payroll.calculator import ter_category

        with pytest.raises(BusinessRuleError) as exc_info:
            ter_category("X/9")

        assert exc_info.value.code == "INVALID_PTKP_STATUS"


class TestFindTerRate:
    """Test TER band lookup."""

    def _rows(self, category="A"):
        from hris.services.payroll.tax_tables import ter_rows

        return [
            SimpleNamespace(min_income=lower, max_income=upper, rate=rate)
            for lower, upper, rate in ter_rows(category)
        ]

    def test_below_threshold_is_zero(self):
        from hris.services.payroll.calculator import find_ter_rate

        assert find_ter_rate(self._rows(), 5_000_000) == 0.0

    def test_band_lookup(self):
        from hris.services.payroll.calculator import find_ter_rate

        assert find_ter_rate(self._rows(), 10_000_000) == 0.02
        assert find_ter_rate(self._rows(), 15_000_000) == 0.06

    def test_band_boundaries(self):
        from hris.services.payroll.calculator import find_ter_rate

        assert find_ter_rate(self._rows(), 5_400_000) == 0.0
        assert find_ter_rate(self._rows(), 5_400_001) == 0.0025

    def test_unsorted_rows(self):
        from hris.services.payroll.calculator import find_ter_rate

        rows = list(reversed(self._rows()))

        assert find_ter_rate(rows, 10_000_000) == 0.02

    def test_no_rows(self):
        from hris.core.exceptions import BusinessRuleError
        from hris.services.payroll.calculator import find_ter_rate

        with pytest.raises(BusinessRuleError):
            find_ter_rate([], 10_000_000)


class TestProgressiveTax:
    """Test the annual progressive calculation."""

    def test_first_bracket_only(self):
        from hris.services.payroll.calculator import calculate_progressive_tax

        result = calculate_progressive_tax(_brackets(), 50_000_000)

        assert result["total_tax"] == 2_500_000
        assert len(result["breakdown"]) == 1

    def test_spans_three_brackets(self):
        from hris.services.payroll.calculator import calculate_progressive_tax

        result = calculate_progressive_tax(_brackets(), 300_000_000)

        assert result["total_tax"] == 44_000_000
        assert [row["rate"] for row in result["breakdown"]] == [0.05, 0.15, 0.25]
        assert result["breakdown"][1]["taxable_amount"] == 190_000_000
        assert result["effective_rate"] == round(44_000_000 / 300_000_000, 6)

    def test_zero_income(self):
        from hris.services.payroll.calculator import calculate_progressive_tax

        result = calculate_progressive_tax(_brackets(), 0)

        assert result["total_tax"] == 0
        assert result["effective_rate"] == 0.0
        assert result["breakdown"] == []


class TestRoundAmount:
    """Test payroll rounding modes."""

    def test_round(self):
        from hris.services.payroll.calculator import round_amount

        assert round_amount(1234.6) == 1235

    def test_floor_and_ceil(self):
        from hris.services.payroll.calculator import round_amount

        assert round_amount(1234.56, "floor", 1) == 1234.5
        assert round_amount(1234.51, "ceil", 1) == 1234.6


class TestPtkpTable:
    def test_amounts(self):
        from hris.services.payroll.tax_tables import ptkp_amounts

        amounts = {status: amount for status, _, amount in ptkp_amounts()}

        assert amounts["TK/0"] == 54_000_000
        assert amounts["K/0"] == 58_500_000
        assert amounts["K/3"] == 72_000_000
        assert len(amounts) == 8


class TestPayrollSettingsService:
    """Database-backed payroll configuration."""

    async def test_seed_all_is_idempotent(self, db_session):
        from hris.services.payroll.settings_service import PayrollSettingsService

        service = PayrollSettingsService(db_session)
        first = await service.seed_all()
        second = await service.seed_all()

        assert first["tax_brackets"] == {"created": 5, "skipped": 0}
        assert first["ptkp"] == {"created": 8, "skipped": 0}
        assert first["ter_rates"]["created"] > 0
        assert second["ter_rates"] == {"created": 0, "skipped": first["ter_rates"]["created"]}
        assert second["ptkp"] == {"created": 0, "skipped": 8}

    async def test_calculate_ter_from_seeded_rates(self, db_session):
        from hris.services.payroll.settings_service import PayrollSettingsService

        service = PayrollSettingsService(db_session)
        await service.seed_tax_configurations()

        result = await service.calculate_ter(10_000_000, "tk/0")

        assert result["category"] == "A"
        assert result["ptkp_status"] == "TK/0"
        assert result["rate"] == 0.02
        assert result["tax_amount"] == 200_000

    async def test_progressive_requires_brackets(self, db_session):
        from hris.core.exceptions import NotFoundError
        from hris.services.payroll.settings_service import PayrollSettingsService

        with pytest.raises(NotFoundError):
            await PayrollSettingsService(db_session).calculate_progressive(100_000_000)

    async def test_init_company_settings_uses_defaults(self, db_session, company):
        from hris.services.payroll.settings_service import PayrollSettingsService

        service = PayrollSettingsService(db_session)
        created = await service.init_company_settings(company.id)
        again = await service.init_company_settings(company.id)

        assert created.id == again.id
        assert created.bpjs_kesehatan_employee_rate == 0.01
        assert created.use_ter_method is True
        assert created.currency == "IDR"

    async def test_init_for_unknown_company(self, db_session):
        from hris.core.exceptions import NotFoundError
        from hris.services.payroll.settings_service import PayrollSettingsService

        with pytest.raises(NotFoundError):
            await PayrollSettingsService(db_session).init_company_settings(404)

    async def test_create_twice_conflicts(self, db_session, company, actor):
        from hris.core.exceptions import ConflictError
        from hris.services.payroll.settings_service import PayrollSettingsService

        service = PayrollSettingsService(db_session)
        await service.create_company_settings(company.id, {"payment_day": 25}, actor)

        with pytest.raises(ConflictError):
            await service.create_company_settings(company.id, {}, actor)

    async def test_update_and_reset(self, db_session, company, actor):
        from hris.services.payroll.settings_service import PayrollSettingsService

        service = PayrollSettingsService(db_session)
        updated = await service.update_company_settings(
            company.id, {"payment_day": 25}, actor, create_missing=True
        )
        assert updated.payment_day == 25

        reset = await service.reset_company_settings(company.id, actor)
        assert reset.payment_day == 28
