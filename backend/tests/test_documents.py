"""
Tests for hris/services/document_service.py.
"""
from datetime import date

import pytest
from sqlalchemy import select

TODAY = date(2030, 3, 4)


@pytest.fixture(autouse=True)
def upload_dir(tmp_path, monkeypatch):
    from hris.core.config import settings

    monkeypatch.setattr(settings, "UPLOAD_DIR", str(tmp_path))
    return tmp_path


def _values(upload_dir, document_type, **extra):
    return {
        "document_name": document_type.upper(),
        "document_type": document_type,
        "file_path": str(upload_dir / "documents" / f"abc_{document_type}.pdf"),
        "file_name": f"{document_type}.pdf",
        **extra,
    }


class TestDocumentService:
    async def test_create(self, db_session, employee, actor, upload_dir):
        from hris.services.document_service import DocumentService

        document = await DocumentService(db_session).create(
            employee.id, _values(upload_dir, "ktp", document_number="3171234567890001"), actor
        )

        assert document.employee_id == employee.id
        assert document.category == "employee"
        assert document.is_verified is False
        assert document.uploaded_by == actor.id

    async def test_file_must_come_from_upload_area(self, db_session, employee, actor, upload_dir):
        from hris.core.exceptions import BusinessRuleError
        from hris.services.document_service import DocumentService

        service = DocumentService(db_session)
        outside = _values(upload_dir, "ktp", file_path="/etc/passwd")
        escaping = _values(upload_dir, "ktp", file_path=str(upload_dir / "documents" / ".." / ".." / "x.pdf"))

        for values in (outside, escaping):
            with pytest.raises(BusinessRuleError) as exc_info:
                await service.create(employee.id, values, actor)
            assert exc_info.value.code == "INVALID_FILE_PATH"

    async def test_employee_cannot_file_hr_documents(self, db_session, employee, actor, upload_dir):
        from hris.core.exceptions import BusinessRuleError
        from hris.services.document_service import DocumentService

        with pytest.raises(BusinessRuleError) as exc_info:
            await DocumentService(db_session).create(employee.id, _values(upload_dir, "sp1"), actor, self_service=True)

        assert exc_info.value.code == "HR_DOCUMENT_TYPE"

    async def test_expiry_before_issue_is_rejected(self, db_session, employee, actor, upload_dir):
        from hris.core.exceptions import BusinessRuleError
        from hris.services.document_service import DocumentService

        values = _values(upload_dir, "certificate", issue_date=date(2030, 1, 1), expiry_date=date(2029, 1, 1))

        with pytest.raises(BusinessRuleError):
            await DocumentService(db_session).create(employee.id, values, actor)

    async def test_verify_notifies_employee(self, db_session, employee, employee_user, actor, upload_dir):
        from hris.models.notification import Notification
        from hris.services.document_service import DocumentService

        service = DocumentService(db_session)
        document = await service.create(employee.id, _values(upload_dir, "npwp"), actor)

        verified = await service.verify(document.id, actor, "Matches DJP record")

        assert verified.is_verified is True
        assert verified.verified_by == actor.id
        assert verified.verification_notes == "Matches DJP record"
        notifications = (await db_session.execute(select(Notification))).scalars().all()
        assert [(n.user_id, n.type) for n in notifications] == [(employee_user.id, "document_verified")]

        unverified = await service.unverify(document.id, actor)
        assert unverified.is_verified is False
        assert unverified.verified_by is None

    async def test_employee_cannot_delete_verified_document(self, db_session, employee, actor, upload_dir):
        from hris.core.exceptions import InvalidTransitionError
        from hris.services.document_service import DocumentService

        service = DocumentService(db_session)
        document = await service.create(employee.id, _values(upload_dir, "cv"), actor)
        await service.verify(document.id, actor)

        with pytest.raises(InvalidTransitionError):
            await service.delete(document.id, actor, self_service=True)

        await service.delete(document.id, actor)
        assert await service.for_employee(employee.id) == []

    async def test_completeness(self, db_session, employee, actor, upload_dir):
        from hris.models.document import REQUIRED_DOCUMENT_TYPES
        from hris.services.document_service import DocumentService

        service = DocumentService(db_session)
        ktp = await service.create(employee.id, _values(upload_dir, "ktp"), actor)
        await service.create(employee.id, _values(upload_dir, "npwp"), actor)
        await service.create(employee.id, _values(upload_dir, "contract"), actor)
        await service.verify(ktp.id, actor)

        report = await service.completeness(employee.id)

        assert report["total_required"] == len(REQUIRED_DOCUMENT_TYPES)
        assert report["uploaded"] == 2
        assert report["verified"] == 1
        assert report["unverified"] == ["npwp"]
        assert "family_card" in report["missing"] and "ktp" not in report["missing"]
        assert report["is_complete"] is False
        assert report["by_type"] == {"contract": 1, "ktp": 1, "npwp": 1}

    async def test_expiry_reports(self, db_session, employee, actor, upload_dir):
        from hris.services.document_service import DocumentService

        service = DocumentService(db_session)
        await service.create(employee.id, _values(upload_dir, "skck", expiry_date=date(2030, 3, 1)), actor)
        await service.create(employee.id, _values(upload_dir, "surat_sehat", expiry_date=date(2030, 3, 20)), actor)
        await service.create(employee.id, _values(upload_dir, "bpjs_kes", expiry_date=date(2031, 1, 1)), actor)

        expired = await service.expired(today=TODAY)
        expiring = await service.expiring(30, today=TODAY)
        stats = await service.statistics(employee_id=employee.id, today=TODAY)

        assert [d.document_type for d in expired] == ["skck"]
        assert [d.document_type for d in expiring] == ["surat_sehat"]
        assert stats["total"] == 3
        assert stats["expired"] == 1
        assert stats["expiring_soon"] == 1
        assert stats["unverified"] == 3
        assert {"type": "skck", "count": 1} in stats["by_type"]

    async def test_list_filters_by_category(self, db_session, employee, actor, upload_dir):
        from hris.services.document_service import DocumentService
        from hris.services.pagination import PageParams

        service = DocumentService(db_session)
        await service.create(employee.id, _values(upload_dir, "ktp"), actor)
        await service.create(employee.id, _values(upload_dir, "pkwt"), actor)

        hr_docs, total = await service.list(PageParams(), category="hr", company_id=employee.company_id)

        assert total == 1
        assert hr_docs[0].document_type == "pkwt"

    async def test_unknown_sort_field(self, db_session):
        from hris.core.exceptions import BusinessRuleError
        from hris.services.document_service import DocumentService
        from hris.services.pagination import PageParams

        with pytest.raises(BusinessRuleError):
            await DocumentService(db_session).list(PageParams(), sort_by="file_path")
