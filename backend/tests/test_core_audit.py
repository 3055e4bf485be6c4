"""
Tests for hris/core/audit.py - audit entries travel with the caller's transaction.
"""
import json

from sqlalchemy import select


class TestAuditLogger:
    def test_adds_entry_without_committing(self, mock_db_session):
        from hris.core.audit import AuditLogger

        entry = AuditLogger.log(
            mock_db_session,
            action="movement.approve",
            user_id=1,
            username="hr@example.com",
            resource_type="employee_movement",
            resource_id=42,
            metadata={"status": "approved"},
        )

        mock_db_session.add.assert_called_once_with(entry)
        mock_db_session.commit.assert_not_called()
        assert entry.resource_id == "42"
        assert json.loads(entry.log_metadata) == {"status": "approved"}

    def test_metadata_is_optional(self, mock_db_session):
        from hris.core.audit import AuditLogger

        entry = AuditLogger.log(mock_db_session, action="auth.login")

        assert entry.log_metadata is None
        assert entry.resource_id is None

    async def test_persisted_with_commit(self, db_session):
        from hris.core.audit import AuditLog, AuditLogger

        AuditLogger.log(db_session, action="payroll.update", username="hr@example.com",
                        resource_type="payroll_settings", resource_id=1)
        await db_session.commit()

        rows = (await db_session.execute(select(AuditLog))).scalars().all()
        assert [row.action for row in rows] == ["payroll.update"]

    async def test_discarded_with_rollback(self, db_session):
        from hris.core.audit import AuditLog, AuditLogger

        AuditLogger.log(db_session, action="movement.apply")
        await db_session.rollback()

        rows = (await db_session.execute(select(AuditLog))).scalars().all()
        assert rows == []

    def test_request_id_is_recorded(self, mock_db_session):
        from hris.core.audit import AuditLogger
        from hris.core.logging_config import request_id_var

        token = request_id_var.set("a1b2c3d4")
        try:
            entry = AuditLogger.log(mock_db_session, action="leave.approve", metadata={"days": 3})
        finally:
            request_id_var.reset(token)

        assert json.loads(entry.log_metadata) == {"days": 3, "request_id": "a1b2c3d4"}
