# counsel_vault/infrastructure/database/models.py

from sqlalchemy import JSON, Column, Date, DateTime, Integer, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import JSONB

from counsel_vault.infrastructure.database.session import Base

JsonState = JSON().with_variant(JSONB(), "postgresql")


class ConfidentialRecordRow(Base):
    """Encrypted counseling note. Holds ciphertext only; content is never stored in clear."""

    __tablename__ = "confidential_records"

    id = Column(String(36), primary_key=True)
    subject_id = Column(String, nullable=False, index=True)
    owner_id = Column(String, nullable=False, index=True)
    occurred_on = Column(Date, nullable=False)

    ciphertext = Column(Text, nullable=False)
    nonce = Column(String(32), nullable=False)
    auth_tag = Column(String(32), nullable=False)

    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)
    deleted_at = Column(DateTime(timezone=True), nullable=True)


class AuditEntryRow(Base):
    """Append-only audit entry. before/after state are already redacted."""

    __tablename__ = "audit_entries"

    id = Column(String(36), primary_key=True)
    actor_id = Column(String, nullable=True, index=True)
    action = Column(String(64), nullable=False, index=True)
    entity_type = Column(String(64), nullable=False)
    entity_id = Column(String, nullable=True, index=True)
    before_state = Column(JsonState, nullable=True)
    after_state = Column(JsonState, nullable=True)
    ip_address = Column(String(64), nullable=True)
    user_agent = Column(String(512), nullable=True)
    occurred_at = Column(DateTime(timezone=True), nullable=False, index=True)


class CounselorAssignmentRow(Base):
    """Roster: counselor currently assigned to a subject (student)."""

    __tablename__ = "counselor_assignments"
    __table_args__ = (UniqueConstraint("counselor_id", "subject_id", name="uq_counselor_subject"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    counselor_id = Column(String, nullable=False, index=True)
    subject_id = Column(String, nullable=False, index=True)
    assigned_at = Column(DateTime(timezone=True), nullable=False)
