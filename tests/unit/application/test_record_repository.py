"""Record repository tests: ownership, assignment, re-encryption, soft delete, listing, audit trail."""

from dataclasses import replace
from datetime import date
from unittest.mock import patch

import pytest

from counsel_vault.application.exceptions import (
    DataIntegrityError,
    NotAssignedError,
    NotFoundError,
    PermissionDeniedError,
)
from counsel_vault.application.record_repository import ConfidentialRecordRepository
from counsel_vault.domain.exceptions import (
    DomainValidationError,
    InvalidContentError,
    InvalidOccurrenceDateError,
)
from counsel_vault.domain.models.record import Decrypted, Undecryptable
from counsel_vault.domain.schemas.record import RecordFilters
from counsel_vault.governance.audit_logger import AuditLogger
from counsel_vault.governance.audit_models import AuditAction
from counsel_vault.governance.redaction import REDACTED
from counsel_vault.security.exceptions import AuthenticationError, FormatError
from counsel_vault.security.identity import Caller, Role
from tests.helpers import FIXED_NOW, FailingAuditRepository

NOTES = "Session notes about anxiety"
SESSION_DAY = date(2024, 11, 1)


async def _create(repository, caller, content=NOTES, subject_id="student-s", occurred_on=SESSION_DAY):
    return await repository.create(caller, subject_id, occurred_on, content)


def _tamper_tag(record_store, record_id):
    record = record_store.records[record_id]
    tag = bytearray(bytes.fromhex(record.payload.auth_tag))
    tag[0] ^= 0x01
    record_store.records[record_id] = replace(record, payload=replace(record.payload, auth_tag=tag.hex()))


# ---------------------------------------------------------------------------
# End-to-end scenario
# ---------------------------------------------------------------------------


async def test_owner_reads_and_peer_is_denied(repository, audit_repository, counselor_a, counselor_b):
    record_id = await _create(repository, counselor_a)
    assert record_id

    with pytest.raises(PermissionDeniedError):
        await repository.read(record_id, counselor_b)
    attempts = audit_repository.of_action(AuditAction.UNAUTHORIZED_ACCESS_ATTEMPT)
    assert len(attempts) == 1
    assert attempts[0].actor_id == "counselor-b"
    assert attempts[0].entity_id == record_id
    assert attempts[0].after_state["reason"] == "NOT_OWNER"
    assert attempts[0].after_state["owned_by"] == "counselor-a"

    view = await repository.read(record_id, counselor_a)
    assert view.content == NOTES
    assert view.owner_id == "counselor-a"
    assert view.subject_id == "student-s"
    assert view.occurred_on == SESSION_DAY
    reads = audit_repository.of_action(AuditAction.READ)
    assert len(reads) == 1
    assert reads[0].actor_id == "counselor-a"
    assert reads[0].after_state == {"operation": "read", "outcome": "DECRYPTED"}
    assert audit_repository.actions() == [
        AuditAction.CREATE,
        AuditAction.UNAUTHORIZED_ACCESS_ATTEMPT,
        AuditAction.READ,
    ]


# ---------------------------------------------------------------------------
# create
# ---------------------------------------------------------------------------


async def test_create_stores_ciphertext_only(repository, record_store, cipher, counselor_a):
    record_id = await _create(repository, counselor_a)
    stored = record_store.records[record_id]
    assert stored.owner_id == "counselor-a"
    assert stored.created_at == stored.updated_at == FIXED_NOW
    assert NOTES.encode().hex() not in stored.payload.ciphertext
    assert cipher.decrypt_payload(stored.payload) == NOTES


async def test_create_audit_has_metadata_only(repository, audit_repository, counselor_a):
    record_id = await _create(repository, counselor_a)
    (entry,) = audit_repository.of_action(AuditAction.CREATE)
    assert entry.actor_id == "counselor-a"
    assert entry.entity_id == record_id
    assert entry.before_state is None
    assert entry.after_state["subject_id"] == "student-s"
    assert entry.after_state["owner_id"] == "counselor-a"
    assert entry.after_state["has_content"] is True
    for field in ("ciphertext", "nonce", "auth_tag"):
        assert entry.after_state[field] == REDACTED
    assert NOTES not in str(entry.to_dict())
    assert entry.ip_address == "10.0.0.7"
    assert entry.user_agent == "pytest"


async def test_create_requires_assignment_before_encryption(repository, record_store, cipher, counselor_a):
    with patch.object(cipher, "encrypt", wraps=cipher.encrypt) as encrypt_spy:
        with pytest.raises(NotAssignedError):
            await _create(repository, counselor_a, subject_id="student-t")
    assert encrypt_spy.call_count == 0
    assert record_store.records == {}


@pytest.mark.parametrize(
    "caller, reason",
    [
        (Caller(actor_id="admin-1", role=Role.ADMIN), "WRONG_ROLE"),
        (Caller(actor_id="teacher-1", role=Role.HOMEROOM_TEACHER), "WRONG_ROLE"),
        (Caller.anonymous(), "UNAUTHENTICATED"),
    ],
)
async def test_create_by_non_counselor_denied_and_audited(repository, record_store, audit_repository, caller, reason):
    with pytest.raises(PermissionDeniedError):
        await _create(repository, caller)
    assert record_store.records == {}
    (attempt,) = audit_repository.entries
    assert attempt.action is AuditAction.UNAUTHORIZED_ACCESS_ATTEMPT
    assert attempt.actor_id == caller.actor_id
    assert attempt.entity_id is None
    assert attempt.after_state["operation"] == "create"
    assert attempt.after_state["reason"] == reason


@pytest.mark.parametrize(
    "kwargs, error",
    [
        ({"content": "too short"}, InvalidContentError),
        ({"content": " " * 40}, InvalidContentError),
        ({"content": "x" * 10_001}, InvalidContentError),
        ({"occurred_on": date(2024, 11, 6)}, InvalidOccurrenceDateError),
        ({"subject_id": ""}, DomainValidationError),
    ],
)
async def test_create_validation(repository, record_store, audit_repository, counselor_a, kwargs, error):
    with pytest.raises(error):
        await _create(repository, counselor_a, **kwargs)
    assert record_store.records == {}
    assert audit_repository.entries == []


async def test_create_on_today_is_accepted(repository, counselor_a):
    record_id = await _create(repository, counselor_a, occurred_on=FIXED_NOW.date())
    assert (await repository.read(record_id, counselor_a)).occurred_on == FIXED_NOW.date()


# ---------------------------------------------------------------------------
# Ownership enforcement across operations and roles
# ---------------------------------------------------------------------------

INTRUDERS = [
    Caller(actor_id="counselor-b", role=Role.COUNSELOR),
    Caller(actor_id="admin-1", role=Role.ADMIN),
    Caller(actor_id="counselor-a", role=Role.ADMIN),
    Caller(actor_id="teacher-1", role=Role.HOMEROOM_TEACHER),
    Caller(actor_id="student-s", role=Role.STUDENT),
    Caller.anonymous(),
]


async def _attempt(repository, operation, record_id, caller):
    if operation == "read":
        await repository.read(record_id, caller)
    elif operation == "update":
        await repository.update(record_id, caller, "Overwritten by someone else")
    else:
        await repository.delete(record_id, caller)


@pytest.mark.parametrize("operation", ["read", "update", "delete"])
@pytest.mark.parametrize("intruder", INTRUDERS)
async def test_only_owner_may_touch_record(
    repository, record_store, audit_repository, counselor_a, operation, intruder
):
    record_id = await _create(repository, counselor_a)
    before = record_store.records[record_id]

    with pytest.raises(PermissionDeniedError) as exc_info:
        await _attempt(repository, operation, record_id, intruder)

    assert exc_info.value.message == PermissionDeniedError.GENERIC_MESSAGE
    assert record_store.records[record_id] == before
    attempts = audit_repository.of_action(AuditAction.UNAUTHORIZED_ACCESS_ATTEMPT)
    assert len(attempts) == 1
    assert attempts[0].actor_id == intruder.actor_id
    assert attempts[0].entity_id == record_id
    assert attempts[0].after_state["operation"] == operation
    assert audit_repository.of_action(AuditAction.READ) == []


async def test_denial_message_does_not_reveal_rule(repository, counselor_a, counselor_b, admin, anonymous):
    record_id = await _create(repository, counselor_a)
    messages = set()
    for caller in (counselor_b, admin, anonymous):
        with pytest.raises(PermissionDeniedError) as exc_info:
            await repository.read(record_id, caller)
        messages.add(str(exc_info.value))
    assert len(messages) == 1


# ---------------------------------------------------------------------------
# read
# ---------------------------------------------------------------------------


async def test_read_unknown_record_not_found(repository, counselor_a):
    with pytest.raises(NotFoundError):
        await repository.read("does-not-exist", counselor_a)


async def test_read_tampered_record_is_integrity_error(repository, record_store, audit_repository, cipher, counselor_a):
    record_id = await _create(repository, counselor_a)
    _tamper_tag(record_store, record_id)

    with patch.object(cipher, "decrypt_payload", wraps=cipher.decrypt_payload) as decrypt_spy:
        with pytest.raises(DataIntegrityError) as exc_info:
            await repository.read(record_id, counselor_a)
    assert decrypt_spy.call_count == 1
    assert isinstance(exc_info.value.__cause__, AuthenticationError)

    (entry,) = audit_repository.of_action(AuditAction.READ)
    assert entry.after_state == {"operation": "read", "outcome": "UNDECRYPTABLE"}


async def test_read_malformed_triple_is_integrity_error(repository, record_store, counselor_a):
    record_id = await _create(repository, counselor_a)
    record = record_store.records[record_id]
    record_store.records[record_id] = replace(record, payload=replace(record.payload, nonce="not-hex"))
    with pytest.raises(DataIntegrityError) as exc_info:
        await repository.read(record_id, counselor_a)
    assert isinstance(exc_info.value.__cause__, FormatError)


# ---------------------------------------------------------------------------
# update
# ---------------------------------------------------------------------------


async def test_update_reencrypts_with_new_nonce(repository, record_store, audit_repository, counselor_a):
    record_id = await _create(repository, counselor_a)
    before = record_store.records[record_id]

    await repository.update(record_id, counselor_a, "Updated notes")

    after = record_store.records[record_id]
    assert after.payload.nonce != before.payload.nonce
    assert after.payload.ciphertext != before.payload.ciphertext
    assert after.owner_id == before.owner_id == "counselor-a"
    assert after.created_at == before.created_at
    assert (await repository.read(record_id, counselor_a)).content == "Updated notes"

    (entry,) = audit_repository.of_action(AuditAction.UPDATE)
    assert entry.before_state["nonce"] == REDACTED
    assert entry.after_state["nonce"] == REDACTED
    assert entry.before_state["subject_id"] == entry.after_state["subject_id"] == "student-s"
    assert "Updated notes" not in str(entry.to_dict())


async def test_update_with_unchanged_content_still_gets_new_nonce(repository, record_store, counselor_a):
    record_id = await _create(repository, counselor_a)
    nonce_before = record_store.records[record_id].payload.nonce
    await repository.update(record_id, counselor_a, NOTES)
    assert record_store.records[record_id].payload.nonce != nonce_before


async def test_update_changes_subject_and_date_when_assigned(repository, roster, record_store, counselor_a):
    roster.assignments.add(("counselor-a", "student-u"))
    record_id = await _create(repository, counselor_a)

    await repository.update(
        record_id,
        counselor_a,
        "Moved to the correct student",
        subject_id="student-u",
        occurred_on=date(2024, 10, 30),
    )

    stored = record_store.records[record_id]
    assert stored.subject_id == "student-u"
    assert stored.occurred_on == date(2024, 10, 30)
    assert stored.owner_id == "counselor-a"


async def test_update_to_unassigned_subject_refused(repository, record_store, counselor_a):
    record_id = await _create(repository, counselor_a)
    before = record_store.records[record_id]
    with pytest.raises(NotAssignedError):
        await repository.update(record_id, counselor_a, "Updated notes", subject_id="student-t")
    assert record_store.records[record_id] == before


async def test_update_rechecks_assignment_for_same_subject(repository, roster, counselor_a):
    record_id = await _create(repository, counselor_a)
    roster.assignments.discard(("counselor-a", "student-s"))
    with pytest.raises(NotAssignedError):
        await repository.update(record_id, counselor_a, "Updated notes")


async def test_update_validates_content(repository, counselor_a):
    record_id = await _create(repository, counselor_a)
    with pytest.raises(InvalidContentError):
        await repository.update(record_id, counselor_a, "short")
    with pytest.raises(InvalidOccurrenceDateError):
        await repository.update(record_id, counselor_a, "Updated notes", occurred_on=date(2025, 1, 1))


# ---------------------------------------------------------------------------
# delete
# ---------------------------------------------------------------------------


async def test_soft_delete(repository, record_store, audit_repository, counselor_a):
    record_id = await _create(repository, counselor_a)

    await repository.delete(record_id, counselor_a)

    stored = record_store.records[record_id]
    assert stored.deleted_at == FIXED_NOW
    assert await repository.list(counselor_a) == []
    with pytest.raises(NotFoundError):
        await repository.read(record_id, counselor_a)

    (entry,) = audit_repository.of_action(AuditAction.DELETE)
    assert entry.before_state["id"] == record_id
    assert entry.before_state["deleted_at"] is None
    assert entry.before_state["ciphertext"] == REDACTED
    assert entry.after_state is None


async def test_deleted_record_cannot_be_updated_or_deleted_again(repository, counselor_a):
    record_id = await _create(repository, counselor_a)
    await repository.delete(record_id, counselor_a)
    with pytest.raises(NotFoundError):
        await repository.delete(record_id, counselor_a)
    with pytest.raises(NotFoundError):
        await repository.update(record_id, counselor_a, "Updated notes")


# ---------------------------------------------------------------------------
# list
# ---------------------------------------------------------------------------


async def test_list_is_scoped_to_caller(repository, roster, audit_repository, counselor_a, counselor_b):
    older = await _create(repository, counselor_a, occurred_on=date(2024, 10, 1))
    newer = await _create(repository, counselor_a, content="Follow-up session notes")
    await _create(repository, counselor_b, subject_id="student-t", content="Other counselor notes")

    items = await repository.list(counselor_a)

    assert [item.id for item in items] == [newer, older]
    assert items[0].content == Decrypted("Follow-up session notes")
    assert items[1].content == Decrypted(NOTES)
    reads = audit_repository.of_action(AuditAction.READ)
    assert {e.entity_id for e in reads} == {newer, older}
    assert all(e.actor_id == "counselor-a" for e in reads)
    assert all(e.after_state == {"operation": "list", "outcome": "DECRYPTED"} for e in reads)


async def test_list_filters(repository, roster, counselor_a):
    roster.assignments.add(("counselor-a", "student-u"))
    first = await _create(repository, counselor_a, occurred_on=date(2024, 9, 15))
    second = await _create(repository, counselor_a, subject_id="student-u", occurred_on=date(2024, 10, 15))
    third = await _create(repository, counselor_a, occurred_on=date(2024, 11, 1))

    by_subject = await repository.list(counselor_a, RecordFilters(subject_id="student-u"))
    assert [i.id for i in by_subject] == [second]

    in_range = await repository.list(
        counselor_a,
        RecordFilters(occurred_from=date(2024, 9, 1), occurred_to=date(2024, 10, 31)),
    )
    assert [i.id for i in in_range] == [second, first]

    from_october = await repository.list(counselor_a, RecordFilters(occurred_from=date(2024, 10, 1)))
    assert [i.id for i in from_october] == [third, second]


async def test_list_marks_undecryptable_item_without_failing(repository, record_store, audit_repository, counselor_a):
    good = await _create(repository, counselor_a, occurred_on=date(2024, 10, 1))
    bad = await _create(repository, counselor_a)
    _tamper_tag(record_store, bad)

    items = {item.id: item for item in await repository.list(counselor_a)}

    assert items[good].content == Decrypted(NOTES)
    assert isinstance(items[bad].content, Undecryptable)
    outcomes = {e.entity_id: e.after_state["outcome"] for e in audit_repository.of_action(AuditAction.READ)}
    assert outcomes == {good: "DECRYPTED", bad: "UNDECRYPTABLE"}


@pytest.mark.parametrize("caller", [Caller(actor_id="admin-1", role=Role.ADMIN), Caller.anonymous()])
async def test_list_denied_for_non_counselor(repository, audit_repository, counselor_a, caller):
    await _create(repository, counselor_a)
    with pytest.raises(PermissionDeniedError):
        await repository.list(caller)
    attempts = audit_repository.of_action(AuditAction.UNAUTHORIZED_ACCESS_ATTEMPT)
    assert len(attempts) == 1
    assert attempts[0].after_state["operation"] == "list"


async def test_list_empty_for_counselor_without_records(repository, counselor_b):
    assert await repository.list(counselor_b) == []


# ---------------------------------------------------------------------------
# Audit failures never block the primary operation
# ---------------------------------------------------------------------------


async def test_operations_succeed_when_audit_store_fails(record_store, roster, cipher, counselor_a):
    repository = ConfidentialRecordRepository(
        store=record_store,
        roster=roster,
        cipher=cipher,
        audit_logger=AuditLogger(FailingAuditRepository()),
        clock=lambda: FIXED_NOW,
    )
    record_id = await _create(repository, counselor_a)
    assert record_id in record_store.records
    assert (await repository.read(record_id, counselor_a)).content == NOTES
    await repository.update(record_id, counselor_a, "Updated notes")
    await repository.delete(record_id, counselor_a)
    assert record_store.records[record_id].is_deleted
