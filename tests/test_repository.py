"""
Tests for the SQLAlchemy repositories and the payment ledger verifier
"""
from datetime import datetime, timedelta
from decimal import Decimal

from memberhub.common.database.models import Member
from memberhub.common.database.repository import (
    MemberRepository, PaymentRepository, NotificationLogRepository
)
from memberhub.common.membership.payment import LedgerPaymentVerifier


class TestMemberRepository:

    def test_create_and_get_by_id(self, session):
        repo = MemberRepository(session)
        member = repo.create("Alice", "alice@example.com")

        found = repo.get_by_id(member.id)

        assert found is member
        assert found.is_active is False
        assert found.subscription_end is None

    def test_get_by_id_missing_returns_none(self, session):
        assert MemberRepository(session).get_by_id(123) is None

    def test_get_all_orders_by_id(self, session):
        repo = MemberRepository(session)
        a = repo.create("A")
        b = repo.create("B")

        assert [m.id for m in repo.get_all()] == [a.id, b.id]

    def test_update_persists_changes(self, session):
        repo = MemberRepository(session)
        member = repo.create("Bob")
        end = datetime(2030, 1, 1)

        member.is_active = True
        member.subscription_end = end
        repo.update(member)
        session.commit()
        session.expire_all()

        reloaded = repo.get_by_id(member.id)
        assert reloaded.is_active is True
        assert reloaded.subscription_end == end
        assert reloaded.updated_at is not None


class TestNotificationLogRepository:

    def test_records_are_listed_newest_first(self, session):
        NotificationLogRepository.create(session, 1, "first", "a@example.com", True)
        NotificationLogRepository.create(session, 1, "second", "a@example.com", False, "boom")
        NotificationLogRepository.create(session, 2, "other", None, False)

        logs = NotificationLogRepository.get_by_member(session, 1)

        assert [log.message for log in logs] == ["second", "first"]
        assert logs[0].error_message == "boom"


class TestLedgerPaymentVerifier:

    def test_verifies_matching_payment_and_consumes_it(self, session):
        member = MemberRepository(session).create("Carol")
        PaymentRepository.create(session, member.id, Decimal("100.00"), "tx-1")
        verifier = LedgerPaymentVerifier(session)

        assert verifier.verify_payment(member.id, Decimal("100")) is True
        # 같은 결제로 두 번 갱신할 수 없다
        assert verifier.verify_payment(member.id, Decimal("100")) is False

        payments = PaymentRepository.get_by_member(session, member.id)
        assert payments[0].is_consumed is True
        assert payments[0].consumed_at is not None

    def test_rejects_amount_mismatch(self, session):
        member = MemberRepository(session).create("Dan")
        PaymentRepository.create(session, member.id, Decimal("50.00"))

        assert LedgerPaymentVerifier(session).verify_payment(member.id, Decimal("100")) is False

    def test_rejects_payment_of_another_member(self, session):
        repo = MemberRepository(session)
        payer = repo.create("Eve")
        other = repo.create("Frank")
        PaymentRepository.create(session, payer.id, Decimal("30.00"))

        assert LedgerPaymentVerifier(session).verify_payment(other.id, Decimal("30")) is False

    def test_rejects_non_positive_and_garbage_amounts(self, session):
        verifier = LedgerPaymentVerifier(session)

        assert verifier.verify_payment(1, Decimal("0")) is False
        assert verifier.verify_payment(1, Decimal("-10")) is False
        assert verifier.verify_payment(1, "not-a-number") is False

    def test_consumes_oldest_payment_first(self, session):
        member = MemberRepository(session).create("Gina")
        older = PaymentRepository.create(session, member.id, Decimal("20.00"), "old")
        older.created_at = datetime.utcnow() - timedelta(days=2)
        newer = PaymentRepository.create(session, member.id, Decimal("20.00"), "new")
        session.flush()

        assert LedgerPaymentVerifier(session).verify_payment(member.id, Decimal("20")) is True

        assert older.is_consumed is True
        assert newer.is_consumed is False


def test_member_defaults_to_inactive_in_memory():
    assert Member(id=1).is_active is False
    assert Member(id=1, is_active=True).is_active is True
