"""
데이터베이스 저장소 패턴 구현
"""

import logging
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Optional
from contextlib import contextmanager

from sqlalchemy import create_engine, and_
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from .models import Base, Member, Payment, NotificationLog
from ..membership.interfaces import MemberStore

logger = logging.getLogger(__name__)


_engine = None
_SessionLocal = None


def init_db(database_url: str = "sqlite:///./data/memberhub.db") -> None:
    """데이터베이스 초기화"""
    global _engine, _SessionLocal

    if database_url.startswith("sqlite:///") and database_url != "sqlite:///:memory:":
        db_path = database_url.replace("sqlite:///", "")
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    engine_kwargs = {"echo": False}
    if "sqlite" in database_url:
        engine_kwargs["connect_args"] = {"check_same_thread": False}
        if ":memory:" in database_url:
            # 인메모리 DB는 커넥션마다 새로 생성되므로 단일 커넥션 공유
            engine_kwargs["poolclass"] = StaticPool

    _engine = create_engine(database_url, **engine_kwargs)
    _SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=_engine)

    Base.metadata.create_all(bind=_engine)
    logger.debug(f"데이터베이스 초기화 완료: {database_url}")


@contextmanager
def get_session():
    """세션 컨텍스트 매니저"""
    if _SessionLocal is None:
        raise RuntimeError("Database not initialized. Call init_db() first.")

    session = _SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def get_session_factory():
    """세션 팩토리 반환 (웹 앱에서 사용)"""
    if _SessionLocal is None:
        raise RuntimeError("Database not initialized. Call init_db() first.")
    return _SessionLocal


class MemberRepository(MemberStore):
    """회원 저장소 (세션 바인딩)"""

    def __init__(self, session: Session):
        self.session = session

    def create(self, name: Optional[str] = None, email: Optional[str] = None) -> Member:
        member = Member(name=name, email=email)
        self.session.add(member)
        self.session.flush()
        return member

    def get_by_id(self, member_id: int) -> Optional[Member]:
        return self.session.get(Member, member_id)

    def get_all(self) -> list[Member]:
        return self.session.query(Member).order_by(Member.id).all()

    def update(self, member: Member) -> None:
        member.updated_at = datetime.utcnow()
        self.session.add(member)
        self.session.flush()


class PaymentRepository:
    """결제 원장 저장소"""

    @staticmethod
    def create(session: Session, member_id: int, amount: Decimal,
               reference: Optional[str] = None) -> Payment:
        payment = Payment(
            member_id=member_id,
            amount=amount,
            reference=reference,
            is_consumed=False,
        )
        session.add(payment)
        session.flush()
        return payment

    @staticmethod
    def get_unconsumed(session: Session, member_id: int, amount: Decimal) -> Optional[Payment]:
        """금액이 일치하는 미사용 결제 중 가장 오래된 건"""
        return session.query(Payment).filter(
            and_(
                Payment.member_id == member_id,
                Payment.amount == amount,
                Payment.is_consumed == False
            )
        ).order_by(Payment.created_at, Payment.id).first()

    @staticmethod
    def mark_consumed(session: Session, payment: Payment) -> None:
        payment.is_consumed = True
        payment.consumed_at = datetime.utcnow()
        session.flush()

    @staticmethod
    def get_by_member(session: Session, member_id: int) -> list[Payment]:
        return session.query(Payment).filter(
            Payment.member_id == member_id
        ).order_by(Payment.created_at.desc(), Payment.id.desc()).all()


class NotificationLogRepository:
    """알림 발송 이력 저장소"""

    @staticmethod
    def create(session: Session, member_id: int, message: str,
               recipient: Optional[str], is_success: bool,
               error_message: Optional[str] = None) -> NotificationLog:
        log = NotificationLog(
            member_id=member_id,
            message=message,
            recipient=recipient,
            is_success=is_success,
            error_message=error_message,
        )
        session.add(log)
        session.flush()
        return log

    @staticmethod
    def get_by_member(session: Session, member_id: int, limit: int = 50) -> list[NotificationLog]:
        return session.query(NotificationLog).filter(
            NotificationLog.member_id == member_id
        ).order_by(NotificationLog.sent_at.desc(), NotificationLog.id.desc()).limit(limit).all()
