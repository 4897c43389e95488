"""
MemberHub 데이터베이스 모델 정의
"""

from datetime import datetime

from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    Boolean,
    DateTime,
    Numeric,
    Index,
)
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class Member(Base):
    """회원"""
    __tablename__ = "members"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100))
    email = Column(String(255))
    is_active = Column(Boolean, nullable=False, default=False)
    subscription_end = Column(DateTime)  # None: 구독 이력 없음
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        Index("idx_member_active_end", "is_active", "subscription_end"),
    )

    def __init__(self, **kwargs):
        # 컬럼 default는 INSERT 시점에만 적용되므로 메모리 객체에도 미리 채운다
        kwargs.setdefault("is_active", False)
        super().__init__(**kwargs)

    def __repr__(self):
        return f"<Member(id={self.id}, active={self.is_active}, end={self.subscription_end})>"


class Payment(Base):
    """결제 원장"""
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    member_id = Column(Integer, nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)
    reference = Column(String(100))
    is_consumed = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    consumed_at = Column(DateTime)

    __table_args__ = (
        Index("idx_payment_member_consumed", "member_id", "is_consumed"),
    )

    def __repr__(self):
        return f"<Payment(member_id={self.member_id}, amount={self.amount})>"


class NotificationLog(Base):
    """알림 발송 이력"""
    __tablename__ = "notification_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    member_id = Column(Integer, nullable=False)
    message = Column(String(255), nullable=False)
    recipient = Column(String(255))
    is_success = Column(Boolean, default=False)
    error_message = Column(Text)
    sent_at = Column(DateTime, default=datetime.utcnow)

    __table_args__ = (
        Index("idx_notification_member", "member_id"),
        Index("idx_notification_sent_at", "sent_at"),
    )

    def __repr__(self):
        return f"<NotificationLog(member_id={self.member_id}, message='{self.message}')>"
