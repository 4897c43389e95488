"""데이터베이스 패키지"""

from .models import Base, Member, Payment, NotificationLog
from .repository import (
    init_db, get_session, get_session_factory,
    MemberRepository, PaymentRepository, NotificationLogRepository
)

__all__ = [
    "Base", "Member", "Payment", "NotificationLog",
    "init_db", "get_session", "get_session_factory",
    "MemberRepository", "PaymentRepository", "NotificationLogRepository",
]
