"""회원 구독 관리 패키지"""

from .interfaces import MemberStore, PaymentVerifier, Notifier
from .member_service import MemberService
from .subscription_service import (
    SubscriptionService, MemberNotFoundError, InvalidDurationError,
    RENEWED_MESSAGE, EXPIRED_MESSAGE,
)

__all__ = [
    "MemberStore", "PaymentVerifier", "Notifier",
    "MemberService", "SubscriptionService",
    "MemberNotFoundError", "InvalidDurationError",
    "RENEWED_MESSAGE", "EXPIRED_MESSAGE",
]
