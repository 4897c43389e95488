"""
구독 갱신 / 만료 처리 서비스
결제 확인 후 갱신, 만료 회원 일괄 비활성화
"""

import logging
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Callable, List

from .interfaces import MemberStore, PaymentVerifier, Notifier

logger = logging.getLogger(__name__)

RENEWED_MESSAGE = "Subscription renewed!"
EXPIRED_MESSAGE = "Membership expired"


class MemberNotFoundError(ValueError):
    """갱신 대상 회원이 존재하지 않음"""

    def __init__(self, member_id: int):
        super().__init__(f"Member {member_id} not found")
        self.member_id = member_id


class InvalidDurationError(ValueError):
    """구독 기간이 양의 정수가 아님"""


class SubscriptionService:
    """구독 정책 서비스"""

    def __init__(
        self,
        repository: MemberStore,
        payment_verifier: PaymentVerifier,
        notifier: Notifier,
        clock: Callable[[], datetime] = datetime.utcnow,
    ):
        self.repository = repository
        self.payment_verifier = payment_verifier
        self.notifier = notifier
        self.clock = clock

    def renew_subscription(
        self, member_id: int, amount: Decimal, duration_days: int
    ) -> bool:
        """결제 확인 후 구독 갱신

        Returns:
            결제 확인 실패 시 False (회원 변경/알림 없음)

        Raises:
            MemberNotFoundError: 회원이 존재하지 않음
            InvalidDurationError: duration_days가 양수가 아니거나 날짜 범위를 벗어남
        """
        member = self.repository.get_by_id(member_id)
        if member is None:
            raise MemberNotFoundError(member_id)

        new_end = self._subscription_end_after(duration_days)

        if not self.payment_verifier.verify_payment(member_id, amount):
            logger.info(f"결제 확인 실패, 갱신 중단: member={member_id}, amount={amount}")
            return False

        member.subscription_end = new_end
        member.is_active = True
        self.repository.update(member)
        self.notifier.send_notification(RENEWED_MESSAGE, member_id)

        logger.info(f"구독 갱신 완료: member={member_id}, end={new_end.isoformat()}")
        return True

    def _subscription_end_after(self, duration_days: int) -> datetime:
        """현재 시각 + duration_days. 결제 확인 전에 계산해 둔다."""
        if isinstance(duration_days, bool) or not isinstance(duration_days, int) or duration_days <= 0:
            raise InvalidDurationError(f"duration_days must be a positive integer: {duration_days!r}")

        try:
            return self.clock() + timedelta(days=duration_days)
        except OverflowError:
            raise InvalidDurationError(f"duration_days is out of range: {duration_days!r}")

    def deactivate_expired_members(self) -> List[int]:
        """구독 기간이 지난 활성 회원 일괄 비활성화

        subscription_end를 비교할 수 없는 회원은 경고 로그만 남기고 건너뛴다.

        Returns:
            비활성화된 회원 ID 목록
        """
        now = self.clock()
        deactivated = []

        for member in self.repository.get_all():
            if not member.is_active or member.subscription_end is None:
                continue

            end = _as_naive_utc(member.subscription_end)
            try:
                expired = end < now
            except TypeError:
                logger.warning(
                    f"subscription_end 비교 불가, 건너뜀: member={member.id}, "
                    f"end={member.subscription_end!r}"
                )
                continue
            if not expired:
                continue

            member.is_active = False
            self.repository.update(member)
            self.notifier.send_notification(EXPIRED_MESSAGE, member.id)
            deactivated.append(member.id)
            logger.info(f"구독 만료 처리: member={member.id}, end={end.isoformat()}")

        return deactivated


def _as_naive_utc(value):
    """timezone-aware datetime은 naive UTC로 변환"""
    if isinstance(value, datetime) and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value
