"""
회원 구독 서비스가 의존하는 외부 협력자 인터페이스 (ABC)
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from ..database.models import Member


class MemberStore(ABC):
    """회원 저장소"""

    @abstractmethod
    def get_by_id(self, member_id: int) -> Optional["Member"]:
        """ID로 회원 조회, 없으면 None"""

    @abstractmethod
    def get_all(self) -> List["Member"]:
        """전체 회원 목록"""

    @abstractmethod
    def update(self, member: "Member") -> None:
        """변경된 회원 저장"""


class PaymentVerifier(ABC):
    """결제 검증기"""

    @abstractmethod
    def verify_payment(self, member_id: int, amount: Decimal) -> bool:
        """해당 회원에게 amount가 결제되었는지 확인"""


class Notifier(ABC):
    """회원 알림 발송기"""

    @abstractmethod
    def send_notification(self, message: str, member_id: int) -> None:
        """회원에게 이벤트 알림 발송"""
