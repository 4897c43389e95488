"""
결제 원장 기반 결제 검증기
"""

import logging
from decimal import Decimal, InvalidOperation

from sqlalchemy.orm import Session

from .interfaces import PaymentVerifier
from ..database.repository import PaymentRepository

logger = logging.getLogger(__name__)


class LedgerPaymentVerifier(PaymentVerifier):
    """미사용 결제 원장 건과 금액을 대조한다.

    검증에 성공한 결제 건은 사용 처리되어 다른 갱신에 재사용되지 않는다.
    """

    def __init__(self, session: Session):
        self.session = session

    def verify_payment(self, member_id: int, amount: Decimal) -> bool:
        try:
            amount = Decimal(str(amount))
        except (InvalidOperation, ValueError):
            logger.warning(f"잘못된 결제 금액: member={member_id}, amount={amount!r}")
            return False

        if amount <= 0:
            return False

        payment = PaymentRepository.get_unconsumed(self.session, member_id, amount)
        if not payment:
            logger.info(f"일치하는 결제 내역 없음: member={member_id}, amount={amount}")
            return False

        PaymentRepository.mark_consumed(self.session, payment)
        logger.info(f"결제 확인: member={member_id}, payment={payment.id}, amount={amount}")
        return True
