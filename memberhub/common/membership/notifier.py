"""
이메일 기반 회원 알림 발송기
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from .interfaces import Notifier
from ..database.models import Member
from ..database.repository import NotificationLogRepository
from ..delivery.gmail_sender import GmailSender, OutgoingMail, DeliveryResult, get_sender
from ..template.renderer import TemplateRenderer, get_renderer

logger = logging.getLogger(__name__)


class EmailNotifier(Notifier):
    """회원 이메일로 알림을 보내고 발송 이력을 남긴다.

    발송 실패는 로그와 이력으로만 남기고 호출자에게 예외를 전파하지 않는다.
    """

    def __init__(
        self,
        session: Session,
        sender: Optional[GmailSender] = None,
        renderer: Optional[TemplateRenderer] = None,
    ):
        self.session = session
        self.sender = sender or get_sender()
        self.renderer = renderer or get_renderer()

    def send_notification(self, message: str, member_id: int) -> None:
        member = self.session.get(Member, member_id)
        recipient = member.email if member else None

        if not recipient:
            logger.warning(f"알림 수신 이메일 없음: member={member_id}, message={message}")
            self._record_failure(member_id, message, None, "수신 이메일이 없습니다.")
            return

        try:
            html_content = self.renderer.render_notification_email(message, member)
        except Exception as e:
            logger.error(f"알림 메일 렌더링 실패: member={member_id}, message={message} - {e}")
            self._record_failure(member_id, message, recipient, str(e))
            return

        mail = OutgoingMail(
            member_id=member_id,
            message=message,
            recipient=recipient,
            subject=self.renderer.notification_subject(message),
            html_content=html_content,
        )
        self._record(self.sender.deliver(mail))

    def _record(self, result: DeliveryResult) -> None:
        mail = result.mail
        NotificationLogRepository.create(
            self.session, mail.member_id, mail.message, mail.recipient,
            result.success, result.error_message
        )

    def _record_failure(self, member_id: int, message: str,
                        recipient: Optional[str], error_message: str) -> None:
        NotificationLogRepository.create(
            self.session, member_id, message, recipient, False, error_message
        )
