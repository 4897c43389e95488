"""
Gmail SMTP 회원 알림 메일 발송 모듈
"""

import logging
import smtplib
from dataclasses import dataclass
from email.mime.text import MIMEText
from email.header import Header
from email.utils import formataddr
from typing import Optional

from ...config import settings

logger = logging.getLogger(__name__)


@dataclass
class OutgoingMail:
    """발송할 회원 알림 메일"""
    member_id: int
    message: str  # 알림 이벤트 (NotificationLog.message)
    recipient: str
    subject: str
    html_content: str


@dataclass
class DeliveryResult:
    """발송 결과. NotificationLog 한 건에 대응한다."""
    mail: OutgoingMail
    success: bool
    error_message: Optional[str] = None


# 예외 유형별 발송 이력 기록 문구
FAILURE_REASONS = {
    smtplib.SMTPAuthenticationError: "Gmail 인증 실패. 앱 비밀번호를 확인하세요.",
    smtplib.SMTPRecipientsRefused: "수신자 거부",
    smtplib.SMTPServerDisconnected: "SMTP 서버 연결이 끊어졌습니다.",
}


class GmailSender:
    """Gmail SMTP 회원 알림 발송기"""

    SMTP_SERVER = "smtp.gmail.com"
    SMTP_PORT = 587

    def __init__(
        self,
        sender_email: str = None,
        app_password: str = None,
        sender_name: str = None,
    ):
        self.sender_email = sender_email or settings.gmail_address
        self.app_password = app_password or settings.gmail_app_password
        self.sender_name = sender_name or settings.sender_name

        if not self.is_configured:
            logger.warning(
                "Gmail 설정이 없어 회원 알림 메일이 발송되지 않습니다. "
                "GMAIL_ADDRESS, GMAIL_APP_PASSWORD를 설정하세요."
            )

    @property
    def is_configured(self) -> bool:
        return bool(self.sender_email and self.app_password)

    def build_mime(self, mail: OutgoingMail) -> MIMEText:
        """알림 메일 MIME 메시지 생성"""
        display_name = "".join(ch for ch in self.sender_name if ch not in "\r\n\x00")

        mime = MIMEText(mail.html_content, "html", "utf-8")
        mime["Subject"] = Header(mail.subject, "utf-8")
        mime["From"] = formataddr((display_name, self.sender_email))
        mime["To"] = mail.recipient
        return mime

    def deliver(self, mail: OutgoingMail) -> DeliveryResult:
        """알림 메일 1건 발송. 실패는 예외 대신 결과로 돌려준다."""
        if not self.is_configured:
            return DeliveryResult(mail, False, "Gmail 설정이 완료되지 않았습니다.")

        try:
            with smtplib.SMTP(self.SMTP_SERVER, self.SMTP_PORT) as server:
                server.starttls()
                server.login(self.sender_email, self.app_password)
                server.sendmail(self.sender_email, mail.recipient, self.build_mime(mail).as_string())
        except (smtplib.SMTPException, OSError) as e:
            reason = FAILURE_REASONS.get(type(e), str(e))
            logger.error(f"알림 메일 발송 실패: member={mail.member_id}, to={mail.recipient} - {reason}")
            return DeliveryResult(mail, False, reason)

        logger.info(f"알림 메일 발송: member={mail.member_id}, to={mail.recipient}, message={mail.message}")
        return DeliveryResult(mail, True)


_sender: Optional[GmailSender] = None


def get_sender() -> GmailSender:
    global _sender
    if _sender is None:
        _sender = GmailSender()
    return _sender
