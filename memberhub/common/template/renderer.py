"""
Jinja2 템플릿 렌더링 모듈
"""

import logging
from datetime import datetime
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from ...config import settings
from ..membership.subscription_service import RENEWED_MESSAGE, EXPIRED_MESSAGE

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent.parent.parent / "templates"

# 알림 메시지별 이메일 제목
NOTIFICATION_SUBJECTS = {
    RENEWED_MESSAGE: "구독이 갱신되었습니다",
    EXPIRED_MESSAGE: "멤버십이 만료되었습니다",
}


class TemplateRenderer:
    """이메일 템플릿 렌더러"""

    def __init__(self, template_dir: str = None):
        if template_dir is None:
            template_dir = TEMPLATE_DIR

        self.template_dir = Path(template_dir)

        self._env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape(["html", "xml"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )

        self._env.filters["format_date"] = self._format_date

    @staticmethod
    def _format_date(dt: datetime, fmt: str = "%Y-%m-%d") -> str:
        if dt is None:
            return ""
        if isinstance(dt, str):
            return dt
        return dt.strftime(fmt)

    def render(self, template_name: str, context: dict) -> str:
        """범용 템플릿 렌더링"""
        try:
            template = self._env.get_template(template_name)
            return template.render(**context)
        except Exception as e:
            logger.error(f"템플릿 렌더링 실패 ({template_name}): {e}")
            raise

    def render_notification_email(self, message: str, member) -> str:
        """회원 알림 이메일 렌더링"""
        return self.render("notification.html", {
            "service_name": settings.sender_name,
            "message": message,
            "name": member.name or "",
            "is_active": member.is_active,
            "subscription_end": member.subscription_end,
        })

    @staticmethod
    def notification_subject(message: str) -> str:
        """알림 메시지에 해당하는 이메일 제목"""
        subject = NOTIFICATION_SUBJECTS.get(message, message)
        return f"[{settings.sender_name}] {subject}"


_renderer = None


def get_renderer() -> TemplateRenderer:
    global _renderer
    if _renderer is None:
        _renderer = TemplateRenderer()
    return _renderer
