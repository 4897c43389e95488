"""
스케줄러 작업 정의
만료 회원 일괄 비활성화
"""

import logging

from apscheduler.schedulers.base import BaseScheduler
from apscheduler.triggers.cron import CronTrigger

from ..database.repository import get_session, MemberRepository
from ..membership.subscription_service import SubscriptionService
from ..membership.payment import LedgerPaymentVerifier
from ..membership.notifier import EmailNotifier
from .health import update_health
from ...config import settings

logger = logging.getLogger(__name__)

DEACTIVATION_JOB_ID = "deactivate_expired_members"


def build_subscription_service(session) -> SubscriptionService:
    """세션에 바인딩된 협력자로 구독 서비스 구성"""
    return SubscriptionService(
        MemberRepository(session),
        LedgerPaymentVerifier(session),
        EmailNotifier(session),
    )


def run_deactivation_job() -> list[int]:
    """만료 회원 비활성화 작업"""
    logger.info("만료 회원 비활성화 시작")

    try:
        with get_session() as session:
            service = build_subscription_service(session)
            deactivated = service.deactivate_expired_members()
    except Exception as e:
        logger.exception(f"만료 회원 비활성화 중 오류: {e}")
        return []

    logger.info(f"만료 회원 비활성화 완료: {len(deactivated)}명 {deactivated}")
    update_health("sweep", len(deactivated))
    return deactivated


def register_all_jobs(scheduler: BaseScheduler) -> None:
    """스케줄 작업 등록"""
    scheduler.add_job(
        run_deactivation_job,
        trigger=CronTrigger(
            hour=settings.sweep_hour,
            minute=settings.sweep_minute
        ),
        id=DEACTIVATION_JOB_ID,
        name="Deactivate expired members",
        replace_existing=True,
    )

    logger.info(
        f"만료 회원 비활성화 스케줄 등록: "
        f"매일 {settings.sweep_hour:02d}:{settings.sweep_minute:02d}"
    )
