"""
MemberHub 메인 실행 파일
회원 구독 관리 서비스
"""

import logging
import sys
from pathlib import Path

from apscheduler.schedulers.blocking import BlockingScheduler
from dotenv import load_dotenv

sys.path.insert(0, str(Path(__file__).parent.parent))

from memberhub.config import settings
from memberhub.common.database import init_db
from memberhub.common.scheduler.jobs import run_deactivation_job, register_all_jobs

logger = logging.getLogger(__name__)


def setup_logging():
    """로깅 설정"""
    log_dir = settings.BASE_DIR / "logs"
    log_dir.mkdir(exist_ok=True)

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[
            logging.StreamHandler(),
            logging.FileHandler(log_dir / "memberhub.log", encoding="utf-8"),
        ],
    )


def run_scheduler():
    """스케줄러 실행"""
    logger.info("MemberHub 스케줄러 시작")

    scheduler = BlockingScheduler()
    register_all_jobs(scheduler)

    try:
        scheduler.start()
    except KeyboardInterrupt:
        logger.info("스케줄러 종료")
        scheduler.shutdown()


def main():
    """메인 함수"""
    import argparse

    parser = argparse.ArgumentParser(description="MemberHub - 회원 구독 관리 서비스")
    parser.add_argument("--web", action="store_true", help="웹 서버 실행")
    parser.add_argument("--sweep-once", action="store_true", help="만료 회원 비활성화 즉시 한 번 실행")

    args = parser.parse_args()

    # 환경 변수 로드
    load_dotenv()

    setup_logging()

    # 데이터베이스 초기화
    logger.info("데이터베이스 초기화...")
    init_db(settings.database_url)

    if args.web:
        logger.info("웹 서버 모드")
        from memberhub.web.app import run_server
        run_server()
    elif args.sweep_once:
        logger.info("만료 회원 비활성화 1회 실행")
        run_deactivation_job()
    else:
        run_scheduler()


if __name__ == "__main__":
    main()
