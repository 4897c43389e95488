"""
만료 회원 비활성화 작업 헬스체크

작업이 끝날 때마다 마지막 실행 시각과 처리 인원을 기록하고,
/health 엔드포인트와 Docker 헬스체크에서 이를 검증한다.
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

HEALTH_FILE = Path(__file__).parent.parent.parent.parent / "data" / ".scheduler_health"

# 일 1회 작업이므로 하루 + 여유 2시간
HEALTH_WINDOW_SECONDS = 26 * 3600


def read_health() -> dict:
    """작업별 마지막 실행 기록. 파일이 없거나 깨졌으면 빈 dict"""
    if not HEALTH_FILE.exists():
        return {}
    try:
        data = json.loads(HEALTH_FILE.read_text())
    except (OSError, ValueError) as e:
        logger.warning(f"헬스 파일을 읽을 수 없습니다: {e}")
        return {}
    return data if isinstance(data, dict) else {}


def update_health(job_type: str, deactivated: int = 0) -> None:
    """작업 완료 기록"""
    data = read_health()
    data[job_type] = {
        "last_run": datetime.utcnow().isoformat(),
        "deactivated": deactivated,
    }
    HEALTH_FILE.parent.mkdir(parents=True, exist_ok=True)
    HEALTH_FILE.write_text(json.dumps(data))


def last_run(job_type: str) -> Optional[datetime]:
    entry = read_health().get(job_type)
    if not isinstance(entry, dict):
        return None
    try:
        return datetime.fromisoformat(entry["last_run"])
    except (KeyError, TypeError, ValueError):
        return None


def check_health(job_type: str = "sweep") -> bool:
    """최근 26시간 이내 작업 실행 여부. 첫 실행 전(파일 없음)은 healthy"""
    if not HEALTH_FILE.exists():
        return True

    ran_at = last_run(job_type)
    if ran_at is None:
        return False
    return (datetime.utcnow() - ran_at).total_seconds() < HEALTH_WINDOW_SECONDS
