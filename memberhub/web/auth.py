"""
Admin 인증 모듈 - 쿠키 세션 기반 인증 + 로그인/로그아웃 API
"""

import secrets
import time
import logging

from fastapi import APIRouter, HTTPException, Request, Response
from pydantic import BaseModel

from ..config import settings

logger = logging.getLogger(__name__)

router = APIRouter()

SESSION_COOKIE = "admin_session"

# in-memory 세션 저장소: {token: expiry_timestamp}
_sessions: dict[str, float] = {}


class LoginRequest(BaseModel):
    password: str


def create_session() -> str:
    """새 세션 생성, 토큰 반환"""
    token = secrets.token_urlsafe(32)
    _sessions[token] = time.time() + settings.admin_session_hours * 3600
    return token


def validate_session(token: str) -> bool:
    if not token or token not in _sessions:
        return False
    if time.time() > _sessions[token]:
        del _sessions[token]
        return False
    return True


def require_admin(request: Request) -> None:
    """관리자 라우트 의존성. 미인증 시 401"""
    if not validate_session(request.cookies.get(SESSION_COOKIE)):
        raise HTTPException(status_code=401, detail="관리자 로그인이 필요합니다.")


@router.post("/admin/login")
def login(login_in: LoginRequest, response: Response):
    """관리자 로그인"""
    if not settings.admin_password:
        raise HTTPException(
            status_code=503,
            detail="관리자 비밀번호가 설정되지 않았습니다. ADMIN_PASSWORD 환경변수를 설정해주세요.",
        )

    if not secrets.compare_digest(login_in.password, settings.admin_password):
        logger.warning("Admin 로그인 실패: 잘못된 비밀번호")
        raise HTTPException(status_code=401, detail="비밀번호가 일치하지 않습니다.")

    response.set_cookie(
        key=SESSION_COOKIE,
        value=create_session(),
        httponly=True,
        samesite="lax",
        max_age=settings.admin_session_hours * 3600,
    )
    logger.info("Admin 로그인 성공")
    return {"status": "ok"}


@router.post("/admin/logout")
def logout(request: Request, response: Response):
    """관리자 로그아웃"""
    token = request.cookies.get(SESSION_COOKIE)
    if token:
        _sessions.pop(token, None)
    response.delete_cookie(SESSION_COOKIE)
    return {"status": "ok"}
