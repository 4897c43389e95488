"""
MemberHub 웹 애플리케이션
회원 조회 / 결제 등록 / 구독 갱신 JSON API
"""

import logging

from fastapi import Depends, FastAPI, HTTPException
from sqlalchemy.orm import Session

from ..config import settings
from ..common.database.repository import (
    get_session_factory, MemberRepository, PaymentRepository
)
from ..common.membership import (
    MemberService, MemberNotFoundError, InvalidDurationError
)
from ..common.scheduler.health import check_health, last_run, update_health
from ..common.scheduler.jobs import build_subscription_service
from .auth import router as auth_router, require_admin
from .schemas import (
    MemberCreate, MemberOut, MemberStatus, PaymentCreate, PaymentOut,
    RenewRequest, SweepResult,
)

logger = logging.getLogger(__name__)

# FastAPI 앱 생성
app = FastAPI(
    title="MemberHub",
    description="회원 구독 관리 서비스",
    version="1.0.0"
)

app.include_router(auth_router)


def get_db():
    """데이터베이스 세션 제너레이터"""
    SessionLocal = get_session_factory()
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_member_or_404(db: Session, member_id: int):
    """회원 조회, 없으면 404"""
    member = MemberService(MemberRepository(db)).get_member(member_id)
    if member is None:
        raise HTTPException(status_code=404, detail=f"회원을 찾을 수 없습니다: {member_id}")
    return member


# ==================== 헬스체크 ====================

@app.get("/health")
async def health():
    """스케줄러 헬스체크"""
    if not check_health():
        raise HTTPException(status_code=503, detail="scheduler stale")
    ran_at = last_run("sweep")
    return {"status": "ok", "last_sweep": ran_at.isoformat() if ran_at else None}


# ==================== 회원 ====================

@app.post("/members", response_model=MemberOut, status_code=201)
def create_member(member_in: MemberCreate, db: Session = Depends(get_db)):
    """회원 등록"""
    member = MemberRepository(db).create(member_in.name, member_in.email)
    db.commit()
    db.refresh(member)
    logger.info(f"회원 등록: member={member.id}")
    return member


@app.get("/members/{member_id}", response_model=MemberOut)
def read_member(member_id: int, db: Session = Depends(get_db)):
    """회원 조회"""
    return get_member_or_404(db, member_id)


@app.get("/members/{member_id}/active", response_model=MemberStatus)
def read_member_status(member_id: int, db: Session = Depends(get_db)):
    """회원 활성 여부 (존재하지 않으면 false)"""
    is_active = MemberService(MemberRepository(db)).is_active(member_id)
    return MemberStatus(member_id=member_id, is_active=is_active)


# ==================== 결제 / 갱신 ====================

@app.post("/members/{member_id}/payments", response_model=PaymentOut, status_code=201)
def record_payment(member_id: int, payment_in: PaymentCreate, db: Session = Depends(get_db)):
    """결제 원장 등록"""
    get_member_or_404(db, member_id)
    payment = PaymentRepository.create(db, member_id, payment_in.amount, payment_in.reference)
    db.commit()
    db.refresh(payment)
    logger.info(f"결제 등록: member={member_id}, amount={payment_in.amount}")
    return payment


@app.post("/members/{member_id}/renew", response_model=MemberOut)
def renew_subscription(member_id: int, renew_in: RenewRequest, db: Session = Depends(get_db)):
    """결제 확인 후 구독 갱신"""
    service = build_subscription_service(db)
    try:
        renewed = service.renew_subscription(member_id, renew_in.amount, renew_in.duration_days)
    except MemberNotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidDurationError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))
    except Exception:
        db.rollback()
        raise

    if not renewed:
        db.rollback()
        raise HTTPException(status_code=402, detail="결제 내역을 확인할 수 없습니다.")

    db.commit()
    return get_member_or_404(db, member_id)


# ==================== 운영 ====================

@app.post(
    "/admin/deactivate-expired",
    response_model=SweepResult,
    dependencies=[Depends(require_admin)],
)
def deactivate_expired(db: Session = Depends(get_db)):
    """만료 회원 비활성화 즉시 실행. 실패는 5xx로 전달된다."""
    try:
        deactivated = build_subscription_service(db).deactivate_expired_members()
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("수동 만료 회원 비활성화 실패")
        raise

    logger.info(f"수동 만료 회원 비활성화 완료: {len(deactivated)}명 {deactivated}")
    update_health("sweep", len(deactivated))
    return SweepResult(deactivated=deactivated)


# ==================== 서버 실행 ====================

def run_server():
    """웹 서버 실행"""
    import uvicorn

    logger.info(f"웹 서버 시작: http://{settings.web_host}:{settings.web_port}")
    uvicorn.run(
        app,
        host=settings.web_host,
        port=settings.web_port,
        log_level="info"
    )
