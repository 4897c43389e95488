"""
웹 API 요청/응답 스키마
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

# 갱신 1회 최대 기간 (10년)
MAX_DURATION_DAYS = 3650


class MemberCreate(BaseModel):
    name: Optional[str] = Field(default=None, max_length=100)
    email: Optional[str] = Field(default=None, max_length=255)


class MemberOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: Optional[str] = None
    email: Optional[str] = None
    is_active: bool
    subscription_end: Optional[datetime] = None


class MemberStatus(BaseModel):
    member_id: int
    is_active: bool


class PaymentCreate(BaseModel):
    amount: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    reference: Optional[str] = Field(default=None, max_length=100)


class PaymentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    member_id: int
    amount: Decimal
    reference: Optional[str] = None
    is_consumed: bool


class RenewRequest(BaseModel):
    amount: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    duration_days: int = Field(gt=0, le=MAX_DURATION_DAYS)


class SweepResult(BaseModel):
    deactivated: list[int]
