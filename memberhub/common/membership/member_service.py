"""
회원 조회 서비스 (읽기 전용)
"""

from typing import TYPE_CHECKING, Optional

from .interfaces import MemberStore

if TYPE_CHECKING:
    from ..database.models import Member


class MemberService:
    """회원 저장소 위의 읽기 전용 파사드"""

    def __init__(self, repository: MemberStore):
        self.repository = repository

    def get_member(self, member_id: int) -> Optional["Member"]:
        return self.repository.get_by_id(member_id)

    def is_active(self, member_id: int) -> bool:
        """활성 여부. 존재하지 않는 회원은 비활성으로 본다."""
        member = self.repository.get_by_id(member_id)
        if member is None:
            return False
        return bool(member.is_active)
