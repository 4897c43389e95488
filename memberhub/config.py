"""
MemberHub 설정 관리 모듈
"""

from pathlib import Path
from pydantic_settings import BaseSettings
from pydantic import Field
from functools import lru_cache


class Settings(BaseSettings):
    """애플리케이션 설정"""

    # 프로젝트 경로
    BASE_DIR: Path = Path(__file__).parent.parent

    # Gmail SMTP
    gmail_address: str = Field(default="")
    gmail_app_password: str = Field(default="")
    sender_name: str = Field(default="MemberHub")

    # 데이터베이스
    database_url: str = Field(default="sqlite:///./data/memberhub.db")

    # 스케줄러 - 만료 회원 비활성화
    sweep_hour: int = Field(default=0)
    sweep_minute: int = Field(default=5)

    # 웹 서버
    web_host: str = Field(default="0.0.0.0")
    web_port: int = Field(default=4060)

    # 관리자
    admin_password: str = Field(default="")
    admin_session_hours: int = Field(default=12)

    # 로깅
    log_level: str = Field(default="INFO")

    class Config:
        env_file = Path(__file__).parent.parent / ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """설정 싱글톤 반환"""
    return Settings()


settings = get_settings()
