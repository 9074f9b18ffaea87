from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional


class Settings(BaseSettings):
    # 数据库配置
    database_url: str = "duckdb://./data/restaurant.duckdb"

    # JWT配置（本地会话令牌）
    jwt_secret_key: str = "your-secret-key-change-in-production"
    jwt_algorithm: str = "HS256"
    jwt_expire_hours: int = 24

    # Firebase 身份令牌校验
    firebase_project_id: Optional[str] = None
    firebase_jwks_url: str = (
        "https://www.googleapis.com/service_accounts/v1/jwk/"
        "securetoken@system.gserviceaccount.com"
    )

    # LiveKit 实时会话令牌
    livekit_api_key: Optional[str] = None
    livekit_api_secret: Optional[str] = None
    livekit_token_ttl_seconds: int = 600

    # 业务配置
    enforce_status_transitions: bool = False
    default_delivery_fee: float = 5.0

    # 初始管理员（可选）
    admin_email: Optional[str] = None
    admin_password: Optional[str] = None

    # API配置
    api_title: str = "Restaurant Management API"
    api_version: str = "1.0.0"
    api_prefix: str = "/api"
    cors_origins: List[str] = ["http://localhost:3000", "http://localhost:37211"]

    # 运行环境
    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 3000

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def database_path(self) -> str:
        """去掉 duckdb:// 前缀后的数据库路径"""
        if self.database_url.startswith("duckdb://"):
            return self.database_url[len("duckdb://"):]
        return self.database_url


# 全局设置实例
settings = Settings()
