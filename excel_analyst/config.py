import os
from pydantic_settings import BaseSettings
from pydantic import ConfigDict
from typing import List

class Settings(BaseSettings):
    # API设置
    API_V1_STR: str = "/api"
    PROJECT_NAME: str = "Excel AI Analyst"

    # CORS设置
    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:3002",
        "http://127.0.0.1:3000",
        "http://127.0.0.1:3002",
        "http://localhost:5173",  # Vite默认端口
        "http://127.0.0.1:5173"
    ]

    # LLM设置
    OPENAI_API_KEY: str = os.getenv("OPENAI_API_KEY", "")
    OPENAI_BASE_URL: str = os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1")
    OPENAI_MODEL: str = os.getenv("OPENAI_MODEL", "gpt-4")
    OPENAI_TEMPERATURE: float = 0.1
    LLM_TIMEOUT: float = 120.0  # 秒

    # 文件上传设置
    MAX_UPLOAD_SIZE: int = 10 * 1024 * 1024  # 10MB
    ALLOWED_EXTENSIONS: List[str] = [".csv", ".xlsx", ".xls"]

    # 会话设置
    SESSION_TTL_SECONDS: int = 2 * 24 * 60 * 60  # 2天
    SESSION_SWEEP_INTERVAL: int = 60 * 60  # 每小时清理一次

    # 指标策略 (metric policy for live questions)
    METRIC_EXCLUDED_SUBSTRINGS: List[str] = ["id", "numero"]
    METRIC_REQUIRE_POSITIVE_AVERAGE: bool = True

    # 调试设置
    DEBUG: bool = os.getenv("DEBUG", "False").lower() in ("true", "1", "yes", "on")

    model_config = ConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore"  # 允许额外的环境变量，但忽略它们
    )

settings = Settings()
