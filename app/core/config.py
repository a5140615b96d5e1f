"""
应用配置管理
"""
from pathlib import Path
from typing import List, Optional
from pydantic_settings import BaseSettings
from pydantic import model_validator


# 获取项目根目录
_BASE_DIR = Path(__file__).resolve().parent.parent.parent


class Settings(BaseSettings):
    """应用配置"""
    
    # 应用基础配置
    APP_NAME: str = "MedImage Gateway"
    APP_VERSION: str = "0.1.0"
    SERVICE_NAME: str = "api-gateway"
    DEBUG: bool = False
    
    # 路径与日志配置
    BASE_DIR: Path = _BASE_DIR
    LOG_DIR: Path = _BASE_DIR / "logs"
    LOG_TO_FILE: bool = True
    
    # API 配置
    API_PREFIX: str = "/api"
    CORS_ORIGINS: List[str] = ["*"]
    MAX_UPLOAD_BYTES: int = 10 * 1024 * 1024  # 10 MiB
    
    # 远程推理配置 (Hugging Face Inference API)
    HF_API_TOKEN: Optional[str] = None
    HF_API_BASE: str = "https://api-inference.huggingface.co"
    HF_CLASSIFY_MODEL: str = "microsoft/resnet-50"
    HF_DETECT_MODEL: str = "facebook/detr-resnet-50"
    INFERENCE_TIMEOUT_S: float = 20.0
    WARMUP_MAX_WAIT_S: float = 4.0
    
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore"
    }
    
    @model_validator(mode='after')
    def create_directories(self):
        """确保日志目录存在"""
        if self.LOG_TO_FILE:
            self.LOG_DIR.mkdir(parents=True, exist_ok=True)
        return self


settings = Settings()
