#!/usr/bin/env python3
"""
MedImage Gateway 服务启动脚本
"""

import os

import uvicorn

from app.core.config import settings


def main():
    from app.main import app
    
    print("=" * 50)
    print(f"🏥 {settings.APP_NAME} - FastAPI 后端服务")
    print("=" * 50)
    print(f"版本: {settings.APP_VERSION}")
    print(f"分类模型: {settings.HF_CLASSIFY_MODEL}")
    print(f"检测模型: {settings.HF_DETECT_MODEL}")
    print("=" * 50)
    
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=int(os.environ.get("PORT", 5000)),
        log_level="info"
    )

if __name__ == "__main__":
    main()
