"""
MedImage Gateway - 医学影像推理网关
主应用入口
"""
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.core.config import settings
from app.core.logging import logger
from app.core.exceptions import (
    ConfigurationError,
    GatewayException,
    PayloadTooLargeError,
    UploadValidationError,
    UpstreamError
)
from app.schemas.inference import HealthResponse
from app.api import router


def register_exception_handlers(app: FastAPI) -> None:
    """将异常映射为统一的 {message, detail} 错误信封"""
    
    @app.exception_handler(UploadValidationError)
    async def validation_error_handler(request: Request, exc: UploadValidationError):
        return JSONResponse(status_code=400, content={"message": exc.message})
    
    @app.exception_handler(PayloadTooLargeError)
    async def payload_too_large_handler(request: Request, exc: PayloadTooLargeError):
        return JSONResponse(status_code=413, content={"message": exc.message})
    
    @app.exception_handler(ConfigurationError)
    async def configuration_error_handler(request: Request, exc: ConfigurationError):
        logger.error(f"配置错误: {exc.message}")
        return JSONResponse(
            status_code=500,
            content={"message": "Server misconfiguration", "detail": exc.message}
        )
    
    @app.exception_handler(UpstreamError)
    async def upstream_error_handler(request: Request, exc: UpstreamError):
        return JSONResponse(
            status_code=502,
            content={"message": exc.message, "detail": exc.detail or exc.message}
        )
    
    @app.exception_handler(GatewayException)
    async def gateway_error_handler(request: Request, exc: GatewayException):
        logger.error(f"未处理的网关异常 [{exc.code}]: {exc.message}")
        return JSONResponse(
            status_code=500,
            content={"message": "Internal error", "detail": exc.message}
        )


def create_app() -> FastAPI:
    """创建 FastAPI 应用"""
    
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="""
# MedImage Gateway - 医学影像推理网关

## 功能特性
- **上传校验**: PNG / JPEG / WEBP 图像与 DICOM 文件
- **DICOM 元数据**: 患者、检查日期、模态与图像尺寸
- **远程分类**: 转发至 Hugging Face 图像分类模型
- **远程检测**: 转发至目标检测模型并统一边界框格式
        """,
        docs_url="/docs",
        redoc_url="/redoc"
    )
    
    # CORS 配置
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    
    register_exception_handlers(app)
    
    # 注册路由
    app.include_router(router, prefix=settings.API_PREFIX)
    
    @app.on_event("startup")
    async def startup_event():
        logger.info(f"🏥 {settings.APP_NAME} 启动中...")
        logger.info(f"🤖 分类模型: {settings.HF_CLASSIFY_MODEL}")
        logger.info(f"🎯 检测模型: {settings.HF_DETECT_MODEL}")
        if not settings.HF_API_TOKEN:
            logger.warning("⚠️ 未配置 HF_API_TOKEN, 分类与检测接口将不可用")
    
    @app.on_event("shutdown")
    async def shutdown_event():
        logger.info(f"🏥 {settings.APP_NAME} 关闭中...")
    
    @app.get("/")
    async def root():
        return {
            "name": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "status": "running",
            "docs": "/docs"
        }
    
    @app.get("/health", response_model=HealthResponse)
    async def health_check():
        return HealthResponse(
            status="ok",
            service=settings.SERVICE_NAME,
            version=settings.APP_VERSION
        )
    
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=5000,
        reload=settings.DEBUG
    )
