"""
FastAPI 路由定义
"""
from functools import lru_cache
from typing import Optional

from fastapi import APIRouter, Depends, File, Header, Query, UploadFile

from app.core.config import settings
from app.core.logging import logger
from app.core.exceptions import PayloadTooLargeError
from app.schemas.media import UploadedAsset
from app.schemas.inference import (
    AnalyzeResponse,
    ClassifyResponse,
    DetectResponse,
    ErrorResponse
)
from app.services import RequestPipeline
from app.services.inference import InferenceClient


router = APIRouter()

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    413: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


@lru_cache
def get_pipeline() -> RequestPipeline:
    """进程级流水线 (只读配置在此处显式注入)"""
    return RequestPipeline(
        client=InferenceClient.from_settings(settings),
        default_classify_model=settings.HF_CLASSIFY_MODEL,
        default_detect_model=settings.HF_DETECT_MODEL
    )


async def read_upload(file: Optional[UploadFile] = File(None)) -> Optional[UploadedAsset]:
    """读取 multipart 上传并构造 UploadedAsset; 未上传时返回 None"""
    if file is None:
        return None
    
    data = await file.read(settings.MAX_UPLOAD_BYTES + 1)
    if len(data) > settings.MAX_UPLOAD_BYTES:
        logger.warning(f"上传文件超出限制: {file.filename}")
        raise PayloadTooLargeError()
    
    return UploadedAsset(
        data=data,
        media_type=file.content_type or "",
        filename=file.filename or ""
    )


def model_override(
    model: Optional[str] = Query(None, description="覆盖默认模型"),
    x_model_id: Optional[str] = Header(None, description="覆盖默认模型")
) -> Optional[str]:
    """查询参数优先于请求头"""
    return model or x_model_id


@router.post("/analyze-image", response_model=AnalyzeResponse, responses=_ERROR_RESPONSES)
async def analyze_image(
    asset: Optional[UploadedAsset] = Depends(read_upload),
    pipeline: RequestPipeline = Depends(get_pipeline)
):
    """
    上传图像并返回元数据
    
    - **file**: PNG / JPEG / WEBP 图像或 DICOM 文件
    """
    return await pipeline.analyze(asset)


@router.post(
    "/classify-image",
    response_model=ClassifyResponse,
    responses={**_ERROR_RESPONSES, 502: {"model": ErrorResponse}}
)
async def classify_image(
    asset: Optional[UploadedAsset] = Depends(read_upload),
    model: Optional[str] = Depends(model_override),
    pipeline: RequestPipeline = Depends(get_pipeline)
):
    """
    远程图像分类
    
    - **file**: PNG / JPEG / WEBP 图像
    - **model**: 可选的模型 ID (也可通过 X-Model-Id 请求头传入)
    """
    return await pipeline.classify(asset, model)


@router.post(
    "/detect-objects",
    response_model=DetectResponse,
    responses={**_ERROR_RESPONSES, 502: {"model": ErrorResponse}}
)
async def detect_objects(
    asset: Optional[UploadedAsset] = Depends(read_upload),
    model: Optional[str] = Depends(model_override),
    pipeline: RequestPipeline = Depends(get_pipeline)
):
    """
    远程目标检测
    
    - **file**: PNG / JPEG / WEBP 图像
    - **model**: 可选的模型 ID (也可通过 X-Model-Id 请求头传入)
    """
    return await pipeline.detect(asset, model)
