"""Pydantic 数据模型"""
from .media import MediaKind, UploadedAsset, has_dicom_suffix
from .dicom import DicomMetadata, DicomParseFailure
from .inference import (
    ClassificationPrediction,
    BoundingBox,
    Detection,
    AnalyzeResponse,
    ClassifyResponse,
    DetectResponse,
    ErrorResponse,
    HealthResponse
)
