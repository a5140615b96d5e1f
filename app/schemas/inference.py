"""
推理与接口响应数据模型
"""
from typing import Any, List, Optional, Union
from pydantic import BaseModel, Field, model_serializer

from .dicom import DicomMetadata, DicomParseFailure


class ClassificationPrediction(BaseModel):
    """分类预测"""
    label: Optional[str] = Field(None, description="类别标签")
    confidence: Optional[float] = Field(None, description="置信度 (原样透传)")


class BoundingBox(BaseModel):
    """规范化边界框 (角点表示), 无法恢复的坐标省略"""
    xmin: Optional[float] = None
    ymin: Optional[float] = None
    xmax: Optional[float] = None
    ymax: Optional[float] = None

    @model_serializer(mode="wrap")
    def _omit_absent(self, handler):
        data = handler(self)
        return {k: v for k, v in data.items() if v is not None}

    @property
    def is_drawable(self) -> bool:
        return None not in (self.xmin, self.ymin, self.xmax, self.ymax)


class Detection(BaseModel):
    """目标检测结果"""
    label: str = Field(default="object", description="类别标签")
    confidence: float = Field(default=0, description="置信度 (原样透传)")
    box: BoundingBox = Field(default_factory=BoundingBox)


class AnalyzeResponse(BaseModel):
    """上传分析响应"""
    received: bool = True
    filename: str
    mime: str
    size_bytes: int
    is_dicom: bool
    dicom: Optional[Union[DicomMetadata, DicomParseFailure]] = None
    predictions: List[ClassificationPrediction] = Field(default_factory=list)


class ClassifyResponse(BaseModel):
    """分类响应; 上游返回错误对象时 predictions 原样透传"""
    model: str
    predictions: Union[List[ClassificationPrediction], Any]


class DetectResponse(BaseModel):
    """检测响应"""
    model: str
    detections: List[Detection] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    """统一错误信封"""
    message: str
    detail: Optional[str] = None


class HealthResponse(BaseModel):
    """健康检查响应"""
    status: str = "ok"
    service: str
    version: str
