"""
请求流水线

analyze:  宽校验 -> DICOM 判定 -> (DICOM 提取) -> AnalyzeResponse
classify: 窄校验 -> 远程推理 -> 分类规范化 -> ClassifyResponse
detect:   窄校验 -> 远程推理 -> 检测规范化 -> DetectResponse
"""
from typing import Optional

from app.core.logging import logger
from app.schemas.media import UploadedAsset
from app.schemas.inference import (
    AnalyzeResponse,
    ClassificationPrediction,
    ClassifyResponse,
    DetectResponse
)
from app.services.upload import UploadGate
from app.services.dicom import DicomExtractor
from app.services.inference import (
    InferenceClient,
    resolve_model,
    normalize_classification,
    normalize_detections
)


# analyze 接口的固定占位分类结果
PLACEHOLDER_PREDICTIONS = (("normal", 0.95),)


class RequestPipeline:
    """按操作编排校验, 提取, 推理与规范化"""

    def __init__(
        self,
        client: InferenceClient,
        default_classify_model: str,
        default_detect_model: str,
        gate: Optional[UploadGate] = None,
        extractor: Optional[DicomExtractor] = None
    ):
        self.client = client
        self.default_classify_model = default_classify_model
        self.default_detect_model = default_detect_model
        self.gate = gate or UploadGate()
        self.extractor = extractor or DicomExtractor()

    async def analyze(self, asset: Optional[UploadedAsset]) -> AnalyzeResponse:
        """校验上传并在 DICOM 情况下提取元数据"""
        asset = self.gate.require_wide(asset)
        is_dicom = asset.is_dicom_like
        logger.info(
            f"analyze: {asset.filename} ({asset.media_type}, {asset.length} bytes, dicom={is_dicom})"
        )
        
        metadata = self.extractor.extract(asset.data) if is_dicom else None
        
        return AnalyzeResponse(
            received=True,
            filename=asset.filename,
            mime=asset.media_type,
            size_bytes=asset.length,
            is_dicom=is_dicom,
            dicom=metadata,
            predictions=[
                ClassificationPrediction(label=label, confidence=confidence)
                for label, confidence in PLACEHOLDER_PREDICTIONS
            ]
        )

    async def classify(
        self,
        asset: Optional[UploadedAsset],
        model: Optional[str] = None
    ) -> ClassifyResponse:
        """调用远程分类模型"""
        asset = self.gate.require_raster(asset)
        model_id = resolve_model(model, self.default_classify_model)
        logger.info(f"classify: {asset.filename} -> {model_id}")
        
        raw = await self.client.classify(asset.data, asset.media_type, model_id)
        return ClassifyResponse(model=model_id, predictions=normalize_classification(raw))

    async def detect(
        self,
        asset: Optional[UploadedAsset],
        model: Optional[str] = None
    ) -> DetectResponse:
        """调用远程检测模型"""
        asset = self.gate.require_raster(asset)
        model_id = resolve_model(model, self.default_detect_model)
        logger.info(f"detect: {asset.filename} -> {model_id}")
        
        raw = await self.client.detect(asset.data, asset.media_type, model_id)
        detections = normalize_detections(raw)
        logger.debug(f"detect: {len(detections)} 个检测结果")
        return DetectResponse(model=model_id, detections=detections)
