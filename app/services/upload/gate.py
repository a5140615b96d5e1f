"""
上传校验门

两级校验:
- 宽校验 (analyze): 栅格图像, DICOM, 通用二进制, 或 .dcm 后缀
- 窄校验 (classify / detect): 仅 PNG / JPEG / WEBP
"""
from typing import Optional

from app.core.logging import logger
from app.core.exceptions import UploadValidationError
from app.schemas.media import MediaKind, UploadedAsset, has_dicom_suffix


UNSUPPORTED_TYPE_MESSAGE = "Unsupported file type"
RASTER_ONLY_MESSAGE = "Inference supports PNG/JPEG/WEBP images only"
MISSING_FILE_MESSAGE = "No file uploaded"


class UploadGate:
    """上传媒体类型校验"""

    def validate(self, declared_media_type: str, filename: str) -> bool:
        """
        宽校验: 判断声明类型与文件名是否被允许
        
        Args:
            declared_media_type: 客户端声明的 Content-Type
            filename: 原始文件名
            
        Returns:
            是否允许
        """
        kind = MediaKind.from_media_type(declared_media_type)
        return kind is not MediaKind.UNKNOWN or has_dicom_suffix(filename)

    def validate_raster(self, declared_media_type: str) -> bool:
        """窄校验: 仅接受栅格图像类型"""
        return MediaKind.from_media_type(declared_media_type).is_raster

    def require_asset(self, asset: Optional[UploadedAsset]) -> UploadedAsset:
        if asset is None:
            raise UploadValidationError(MISSING_FILE_MESSAGE)
        return asset

    def require_wide(self, asset: Optional[UploadedAsset]) -> UploadedAsset:
        asset = self.require_asset(asset)
        if not self.validate(asset.media_type, asset.filename):
            logger.warning(f"拒绝上传: {asset.filename} ({asset.media_type})")
            raise UploadValidationError(UNSUPPORTED_TYPE_MESSAGE)
        return asset

    def require_raster(self, asset: Optional[UploadedAsset]) -> UploadedAsset:
        asset = self.require_asset(asset)
        if not asset.kind.is_raster:
            logger.warning(f"推理仅支持栅格图像, 拒绝: {asset.filename} ({asset.media_type})")
            raise UploadValidationError(RASTER_ONLY_MESSAGE)
        return asset
