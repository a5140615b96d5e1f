"""
上传资源与媒体类型数据模型
"""
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


DICOM_MEDIA_TYPE = "application/dicom"
GENERIC_BINARY_MEDIA_TYPE = "application/octet-stream"
DICOM_SUFFIX = ".dcm"


class MediaKind(str, Enum):
    """声明媒体类型的封闭分类"""
    PNG = "png"
    JPEG = "jpeg"
    WEBP = "webp"
    DICOM = "dicom"
    UNKNOWN = "unknown"

    @classmethod
    def from_media_type(cls, media_type: str) -> "MediaKind":
        """根据声明的 Content-Type 计算媒体类别"""
        normalized = (media_type or "").split(";")[0].strip().lower()
        return _MEDIA_TYPE_KINDS.get(normalized, cls.UNKNOWN)

    @property
    def is_raster(self) -> bool:
        return self in (MediaKind.PNG, MediaKind.JPEG, MediaKind.WEBP)


# 真实客户端常把 DICOM 标记为通用二进制, 因此两者都归为 DICOM
_MEDIA_TYPE_KINDS = {
    "image/png": MediaKind.PNG,
    "image/jpeg": MediaKind.JPEG,
    "image/jpg": MediaKind.JPEG,
    "image/webp": MediaKind.WEBP,
    DICOM_MEDIA_TYPE: MediaKind.DICOM,
    GENERIC_BINARY_MEDIA_TYPE: MediaKind.DICOM,
}


def has_dicom_suffix(filename: str) -> bool:
    """文件名是否以 .dcm 结尾 (不区分大小写)"""
    return (filename or "").lower().endswith(DICOM_SUFFIX)


class UploadedAsset(BaseModel):
    """单次请求内的上传资源, 构造后不可变"""
    model_config = ConfigDict(frozen=True)

    data: bytes = Field(..., repr=False, description="原始字节")
    media_type: str = Field(..., description="声明的媒体类型")
    filename: str = Field(default="", description="原始文件名")
    kind: MediaKind = Field(default=MediaKind.UNKNOWN, description="媒体类别")

    @model_validator(mode="before")
    @classmethod
    def _resolve_kind(cls, values: Any) -> Any:
        if isinstance(values, dict) and "kind" not in values:
            values = {**values, "kind": MediaKind.from_media_type(values.get("media_type", ""))}
        return values

    @property
    def length(self) -> int:
        return len(self.data)

    @property
    def is_dicom_like(self) -> bool:
        """DICOM 判定: DICOM 类型, 通用二进制, 或 .dcm 后缀"""
        return self.kind is MediaKind.DICOM or has_dicom_suffix(self.filename)
