"""
DICOM 相关数据模型
"""
from typing import Literal, Optional
from pydantic import BaseModel, ConfigDict, Field, model_serializer


class DicomMetadata(BaseModel):
    """DICOM 元数据 (解析成功)"""
    patient_name: str = Field(default="", description="患者姓名")
    patient_id: str = Field(default="", description="患者ID")
    study_date: str = Field(default="", description="检查日期 (YYYYMMDD)")
    modality: str = Field(default="", description="检查模态")
    rows: Optional[int] = Field(None, description="图像行数, 缺失时省略")
    cols: Optional[int] = Field(None, description="图像列数, 缺失时省略")

    model_config = ConfigDict(
        extra="forbid",
        json_schema_extra={
            "example": {
                "patient_name": "Doe^Jane",
                "patient_id": "P001",
                "study_date": "20250101",
                "modality": "CT",
                "rows": 512,
                "cols": 512
            }
        }
    )

    @model_serializer(mode="wrap")
    def _omit_missing_dimensions(self, handler):
        data = handler(self)
        for key in ("rows", "cols"):
            if data.get(key) is None:
                data.pop(key, None)
        return data


class DicomParseFailure(BaseModel):
    """DICOM 解析失败记录"""
    error_kind: Literal["parse-failure"] = "parse-failure"
    detail: str = Field(..., description="解析器错误信息")
