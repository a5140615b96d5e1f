"""
DICOM 元数据提取器 - 基于 pydicom

从上传的字节流中读取固定的六个标签, 解析失败时返回失败记录而不是抛出异常。
"""
from io import BytesIO
from typing import Optional, Union

import pydicom
from pydicom.tag import Tag

from app.core.logging import logger
from app.core.exceptions import DicomParseError
from app.schemas.dicom import DicomMetadata, DicomParseFailure


# 按标签编码读取
PATIENT_NAME = Tag(0x0010, 0x0010)
PATIENT_ID = Tag(0x0010, 0x0020)
STUDY_DATE = Tag(0x0008, 0x0020)
MODALITY = Tag(0x0008, 0x0060)
ROWS = Tag(0x0028, 0x0010)
COLUMNS = Tag(0x0028, 0x0011)

_UINT16_MAX = 0xFFFF


class DicomExtractor:
    """DICOM 标签投影"""

    def extract(self, data: bytes) -> Union[DicomMetadata, DicomParseFailure]:
        """
        解析 DICOM 字节流
        
        Args:
            data: 上传的原始字节
            
        Returns:
            成功记录或失败记录, 二者之一
        """
        try:
            return self._parse(data)
        except Exception as e:
            detail = str(e) or e.__class__.__name__
            logger.warning(f"DICOM 解析失败: {detail}")
            return DicomParseFailure(detail=detail)

    def _parse(self, data: bytes) -> DicomMetadata:
        if not data:
            raise DicomParseError("Empty DICOM payload")
        
        ds = pydicom.dcmread(BytesIO(data), stop_before_pixels=True)
        
        metadata = DicomMetadata(
            patient_name=self._read_string(ds, PATIENT_NAME),
            patient_id=self._read_string(ds, PATIENT_ID),
            study_date=self._read_string(ds, STUDY_DATE),
            modality=self._read_string(ds, MODALITY),
            rows=self._read_uint16(ds, ROWS),
            cols=self._read_uint16(ds, COLUMNS)
        )
        logger.debug(
            f"DICOM 解析完成: modality={metadata.modality or '-'}, "
            f"size={metadata.rows}x{metadata.cols}"
        )
        return metadata

    @staticmethod
    def _read_string(ds: pydicom.Dataset, tag) -> str:
        element = ds.get(tag)
        if element is None or element.value is None:
            return ""
        return str(element.value).strip()

    @staticmethod
    def _read_uint16(ds: pydicom.Dataset, tag) -> Optional[int]:
        element = ds.get(tag)
        if element is None or element.value is None or element.value == "":
            return None
        value = int(element.value)
        if not 0 <= value <= _UINT16_MAX:
            raise DicomParseError(f"Tag {tag} out of uint16 range: {value}")
        return value
