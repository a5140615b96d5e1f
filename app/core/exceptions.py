"""
自定义异常类
"""
from typing import Optional


class GatewayException(Exception):
    """网关基础异常"""
    def __init__(self, message: str, code: str = "UNKNOWN_ERROR"):
        self.message = message
        self.code = code
        super().__init__(self.message)


class UploadValidationError(GatewayException):
    """上传校验错误 (媒体类型不支持 / 缺少文件)"""
    def __init__(self, message: str):
        super().__init__(message, code="VALIDATION_ERROR")


class PayloadTooLargeError(GatewayException):
    """上传文件超出大小限制"""
    def __init__(self, message: str = "File too large"):
        super().__init__(message, code="PAYLOAD_TOO_LARGE")


class DicomParseError(GatewayException):
    """DICOM 解析错误, 只在提取器内部使用"""
    def __init__(self, message: str):
        super().__init__(message, code="DICOM_PARSE_ERROR")


class ConfigurationError(GatewayException):
    """配置错误 (例如缺少推理服务凭证)"""
    def __init__(self, message: str):
        super().__init__(message, code="CONFIGURATION_ERROR")


class TransientUpstreamError(GatewayException):
    """上游模型预热中, 可重试一次"""
    def __init__(self, message: str, estimated_time: float):
        self.estimated_time = estimated_time
        super().__init__(message, code="UPSTREAM_WARMING_UP")


class UpstreamError(GatewayException):
    """上游调用终止性错误"""
    def __init__(
        self,
        message: str,
        detail: Optional[str] = None,
        status_code: Optional[int] = None
    ):
        self.detail = detail
        self.status_code = status_code
        super().__init__(message, code="UPSTREAM_ERROR")
