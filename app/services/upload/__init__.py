"""上传校验服务"""
from .gate import UploadGate
