"""业务服务"""
from .pipeline import RequestPipeline
