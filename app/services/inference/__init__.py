"""远程推理服务"""
from .client import InferenceClient, resolve_model
from .normalizer import (
    Corners,
    OriginSize,
    UnknownBox,
    decode_box,
    normalize_classification,
    normalize_detections
)
