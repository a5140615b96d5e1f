"""
上游响应规范化

- 分类: label/score -> label/confidence, 一一对应, 保持顺序
- 检测: 两种边界框编码统一为角点表示
"""
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Union

from app.schemas.inference import BoundingBox, ClassificationPrediction, Detection


CORNER_KEYS = ("xmin", "ymin", "xmax", "ymax")
ORIGIN_SIZE_KEYS = ("x", "y", "w", "h")


@dataclass(frozen=True)
class Corners:
    """角点编码, 原样使用"""
    xmin: Optional[float]
    ymin: Optional[float]
    xmax: Optional[float]
    ymax: Optional[float]


@dataclass(frozen=True)
class OriginSize:
    """原点 + 宽高编码, 缺失分量按 0 处理"""
    x: float
    y: float
    w: float
    h: float


@dataclass(frozen=True)
class UnknownBox:
    """无可绘制几何信息"""


BoxEncoding = Union[Corners, OriginSize, UnknownBox]


def _number(value: Any) -> Optional[float]:
    """仅接受数值 (bool 除外), 其余视为缺失"""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value


def _label(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def decode_box(raw: Any) -> BoxEncoding:
    """将上游 box 字段解码为带标签的联合类型"""
    if not isinstance(raw, Mapping):
        return UnknownBox()
    if any(key in raw for key in CORNER_KEYS):
        return Corners(*(_number(raw.get(key)) for key in CORNER_KEYS))
    if any(key in raw for key in ORIGIN_SIZE_KEYS):
        x, y, w, h = (_number(raw.get(key)) or 0 for key in ORIGIN_SIZE_KEYS)
        return OriginSize(x=x, y=y, w=w, h=h)
    return UnknownBox()


def to_bounding_box(encoding: BoxEncoding) -> BoundingBox:
    """转换为规范化角点边界框"""
    if isinstance(encoding, Corners):
        return BoundingBox(
            xmin=encoding.xmin, ymin=encoding.ymin,
            xmax=encoding.xmax, ymax=encoding.ymax
        )
    if isinstance(encoding, OriginSize):
        return BoundingBox(
            xmin=encoding.x,
            ymin=encoding.y,
            xmax=encoding.x + encoding.w,
            ymax=encoding.y + encoding.h
        )
    return BoundingBox()


def _first_number(item: Mapping, *keys: str) -> Optional[float]:
    for key in keys:
        value = _number(item.get(key))
        if value is not None:
            return value
    return None


def normalize_classification(raw: Any) -> Union[List[ClassificationPrediction], Any]:
    """
    分类结果规范化
    
    非列表 (通常是上游错误对象) 原样透传, 由调用方区分。
    """
    if not isinstance(raw, list):
        return raw
    predictions = []
    for item in raw:
        item = item if isinstance(item, Mapping) else {}
        predictions.append(ClassificationPrediction(
            label=_label(item.get("label")),
            confidence=_number(item.get("score"))
        ))
    return predictions


def normalize_detections(raw: Any) -> List[Detection]:
    """
    检测结果规范化
    
    非列表视为无检测结果, 返回空列表。
    """
    if not isinstance(raw, list):
        return []
    detections = []
    for item in raw:
        item = item if isinstance(item, Mapping) else {}
        label = item.get("label") or item.get("class") or "object"
        confidence = _first_number(item, "score", "confidence")
        detections.append(Detection(
            label=str(label),
            confidence=confidence if confidence is not None else 0,
            box=to_bounding_box(decode_box(item.get("box")))
        ))
    return detections
