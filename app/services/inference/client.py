"""
远程推理客户端 - 基于 httpx

将图像字节原样 POST 到 Hugging Face Inference API。上游模型冷启动时返回
503 并附带 estimated_time, 此时等待 min(最大等待, estimated_time) 后重试一次。
"""
import asyncio
from typing import Any, Awaitable, Callable, Optional

import httpx

from app.core.logging import logger
from app.core.exceptions import ConfigurationError, TransientUpstreamError, UpstreamError


MAX_ATTEMPTS = 2

SleepFunc = Callable[[float], Awaitable[Any]]


def resolve_model(override: Optional[str], default: str) -> str:
    """请求级模型覆盖优先, 否则使用进程级默认模型"""
    if override and override.strip():
        return override.strip()
    return default


def _error_detail(response: httpx.Response) -> str:
    """尽力从上游响应中提取错误详情"""
    try:
        payload = response.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict) and payload.get("error"):
        error = payload["error"]
        return error if isinstance(error, str) else str(error)
    snippet = (response.text or "").strip().replace("\n", " ")
    return snippet[:200] if snippet else f"HTTP {response.status_code}"


def _warmup_estimate(response: httpx.Response) -> Optional[float]:
    """503 且携带数值 estimated_time 时返回预计预热时间 (秒)"""
    if response.status_code != 503:
        return None
    try:
        payload = response.json()
    except ValueError:
        return None
    if not isinstance(payload, dict):
        return None
    estimated = payload.get("estimated_time")
    if isinstance(estimated, bool) or not isinstance(estimated, (int, float)):
        return None
    return max(float(estimated), 0.0)


class InferenceClient:
    """
    远程模型调用适配器
    
    凭证与端点在构造时显式传入, 便于测试时注入假凭证和 MockTransport。
    """

    def __init__(
        self,
        token: Optional[str],
        base_url: str = "https://api-inference.huggingface.co",
        timeout_s: float = 20.0,
        max_warmup_wait_s: float = 4.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: SleepFunc = asyncio.sleep
    ):
        self.token = token
        self.base_url = base_url.rstrip("/")
        self.timeout_s = timeout_s
        self.max_warmup_wait_s = max_warmup_wait_s
        self._transport = transport
        self._sleep = sleep

    @classmethod
    def from_settings(cls, settings, **kwargs) -> "InferenceClient":
        return cls(
            token=settings.HF_API_TOKEN,
            base_url=settings.HF_API_BASE,
            timeout_s=settings.INFERENCE_TIMEOUT_S,
            max_warmup_wait_s=settings.WARMUP_MAX_WAIT_S,
            **kwargs
        )

    async def classify(self, data: bytes, media_type: str, model: str) -> Any:
        """图像分类"""
        return await self.call(data, media_type, f"/models/{model}")

    async def detect(self, data: bytes, media_type: str, model: str) -> Any:
        """目标检测"""
        return await self.call(data, media_type, f"/models/{model}")

    async def call(self, data: bytes, media_type: str, endpoint_path: str) -> Any:
        """
        调用上游端点, 最多两次尝试
        
        Args:
            data: 图像字节
            media_type: 声明的媒体类型, 作为 Content-Type
            endpoint_path: 相对 base_url 的路径
            
        Returns:
            上游返回的 JSON
            
        Raises:
            ConfigurationError: 未配置凭证
            UpstreamError: 终止性上游错误
        """
        if not self.token:
            raise ConfigurationError("HF_API_TOKEN is not configured")
        
        url = f"{self.base_url}/{endpoint_path.lstrip('/')}"
        headers = {
            "Authorization": f"Bearer {self.token}",
            "Content-Type": media_type,
            "Accept": "application/json",
        }
        
        async with httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout_s),
            transport=self._transport
        ) as client:
            for attempt in range(1, MAX_ATTEMPTS + 1):
                try:
                    return await asyncio.wait_for(
                        self._attempt(client, url, headers, data),
                        timeout=self.timeout_s
                    )
                except asyncio.TimeoutError as e:
                    logger.error(f"上游请求超过总时限 {self.timeout_s:.0f}s: {url}")
                    raise UpstreamError(
                        "Upstream inference call failed",
                        detail=f"Upstream request exceeded {self.timeout_s:g}s"
                    ) from e
                except TransientUpstreamError as e:
                    if attempt >= MAX_ATTEMPTS:
                        logger.error(f"上游模型仍在预热, 放弃: {url}")
                        raise UpstreamError(
                            "Upstream inference call failed",
                            detail=e.message,
                            status_code=503
                        ) from e
                    wait_s = min(self.max_warmup_wait_s, e.estimated_time)
                    logger.info(f"上游模型预热中, {wait_s:.1f}s 后重试: {url}")
                    await self._sleep(wait_s)
        
        # 循环总会 return 或 raise
        raise UpstreamError("Upstream inference call failed")

    async def _attempt(
        self,
        client: httpx.AsyncClient,
        url: str,
        headers: dict,
        data: bytes
    ) -> Any:
        try:
            response = await client.post(url, content=data, headers=headers)
        except httpx.TimeoutException as e:
            logger.error(f"上游请求超时: {url}")
            raise UpstreamError(
                "Upstream inference call failed",
                detail=str(e) or "Upstream request timed out"
            ) from e
        except httpx.RequestError as e:
            logger.error(f"上游网络错误: {url} - {e!r}")
            raise UpstreamError(
                "Upstream inference call failed",
                detail=str(e) or e.__class__.__name__
            ) from e
        
        estimated = _warmup_estimate(response)
        if estimated is not None:
            raise TransientUpstreamError(_error_detail(response), estimated_time=estimated)
        
        if not response.is_success:
            detail = _error_detail(response)
            logger.error(f"上游返回错误 {response.status_code}: {detail}")
            raise UpstreamError(
                "Upstream inference call failed",
                detail=detail,
                status_code=response.status_code
            )
        
        try:
            return response.json()
        except ValueError as e:
            raise UpstreamError(
                "Upstream inference call failed",
                detail="Upstream returned a non-JSON body",
                status_code=response.status_code
            ) from e
