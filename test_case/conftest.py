"""
测试共享夹具
"""
import os

# 测试环境不写日志文件, 也不读取本地凭证
os.environ["LOG_TO_FILE"] = "false"
os.environ["HF_API_TOKEN"] = ""

from io import BytesIO
from typing import Callable, List

import httpx
import pydicom
import pytest
from pydicom.dataset import Dataset, FileMetaDataset
from pydicom.uid import ExplicitVRLittleEndian, SecondaryCaptureImageStorage, generate_uid

from app.services.inference import InferenceClient


PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


def build_dicom(**elements) -> bytes:
    """在内存中生成一个最小的 DICOM Part 10 文件"""
    meta = FileMetaDataset()
    meta.MediaStorageSOPClassUID = SecondaryCaptureImageStorage
    meta.MediaStorageSOPInstanceUID = generate_uid()
    meta.TransferSyntaxUID = ExplicitVRLittleEndian
    
    ds = Dataset()
    ds.file_meta = meta
    ds.SOPClassUID = meta.MediaStorageSOPClassUID
    ds.SOPInstanceUID = meta.MediaStorageSOPInstanceUID
    for keyword, value in elements.items():
        setattr(ds, keyword, value)
    
    buffer = BytesIO()
    pydicom.dcmwrite(buffer, ds, enforce_file_format=True)
    return buffer.getvalue()


class UpstreamRecorder:
    """记录上游请求并按顺序返回预设响应"""
    
    def __init__(self, responses: List[Callable[[httpx.Request], httpx.Response]]):
        self.responses = list(responses)
        self.requests: List[httpx.Request] = []
    
    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        factory = self.responses[min(len(self.requests), len(self.responses)) - 1]
        return factory(request)
    
    @property
    def calls(self) -> int:
        return len(self.requests)


def json_response(status_code: int, payload) -> Callable[[httpx.Request], httpx.Response]:
    return lambda request: httpx.Response(status_code, json=payload)


@pytest.fixture
def png_bytes() -> bytes:
    return PNG_BYTES


@pytest.fixture
def dicom_bytes() -> bytes:
    return build_dicom(
        PatientName="Doe^Jane",
        PatientID=" P001 ",
        StudyDate="20250101",
        Modality="CT",
        Rows=512,
        Columns=256
    )


@pytest.fixture
def sleeps() -> List[float]:
    return []


@pytest.fixture
def make_client(sleeps):
    """构造使用 MockTransport 的 InferenceClient, 预热等待只记录不真正休眠"""
    
    async def fake_sleep(seconds: float) -> None:
        sleeps.append(seconds)
    
    def _make(recorder: UpstreamRecorder, token: str = "hf_test_token") -> InferenceClient:
        return InferenceClient(
            token=token,
            base_url="https://inference.test",
            timeout_s=20.0,
            max_warmup_wait_s=4.0,
            transport=httpx.MockTransport(recorder),
            sleep=fake_sleep
        )
    
    return _make
