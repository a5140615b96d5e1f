"""DICOM 处理服务"""
from .extractor import DicomExtractor
