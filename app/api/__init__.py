"""API 路由"""
from .routes import router, get_pipeline
