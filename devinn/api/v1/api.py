"""
API v1 路由汇总
"""

from fastapi import APIRouter
from devinn.api.v1.endpoints import ai, content

api_router = APIRouter()

# 注册各个端点路由
api_router.include_router(
    content.router,
    prefix="/content",
    tags=["content"]
)

api_router.include_router(
    ai.router,
    prefix="/ai",
    tags=["ai"]
)
