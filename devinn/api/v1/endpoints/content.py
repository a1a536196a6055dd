"""
内容提取API端点
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse
from loguru import logger
from pydantic import Field

from devinn.core.container import ServiceContainer, get_container
from devinn.schemas.base import CamelModel
from devinn.schemas.content import ExtractionResult, Platform

router = APIRouter()

MAX_BATCH_URLS = 10


class ExtractRequest(CamelModel):
    """单链接提取请求"""
    url: str = Field(..., min_length=1, description="内容链接")
    platform: Optional[Platform] = Field(None, description="平台（可选，以链接识别结果为准）")


class BatchExtractRequest(CamelModel):
    urls: List[str] = Field(..., min_length=1, max_length=MAX_BATCH_URLS)


def _extraction_response(result: ExtractionResult):
    if not result.success:
        return JSONResponse(status_code=400, content={"success": False, "error": result.error})
    return {
        "success": True,
        "data": result.data.to_json_dict(),
        "message": "内容提取成功",
    }


async def _extract(url: str, container: ServiceContainer):
    logger.info(f"🔍 API访问: 内容提取 {url}")
    try:
        result = await container.extraction.extract_content(url)
    except Exception as e:
        logger.error(f"内容提取失败: {e}")
        raise HTTPException(status_code=500, detail=f"内容提取失败: {str(e)}")
    return _extraction_response(result)


@router.post("/extract")
async def extract_content(
    request: ExtractRequest,
    container: ServiceContainer = Depends(get_container),
):
    """提取单个链接的内容"""
    return await _extract(request.url, container)


@router.get("/extract")
async def extract_content_by_query(
    url: Optional[str] = Query(None, description="内容链接"),
    platform: Optional[Platform] = Query(None, description="平台（可选）"),
    container: ServiceContainer = Depends(get_container),
):
    """GET 方式提取单个链接的内容"""
    if not url:
        return JSONResponse(status_code=400, content={"success": False, "error": "缺少url参数"})
    return await _extract(url, container)


@router.post("/extract-batch")
async def extract_batch(
    request: BatchExtractRequest,
    container: ServiceContainer = Depends(get_container),
):
    """批量提取，单个链接失败不影响其它链接"""
    logger.info(f"🔍 API访问: 批量内容提取 {len(request.urls)} 个链接")
    try:
        results = await container.extraction.extract_multiple_contents(request.urls)
    except Exception as e:
        logger.error(f"批量内容提取失败: {e}")
        raise HTTPException(status_code=500, detail=f"批量内容提取失败: {str(e)}")

    succeeded = sum(1 for r in results if r.success)
    return {
        "success": True,
        "data": [r.to_json_dict() for r in results],
        "summary": {
            "total": len(results),
            "succeeded": succeeded,
            "failed": len(results) - succeeded,
        },
    }


@router.get("/platforms")
async def get_supported_platforms(container: ServiceContainer = Depends(get_container)):
    """获取支持的平台列表"""
    return {
        "success": True,
        "data": [platform.value for platform in container.extraction.get_supported_platforms()],
    }


@router.get("/status")
async def get_platform_status(container: ServiceContainer = Depends(get_container)):
    """检查各平台提取可用性"""
    try:
        status = await container.extraction.get_platform_status()
        return {
            "success": True,
            "data": {platform.value: available for platform, available in status.items()},
        }
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"获取平台状态失败: {str(e)}")
