"""
AI笔记DevInn - 主应用入口
从社交平台旅行笔记生成个性化旅行计划
"""

import time
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from devinn.core.config import settings
from devinn.core.container import build_container
from devinn.core.logging_config import elapsed_ms, log_api_access, setup_logging
from devinn.api.v1.api import api_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    """应用生命周期管理"""
    # 启动时初始化
    logger = setup_logging(settings)
    logger.info(f"🚀 启动 {settings.APP_NAME}...")

    app.state.container = build_container(settings)
    logger.info("✅ 服务初始化完成")

    yield

    # 关闭时清理
    logger.info(f"🛑 关闭 {settings.APP_NAME}...")
    await app.state.container.shutdown()
    logger.info("✅ 应用关闭完成")


# 创建FastAPI应用
app = FastAPI(
    title=settings.APP_NAME,
    description="从旅行笔记生成个性化旅行计划",
    version=settings.VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# 中间件配置
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_HOSTS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def access_log_middleware(request: Request, call_next):
    """记录API访问日志"""
    start = time.perf_counter()
    response = await call_next(request)
    log_api_access(request.method, request.url.path, response.status_code, elapsed_ms(start))
    return response


# 注册API路由
app.include_router(api_router, prefix="/api/v1")


@app.get("/")
async def root():
    """根路径"""
    return {
        "message": f"{settings.APP_NAME} API",
        "version": settings.VERSION,
        "status": "running"
    }


@app.get("/health")
async def health_check():
    """健康检查"""
    return {
        "status": "healthy",
        "service": settings.APP_NAME,
        "version": settings.VERSION
    }


if __name__ == "__main__":
    # 通过命令行参数传递host和port
    import argparse
    parser = argparse.ArgumentParser()
    parser.add_argument("--host", type=str, default=settings.HOST)
    parser.add_argument("--port", type=int, default=settings.PORT)
    args = parser.parse_args()

    uvicorn.run(
        "main:app",
        host=args.host,
        port=args.port,
        reload=settings.DEBUG,
        log_level="info"
    )
