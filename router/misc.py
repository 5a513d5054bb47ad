from datetime import datetime

from fastapi import APIRouter, Depends

from core.config import settings
from modules.isochrone import IsochroneService

from .utils.deps import get_isochrone_service

router = APIRouter()


@router.get("/health", summary="健康检查")
async def health_check(service: IsochroneService = Depends(get_isochrone_service)):
    """检查服务是否正常运行"""
    return {
        "status": "healthy",
        "timestamp": datetime.now().isoformat(),
        "version": "1.0.0",
        "cache_entries": len(service.cache),
    }


@router.get("/", summary="根路径")
async def root():
    """返回欢迎信息"""
    return {
        "message": "等时圈相交分析 API",
        "docs": f"{settings.app_base_url}/docs",
        "health": f"{settings.app_base_url}/health",
    }
