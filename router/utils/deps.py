import logging

from fastapi import Depends

from modules.isochrone import IsochroneService
from modules.overlap import MarkerSetResolver

logger = logging.getLogger(__name__)

# 进程内共享的等时圈服务（含请求缓存）
_isochrone_service = IsochroneService()


def get_isochrone_service() -> IsochroneService:
    """
    等时圈服务依赖，测试中可通过 app.dependency_overrides 替换
    """
    return _isochrone_service


def get_marker_set_resolver(
    service: IsochroneService = Depends(get_isochrone_service),
) -> MarkerSetResolver:
    """
    每个请求独立的标记集合解析器，不同客户端之间不会互相判定为过期
    """
    return MarkerSetResolver(service)
