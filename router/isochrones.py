import asyncio
import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from core.config import settings
from core.exceptions import BizError
from modules.isochrone import IsochroneRequest, IsochroneResponse, IsochroneService, TransportMode

from .utils.deps import get_isochrone_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/isochrones", tags=["isochrones"])


@router.post(
    "/{transport}",
    response_model=IsochroneResponse,
    summary="计算等时圈",
    description="transport 取值 driving-car / cycling-regular / foot-walking，每个位置与范围组合返回一个多边形",
)
async def calculate_isochrones(
    transport: TransportMode,
    payload: IsochroneRequest,
    service: IsochroneService = Depends(get_isochrone_service),
):
    """
    命中缓存时原样返回首次生成的响应（包括 timestamp）。
    """
    try:
        result = await asyncio.to_thread(
            service.compute, transport, payload.locations, payload.range, payload.id
        )
    except BizError:
        raise
    except Exception as exc:  # noqa: BLE001
        logger.error("等时圈计算失败: %s", exc, exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"status": "error", "message": str(exc)},
        )

    return JSONResponse(
        content=result,
        headers={"Cache-Control": f"public, max-age={settings.isochrone_cache_ttl_s}"},
    )
