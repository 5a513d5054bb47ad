import logging

from fastapi import APIRouter, Depends

from modules.overlap import MarkerSetResolver
from modules.overlap.schemas import OverlapRequest, OverlapResponse

from .utils.deps import get_marker_set_resolver

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["overlaps"])


@router.post(
    "/overlaps",
    response_model=OverlapResponse,
    summary="计算标记等时圈及两两相交区域",
)
async def calculate_overlaps(
    payload: OverlapRequest,
    resolver: MarkerSetResolver = Depends(get_marker_set_resolver),
):
    """
    所有标记的等时圈请求结束后（成功或失败）才计算相交区域；
    失败的标记不含多边形，也不参与相交计算。
    """
    logger.info("收到相交计算请求: markers=%d", len(payload.markers))
    result = await resolver.resolve(payload.markers)
    return result.to_dict()
