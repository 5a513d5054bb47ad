from typing import Any, Dict, List, Optional

class BizError(Exception):
    """
    通用业务异常
    """
    def __init__(
        self,
        message: str,
        code: int = 400,
        payload: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.payload = payload or {}
        super().__init__(self.message)

class IsochroneInputError(BizError):
    """
    等时圈请求参数非法（坐标、范围、空列表等），不重试、不缓存
    """
    def __init__(self, message: str, errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(
            message=message,
            code=422,
            payload={"errors": errors or []}
        )

class SynthesisError(BizError):
    """
    多边形生成过程中的意外失败
    """
    def __init__(self, message: str, original_error: str = ""):
        super().__init__(
            message=message,
            code=500,
            payload={"original_error": str(original_error)}
        )

class GeometryError(BizError):
    """
    相交计算失败（环数据异常），仅影响当前这一对多边形
    """
    def __init__(self, message: str, pair: Optional[List[str]] = None):
        super().__init__(
            message=message,
            code=500,
            payload={"pair": pair or []}
        )
