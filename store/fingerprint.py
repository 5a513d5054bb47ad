"""
等时圈请求指纹生成工具。
"""

from __future__ import annotations

import json
from typing import Sequence


def build_request_fingerprint(
    transport: str,
    locations: Sequence[Sequence[float]],
    ranges: Sequence[float],
) -> str:
    """
    构建请求指纹 JSON 字符串。

    locations 与 ranges 保持调用方给定的顺序：顺序不同视为不同请求。
    数值统一转为 float，避免 500 与 500.0 产生两个键。
    """
    fingerprint_payload = {
        "transport": str(getattr(transport, "value", transport)).strip(),
        "locations": [[float(value) for value in location] for location in locations],
        "range": [float(value) for value in ranges],
    }
    return json.dumps(fingerprint_payload, sort_keys=True, ensure_ascii=False, separators=(",", ":"))
