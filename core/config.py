"""
配置管理模块
使用Pydantic Settings从环境变量加载配置
"""

from typing import List
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    应用配置类
    从环境变量加载配置，支持类型转换和验证
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # 未声明的 env 变量忽略，不抛出校验错误
    )

    # 应用配置
    app_host: str = "0.0.0.0"  # 应用主机地址，默认0.0.0.0（允许外部访问）
    app_port: int = 8000  # 应用端口，默认8000
    app_base_url: str = "http://localhost:8000"  # 基础URL，用于生成完整的访问链接

    # CORS跨域配置
    cors_origins: List[str] = ["*"]  # 允许访问的域名列表

    # 等时圈缓存配置
    isochrone_cache_ttl_s: int = Field(
        3600,
        validation_alias="ISOCHRONE_CACHE_TTL_S",
        description="等时圈响应缓存有效期（秒），同时用于 Cache-Control max-age",
        gt=0,
    )
    isochrone_cache_max_entries: int = Field(
        10000,
        validation_alias="ISOCHRONE_CACHE_MAX_ENTRIES",
        description="缓存最大条目数，超出时淘汰最早写入的条目；0 表示不限制",
        ge=0,
    )

    # 等时圈多边形生成参数
    isochrone_polygon_vertices: int = Field(
        12,
        validation_alias="ISOCHRONE_POLYGON_VERTICES",
        description="多边形顶点数（不含闭合点）",
        ge=3,
    )
    isochrone_noise_scale: float = Field(
        0.15,
        validation_alias="ISOCHRONE_NOISE_SCALE",
        description="半径随机扰动幅度，0.15 表示 ±15%",
        ge=0,
        lt=1,
    )
    isochrone_km_per_degree: float = Field(
        50.0,
        validation_alias="ISOCHRONE_KM_PER_DEGREE",
        description="米转度的粗略换算系数：度 = 米 / 1000 / 该值",
        gt=0,
    )

    # 响应元数据
    isochrone_attribution: str = "openrouteservice.org | OpenStreetMap contributors"
    engine_version: str = "9.5.0"
    engine_build_date: str = "2025-10-31T12:33:09Z"
    engine_graph_date: str = "2025-12-28T11:13:32Z"
    engine_osm_date: str = "2025-12-22T00:59:58Z"


settings = Settings()
