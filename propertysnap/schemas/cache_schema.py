from pydantic import BaseModel, Field
from typing import Dict, Optional


class CacheConfigOut(BaseModel):
    enabled: bool = True
    maxAge: int = 300  # seconds
    staleWhileRevalidate: bool = True


class CacheConfigUpdate(BaseModel):
    type: str = Field(default="share_page", min_length=1)
    enabled: Optional[bool] = None
    maxAge: Optional[int] = Field(default=None, ge=1)
    staleWhileRevalidate: Optional[bool] = None


class CacheConfigResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    config: CacheConfigOut


class CacheClearRequest(BaseModel):
    # validated against the registry in the route so bad types get a 400, not a 422
    type: str


class NamespaceStats(BaseModel):
    total: int
    active: int
    expired: int
    hits: int
    misses: int


class CacheStatsResponse(BaseModel):
    success: bool = True
    stats: Dict[str, NamespaceStats]


class CacheClearResponse(BaseModel):
    success: bool = True
    message: str
    type: str
    cleared: int
