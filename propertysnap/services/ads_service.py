# services/ads_service.py
import logging
from typing import Any, Dict, List, Optional, Tuple
from pymongo.database import Database
from fastapi.concurrency import run_in_threadpool

from propertysnap.repos import ads as repo
from propertysnap.repos.helper import to_jsonable
from propertysnap.schemas.ads_schema import AdCreate, AdUpdate
from propertysnap.schemas.cache_schema import CacheConfigOut
from propertysnap.services.cache_config_service import ADS_API, get_cache_config
from propertysnap.services.cache_keys import ads_key
from propertysnap.services.cache_registry import CacheRegistry
from propertysnap.services.read_through import read_through

logger = logging.getLogger(__name__)

DEFAULT_POSITION = "sidebar"


def _shape_ad(doc: Dict[str, Any]) -> Dict[str, Any]:
    ad = to_jsonable(doc)
    ad["id"] = ad.pop("_id")
    return ad


async def fetch_ads(db: Database, cache: CacheRegistry, position: str) -> Tuple[Dict[str, Any], bool, CacheConfigOut]:
    """Active ads for a display slot, served from the `ads` namespace when possible."""
    config = await get_cache_config(db, cache, ADS_API)

    async def load() -> Dict[str, Any]:
        docs = await run_in_threadpool(repo.list_active_ads, db, position)
        return {"success": True, "ads": [_shape_ad(d) for d in docs]}

    payload, hit = await read_through(cache.ads, ads_key(position), config.maxAge, load)
    return payload, hit, config


async def list_ads(db: Database) -> List[Dict[str, Any]]:
    docs = await run_in_threadpool(repo.list_all_ads, db)
    return [_shape_ad(d) for d in docs]


async def get_ad(db: Database, ad_id: str) -> Optional[Dict[str, Any]]:
    doc = await run_in_threadpool(repo.get_ad, db, ad_id)
    return _shape_ad(doc) if doc else None


def _check_schedule(start, end) -> None:
    if start and end and end < start:
        raise ValueError("endDate must not be before startDate")


async def create_ad(db: Database, payload: AdCreate, created_by: str) -> Dict[str, Any]:
    _check_schedule(payload.startDate, payload.endDate)
    doc = await run_in_threadpool(repo.insert_ad, db, payload.model_dump(), created_by)
    logger.info(f"Ad created: {doc['_id']} position={payload.position} status={payload.status}")
    return _shape_ad(doc)


async def update_ad(db: Database, ad_id: str, payload: AdUpdate) -> Optional[Dict[str, Any]]:
    patch = payload.model_dump(exclude_unset=True)
    _check_schedule(patch.get("startDate"), patch.get("endDate"))
    doc = await run_in_threadpool(repo.update_ad, db, ad_id, patch)
    if doc:
        logger.info(f"Ad updated: {ad_id}")
    return _shape_ad(doc) if doc else None


async def delete_ad(db: Database, ad_id: str) -> bool:
    deleted = await run_in_threadpool(repo.delete_ad, db, ad_id)
    if deleted:
        logger.info(f"Ad deleted: {ad_id}")
    return deleted


async def track_click(db: Database, ad_id: str) -> bool:
    return await run_in_threadpool(repo.increment_clicks, db, ad_id)
