# services/property_service.py
import logging
import math
import re
import secrets
import string
from datetime import datetime
from typing import Any, Dict, Optional, Tuple
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError
from fastapi.concurrency import run_in_threadpool

from propertysnap.config import settings
from propertysnap.repos import property_reports as repo
from propertysnap.repos.helper import to_jsonable
from propertysnap.schemas.cache_schema import CacheConfigOut
from propertysnap.schemas.property_schema import Pagination, PropertyCreate, ReportAction
from propertysnap.services.cache_config_service import SHARE_PAGE, get_cache_config
from propertysnap.services.cache_keys import property_list_key, share_page_key
from propertysnap.services.cache_registry import CacheRegistry, CacheTTL
from propertysnap.services.read_through import read_through

logger = logging.getLogger(__name__)

SHARE_TOKEN_ALPHABET = string.ascii_letters + string.digits
SHARE_TOKEN_LENGTH = 12
SHARE_TOKEN_PATTERN = re.compile(rf"[A-Za-z0-9]{{{SHARE_TOKEN_LENGTH}}}")
DEFAULT_USER_NAME = "ผู้ใช้"  # "user", shown when the owner has no display name

# fields shared by the share page, the owner view and the listing
_PROPERTY_FIELDS = (
    "shareToken", "title", "description",
    "propertyType", "listingType", "price", "area", "landArea",
    "bedrooms", "bathrooms", "floors", "buildingAge",
    "contactPhone", "contactEmail", "contactLine",
)

# ---------------------------
# Shaping
# ---------------------------

def _base_fields(report: Dict[str, Any]) -> Dict[str, Any]:
    shaped = {"id": str(report["_id"])}
    shaped.update({field: report.get(field) for field in _PROPERTY_FIELDS})
    return shaped

def _detail_fields(report: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "province": report.get("province"),
        "region": report.get("region"),
        "location": {
            "lat": report.get("locationLat"),
            "lng": report.get("locationLng"),
            "address": report.get("address"),
            "formattedAddress": report.get("formattedAddress"),
        },
        "images": report.get("userImages") or [],
        "nearbyPlaces": report.get("nearbyPlaces") or [],
        "googlePhotos": report.get("googlePhotos"),
        "streetViewData": report.get("streetViewData"),
        "mapsData": report.get("mapsData"),
        "aiInsights": report.get("aiInsights"),
        "transportation": report.get("transportation"),
    }

def shape_shared_report(report: Dict[str, Any]) -> Dict[str, Any]:
    """Public share-page payload. The owner's email never leaves the server."""
    shaped = {
        **_base_fields(report),
        **_detail_fields(report),
        "createdAt": report.get("createdAt"),
        # reflects the view this request is about to record
        "viewCount": (report.get("viewCount") or 0) + 1,
        "shareCount": report.get("shareCount") or 0,
        "isPublic": report.get("isPublic"),
        "status": report.get("status"),
        "user": {"name": (report.get("user") or {}).get("name") or DEFAULT_USER_NAME},
    }
    return to_jsonable(shaped)

def shape_owner_report(report: Dict[str, Any]) -> Dict[str, Any]:
    shaped = {
        **_base_fields(report),
        "status": report.get("status"),
        "rejectionReason": report.get("rejectionReason"),
        "reviewedBy": report.get("reviewedBy"),
        "reviewedAt": report.get("reviewedAt"),
        **_detail_fields(report),
        "createdAt": report.get("createdAt"),
        "updatedAt": report.get("updatedAt"),
        "viewCount": report.get("viewCount") or 0,
        "shareCount": report.get("shareCount") or 0,
        "isPublic": report.get("isPublic"),
        "user": {
            "name": (report.get("user") or {}).get("name") or DEFAULT_USER_NAME,
            "id": report.get("userId"),
        },
    }
    return to_jsonable(shaped)

def shape_list_item(report: Dict[str, Any]) -> Dict[str, Any]:
    shaped = {
        **_base_fields(report),
        "location": {
            "lat": report.get("locationLat"),
            "lng": report.get("locationLng"),
            "address": report.get("address"),
        },
        "images": report.get("userImages") or [],
        "nearbyPlaces": report.get("nearbyPlaces") or [],
        "status": report.get("status") or "ACTIVE",
        "viewCount": report.get("viewCount") or 0,
        "shareCount": report.get("shareCount") or 0,
        "createdAt": report.get("createdAt"),
        "updatedAt": report.get("updatedAt"),
    }
    return to_jsonable(shaped)

# ---------------------------
# Share page (cached)
# ---------------------------

async def get_shared_report(db: Database, cache: CacheRegistry, share_token: str) -> Tuple[Optional[Dict[str, Any]], bool, CacheConfigOut]:
    config = await get_cache_config(db, cache, SHARE_PAGE)

    async def load() -> Optional[Dict[str, Any]]:
        report = await run_in_threadpool(repo.get_report_by_share_token, db, share_token, public_only=True)
        if not report:
            return None
        return {"report": shape_shared_report(report)}

    payload, hit = await read_through(cache.report, share_page_key(share_token), config.maxAge, load)
    return payload, hit, config

async def record_share_view(db: Database, report_id: str) -> None:
    """Bump the view counter after the response is sent; failures are only logged."""
    try:
        await run_in_threadpool(repo.increment_view_count, db, report_id)
    except Exception as e:
        logger.error(f"Failed to record view for report {report_id}: {str(e)}")

# ---------------------------
# Owner listing (cached)
# ---------------------------

async def list_properties(
    db: Database,
    cache: CacheRegistry,
    user_id: str,
    *,
    page: int,
    limit: int,
    search: str = "",
    property_type: str = "",
    status: str = "",
) -> Tuple[Dict[str, Any], bool]:
    key = property_list_key(user_id, page, limit, search, property_type, status)

    async def load() -> Dict[str, Any]:
        total, items = await run_in_threadpool(
            repo.list_reports, db, user_id,
            page=page, limit=limit, search=search, property_type=property_type, status=status,
        )
        total_pages = math.ceil(total / limit) if limit else 0
        pagination = Pagination(
            page=page,
            limit=limit,
            total=total,
            totalPages=total_pages,
            hasNext=page < total_pages,
            hasPrev=page > 1,
        )
        return {
            "properties": [shape_list_item(r) for r in items],
            "pagination": pagination.model_dump(),
        }

    return await read_through(cache.report, key, CacheTTL.PROPERTY_LIST, load)

# ---------------------------
# Owner operations (uncached)
# ---------------------------

async def get_report_for_owner(db: Database, share_token: str) -> Optional[Dict[str, Any]]:
    report = await run_in_threadpool(repo.get_report_by_share_token, db, share_token)
    return shape_owner_report(report) if report else None

def generate_share_token() -> str:
    return "".join(secrets.choice(SHARE_TOKEN_ALPHABET) for _ in range(SHARE_TOKEN_LENGTH))

def is_share_token(value: str) -> bool:
    """True only for strings shaped like `generate_share_token` output."""
    return SHARE_TOKEN_PATTERN.fullmatch(value) is not None

async def create_report(db: Database, user_id: str, payload: PropertyCreate, attempts: int = 3) -> Dict[str, Any]:
    data = payload.model_dump()
    for _ in range(attempts):
        share_token = generate_share_token()
        try:
            doc = await run_in_threadpool(repo.insert_report, db, dict(data), user_id=user_id, share_token=share_token)
            break
        except DuplicateKeyError:
            logger.warning(f"Share token collision on {share_token}, retrying")
    else:
        raise RuntimeError("Could not allocate a unique share token")

    logger.info(f"Property report {doc['_id']} created by user {user_id}")
    return {
        "success": True,
        "reportId": str(doc["_id"]),
        "shareToken": share_token,
        "shareUrl": f"{settings.PUBLIC_BASE_URL}/share/{share_token}",
        "status": doc["status"],
    }

async def delete_report(db: Database, user_id: str, report_id: str) -> bool:
    deleted = await run_in_threadpool(repo.delete_owned_report, db, report_id, user_id)
    if deleted:
        logger.info(f"Property report {report_id} deleted by user {user_id}")
    return deleted

def _moderation_patch(action: ReportAction, reviewer: str) -> Dict[str, Any]:
    now = datetime.utcnow()
    if action.action == "approve":
        return {"status": "APPROVED", "rejectionReason": None, "reviewedBy": reviewer, "reviewedAt": now}
    if action.action == "reject":
        if not action.rejectionReason or not action.rejectionReason.strip():
            raise ValueError("Rejection reason is required")
        return {"status": "REJECTED", "rejectionReason": action.rejectionReason.strip(), "reviewedBy": reviewer, "reviewedAt": now}
    if action.action == "hide":
        return {"status": "HIDDEN", "reviewedBy": reviewer, "reviewedAt": now}
    # unhide
    return {"status": "APPROVED", "reviewedBy": reviewer, "reviewedAt": now}

async def moderate_report(db: Database, report_id: str, action: ReportAction, reviewer: str) -> Optional[Dict[str, Any]]:
    patch = _moderation_patch(action, reviewer)
    doc = await run_in_threadpool(repo.update_report, db, report_id, patch)
    if not doc:
        return None
    logger.info(f"Property report {report_id} {action.action} by {reviewer}")
    return shape_owner_report(doc)
