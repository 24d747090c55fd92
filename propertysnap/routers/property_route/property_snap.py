from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, Response, status
from pymongo.database import Database
from propertysnap.deps import get_db, get_cache
from propertysnap.auth.dependencies import get_current_user, require_role
from propertysnap.schemas.cache_schema import CacheConfigResponse, CacheConfigUpdate
from propertysnap.schemas.property_schema import PropertyCreate, ReportAction
from propertysnap.services import cache_config_service, property_service
from propertysnap.services.cache_headers import apply_cache_headers
from propertysnap.services.cache_registry import CacheRegistry

router = APIRouter(prefix="/api/property-snap", tags=["property-snap"])

# filters are hyphen-free so they stay the last two fields of the listing cache key
LIST_FILTER_PATTERN = r"^[A-Za-z_]*$"

# Route to create a new property report for the current user
@router.post("/create", status_code=status.HTTP_201_CREATED)
async def create_report(payload: PropertyCreate, db: Database = Depends(get_db), user=Depends(get_current_user)):
    return await property_service.create_report(db, user["id"], payload)

# Route to list the current user's reports (30s memory cache)
@router.get("/list")
async def list_properties(
    response: Response,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: str = Query("", max_length=200),
    propertyType: str = Query("", pattern=LIST_FILTER_PATTERN),
    status_filter: str = Query("", alias="status", pattern=LIST_FILTER_PATTERN),
    db: Database = Depends(get_db),
    cache: CacheRegistry = Depends(get_cache),
    user=Depends(get_current_user),
):
    payload, hit = await property_service.list_properties(
        db, cache, user["id"],
        page=page, limit=limit, search=search, property_type=propertyType, status=status_filter,
    )
    # per-user data: diagnostic headers only, no shared caching policy
    apply_cache_headers(response, None, hit)
    return payload

# Public share page, served through the memory cache
@router.get("/share/{share_token}")
async def get_shared_report(
    share_token: str,
    response: Response,
    background_tasks: BackgroundTasks,
    db: Database = Depends(get_db),
    cache: CacheRegistry = Depends(get_cache),
):
    # share tokens and listing keys live in the same namespace
    if not property_service.is_share_token(share_token):
        raise HTTPException(status_code=404, detail="Report not found")

    payload, hit, config = await property_service.get_shared_report(db, cache, share_token)
    if not payload:
        raise HTTPException(status_code=404, detail="Report not found")

    # counted on hits and misses alike, after the response is sent
    background_tasks.add_task(property_service.record_share_view, db, payload["report"]["id"])
    apply_cache_headers(response, config, hit)
    return payload

# Owner view of a report regardless of its moderation status
@router.get("/by-token/{share_token}")
async def get_report_by_token(share_token: str, db: Database = Depends(get_db), user=Depends(get_current_user)):
    report = await property_service.get_report_for_owner(db, share_token)
    if not report:
        raise HTTPException(status_code=404, detail="Report not found")
    if report["user"]["id"] != user["id"]:
        raise HTTPException(status_code=403, detail="You can only view your own reports")
    return {"report": report}

@router.delete("/delete/{report_id}")
async def delete_report(report_id: str, db: Database = Depends(get_db), user=Depends(get_current_user)):
    if not await property_service.delete_report(db, user["id"], report_id):
        raise HTTPException(status_code=404, detail="Report not found or access denied")
    return {"success": True, "message": "Report deleted successfully"}

# Admin moderation: approve / reject / hide / unhide
@router.patch("/admin/{report_id}")
async def moderate_report(
    report_id: str,
    action: ReportAction,
    db: Database = Depends(get_db),
    user=Depends(require_role("admin")),
):
    report = await property_service.moderate_report(db, report_id, action, reviewer=user["email"])
    if not report:
        raise HTTPException(status_code=404, detail="Report not found")
    return {"success": True, "report": report}

@router.get("/cache-config", response_model=CacheConfigResponse, response_model_exclude_none=True)
async def get_cache_config(
    config_type: str = Query(cache_config_service.SHARE_PAGE, alias="type", min_length=1),
    db: Database = Depends(get_db),
    cache: CacheRegistry = Depends(get_cache),
):
    config = await cache_config_service.get_cache_config(db, cache, config_type)
    return {"success": True, "config": config}

@router.post("/cache-config", response_model=CacheConfigResponse, dependencies=[Depends(require_role("admin"))])
async def update_cache_config(
    payload: CacheConfigUpdate,
    db: Database = Depends(get_db),
    cache: CacheRegistry = Depends(get_cache),
):
    config = await cache_config_service.update_cache_config(db, cache, payload)
    return {"success": True, "message": "Cache config updated successfully", "config": config}
