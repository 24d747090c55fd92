from fastapi import APIRouter, Depends, HTTPException, Query, Response
from pymongo.database import Database
from propertysnap.deps import get_db, get_cache
from propertysnap.auth.dependencies import require_role
from propertysnap.schemas.ads_schema import AdCreate, AdUpdate
from propertysnap.services import ads_service
from propertysnap.services.cache_headers import apply_cache_headers
from propertysnap.services.cache_registry import CacheRegistry

router = APIRouter(prefix="/api/ads", tags=["ads"])

# Public: ads for a display slot, served through the memory cache
@router.get("/fetch")
async def fetch_ads(
    response: Response,
    position: str = Query(ads_service.DEFAULT_POSITION, min_length=1, max_length=64),
    db: Database = Depends(get_db),
    cache: CacheRegistry = Depends(get_cache),
):
    payload, hit, config = await ads_service.fetch_ads(db, cache, position)
    apply_cache_headers(response, config, hit)
    return payload

# Public: click tracking
@router.post("/{ad_id}/click")
async def track_click(ad_id: str, db: Database = Depends(get_db)):
    if not await ads_service.track_click(db, ad_id):
        raise HTTPException(status_code=404, detail="Ad not found")
    return {"success": True}

# Admin management
@router.get("")
async def list_ads(db: Database = Depends(get_db), user=Depends(require_role("admin"))):
    return {"success": True, "ads": await ads_service.list_ads(db)}

@router.post("", status_code=201)
async def create_ad(payload: AdCreate, db: Database = Depends(get_db), user=Depends(require_role("admin"))):
    ad = await ads_service.create_ad(db, payload, created_by=user["id"])
    return {"success": True, "ad": ad}

@router.get("/{ad_id}")
async def get_ad(ad_id: str, db: Database = Depends(get_db), user=Depends(require_role("admin"))):
    ad = await ads_service.get_ad(db, ad_id)
    if not ad:
        raise HTTPException(status_code=404, detail="Ad not found")
    return {"success": True, "ad": ad}

@router.put("/{ad_id}")
async def update_ad(ad_id: str, payload: AdUpdate, db: Database = Depends(get_db), user=Depends(require_role("admin"))):
    ad = await ads_service.update_ad(db, ad_id, payload)
    if not ad:
        raise HTTPException(status_code=404, detail="Ad not found")
    return {"success": True, "ad": ad}

@router.delete("/{ad_id}")
async def delete_ad(ad_id: str, db: Database = Depends(get_db), user=Depends(require_role("admin"))):
    if not await ads_service.delete_ad(db, ad_id):
        raise HTTPException(status_code=404, detail="Ad not found")
    return {"success": True, "message": "Ad deleted successfully"}
