# repos/ads.py
from pymongo.database import Database
from pymongo import ASCENDING, DESCENDING, ReturnDocument
from typing import Dict, Any, List, Optional
from datetime import datetime

from propertysnap.repos.helper import to_object_id

# ---------------------------
# Indexes
# ---------------------------

def ensure_indexes(db: Database) -> None:
    db.ads.create_index([("status", ASCENDING), ("position", ASCENDING), ("priority", ASCENDING)])
    db.ads.create_index([("createdAt", DESCENDING)])

# ---------------------------
# Reads
# ---------------------------

def list_active_ads(db: Database, position: str, now: Optional[datetime] = None) -> List[Dict[str, Any]]:
    """Active ads for a slot whose schedule window contains `now`."""
    now = now or datetime.utcnow()
    query = {
        "status": "active",
        "position": position,
        "$and": [
            {"$or": [{"startDate": None}, {"startDate": {"$lte": now}}]},
            {"$or": [{"endDate": None}, {"endDate": {"$gte": now}}]},
        ],
    }
    cursor = db.ads.find(query).sort([("priority", ASCENDING), ("createdAt", DESCENDING)])
    return list(cursor)

def list_all_ads(db: Database) -> List[Dict[str, Any]]:
    return list(db.ads.find({}).sort("createdAt", DESCENDING))

def get_ad(db: Database, ad_id: str) -> Optional[Dict[str, Any]]:
    oid = to_object_id(ad_id)
    if oid is None:
        return None
    return db.ads.find_one({"_id": oid})

# ---------------------------
# Writes
# ---------------------------

def insert_ad(db: Database, data: Dict[str, Any], created_by: str) -> Dict[str, Any]:
    now = datetime.utcnow()
    doc = {
        **data,
        "type": "image",
        "clicks": 0,
        "impressions": 0,
        "createdBy": created_by,
        "createdAt": now,
        "updatedAt": now,
    }
    result = db.ads.insert_one(doc)
    doc["_id"] = result.inserted_id
    return doc

def update_ad(db: Database, ad_id: str, patch: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    oid = to_object_id(ad_id)
    if oid is None:
        return None
    return db.ads.find_one_and_update(
        {"_id": oid},
        {"$set": {**patch, "updatedAt": datetime.utcnow()}},
        return_document=ReturnDocument.AFTER,
    )

def delete_ad(db: Database, ad_id: str) -> bool:
    oid = to_object_id(ad_id)
    if oid is None:
        return False
    return db.ads.delete_one({"_id": oid}).deleted_count > 0

def increment_clicks(db: Database, ad_id: str) -> bool:
    oid = to_object_id(ad_id)
    if oid is None:
        return False
    return db.ads.update_one({"_id": oid}, {"$inc": {"clicks": 1}}).matched_count > 0
