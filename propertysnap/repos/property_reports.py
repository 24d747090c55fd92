from pymongo.database import Database
from pymongo import ASCENDING, DESCENDING, ReturnDocument
from typing import Dict, Any, List, Optional, Tuple
from datetime import datetime
import re

from propertysnap.repos.helper import to_object_id

# Reports created through the API start PENDING; admins approve them.
# ACTIVE is kept for reports imported before moderation existed.
SHAREABLE_STATUSES = ["ACTIVE", "APPROVED"]

# ---------------------------
# Indexes
# ---------------------------

def ensure_indexes(db: Database) -> None:
    db.property_reports.create_index([("shareToken", ASCENDING)], unique=True)
    db.property_reports.create_index([("userId", ASCENDING), ("createdAt", DESCENDING)])
    db.property_reports.create_index([("status", ASCENDING), ("isPublic", ASCENDING)])

# ---------------------------
# CRUD
# ---------------------------

def insert_report(db: Database, data: Dict[str, Any], *, user_id: str, share_token: str) -> Dict[str, Any]:
    now = datetime.utcnow()
    location = data.pop("location")
    images = data.pop("images", [])
    doc = {
        **data,
        "userImages": images,
        "locationLat": location["lat"],
        "locationLng": location["lng"],
        "address": location.get("address"),
        "formattedAddress": location.get("formattedAddress"),
        "userId": user_id,
        "shareToken": share_token,
        "status": "PENDING",
        "isPublic": True,
        "viewCount": 0,
        "shareCount": 0,
        "createdAt": now,
        "updatedAt": now,
    }
    result = db.property_reports.insert_one(doc)
    doc["_id"] = result.inserted_id
    return doc

def get_report_by_share_token(db: Database, share_token: str, *, public_only: bool = False) -> Optional[Dict[str, Any]]:
    """Fetch a report with its owner's name/email joined in as `user`."""
    match: Dict[str, Any] = {"shareToken": share_token}
    if public_only:
        match["status"] = {"$in": SHAREABLE_STATUSES}
        match["isPublic"] = True

    pipeline = [
        {"$match": match},
        {"$limit": 1},
        {"$lookup": {
            "from": "users",
            "let": {"uid": "$userId"},
            "pipeline": [
                {"$match": {"$expr": {"$eq": [{"$toString": "$_id"}, "$$uid"]}}},
                {"$project": {"_id": 0, "name": 1, "email": 1}},
            ],
            "as": "user",
        }},
        {"$addFields": {"user": {"$ifNull": [{"$arrayElemAt": ["$user", 0]}, {}]}}},
    ]
    docs = list(db.property_reports.aggregate(pipeline))
    return docs[0] if docs else None

def increment_view_count(db: Database, report_id: str) -> bool:
    oid = to_object_id(report_id)
    if oid is None:
        return False
    return db.property_reports.update_one({"_id": oid}, {"$inc": {"viewCount": 1}}).matched_count > 0

def delete_owned_report(db: Database, report_id: str, user_id: str) -> bool:
    oid = to_object_id(report_id)
    if oid is None:
        return False
    return db.property_reports.delete_one({"_id": oid, "userId": user_id}).deleted_count > 0

def update_report(db: Database, report_id: str, patch: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    oid = to_object_id(report_id)
    if oid is None:
        return None
    return db.property_reports.find_one_and_update(
        {"_id": oid},
        {"$set": {**patch, "updatedAt": datetime.utcnow()}},
        return_document=ReturnDocument.AFTER,
    )

# ---------------------------
# List with search + filters
# ---------------------------

def _build_match(user_id: str, search: str, property_type: str, status: str) -> Dict[str, Any]:
    match: Dict[str, Any] = {"userId": user_id}
    if search:
        pattern = re.compile(re.escape(search), re.IGNORECASE)
        match["$or"] = [{"title": pattern}, {"description": pattern}, {"address": pattern}]
    if property_type and property_type != "all":
        match["propertyType"] = property_type
    if status and status != "all":
        match["status"] = status
    return match

def list_reports(
    db: Database,
    user_id: str,
    *,
    page: int,
    limit: int,
    search: str = "",
    property_type: str = "",
    status: str = "",
) -> Tuple[int, List[Dict[str, Any]]]:
    pipeline: List[Dict[str, Any]] = [
        {"$match": _build_match(user_id, search, property_type, status)},
        {"$facet": {
            "items": [
                {"$sort": {"createdAt": DESCENDING}},
                {"$skip": (page - 1) * limit},
                {"$limit": limit},
            ],
            "totalCount": [{"$count": "count"}],
        }},
    ]
    doc = list(db.property_reports.aggregate(pipeline))
    if not doc:
        return 0, []
    total = (doc[0]["totalCount"][0]["count"] if doc[0]["totalCount"] else 0)
    return total, doc[0]["items"]
