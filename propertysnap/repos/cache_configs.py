# repos/cache_configs.py
from pymongo import ReturnDocument
from pymongo.database import Database
from typing import Any, Dict
from datetime import datetime

DEFAULT_CONFIG = {
    "enabled": True,
    "maxAge": 300,  # 5 minutes
    "staleWhileRevalidate": True,
}

def get_or_create_config(db: Database, config_type: str) -> Dict[str, Any]:
    """Return the stored config, inserting the defaults the first time a type is requested."""
    now = datetime.utcnow()
    # upsert keeps concurrent first requests from creating duplicates
    return db.cache_configs.find_one_and_update(
        {"type": config_type},
        {"$setOnInsert": {**DEFAULT_CONFIG, "type": config_type, "createdAt": now, "updatedAt": now}},
        upsert=True,
        return_document=ReturnDocument.AFTER,
    )

def upsert_config(db: Database, config_type: str, patch: Dict[str, Any]) -> Dict[str, Any]:
    """Apply a partial update; missing fields keep their stored value or the default."""
    now = datetime.utcnow()
    patch = {k: v for k, v in patch.items() if v is not None and k in DEFAULT_CONFIG}
    defaults = {k: v for k, v in DEFAULT_CONFIG.items() if k not in patch}
    return db.cache_configs.find_one_and_update(
        {"type": config_type},
        {
            "$set": {**patch, "updatedAt": now},
            "$setOnInsert": {**defaults, "type": config_type, "createdAt": now},
        },
        upsert=True,
        return_document=ReturnDocument.AFTER,
    )

def ensure_indexes(db: Database) -> None:
    db.cache_configs.create_index("type", unique=True)
