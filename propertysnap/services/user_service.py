# services/user_service.py
from typing import Optional
from pymongo.database import Database
from fastapi.concurrency import run_in_threadpool

from propertysnap.repos import users as repo
from propertysnap.services.cache_keys import user_id_key
from propertysnap.services.cache_registry import CacheRegistry, CacheTTL


async def resolve_user_id(db: Database, cache: CacheRegistry, email: str) -> Optional[str]:
    """Map an authenticated email to the database user id. Unknown emails are not cached."""
    key = user_id_key(email)
    cached = cache.config.get(key)
    if cached is not None:
        return cached

    user_id = await run_in_threadpool(repo.get_user_id_by_email, db, email)
    if user_id:
        cache.config.set(key, user_id, CacheTTL.USER_ID)
    return user_id
