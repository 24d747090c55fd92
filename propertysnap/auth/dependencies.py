# auth/dependencies.py
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from pymongo.database import Database
from propertysnap.deps import get_db, get_cache
from propertysnap.auth.jwt import decode_token
from propertysnap.services.cache_registry import CacheRegistry
from propertysnap.services.user_service import resolve_user_id

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")

async def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Database = Depends(get_db),
    cache: CacheRegistry = Depends(get_cache),
):
    try:
        payload = decode_token(token)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))

    email = payload["sub"]
    user_id = await resolve_user_id(db, cache, email)
    if not user_id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found in database")

    return {"id": user_id, "email": email, "role": payload.get("role", "user")}

def require_role(*roles: str):
    async def role_checker(user=Depends(get_current_user)):
        if user["role"] not in roles:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden: Admin access required")
        return user
    return role_checker
