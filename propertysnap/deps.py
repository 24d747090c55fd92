from fastapi import Request
from pymongo import MongoClient
from pymongo.database import Database
from redis.asyncio import Redis
import redis.asyncio as aioredis

from propertysnap.services.cache_registry import CacheRegistry


def create_mongo_client(uri: str) -> MongoClient:
    # blocking client; services reach it through run_in_threadpool
    return MongoClient(uri, maxPoolSize=50, serverSelectionTimeoutMS=5000, appname="propertysnap-api")

def create_redis_client(url: str) -> Redis:
    return aioredis.from_url(url, encoding="utf-8", decode_responses=True, socket_connect_timeout=5)

# Request-scoped accessors for what startup put on app.state

def get_db(request: Request) -> Database:
    return request.app.state.db

def get_redis(request: Request) -> Redis:
    return request.app.state.redis

def get_cache(request: Request) -> CacheRegistry:
    """The process-wide cache registry; tests swap in their own on app.state."""
    return request.app.state.cache
