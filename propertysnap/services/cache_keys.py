# services/cache_keys.py

def ads_key(position: str) -> str:
    return f"ads_{position}"

def share_page_key(share_token: str) -> str:
    return share_token

def property_list_key(user_id: str, page: int, limit: int, search: str, property_type: str, status: str) -> str:
    return f"property-list-{user_id}-{page}-{limit}-{search}-{property_type}-{status}"

def cache_config_key(config_type: str) -> str:
    return config_type

def user_id_key(email: str) -> str:
    return f"uid:{email}"

# Redis (published janitor snapshots)
def cache_stats_key(namespace: str) -> str:
    return f"cache_stats:{namespace}"
