# repos/users.py
from pymongo.database import Database
from typing import Optional

def get_user_id_by_email(db: Database, email: str) -> Optional[str]:
    doc = db.users.find_one({"email": email}, {"_id": 1})
    if not doc:
        return None
    return str(doc["_id"])

def ensure_indexes(db: Database):
    db.users.create_index("email", unique=True)
