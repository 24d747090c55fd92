from pydantic import BaseModel, constr
from typing import List, Optional, Literal
from datetime import datetime

AdStatus = Literal["active", "inactive"]

class AdCreate(BaseModel):
    title: constr(strip_whitespace=True, min_length=1)
    description: str = ""
    link: Optional[str] = None
    imageUrl: str = ""
    status: AdStatus = "inactive"
    priority: int = 5
    weight: int = 1
    position: str = "sidebar"
    targetPages: List[str] = ["all"]
    startDate: Optional[datetime] = None
    endDate: Optional[datetime] = None

class AdUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    link: Optional[str] = None
    imageUrl: Optional[str] = None
    status: Optional[AdStatus] = None
    priority: Optional[int] = None
    weight: Optional[int] = None
    position: Optional[str] = None
    targetPages: Optional[List[str]] = None
    startDate: Optional[datetime] = None
    endDate: Optional[datetime] = None
