from pydantic import BaseModel, Field, constr
from typing import Any, Dict, List, Optional, Literal

# Keep the original camelCase names at the API boundary; the repo stores them as-is.

class Location(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)
    address: Optional[str] = None
    formattedAddress: Optional[str] = None

class PropertyCreate(BaseModel):
    title: constr(strip_whitespace=True, min_length=1)
    description: str = ""
    propertyType: Optional[str] = None
    listingType: Optional[str] = None
    price: Optional[float] = None
    area: Optional[float] = None
    landArea: Optional[float] = None
    bedrooms: Optional[int] = None
    bathrooms: Optional[int] = None
    floors: Optional[int] = None
    buildingAge: Optional[int] = None
    contactPhone: Optional[str] = None
    contactEmail: Optional[str] = None
    contactLine: Optional[str] = None
    province: Optional[str] = None
    region: Optional[str] = None
    location: Location
    images: List[str] = []
    nearbyPlaces: List[Dict[str, Any]] = []

class ReportAction(BaseModel):
    action: Literal["approve", "reject", "hide", "unhide"]
    rejectionReason: Optional[str] = None

class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    totalPages: int
    hasNext: bool
    hasPrev: bool
