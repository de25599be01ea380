from pydantic import BaseModel, Field
from typing import Any, Optional, List, Dict


class CategoryInfo(BaseModel):
    key: str
    display_name: str
    google_types: List[str]
    type_count: int


class EstimateRequest(BaseModel):
    category: Optional[str] = None
    radius_meters: Optional[float] = 0


class EstimateResponse(BaseModel):
    requests: int
    grid_points: int
    type_count: int
    high_cost: bool = False


class PreviewRequest(BaseModel):
    category: str
    location: str = ""
    radius: float = Field(default=5000, description="meters")
    min_rating: float = 4.4
    max_results: int = Field(default=50, ge=1, le=500)


class PreviewResult(BaseModel):
    place_id: str
    name: str
    rating: float = 0
    review_count: int = 0
    address: str
    category: str
    system_category: str
    google_types: List[str] = []
    google_primary_type: Optional[str] = None
    match_reason: Optional[str] = None
    distance_m: int = 0
    lat: Optional[float] = None
    lng: Optional[float] = None
    status: str = "OPERATIONAL"
    has_photo: bool = False
    photo_name: Optional[str] = None


class RejectedPlace(BaseModel):
    name: str
    reason: str


class SearchSummary(BaseModel):
    center: Dict[str, float]
    resolved_location: str
    resolution_method: str
    grid_points: int
    types_searched: int
    estimated_requests: int
    requests_made: int
    requests_failed: int = 0


class PreviewResponse(BaseModel):
    results: List[PreviewResult]
    total_raw: int
    total_found: int
    total_rejected: int
    rejected: List[RejectedPlace] = []
    search: SearchSummary
    message: str
    warnings: List[str] = []


class TextSearchRequest(BaseModel):
    text_query: str = ""
    location: str = ""


class TextSearchResponse(BaseModel):
    results: List[PreviewResult]
    total_found: int
    costs: Dict[str, Dict[str, Any]]
