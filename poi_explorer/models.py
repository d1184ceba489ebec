from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List, Optional

from poi_explorer.core.config import settings


class SuggestionHit(BaseModel):
    value: str
    score: Optional[float] = None
    raw: Dict[str, Any]


class CategoryBucket(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    main_category: Optional[str] = Field(None, alias="mainCategory")
    sub_category: Optional[str] = Field(None, alias="subCategory")
    count: int = Field(0, ge=0)
    rating: float = 0


class PoiPage(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # Hit sources cut down to settings.POI_SOURCE_FIELDS, values untouched
    data: List[Dict[str, Any]] = []
    total_count: int = Field(0, ge=0, alias="totalCount")


class MapPaths(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    view_box: str = Field(alias="viewBox")
    map_paths: Dict[str, str] = Field(default_factory=dict, alias="mapPaths")


class CategoryRequest(BaseModel):
    filters: Dict[str, Any] = {}


class PoiListRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    filters: Dict[str, Any] = {}
    from_: int = Field(0, ge=0, alias="from")
    size: int = Field(settings.POI_PAGE_SIZE, ge=1, le=settings.POI_MAX_PAGE_SIZE)
    keyword: Optional[str] = ""
