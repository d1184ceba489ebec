import logging
from typing import Any, Mapping

from pydantic import ValidationError

from poi_explorer.core.config import settings
from poi_explorer.core.errors import ErrorKind, SearchError, SearchOutcome
from poi_explorer.models import PoiPage
from poi_explorer.recall.es_client import ESTransport, es_transport, hits_of, source_of
from poi_explorer.recall.filters import encode_filters

logger = logging.getLogger(__name__)


class PoiListQuery:
    """
    Filtered, paged POI listing ordered by `user_ratings_total` desc.
    Ties come back in whatever order the backend picks; there is no
    secondary sort key.
    """

    def __init__(self, transport: ESTransport = None):
        self.transport = transport or es_transport

    def build_body(
        self,
        filters: Mapping[str, Any] = None,
        from_: int = 0,
        size: int = None,
        keyword: str = "",
    ) -> dict:
        if size is None:
            size = settings.POI_PAGE_SIZE
        bool_query = {"filter": encode_filters(filters)}
        if keyword and keyword.strip():
            bool_query["must"] = {
                "multi_match": {
                    "query": keyword.strip(),
                    "fields": ["main_title^1", "category^1"],
                    "type": "most_fields",
                    "operator": "AND",
                    "analyzer": settings.ES_ANALYZER,
                }
            }
        return {
            "query": {"bool": bool_query},
            "from": from_,
            "size": size,
            "sort": [{"user_ratings_total": "desc"}],
            "_source": list(settings.POI_SOURCE_FIELDS),
            "track_scores": False,
        }

    def _project(self, source: dict) -> dict:
        allowed = settings.POI_SOURCE_FIELDS
        return {k: v for k, v in source.items() if k in allowed}

    def _total_of(self, resp: dict) -> int:
        # ES 7+ reports {"value": n, "relation": ...}; older clusters a bare int
        total = (resp.get("hits") or {}).get("total")
        if isinstance(total, dict):
            total = total.get("value")
        return total if isinstance(total, int) and total >= 0 else 0

    async def outcome(
        self,
        filters: Mapping[str, Any] = None,
        from_: int = 0,
        size: int = None,
        keyword: str = "",
    ) -> SearchOutcome[PoiPage]:
        if size is None:
            size = settings.POI_PAGE_SIZE
        try:
            resp = await self.transport.post(
                settings.ES_POI_INDEX, self.build_body(filters, from_, size, keyword)
            )
            data = [
                self._project(source_of(hit)) for hit in hits_of(resp)[: max(size, 0)]
            ]
            page = PoiPage(data=data, total_count=self._total_of(resp))
        except SearchError as e:
            return SearchOutcome[PoiPage].failure(e.kind, e.message)
        except ValidationError as e:
            return SearchOutcome[PoiPage].failure(ErrorKind.DECODE, str(e))
        return SearchOutcome[PoiPage].success(page)

    async def list(
        self,
        filters: Mapping[str, Any] = None,
        from_: int = 0,
        size: int = None,
        keyword: str = "",
    ) -> PoiPage:
        result = await self.outcome(filters, from_, size, keyword)
        if not result.ok:
            logger.error(f"POI list error ({result.error.value}): {result.message}")
        return result.unwrap_or(PoiPage())


poi_list_query = PoiListQuery()


async def query_poi_list(
    filters: Mapping[str, Any] = None,
    from_: int = 0,
    size: int = None,
    keyword: str = "",
) -> PoiPage:
    return await poi_list_query.list(filters, from_, size, keyword)
