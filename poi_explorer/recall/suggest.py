import asyncio
import logging
from typing import List, Optional

from pydantic import ValidationError

from poi_explorer.core.config import settings
from poi_explorer.core.errors import ErrorKind, SearchError, SearchOutcome
from poi_explorer.models import SuggestionHit
from poi_explorer.recall.es_client import ESTransport, es_transport, hits_of, source_of

logger = logging.getLogger(__name__)

AREA_FIELDS = (
    "translated_area1",
    "translated_area2",
    "translated_area3",
    "translated_area4",
)


class SuggestionQuery:
    """Autocomplete over the translated place-name index."""

    def __init__(self, transport: ESTransport = None):
        self.transport = transport or es_transport

    def build_body(self, query_string: str) -> dict:
        return {
            "query": {
                "bool": {
                    "must": {
                        "multi_match": {
                            "query": query_string,
                            "fields": ["translated_area0^1"],
                            "type": "most_fields",
                            "operator": "AND",
                            "analyzer": settings.ES_ANALYZER,
                        }
                    },
                    "filter": [{"term": {"language": settings.SUGGEST_LANGUAGE}}],
                }
            },
            "from": 0,
            "size": settings.SUGGEST_SIZE,
            "sort": [{"_score": "desc"}],
            "min_score": 0,
        }

    def _parse_hit(self, hit: dict) -> SuggestionHit:
        source = source_of(hit)
        parts = [
            source.get(field)
            for field in AREA_FIELDS
            if source.get(field) is not None and str(source.get(field)).strip()
        ]
        return SuggestionHit(
            value=", ".join(str(p) for p in parts),
            score=hit.get("_score"),
            raw=source,
        )

    async def outcome(self, query_string: str) -> SearchOutcome[List[SuggestionHit]]:
        if not query_string or not query_string.strip():
            return SearchOutcome[List[SuggestionHit]].failure(
                ErrorKind.INPUT_EMPTY, "empty query"
            )
        try:
            resp = await self.transport.post(
                settings.ES_TRANSLATION_INDEX, self.build_body(query_string)
            )
            hits = [self._parse_hit(hit) for hit in hits_of(resp)]
        except SearchError as e:
            return SearchOutcome[List[SuggestionHit]].failure(e.kind, e.message)
        except ValidationError as e:
            return SearchOutcome[List[SuggestionHit]].failure(ErrorKind.DECODE, str(e))
        return SearchOutcome[List[SuggestionHit]].success(hits)

    async def search(self, query_string: str) -> List[SuggestionHit]:
        result = await self.outcome(query_string)
        if not result.ok and result.error != ErrorKind.INPUT_EMPTY:
            logger.error(f"Fetch suggestions error ({result.error.value}): {result.message}")
        return result.unwrap_or([])


class LatestOnly:
    """
    Keystroke-driven suggestions: each call cancels the previous in-flight
    one, and a superseded call returns None instead of a stale list.
    """

    def __init__(self, query: SuggestionQuery = None):
        self.query = query or suggestion_query
        self._task = None

    async def __call__(self, query_string: str) -> Optional[List[SuggestionHit]]:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        task = asyncio.ensure_future(self.query.search(query_string))
        self._task = task
        try:
            return await task
        except asyncio.CancelledError:
            if self._task is not task:
                return None
            raise


suggestion_query = SuggestionQuery()


async def query_search(query_string: str) -> List[SuggestionHit]:
    return await suggestion_query.search(query_string)
