import logging
from typing import Any, List, Mapping

from pydantic import ValidationError

from poi_explorer.core.config import settings
from poi_explorer.core.errors import DecodeFailure, ErrorKind, SearchError, SearchOutcome
from poi_explorer.models import CategoryBucket
from poi_explorer.recall.es_client import ESTransport, es_transport
from poi_explorer.recall.filters import encode_filters

logger = logging.getLogger(__name__)

AGG_NAME = "custom_category_aggs"
MAIN_KEY = "custom_main_category"
SUB_KEY = "custom_sub_category"


class CategoryAggregation:
    """
    Counts POIs per (main, sub) category under a set of term filters, with
    the highest `user_ratings_total` of each bucket as its rating.

    Composite pages are followed through `after_key` only while pages come
    back full, up to GROUP_BY_MAX_PAGES. Ending on a full page at that cap
    marks the outcome as truncated, since more buckets may follow.
    """

    def __init__(self, transport: ESTransport = None):
        self.transport = transport or es_transport

    def build_body(self, filters: Mapping[str, Any] = None, after: dict = None) -> dict:
        composite = {
            "size": settings.GROUP_BY_PAGE_SIZE,
            "sources": [
                {MAIN_KEY: {"terms": {"field": MAIN_KEY}}},
                {SUB_KEY: {"terms": {"field": SUB_KEY}}},
            ],
        }
        if after:
            composite["after"] = after
        return {
            "size": 0,
            "query": {"bool": {"filter": encode_filters(filters)}},
            "aggs": {
                AGG_NAME: {
                    "composite": composite,
                    "aggs": {
                        "ratings_max": {
                            "max": {"field": "user_ratings_total", "missing": 0}
                        }
                    },
                }
            },
        }

    def _parse_bucket(self, bucket: dict) -> CategoryBucket:
        key = bucket.get("key") if isinstance(bucket, dict) else None
        if not isinstance(key, dict):
            raise DecodeFailure("composite bucket has no key object")
        rating = (bucket.get("ratings_max") or {}).get("value")
        return CategoryBucket(
            main_category=key.get(MAIN_KEY),
            sub_category=key.get(SUB_KEY),
            count=bucket.get("doc_count") or 0,
            rating=rating or 0,
        )

    async def outcome(
        self, filters: Mapping[str, Any] = None
    ) -> SearchOutcome[List[CategoryBucket]]:
        buckets = []
        seen = set()
        after = None
        truncated = False
        try:
            for _ in range(max(settings.GROUP_BY_MAX_PAGES, 1)):
                resp = await self.transport.post(
                    settings.ES_POI_INDEX, self.build_body(filters, after)
                )
                agg = (resp.get("aggregations") or {}).get(AGG_NAME) or {}
                page = agg.get("buckets") or []
                for raw in page:
                    bucket = self._parse_bucket(raw)
                    pair = (bucket.main_category, bucket.sub_category)
                    if pair in seen:
                        continue
                    seen.add(pair)
                    buckets.append(bucket)

                after = agg.get("after_key")
                if len(page) < settings.GROUP_BY_PAGE_SIZE or not after:
                    break
            else:
                truncated = True
                logger.warning(
                    f"Category aggregation stopped after {settings.GROUP_BY_MAX_PAGES} "
                    f"pages of {settings.GROUP_BY_PAGE_SIZE}; page cap reached, more buckets may exist"
                )
        except SearchError as e:
            return SearchOutcome[List[CategoryBucket]].failure(e.kind, e.message)
        except (ValidationError, AttributeError) as e:
            return SearchOutcome[List[CategoryBucket]].failure(ErrorKind.DECODE, str(e))

        # Stable: equal ratings keep backend order
        buckets.sort(key=lambda b: b.rating, reverse=True)
        return SearchOutcome[List[CategoryBucket]].success(buckets, truncated=truncated)

    async def group_by(self, filters: Mapping[str, Any] = None) -> List[CategoryBucket]:
        result = await self.outcome(filters)
        if not result.ok:
            logger.error(f"Category aggregation error ({result.error.value}): {result.message}")
        return result.unwrap_or([])


category_aggregation = CategoryAggregation()


async def query_group_by(filters: Mapping[str, Any] = None) -> List[CategoryBucket]:
    return await category_aggregation.group_by(filters)
