from contextlib import asynccontextmanager
from typing import List

import uvicorn
from fastapi import FastAPI, Query

from poi_explorer.core.config import settings
from poi_explorer.core.log import setup_logging
from poi_explorer.models import (
    CategoryBucket,
    CategoryRequest,
    PoiListRequest,
    PoiPage,
    SuggestionHit,
)
from poi_explorer.recall.categories import query_group_by
from poi_explorer.recall.es_client import es_transport
from poi_explorer.recall.poi_list import query_poi_list
from poi_explorer.recall.suggest import query_search


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    yield
    await es_transport.close()


# The browser talks to this proxy so the Elasticsearch API key stays server side
app = FastAPI(title="POI Explorer Search Proxy", version="1.0", lifespan=lifespan)


@app.get("/suggest", response_model=List[SuggestionHit])
async def suggest(q: str = Query("", description="Place name fragment")):
    return await query_search(q)


@app.post("/categories", response_model=List[CategoryBucket])
async def categories(req: CategoryRequest):
    return await query_group_by(req.filters)


@app.post("/pois", response_model=PoiPage)
async def pois(req: PoiListRequest):
    return await query_poi_list(req.filters, req.from_, req.size, req.keyword or "")


@app.get("/health")
async def health():
    return {"status": "ok", "elasticsearch": settings.ES_HOST}


if __name__ == "__main__":
    uvicorn.run(app, host=settings.SERVICE_HOST, port=settings.APP_PORT)
