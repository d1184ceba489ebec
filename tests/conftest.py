import pytest
from unittest.mock import AsyncMock

from poi_explorer.recall.es_client import ESTransport


@pytest.fixture
def transport():
    """An ESTransport stand-in whose `post` is an AsyncMock."""
    fake = AsyncMock(spec=ESTransport)
    fake.post.return_value = {"hits": {"hits": []}}
    return fake


def hit(source, score=1.0, _id="1"):
    return {"_id": _id, "_score": score, "_source": source}
