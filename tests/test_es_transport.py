import pytest
from unittest.mock import AsyncMock, patch
from types import SimpleNamespace

from elastic_transport import (
    ApiResponseMeta,
    ConnectionError as TransportConnectionError,
    ConnectionTimeout,
    HttpHeaders,
    NodeConfig,
    SerializationError,
)
from elasticsearch import ApiError, AuthenticationException

from poi_explorer.core.errors import ErrorKind, SearchError
from poi_explorer.recall.es_client import ESTransport, hits_of


def _meta(status):
    return ApiResponseMeta(
        status=status,
        http_version="1.1",
        headers=HttpHeaders(),
        duration=0.0,
        node=NodeConfig("https", "es.example.com", 443),
    )


@pytest.mark.asyncio
async def test_post_uses_api_key_and_returns_body():
    with patch("poi_explorer.recall.es_client.AsyncElasticsearch") as MockES:
        mock_es_instance = AsyncMock()
        MockES.return_value = mock_es_instance
        mock_es_instance.search.return_value = SimpleNamespace(
            body={"hits": {"hits": [], "total": {"value": 0}}}
        )

        transport = ESTransport(
            host="https://es.example.com:443", api_key="secret-token", timeout=3.0
        )
        resp = await transport.post("index_poi_raw2_global", {"size": 0})

        assert resp == {"hits": {"hits": [], "total": {"value": 0}}}

        args, kwargs = MockES.call_args
        assert args == ("https://es.example.com:443",)
        assert kwargs["api_key"] == "secret-token"
        assert kwargs["request_timeout"] == 3.0
        assert kwargs["max_retries"] == 0

        call_kwargs = mock_es_instance.search.call_args.kwargs
        assert call_kwargs["index"] == "index_poi_raw2_global"
        assert call_kwargs["body"] == {"size": 0}


@pytest.mark.asyncio
async def test_client_is_reused_and_closed():
    with patch("poi_explorer.recall.es_client.AsyncElasticsearch") as MockES:
        mock_es_instance = AsyncMock()
        MockES.return_value = mock_es_instance
        mock_es_instance.search.return_value = {"hits": {"hits": []}}

        transport = ESTransport(api_key="k")
        await transport.post("a", {})
        await transport.post("b", {})
        assert MockES.call_count == 1

        await transport.close()
        mock_es_instance.close.assert_awaited_once()
        assert transport.client is None


@pytest.mark.asyncio
async def test_missing_api_key_fails_without_a_request():
    with patch("poi_explorer.recall.es_client.AsyncElasticsearch") as MockES:
        transport = ESTransport(api_key="")

        with pytest.raises(SearchError) as exc_info:
            await transport.post("index", {})

        assert exc_info.value.kind == ErrorKind.AUTHENTICATION
        MockES.assert_not_called()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "raised, kind",
    [
        (ConnectionTimeout("timed out"), ErrorKind.TIMEOUT),
        (TransportConnectionError("dns failure"), ErrorKind.TRANSPORT),
        (SerializationError("bad json"), ErrorKind.DECODE),
        (
            AuthenticationException(message="unauthorized", meta=_meta(401), body={}),
            ErrorKind.AUTHENTICATION,
        ),
        (ApiError(message="boom", meta=_meta(503), body={}), ErrorKind.TRANSPORT),
    ],
)
async def test_failures_map_to_error_kinds(raised, kind):
    with patch("poi_explorer.recall.es_client.AsyncElasticsearch") as MockES:
        mock_es_instance = AsyncMock()
        MockES.return_value = mock_es_instance
        mock_es_instance.search.side_effect = raised

        transport = ESTransport(api_key="k")
        with pytest.raises(SearchError) as exc_info:
            await transport.post("index", {})

        assert exc_info.value.kind == kind


@pytest.mark.asyncio
async def test_non_object_body_is_a_decode_failure():
    with patch("poi_explorer.recall.es_client.AsyncElasticsearch") as MockES:
        mock_es_instance = AsyncMock()
        MockES.return_value = mock_es_instance
        mock_es_instance.search.return_value = SimpleNamespace(body="<html>")

        transport = ESTransport(api_key="k")
        with pytest.raises(SearchError) as exc_info:
            await transport.post("index", {})

        assert exc_info.value.kind == ErrorKind.DECODE


def test_hits_of_tolerates_missing_envelope():
    assert hits_of({}) == []
    assert hits_of({"hits": {}}) == []
    assert hits_of({"hits": {"hits": [{"_id": "1"}]}}) == [{"_id": "1"}]


@pytest.mark.asyncio
async def test_malformed_host_is_a_transport_failure():
    with patch("poi_explorer.recall.es_client.AsyncElasticsearch") as MockES:
        MockES.side_effect = ValueError("URL must include a 'scheme', 'host', and 'port'")

        transport = ESTransport(host="not a url", api_key="k")
        with pytest.raises(SearchError) as exc_info:
            await transport.post("index", {})

        assert exc_info.value.kind == ErrorKind.TRANSPORT
        assert transport.client is None
