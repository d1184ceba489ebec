import logging
from elastic_transport import ConnectionTimeout, SerializationError, TransportError
from elasticsearch import (
    ApiError,
    AsyncElasticsearch,
    AuthenticationException,
    AuthorizationException,
)
from poi_explorer.core.config import settings
from poi_explorer.core.errors import (
    AuthenticationFailure,
    DecodeFailure,
    TimeoutFailure,
    TransportFailure,
)

logger = logging.getLogger(__name__)


class ESTransport:
    """
    Posts search bodies to one Elasticsearch deployment.

    The client is built on first use with `api_key`, so every request carries
    `Authorization: ApiKey <token>`. Connections are pooled by the client and
    released by `close()`. Retries are off; a request that outlives
    `ES_REQUEST_TIMEOUT` fails with a TimeoutFailure.
    """

    def __init__(self, host: str = None, api_key: str = None, timeout: float = None):
        self.host = host or settings.ES_HOST
        self.api_key = api_key if api_key is not None else settings.ES_API_KEY
        self.timeout = timeout if timeout is not None else settings.ES_REQUEST_TIMEOUT
        self.client = None

    def _ensure_client(self) -> AsyncElasticsearch:
        if self.client is None:
            if not self.api_key:
                raise AuthenticationFailure("ES_API_KEY is not configured")
            try:
                self.client = AsyncElasticsearch(
                    self.host,
                    api_key=self.api_key,
                    request_timeout=self.timeout,
                    max_retries=0,
                    retry_on_timeout=False,
                )
            except ValueError as e:
                raise TransportFailure(f"invalid ES_HOST {self.host!r}: {e}") from e
        return self.client

    async def post(self, index: str, body: dict) -> dict:
        """POST `body` to `/<index>/_search` and return the decoded envelope."""
        client = self._ensure_client()
        logger.debug(f"POST /{index}/_search")
        try:
            resp = await client.search(index=index, body=body)
        except ConnectionTimeout as e:
            raise TimeoutFailure(f"{index}: request timed out after {self.timeout}s") from e
        except (AuthenticationException, AuthorizationException) as e:
            raise AuthenticationFailure(
                f"{index}: rejected credentials", status=e.status_code
            ) from e
        except ApiError as e:
            raise TransportFailure(
                f"{index}: HTTP {e.status_code} {e.message}", status=e.status_code
            ) from e
        except SerializationError as e:
            raise DecodeFailure(f"{index}: response body is not valid JSON") from e
        except TransportError as e:
            raise TransportFailure(f"{index}: {e}") from e

        envelope = getattr(resp, "body", resp)
        if not isinstance(envelope, dict):
            raise DecodeFailure(f"{index}: expected a JSON object, got {type(envelope).__name__}")
        return envelope

    async def close(self):
        if self.client is not None:
            await self.client.close()
            self.client = None


def hits_of(envelope: dict) -> list[dict]:
    """The `hits.hits` list of a search envelope; absent means no hits."""
    outer = envelope.get("hits") or {}
    if not isinstance(outer, dict):
        raise DecodeFailure("hits is not an object")
    hits = outer.get("hits") or []
    if not isinstance(hits, list):
        raise DecodeFailure("hits.hits is not a list")
    return hits


def source_of(hit: dict) -> dict:
    source = hit.get("_source") if isinstance(hit, dict) else None
    if not isinstance(source, dict):
        raise DecodeFailure("hit has no _source object")
    return source


es_transport = ESTransport()
