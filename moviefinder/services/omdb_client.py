import asyncio
from typing import Any, Dict, Optional
import aiohttp
from pydantic import BaseModel, ValidationError
from moviefinder.config import OMDB_API_KEY, OMDB_BASE_URL
from moviefinder.schemas import MovieResponse, SearchResponse
from moviefinder.logger import get_logger

logger = get_logger()


class OmdbError(Exception):
    """Base class for OMDb client failures."""


class NetworkError(OmdbError):
    """The request never produced a usable HTTP response."""


class DecodeError(OmdbError):
    """The response body is not the JSON object we expect."""


class OmdbClient:
    """
    Stateless OMDb client. Every call is a fresh round-trip: no retries,
    no caching, and aiohttp's default timeout.
    """

    def __init__(self, api_key: str = OMDB_API_KEY, base_url: str = OMDB_BASE_URL,
                 session: Optional[aiohttp.ClientSession] = None):
        self.api_key = api_key
        self.base_url = base_url
        self._session = session

    async def fetch_by_title(self, title: str) -> MovieResponse:
        """Looks up a single movie by exact title."""
        data = await self._get({"t": title, "apikey": self.api_key})
        return self._decode(MovieResponse, data)

    async def search(self, term: str, page: int = 1) -> SearchResponse:
        """Free-text search; page is 1-based."""
        data = await self._get({"s": term, "apikey": self.api_key, "page": page})
        return self._decode(SearchResponse, data)

    async def _get(self, params: Dict[str, Any]) -> Dict[str, Any]:
        logger.debug(f"OMDb GET {self.base_url} {self._loggable(params)}")
        try:
            if self._session is not None:
                return await self._request(self._session, params)
            async with aiohttp.ClientSession() as session:
                return await self._request(session, params)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.warning(f"❌ OMDb request failed for {self._loggable(params)}: {e!r}")
            raise NetworkError(str(e) or e.__class__.__name__) from e

    async def _request(self, session: aiohttp.ClientSession, params: Dict[str, Any]) -> Dict[str, Any]:
        async with session.get(self.base_url, params=params) as response:
            response.raise_for_status()
            try:
                data = await response.json(content_type=None)
            except ValueError as e:
                logger.warning(f"❌ OMDb returned invalid JSON: {e}")
                raise DecodeError(f"Invalid JSON from OMDb: {e}") from e

        if not isinstance(data, dict):
            logger.warning(f"❌ OMDb returned {type(data).__name__} instead of an object")
            raise DecodeError(f"Expected a JSON object, got {type(data).__name__}")
        return data

    @staticmethod
    def _decode(model: type[BaseModel], data: Dict[str, Any]):
        try:
            return model.model_validate(data)
        except ValidationError as e:
            logger.warning(f"❌ OMDb payload does not match {model.__name__}: {e}")
            raise DecodeError(f"Unexpected OMDb payload: {e.error_count()} invalid field(s)") from e

    @staticmethod
    def _loggable(params: Dict[str, Any]) -> Dict[str, Any]:
        return {k: v for k, v in params.items() if k != "apikey"}
