from moviefinder.services.live_query import InvalidationTracker, LiveQuery
from moviefinder.services.movie_store import MovieStore
from moviefinder.services.omdb_client import OmdbClient, OmdbError, NetworkError, DecodeError
from moviefinder.services.movie_service import MovieService

__all__ = [
    "InvalidationTracker",
    "LiveQuery",
    "MovieStore",
    "OmdbClient",
    "OmdbError",
    "NetworkError",
    "DecodeError",
    "MovieService",
]
