import asyncio
import pytest
from moviefinder.models import Movie, create_engine_and_sessions, init_models
from moviefinder.schemas import MovieResponse, SearchResponse
from moviefinder.services import MovieService, MovieStore


def build_movie(title: str, actors: str = "", **overrides) -> Movie:
    """A Movie with the required columns filled in."""
    fields = dict(
        title=title,
        year="2010",
        rated="PG-13",
        released="16 Jul 2010",
        runtime="148 min",
        genre="Action, Sci-Fi",
        director="Christopher Nolan",
        writer="Christopher Nolan",
        actors=actors,
        plot="A thief who steals corporate secrets through dream-sharing technology.",
    )
    fields.update(overrides)
    return Movie(**fields)


class StubOmdbClient:
    """Stands in for OmdbClient; records calls and serves canned responses."""

    def __init__(self):
        self.details = {}
        self.searches = {}
        self.error = None
        self.calls = []

    async def fetch_by_title(self, title):
        self.calls.append(("fetch_by_title", title))
        if self.error:
            raise self.error
        return self.details.get(title, MovieResponse(Response="False", Error="Movie not found!"))

    async def search(self, term, page=1):
        self.calls.append(("search", term, page))
        if self.error:
            raise self.error
        return self.searches.get(term, SearchResponse(Response="False", Error="Movie not found!"))


async def wait_for_state(view_model, predicate, timeout=2.0):
    """Waits until the view model's state satisfies `predicate`."""
    if predicate(view_model.state):
        return view_model.state
    reached = asyncio.Event()
    unsubscribe = view_model.observe(lambda state: predicate(state) and reached.set())
    try:
        await asyncio.wait_for(reached.wait(), timeout)
    finally:
        unsubscribe()
    return view_model.state


@pytest.fixture
async def database(tmp_path):
    engine, session_factory = create_engine_and_sessions(f"sqlite+aiosqlite:///{tmp_path / 'movies.db'}")
    await init_models(engine)
    yield engine, session_factory
    await engine.dispose()


@pytest.fixture
def store(database):
    _, session_factory = database
    return MovieStore(session_factory)


@pytest.fixture
def omdb():
    return StubOmdbClient()


@pytest.fixture
def service(store, omdb):
    return MovieService(store, omdb)
