from typing import List, Optional, Tuple
import asyncio
from moviefinder.models.movie import Movie
from moviefinder.services.movie_service import MovieService
from moviefinder.viewmodels.base import ViewModel
from moviefinder.viewmodels.ui_state import Error, Loading, Success, error_message
from moviefinder.logger import get_logger

logger = get_logger()

# How long a live actor search keeps following writes, in seconds
LIVE_SEARCH_SECONDS = 600.0


def _result_key(movies: List[Movie]) -> Tuple:
    return tuple((m.id, m.title, m.year, m.actors) for m in movies)


class SearchActorsViewModel(ViewModel):
    """
    Finds saved movies by actor name. The result stays live for
    `live_for` seconds: a write to the movies table that changes the
    matching rows re-emits Success or Error.
    """

    def __init__(self, service: MovieService, live_for: float = LIVE_SEARCH_SECONDS):
        super().__init__()
        self.service = service
        self.live_for = live_for
        self.search_term = ""
        self._collector: Optional[asyncio.Task] = None

    def update_search_term(self, term: str):
        self.search_term = term

    def search_actors(self) -> Optional[asyncio.Task]:
        term = self.search_term
        return self._remember(lambda: self._start_search(term))

    def stop(self):
        """Stops following writes; the last result stays as the state."""
        if self._collector is not None:
            self._collector.cancel()
            self._collector = None

    @property
    def is_live(self) -> bool:
        return self._collector is not None and not self._collector.done()

    def _start_search(self, term: str) -> Optional[asyncio.Task]:
        # Only one live result per screen
        self.stop()

        if not term.strip():
            self._set_state(Error("Please enter an actor name"))
            return None

        self._set_state(Loading())
        self._collector = self.launch(self._collect(term))
        return self._collector

    async def _collect(self, term: str):
        live = self.service.get_movies_by_actor_name(term)
        try:
            await asyncio.wait_for(self._follow(live), self.live_for)
        except asyncio.TimeoutError:
            logger.debug(f"Live actor search for '{term}' expired")
        except Exception as e:
            logger.warning(f"Actor search for '{term}' failed: {e}")
            self._set_state(Error(error_message(e)))
        finally:
            live.close()

    async def _follow(self, live):
        last_key = None
        async for movies in live:
            key = _result_key(movies)
            if key == last_key:
                continue
            last_key = key
            if movies:
                self._set_state(Success(movies))
            else:
                self._set_state(Error("No movies found with this actor"))
