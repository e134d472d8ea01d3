from typing import Optional
import asyncio
from moviefinder.schemas import MovieResponse
from moviefinder.services.movie_service import MovieService
from moviefinder.viewmodels.base import ViewModel
from moviefinder.viewmodels.ui_state import Error, Loading, SaveSuccess, Success, error_message
from moviefinder.logger import get_logger

logger = get_logger()


class SearchMoviesViewModel(ViewModel):
    """Looks up one movie on OMDb by title and saves it on request."""

    def __init__(self, service: MovieService):
        super().__init__()
        self.service = service
        self.search_title = ""

    def update_search_title(self, title: str):
        self.search_title = title

    def search_movie(self) -> Optional[asyncio.Task]:
        title = self.search_title
        return self._remember(lambda: self._start_search(title))

    def _start_search(self, title: str) -> Optional[asyncio.Task]:
        if not title.strip():
            self._set_state(Error("Please enter a movie title"))
            return None
        self._set_state(Loading())
        return self.launch(self._search(title))

    async def _search(self, title: str):
        try:
            movie = await self.service.fetch_movie_by_title(title)
        except Exception as e:
            logger.warning(f"Movie lookup for '{title}' failed: {e}")
            self._set_state(Error(error_message(e)))
            return

        if movie.is_success:
            self._set_state(Success(movie))
        else:
            self._set_state(Error("Movie not found"))

    def save_movie_to_database(self) -> Optional[asyncio.Task]:
        """Saves the movie currently shown; ignored unless a lookup succeeded."""
        state = self.state
        if not isinstance(state, Success):
            return None
        movie = state.payload
        return self._remember(lambda: self.launch(self._save(movie)))

    async def _save(self, movie: MovieResponse):
        try:
            await self.service.save_movie_from_response(movie)
        except Exception as e:
            logger.error(f"❌ Saving '{movie.title}' failed: {e}", exc_info=True)
            self._set_state(Error(error_message(e, "Failed to save movie")))
            return
        self._set_state(SaveSuccess(movie))
