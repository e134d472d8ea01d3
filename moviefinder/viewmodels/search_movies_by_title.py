from typing import Optional
import asyncio
from moviefinder.services.movie_service import MovieService
from moviefinder.viewmodels.base import ViewModel
from moviefinder.viewmodels.ui_state import Error, Loading, Success, error_message
from moviefinder.logger import get_logger

logger = get_logger()


class SearchMoviesByTitleViewModel(ViewModel):
    """Free-text OMDb search; Success carries a list of SearchResult."""

    def __init__(self, service: MovieService):
        super().__init__()
        self.service = service
        self.search_term = ""

    def update_search_term(self, term: str):
        self.search_term = term

    def search_movies_by_title(self) -> Optional[asyncio.Task]:
        term = self.search_term
        return self._remember(lambda: self._start_search(term))

    def _start_search(self, term: str) -> Optional[asyncio.Task]:
        if not term.strip():
            self._set_state(Error("Please enter a search term"))
            return None
        self._set_state(Loading())
        return self.launch(self._search(term))

    async def _search(self, term: str):
        try:
            response = await self.service.search_movies(term)
        except Exception as e:
            logger.warning(f"OMDb search for '{term}' failed: {e}")
            self._set_state(Error(error_message(e)))
            return

        if response.is_success:
            self._set_state(Success(response.search))
        else:
            self._set_state(Error("No movies found with this title"))
