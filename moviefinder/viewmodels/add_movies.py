from typing import Optional
import asyncio
from moviefinder.services.movie_service import MovieService
from moviefinder.viewmodels.base import ViewModel
from moviefinder.viewmodels.ui_state import Error, Loading, Success, error_message
from moviefinder.logger import get_logger

logger = get_logger()


class AddMoviesViewModel(ViewModel):
    def __init__(self, service: MovieService):
        super().__init__()
        self.service = service

    def add_predefined_movies(self) -> Optional[asyncio.Task]:
        return self._remember(self._start)

    def _start(self) -> asyncio.Task:
        self._set_state(Loading())
        return self.launch(self._add())

    async def _add(self):
        try:
            seeded = await self.service.add_predefined_movies_if_not_exists()
        except Exception as e:
            logger.error(f"❌ Adding predefined movies failed: {e}", exc_info=True)
            self._set_state(Error(error_message(e)))
            return
        # payload: False when the seed was already present
        self._set_state(Success(seeded))
