from typing import Optional
import asyncio
from moviefinder.services.movie_service import MovieService
from moviefinder.viewmodels.base import ViewModel
from moviefinder.viewmodels.ui_state import Error, Success, error_message
from moviefinder.logger import get_logger

logger = get_logger()


class MainViewModel(ViewModel):
    """Tracks how many movies are saved; Success carries the count."""

    def __init__(self, service: MovieService):
        super().__init__()
        self.service = service
        self.movie_count = 0
        # Set once the first count has been loaded
        self.ready = asyncio.Event()
        self._collector: Optional[asyncio.Task] = None

    def start(self) -> asyncio.Task:
        if self._collector is None or self._collector.done():
            self._collector = self.launch(self._load_movie_count())
        return self._collector

    async def _load_movie_count(self):
        live = self.service.get_all_movies()
        try:
            async for movies in live:
                if self.state == Success(len(movies)):
                    continue
                self.movie_count = len(movies)
                self.ready.set()
                self._set_state(Success(self.movie_count))
        except Exception as e:
            logger.error(f"❌ Counting movies failed: {e}", exc_info=True)
            self._set_state(Error(error_message(e)))
            self.ready.set()
        finally:
            live.close()
