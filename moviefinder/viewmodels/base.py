import asyncio
from typing import Callable, Coroutine, List, Optional, Set
from moviefinder.viewmodels.ui_state import Initial, UiState
from moviefinder.logger import get_logger

logger = get_logger()

StateObserver = Callable[[UiState], None]


class ViewModel:
    """
    Holds one screen's state and runs its logical tasks.

    Observers are called synchronously on every transition. close() cancels
    running tasks; writes they already committed stay committed.
    """

    def __init__(self):
        self._state: UiState = Initial()
        self._observers: List[StateObserver] = []
        self._tasks: Set[asyncio.Task] = set()
        self._last_action: Optional[Callable[[], Optional[asyncio.Task]]] = None

    @property
    def state(self) -> UiState:
        return self._state

    def observe(self, callback: StateObserver) -> Callable[[], None]:
        """Registers `callback` for state changes and returns an unsubscribe function."""
        self._observers.append(callback)

        def unsubscribe():
            if callback in self._observers:
                self._observers.remove(callback)
        return unsubscribe

    def _set_state(self, state: UiState):
        self._state = state
        for callback in list(self._observers):
            callback(state)

    def launch(self, coro: Coroutine) -> asyncio.Task:
        task = asyncio.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def _remember(self, action: Callable[[], Optional[asyncio.Task]]) -> Optional[asyncio.Task]:
        self._last_action = action
        return action()

    def retry(self) -> Optional[asyncio.Task]:
        """Re-runs the last action with the input it was first given."""
        if self._last_action is None:
            return None
        return self._last_action()

    def close(self):
        for task in list(self._tasks):
            task.cancel()
        self._observers.clear()
