import asyncio
from collections import OrderedDict
from functools import partial
from html import escape
from typing import Dict, List, Optional, Tuple
from aiogram import Bot
from aiogram.types import InlineKeyboardMarkup, InlineKeyboardButton
from moviefinder.models.movie import Movie
from moviefinder.schemas import MovieResponse, SearchResult
from moviefinder.services.movie_service import MovieService
from moviefinder.viewmodels import (
    AddMoviesViewModel,
    Error,
    Initial,
    Loading,
    MainViewModel,
    SaveSuccess,
    SearchActorsViewModel,
    SearchMoviesByTitleViewModel,
    SearchMoviesViewModel,
    Success,
    UiState,
    ViewModel,
)
from moviefinder.logger import get_logger

logger = get_logger()

MAIN = "main"
ADD_MOVIES = "add_movies"
SEARCH_MOVIES = "search_movies"
SEARCH_TITLES = "search_titles"
SEARCH_ACTORS = "search_actors"

SCREENS = {
    MAIN: MainViewModel,
    ADD_MOVIES: AddMoviesViewModel,
    SEARCH_MOVIES: SearchMoviesViewModel,
    SEARCH_TITLES: SearchMoviesByTitleViewModel,
    SEARCH_ACTORS: SearchActorsViewModel,
}

SAVE_CALLBACK = "save_movie"
RETRY_PREFIX = "retry_"

# Screens whose results follow later writes
LIVE_SCREENS = {SEARCH_ACTORS}

# Chats kept in memory before the least recently used is closed
MAX_CHATS = 1000

LOADING_TEXT = {
    ADD_MOVIES: "⏳ Adding movies to database...",
    SEARCH_MOVIES: "⏳ Looking up the movie...",
    SEARCH_TITLES: "⏳ Searching OMDb...",
    SEARCH_ACTORS: "⏳ Searching saved movies...",
}


def _format_movie_details(movie) -> str:
    """Formats a saved Movie or an OMDb MovieResponse for display."""
    text = f"🎬 <b>{escape(movie.title)}</b>"
    if movie.year:
        text += f" ({escape(movie.year)})"
    text += "\n\n"
    for label, value in (
        ("⭐ Rated", movie.rated),
        ("📅 Released", movie.released),
        ("⏱ Runtime", movie.runtime),
        ("🎭 Genre", movie.genre),
        ("🎬 Director", movie.director),
        ("✍️ Writer", movie.writer),
        ("👥 Actors", movie.actors),
    ):
        if value:
            text += f"<b>{label}:</b> {escape(value)}\n"
    if movie.plot:
        plot = movie.plot[:300] + "..." if len(movie.plot) > 300 else movie.plot
        text += f"\n📝 <b>Plot:</b>\n{escape(plot)}\n"
    return text


def _format_search_results(results: List[SearchResult]) -> str:
    lines = [f"• {escape(r.title)} ({escape(r.year)}) [{escape(r.type)}]" for r in results]
    return f"🔎 Found {len(results)} result(s):\n\n" + "\n".join(lines)


def _format_movie_list(movies: List[Movie]) -> str:
    lines = [f"• <b>{escape(m.title)}</b> ({escape(m.year)}): {escape(m.actors)}" for m in movies]
    return f"🎞 {len(movies)} saved movie(s):\n\n" + "\n".join(lines)


def _keyboard(screen: str, with_save: bool = False) -> InlineKeyboardMarkup:
    buttons = []
    if with_save:
        buttons.append([InlineKeyboardButton(text="💾 Save to Database", callback_data=SAVE_CALLBACK)])
    buttons.append([InlineKeyboardButton(text="🔁 Retry", callback_data=f"{RETRY_PREFIX}{screen}")])
    return InlineKeyboardMarkup(inline_keyboard=buttons)


def render_state(screen: str, state: UiState) -> Tuple[Optional[str], Optional[InlineKeyboardMarkup]]:
    """Maps a screen state to (text, keyboard); (None, None) means nothing to send."""
    if isinstance(state, Initial):
        return None, None
    if isinstance(state, Loading):
        return LOADING_TEXT.get(screen), None
    if isinstance(state, Error):
        return f"❌ {escape(state.message)}", _keyboard(screen)
    if isinstance(state, SaveSuccess):
        return f"✅ The movie '{escape(state.payload.title)}' was saved to the database.", _keyboard(screen)
    if isinstance(state, Success):
        payload = state.payload
        if screen == SEARCH_MOVIES:
            return _format_movie_details(payload), _keyboard(screen, with_save=True)
        if screen == SEARCH_TITLES:
            return _format_search_results(payload), _keyboard(screen)
        if screen == SEARCH_ACTORS:
            return _format_movie_list(payload), _keyboard(screen)
        if screen == ADD_MOVIES:
            if payload:
                return "✅ Predefined movies were added to the database.", _keyboard(screen)
            return "ℹ️ Predefined movies are already in the database.", _keyboard(screen)
        return None, None
    raise TypeError(f"Unhandled screen state: {state!r}")


class ScreenRegistry:
    """
    One set of view models per chat, each rendered into that chat.

    At most `max_chats` chats are kept; the least recently used one is closed
    when a new chat arrives. Sends to one chat go out in order. On live
    screens the results of a running search edit the message sent for its
    Loading state instead of posting new ones.
    """

    def __init__(self, bot: Bot, service: MovieService, max_chats: int = MAX_CHATS):
        self.bot = bot
        self.service = service
        self.max_chats = max_chats
        self._screens: "OrderedDict[int, Dict[str, ViewModel]]" = OrderedDict()
        self._messages: Dict[Tuple[int, str], int] = {}
        self._last_send: Dict[int, asyncio.Task] = {}
        self._pending = set()

    def get(self, chat_id: int, screen: str) -> ViewModel:
        chat_screens = self._screens.get(chat_id)
        if chat_screens is None:
            chat_screens = self._screens[chat_id] = {}
            self._evict()
        else:
            self._screens.move_to_end(chat_id)

        view_model = chat_screens.get(screen)
        if view_model is None:
            view_model = SCREENS[screen](self.service)
            if screen != MAIN:
                view_model.observe(partial(self._render, chat_id, screen))
            chat_screens[screen] = view_model
        return view_model

    def open(self, chat_id: int, screen: str) -> ViewModel:
        """get() for a new command: any other live search in the chat stops following writes."""
        for name, view_model in self._screens.get(chat_id, {}).items():
            if name != screen and isinstance(view_model, SearchActorsViewModel):
                view_model.stop()
        return self.get(chat_id, screen)

    def chat_count(self) -> int:
        return len(self._screens)

    def close_chat(self, chat_id: int):
        for view_model in self._screens.pop(chat_id, {}).values():
            view_model.close()
        for key in [key for key in self._messages if key[0] == chat_id]:
            del self._messages[key]

    def close_all(self):
        for chat_id in list(self._screens):
            self.close_chat(chat_id)

    def _evict(self):
        while len(self._screens) > self.max_chats:
            oldest = next(iter(self._screens))
            logger.debug(f"Closing screens of idle chat {oldest}")
            self.close_chat(oldest)

    def _is_live(self, chat_id: int, screen: str) -> bool:
        view_model = self._screens.get(chat_id, {}).get(screen)
        return isinstance(view_model, SearchActorsViewModel) and view_model.is_live

    def _render(self, chat_id: int, screen: str, state: UiState):
        text, keyboard = render_state(screen, state)
        if text is None:
            return
        photo = None
        if isinstance(state, Success) and isinstance(state.payload, MovieResponse):
            poster = state.payload.poster
            photo = poster if poster.startswith("http") else None
        edit = screen in LIVE_SCREENS and not isinstance(state, Loading) and self._is_live(chat_id, screen)

        previous = self._last_send.get(chat_id)
        task = asyncio.create_task(self._send(chat_id, screen, text, keyboard, photo, edit, previous))
        self._last_send[chat_id] = task
        self._pending.add(task)
        task.add_done_callback(partial(self._send_done, chat_id))

    def _send_done(self, chat_id: int, task: asyncio.Task):
        self._pending.discard(task)
        if self._last_send.get(chat_id) is task:
            del self._last_send[chat_id]

    async def _send(self, chat_id: int, screen: str, text: str, keyboard,
                    photo: Optional[str] = None, edit: bool = False,
                    previous: Optional[asyncio.Task] = None):
        if previous is not None:
            await asyncio.wait([previous])
        try:
            message_id = self._messages.get((chat_id, screen)) if edit else None
            if message_id is not None:
                await self.bot.edit_message_text(
                    text=text, chat_id=chat_id, message_id=message_id, reply_markup=keyboard
                )
                return

            # Telegram captions are limited to 1024 characters
            if photo and len(text) <= 1024:
                message = await self.bot.send_photo(chat_id=chat_id, photo=photo, caption=text, reply_markup=keyboard)
            else:
                message = await self.bot.send_message(chat_id=chat_id, text=text, reply_markup=keyboard)
            if screen in LIVE_SCREENS:
                self._messages[(chat_id, screen)] = message.message_id
        except Exception as e:
            logger.error(f"Error rendering screen state to chat {chat_id}: {e}", exc_info=True)
