from html import escape
from aiogram import Router
from aiogram.filters import Command, CommandObject, CommandStart
from aiogram.types import Message
from moviefinder.routers.screens import (
    ADD_MOVIES,
    MAIN,
    SEARCH_ACTORS,
    SEARCH_MOVIES,
    SEARCH_TITLES,
    ScreenRegistry,
)
from moviefinder.services.movie_service import MovieService
from moviefinder.viewmodels import Error
from moviefinder.logger import get_logger

router = Router(name="commands")
logger = get_logger()

HELP_TEXT = (
    "Available commands:\n"
    "/movie &lt;title&gt; - Look up a movie on OMDb and save it\n"
    "/search &lt;term&gt; - Search OMDb by title\n"
    "/actor &lt;name&gt; - Find saved movies with an actor\n"
    "/add_movies - Add the predefined movies\n"
    "/stats - Show how many movies are saved\n"
    "/cleanup - Remove duplicate movies\n"
    "/help - Show this help message\n\n"
    "You can also just send me a movie title!"
)


@router.message(CommandStart())
async def cmd_start(message: Message, screens: ScreenRegistry):
    """Handles the /start command."""
    screens.open(message.chat.id, MAIN).start()
    await message.answer("👋 Welcome to MovieFinder! Type /help for guidance.")


@router.message(Command("help"))
async def cmd_help(message: Message):
    """Handles the /help command."""
    await message.answer(HELP_TEXT)


@router.message(Command("stats"))
async def cmd_stats(message: Message, screens: ScreenRegistry):
    """Shows the number of saved movies."""
    main_screen = screens.open(message.chat.id, MAIN)
    main_screen.start()
    await main_screen.ready.wait()
    if isinstance(main_screen.state, Error):
        await message.answer(f"❌ {escape(main_screen.state.message)}")
        return
    await message.answer(f"📚 Movies in database: {main_screen.movie_count}")


@router.message(Command("add_movies"))
async def cmd_add_movies(message: Message, screens: ScreenRegistry):
    """Adds the predefined movies unless they are already present."""
    screens.open(message.chat.id, ADD_MOVIES).add_predefined_movies()


@router.message(Command("movie"))
async def cmd_movie(message: Message, command: CommandObject, screens: ScreenRegistry):
    """Looks up a single movie by title."""
    screen = screens.open(message.chat.id, SEARCH_MOVIES)
    screen.update_search_title(command.args or "")
    screen.search_movie()


@router.message(Command("search"))
async def cmd_search(message: Message, command: CommandObject, screens: ScreenRegistry):
    """Searches OMDb for titles containing the term."""
    screen = screens.open(message.chat.id, SEARCH_TITLES)
    screen.update_search_term(command.args or "")
    screen.search_movies_by_title()


@router.message(Command("actor"))
async def cmd_actor(message: Message, command: CommandObject, screens: ScreenRegistry):
    """Finds saved movies featuring an actor."""
    screen = screens.open(message.chat.id, SEARCH_ACTORS)
    screen.update_search_term(command.args or "")
    screen.search_actors()


@router.message(Command("cleanup"))
async def cmd_cleanup(message: Message, movie_service: MovieService):
    """Runs the duplicate-movie cleanup on demand."""
    try:
        removed = await movie_service.remove_duplicate_movies()
    except Exception as e:
        logger.error(f"Error removing duplicate movies: {e}", exc_info=True)
        await message.answer("❌ An error occurred while removing duplicates.")
        return
    await message.answer(f"🧹 Removed {removed} duplicate movie(s).")
