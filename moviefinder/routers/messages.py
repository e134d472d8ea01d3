from aiogram import Router, F
from aiogram.types import Message
from moviefinder.routers.screens import SEARCH_MOVIES, ScreenRegistry
from moviefinder.logger import get_logger

router = Router(name="messages")
logger = get_logger()


@router.message(F.text & ~F.text.startswith("/"))
async def handle_text_message(message: Message, screens: ScreenRegistry):
    """Plain text is treated as a movie title to look up."""
    screen = screens.open(message.chat.id, SEARCH_MOVIES)
    screen.update_search_title(message.text)
    screen.search_movie()


@router.message(F.text.startswith("/"))
async def handle_unknown_command(message: Message):
    await message.reply("Unknown command. Type /help for the list of commands.")
