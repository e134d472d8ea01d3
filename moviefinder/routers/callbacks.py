from aiogram import Router, F
from aiogram.types import CallbackQuery
from moviefinder.routers.screens import RETRY_PREFIX, SAVE_CALLBACK, SCREENS, SEARCH_MOVIES, ScreenRegistry
from moviefinder.logger import get_logger

router = Router(name="callbacks")
logger = get_logger()


@router.callback_query(F.data == SAVE_CALLBACK)
async def save_movie_callback(callback: CallbackQuery, screens: ScreenRegistry):
    """Saves the movie currently shown on the lookup screen."""
    screen = screens.get(callback.message.chat.id, SEARCH_MOVIES)
    task = screen.save_movie_to_database()
    if task is None:
        await callback.answer("❌ There is no movie to save. Look one up first.", show_alert=True)
        return
    await callback.answer("⏳ Saving...")


@router.callback_query(F.data.startswith(RETRY_PREFIX))
async def retry_callback(callback: CallbackQuery, screens: ScreenRegistry):
    """Re-runs the last action of the screen named in the callback data."""
    screen_name = callback.data.replace(RETRY_PREFIX, "", 1)
    if screen_name not in SCREENS:
        logger.warning(f"Retry for unknown screen '{screen_name}'")
        await callback.answer("❌ This request has expired.", show_alert=True)
        return

    screens.get(callback.message.chat.id, screen_name).retry()
    await callback.answer("🔁 Retrying...")
