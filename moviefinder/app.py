import asyncio
import logging
from aiogram import Bot
from aiogram.types import BotCommand
from moviefinder.bot import create_bot, create_dispatcher
from moviefinder.config import DATABASE_URL, ERROR_CHANNEL_ID
from moviefinder.models import create_engine_and_sessions, init_models
from moviefinder.routers.screens import ScreenRegistry
from moviefinder.services import MovieService, MovieStore, OmdbClient
from moviefinder.logger import attach_telegram_handler, get_logger

# Get logger
logger = get_logger()


async def set_commands(bot: Bot):
    """Set bot commands in the menu"""
    commands = [
        BotCommand(command="start", description="Start the bot"),
        BotCommand(command="help", description="Show help"),
        BotCommand(command="movie", description="Look up a movie by title"),
        BotCommand(command="search", description="Search OMDb"),
        BotCommand(command="actor", description="Find saved movies by actor"),
        BotCommand(command="add_movies", description="Add predefined movies"),
        BotCommand(command="stats", description="Show saved movie count"),
        BotCommand(command="cleanup", description="Remove duplicate movies"),
    ]
    await bot.set_my_commands(commands)


async def remove_duplicates_on_startup(service: MovieService) -> int:
    """Startup maintenance; runs alongside normal request handling."""
    try:
        return await service.remove_duplicate_movies()
    except Exception as e:
        logger.error(f"Duplicate cleanup failed: {e}", exc_info=True)
        return 0


async def main():
    """Main function"""
    logging.basicConfig(level=logging.INFO)
    logger.info("Starting MovieFinder...")

    engine, session_factory = create_engine_and_sessions(DATABASE_URL)
    await init_models(engine)

    service = MovieService(MovieStore(session_factory), OmdbClient())
    bot = create_bot()
    if ERROR_CHANNEL_ID:
        attach_telegram_handler(bot, ERROR_CHANNEL_ID)

    screens = ScreenRegistry(bot, service)
    dp = create_dispatcher(movie_service=service, screens=screens)
    cleanup_task = asyncio.create_task(remove_duplicates_on_startup(service))

    try:
        await set_commands(bot)
        logger.info("Bot is running...")
        await dp.start_polling(bot)
    except Exception as e:
        logger.error(f"Critical error: {e}", exc_info=True)
    finally:
        cleanup_task.cancel()
        screens.close_all()
        await bot.session.close()
        await engine.dispose()
        logger.info("Bot stopped")


def run():
    asyncio.run(main())


if __name__ == "__main__":
    run()
