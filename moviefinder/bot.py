from typing import Optional
from aiogram import Bot, Dispatcher
from aiogram.client.default import DefaultBotProperties
from aiogram.client.session.aiohttp import AiohttpSession
from aiogram.client.telegram import TelegramAPIServer
from aiogram.enums import ParseMode
from moviefinder.config import BOT_TOKEN, TELEGRAM_API_SERVER
from moviefinder.routers import commands_router, callbacks_router, messages_router


def create_bot(token: Optional[str] = BOT_TOKEN, api_server: Optional[str] = TELEGRAM_API_SERVER) -> Bot:
    """Builds the Bot instance; raises if no token is configured."""
    if not token:
        raise ValueError("BOT_TOKEN must be set")

    session = None
    if api_server:
        session = AiohttpSession(api=TelegramAPIServer.from_base(api_server))
    return Bot(token=token, default=DefaultBotProperties(parse_mode=ParseMode.HTML), session=session)


def create_dispatcher(**workflow_data) -> Dispatcher:
    """Dispatcher with all routers; workflow_data is injected into handlers by name."""
    dp = Dispatcher(**workflow_data)
    dp.include_router(commands_router)
    dp.include_router(callbacks_router)
    # Catch-all text handler goes last
    dp.include_router(messages_router)
    return dp
