import logging
import asyncio
from html import escape
from aiogram import Bot
from moviefinder.config import LOG_LEVEL

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
# Telegram rejects messages longer than this
MAX_MESSAGE_LENGTH = 4096

logger = logging.getLogger('moviefinder')
logger.setLevel(LOG_LEVEL)

console_handler = logging.StreamHandler()
console_handler.setLevel(LOG_LEVEL)
console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
logger.addHandler(console_handler)
logger.propagate = False


class TelegramBotHandler(logging.Handler):
    """Sends formatted records to a Telegram chat from the running event loop."""

    def __init__(self, bot: Bot, channel_id: int):
        super().__init__()
        self.bot = bot
        self.channel_id = channel_id
        self._pending = set()

    def emit(self, record):
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No loop to deliver on (e.g. during shutdown)
            return
        text = self.build_message(self.format(record))
        task = loop.create_task(self._send_log_entry(text))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    @staticmethod
    def build_message(log_entry: str) -> str:
        header = "🔴 Error Log:\n\n"
        body = escape(log_entry)
        room = MAX_MESSAGE_LENGTH - len(header) - len("<pre></pre>")
        if len(body) > room:
            body = body[:room - 3] + "..."
        return f"{header}<pre>{body}</pre>"

    async def _send_log_entry(self, text: str):
        try:
            await self.bot.send_message(chat_id=self.channel_id, text=text)
        except Exception as e:
            # Logging here would recurse into this handler
            print(f"Failed to send log to Telegram: {e}")


def attach_telegram_handler(bot: Bot, channel_id: int) -> TelegramBotHandler:
    """Forward ERROR records to a Telegram channel."""
    telegram_handler = TelegramBotHandler(bot, channel_id)
    telegram_handler.setLevel(logging.ERROR)
    telegram_handler.setFormatter(logging.Formatter('%(levelname)s - %(asctime)s\n\n%(message)s'))
    logger.addHandler(telegram_handler)
    return telegram_handler


def get_logger():
    return logger
