"""
moviefinder
~~~~~~~~~~~

Browse OMDb movie metadata and keep it in a local SQLite cache, served
through a Telegram bot.
"""

__version__ = "1.0.0"
