"""Inline keyboards shown under the bot's messages."""