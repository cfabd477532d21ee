"""SormBot: a Telegram question/answer bot that can be taught new answers."""

from .core.config import VERSION

__version__ = VERSION
