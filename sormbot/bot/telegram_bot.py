"""
Telegram transport for SormBot.

Commands:
    /help, /start   usage text
    /stats          learned entries, interactions and top questions
Any other text message is either a `!teach question | answer` command or a
question to answer.
"""

import asyncio
from typing import Optional

from telegram import Update
from telegram.error import TelegramError
from telegram.ext import (
    Application,
    CommandHandler,
    ContextTypes,
    MessageHandler,
    filters,
)

from ..core.context import BotContext
from ..core.dispatcher import Dispatcher
from ..core.errors import ConfigurationError, TransportError
from ..core.schema import Reply


class SormBot:
    """Telegram bot bound to one BotContext."""

    def __init__(self, context: BotContext, token: Optional[str] = None):
        self.context = context
        self.logger = context.logger
        self.dispatcher = Dispatcher(context)
        self.token = token or context.settings.telegram_bot_token

        if not self.token:
            raise ConfigurationError("TELEGRAM_BOT_TOKEN not set")

    async def deliver(self, update: Update, reply: Reply) -> None:
        """Send one reply, raising TransportError if the platform refuses it."""
        try:
            await update.effective_message.reply_text(reply.text, parse_mode=reply.parse_mode)
        except TelegramError as e:
            chat_id = update.effective_chat.id if update.effective_chat else None
            raise TransportError(f"Failed to deliver reply to chat {chat_id}: {e}") from e

    async def send_reply(self, update: Update, reply: Optional[Reply]) -> None:
        """Send one reply. Delivery failures are logged and not retried."""
        if reply is None or update.effective_message is None:
            return
        try:
            await self.deliver(update, reply)
        except TransportError as e:
            self.logger.error(str(e))

    async def help_command(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        """Handle /help and /start."""
        await self.send_reply(update, self.dispatcher.help())

    async def stats_command(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        """Handle /stats."""
        reply = await asyncio.to_thread(self.dispatcher.stats)
        await self.send_reply(update, reply)

    async def handle_text(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        """Handle a plain text message: teach or answer."""
        message = update.effective_message
        if message is None or not message.text:
            return

        user = update.effective_user
        user_id = user.id if user else None
        username = user.username if user else None

        reply = await asyncio.to_thread(self.dispatcher.handle_message, user_id, username, message.text)
        await self.send_reply(update, reply)

    async def on_error(self, update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
        """Log errors raised while polling or inside a handler, with traceback."""
        self.logger.error(f"Unhandled error while processing update: {context.error}", exc_info=context.error)

    def build_application(self) -> Application:
        """Build the Telegram application with handlers."""
        application = Application.builder().token(self.token).build()

        application.add_handler(CommandHandler(["help", "start"], self.help_command))
        application.add_handler(CommandHandler("stats", self.stats_command))
        application.add_handler(MessageHandler(filters.TEXT & ~filters.COMMAND, self.handle_text))
        application.add_error_handler(self.on_error)

        return application

    def run(self) -> None:
        """Run the bot using long-polling until a termination signal arrives."""
        application = self.build_application()
        self.logger.info("🤖 SormGPT is starting...")
        application.run_polling(allowed_updates=Update.ALL_TYPES)
        self.logger.info("Bot shutting down...")
