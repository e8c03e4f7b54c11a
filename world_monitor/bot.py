"""Telegram bot wiring: startup sequence, /healthcheck and shutdown."""

from __future__ import annotations

import time
from typing import Any

import structlog
from telegram import BotCommand, Update
from telegram.constants import ParseMode
from telegram.error import TelegramError
from telegram.ext import Application, CommandHandler, ContextTypes

from .config import MonitorConfig
from .extraction import KeywordAdjacencyExtractor, StatusExtractor
from .fetcher import StatusPageFetcher
from .health import HealthReporter
from .models import MonitorStateStore
from .notifications import TelegramNotifier, format_health_report
from .poller import PageFetcher, PollLoop

logger = structlog.get_logger(__name__)

HEALTHCHECK_COMMAND = "healthcheck"


class MonitorBot:
    """Owns the shared state and connects the poll loop to Telegram."""

    def __init__(
        self,
        config: MonitorConfig,
        *,
        fetcher: PageFetcher | None = None,
        extractor: StatusExtractor | None = None,
        started_at: float | None = None,
    ):
        self.config = config
        self.store = MonitorStateStore()
        self.fetcher = fetcher or StatusPageFetcher(
            config.status_url,
            timeout_seconds=config.fetch_timeout_seconds,
            user_agent=config.user_agent,
        )
        self.extractor = extractor or KeywordAdjacencyExtractor()
        self.reporter = HealthReporter(
            self.store,
            world_name=config.world_name,
            interval_minutes=config.check_interval_minutes,
            mode=config.mode,
            started_at=time.monotonic() if started_at is None else started_at,
        )
        self.notifier: TelegramNotifier | None = None
        self.poll_loop: PollLoop | None = None

    def build_application(self) -> Application:
        application = (
            Application.builder()
            .token(self.config.bot_token)
            .post_init(self.on_startup)
            .post_stop(self.on_stop)
            .post_shutdown(self.on_shutdown)
            .build()
        )
        application.add_handler(CommandHandler(HEALTHCHECK_COMMAND, self.healthcheck))
        application.add_error_handler(self.on_error)
        return application

    def run(self) -> None:
        """Connect to Telegram and block until interrupted."""
        application = self.build_application()
        application.run_polling(allowed_updates=Update.ALL_TYPES)

    async def on_startup(self, application: Application) -> None:
        await self.start_monitoring(application.bot)

    async def on_stop(self, application: Application) -> None:
        self.stop_monitoring()

    async def on_shutdown(self, application: Application) -> None:
        await self.shutdown()

    async def start_monitoring(self, bot: Any) -> bool:
        """Verify the bot identity, register commands, announce and start polling.

        Returns False (and leaves the poll loop stopped) when the identity
        check or the startup announcement fails.
        """
        try:
            me = await bot.get_me()
        except TelegramError as e:
            logger.error("Could not fetch bot identity", error=str(e))
            return False

        if me.id != self.config.client_id:
            logger.error(
                "Bot identity does not match TELEGRAM_CLIENT_ID, not starting monitoring",
                bot_id=me.id,
                client_id=self.config.client_id,
            )
            return False
        logger.info("Bot logged in", username=me.username)

        try:
            await bot.set_my_commands(
                [BotCommand(HEALTHCHECK_COMMAND, f"Show {self.config.world_name} monitor status")]
            )
        except TelegramError as e:
            logger.warning("Failed to register bot commands", error=str(e))

        self.notifier = TelegramNotifier(
            bot,
            self.config.chat_id,
            world_name=self.config.world_name,
            mention_id=self.config.mention_id,
        )
        announced = await self.notifier.send_startup_announcement(
            self.config.check_interval_minutes, self.config.mode
        )
        if not announced:
            logger.error("Startup announcement failed, not starting monitoring", chat_id=self.config.chat_id)
            return False
        logger.info("Connected to chat", chat_id=self.config.chat_id)

        self.poll_loop = PollLoop(
            store=self.store,
            fetcher=self.fetcher,
            extractor=self.extractor,
            notifier=self.notifier,
            world_name=self.config.world_name,
            mode=self.config.mode,
            interval_minutes=self.config.check_interval_minutes,
        )
        self.poll_loop.start()
        return True

    def stop_monitoring(self) -> None:
        """Stop scheduling ticks while the bot is still connected."""
        if self.poll_loop is not None:
            self.poll_loop.stop()

    async def shutdown(self) -> None:
        self.stop_monitoring()
        aclose = getattr(self.fetcher, "aclose", None)
        if aclose is not None:
            await aclose()
        logger.info("World monitor stopped")

    async def healthcheck(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        """Reply to /healthcheck with the current monitor state."""
        report = self.reporter.report()
        message = update.effective_message
        if message is None:
            return
        try:
            await message.reply_text(format_health_report(report), parse_mode=ParseMode.MARKDOWN)
        except TelegramError as e:
            logger.error("Failed to send health check reply", error=str(e))
            return
        logger.info("Health check answered", tier=report.tier.value)

    async def on_error(self, update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
        logger.error("Telegram handler error", error=str(context.error))
