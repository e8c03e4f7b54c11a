"""Telegram notification system for world status alerts."""

from datetime import datetime, timedelta, timezone
from typing import Any

import structlog

from telegram.constants import ParseMode
from telegram.error import TelegramError

from ..models import HealthReport, Mode, NotificationKind, Tier

logger = structlog.get_logger(__name__)

FOOTER_TEXT = "FFXIV Server Monitor"


class TelegramNotifier:
    """Formats and sends world status messages to one Telegram chat."""

    def __init__(
        self,
        bot: Any,
        chat_id: str,
        *,
        world_name: str = "Behemoth",
        mention_id: int | None = None,
    ):
        """Initialize Telegram notifier.

        Args:
            bot: telegram.Bot (or anything with a compatible async send_message)
            chat_id: Chat that receives notifications
            world_name: World shown in message titles
            mention_id: Optional user id mentioned in alerts
        """
        self.bot = bot
        self.chat_id = chat_id
        self.world_name = world_name
        self.mention_id = mention_id

    async def send_status_update(
        self,
        tier: Tier,
        available: bool,
        kind: NotificationKind,
        *,
        mention: bool = False,
        mode: Mode = Mode.STANDARD,
    ) -> bool:
        """Send a tier notification.

        Returns:
            True if sent successfully
        """
        message = self.format_status_update(tier, available, kind, mention=mention, mode=mode)
        sent = await self._send_message(message)
        if sent:
            logger.info("Status update sent", tier=tier.value, kind=kind.value, mode=mode.value)
        return sent

    async def send_startup_announcement(self, interval_minutes: float, mode: Mode) -> bool:
        """Announce that monitoring has started.

        Returns:
            True if sent successfully
        """
        return await self._send_message(self.format_startup_announcement(interval_minutes, mode))

    def format_status_update(
        self,
        tier: Tier,
        available: bool,
        kind: NotificationKind,
        *,
        mention: bool = False,
        mode: Mode = Mode.STANDARD,
        now: datetime | None = None,
    ) -> str:
        """Format a tier notification for Telegram."""
        now = now or datetime.now(timezone.utc)

        if available:
            title = f"✅ *{self.world_name} Server - Character Creation Available!*"
        else:
            title = f"❌ *{self.world_name} Server - Character Creation Unavailable*"
        if mode == Mode.DEV:
            label = "Status change" if kind == NotificationKind.STATE_CHANGE else "Periodic check"
            title = f"🛠 DEV MODE • {label}\n{title}"

        lines = [title, "", f"Server Status: *{tier.value}*", ""]

        if available:
            lines.append("🎉 *Good News!*")
            lines.append(f"You can now create new characters on {self.world_name} server!")
        else:
            lines.append("*Status*")
            lines.append(
                "Character creation is currently unavailable. "
                "The bot will notify when it becomes available."
            )

        mention_text = self._format_mention() if mention else ""
        if mention_text:
            lines.append("")
            lines.append(mention_text)

        lines.append("")
        lines.append(f"_{FOOTER_TEXT} • {now.strftime('%Y-%m-%d %H:%M:%S UTC')}_")
        return "\n".join(lines)

    def format_startup_announcement(self, interval_minutes: float, mode: Mode) -> str:
        """Format the message sent once monitoring starts."""
        lines = [
            "🔔 *FFXIV Server Monitor started*",
            "",
            f"• World: *{self.world_name}*",
            f"• Check interval: every {_format_minutes(interval_minutes)}",
            f"• Mode: {'Dev (notifies on every check)' if mode == Mode.DEV else 'Standard (notifies when character creation opens)'}",
            "",
            "Use /healthcheck to see the latest status.",
        ]
        return "\n".join(lines)

    def _format_mention(self) -> str:
        if self.mention_id is None:
            return ""
        return f"[🔔 Heads up](tg://user?id={self.mention_id})"

    async def _send_message(self, message: str) -> bool:
        """Send message via Telegram.

        Returns:
            True if sent successfully
        """
        if not self.bot or not self.chat_id:
            logger.warning("Telegram not configured, skipping notification")
            return False

        try:
            await self.bot.send_message(
                chat_id=self.chat_id,
                text=message,
                parse_mode=ParseMode.MARKDOWN,
                disable_web_page_preview=True,
            )
            return True

        except TelegramError as e:
            logger.error("Failed to send Telegram notification", error=str(e))
            return False
        except Exception as e:
            logger.error("Unexpected error sending Telegram notification", error=str(e))
            return False


def format_health_report(report: HealthReport) -> str:
    """Format a health check reply."""
    status_emoji = "✅" if report.is_available else "❌"
    if report.last_checked_at is None:
        last_checked = "never"
    else:
        last_checked = report.last_checked_at.astimezone(timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")

    lines = [
        f"🏥 *{report.world_name} Monitor Health*",
        "",
        f"• Status: {status_emoji} *{report.tier.value}*",
        f"• Character creation: {'available' if report.is_available else 'unavailable'}",
        f"• Last check: {last_checked}",
        f"• Uptime: {format_uptime(report.uptime)}",
        f"• Check interval: every {_format_minutes(report.interval_minutes)}",
        f"• Mode: {'Dev' if report.mode == Mode.DEV else 'Standard'}",
    ]
    return "\n".join(lines)


def format_uptime(uptime: timedelta) -> str:
    total = max(0, int(uptime.total_seconds()))
    days, rem = divmod(total, 86400)
    hours, rem = divmod(rem, 3600)
    minutes, seconds = divmod(rem, 60)
    parts = []
    if days:
        parts.append(f"{days}d")
    if days or hours:
        parts.append(f"{hours}h")
    if days or hours or minutes:
        parts.append(f"{minutes}m")
    parts.append(f"{seconds}s")
    return " ".join(parts)


def _format_minutes(minutes: float) -> str:
    value = int(minutes) if float(minutes).is_integer() else round(minutes, 2)
    return f"{value} minute{'s' if value != 1 else ''}"
