"""Outbound chat notifications."""

from .telegram_bot import TelegramNotifier, format_health_report

__all__ = ["TelegramNotifier", "format_health_report"]
