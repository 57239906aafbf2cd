"""Operator notifications -- Telegram delivery, message formatting and redaction."""

from portfolio_bot.notifications.base import Notifier, NullNotifier, best_effort
from portfolio_bot.notifications.redaction import Redactor
from portfolio_bot.notifications.telegram import TelegramNotifier

__all__ = ["Notifier", "NullNotifier", "Redactor", "TelegramNotifier", "best_effort"]
