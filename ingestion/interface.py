"""Abstract interface for message sources.

Implement this to swap between Telegram polling, a Telegram webhook or any
other channel that delivers report messages.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, Optional

from ingestion.models import InboundMessage

# Takes one inbound message, returns the reply to send back (or None)
InboundHandler = Callable[[InboundMessage], Optional[str]]


class MessageSource(ABC):
    """Base class for all message ingestion backends."""

    @abstractmethod
    def run(self, handler: InboundHandler) -> None:
        """Deliver every inbound text message to handler until stopped."""
        ...
