"""Dispatcher implementations."""

from herald.conversation.dispatch import Dispatcher
from herald.conversation.dispatchers.inmemory import InMemoryDispatcher

__all__ = [
    "Dispatcher",
    "InMemoryDispatcher",
]
