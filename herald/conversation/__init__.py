"""Conversation content model and the dispatch seam to the host."""

from herald.conversation.dispatch import Dispatcher
from herald.conversation.dispatchers import InMemoryDispatcher

__all__ = ["Dispatcher", "InMemoryDispatcher"]
