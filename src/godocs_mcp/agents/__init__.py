"""Conversational agents built on the documentation tools"""

from .base import AIAgent, Message
from .go_docs_agent import (
    AGENT_DESCRIPTION,
    AGENT_KEY,
    AGENT_NAME,
    GoDocsAgent,
    create_go_docs_agent,
)

__all__ = [
    "AIAgent",
    "Message",
    "GoDocsAgent",
    "create_go_docs_agent",
    "AGENT_KEY",
    "AGENT_NAME",
    "AGENT_DESCRIPTION",
]
