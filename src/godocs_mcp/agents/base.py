from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel

from ..core.registry import ToolRegistry


class Message(BaseModel):
    role: str
    content: str | None = None
    name: str | None = None
    tool_calls: list[dict[str, Any]] | None = None
    tool_call_id: str | None = None


class AIAgent(ABC):
    """Abstract base class for AI agents"""

    def __init__(self, tools: ToolRegistry):
        self.tools = tools
        self.messages: list[Message] = []

    @abstractmethod
    async def process_message(self, message: str) -> str:
        """Process a message and return a response"""

    @abstractmethod
    async def handle_tool_call(self, tool_call: Any) -> Any:
        """Handle a tool call and return the result"""
