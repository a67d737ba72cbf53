import json
import logging
from typing import Any

from openai import AsyncOpenAI

from ..config import Settings
from ..core.registry import ToolRegistry
from ..errors import AgentConfigurationError
from ..tools.go_docs import fetch_go_doc
from .base import AIAgent, Message

logger = logging.getLogger(__name__)

AGENT_KEY = "goDocsAgent"
AGENT_NAME = "Go Documentation Agent"
AGENT_DESCRIPTION = (
    "An expert Go programming assistant that provides accurate documentation, "
    "best practices, and code examples from official Go sources."
)

INSTRUCTIONS = """You are an expert Go programming assistant with deep knowledge of the Go standard library and ecosystem.

Your primary function is to help developers understand Go packages, functions, types, and best practices.

When responding:
- Use the fetch_go_doc tool to get accurate, up-to-date documentation from pkg.go.dev
- For best practices questions, use section "effective-go" to get curated Go best practices
- Always explain concepts clearly with practical examples
- If a package isn't found, suggest similar packages or correct the package path
- When showing code examples, use proper Go formatting and conventions
- Be concise but thorough - developers appreciate efficiency

For common tasks:
- "What does fmt.Printf do?" -> fetch_go_doc with package="fmt", section="functions"
- "Tell me about net/http" -> fetch_go_doc with package="net/http", section="auto"
- "Go best practices" -> fetch_go_doc with section="effective-go"
- "How do I use context?" -> fetch_go_doc with package="context"

Common Go standard library packages:
- fmt: formatted I/O
- net/http: HTTP client and server
- context: request-scoped values, cancellation
- encoding/json: JSON encoding/decoding
- sync: synchronization primitives
- io: basic I/O interfaces
- os: operating system functions
- strings: string manipulation
- time: time functions
- errors: error handling

Always provide accurate information. If you're unsure, fetch the documentation first."""


class GoDocsAgent(AIAgent):
    """
    Chat agent answering Go questions with the fetch_go_doc tool.

    Talks to any OpenAI-compatible chat-completions endpoint. The
    conversation is remembered for the lifetime of the instance.
    """

    def __init__(
        self,
        api_key: str | None,
        tools: ToolRegistry,
        model: str = "gpt-5-nano",
        base_url: str | None = None,
        max_tool_rounds: int = 5,
        client: AsyncOpenAI | None = None,
    ):
        super().__init__(tools)
        self.model = model
        self.max_tool_rounds = max_tool_rounds
        self.client = client or AsyncOpenAI(api_key=api_key, base_url=base_url)
        self.messages.append(Message(role="system", content=INSTRUCTIONS))
        logger.info(f"Initialized GoDocsAgent with model {model}")

    async def process_message(self, message: str) -> str:
        """Answer a user message, running any tool calls the model requests"""
        self.messages.append(Message(role="user", content=message))
        logger.debug(f"Processing message: {message}")

        for _ in range(self.max_tool_rounds):
            response = await self._get_completion()
            assistant_message = response.choices[0].message
            tool_calls = assistant_message.tool_calls or []

            self.messages.append(
                Message(
                    role="assistant",
                    content=assistant_message.content,
                    tool_calls=[_serialize_tool_call(tc) for tc in tool_calls] or None,
                )
            )

            if not tool_calls:
                return assistant_message.content or ""

            await self._process_tool_calls(tool_calls)

        logger.warning(f"Tool round limit ({self.max_tool_rounds}) reached, requesting final answer")
        response = await self._get_completion(allow_tools=False)
        content = response.choices[0].message.content or ""
        self.messages.append(Message(role="assistant", content=content))
        return content

    async def close(self) -> None:
        """Release the chat client's pooled connections"""
        await self.client.close()

    async def _get_completion(self, allow_tools: bool = True) -> Any:
        request: dict[str, Any] = {
            "model": self.model,
            "messages": [m.model_dump(exclude_none=True) for m in self.messages],
        }
        if allow_tools and self.tools.tools:
            request["tools"] = self.tools.tools

        try:
            return await self.client.chat.completions.create(**request)
        except Exception as e:
            logger.error(f"Error getting completion: {e}", exc_info=True)
            raise

    async def _process_tool_calls(self, tool_calls: list[Any]) -> list[Any]:
        """Run tool calls and append their results to the history"""
        results = []
        for tool_call in tool_calls:
            result = await self.handle_tool_call(tool_call)
            results.append(result)
            self.messages.append(
                Message(role="tool", tool_call_id=tool_call.id, content=json.dumps(result))
            )
        return results

    async def handle_tool_call(self, tool_call: Any) -> Any:
        """Execute one tool call; failures are reported back to the model"""
        function_name = tool_call.function.name
        try:
            function_args = json.loads(tool_call.function.arguments or "{}")
        except json.JSONDecodeError as e:
            return {"error": f"Invalid arguments for {function_name}: {e}"}

        if self.tools.get_tool(function_name) is None:
            return {"error": f"Tool not found: {function_name}"}

        logger.debug(f"Executing tool: {function_name} with args: {function_args}")
        try:
            result = await self.tools.call(function_name, function_args)
        except TypeError as e:
            return {"error": f"Invalid arguments for {function_name}: {e}"}

        if hasattr(result, "to_payload"):
            return result.to_payload()
        return result


def _serialize_tool_call(tool_call: Any) -> dict[str, Any]:
    return {
        "id": tool_call.id,
        "type": tool_call.type,
        "function": {
            "name": tool_call.function.name,
            "arguments": tool_call.function.arguments,
        },
    }


def default_agent_tools() -> ToolRegistry:
    tools = ToolRegistry()
    tools.tool()(fetch_go_doc)
    return tools


def create_go_docs_agent(settings: Settings, tools: ToolRegistry | None = None) -> GoDocsAgent:
    """
    Build the documentation agent from settings.

    Raises:
        AgentConfigurationError: No API key is configured
    """
    if not settings.openai_api_key:
        raise AgentConfigurationError(
            "OPENAI_API_KEY is not set; the Go documentation agent needs an "
            "OpenAI-compatible API key"
        )

    return GoDocsAgent(
        api_key=settings.openai_api_key,
        tools=tools or default_agent_tools(),
        model=settings.agent_model,
        base_url=settings.agent_base_url,
    )
