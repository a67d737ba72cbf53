"""
Tool registry shared by the MCP server and the documentation agent
"""

import importlib
import inspect
import logging
import pkgutil
from collections.abc import Awaitable, Callable
from types import ModuleType
from typing import Any, Protocol

from ..tools.decorators import generate_parameters_schema, tool

logger = logging.getLogger(__name__)


class ConversationalAgent(Protocol):
    """Anything that answers a chat message"""

    async def process_message(self, message: str) -> str: ...


AgentFactory = Callable[[], ConversationalAgent]


class ToolRegistry:
    """
    Registry of callable tools and their schemas.

    Schemas are kept in the OpenAI function-calling format, which the MCP
    server converts for tools/list and the agent passes to the model as is.
    """

    def __init__(self):
        self._tools: dict[str, Callable] = {}
        self._tool_schemas: dict[str, dict[str, Any]] = {}

    def tool(self) -> Callable[[Callable], Callable]:
        """
        Decorator registering a function already decorated with @tool.
        """

        def decorator(func: Callable) -> Callable:
            metadata = getattr(func, "_mcp_tool_metadata", None)
            if metadata is None:
                logger.warning(
                    f"Function {func.__name__} does not have MCP tool metadata. Use @tool decorator first."
                )
                return func

            self._add(metadata["name"], func, metadata["description"], metadata["parameters"])
            return func

        return decorator

    def register_function(
        self, func: Callable, name: str | None = None, description: str | None = None
    ) -> None:
        """
        Register a plain function as a tool (alternative to the decorator approach)

        Args:
            func: The function to register
            name: Optional name for the tool (defaults to function name)
            description: Optional description (defaults to function docstring)
        """
        tool_name = name or func.__name__
        tool_description = description or (func.__doc__ or "").strip()
        self._add(tool_name, func, tool_description, generate_parameters_schema(func))

    def register_agent(
        self, key: str, agent_factory: AgentFactory, description: str
    ) -> str:
        """
        Expose a conversational agent as the tool `ask_<key>`.

        The agent is created on the first call, so a missing API key only
        fails the calls that need it.

        Returns:
            The registered tool name
        """
        tool_name = f"ask_{key}"
        instance: list[ConversationalAgent] = []

        @tool(name=tool_name, description=description)
        async def ask_agent(message: str) -> str:
            """
            Args:
                message: Question for the agent
            """
            if not instance:
                instance.append(agent_factory())
            return await instance[0].process_message(message)

        self.tool()(ask_agent)
        return tool_name

    def _add(
        self, name: str, func: Callable, description: str, parameters: dict[str, Any]
    ) -> None:
        if name in self._tools and self._tools[name] is not func:
            logger.warning(f"Replacing previously registered tool: {name}")

        self._tools[name] = func
        self._tool_schemas[name] = {
            "type": "function",
            "function": {
                "name": name,
                "description": description,
                "parameters": parameters,
            },
        }
        logger.info(f"Registered tool: {name}")

    def get_tool(self, name: str) -> Callable | None:
        """Get a registered tool by name"""
        return self._tools.get(name)

    def list_tools(self) -> list[str]:
        """List all registered tool names"""
        return list(self._tools.keys())

    @property
    def tools(self) -> list[dict[str, Any]]:
        """Get all tool schemas"""
        return list(self._tool_schemas.values())

    async def call(self, name: str, arguments: dict[str, Any]) -> Any:
        """Invoke a registered tool, awaiting it when it is a coroutine function"""
        func = self._tools.get(name)
        if func is None:
            raise KeyError(f"Tool '{name}' not found in registry")

        if inspect.iscoroutinefunction(func):
            return await func(**arguments)

        result = func(**arguments)
        if isinstance(result, Awaitable):
            return await result
        return result

    def auto_discover_tools(self, module_or_package: ModuleType | str) -> None:
        """
        Discover and register @tool functions from a module or package.

        Args:
            module_or_package: The module or package (or its dotted name) to scan
        """
        if isinstance(module_or_package, str):
            module_or_package = importlib.import_module(module_or_package)

        if hasattr(module_or_package, "__path__"):
            for _, modname, _ in pkgutil.iter_modules(
                module_or_package.__path__, module_or_package.__name__ + "."
            ):
                try:
                    submodule = importlib.import_module(modname)
                except ImportError as e:
                    logger.warning(f"Could not import {modname}: {e}")
                    continue
                self._scan_module_for_tools(submodule)
        else:
            self._scan_module_for_tools(module_or_package)

    def _scan_module_for_tools(self, module: ModuleType) -> None:
        """Scan a module for functions decorated with @tool"""
        for name in dir(module):
            obj = getattr(module, name)
            if callable(obj) and hasattr(obj, "_mcp_tool_metadata"):
                self.tool()(obj)
                logger.debug(f"Auto-discovered tool: {obj._mcp_tool_metadata['name']}")
