"""
Tool registration decorators for godocs-mcp
"""

import inspect
import logging
import types
from collections.abc import Callable
from enum import Enum
from typing import Any, Literal, Union, get_args, get_origin, get_type_hints

from docstring_parser import parse as parse_docstring

logger = logging.getLogger(__name__)


def tool(
    name: str | None = None,
    description: str | None = None,
) -> Callable[[Callable], Callable]:
    """
    Decorator to mark a function as an MCP tool.

    The JSON schema for the tool input is generated from the signature:
    type hints give the property types (Literal and Enum hints become
    "enum" constraints), defaults are carried over, parameters without a
    default are required, and the "Args:" section of the docstring supplies
    the property descriptions.

    Args:
        name: Optional custom name for the tool. Defaults to function name.
        description: Optional description for the tool. Defaults to the
            docstring's description.

    Example:
        @tool(description="Look up a Go package")
        async def lookup(package: str, section: Literal["auto", "types"] = "auto"):
            ...
    """

    def decorator(func: Callable) -> Callable:
        doc = parse_docstring(func.__doc__ or "")
        tool_name = name or func.__name__
        tool_description = description or _docstring_description(doc)

        parameters_schema = generate_parameters_schema(func, doc)

        func._mcp_tool_metadata = {
            "name": tool_name,
            "description": tool_description,
            "parameters": parameters_schema,
            "function": func,
            "async": inspect.iscoroutinefunction(func),
        }

        logger.debug(
            f"Tool decorated: {tool_name} ({'async' if inspect.iscoroutinefunction(func) else 'sync'})"
        )

        return func

    return decorator


def _docstring_description(doc: Any) -> str:
    parts = [doc.short_description, doc.long_description]
    return "\n\n".join(p.strip() for p in parts if p)


def generate_parameters_schema(func: Callable, doc: Any | None = None) -> dict[str, Any]:
    """Generate JSON schema for function parameters"""
    if doc is None:
        doc = parse_docstring(func.__doc__ or "")
    param_docs = {p.arg_name: p.description for p in doc.params if p.description}

    type_hints = get_type_hints(func)
    signature = inspect.signature(func)

    properties = {}
    required = []

    for param_name, param in signature.parameters.items():
        if param_name == "self":
            continue

        param_info = type_to_json_schema(type_hints.get(param_name, str))
        if param_name in param_docs:
            param_info["description"] = param_docs[param_name]

        if param.default is not inspect.Parameter.empty:
            param_info["default"] = param.default
        else:
            required.append(param_name)

        properties[param_name] = param_info

    schema: dict[str, Any] = {"type": "object", "properties": properties}

    if required:
        schema["required"] = required

    return schema


def type_to_json_schema(python_type: Any) -> dict[str, Any]:
    """Convert Python type to JSON schema"""
    if python_type is str:
        return {"type": "string"}
    elif python_type is bool:
        return {"type": "boolean"}
    elif python_type is int:
        return {"type": "integer"}
    elif python_type is float:
        return {"type": "number"}
    elif python_type is list:
        return {"type": "array"}
    elif python_type is dict:
        return {"type": "object"}
    elif isinstance(python_type, type) and issubclass(python_type, Enum):
        return {"type": "string", "enum": [member.value for member in python_type]}

    origin = get_origin(python_type)
    args = get_args(python_type)

    if origin is Literal:
        return {"type": "string", "enum": list(args)}
    elif origin is list:
        schema: dict[str, Any] = {"type": "array"}
        if args:
            schema["items"] = type_to_json_schema(args[0])
        return schema
    elif origin is dict:
        return {"type": "object"}
    elif origin in (Union, types.UnionType):
        # Optional[X] is described as X
        members = [a for a in args if a is not type(None)]
        if len(members) == 1:
            return type_to_json_schema(members[0])

    # Default to string for unknown types
    return {"type": "string"}
