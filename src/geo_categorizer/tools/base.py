import json
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ValidationError

from geo_categorizer.logger import get_logger
from geo_categorizer.models import ToolInvocation

logger = get_logger(__name__)


class ToolError(Exception):
    """Base class for rejected tool calls."""


class UnknownToolError(ToolError):
    pass


class ToolArgumentError(ToolError):
    pass


@dataclass(frozen=True)
class Tool:
    name: str
    description: str
    arguments: type[BaseModel]
    func: Callable[..., dict[str, Any]]

    def declaration(self) -> dict[str, Any]:
        """OpenAI function-calling declaration for this tool."""
        schema = self.arguments.model_json_schema()
        schema.pop("title", None)
        for prop in schema.get("properties", {}).values():
            prop.pop("title", None)
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": schema,
            },
        }

    def parse_arguments(self, raw_arguments: str | dict[str, Any] | None) -> BaseModel:
        if raw_arguments is None or raw_arguments == "":
            raw_arguments = {}
        if isinstance(raw_arguments, str):
            try:
                raw_arguments = json.loads(raw_arguments)
            except json.JSONDecodeError as e:
                raise ToolArgumentError(f"Arguments for '{self.name}' are not valid JSON: {e}") from e
        if not isinstance(raw_arguments, dict):
            raise ToolArgumentError(f"Arguments for '{self.name}' must be a JSON object.")
        try:
            return self.arguments.model_validate(raw_arguments, strict=True)
        except ValidationError as e:
            raise ToolArgumentError(f"Invalid arguments for '{self.name}': {e}") from e

    def __call__(self, raw_arguments: str | dict[str, Any] | None) -> dict[str, Any]:
        parsed = self.parse_arguments(raw_arguments)
        return self.func(**parsed.model_dump())


class ToolRegistry:
    def __init__(self, tools: Iterable[Tool] = ()):
        self._tools: dict[str, Tool] = {}
        for tool in tools:
            self.register(tool)

    def register(self, tool: Tool) -> None:
        if tool.name in self._tools:
            raise ValueError(f"Tool '{tool.name}' is already registered")
        self._tools[tool.name] = tool

    def declarations(self) -> list[dict[str, Any]]:
        return [tool.declaration() for tool in self._tools.values()]

    def invoke(self, name: str, raw_arguments: str | dict[str, Any] | None) -> dict[str, Any]:
        tool = self._tools.get(name)
        if tool is None:
            raise UnknownToolError(f"Unknown tool '{name}'. Available: {', '.join(self._tools)}")
        return tool(raw_arguments)

    def record(self, name: str, raw_arguments: str | dict[str, Any] | None) -> ToolInvocation:
        """
        Invoke a tool and capture the outcome. Rejected calls are recorded
        with their error instead of raising, so the model can read the error.
        """
        arguments = _arguments_for_record(raw_arguments)
        try:
            result = self.invoke(name, raw_arguments)
        except ToolError as e:
            logger.warning("[TOOL] %s rejected: %s", name, e)
            return ToolInvocation(name=name, arguments=arguments, error=str(e))
        logger.debug("[TOOL] %s(%s) -> %s", name, arguments, result)
        return ToolInvocation(name=name, arguments=arguments, result=result)


def _arguments_for_record(raw_arguments: str | dict[str, Any] | None) -> dict[str, Any]:
    if isinstance(raw_arguments, dict):
        return dict(raw_arguments)
    if isinstance(raw_arguments, str) and raw_arguments:
        try:
            loaded = json.loads(raw_arguments)
        except json.JSONDecodeError:
            return {"raw": raw_arguments}
        if isinstance(loaded, dict):
            return loaded
        return {"raw": raw_arguments}
    return {}
