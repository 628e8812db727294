"""
Tool Registry
=============
Tool definitions and name-based dispatch shared by every transport.

The registry is built once at startup and handed to the Flask app and the MCP
server, so tests can build one around stub engines.
"""

from typing import Any, Awaitable, Callable, Dict, List, Optional, Union

from loguru import logger

from .errors import ArgumentError, ReactVideoError, UnknownToolError
from .pipeline import ReactVideoPipeline
from .worker_pool import RenderWorkerPool

ToolHandler = Callable[[Dict[str, Any]], Awaitable[Any]]

REACT_TO_VIDEO_TOOL: Dict[str, Any] = {
    "name": "react_code_to_video",
    "description": "convert react code to video",
    "inputSchema": {
        "type": "object",
        "properties": {
            "code": {
                "type": "string",
                "description": "react code using remotion library",
            },
            "width": {
                "type": "number",
                "description": "width of the video",
            },
            "height": {
                "type": "number",
                "description": "height of the video",
            },
            "duration": {
                "type": "number",
                "description": "duration of the video",
            },
            "fps": {
                "type": "number",
                "description": "fps of the video",
                "default": 30,
            },
        },
        "required": ["code", "width", "height", "duration"],
    },
}


class ToolRegistry:
    """
    Lists tools and dispatches calls by name.

    Usage:
        registry = ToolRegistry.with_react_video(pipeline, pool)
        registry.list_tools()
        await registry.call_tool("react_code_to_video", {...})
    """

    def __init__(self):
        self._tools: Dict[str, Dict[str, Any]] = {}
        self._handlers: Dict[str, ToolHandler] = {}

    @classmethod
    def with_react_video(
        cls,
        runner: Union[ReactVideoPipeline, RenderWorkerPool],
    ) -> "ToolRegistry":
        """Registry exposing react_code_to_video backed by a pipeline or pool."""
        registry = cls()

        if isinstance(runner, RenderWorkerPool):
            render = runner.submit
        else:
            render = runner.render

        async def react_code_to_video(arguments: Dict[str, Any]) -> str:
            result = await render(arguments)
            return result.video_path

        registry.register(REACT_TO_VIDEO_TOOL, react_code_to_video)
        return registry

    def register(self, definition: Dict[str, Any], handler: ToolHandler) -> None:
        name = definition["name"]
        if name in self._tools:
            raise ValueError(f"Tool already registered: {name}")
        self._tools[name] = definition
        self._handlers[name] = handler

    def list_tools(self) -> List[Dict[str, Any]]:
        return list(self._tools.values())

    def get_tool(self, name: str) -> Optional[Dict[str, Any]]:
        return self._tools.get(name)

    async def call_tool(self, name: str, arguments: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        """
        Call a tool by name.

        Returns:
            ``{"result": <handler output>}``

        Raises:
            ArgumentError: No arguments provided
            UnknownToolError: Name not registered
            Any handler error, unchanged
        """
        try:
            if arguments is None:
                raise ArgumentError("No arguments provided")

            handler = self._handlers.get(name)
            if handler is None:
                raise UnknownToolError(f"Unknown tool: {name}")

            return {"result": await handler(arguments)}
        except ReactVideoError as e:
            logger.error(f"[Tools] {name} failed ({e.kind}): {e}")
            raise
        except Exception as e:
            logger.exception(f"[Tools] {name} failed: {e}")
            raise


def create_default_registry(use_pool: bool = True) -> ToolRegistry:
    """Registry backed by the Node engines and settings-driven admission control."""
    pipeline = ReactVideoPipeline()
    if use_pool:
        return ToolRegistry.with_react_video(RenderWorkerPool(pipeline))
    return ToolRegistry.with_react_video(pipeline)
