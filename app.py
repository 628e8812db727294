"""
React Video Service - HTTP surface for the react_code_to_video tool.
Port: 6010
"""
import asyncio
import threading
from datetime import datetime
from typing import Any, Coroutine, Optional

from flask import Flask, jsonify, request
from loguru import logger

from config import settings
from config.logging_config import configure_logging
from services.react_video import ReactVideoError, ToolRegistry, create_default_registry

STATUS_BY_KIND = {
    "argument": 400,
    "unknown_tool": 404,
    "saturated": 503,
}


class BackgroundLoop:
    """Event loop on a daemon thread; Flask handlers submit coroutines to it."""

    def __init__(self):
        self.loop = asyncio.new_event_loop()
        self._thread = threading.Thread(
            target=self.loop.run_forever, name="react-video-loop", daemon=True
        )
        self._thread.start()

    def run(self, coro: Coroutine, timeout: Optional[float] = None) -> Any:
        """Run ``coro`` on the loop and block for its result."""
        return asyncio.run_coroutine_threadsafe(coro, self.loop).result(timeout)


def create_app(
    registry: Optional[ToolRegistry] = None,
    loop: Optional[BackgroundLoop] = None,
) -> Flask:
    """
    Build the Flask app around a tool registry.

    Args:
        registry: Tool registry (Node-backed default if None)
        loop: Loop that runs tool calls (a new background loop if None)
    """
    app = Flask(__name__)
    registry = registry or create_default_registry()
    loop = loop or BackgroundLoop()

    app.extensions["tool_registry"] = registry
    app.extensions["render_loop"] = loop

    @app.route("/health", methods=["GET"])
    def health():
        """Health check endpoint."""
        return jsonify({
            "status": "healthy",
            "service": settings.SERVICE_NAME,
            "version": settings.SERVICE_VERSION,
            "timestamp": datetime.utcnow().isoformat()
        })

    @app.route("/api/tools", methods=["GET"])
    def list_tools():
        """List registered tools."""
        return jsonify({"tools": registry.list_tools()})

    @app.route("/api/tools/call", methods=["POST"])
    def call_tool():
        """Call a tool by name with {"name": ..., "arguments": {...}}."""
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            data = {}
        name = data.get("name")

        if not name:
            return jsonify({"status": "error", "error": "name required", "kind": "argument"}), 400

        try:
            result = loop.run(registry.call_tool(name, data.get("arguments")))
        except ReactVideoError as e:
            return jsonify({
                "status": "error",
                "error": str(e),
                "kind": e.kind,
            }), STATUS_BY_KIND.get(e.kind, 500)
        except Exception as e:
            logger.exception(f"Tool call {name} crashed: {e}")
            return jsonify({"status": "error", "error": str(e), "kind": "internal"}), 500

        return jsonify({"status": "success", **result})

    return app


if __name__ == "__main__":
    configure_logging(settings.LOG_LEVEL)
    logger.info(f"Starting {settings.SERVICE_NAME} on port {settings.SERVICE_PORT}")
    create_app().run(host="0.0.0.0", port=settings.SERVICE_PORT, debug=False)
