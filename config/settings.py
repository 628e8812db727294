"""
React Video MCP server configuration.
"""
import os
import tempfile
from pathlib import Path
from typing import Optional


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def _env_seconds(name: str) -> Optional[float]:
    raw = os.getenv(name, "").strip()
    return float(raw) if raw else None


# Service settings
SERVICE_NAME = "react-video-mcp-server"
SERVICE_VERSION = "0.0.1"
SERVICE_PORT = int(os.getenv("PORT", 6010))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Paths
OUTPUT_DIR = Path(os.getenv("REACT_VIDEO_OUTPUT_DIR", "/tmp/react-video/output"))
WORK_DIR = Path(os.getenv("REACT_VIDEO_WORK_DIR", tempfile.gettempdir()))

# Node toolchain
NODE_PATH = os.getenv("NODE_PATH_BIN", "node")
NPM_PATH = os.getenv("NPM_PATH_BIN", "npm")
INSTALL_DEPS = _env_flag("REACT_VIDEO_INSTALL_DEPS", "true")
# Shared node_modules installed once and symlinked into each project; empty disables
_NODE_MODULES_CACHE = os.getenv("REACT_VIDEO_NODE_MODULES_CACHE", str(WORK_DIR / "react-video-node-cache")).strip()
NODE_MODULES_CACHE = Path(_NODE_MODULES_CACHE) if _NODE_MODULES_CACHE else None

# Render settings
KEEP_PROJECTS = _env_flag("REACT_VIDEO_KEEP_PROJECTS", "false")
INSTALL_TIMEOUT = _env_seconds("REACT_VIDEO_INSTALL_TIMEOUT")
BUNDLE_TIMEOUT = _env_seconds("REACT_VIDEO_BUNDLE_TIMEOUT")
RENDER_TIMEOUT = _env_seconds("REACT_VIDEO_RENDER_TIMEOUT")

# Admission control
MAX_CONCURRENT_RENDERS = int(os.getenv("REACT_VIDEO_MAX_CONCURRENT", 2))
MAX_QUEUED_RENDERS = int(os.getenv("REACT_VIDEO_MAX_QUEUED", 8))
