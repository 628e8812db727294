"""
Shared fixtures: stub engines and a pipeline wired to temporary directories.
"""
from functools import partial
from pathlib import Path

import pytest

from services.react_video import (
    BundlingEngine,
    ReactVideoPipeline,
    RenderError,
    RenderingEngine,
    ephemeral_project_dir,
)

COMPONENT_CODE = """import {AbsoluteFill, useCurrentFrame} from 'remotion';

export const MyComponent = () => {
  const frame = useCurrentFrame();
  return <AbsoluteFill style={{backgroundColor: 'white'}}>{frame}</AbsoluteFill>;
};
"""


class StubBundlingEngine(BundlingEngine):
    """Records entry paths and a copy of the project files it was asked to bundle."""

    def __init__(self, error=None):
        self.error = error
        self.calls = []
        self.snapshots = []

    async def bundle(self, entry_path):
        entry_path = Path(entry_path)
        root = entry_path.parent.parent
        self.calls.append(entry_path)
        self.snapshots.append({
            p.relative_to(root).as_posix(): p.read_text(encoding="utf-8")
            for p in root.rglob("*")
            if p.is_file()
        })
        if self.error is not None:
            raise self.error
        return str(root / "build")


class StubRenderingEngine(RenderingEngine):
    """Records render calls and writes a placeholder video."""

    def __init__(self, error=None, write_output=True, reject_empty=False):
        self.error = error
        self.write_output = write_output
        self.reject_empty = reject_empty
        self.calls = []

    async def render(self, composition, serve_url, codec, output_path):
        self.calls.append({
            "composition": composition,
            "serve_url": serve_url,
            "codec": codec,
            "output_path": Path(output_path),
        })
        if self.error is not None:
            raise self.error
        if self.reject_empty and composition["durationInFrames"] <= 0:
            raise RenderError("durationInFrames must be a positive integer")
        if self.write_output:
            Path(output_path).write_bytes(b"\x00\x00\x00\x18ftypmp42")


@pytest.fixture
def valid_args():
    return {
        "code": COMPONENT_CODE,
        "width": 1280,
        "height": 720,
        "duration": 1000,
        "fps": 30,
    }


@pytest.fixture
def work_dir(tmp_path):
    path = tmp_path / "work"
    path.mkdir()
    return path


@pytest.fixture
def output_dir(tmp_path):
    return tmp_path / "output"


@pytest.fixture
def bundling_engine():
    return StubBundlingEngine()


@pytest.fixture
def rendering_engine():
    return StubRenderingEngine()


@pytest.fixture
def make_pipeline(work_dir, output_dir):
    """Factory for pipelines using stub engines and temporary directories."""

    def _make(bundling_engine=None, rendering_engine=None, keep_projects=False):
        return ReactVideoPipeline(
            bundling_engine=bundling_engine or StubBundlingEngine(),
            rendering_engine=rendering_engine or StubRenderingEngine(),
            output_dir=output_dir,
            workspace_factory=partial(ephemeral_project_dir, base_dir=work_dir, keep=keep_projects),
            keep_projects=keep_projects,
        )

    return _make


@pytest.fixture
def pipeline(make_pipeline, bundling_engine, rendering_engine):
    return make_pipeline(bundling_engine, rendering_engine)
