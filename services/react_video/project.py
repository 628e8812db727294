"""
Project Synthesizer
===================
Materializes a throwaway Remotion project around caller-supplied code.

Layout:
    root/
      package.json
      tsconfig.json
      src/index.ts         registers Root
      src/Root.tsx         one <Composition id="MyComp">
      src/MyComponent.tsx  caller code, verbatim
      output.mp4           written later by the rendering engine
"""

import json
import shutil
import tempfile
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, Optional, Union

from loguru import logger

from .errors import FilesystemError
from .models import COMPOSITION_ID, OUTPUT_FILENAME, RenderRequest

PROJECT_PREFIX = "remotion-project-"

RUNTIME_DEPENDENCIES: Dict[str, str] = {
    "remotion": "^4.0.0",
    "react": "^18.0.0",
    "react-dom": "^18.0.0",
}

# Resolved from the project's node_modules by the Node engine scripts
ENGINE_DEPENDENCIES: Dict[str, str] = {
    "@remotion/bundler": "^4.0.0",
    "@remotion/renderer": "^4.0.0",
}

TSCONFIG = {
    "compilerOptions": {
        "target": "ESNext",
        "module": "ESNext",
        "jsx": "react-jsx",
        "strict": True,
        "moduleResolution": "node",
        "esModuleInterop": True,
        "skipLibCheck": True,
        "forceConsistentCasingInFileNames": True,
    },
    "include": ["src"],
}

INDEX_TS = """import {registerRoot} from 'remotion';
import {Root} from './Root';

registerRoot(Root);
"""

ROOT_TSX_TEMPLATE = """import React from 'react';
import {{Composition}} from 'remotion';
import {{MyComponent}} from './MyComponent';

export const Root: React.FC = () => {{
  return (
    <>
      <Composition
        id="{composition_id}"
        component={{MyComponent}}
        durationInFrames={{{duration_in_frames}}}
        width={{{width}}}
        height={{{height}}}
        fps={{{fps}}}
        defaultProps={{{{}}}}
      />
    </>
  );
}};
"""


@dataclass
class EphemeralProject:
    """Paths of a synthesized project."""
    root: Path

    @property
    def src_dir(self) -> Path:
        return self.root / "src"

    @property
    def manifest_path(self) -> Path:
        return self.root / "package.json"

    @property
    def tsconfig_path(self) -> Path:
        return self.root / "tsconfig.json"

    @property
    def entry_path(self) -> Path:
        return self.src_dir / "index.ts"

    @property
    def root_module_path(self) -> Path:
        return self.src_dir / "Root.tsx"

    @property
    def component_path(self) -> Path:
        return self.src_dir / "MyComponent.tsx"

    @property
    def output_path(self) -> Path:
        return self.root / OUTPUT_FILENAME

    @property
    def name(self) -> str:
        return self.root.name


@contextmanager
def ephemeral_project_dir(
    base_dir: Optional[Union[str, Path]] = None,
    prefix: str = PROJECT_PREFIX,
    keep: bool = False,
) -> Iterator[Path]:
    """
    Create a uniquely named project directory and remove it on exit.

    Args:
        base_dir: Parent directory (system temp dir if None)
        prefix: Directory name prefix
        keep: Leave the directory in place on exit

    Raises:
        FilesystemError: If the directory cannot be created
    """
    try:
        if base_dir is not None:
            Path(base_dir).mkdir(parents=True, exist_ok=True)
        root = Path(tempfile.mkdtemp(prefix=prefix, dir=base_dir)).resolve()
    except OSError as e:
        raise FilesystemError(f"Could not create project directory: {e}") from e

    logger.debug(f"[Project] Created {root}")
    try:
        yield root
    finally:
        if keep:
            logger.info(f"[Project] Keeping {root}")
        else:
            shutil.rmtree(root, ignore_errors=True)
            logger.debug(f"[Project] Removed {root}")


def build_manifest(dependencies: Optional[Dict[str, str]] = None) -> Dict[str, object]:
    """Build package.json contents for the given dependency ranges."""
    if dependencies is None:
        dependencies = {**RUNTIME_DEPENDENCIES, **ENGINE_DEPENDENCIES}
    return {
        "name": "remotion-video",
        "version": "1.0.0",
        "private": True,
        "type": "module",
        "dependencies": dict(dependencies),
    }


def read_manifest(path: Union[str, Path]) -> Dict[str, str]:
    """Read the dependency ranges back out of a package.json."""
    with open(path, "r", encoding="utf-8") as f:
        manifest = json.load(f)
    return dict(manifest.get("dependencies", {}))


def render_root_module(
    width, height, fps, duration_in_frames: int, composition_id: str = COMPOSITION_ID
) -> str:
    """Source of src/Root.tsx declaring exactly one composition."""
    return ROOT_TSX_TEMPLATE.format(
        composition_id=composition_id,
        duration_in_frames=duration_in_frames,
        width=width,
        height=height,
        fps=fps,
    )


class ProjectSynthesizer:
    """
    Writes a buildable Remotion project for one render request.

    Usage:
        synthesizer = ProjectSynthesizer()
        project = synthesizer.synthesize(request, duration_in_frames=30, root=tmp)
        # project.entry_path -> <tmp>/src/index.ts
    """

    def __init__(self, dependencies: Optional[Dict[str, str]] = None):
        self.dependencies = dependencies or {**RUNTIME_DEPENDENCIES, **ENGINE_DEPENDENCIES}

    def synthesize(
        self,
        request: RenderRequest,
        duration_in_frames: int,
        root: Union[str, Path],
    ) -> EphemeralProject:
        """
        Write all project files under ``root``.

        Args:
            request: Validated render request
            duration_in_frames: Converted frame count
            root: Existing, empty project directory

        Returns:
            EphemeralProject describing the written files

        Raises:
            FilesystemError: On any OS-level write failure
        """
        project = EphemeralProject(root=Path(root))

        try:
            project.src_dir.mkdir(parents=False, exist_ok=False)
            self._write_json(project.manifest_path, build_manifest(self.dependencies))
            self._write_json(project.tsconfig_path, TSCONFIG)
            project.entry_path.write_text(INDEX_TS, encoding="utf-8")
            project.root_module_path.write_text(
                render_root_module(
                    width=request.width,
                    height=request.height,
                    fps=request.fps,
                    duration_in_frames=duration_in_frames,
                ),
                encoding="utf-8",
            )
            # Caller code goes in untouched
            with open(project.component_path, "w", encoding="utf-8", newline="") as f:
                f.write(request.code)
        except OSError as e:
            raise FilesystemError(f"Could not write project files in {project.root}: {e}") from e

        logger.info(
            f"[Project] Synthesized {project.name}: "
            f"{request.width}x{request.height} @ {request.fps}fps, {duration_in_frames} frames"
        )
        return project

    @staticmethod
    def _write_json(path: Path, data: Dict[str, object]) -> None:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
