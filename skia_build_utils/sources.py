#!/usr/bin/env python3
"""
Source provider for the Skia and depot_tools checkouts.

The sources are taken from an existing checkout when `skia/` and
`depot_tools/` are present. Otherwise the bindings repository is cloned
at a pinned revision, its submodules are initialized, and both
directories are moved into place.
"""

import shutil
from pathlib import Path
from typing import Dict, Optional

from .config import DEPOT_TOOLS_DIR_NAME, REPOSITORY_BINDINGS_DIR, REPOSITORY_CLONE_URL, \
    REPOSITORY_DIRECTORY, SKIA_DIR_NAME, SOURCE_REVISION
from .errors import BuildError, ToolFailedError
from .utils import ToolRunner, console


class SourceProvider:
    """Makes sure the Skia and depot_tools sources exist."""

    def __init__(
        self,
        runner: Optional[ToolRunner] = None,
        clone_url: str = REPOSITORY_CLONE_URL,
        revision: str = SOURCE_REVISION,
    ):
        self.runner = runner or ToolRunner()
        self.clone_url = clone_url
        self.revision = revision

    @staticmethod
    def sources_present(paths: Dict[str, Path]) -> bool:
        return paths['SKIA_DIR'].is_dir() and paths['DEPOT_TOOLS_DIR'].is_dir()

    def ensure(self, paths: Dict[str, Path]) -> bool:
        """
        Fetch the sources unless they are present.

        Returns:
            True if the sources were fetched, False if they already existed
        """
        if self.sources_present(paths):
            console.print(f"[green]Using existing sources in {paths['SKIA_DIR'].parent}[/]")
            return False

        build_dir = paths['BUILD_DIR']
        build_dir.mkdir(parents=True, exist_ok=True)
        repo_dir = build_dir / REPOSITORY_DIRECTORY
        if repo_dir.is_dir():
            shutil.rmtree(repo_dir)

        console.print(f"\n[bold]Fetching Skia sources at revision {self.revision}[/]")
        self._git(["clone", self.clone_url, REPOSITORY_DIRECTORY], build_dir, "Cloning repository")
        self._git(["checkout", self.revision], repo_dir, f"Checking out {self.revision}")
        self._git(["submodule", "update", "--init", "--depth", "1"], repo_dir, "Updating submodules")

        bindings_dir = repo_dir / REPOSITORY_BINDINGS_DIR
        for name, key in ((DEPOT_TOOLS_DIR_NAME, 'DEPOT_TOOLS_DIR'), (SKIA_DIR_NAME, 'SKIA_DIR')):
            source = bindings_dir / name
            if not source.is_dir():
                raise BuildError(f"Submodule '{name}' is missing in {bindings_dir}")
            shutil.move(str(source), str(paths[key]))

        # Scanners like IDEs may hold files open, the next run retries.
        shutil.rmtree(repo_dir, ignore_errors=True)
        return True

    def _git(self, args, cwd: Path, title: str) -> None:
        result = self.runner.run(["git", *args], cwd=cwd, title=title)
        if result.returncode != 0:
            raise ToolFailedError(result.command, result.returncode, result.output)
