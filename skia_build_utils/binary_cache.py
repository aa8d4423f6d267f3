#!/usr/bin/env python3
"""
Prebuilt Skia binaries.

Instead of running GN and Ninja, a build can install an archive of the
binaries a previous build produced for the same repository revision,
target and features. Archives are identified by a key and downloaded
from a URL template in which `{tag}` and `{key}` are replaced; `file://`
URLs work for local archives.

The archive contains a single `skia-binaries/` directory with the
libraries, `skia-defines.txt`, `bindings.rs`, `key.txt` and `tag.txt`.
"""

import shutil
import tarfile
import tempfile
import urllib.request
from pathlib import Path
from typing import Iterable, List, Mapping, Optional, Tuple

from .binaries import BinariesConfiguration
from .config import BINARIES_ARCHIVE_NAME, BINARIES_URL_DEFAULT, BINDINGS_FILE_NAME, \
    DEFINES_FILE_NAME, ENV_BINARIES_TAG, ENV_BINARIES_URL, ENV_FORCE_BINARIES_DOWNLOAD, \
    ENV_FORCE_BUILD, ENV_REPOSITORY_HASH, HALF_HASH_LENGTH, PACKAGE_VERSION, env_var
from .errors import BinariesDownloadError, BuildError
from .target import TargetDescriptor
from .utils import console, git_short_hash


def download_url(url_template: str, tag: str, key: str) -> str:
    return url_template.replace("{tag}", tag).replace("{key}", key)


def download_and_install(url: str, output_dir: Path) -> List[Path]:
    """
    Download a binaries archive and unpack it into the output directory.

    Raises:
        BinariesDownloadError: If the download or unpacking fails
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    with tempfile.TemporaryDirectory() as tmp:
        tar_path = Path(tmp) / f"{BINARIES_ARCHIVE_NAME}.tar.gz"
        try:
            urllib.request.urlretrieve(url, tar_path)
        except OSError as e:
            raise BinariesDownloadError(f"Failed to download {url}: {e}") from e
        return unpack(tar_path, output_dir)


def unpack(archive: Path, output_dir: Path) -> List[Path]:
    """
    Unpack an archive and pull the files of its `skia-binaries/`
    directory up into the output directory.

    Returns:
        The unpacked files
    """
    try:
        with tarfile.open(archive, "r:gz") as tar:
            tar.extractall(output_dir)
    except (tarfile.TarError, OSError) as e:
        raise BinariesDownloadError(f"Failed to unpack {archive.name}: {e}") from e

    binaries_dir = output_dir / BINARIES_ARCHIVE_NAME
    if not binaries_dir.is_dir():
        raise BinariesDownloadError(f"{archive.name} does not contain {BINARIES_ARCHIVE_NAME}/")

    unpacked = []
    for path in sorted(binaries_dir.iterdir()):
        destination = output_dir / path.name
        if destination.is_dir():
            shutil.rmtree(destination)
        elif destination.exists():
            destination.unlink()
        shutil.move(str(path), str(destination))
        unpacked.append(destination)
    binaries_dir.rmdir()
    return unpacked


def export(key: str, tag: str, files: Iterable[Path], target_dir: Path) -> Path:
    """
    Package built binaries into `skia-binaries-<key>.tar.gz`.

    Returns:
        The path of the archive
    """
    export_dir = target_dir / BINARIES_ARCHIVE_NAME
    if export_dir.is_dir():
        shutil.rmtree(export_dir)
    export_dir.mkdir(parents=True)

    (export_dir / "tag.txt").write_text(tag, encoding="utf-8")
    (export_dir / "key.txt").write_text(key, encoding="utf-8")
    for file in files:
        if not file.is_file():
            raise BuildError(f"Cannot export missing file {file}")
        shutil.copy2(file, export_dir / file.name)

    archive = target_dir / f"{BINARIES_ARCHIVE_NAME}-{key}.tar.gz"
    with tarfile.open(archive, "w:gz") as tar:
        tar.add(export_dir, arcname=BINARIES_ARCHIVE_NAME)
    console.print(f"[green]Binaries exported to {archive}[/]")
    return archive


class BinaryCache:
    """Decides whether prebuilt binaries replace a Skia build, and installs them."""

    def __init__(self, env: Mapping[str, str], project_root: Path, url_template: Optional[str] = None):
        self.env = env
        self.project_root = project_root
        self.url_template = url_template or env_var(env, ENV_BINARIES_URL) or BINARIES_URL_DEFAULT

    @property
    def force_build(self) -> bool:
        return env_var(self.env, ENV_FORCE_BUILD) is not None

    @property
    def force_download(self) -> bool:
        return env_var(self.env, ENV_FORCE_BINARIES_DOWNLOAD) is not None

    @property
    def tag(self) -> str:
        return env_var(self.env, ENV_BINARIES_TAG) or PACKAGE_VERSION

    def repository_hash(self, query_git: bool = False) -> Optional[str]:
        """
        The shortened hash of the bindings repository the binaries belong to.

        Taken from SKIA_REPOSITORY_HASH, or from the git checkout of the
        project when `query_git` is set.
        """
        full_hash = env_var(self.env, ENV_REPOSITORY_HASH)
        if full_hash:
            return full_hash[:HALF_HASH_LENGTH]
        if query_git:
            return git_short_hash(self.project_root, HALF_HASH_LENGTH)
        return None

    def download_request(self, config: BinariesConfiguration, target: TargetDescriptor) -> Optional[Tuple[str, str]]:
        """The tag and key to download, None if Skia needs to be built."""
        if self.force_build:
            return None
        repository_hash = self.repository_hash(query_git=self.force_download)
        if not repository_hash:
            return None
        return self.tag, config.key(repository_hash, target)

    @staticmethod
    def required_files(config: BinariesConfiguration, target: TargetDescriptor) -> List[Path]:
        files = config.built_library_files(target)
        files += [config.output_dir / f for f in config.additional_files]
        files += [config.output_dir / DEFINES_FILE_NAME, config.output_dir / BINDINGS_FILE_NAME]
        return files

    def try_install(self, config: BinariesConfiguration, target: TargetDescriptor) -> bool:
        """
        Install prebuilt binaries into the output directory.

        Returns:
            True if the binaries were installed, False if Skia needs to be built

        Raises:
            BinariesDownloadError: If the download was forced and failed
        """
        request = self.download_request(config, target)
        if request is None:
            return False

        tag, key = request
        url = download_url(self.url_template, tag, key)
        console.print(f"[bold]Trying to install prebuilt Skia binaries {tag}/{key}[/]")
        console.print(f"  from: {url}")
        try:
            download_and_install(url, config.output_dir)
            missing = [str(f) for f in self.required_files(config, target) if not f.exists()]
            if missing:
                raise BinariesDownloadError(f"Prebuilt binaries are incomplete, missing: {', '.join(missing)}")
        except BinariesDownloadError as e:
            if self.force_download:
                raise
            console.print(f"[yellow]{e}, building Skia instead[/]")
            return False

        console.print("[green]Prebuilt binaries installed[/]")
        return True

    def export(
        self, config: BinariesConfiguration, target: TargetDescriptor, files: Iterable[Path], target_dir: Path
    ) -> Path:
        """
        Export the files of a completed build.

        Raises:
            BuildError: Outside of a git checkout without SKIA_REPOSITORY_HASH
        """
        repository_hash = self.repository_hash(query_git=True)
        if not repository_hash:
            raise BuildError("Exporting binaries requires a git checkout or SKIA_REPOSITORY_HASH")
        return export(config.key(repository_hash, target), self.tag, files, target_dir)
