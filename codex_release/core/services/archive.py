"""
Asset extraction — ``.tar.gz``, ``.zst`` and ``.zip``.

Every supported asset holds a single binary named after the asset with
its archive suffix removed. ``.zst`` needs the external ``zstd`` tool.
"""

from __future__ import annotations

import logging
import subprocess
import tarfile
import zipfile
from pathlib import Path

from codex_release.core.errors import UnpackError
from codex_release.core.services.tool_requirements import ensure_tools

logger = logging.getLogger(__name__)

# Archive suffix → format key, longest suffix first
ARCHIVE_SUFFIXES: tuple[tuple[str, str], ...] = (
    (".tar.gz", "tar.gz"),
    (".zst", "zst"),
    (".zip", "zip"),
)

UNPACK_DIR = "unpack"


def split_asset_name(asset: str) -> tuple[str, str]:
    """Split ``asset`` into ``(base name, format)``.

    Raises:
        UnpackError: The suffix is not a supported archive format.
    """
    for suffix, fmt in ARCHIVE_SUFFIXES:
        if asset.endswith(suffix):
            return asset[: -len(suffix)], fmt
    raise UnpackError(f"unknown asset format: {asset}")


def _unpack_tar_gz(archive: Path, workdir: Path, base: str) -> Path:
    out_dir = workdir / UNPACK_DIR
    out_dir.mkdir(parents=True, exist_ok=True)
    try:
        with tarfile.open(archive, "r:gz") as tar:
            tar.extractall(out_dir, filter="data")
    except (tarfile.TarError, OSError) as e:
        raise UnpackError(f"cannot extract {archive.name}: {e}") from e
    return out_dir / base


def _unpack_zst(archive: Path, workdir: Path, base: str) -> Path:
    ensure_tools(["zstd"])
    out = workdir / base
    try:
        with out.open("wb") as fh:
            r = subprocess.run(
                ["zstd", "-d", "-c", str(archive)],
                stdout=fh,
                stderr=subprocess.PIPE,
                text=False,
            )
    except OSError as e:
        raise UnpackError(f"cannot decompress {archive.name}: {e}") from e
    if r.returncode != 0:
        detail = r.stderr.decode("utf-8", "replace").strip() if r.stderr else ""
        raise UnpackError(f"zstd failed on {archive.name}: {detail or f'exit {r.returncode}'}")
    return out


def _unpack_zip(archive: Path, workdir: Path, base: str) -> Path:
    out_dir = workdir / UNPACK_DIR
    out_dir.mkdir(parents=True, exist_ok=True)
    try:
        with zipfile.ZipFile(archive) as zf:
            if base in zf.namelist():
                zf.extract(base, out_dir)
    except (zipfile.BadZipFile, OSError) as e:
        raise UnpackError(f"cannot extract {archive.name}: {e}") from e
    return out_dir / base


_UNPACKERS = {
    "tar.gz": _unpack_tar_gz,
    "zst": _unpack_zst,
    "zip": _unpack_zip,
}


def unpack(archive: Path, workdir: Path) -> Path:
    """Extract ``archive`` inside ``workdir`` and return the expected binary path.

    The returned path is not checked; the caller verifies it exists.
    """
    base, fmt = split_asset_name(archive.name)
    logger.debug("Unpacking %s (%s)", archive.name, fmt)
    return _UNPACKERS[fmt](archive, workdir, base)
