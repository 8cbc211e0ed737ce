"""
Release and asset selection.

Release selection is extension-major: every release is scanned for the
primary archive format before any release is considered for the
secondary one. An older release with a ``.tar.gz`` therefore beats a
newer one that only ships ``.zst``.

The search probes the plain ``<binary>-<triple>.<ext>`` name on every
platform. Per-platform asset names (ASSET_NAMING) apply only once a
release is chosen, so adding a platform is a table change.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable

from codex_release.core.errors import NoAssetError, NoReleaseError
from codex_release.core.models.platform import OsFamily, PlatformTarget
from codex_release.core.models.release import AssetCandidate, ReleaseDescriptor
from codex_release.core.services import gh_ops

logger = logging.getLogger(__name__)

# Extensions probed while searching for a release, in priority order
RELEASE_SEARCH_EXTENSIONS: tuple[str, ...] = ("tar.gz", "zst")

# OS family → (executable suffix, asset extensions in priority order)
ASSET_NAMING: dict[OsFamily, tuple[str, tuple[str, ...]]] = {
    "windows": (".exe", ("tar.gz", "zst", "zip")),
}
_DEFAULT_NAMING: tuple[str, tuple[str, ...]] = ("", ("tar.gz", "zst"))

ReleaseLister = Callable[..., list[ReleaseDescriptor]]


def asset_candidates(target: PlatformTarget, binary_name: str = "codex") -> AssetCandidate:
    """Ordered asset names acceptable for ``target``."""
    suffix, extensions = ASSET_NAMING.get(target.os_family, _DEFAULT_NAMING)
    return AssetCandidate(
        binary_name=binary_name,
        target=target,
        extensions=extensions,
        exe_suffix=suffix,
    )


def newest_first(releases: Iterable[ReleaseDescriptor]) -> list[ReleaseDescriptor]:
    """Published releases, newest ``created_at`` first."""
    published = [r for r in releases if not r.is_draft]
    return sorted(published, key=lambda r: r.created_at, reverse=True)


def pick_release(
    releases: Iterable[ReleaseDescriptor],
    target: PlatformTarget,
    binary_name: str = "codex",
    extensions: tuple[str, ...] = RELEASE_SEARCH_EXTENSIONS,
) -> ReleaseDescriptor:
    """Pick the release to install from a release list.

    Raises:
        NoReleaseError: No published release has an asset for ``target``.
    """
    ordered = newest_first(releases)

    for ext in extensions:
        # no executable suffix here, even on windows
        wanted = f"{binary_name}-{target.triple}.{ext}"
        for release in ordered:
            if release.has_asset(wanted):
                logger.debug("Release %s carries %s", release.tag, wanted)
                return release

    raise NoReleaseError(f"no suitable release found for {target.triple}")


def select_release(
    repo: str,
    target: PlatformTarget,
    *,
    tag: str | None = None,
    binary_name: str = "codex",
    page_size: int = 100,
    lister: ReleaseLister | None = None,
) -> str:
    """Return the tag to install.

    An explicit ``tag`` is returned unchanged without querying the host.
    """
    if tag:
        return tag

    lister = lister or gh_ops.list_releases
    releases = lister(repo, per_page=page_size)
    logger.debug("Fetched %d releases for %s", len(releases), repo)
    return pick_release(releases, target, binary_name).tag


def select_asset(
    release: ReleaseDescriptor,
    target: PlatformTarget,
    binary_name: str = "codex",
) -> str:
    """Pick exactly one asset name from ``release`` for ``target``.

    Raises:
        NoAssetError: None of the candidate names is attached.
    """
    name = asset_candidates(target, binary_name).first_present(release.asset_names)
    if name is None:
        raise NoAssetError(f"no suitable asset found for {target.triple} in {release.tag}")
    return name
