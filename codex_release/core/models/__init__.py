"""
Domain models — Pydantic types for release installs and local builds.

All models are re-exported here for convenient access:

    from codex_release.core.models import PlatformTarget, ReleaseDescriptor, BuildRun
"""

from codex_release.core.models.build import BuildRun, BuildState, BuildTag, latest_tag
from codex_release.core.models.config import BuildSettings, InstallSettings, ReleaseConfig
from codex_release.core.models.install import InstallOptions, InstallResult
from codex_release.core.models.platform import OsFamily, PlatformTarget
from codex_release.core.models.release import AssetCandidate, ReleaseDescriptor

__all__ = [
    # release.py
    "AssetCandidate",
    # build.py
    "BuildRun",
    "BuildSettings",
    "BuildState",
    "BuildTag",
    # install.py
    "InstallOptions",
    "InstallResult",
    # config.py
    "InstallSettings",
    # platform.py
    "OsFamily",
    "PlatformTarget",
    "ReleaseConfig",
    "ReleaseDescriptor",
    "latest_tag",
]
