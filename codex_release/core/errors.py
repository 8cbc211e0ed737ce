"""
Error taxonomy — every terminal failure the pipelines can raise.

Services raise these; the CLI layer catches ``ReleaseToolError`` once,
prints the single-line message and exits non-zero.

    MissingToolError    required external tool not on PATH
    ResolutionError     nothing matches (target, release, asset, tag)
    FetchError          download / unpack failed
    InstallError        placing the binary failed
    BuildError          smoke tests or release build failed

Soft failures (version probes, cleanup) are logged, never raised.
"""

from __future__ import annotations


class ReleaseToolError(Exception):
    """Base class for terminal pipeline errors."""


# ── Environment ─────────────────────────────────────────────────


class MissingToolError(ReleaseToolError):
    """A required external tool is not installed."""

    def __init__(self, tool: str, purpose: str = "") -> None:
        self.tool = tool
        detail = f" to {purpose}" if purpose else ""
        super().__init__(f"{tool} is required{detail}")


# ── Resolution ──────────────────────────────────────────────────


class ResolutionError(ReleaseToolError):
    """Nothing satisfies the requested criterion."""


class UnsupportedTargetError(ResolutionError):
    """Host OS/arch combination has no known target triple."""


class NoReleaseError(ResolutionError):
    """No published release carries an asset for the target."""


class NoAssetError(ResolutionError):
    """The chosen release has no asset for the target."""


class NoTagError(ResolutionError):
    """No build tag matches the required prefix."""


class InvalidTagError(ResolutionError):
    """An explicit build tag lacks the required prefix."""


# ── Transient I/O ───────────────────────────────────────────────


class FetchError(ReleaseToolError):
    """Download from the release host failed."""


class UnpackError(FetchError):
    """The downloaded asset could not be extracted."""


class BinaryNotFoundError(FetchError):
    """Extraction finished but the expected binary is missing."""


# ── Placement / build ───────────────────────────────────────────


class InstallError(ReleaseToolError):
    """The binary could not be placed at its destination."""


class BuildError(ReleaseToolError):
    """A build step (smoke tests or release build) failed."""

    def __init__(self, step: str, message: str) -> None:
        self.step = step
        super().__init__(message)
