"""
PlatformTarget — the canonical target triple a binary is built for.

Computed once per invocation, either from the host (see
``core.services.target``) or from an operator override.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict

OsFamily = Literal["mac", "linux", "windows", "other"]

# Triple fragment → OS family, checked in order.
_TRIPLE_FAMILIES: tuple[tuple[str, OsFamily], ...] = (
    ("apple-darwin", "mac"),
    ("windows", "windows"),
    ("linux", "linux"),
)


class PlatformTarget(BaseModel):
    """An immutable ``{os, arch}`` pair and its target triple."""

    model_config = ConfigDict(frozen=True)

    triple: str
    os_family: OsFamily = "other"
    arch: str = ""

    @property
    def is_windows(self) -> bool:
        return self.os_family == "windows"

    @classmethod
    def from_triple(cls, triple: str) -> PlatformTarget:
        """Build a target from an explicit triple.

        The triple is trusted as given; only the OS family and the
        architecture are inferred so the destination and asset tables
        can be consulted.
        """
        family: OsFamily = "other"
        for fragment, candidate in _TRIPLE_FAMILIES:
            if fragment in triple:
                family = candidate
                break
        return cls(triple=triple, os_family=family, arch=triple.split("-", 1)[0])

    def __str__(self) -> str:
        return self.triple
