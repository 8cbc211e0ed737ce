"""
Release and asset models — what the hosting API tells us about a tag.

ReleaseDescriptor mirrors one release record verbatim. AssetCandidate
is the ordered list of file names we are willing to install for a
target, most preferred first.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Iterable

from pydantic import BaseModel, ConfigDict, Field

from codex_release.core.models.platform import PlatformTarget


class ReleaseDescriptor(BaseModel):
    """One release record: tag, draft flag, creation time, asset names."""

    model_config = ConfigDict(frozen=True)

    tag: str
    is_draft: bool = False
    created_at: datetime
    asset_names: frozenset[str] = Field(default_factory=frozenset)

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> ReleaseDescriptor:
        """Build from a GitHub release JSON object."""
        assets = payload.get("assets") or []
        return cls(
            tag=payload["tag_name"],
            is_draft=bool(payload.get("draft", False)),
            created_at=payload["created_at"],
            asset_names=frozenset(a["name"] for a in assets if a.get("name")),
        )

    def has_asset(self, name: str) -> bool:
        return name in self.asset_names


class AssetCandidate(BaseModel):
    """Ordered asset file names for one target.

    Names follow ``<binary>-<triple><exe_suffix>.<extension>``; the
    order of ``extensions`` is the preference order.
    """

    model_config = ConfigDict(frozen=True)

    binary_name: str
    target: PlatformTarget
    extensions: tuple[str, ...]
    exe_suffix: str = ""

    @property
    def stem(self) -> str:
        return f"{self.binary_name}-{self.target.triple}{self.exe_suffix}"

    def name_for(self, extension: str) -> str:
        return f"{self.stem}.{extension}"

    @property
    def names(self) -> list[str]:
        return [self.name_for(ext) for ext in self.extensions]

    def first_present(self, available: Iterable[str]) -> str | None:
        """Return the most preferred name found in ``available``."""
        present = set(available)
        for name in self.names:
            if name in present:
                return name
        return None
