"""
Build models — tags, orchestrator states, and the record of one run.

The orchestrator is a linear state machine:

    idle → tag_resolved → isolated → tested → built → verified → cleaned_up
                                  ╰──────────╯ (tests skipped)   ╰ retained

``BuildRun.advance()`` enforces that order; anything else is a
programming error.
"""

from __future__ import annotations

import re
from datetime import UTC, datetime
from enum import StrEnum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# core version, optional pre-release, optional build metadata
_VERSION_RE = re.compile(
    r"^(?P<core>\d+(?:\.\d+)*)(?:-(?P<pre>[0-9A-Za-z.-]+))?(?:\+[0-9A-Za-z.-]+)?$"
)


class BuildTag(BaseModel):
    """A version tag such as ``rust-v0.32.0-alpha.20250910``."""

    model_config = ConfigDict(frozen=True)

    name: str
    prefix: str = "rust-v"

    @property
    def has_prefix(self) -> bool:
        return self.name.startswith(self.prefix)

    @property
    def version(self) -> str:
        return self.name[len(self.prefix):] if self.has_prefix else self.name

    def sort_key(self) -> tuple:
        """Semver-like ordering key.

        Releases sort above their pre-releases; numeric pre-release
        identifiers compare numerically. Unparseable tags sort below
        every parseable one.
        """
        m = _VERSION_RE.match(self.version)
        if not m:
            return (0, (), (0, ()), self.version)

        core = tuple(int(part) for part in m["core"].split("."))
        pre = m["pre"]
        if pre is None:
            pre_key: tuple = (1, ())
        else:
            pre_key = (0, tuple(
                (0, int(p), "") if p.isdigit() else (1, 0, p)
                for p in pre.split(".")
            ))
        return (1, core, pre_key, "")

    def branch_name(self, when: datetime | None = None) -> str:
        """Disposable branch name: ``build-<tag>-<UTC timestamp>``."""
        stamp = (when or datetime.now(UTC)).strftime("%Y%m%d%H%M%S")
        return f"build-{self.name.replace('/', '-')}-{stamp}"

    def __str__(self) -> str:
        return self.name


def latest_tag(names: list[str], prefix: str) -> BuildTag | None:
    """Pick the highest-versioned tag carrying ``prefix``."""
    tags = [BuildTag(name=n, prefix=prefix) for n in names if n.startswith(prefix)]
    if not tags:
        return None
    return max(tags, key=lambda t: t.sort_key())


class BuildState(StrEnum):
    IDLE = "idle"
    TAG_RESOLVED = "tag_resolved"
    ISOLATED = "isolated"
    TESTED = "tested"
    BUILT = "built"
    VERIFIED = "verified"
    CLEANED_UP = "cleaned_up"
    RETAINED = "retained"


# state → states it may move to
_TRANSITIONS: dict[BuildState, tuple[BuildState, ...]] = {
    BuildState.IDLE: (BuildState.TAG_RESOLVED,),
    BuildState.TAG_RESOLVED: (BuildState.ISOLATED,),
    BuildState.ISOLATED: (BuildState.TESTED, BuildState.BUILT),
    BuildState.TESTED: (BuildState.BUILT,),
    BuildState.BUILT: (BuildState.VERIFIED,),
    BuildState.VERIFIED: (BuildState.CLEANED_UP, BuildState.RETAINED),
    BuildState.CLEANED_UP: (),
    BuildState.RETAINED: (),
}


class BuildRun(BaseModel):
    """Record of one Build Orchestrator invocation."""

    tag: BuildTag | None = None
    base_ref: str = ""
    branch: str = ""
    states: list[BuildState] = Field(default_factory=lambda: [BuildState.IDLE])
    tests_skipped: bool = False
    binary_path: Path | None = None
    version_output: str = ""
    help_excerpt: str = ""
    retained: bool = False
    cleanup_warnings: list[str] = Field(default_factory=list)

    @property
    def state(self) -> BuildState:
        return self.states[-1]

    def advance(self, target: BuildState) -> None:
        """Move to ``target``; raises ValueError on an illegal transition."""
        if target not in _TRANSITIONS[self.state]:
            raise ValueError(f"Illegal build transition {self.state.value} → {target.value}")
        self.states.append(target)

    def to_dict(self) -> dict[str, Any]:
        return {
            "tag": self.tag.name if self.tag else None,
            "base": self.base_ref,
            "branch": self.branch,
            "states": [s.value for s in self.states],
            "tests_skipped": self.tests_skipped,
            "binary": str(self.binary_path) if self.binary_path else None,
            "version": self.version_output,
            "retained": self.retained,
            "cleanup_warnings": list(self.cleanup_warnings),
        }
