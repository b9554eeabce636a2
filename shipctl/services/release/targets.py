from __future__ import annotations

from dataclasses import dataclass

__all__ = ["BuildTarget", "TARGET_PLATFORMS", "build_targets"]

# (GOOS, GOARCH), in build order.
TARGET_PLATFORMS: tuple[tuple[str, str], ...] = (
    ("darwin", "amd64"),
    ("darwin", "arm64"),
    ("linux", "amd64"),
    ("linux", "arm64"),
    ("windows", "amd64"),
    ("windows", "arm64"),
)


@dataclass(frozen=True, slots=True)
class BuildTarget:
    """One cross-compilation target and the artifact it produces."""

    os: str
    arch: str
    output_name: str

    @property
    def env(self) -> dict[str, str]:
        """Environment overrides selecting this target."""
        return {"GOOS": self.os, "GOARCH": self.arch, "CGO_ENABLED": "0"}


def build_targets(product: str) -> tuple[BuildTarget, ...]:
    """The six release targets, named ``<product>-<os>-<arch>[.exe]``."""
    out: list[BuildTarget] = []
    for goos, goarch in TARGET_PLATFORMS:
        suffix = ".exe" if goos == "windows" else ""
        name = f"{product}-{goos}-{goarch}{suffix}"
        out.append(BuildTarget(os=goos, arch=goarch, output_name=name))
    return tuple(out)
