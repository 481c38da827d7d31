from __future__ import annotations

"""Configuration for rendering network plots."""

import os
from dataclasses import dataclass
from typing import Mapping

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class PlotConfig:
    """Defaults shared by the CLI and the quick visualization helpers."""

    layout: str = "fr"
    seed: int | None = 42
    width: int = 1200
    height: int = 800
    dark_mode: bool = False
    title: str | None = None

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            msg = f"Plot size must be positive, got {self.width}x{self.height}"
            raise ValueError(msg)
        object.__setattr__(self, "layout", self.layout.strip().lower())

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "PlotConfig":
        """Build a config from ``GRAPHGG_*`` environment variables."""

        env = os.environ if environ is None else environ
        kwargs: dict[str, object] = {}
        if env.get("GRAPHGG_LAYOUT"):
            kwargs["layout"] = env["GRAPHGG_LAYOUT"]
        if env.get("GRAPHGG_SEED"):
            seed = env["GRAPHGG_SEED"]
            kwargs["seed"] = None if seed.lower() == "none" else int(seed)
        if env.get("GRAPHGG_WIDTH"):
            kwargs["width"] = int(env["GRAPHGG_WIDTH"])
        if env.get("GRAPHGG_HEIGHT"):
            kwargs["height"] = int(env["GRAPHGG_HEIGHT"])
        if env.get("GRAPHGG_DARK_MODE"):
            kwargs["dark_mode"] = env["GRAPHGG_DARK_MODE"].strip().lower() in _TRUE_VALUES
        return cls(**kwargs)

    def layout_params(self) -> dict[str, object]:
        """Return layout keyword arguments implied by this config."""

        if self.layout in ("fr", "spring", "random") and self.seed is not None:
            return {"seed": self.seed}
        return {}


__all__ = ["PlotConfig"]
