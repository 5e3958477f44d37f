"""
Preset configuration for the canvas graph widget.

Three layers of configuration:
  - LayoutSettings: what the layered layout engine needs (canvas size,
    separations, flow direction, node box sizing)
  - GraphStyle: every visual constant used by the default renderer
  - CanvasGraphConfig: the two above plus interaction defaults

load_config() builds a CanvasGraphConfig from environment variables,
falling back to the defaults below.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, asdict, field
from typing import Any, Dict, Optional, Tuple, Union

from .exceptions import ConfigurationError


# Depth sentinel meaning "nothing collapsed on mount".
DEFAULT_COLLAPSE_DEPTH = 99

RANK_DIRECTIONS = ("TB", "BT", "LR", "RL")

Color = Union[str, Tuple[float, float, float, float]]


# --------------------------------------------------------------------------- #
# Layout settings
# --------------------------------------------------------------------------- #

@dataclass
class LayoutSettings:
    width: float = 1800.0
    height: float = 1000.0
    node_sep: float = 20.0
    rank_sep: float = 15.0
    rank_dir: str = "LR"

    # Node boxes are sized from their label before placement.
    node_base_width: float = 50.0
    node_char_width: float = 8.0
    node_height: float = 42.0

    @property
    def is_horizontal(self) -> bool:
        return self.rank_dir in ("LR", "RL")

    @property
    def is_reversed(self) -> bool:
        return self.rank_dir in ("BT", "RL")

    def validate(self) -> "LayoutSettings":
        """Raise ConfigurationError unless every option is usable."""
        if self.width <= 0 or self.height <= 0:
            raise ConfigurationError(
                f"Canvas size must be positive, got {self.width}x{self.height}"
            )
        if self.node_sep < 0 or self.rank_sep < 0:
            raise ConfigurationError(
                f"Separations must be >= 0, got node_sep={self.node_sep}, "
                f"rank_sep={self.rank_sep}"
            )
        if self.rank_dir not in RANK_DIRECTIONS:
            raise ConfigurationError(
                f"Unknown rank_dir {self.rank_dir!r}; expected one of {RANK_DIRECTIONS}"
            )
        if self.node_base_width <= 0 or self.node_height <= 0 or self.node_char_width < 0:
            raise ConfigurationError("Node sizing constants must be positive")
        return self

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# --------------------------------------------------------------------------- #
# Visual style
# --------------------------------------------------------------------------- #

@dataclass
class GraphStyle:
    background_color: Color = "#ffffff"

    node_fill_color: Color = "#dddddd"
    node_edge_color: Color = "black"
    node_text_color: Color = "black"
    node_line_width: float = 3.0
    node_corner_radius: float = 5.0
    node_font_size: float = 18.0
    node_shadow_color: Color = "#AAAAAA"

    link_color: Color = "rgba(200,200,200,.125)"
    link_width: float = 3.0

    # Collapsed indicator: small ellipse right of the node box
    indicator_offset: float = 8.0
    indicator_rx: float = 3.0
    indicator_ry: float = 4.0

    label_font_size: float = 14.0
    label_bg_color: Color = "#dddddd"
    label_text_color: Color = "black"
    label_padding: float = 4.0
    label_height: float = 20.0
    label_offset: float = 15.0
    label_corner_radius: float = 3.0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# --------------------------------------------------------------------------- #
# Widget configuration
# --------------------------------------------------------------------------- #

@dataclass
class CanvasGraphConfig:
    """
    Top-level configuration handed to CanvasGraph.
    """

    settings: LayoutSettings = field(default_factory=LayoutSettings)
    style: GraphStyle = field(default_factory=GraphStyle)
    initial_collapse_depth: int = DEFAULT_COLLAPSE_DEPTH
    link_hit_tolerance: float = 20.0

    def __post_init__(self):
        self.ensure_defaults()

    def ensure_defaults(self) -> None:
        """Idempotent normalisation; callers may pass None for sub-configs."""
        if self.settings is None:
            self.settings = LayoutSettings()
        if self.style is None:
            self.style = GraphStyle()

    def validate(self) -> "CanvasGraphConfig":
        self.settings.validate()
        validate_collapse_depth(self.initial_collapse_depth)
        if self.link_hit_tolerance < 0:
            raise ConfigurationError(
                f"link_hit_tolerance must be >= 0, got {self.link_hit_tolerance}"
            )
        return self

    def to_dict(self) -> Dict[str, Any]:
        return {
            "settings": self.settings.to_dict(),
            "style": self.style.to_dict(),
            "initial_collapse_depth": self.initial_collapse_depth,
            "link_hit_tolerance": self.link_hit_tolerance,
        }


def validate_collapse_depth(depth: Any) -> int:
    # bool is an int subclass but never a meaningful depth
    if isinstance(depth, bool) or not isinstance(depth, int):
        raise ConfigurationError(f"Collapse depth must be an integer, got {depth!r}")
    if depth < 0:
        raise ConfigurationError(f"Collapse depth must be >= 0, got {depth}")
    return depth


def load_config() -> CanvasGraphConfig:
    """
    Load CanvasGraphConfig from environment variables, falling back to defaults.

    Recognized variables:
        CANVAS_GRAPH_WIDTH            (float, pixels)
        CANVAS_GRAPH_HEIGHT           (float, pixels)
        CANVAS_GRAPH_NODE_SEP         (float)
        CANVAS_GRAPH_RANK_SEP         (float)
        CANVAS_GRAPH_RANK_DIR         (TB|BT|LR|RL)
        CANVAS_GRAPH_COLLAPSE_DEPTH   (int >= 0)
        CANVAS_GRAPH_LINK_TOLERANCE   (float >= 0)

    Returns
    -------
    CanvasGraphConfig
    """

    def _env_float(name: str, default: float) -> float:
        val = os.getenv(name)
        if val is None or not val.strip():
            return default
        try:
            return float(val)
        except ValueError:
            raise ConfigurationError(f"{name} must be a number, got {val!r}") from None

    def _env_int(name: str, default: int) -> int:
        val = os.getenv(name)
        if val is None or not val.strip():
            return default
        try:
            return int(val)
        except ValueError:
            raise ConfigurationError(f"{name} must be an integer, got {val!r}") from None

    defaults = LayoutSettings()
    rank_dir: Optional[str] = os.getenv("CANVAS_GRAPH_RANK_DIR")

    settings = LayoutSettings(
        width=_env_float("CANVAS_GRAPH_WIDTH", defaults.width),
        height=_env_float("CANVAS_GRAPH_HEIGHT", defaults.height),
        node_sep=_env_float("CANVAS_GRAPH_NODE_SEP", defaults.node_sep),
        rank_sep=_env_float("CANVAS_GRAPH_RANK_SEP", defaults.rank_sep),
        rank_dir=rank_dir.strip().upper() if rank_dir else defaults.rank_dir,
    )

    cfg = CanvasGraphConfig(
        settings=settings,
        initial_collapse_depth=_env_int(
            "CANVAS_GRAPH_COLLAPSE_DEPTH", DEFAULT_COLLAPSE_DEPTH
        ),
        link_hit_tolerance=_env_float("CANVAS_GRAPH_LINK_TOLERANCE", 20.0),
    )
    return cfg.validate()


# Singleton default config
DEFAULT_CONFIG = CanvasGraphConfig()
