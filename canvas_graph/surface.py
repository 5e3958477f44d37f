# surface.py

"""
Drawing surfaces for the canvas graph renderer.

DrawingSurface is the immediate-mode interface the render pipeline paints
through: lines, rounded rectangles, ellipses, text and text metrics, in the
surface's local pixel space (origin top-left, y growing downwards).

MatplotlibSurface implements it on a matplotlib Axes whose data
coordinates are those pixels. overlay() returns a second, independent,
transparent layer covering the same area, used for hover feedback.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional, Tuple

import matplotlib.pyplot as plt
import matplotlib.patheffects as patheffects
from matplotlib.patches import Ellipse, FancyBboxPatch
from matplotlib.textpath import TextPath

from .styling import to_rgba


# =============================================================================
# Interface
# =============================================================================

class DrawingSurface(ABC):
    """Immediate-mode 2D drawing context."""

    width: float
    height: float

    @abstractmethod
    def clear(self) -> None:
        ...

    @abstractmethod
    def line(self, x0: float, y0: float, x1: float, y1: float, color: Any, width: float) -> None:
        ...

    @abstractmethod
    def rounded_rect(
        self,
        x: float,
        y: float,
        w: float,
        h: float,
        radius: float,
        fill: Any,
        edge_color: Optional[Any] = None,
        line_width: float = 0.0,
        shadow_color: Optional[Any] = None,
    ) -> None:
        ...

    @abstractmethod
    def ellipse(self, cx: float, cy: float, rx: float, ry: float, edge_color: Any, line_width: float) -> None:
        ...

    @abstractmethod
    def text(
        self,
        x: float,
        y: float,
        s: str,
        color: Any,
        font_size: float,
        ha: str = "center",
        va: str = "center",
    ) -> None:
        ...

    @abstractmethod
    def measure_text(self, s: str, font_size: float) -> Tuple[float, float]:
        """(width, height) of ``s`` in surface pixels."""

    def present(self) -> None:
        """Flush pending drawing to the host. No-op by default."""


# =============================================================================
# matplotlib implementation
# =============================================================================

class MatplotlibSurface(DrawingSurface):
    """
    DrawingSurface over a matplotlib Axes.

    Each primitive gets a strictly increasing zorder so later calls paint
    over earlier ones, as on an immediate-mode canvas.
    """

    def __init__(
        self,
        ax,
        width: float,
        height: float,
        *,
        background_color: Optional[Any] = "#ffffff",
    ) -> None:
        self.ax = ax
        self.figure = ax.figure
        self.width = float(width)
        self.height = float(height)
        self.background_color = background_color
        self._z = 0
        self._configure()

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def create(
        cls,
        width: float,
        height: float,
        *,
        background_color: Any = "#ffffff",
        dpi: int = 72,
    ) -> "MatplotlibSurface":
        """New figure sized so one data unit is one pixel."""
        fig = plt.figure(
            figsize=(width / dpi, height / dpi),
            dpi=dpi,
            facecolor=to_rgba(background_color),
        )
        ax = fig.add_axes((0.0, 0.0, 1.0, 1.0))
        return cls(ax, width, height, background_color=background_color)

    def overlay(self) -> "MatplotlibSurface":
        """Transparent layer stacked above this one, sharing its extent."""
        ax = self.figure.add_axes(self.ax.get_position(), frameon=False)
        ax.set_zorder(self.ax.get_zorder() + 1)
        return MatplotlibSurface(ax, self.width, self.height, background_color=None)

    def _configure(self) -> None:
        ax = self.ax
        ax.set_xlim(0.0, self.width)
        ax.set_ylim(self.height, 0.0)
        ax.set_xticks([])
        ax.set_yticks([])
        ax.grid(False)
        for spine in ax.spines.values():
            spine.set_visible(False)
        if self.background_color is None:
            ax.patch.set_alpha(0.0)
        else:
            ax.set_facecolor(to_rgba(self.background_color))

    def _next_z(self) -> int:
        self._z += 1
        return self._z

    def _pt(self, px: float) -> float:
        """Surface pixels -> typographic points."""
        return float(px) * 72.0 / float(self.figure.dpi)

    # ------------------------------------------------------------------
    # DrawingSurface
    # ------------------------------------------------------------------

    def clear(self) -> None:
        self.ax.cla()
        self._z = 0
        self._configure()

    def line(self, x0, y0, x1, y1, color, width) -> None:
        self.ax.plot(
            [x0, x1],
            [y0, y1],
            color=to_rgba(color),
            linewidth=self._pt(width),
            solid_capstyle="round",
            zorder=self._next_z(),
        )

    def rounded_rect(
        self,
        x,
        y,
        w,
        h,
        radius,
        fill,
        edge_color=None,
        line_width=0.0,
        shadow_color=None,
    ) -> None:
        patch = FancyBboxPatch(
            (x, y),
            w,
            h,
            boxstyle=f"round,pad=0,rounding_size={max(0.0, float(radius))}",
            facecolor=to_rgba(fill),
            edgecolor=to_rgba(edge_color) if edge_color is not None else "none",
            linewidth=self._pt(line_width),
            zorder=self._next_z(),
        )
        if shadow_color is not None:
            patch.set_path_effects(
                [
                    patheffects.withSimplePatchShadow(
                        offset=(2, -2),
                        shadow_rgbFace=to_rgba(shadow_color)[:3],
                        alpha=0.6,
                    ),
                    patheffects.Normal(),
                ]
            )
        self.ax.add_patch(patch)

    def ellipse(self, cx, cy, rx, ry, edge_color, line_width) -> None:
        self.ax.add_patch(
            Ellipse(
                (cx, cy),
                2.0 * rx,
                2.0 * ry,
                fill=False,
                edgecolor=to_rgba(edge_color),
                linewidth=self._pt(line_width),
                zorder=self._next_z(),
            )
        )

    def text(self, x, y, s, color, font_size, ha="center", va="center") -> None:
        self.ax.text(
            x,
            y,
            s,
            color=to_rgba(color),
            fontsize=self._pt(font_size),
            ha=ha,
            va=va,
            zorder=self._next_z(),
        )

    def measure_text(self, s: str, font_size: float) -> Tuple[float, float]:
        if not s:
            return 0.0, 0.0
        bbox = TextPath((0.0, 0.0), s, size=self._pt(font_size)).get_extents()
        scale = float(self.figure.dpi) / 72.0
        return float(bbox.width) * scale, float(bbox.height) * scale

    def present(self) -> None:
        self.figure.canvas.draw_idle()

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def save(self, outfile: str) -> None:
        self.figure.savefig(outfile, dpi=self.figure.dpi, facecolor=self.figure.get_facecolor())

    def close(self) -> None:
        plt.close(self.figure)
