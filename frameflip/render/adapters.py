"""Renderer adapters — turn a frame index into a mutation of the render target.

One adapter per visual-mutation strategy, selected by ``draw_type``:

- background: ``background-position`` percentages (boundary-indexed steps)
- transform:  ``translate()`` percentages (frame-indexed steps)
- offset:     negative ``top`` / ``left`` in whole-frame percentages
- image_source: swaps ``src`` to the frame's asset

Adapters receive an already-normalized frame index. If the target lacks the
capability an adapter needs, the adapter logs a warning once and every call
becomes a no-op.
"""

from __future__ import annotations

import logging
from collections.abc import MutableMapping
from typing import Any, Callable

from frameflip.config import AnimationConfig, Direction, DrawType, LayoutAxis
from frameflip.constants import IMAGE_TAGS
from frameflip.timing.frames import SpriteLayout

logger = logging.getLogger(__name__)


def format_percent(value: float) -> str:
    """Format a percentage without trailing zeros (``0``, ``100``, ``4.3478``)."""
    text = f"{value:.4f}".rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text


class RendererAdapter:
    """Base adapter. Subclasses implement :meth:`_draw` and :meth:`_clear`."""

    name = "renderer"

    def __init__(self, target: Any, layout: SpriteLayout) -> None:
        self.target = target
        self.layout = layout
        self.enabled = target is not None and self.accepts(target)
        if not self.enabled:
            logger.warning(
                "Render target %r cannot accept %s rendering; frames will not be drawn",
                target, self.name,
            )

    @classmethod
    def accepts(cls, target: Any) -> bool:
        """True if ``target`` exposes the capability this adapter mutates."""
        return isinstance(getattr(target, "style", None), MutableMapping)

    def render(self, frame_index: int, direction: Direction = Direction.LTR) -> None:
        if self.enabled:
            self._draw(frame_index, direction)

    def clear(self) -> None:
        """Remove any visual mutation this adapter applied."""
        if self.enabled:
            self._clear()

    def detach(self) -> None:
        """Drop the reference to the render target."""
        self.target = None
        self.enabled = False

    def _draw(self, frame_index: int, direction: Direction) -> None:
        raise NotImplementedError

    def _clear(self) -> None:
        raise NotImplementedError


class BackgroundPositionAdapter(RendererAdapter):
    name = "background-position"

    def position(self, frame_index: int) -> str:
        layout = self.layout
        if layout.grid:
            row, column = layout.locate(frame_index)
            row_percent, column_percent = layout.percent_steps(boundary=True)
            return f"{format_percent(column * column_percent)}% {format_percent(row * row_percent)}%"
        offset = format_percent(frame_index * layout.linear_step(boundary=True))
        if layout.axis is LayoutAxis.HORIZONTAL:
            return f"{offset}% 0"
        return f"0 {offset}%"

    def _draw(self, frame_index: int, direction: Direction) -> None:
        self.target.style["background-position"] = self.position(frame_index)

    def _clear(self) -> None:
        self.target.style.pop("background-position", None)


class TransformAdapter(RendererAdapter):
    name = "transform"

    def translation(self, frame_index: int) -> str:
        layout = self.layout
        if layout.grid:
            row, column = layout.locate(frame_index)
            row_percent, column_percent = layout.percent_steps(boundary=False)
            return (
                f"translate(-{format_percent(column * column_percent)}%, "
                f"-{format_percent(row * row_percent)}%)"
            )
        offset = format_percent(frame_index * layout.linear_step(boundary=False))
        if layout.axis is LayoutAxis.HORIZONTAL:
            return f"translate(-{offset}%, 0)"
        return f"translate(0, -{offset}%)"

    def _draw(self, frame_index: int, direction: Direction) -> None:
        self.target.style["transform"] = self.translation(frame_index)

    def _clear(self) -> None:
        self.target.style.pop("transform", None)


class OffsetAdapter(RendererAdapter):
    name = "offset"

    def _draw(self, frame_index: int, direction: Direction) -> None:
        row, column = self.layout.locate(frame_index)
        style = self.target.style
        if self.layout.grid:
            style["left"] = f"-{column * 100}%"
            style["top"] = f"-{row * 100}%"
        elif self.layout.axis is LayoutAxis.HORIZONTAL:
            style["left"] = f"-{column * 100}%"
        else:
            style["top"] = f"-{row * 100}%"

    def _clear(self) -> None:
        self.target.style.pop("top", None)
        self.target.style.pop("left", None)


class ImageSourceAdapter(RendererAdapter):
    """Swaps the target's ``src`` to ``asset_list[frame_index]``."""

    name = "image-source"

    def __init__(self, target: Any, layout: SpriteLayout, asset_list: tuple[str, ...] = ()) -> None:
        self.asset_list = tuple(asset_list)
        super().__init__(target, layout)
        if self.enabled and len(self.asset_list) < layout.total:
            logger.warning(
                "asset_list has %d entries for %d frames; missing frames are skipped",
                len(self.asset_list), layout.total,
            )

    @classmethod
    def accepts(cls, target: Any) -> bool:
        return hasattr(target, "src") and str(getattr(target, "tag", "img")).lower() in IMAGE_TAGS

    def _draw(self, frame_index: int, direction: Direction) -> None:
        if 0 <= frame_index < len(self.asset_list):
            self.target.src = self.asset_list[frame_index]
        else:
            logger.debug("No asset for frame %d, skipping", frame_index)

    def _clear(self) -> None:
        if self.asset_list:
            self.target.src = self.asset_list[0]


class CallbackRenderer(RendererAdapter):
    """Adapter around a plain ``render(frame_index, direction)`` callable."""

    name = "callback"

    def __init__(
        self,
        render: Callable[[int, Direction], None],
        clear: Callable[[], None] | None = None,
        layout: SpriteLayout | None = None,
    ) -> None:
        self._render = render
        self._clear_callback = clear
        self.target = render
        self.layout = layout
        self.enabled = True

    @classmethod
    def accepts(cls, target: Any) -> bool:
        return callable(target)

    def _draw(self, frame_index: int, direction: Direction) -> None:
        self._render(frame_index, direction)

    def _clear(self) -> None:
        if self._clear_callback is not None:
            self._clear_callback()


_ADAPTERS: dict[DrawType, type[RendererAdapter]] = {
    DrawType.BACKGROUND: BackgroundPositionAdapter,
    DrawType.TRANSFORM: TransformAdapter,
    DrawType.OFFSET: OffsetAdapter,
}


def create_renderer(config: AnimationConfig, target: Any, layout: SpriteLayout) -> RendererAdapter:
    """Build the adapter selected by ``config.draw_type``."""
    if config.draw_type is DrawType.IMAGE_SOURCE:
        return ImageSourceAdapter(target, layout, config.asset_list)
    return _ADAPTERS[config.draw_type](target, layout)
