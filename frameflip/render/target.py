"""Render target: the visual surface renderer adapters mutate."""

from __future__ import annotations

from dataclasses import dataclass, field

from frameflip.constants import IMAGE_TAGS


@dataclass
class SpriteElement:
    """A sprite surface described by its tag, inline style and image source.

    Adapters write CSS-like declarations (``background-position``,
    ``transform``, ``top``/``left``) into :attr:`style`, or swap :attr:`src`
    for image elements.
    """

    tag: str = "div"
    style: dict[str, str] = field(default_factory=dict)
    src: str = ""

    @property
    def is_image(self) -> bool:
        return self.tag.lower() in IMAGE_TAGS
