"""Asset loading — decodes a frame asset fully into memory."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import numpy as np

from frameflip.assets.decoder import AssetDecoder, AssetInfo

logger = logging.getLogger(__name__)


@dataclass
class LoadedAsset:
    """A decoded asset, ready to be shown by an image-source render pass."""

    info: AssetInfo
    frames: list[np.ndarray]

    @property
    def frame_count(self) -> int:
        return len(self.frames)

    @property
    def nbytes(self) -> int:
        return sum(frame.nbytes for frame in self.frames)


def load_asset(path: str | Path) -> LoadedAsset:
    """Load an asset file, decoding all frames into memory.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If no frames could be decoded.
    """
    path = Path(path)
    logger.debug("Loading asset: %s", path)

    with AssetDecoder(path) as decoder:
        info = decoder.info
        assert info is not None
        frames = decoder.decode_all_frames()

    if not frames:
        raise ValueError(f"No frames decoded from {path}")

    logger.debug("Loaded %d frame(s) (%dx%d) from %s", len(frames), info.width, info.height, path.name)
    return LoadedAsset(info=info, frames=frames)
