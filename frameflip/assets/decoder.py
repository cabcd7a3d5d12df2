"""Still-image and animation decoding via Pillow and PyAV."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import av
import numpy as np
from PIL import Image

logger = logging.getLogger(__name__)

STILL_IMAGE_SUFFIXES = frozenset({".png", ".jpg", ".jpeg", ".bmp", ".tga", ".tif", ".tiff"})


@dataclass
class AssetInfo:
    """Metadata about a decoded asset file."""

    path: Path
    width: int
    height: int
    frame_count: int
    fps: float
    has_alpha: bool


class AssetDecoder:
    """Decodes an asset file into RGBA numpy arrays.

    Still images (PNG, JPEG, ...) decode to a single frame with Pillow.
    Everything else (GIF, APNG, WebM, MP4) goes through PyAV (FFmpeg).
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        if not self.path.exists():
            raise FileNotFoundError(f"Asset file not found: {self.path}")

        self._still = self.path.suffix.lower() in STILL_IMAGE_SUFFIXES
        self._image: Image.Image | None = None
        self._container: av.container.InputContainer | None = None
        self._stream: av.video.stream.VideoStream | None = None
        self._info: AssetInfo | None = None

    @property
    def info(self) -> AssetInfo | None:
        return self._info

    def open(self) -> AssetInfo:
        """Open the file and read its metadata."""
        if self._still:
            self._image = Image.open(self.path)
            self._info = AssetInfo(
                path=self.path,
                width=self._image.width,
                height=self._image.height,
                frame_count=1,
                fps=0.0,
                has_alpha="A" in self._image.getbands(),
            )
            return self._info

        self._container = av.open(str(self.path))
        self._stream = self._container.streams.video[0]
        stream = self._stream

        if stream.average_rate:
            fps = float(stream.average_rate)
        elif stream.guessed_rate:
            fps = float(stream.guessed_rate)
        else:
            fps = 30.0  # fallback

        pix_fmt = stream.codec_context.pix_fmt or ""
        self._info = AssetInfo(
            path=self.path,
            width=stream.codec_context.width,
            height=stream.codec_context.height,
            frame_count=stream.frames or 0,
            fps=fps,
            has_alpha="a" in pix_fmt,
        )
        return self._info

    def decode_all_frames(self) -> list[np.ndarray]:
        """Decode all frames into RGBA arrays of shape (height, width, 4), dtype uint8."""
        if self._image is not None:
            return [np.asarray(self._image.convert("RGBA"))]

        if not self._container:
            raise RuntimeError("Decoder not opened. Call open() first.")

        self._container.seek(0, stream=self._stream)
        frames = [frame.to_ndarray(format="rgba") for frame in self._container.decode(video=0)]
        if self._info is not None:
            self._info.frame_count = len(frames)
        return frames

    def close(self) -> None:
        """Release decoder resources."""
        if self._image is not None:
            self._image.close()
            self._image = None
        if self._container:
            self._container.close()
            self._container = None
        self._stream = None

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
