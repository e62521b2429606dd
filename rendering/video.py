"""
Video sink - streams rendered frames into an ffmpeg process through imageio.

Appending blocks until ffmpeg has taken the frame, so the producer can never
run ahead of the encoder. A rejected frame raises FrameSinkError; callers
retry it or give up, frames are never skipped.
"""

from pathlib import Path
from typing import List, Optional

import imageio
import numpy as np


class FrameSinkError(RuntimeError):
    """The sink did not accept a frame. Retrying the same frame is allowed."""

    def __init__(self, frame_index: int, message: str):
        super().__init__(f"Frame {frame_index} rejected: {message}")
        self.frame_index = frame_index


# suffix -> (codec, pixel format, bitrate, extra ffmpeg output params)
VIDEO_FORMATS = {
    '.webm': ('libvpx-vp9', 'yuva420p', '4M', ['-auto-alt-ref', '0']),
    '.mp4': ('libx264', 'yuv420p', None, []),
}


class VideoSink:
    def __init__(self, output_path: str, fps: int = 30, codec: Optional[str] = None,
                 pixel_format: Optional[str] = None, bitrate: Optional[str] = None,
                 extra_params: Optional[List[str]] = None):
        self.output_path = Path(output_path)
        suffix = self.output_path.suffix.lower()
        if suffix not in VIDEO_FORMATS and codec is None:
            raise ValueError(
                f"Unsupported video format '{suffix}'. Use one of: {', '.join(VIDEO_FORMATS)}"
            )
        default_codec, default_pix_fmt, default_bitrate, default_params = VIDEO_FORMATS.get(
            suffix, (codec, pixel_format, bitrate, [])
        )
        self.fps = fps
        self.codec = codec or default_codec
        self.pixel_format = pixel_format or default_pix_fmt
        self.bitrate = bitrate or default_bitrate
        self.extra_params = list(default_params if extra_params is None else extra_params)
        self.frames_written = 0
        self._writer = None

    def open(self) -> 'VideoSink':
        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        self._writer = imageio.get_writer(
            str(self.output_path),
            format='FFMPEG',
            mode='I',
            fps=self.fps,
            codec=self.codec,
            pixelformat=self.pixel_format,
            bitrate=self.bitrate,
            quality=None if self.bitrate else 8,
            output_params=self.extra_params,
            macro_block_size=2,
        )
        return self

    def append(self, frame: np.ndarray):
        if self._writer is None:
            raise FrameSinkError(self.frames_written, "sink is not open")
        try:
            self._writer.append_data(frame)
        except (OSError, RuntimeError) as exc:
            raise FrameSinkError(self.frames_written, str(exc)) from exc
        self.frames_written += 1

    def close(self):
        if self._writer is not None:
            self._writer.close()
            self._writer = None

    def __enter__(self) -> 'VideoSink':
        return self.open()

    def __exit__(self, *args):
        self.close()


def append_with_retry(sink, frame: np.ndarray, frame_index: int, max_retries: int = 2):
    """Hand one frame to the sink, retrying a rejected write up to max_retries times."""
    attempt = 0
    while True:
        try:
            sink.append(frame)
            return
        except FrameSinkError as exc:
            if attempt >= max_retries:
                raise FrameSinkError(frame_index, f"gave up after {attempt + 1} attempts ({exc})") from exc
            attempt += 1
            print(f"Warning: frame {frame_index} rejected, retrying ({attempt}/{max_retries})")
