"""Shrink an oversized image below a byte budget by re-encoding it.

The upload page runs the same state machine in ``static/app.js`` before it
sends a large image. Quality is tracked in whole percent so the loop never
depends on accumulated float steps, and ``max_steps`` caps the number of
encodes regardless of how the image responds.

The server never calls this module: compression happens in the browser and
uploads are stored as received. It is the Python reference for the browser
loop and is exercised by the test suite.
"""

import io
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from PIL import Image

COMPRESSION_THRESHOLD_BYTES = 10 * 1024 * 1024
DIMENSION_LIMITS = (3000, 2000)
START_QUALITY = 90
QUALITY_STEP = 15
QUALITY_FLOOR = 25
SHRINK_BELOW_QUALITY = 50
SHRINK_PERCENT = 85
MAX_STEPS = 8

Encoder = Callable[[Any, int, int, int], bytes]


@dataclass(slots=True, frozen=True)
class CompressionState:
    width: int
    height: int
    quality: int
    step: int = 0


@dataclass(slots=True)
class CompressionResult:
    data: bytes
    width: int
    height: int
    quality: float
    steps: int


def _round(value: float) -> int:
    # Same rounding as Math.round in the browser, never below one pixel.
    return max(1, int(value + 0.5))


def should_compress(mime_type: str | None, size: int, threshold: int = COMPRESSION_THRESHOLD_BYTES) -> bool:
    return (mime_type or "").startswith("image/") and size > threshold


def initial_state(width: int, height: int) -> CompressionState:
    largest = max(width, height)
    for limit in DIMENSION_LIMITS:
        if largest > limit:
            scale = limit / largest
            width, height = _round(width * scale), _round(height * scale)
            break
    return CompressionState(width=width, height=height, quality=START_QUALITY)


def advance(state: CompressionState) -> CompressionState:
    quality = state.quality - QUALITY_STEP
    width, height = state.width, state.height
    if quality < SHRINK_BELOW_QUALITY:
        width = _round(width * SHRINK_PERCENT / 100)
        height = _round(height * SHRINK_PERCENT / 100)
    return CompressionState(width=width, height=height, quality=quality, step=state.step + 1)


def encode_jpeg(image: Image.Image, width: int, height: int, quality: int) -> bytes:
    frame = image if image.mode == "RGB" else image.convert("RGB")
    if frame.size != (width, height):
        frame = frame.resize((width, height), Image.Resampling.LANCZOS)
    buffer = io.BytesIO()
    frame.save(buffer, format="JPEG", quality=quality)
    return buffer.getvalue()


def compress_image(
    image: Any,
    max_bytes: int = COMPRESSION_THRESHOLD_BYTES,
    encode: Encoder = encode_jpeg,
    max_steps: int = MAX_STEPS,
) -> CompressionResult:
    state = initial_state(*image.size)
    while True:
        data = encode(image, state.width, state.height, state.quality)
        steps = state.step + 1
        if len(data) <= max_bytes or state.quality < QUALITY_FLOOR or steps >= max_steps:
            return CompressionResult(
                data=data,
                width=state.width,
                height=state.height,
                quality=state.quality / 100,
                steps=steps,
            )
        state = advance(state)


def compress_image_bytes(data: bytes, max_bytes: int = COMPRESSION_THRESHOLD_BYTES) -> CompressionResult:
    with Image.open(io.BytesIO(data)) as image:
        image.load()
        return compress_image(image, max_bytes=max_bytes)
