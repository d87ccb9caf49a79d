"""Drawing slide images onto the fixed-resolution video canvas."""

from __future__ import annotations

import io

import numpy as np
from PIL import Image, ImageOps

from shared.config import config as service_config
from shared.enums import AspectRatio

BACKGROUND_COLOR = (0, 0, 0)


def canvas_size(aspect_ratio: AspectRatio | str) -> tuple[int, int]:
    """Return (width, height) of the canvas, oriented for the aspect ratio."""
    long_side = int(service_config.get_pipeline_value("video.width", 3840))
    short_side = int(service_config.get_pipeline_value("video.height", 2160))
    if AspectRatio(aspect_ratio) is AspectRatio.LANDSCAPE:
        return long_side, short_side
    return short_side, long_side


def letterbox_geometry(
    image_width: int, image_height: int, canvas_width: int, canvas_height: int
) -> tuple[float, float, float, float]:
    """
    Fit an image inside the canvas without cropping.

    The image is scaled uniformly so the dimension that is relatively larger
    fills the canvas, and centred along the other axis.

    Returns:
        (offset_x, offset_y, draw_width, draw_height)
    """
    if image_width <= 0 or image_height <= 0:
        raise ValueError(f"Invalid image size {image_width}x{image_height}")

    canvas_ratio = canvas_width / canvas_height
    image_ratio = image_width / image_height

    if image_ratio > canvas_ratio:
        draw_width = float(canvas_width)
        draw_height = canvas_width / image_ratio
        return 0.0, (canvas_height - draw_height) / 2, draw_width, draw_height

    draw_height = float(canvas_height)
    draw_width = canvas_height * image_ratio
    return (canvas_width - draw_width) / 2, 0.0, draw_width, draw_height


def load_image(data: bytes) -> Image.Image:
    """Decode image bytes into an RGB image with EXIF orientation applied."""
    with Image.open(io.BytesIO(data)) as source:
        image = ImageOps.exif_transpose(source)
        return image.convert("RGB")


def render_slide_frame(image_data: bytes, size: tuple[int, int]) -> np.ndarray:
    """Clear a canvas to black and draw the letterboxed image; returns an HxWx3 uint8 frame."""
    canvas_width, canvas_height = size
    image = load_image(image_data)
    offset_x, offset_y, draw_width, draw_height = letterbox_geometry(
        image.width, image.height, canvas_width, canvas_height
    )

    target = (max(1, round(draw_width)), max(1, round(draw_height)))
    resized = image.resize(target, Image.Resampling.LANCZOS)

    canvas = Image.new("RGB", (canvas_width, canvas_height), BACKGROUND_COLOR)
    canvas.paste(resized, (round(offset_x), round(offset_y)))
    return np.asarray(canvas)
