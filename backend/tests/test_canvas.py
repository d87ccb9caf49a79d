import io

import numpy as np
import pytest
from PIL import Image

from services.video.canvas import canvas_size, letterbox_geometry, render_slide_frame
from shared.enums import AspectRatio


def test_canvas_size_by_aspect_ratio() -> None:
    assert canvas_size(AspectRatio.LANDSCAPE) == (3840, 2160)
    assert canvas_size("9:16") == (2160, 3840)


def test_canvas_size_rejects_unknown_ratio() -> None:
    with pytest.raises(ValueError):
        canvas_size("4:3")


def test_wide_image_fills_width_and_centres_vertically() -> None:
    x, y, width, height = letterbox_geometry(4000, 1000, 3840, 2160)

    assert (x, width) == (0.0, 3840.0)
    assert height == pytest.approx(960.0)
    assert y == pytest.approx(600.0)


def test_tall_image_fills_height_and_centres_horizontally() -> None:
    x, y, width, height = letterbox_geometry(1000, 2000, 3840, 2160)

    assert (y, height) == (0.0, 2160.0)
    assert width == pytest.approx(1080.0)
    assert x == pytest.approx(1380.0)


def test_matching_ratio_covers_canvas() -> None:
    assert letterbox_geometry(1920, 1080, 3840, 2160) == pytest.approx((0.0, 0.0, 3840.0, 2160.0))


def test_zero_sized_image_is_rejected() -> None:
    with pytest.raises(ValueError):
        letterbox_geometry(0, 10, 3840, 2160)


def test_render_slide_frame_letterboxes_on_black(make_image) -> None:
    image = make_image(width=100, height=100, color=(255, 255, 255))

    frame = render_slide_frame(image.data, (320, 180))

    assert frame.shape == (180, 320, 3)
    assert frame.dtype == np.uint8
    # square image on a wide canvas: black bars left and right
    assert frame[90, 10].tolist() == [0, 0, 0]
    assert frame[90, 310].tolist() == [0, 0, 0]
    assert frame[90, 160].min() >= 250
    assert frame[0, 160].min() >= 250


def test_render_slide_frame_honours_exif_orientation() -> None:
    image = Image.new("RGB", (200, 100), (0, 255, 0))
    exif = Image.Exif()
    exif[0x0112] = 6  # rotate 90 degrees on display
    buffer = io.BytesIO()
    image.save(buffer, format="JPEG", exif=exif)

    frame = render_slide_frame(buffer.getvalue(), (200, 200))

    # displayed as 100x200 (portrait), so the sides are letterboxed
    assert frame[100, 10].tolist() == [0, 0, 0]
    assert frame[100, 100][1] > 200
