import random

import cv2
import numpy as np
import pytest

from core.config import ScanConfig
from core.cropper import crop_rect, produce_capture
from core.errors import InvalidCropError
from core.models import Box, FrameContext


@pytest.mark.parametrize(
    "box,expected",
    [
        (Box(100, 50, 200, 100), (70, 20, 260, 160)),
        (Box(10, 10, 50, 50), (0, 0, 110, 110)),  # padding clipped at top-left
        (Box(900, 700, 100, 100), (870, 670, 130, 130)),  # clipped at bottom-right
        (Box(-50, -50, 2000, 2000), (0, 0, 1000, 800)),  # larger than the frame
    ],
)
def test_crop_rect_examples(box, expected):
    assert crop_rect(box, FrameContext(1000, 800), 30) == expected


def test_crop_rect_always_inside_frame():
    rng = random.Random(1234)
    for _ in range(2000):
        fw, fh = rng.randint(1, 4000), rng.randint(1, 4000)
        box = Box(
            rng.uniform(-fw, 2 * fw),
            rng.uniform(-fh, 2 * fh),
            rng.uniform(-100, 2 * fw),
            rng.uniform(-100, 2 * fh),
        )
        sx, sy, sw, sh = crop_rect(box, FrameContext(fw, fh), rng.randint(0, 100))
        assert sx >= 0 and sy >= 0
        assert sx + sw <= fw
        assert sy + sh <= fh


def test_produce_capture_crops_and_encodes(frame):
    event = produce_capture(frame, Box(100, 50, 200, 100), ScanConfig())
    assert event.crop_rect == (70, 20, 260, 160)
    assert event.source_box == Box(100, 50, 200, 100)
    assert event.encoded_image[:2] == b"\xff\xd8"
    decoded = cv2.imdecode(np.frombuffer(event.encoded_image, np.uint8), cv2.IMREAD_COLOR)
    assert decoded.shape == (160, 260, 3)
    assert event.to_data_url().startswith("data:image/jpeg;base64,")


def test_produce_capture_rejects_box_outside_frame(frame):
    with pytest.raises(InvalidCropError):
        produce_capture(frame, Box(1100, 100, 50, 50), ScanConfig())


def test_produce_capture_rejects_negative_size(frame):
    with pytest.raises(InvalidCropError) as exc_info:
        produce_capture(frame, Box(100, 100, -100, 50), ScanConfig())
    assert exc_info.value.error_code == "INVALID_CROP"
