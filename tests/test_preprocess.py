import cv2
import numpy as np
import pytest

from core.preprocess import contrast_factor, preprocess_image, preprocess_pixels, stretch_contrast, to_grayscale


def bgr(b, g, r):
    return np.array([[[b, g, r]]], dtype=np.uint8)


def test_mid_gray_is_a_fixed_point():
    gray = np.full((40, 60, 3), 128, dtype=np.uint8)
    out = preprocess_image(gray, 1.2)
    assert np.array_equal(out.pixels, gray)


def test_luminance_weights():
    assert to_grayscale(bgr(0, 0, 255))[0, 0].tolist() == [76, 76, 76]
    assert to_grayscale(bgr(0, 255, 0))[0, 0].tolist() == [150, 150, 150]
    assert to_grayscale(bgr(255, 0, 0))[0, 0].tolist() == [29, 29, 29]


def test_alpha_is_untouched():
    img = np.array([[[10, 200, 30, 77]]], dtype=np.uint8)
    out = preprocess_pixels(img, 1.2)
    assert out[0, 0, 3] == 77
    assert out[0, 0, 0] == out[0, 0, 1] == out[0, 0, 2]


def test_contrast_formula_and_clamping():
    assert contrast_factor(1.2) == pytest.approx(1.0093824, rel=1e-6)
    img = np.array([[0, 100, 128, 200, 255]], dtype=np.uint8)
    assert stretch_contrast(img, 1.2).tolist() == [[0, 100, 128, 201, 255]]


def test_input_is_not_mutated():
    img = np.random.default_rng(3).integers(0, 256, (20, 20, 3), dtype=np.uint8)
    before = img.copy()
    preprocess_pixels(img, 1.2)
    assert np.array_equal(img, before)


def test_output_is_deterministic(frame):
    first = preprocess_image(frame, 1.2)
    for _ in range(3):
        again = preprocess_image(frame.copy(), 1.2)
        assert again.encoded == first.encoded
        assert np.array_equal(again.pixels, first.pixels)


def test_accepts_encoded_bytes():
    ok, buf = cv2.imencode(".png", np.full((8, 8, 3), 128, dtype=np.uint8))
    assert ok
    out = preprocess_image(buf.tobytes(), 1.2)
    assert (out.pixels == 128).all()
    assert out.encoded[:2] == b"\xff\xd8"
