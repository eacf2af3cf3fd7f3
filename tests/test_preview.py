"""Tests for image export and preview display."""

from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np
import pytest
from PIL import Image as PILImage

from pathtracer.preview import (
    compute_rmse,
    linear_to_uint8,
    save_png,
    save_png_from_linear,
    show_comparison,
    show_image,
)


class TestLinearToUint8:
    """Tests for gamma correction and quantization."""

    def test_gamma_clamp_truncate(self):
        image = np.array([[[0.25, 1.0, 4.0], [0.0, -1.0, np.nan]]])
        np.testing.assert_array_equal(
            linear_to_uint8(image), np.array([[[127, 255, 255], [0, 0, 0]]], dtype=np.uint8)
        )

    def test_shape_and_dtype(self):
        out = linear_to_uint8(np.full((4, 5, 3), 0.5))
        assert out.shape == (4, 5, 3)
        assert out.dtype == np.uint8


class TestSavePng:
    """Tests for PNG export."""

    def test_save_png(self, tmp_path: Path):
        image = np.zeros((3, 4, 3), dtype=np.uint8)
        image[0, 0] = (255, 0, 0)
        image[2, 3] = (0, 0, 255)

        path = save_png(image, tmp_path / "out.png")

        assert path.exists()
        with PILImage.open(path) as loaded:
            assert loaded.size == (4, 3)
            np.testing.assert_array_equal(np.asarray(loaded.convert("RGB")), image)

    def test_save_png_from_linear(self, tmp_path: Path):
        path = save_png_from_linear(np.full((2, 2, 3), 0.25), tmp_path / "gray.png")
        with PILImage.open(path) as loaded:
            assert np.asarray(loaded.convert("RGB"))[0, 0, 0] == 127

    def test_rejects_float_image(self, tmp_path: Path):
        with pytest.raises(ValueError, match="uint8"):
            save_png(np.zeros((2, 2, 3)), tmp_path / "bad.png")

    def test_rejects_wrong_channels(self, tmp_path: Path):
        with pytest.raises(ValueError):
            save_png(np.zeros((2, 2, 4), dtype=np.uint8), tmp_path / "bad.png")


class TestComputeRmse:
    """Tests for compute_rmse()."""

    def test_identical_images(self):
        image = np.random.default_rng(0).random((4, 4, 3))
        assert compute_rmse(image, image) == 0.0

    def test_known_difference(self):
        assert compute_rmse(np.zeros((2, 2, 3)), np.full((2, 2, 3), 2.0)) == pytest.approx(2.0)

    def test_shape_mismatch(self):
        with pytest.raises(ValueError, match="shapes must match"):
            compute_rmse(np.zeros((2, 2, 3)), np.zeros((2, 3, 3)))


class TestDisplay:
    """Tests for the Matplotlib preview (Agg backend, nothing is shown)."""

    def test_show_image(self, monkeypatch):
        shown = []
        monkeypatch.setattr(plt, "show", lambda **kwargs: shown.append(kwargs))

        show_image(np.zeros((4, 4, 3), dtype=np.uint8), title="test")

        assert shown == [{"block": True}]
        plt.close("all")

    def test_show_comparison_returns_rmse(self, monkeypatch):
        monkeypatch.setattr(plt, "show", lambda **kwargs: None)
        a = np.full((4, 4, 3), 0.25)

        assert show_comparison(a, a, labels=("python", "taichi"), block=False) == 0.0
        plt.close("all")
