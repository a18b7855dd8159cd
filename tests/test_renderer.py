"""Tests for the progressive Renderer.

This module tests the Renderer class including:
- Initialization and resizing
- Frame index bookkeeping with and without accumulation
- Reset behavior
- Averaging of accumulated samples into the image buffer
- Image output and row order

Note: Imports are done inside test methods to avoid Taichi initialization issues.
The conftest.py fixture initializes Taichi before tests run.
"""

import numpy as np
import pytest

from raybounce.scene.model import Scene

SKY_RGBA = np.array([153, 178, 229, 255])


def _mirror_sphere_scene():
    """A single perfect mirror sphere; every sample is deterministic."""
    from raybounce.camera.pinhole import PinholeCamera

    scene = Scene()
    red = scene.add_material((0.9, 0.1, 0.1), roughness=0.0)
    scene.add_sphere((0.0, 0.0, -3.0), 1.0, red)
    camera = PinholeCamera(lookfrom=(0.0, 0.0, 0.0), lookat=(0.0, 0.0, -1.0), vfov=60.0)
    return scene, camera


def _alpha(buffer):
    return buffer >> 24


def _make_renderer(width, height, **settings):
    from raybounce.core.renderer import Renderer, RendererSettings

    renderer = Renderer(settings=RendererSettings(**settings))
    renderer.resize(width, height)
    return renderer


class TestRendererInit:
    """Test Renderer initialization."""

    def test_starts_empty(self):
        """Test that a new renderer has no pixels and frame index 1."""
        from raybounce.core.renderer import Renderer
        from raybounce.preview.display import ImageSurface

        renderer = Renderer()

        assert renderer.width == 0
        assert renderer.height == 0
        assert renderer.frame_index == 1
        assert renderer.accumulated_frames == 0
        assert renderer.settings.accumulate is True
        assert isinstance(renderer.surface, ImageSurface)

    def test_repr(self):
        """Test the string representation."""
        renderer = _make_renderer(8, 4)
        assert "width=8" in repr(renderer)
        assert "frame_index=1" in repr(renderer)


class TestRendererResize:
    """Test resize behavior."""

    def test_resize_allocates_buffers(self):
        """Test buffer shapes and dtypes after resize."""
        renderer = _make_renderer(8, 4)

        assert renderer.image_data.shape == (32,)
        assert renderer.image_data.dtype == np.uint32
        assert renderer.accumulation_data.shape == (32, 4)
        assert renderer.accumulation_data.dtype == np.float32
        assert renderer.surface.width == 8
        assert renderer.surface.height == 4

    def test_resize_same_size_is_noop(self):
        """Test that resizing to the current size keeps buffers and frame index."""
        scene, camera = _mirror_sphere_scene()
        camera.resize(8, 4)
        renderer = _make_renderer(8, 4)
        renderer.render(scene, camera)
        renderer.render(scene, camera)

        image = renderer.image_data
        accumulation = renderer.accumulation_data
        renderer.resize(8, 4)

        assert renderer.image_data is image
        assert renderer.accumulation_data is accumulation
        assert renderer.frame_index == 3

    def test_resize_new_size_resets_frame_index(self):
        """Test that a real resize discards accumulation."""
        scene, camera = _mirror_sphere_scene()
        camera.resize(8, 4)
        renderer = _make_renderer(8, 4)
        renderer.render(scene, camera)

        renderer.resize(4, 4)

        assert renderer.frame_index == 1
        assert renderer.accumulated_frames == 0
        assert renderer.image_data.shape == (16,)
        assert not renderer.accumulation_data.any()

    def test_resize_rejects_negative(self):
        """Test that negative dimensions raise."""
        from raybounce.core.renderer import Renderer

        with pytest.raises(ValueError, match="non-negative"):
            Renderer().resize(-1, 4)

    def test_zero_size_render(self):
        """Test that a 0x0 render still presents an (empty) frame."""
        scene, camera = _mirror_sphere_scene()
        camera.resize(0, 0)
        renderer = _make_renderer(0, 0)

        renderer.render(scene, camera)

        assert renderer.image_data.size == 0
        assert renderer.surface.frames_presented == 1
        assert renderer.frame_index == 2


class TestFrameIndex:
    """Test frame index bookkeeping."""

    def test_accumulate_increments_frame_index(self):
        """Test that each frame increments the divisor."""
        scene, camera = _mirror_sphere_scene()
        camera.resize(4, 4)
        renderer = _make_renderer(4, 4)

        for expected in range(1, 4):
            renderer.render(scene, camera)
            assert renderer.accumulated_frames == expected
            assert renderer.frame_index == expected + 1

    def test_no_accumulate_keeps_frame_index_at_one(self):
        """Test that disabling accumulation makes frames independent."""
        scene, camera = _mirror_sphere_scene()
        camera.resize(4, 4)
        renderer = _make_renderer(4, 4, accumulate=False)

        for _ in range(3):
            renderer.render(scene, camera)
            assert renderer.frame_index == 1
            assert renderer.accumulated_frames == 1

        np.testing.assert_allclose(renderer.accumulation_data[:, 3], 1.0)

    def test_reset_restarts_accumulation(self):
        """Test that the frame after a reset holds a single raw sample."""
        scene, camera = _mirror_sphere_scene()
        camera.resize(4, 4)
        renderer = _make_renderer(4, 4)

        for _ in range(3):
            renderer.render(scene, camera)
        np.testing.assert_allclose(renderer.accumulation_data[:, 3], 3.0)

        renderer.reset_frame_index()
        assert renderer.frame_index == 1
        renderer.render(scene, camera)

        np.testing.assert_allclose(renderer.accumulation_data[:, 3], 1.0)
        sample = renderer.render_pixel(scene, camera, 2, 2)
        np.testing.assert_allclose(renderer.accumulation_data[2 + 2 * 4], sample, atol=1e-5)

    def test_settings_change_takes_effect_next_frame(self):
        """Test toggling accumulation between frames."""
        scene, camera = _mirror_sphere_scene()
        camera.resize(4, 4)
        renderer = _make_renderer(4, 4)

        renderer.render(scene, camera)
        renderer.render(scene, camera)
        renderer.settings.accumulate = False
        renderer.render(scene, camera)

        assert renderer.accumulated_frames == 3
        assert renderer.frame_index == 1


class TestConvergence:
    """Test that the image buffer is the clamped average of the raw samples."""

    def test_image_is_average_of_raw_samples(self):
        """Test that frame N shows floor(clamp(sum of N raw samples / N) * 255)."""
        from raybounce.core.integrator import unpack_rgba

        scene, camera = _mirror_sphere_scene()
        width, height = 8, 6
        camera.resize(width, height)
        renderer = _make_renderer(width, height)

        # Power of two so the division is exact in float32
        frames = 4
        for _ in range(frames):
            renderer.render(scene, camera)

        actual = unpack_rgba(renderer.image_data)
        for y in range(height):
            for x in range(width):
                sample = np.array(renderer.render_pixel(scene, camera, x, y), dtype=np.float32)
                total = np.zeros(4, dtype=np.float32)
                for _ in range(frames):
                    total = total + sample
                average = np.clip(total / np.float32(frames), 0.0, 1.0).astype(np.float32)
                expected = (average * np.float32(255.0)).astype(np.uint32)
                np.testing.assert_array_equal(renderer.accumulation_data[x + y * width], total)
                np.testing.assert_array_equal(actual[x + y * width], expected)

    def test_deterministic_scene_is_stable(self):
        """Test that a roughness-0 scene gives identical images every frame."""
        scene, camera = _mirror_sphere_scene()
        camera.resize(8, 8)
        renderer = _make_renderer(8, 8)

        renderer.render(scene, camera)
        first = renderer.image_data.copy()
        for _ in range(3):
            renderer.render(scene, camera)

        channels_first = first.view(np.uint8).astype(int)
        channels_last = renderer.image_data.view(np.uint8).astype(int)
        assert np.all(np.abs(channels_first - channels_last) <= 1)


class TestPresetRendering:
    """Test rendering and single-pixel sampling of the preset scenes."""

    @pytest.mark.parametrize("name", ["default", "showcase", "mirrors"])
    def test_render_preset(self, name):
        """Test that every preset renders and samples a pixel."""
        from raybounce.scene.presets import PRESETS

        scene, camera = PRESETS[name]()
        camera.resize(8, 6)
        renderer = _make_renderer(8, 6)

        renderer.render(scene, camera)
        color = renderer.render_pixel(scene, camera, 4, 3)

        assert renderer.accumulated_frames == 1
        assert renderer.surface.frames_presented == 1
        assert np.all(_alpha(renderer.image_data) == 255)
        assert color[3] == 1.0
        assert all(c >= 0.0 for c in color[:3])


class TestRendererErrors:
    """Test error handling."""

    def test_invalid_scene_raises(self):
        """Test that a dangling material reference is caught before rendering."""
        _, camera = _mirror_sphere_scene()
        camera.resize(4, 4)
        scene = Scene()
        scene.add_material()
        scene.add_sphere((0.0, 0.0, -3.0), 1.0, material_index=5)
        renderer = _make_renderer(4, 4)

        with pytest.raises(ValueError, match="references material 5"):
            renderer.render(scene, camera)
        assert renderer.frame_index == 1

    def test_camera_size_mismatch_raises(self):
        """Test that the camera must match the render target."""
        scene, camera = _mirror_sphere_scene()
        camera.resize(8, 8)
        renderer = _make_renderer(4, 4)

        with pytest.raises(ValueError, match="ray directions"):
            renderer.render(scene, camera)

    def test_render_pixel_out_of_bounds(self):
        """Test that render_pixel rejects coordinates outside the image."""
        scene, camera = _mirror_sphere_scene()
        camera.resize(4, 4)
        renderer = _make_renderer(4, 4)

        with pytest.raises(ValueError, match="outside"):
            renderer.render_pixel(scene, camera, 4, 0)


class TestImageOutput:
    """Test image retrieval and saving."""

    def test_get_image_numpy_top_row_first(self, default_scene):
        """Test that the top-left corner shows sky and the bottom shows ground."""
        scene, camera = default_scene
        camera.resize(16, 16)
        renderer = _make_renderer(16, 16)
        for _ in range(4):
            renderer.render(scene, camera)

        image = renderer.get_image_numpy()

        assert image.shape == (16, 16, 4)
        assert image.dtype == np.uint8
        assert np.all(image[..., 3] == 255)
        assert np.all(np.abs(image[0, 0].astype(int) - SKY_RGBA) <= 1)
        # Ground: lit blue plus a half-weighted sky reflection, red well below sky
        assert image[-1, 0, 0] < 140

    def test_save_image(self, tmp_path):
        """Test saving a PNG through the renderer."""
        from PIL import Image

        scene, camera = _mirror_sphere_scene()
        camera.resize(8, 6)
        renderer = _make_renderer(8, 6)
        renderer.render(scene, camera)

        path = tmp_path / "frame.png"
        renderer.save_image(str(path))

        with Image.open(path) as img:
            assert img.size == (8, 6)
            assert img.mode == "RGBA"

    def test_surface_receives_frame(self):
        """Test that the display surface gets the rendered buffer."""
        scene, camera = _mirror_sphere_scene()
        camera.resize(4, 4)
        renderer = _make_renderer(4, 4)
        renderer.render(scene, camera)

        np.testing.assert_array_equal(renderer.surface.data, renderer.image_data)
        assert renderer.surface.frames_presented == 1
