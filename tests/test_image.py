"""Unit tests for the framebuffer model.

Tests cover:
- Region tiling (coverage, no overlap, edge tiles)
- Color quantization (truncation, clamping, NaN)
- Pixel layout (BGR, bottom row first) and 0x00RRGGBB packing
- Blitting tiles into a full image
- Order-independent sample accumulation
"""

import math

import numpy as np
import pytest

from pathtracer.core.image import (
    Image,
    Region,
    RenderTarget,
    SampleAccumulator,
    color_to_bytes,
)
from pathtracer.core.ray import vec3


class TestRegion:
    """Tests for Region.chunks and iteration."""

    def test_chunks_cover_exactly_once(self):
        region = Region(0, 0, 70, 45)
        counts = np.zeros((45, 70), dtype=int)
        for tile in region.chunks(32):
            for x, y in tile:
                counts[y, x] += 1
        assert (counts == 1).all()

    def test_edge_tiles_are_smaller(self):
        tiles = Region(0, 0, 70, 45).chunks(32)
        assert len(tiles) == 6
        assert tiles[0] == Region(0, 0, 32, 32)
        assert tiles[2] == Region(64, 0, 6, 32)
        assert tiles[-1] == Region(64, 32, 6, 13)

    def test_chunks_are_absolute(self):
        tiles = Region(10, 20, 4, 4).chunks(2)
        assert tiles == [
            Region(10, 20, 2, 2),
            Region(12, 20, 2, 2),
            Region(10, 22, 2, 2),
            Region(12, 22, 2, 2),
        ]

    def test_single_chunk_when_size_exceeds_region(self):
        assert Region(0, 0, 5, 3).chunks(100) == [Region(0, 0, 5, 3)]

    @pytest.mark.parametrize("size", [0, -4])
    def test_invalid_chunk_size(self, size):
        with pytest.raises(ValueError, match="Chunk size"):
            Region(0, 0, 4, 4).chunks(size)

    def test_iteration_is_row_major(self):
        assert list(Region(1, 2, 2, 2)) == [(1, 2), (2, 2), (1, 3), (2, 3)]

    def test_contains(self):
        region = Region(2, 3, 4, 5)
        assert region.contains(2, 3)
        assert region.contains(5, 7)
        assert not region.contains(6, 3)
        assert not region.contains(2, 8)


class TestColorToBytes:
    """Tests for color quantization."""

    def test_channels_are_bgr(self):
        assert color_to_bytes(vec3(1.0, 0.5, 0.0)) == (0, 127, 255)

    def test_truncates(self):
        assert color_to_bytes(vec3(0.999, 0.999, 0.999)) == (254, 254, 254)

    def test_saturates(self):
        assert color_to_bytes(vec3(2.0, -1.0, 1.5)) == (255, 0, 255)

    def test_nan_is_black(self):
        assert color_to_bytes(vec3(math.nan, 0.5, 1.0)) == (255, 127, 0)


class TestImage:
    """Tests for Image pixel access and layout."""

    def test_new_image_is_black(self):
        image = Image(4, 3)
        assert image.width == 4
        assert image.height == 3
        assert image.pixels.shape == (3, 4, 3)
        assert not image.pixels.any()

    @pytest.mark.parametrize("width,height", [(0, 4), (4, 0), (-1, 2)])
    def test_invalid_dimensions(self, width, height):
        with pytest.raises(ValueError, match="dimensions must be positive"):
            Image(width, height)

    def test_set_and_get_pixel(self):
        image = Image(4, 3)
        image.set_pixel_color(1, 2, vec3(1.0, 0.5, 0.25))
        assert image.get_pixel(1, 2) == (63, 127, 255)
        assert image.get_pixel_u32(1, 2) == 0xFF7F3F

    def test_out_of_bounds_is_clipped(self):
        image = Image(2, 2)
        image.set_pixel_color(5, 0, vec3(1.0, 1.0, 1.0))
        image.set_pixel_color(0, -1, vec3(1.0, 1.0, 1.0))
        assert not image.pixels.any()
        assert image.get_pixel(5, 0) is None
        assert image.get_pixel_u32(5, 0) == 0

    def test_bytes_are_bottom_row_first(self):
        image = Image(2, 2)
        image.set_pixel_color(0, 0, vec3(1.0, 0.0, 0.0))  # bottom-left red
        image.set_pixel_color(1, 1, vec3(0.0, 0.0, 1.0))  # top-right blue
        data = image.to_bytes()
        assert len(data) == 2 * 2 * 3
        assert data[0:3] == bytes([0, 0, 255])
        assert data[9:12] == bytes([255, 0, 0])

    def test_to_u32_is_top_row_first(self):
        image = Image(2, 2)
        image.set_pixel_color(0, 0, vec3(1.0, 0.0, 0.0))
        packed = image.to_u32()
        assert packed.dtype == np.uint32
        assert packed.shape == (2, 2)
        assert packed[1, 0] == 0xFF0000
        assert packed[0, 0] == 0

    def test_iteration_yields_absolute_coordinates(self):
        tile = Image.from_region(Region(4, 6, 2, 1))
        assert list(tile) == [(4, 6), (5, 6)]

    def test_tile_writes_use_absolute_coordinates(self):
        tile = Image.from_region(Region(4, 6, 2, 2))
        tile.set_pixel_color(5, 7, vec3(1.0, 1.0, 1.0))
        assert tile.pixels[1, 1].tolist() == [255, 255, 255]
        assert tile.get_pixel(0, 0) is None

    def test_copy_and_equality(self):
        image = Image(3, 3)
        image.set_pixel_color(1, 1, vec3(0.2, 0.4, 0.6))
        clone = image.copy()
        assert clone == image
        clone.set_pixel_color(0, 0, vec3(1.0, 1.0, 1.0))
        assert clone != image


class TestBlit:
    """Tests for Image.blit."""

    def test_tiles_reassemble_image(self):
        source = Image(5, 4)
        source.pixels[...] = np.arange(5 * 4 * 3, dtype=np.uint8).reshape(4, 5, 3)

        # Tiles arrive in arbitrary order from the worker pool
        assembled = Image(5, 4)
        for region in reversed(source.region.chunks(2)):
            tile = Image.from_region(region)
            for x, y in tile:
                tile.pixels[y - region.y, x - region.x] = source.pixels[y, x]
            assembled.blit(tile)

        assert assembled == source

    def test_partially_outside_source_is_clipped(self):
        image = Image(4, 4)
        tile = Image.from_region(Region(3, 3, 3, 3))
        tile.pixels[...] = 200
        image.blit(tile)
        assert image.get_pixel(3, 3) == (200, 200, 200)
        assert image.pixels.sum() == 3 * 200

    def test_disjoint_source_is_ignored(self):
        image = Image(2, 2)
        tile = Image.from_region(Region(10, 10, 2, 2))
        tile.pixels[...] = 9
        image.blit(tile)
        assert not image.pixels.any()

    def test_blit_into_tile(self):
        destination = Image.from_region(Region(2, 2, 2, 2))
        source = Image(4, 4)
        source.pixels[...] = 7
        destination.blit(source)
        assert (destination.pixels == 7).all()


class TestRenderTarget:
    """Tests for RenderTarget construction."""

    def test_full_image(self):
        target = RenderTarget.full_image(6, 4)
        assert (target.full_width, target.full_height) == (6, 4)
        assert target.buffer.region == Region(0, 0, 6, 4)

    def test_tile(self):
        target = RenderTarget.tile(6, 4, Region(2, 0, 2, 2))
        assert (target.full_width, target.full_height) == (6, 4)
        assert target.buffer.region == Region(2, 0, 2, 2)


class TestSampleAccumulator:
    """Tests for sample pass averaging."""

    @staticmethod
    def _filled(value):
        image = Image(2, 2)
        image.pixels[...] = value
        return image

    def test_rounded_mean(self):
        accumulator = SampleAccumulator(2, 2, 2)
        accumulator.merge(0, self._filled(10))
        accumulator.merge(1, self._filled(13))
        assert accumulator.complete
        assert (accumulator.resolve().pixels == 12).all()

    def test_merge_order_does_not_matter(self):
        values = [3, 250, 17, 101]
        forward = SampleAccumulator(2, 2, 4)
        backward = SampleAccumulator(2, 2, 4)
        for i, v in enumerate(values):
            forward.merge(i, self._filled(v))
        for i, v in reversed(list(enumerate(values))):
            backward.merge(i, self._filled(v))
        assert forward.resolve() == backward.resolve()

    def test_no_overflow(self):
        accumulator = SampleAccumulator(2, 2, 3)
        for i in range(3):
            accumulator.merge(i, self._filled(255))
        assert (accumulator.resolve().pixels == 255).all()

    def test_partial_mean_tracks_merged_passes(self):
        accumulator = SampleAccumulator(2, 2, 3)
        assert not accumulator.partial_mean().pixels.any()

        accumulator.merge(2, self._filled(10))
        assert (accumulator.partial_mean().pixels == 10).all()

        accumulator.merge(0, self._filled(13))
        assert (accumulator.partial_mean().pixels == 12).all()

        accumulator.merge(1, self._filled(40))
        assert accumulator.partial_mean() == accumulator.resolve()

    def test_duplicate_merge_rejected(self):
        accumulator = SampleAccumulator(2, 2, 2)
        accumulator.merge(0, self._filled(1))
        with pytest.raises(RuntimeError, match="already merged"):
            accumulator.merge(0, self._filled(1))

    def test_resolve_before_complete_rejected(self):
        accumulator = SampleAccumulator(2, 2, 2)
        accumulator.merge(1, self._filled(1))
        assert accumulator.merged_count == 1
        with pytest.raises(RuntimeError, match="1 of 2"):
            accumulator.resolve()

    def test_invalid_index_rejected(self):
        accumulator = SampleAccumulator(2, 2, 2)
        with pytest.raises(ValueError, match="outside"):
            accumulator.merge(2, self._filled(1))

    def test_partial_must_cover_image(self):
        accumulator = SampleAccumulator(2, 2, 1)
        with pytest.raises(ValueError, match="does not cover"):
            accumulator.merge(0, Image(3, 2))
