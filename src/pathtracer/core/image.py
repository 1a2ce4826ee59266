"""Framebuffer, region and render target model.

An Image is a rectangular Region of a larger logical image plus a pixel
buffer addressed in that region's local coordinates. A region may be a
tile of the full image or the whole image itself, so tile workers write
with absolute pixel coordinates and never need to know their offset.

Pixel layout (the in-memory wire format shared with encoders and displays):
    - uint8 array of shape (height, width, 3), packed row-major
    - bytes in B, G, R order
    - row 0 is the bottom image row (v = 0), the same row order as an
      uncompressed bottom-up BMP

Writes and blits outside the image are silently clipped.

Example:
    >>> from pathtracer.core.image import Image, Region
    >>> image = Image(600, 400)
    >>> for tile in image.region.chunks(64):
    ...     partial = Image.from_region(tile)
    ...     ...  # render into partial
    ...     image.blit(partial)
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

import numpy as np
import numpy.typing as npt

from pathtracer.core.ray import Vec3

# Channel order of the pixel buffer
BLUE, GREEN, RED = 0, 1, 2


@dataclass(frozen=True)
class Region:
    """A rectangle in absolute image coordinates.

    Attributes:
        x: Left edge (inclusive).
        y: Bottom edge (inclusive).
        width: Width in pixels.
        height: Height in pixels.
    """

    x: int
    y: int
    width: int
    height: int

    def chunks(self, size: int) -> list[Region]:
        """Partition the region into row-major tiles no larger than size x size.

        Tiles on the right and top edges are smaller when the dimensions are
        not multiples of size. The tiles never overlap and cover the region
        exactly once.

        Raises:
            ValueError: If size is not positive.
        """
        if size <= 0:
            raise ValueError(f"Chunk size must be positive, got {size}")
        chunks = []
        for y in range(self.y, self.y + self.height, size):
            height = min(size, self.y + self.height - y)
            for x in range(self.x, self.x + self.width, size):
                width = min(size, self.x + self.width - x)
                chunks.append(Region(x, y, width, height))
        return chunks

    def contains(self, x: int, y: int) -> bool:
        """Whether the absolute pixel (x, y) lies inside the region."""
        return self.x <= x < self.x + self.width and self.y <= y < self.y + self.height

    def __iter__(self) -> Iterator[tuple[int, int]]:
        """Iterate absolute (x, y) coordinates row-major."""
        for y in range(self.y, self.y + self.height):
            for x in range(self.x, self.x + self.width):
                yield x, y


def color_to_bytes(color: Vec3) -> tuple[int, int, int]:
    """Quantize a display color to (blue, green, red) bytes.

    Each channel is truncated from 255 * c and saturated to [0, 255];
    NaN maps to 0.
    """
    scaled = np.nan_to_num(255.0 * np.asarray(color, dtype=np.float64), nan=0.0)
    red, green, blue = np.clip(scaled, 0.0, 255.0).astype(np.uint8).tolist()
    return blue, green, red


class Image:
    """Pixel buffer for a region of a logical image.

    Attributes:
        region: The absolute rectangle covered by this buffer.
        pixels: uint8 array of shape (height, width, 3) in BGR order,
            indexed by local (row, column).
    """

    def __init__(self, width: int, height: int) -> None:
        """Create a black image covering (0, 0, width, height).

        Raises:
            ValueError: If either dimension is not positive.
        """
        self._init_region(Region(0, 0, width, height))

    @classmethod
    def from_region(cls, region: Region) -> Image:
        """Create a black image covering an arbitrary region (e.g. a tile)."""
        image = cls.__new__(cls)
        image._init_region(region)
        return image

    def _init_region(self, region: Region) -> None:
        if region.width <= 0 or region.height <= 0:
            raise ValueError(
                f"Image dimensions must be positive, got {region.width}x{region.height}"
            )
        self.region = region
        self.pixels: npt.NDArray[np.uint8] = np.zeros(
            (region.height, region.width, 3), dtype=np.uint8
        )

    @property
    def width(self) -> int:
        return self.region.width

    @property
    def height(self) -> int:
        return self.region.height

    def __iter__(self) -> Iterator[tuple[int, int]]:
        """Iterate the absolute (x, y) coordinates covered, row-major."""
        return iter(self.region)

    def set_pixel_color(self, x: int, y: int, color: Vec3) -> None:
        """Write a display color at absolute pixel (x, y).

        Writes outside the image's region are silently dropped.

        Args:
            x: Absolute column.
            y: Absolute row (0 = bottom).
            color: Display-space RGB color, nominally in [0, 1].
        """
        if not self.region.contains(x, y):
            return
        self.pixels[y - self.region.y, x - self.region.x] = color_to_bytes(color)

    def get_pixel(self, x: int, y: int) -> tuple[int, int, int] | None:
        """Read the (blue, green, red) bytes at absolute pixel (x, y).

        Returns:
            The pixel bytes, or None if (x, y) is outside the region.
        """
        if not self.region.contains(x, y):
            return None
        blue, green, red = self.pixels[y - self.region.y, x - self.region.x].tolist()
        return blue, green, red

    def get_pixel_u32(self, x: int, y: int) -> int:
        """Read absolute pixel (x, y) packed as 0x00RRGGBB.

        Returns 0 for pixels outside the region.
        """
        pixel = self.get_pixel(x, y)
        if pixel is None:
            return 0
        blue, green, red = pixel
        return (red << 16) | (green << 8) | blue

    def to_u32(self) -> npt.NDArray[np.uint32]:
        """Pack every pixel as 0x00RRGGBB, rows ordered top to bottom.

        This is the layout expected by framebuffer-style preview windows.
        """
        pixels = self.pixels.astype(np.uint32)
        packed = (pixels[..., RED] << 16) | (pixels[..., GREEN] << 8) | pixels[..., BLUE]
        return np.ascontiguousarray(packed[::-1])

    def to_bytes(self) -> bytes:
        """Return the raw row-major BGR buffer (bottom row first)."""
        return self.pixels.tobytes()

    def blit(self, src: Image) -> None:
        """Copy a source image into this one at the source's absolute offset.

        Rows and columns of the source falling outside this image are
        skipped.
        """
        dst_x0 = max(src.region.x, self.region.x)
        dst_y0 = max(src.region.y, self.region.y)
        dst_x1 = min(src.region.x + src.width, self.region.x + self.width)
        dst_y1 = min(src.region.y + src.height, self.region.y + self.height)
        if dst_x0 >= dst_x1 or dst_y0 >= dst_y1:
            return

        self.pixels[
            dst_y0 - self.region.y : dst_y1 - self.region.y,
            dst_x0 - self.region.x : dst_x1 - self.region.x,
        ] = src.pixels[
            dst_y0 - src.region.y : dst_y1 - src.region.y,
            dst_x0 - src.region.x : dst_x1 - src.region.x,
        ]

    def copy(self) -> Image:
        """Return an independent copy of this image."""
        image = Image.from_region(self.region)
        image.pixels[...] = self.pixels
        return image

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Image):
            return NotImplemented
        return self.region == other.region and np.array_equal(self.pixels, other.pixels)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        r = self.region
        return f"Image(x={r.x}, y={r.y}, width={r.width}, height={r.height})"


@dataclass
class RenderTarget:
    """A (possibly tiled) buffer plus the logical full-image dimensions.

    The full dimensions drive the normalized (u, v) computation, while the
    buffer's region selects which pixels are rendered.

    Attributes:
        full_width: Width of the logical full image.
        full_height: Height of the logical full image.
        buffer: The image receiving the rendered pixels.
    """

    full_width: int
    full_height: int
    buffer: Image

    @classmethod
    def full_image(cls, width: int, height: int) -> RenderTarget:
        """Target covering a whole width x height image."""
        return cls(width, height, Image(width, height))

    @classmethod
    def tile(cls, width: int, height: int, region: Region) -> RenderTarget:
        """Target covering one region of a width x height image."""
        return cls(width, height, Image.from_region(region))


class SampleAccumulator:
    """Order-independent average of whole-image sample passes.

    Each pass is merged under its index exactly once; the integer sum of
    bytes does not depend on arrival order, and ``resolve`` returns the
    rounded mean once every pass has arrived.
    """

    def __init__(self, width: int, height: int, passes: int) -> None:
        """Create an accumulator.

        Args:
            width: Image width in pixels.
            height: Image height in pixels.
            passes: Number of sample passes to expect.

        Raises:
            ValueError: If a dimension or the pass count is not positive.
        """
        if passes <= 0:
            raise ValueError(f"Pass count must be positive, got {passes}")
        if width <= 0 or height <= 0:
            raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self.passes = passes
        self._sum = np.zeros((height, width, 3), dtype=np.uint64)
        self._merged: set[int] = set()

    @property
    def merged_count(self) -> int:
        """Number of passes merged so far."""
        return len(self._merged)

    @property
    def complete(self) -> bool:
        return len(self._merged) == self.passes

    def merge(self, index: int, partial: Image) -> None:
        """Add one sample pass.

        Raises:
            ValueError: If the index is out of range or the partial image
                does not cover the full image.
            RuntimeError: If the index was already merged.
        """
        if not 0 <= index < self.passes:
            raise ValueError(f"Pass index {index} outside [0, {self.passes})")
        if partial.region != Region(0, 0, self.width, self.height):
            raise ValueError(f"Partial image {partial!r} does not cover the full image")
        if index in self._merged:
            raise RuntimeError(f"Sample pass {index} was already merged")
        self._sum += partial.pixels
        self._merged.add(index)

    def _mean(self, count: int) -> Image:
        image = Image(self.width, self.height)
        image.pixels[...] = ((self._sum + count // 2) // count).astype(np.uint8)
        return image

    def partial_mean(self) -> Image:
        """Return the rounded per-byte mean of the passes merged so far.

        Used for progressive display; black before the first merge.
        """
        if not self._merged:
            return Image(self.width, self.height)
        return self._mean(len(self._merged))

    def resolve(self) -> Image:
        """Return the rounded per-byte mean of all passes.

        Raises:
            RuntimeError: If some passes have not been merged yet.
        """
        if not self.complete:
            raise RuntimeError(
                f"Only {len(self._merged)} of {self.passes} sample passes have been merged"
            )
        return self._mean(self.passes)
