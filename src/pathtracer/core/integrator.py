"""Path tracing integrator for Monte Carlo light transport.

The path tracer follows rays from the camera through the scene, bouncing
off surfaces according to their material, until the ray escapes to the
sky, is absorbed, or reaches the depth bound. The radiance of a path is the
sky color where it escaped, multiplied by the attenuation of every bounce.

Key features:
    - Material dispatch through the Material.scatter contract
    - Depth-bounded paths (depth 0 returns the sky color directly)
    - Per-sample pixel jitter with an unjittered first sample
    - Gamma tone mapping of the Monte Carlo mean
    - Per-sample random streams keyed on (seed, x, y, sample index)

Example:
    >>> from pathtracer.core.integrator import Renderer, RenderSettings
    >>> from pathtracer.core.image import RenderTarget
    >>>
    >>> renderer = Renderer(RenderSettings(samples=16, max_depth=10))
    >>> target = RenderTarget.full_image(64, 48)
    >>> renderer.render(camera, scene, target)
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt

from pathtracer.core.image import RenderTarget
from pathtracer.core.ray import Ray, Vec3, lerp, make_rng, vec3

if TYPE_CHECKING:
    from pathtracer.camera.thin_lens import Camera
    from pathtracer.scene.scene import Scene

logger = logging.getLogger(__name__)

# =============================================================================
# Rendering Constants
# =============================================================================

# t_min excludes self-intersection acne; t_max is the world-scale cutoff
T_MIN = 0.001
T_MAX = 1000.0

# Sky gradient endpoints, blended by the ray direction's height
SKY_BOTTOM = (1.0, 1.0, 1.0)
SKY_TOP = (0.5, 0.7, 1.0)

# Display gamma (2 means square-root tone mapping)
GAMMA = 2.0

BLACK = vec3(0.0, 0.0, 0.0)


def pixel_to_unit(coordinate: float, size: int) -> float:
    """Map a (jittered) pixel coordinate to the normalized [0, 1] axis.

    Pixel centers span [0, 1] exactly, edge to edge. A single-pixel axis
    maps to the viewport center, 0.5, plus its jitter.
    """
    if size == 1:
        return 0.5 + coordinate
    return coordinate / (size - 1)


@dataclass(frozen=True)
class RenderSettings:
    """Parameters of the integrator.

    Attributes:
        samples: Samples per pixel (>= 1).
        max_depth: Maximum number of scatter events per path (>= 0).
        seed: Base seed for every random stream of the render (>= 0).
        t_min: Minimum ray parameter accepted as a hit.
        t_max: Maximum ray parameter accepted as a hit.
        sky_bottom: Sky color for rays pointing straight down.
        sky_top: Sky color for rays pointing straight up.
        gamma: Display gamma applied to the per-pixel mean.
    """

    samples: int = 50
    max_depth: int = 50
    seed: int = 0
    t_min: float = T_MIN
    t_max: float = T_MAX
    sky_bottom: tuple[float, float, float] = SKY_BOTTOM
    sky_top: tuple[float, float, float] = SKY_TOP
    gamma: float = GAMMA

    def __post_init__(self) -> None:
        if self.samples < 1:
            raise ValueError(f"samples must be at least 1, got {self.samples}")
        if self.max_depth < 0:
            raise ValueError(f"max_depth must be non-negative, got {self.max_depth}")
        if self.seed < 0:
            raise ValueError(f"seed must be non-negative, got {self.seed}")
        if not 0.0 <= self.t_min < self.t_max:
            raise ValueError(f"Invalid hit range [{self.t_min}, {self.t_max}]")
        if not self.gamma > 0.0:
            raise ValueError(f"gamma must be positive, got {self.gamma}")


class Renderer:
    """Monte Carlo path tracing integrator.

    A renderer is immutable once built and may be shared by any number of
    worker threads.

    Attributes:
        settings: The render settings.
        sample_offsets: Per-sample (dx, dy) pixel jitter of shape
            (samples, 2); row 0 is always (0, 0).
    """

    def __init__(self, settings: RenderSettings | None = None) -> None:
        self.settings = settings if settings is not None else RenderSettings()
        self._sky_bottom = vec3(*self.settings.sky_bottom)
        self._sky_top = vec3(*self.settings.sky_top)
        self.sample_offsets = self._make_sample_offsets()

    def _make_sample_offsets(self) -> npt.NDArray[np.float64]:
        """Precompute the jitter table; sample 0 is the canonical pixel center."""
        rng = make_rng(self.settings.seed)
        offsets = rng.uniform(-0.5, 0.5, (self.settings.samples, 2))
        offsets[0] = 0.0
        return offsets

    @property
    def samples(self) -> int:
        return self.settings.samples

    @property
    def max_depth(self) -> int:
        return self.settings.max_depth

    # =========================================================================
    # Path Tracing Core
    # =========================================================================

    def background(self, ray: Ray) -> Vec3:
        """Sky color seen along a ray that escapes the scene.

        A vertical gradient lerp(0.5 * (direction.y + 1), sky_bottom, sky_top).
        """
        t = 0.5 * (ray.direction[1] + 1.0)
        return lerp(t, self._sky_bottom, self._sky_top)

    def cast(self, ray: Ray, scene: Scene, depth: int, rng: np.random.Generator) -> Vec3:
        """Trace a ray through the scene and return its linear radiance.

        Iterative form of the recursive definition:
            cast(r, 0) = background(r)
            cast(r, d) = background(r)                          on a miss
                       = black                                  if absorbed
                       = attenuation * cast(scattered, d - 1)   otherwise

        Args:
            ray: The ray to trace.
            scene: The scene, held read-only by the caller.
            depth: Remaining scatter events allowed.
            rng: The random stream for this sample.

        Returns:
            Linear RGB radiance (unclamped).
        """
        t_min = self.settings.t_min
        t_max = self.settings.t_max
        throughput = vec3(1.0, 1.0, 1.0)

        for _ in range(depth):
            hit = scene.hit(ray, t_min, t_max)
            if hit is None:
                break

            scattered = hit.material.scatter(ray, hit, rng)
            if scattered is None:
                return BLACK.copy()

            throughput = throughput * scattered.attenuation
            ray = scattered.ray

        return throughput * self.background(ray)

    def tone_map(self, accumulated: Vec3, count: int) -> Vec3:
        """Monte Carlo mean followed by gamma correction."""
        mean = np.maximum(accumulated / count, 0.0)
        if self.settings.gamma == 2.0:
            return np.sqrt(mean)
        return np.power(mean, 1.0 / self.settings.gamma)

    def render_pixel(
        self,
        camera: Camera,
        scene: Scene,
        x: int,
        y: int,
        full_width: int,
        full_height: int,
        sample_indices: Sequence[int],
    ) -> Vec3:
        """Render the display color of one pixel from a set of samples."""
        seed = self.settings.seed

        color = vec3(0.0, 0.0, 0.0)
        for i in sample_indices:
            dx, dy = self.sample_offsets[i]
            rng = make_rng(seed, x, y, i)
            u = pixel_to_unit(x + dx, full_width)
            v = pixel_to_unit(y + dy, full_height)
            ray = camera.get_ray(u, v, rng)
            color += self.cast(ray, scene, self.settings.max_depth, rng)
        return self.tone_map(color, len(sample_indices))

    def render(
        self,
        camera: Camera,
        scene: Scene,
        target: RenderTarget,
        sample_indices: Sequence[int] | None = None,
    ) -> None:
        """Render every pixel of the target's buffer region.

        Args:
            camera: The camera generating primary rays.
            scene: The scene to render. Held read-only for the call.
            target: The render target; its buffer receives the pixels.
            sample_indices: Which samples of the jitter table to trace.
                Defaults to all of them. Sample sharding renders one index
                per job.

        Raises:
            ValueError: If a sample index is outside the jitter table.
        """
        if sample_indices is None:
            sample_indices = range(self.settings.samples)
        if len(sample_indices) == 0:
            raise ValueError("At least one sample index is required")
        for i in sample_indices:
            if not 0 <= i < self.settings.samples:
                raise ValueError(f"Sample index {i} outside [0, {self.settings.samples})")

        buffer = target.buffer
        logger.debug(
            "Rendering region %s with %d sample(s) per pixel",
            buffer.region,
            len(sample_indices),
        )
        with scene.read_only():
            for x, y in buffer:
                color = self.render_pixel(
                    camera, scene, x, y, target.full_width, target.full_height, sample_indices
                )
                buffer.set_pixel_color(x, y, color)

    def __repr__(self) -> str:
        return f"Renderer(samples={self.samples}, max_depth={self.max_depth}, seed={self.settings.seed})"


def render(
    camera: Camera,
    scene: Scene,
    target: RenderTarget,
    settings: RenderSettings | None = None,
) -> None:
    """Render a target in the calling thread.

    Convenience wrapper around Renderer(settings).render(...).
    """
    Renderer(settings).render(camera, scene, target)
