"""Parallel job scheduler for tile- and sample-sharded renders.

This module splits a render into independent jobs, runs them on a thread
pool and merges each partial image into the final framebuffer as soon as
it completes. Two sharding strategies are supported:

- Sharding.TILES: job k renders tile k of the image with every sample
- Sharding.SAMPLES: job k renders the whole image with sample index k only,
  and the partial images are averaged

Each job owns its own random streams (keyed on the render seed and the pixel
sample), shares the camera and scene read-only, and communicates only
through its returned partial image. Completion order is arbitrary; the
merged result does not depend on it.

The ParallelRenderer class keeps the final image and offers callback and
generator flavors of progress reporting, for driving a live preview.

Example:
    >>> from pathtracer.core.scheduler import ParallelRenderer, Sharding
    >>> from pathtracer.core.integrator import RenderSettings
    >>> from pathtracer.scene import create_random_spheres_scene
    >>> from pathtracer.camera import setup_camera
    >>>
    >>> scene, camera_config = create_random_spheres_scene()
    >>> renderer = ParallelRenderer(
    ...     setup_camera(camera_config), scene, 300, 200,
    ...     RenderSettings(samples=10), strategy=Sharding.TILES,
    ... )
    >>> for completed, total in renderer.render_progressive():
    ...     print(f"{completed}/{total} jobs")
    >>> image = renderer.image
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Generator
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from enum import Enum
from typing import TYPE_CHECKING

from pathtracer.core.image import Image, Region, RenderTarget, SampleAccumulator
from pathtracer.core.integrator import Renderer, RenderSettings

if TYPE_CHECKING:
    from pathtracer.camera.thin_lens import Camera
    from pathtracer.scene.scene import Scene

logger = logging.getLogger(__name__)

# Type alias for progress callback
# Callback receives (completed_jobs, total_jobs)
ProgressCallback = Callable[[int, int], None]

DEFAULT_TILE_SIZE = 32


class Sharding(Enum):
    """How a render is split into jobs."""

    TILES = "tiles"
    SAMPLES = "samples"


def default_workers() -> int:
    """Number of worker threads used when none is given."""
    return os.cpu_count() or 1


def _render_tile(
    renderer: Renderer,
    camera: Camera,
    scene: Scene,
    width: int,
    height: int,
    region: Region,
) -> Image:
    target = RenderTarget.tile(width, height, region)
    renderer.render(camera, scene, target)
    return target.buffer


def _render_sample(
    renderer: Renderer,
    camera: Camera,
    scene: Scene,
    width: int,
    height: int,
    sample_index: int,
) -> Image:
    target = RenderTarget.full_image(width, height)
    renderer.render(camera, scene, target, [sample_index])
    return target.buffer


class ParallelRenderer:
    """Renders an image by scheduling jobs on a pool of worker threads.

    The renderer owns the final framebuffer. With tile sharding the image
    fills in progressively as tiles arrive; with sample sharding it holds
    the running mean of the passes merged so far, which equals the final
    average once every pass has arrived.

    Attributes:
        camera: The camera generating primary rays.
        scene: The scene, held read-only while a render runs.
        settings: Integrator settings (samples, depth, seed).
        strategy: The sharding strategy.
        tile_size: Edge length of a tile (tile sharding only).
        workers: Number of worker threads.
    """

    def __init__(
        self,
        camera: Camera,
        scene: Scene,
        width: int,
        height: int,
        settings: RenderSettings | None = None,
        *,
        strategy: Sharding = Sharding.TILES,
        tile_size: int = DEFAULT_TILE_SIZE,
        workers: int | None = None,
    ) -> None:
        """Initialize the renderer.

        Args:
            camera: The camera snapshot.
            scene: The scene to render.
            width: Image width in pixels.
            height: Image height in pixels.
            settings: Integrator settings. Defaults to RenderSettings().
            strategy: Tile or sample sharding.
            tile_size: Tile edge length for tile sharding.
            workers: Worker thread count. Defaults to os.cpu_count().

        Raises:
            ValueError: If a dimension, the tile size or the worker count is
                not positive.
        """
        if tile_size <= 0:
            raise ValueError(f"Tile size must be positive, got {tile_size}")
        if workers is None:
            workers = default_workers()
        if workers <= 0:
            raise ValueError(f"Worker count must be positive, got {workers}")

        self.camera = camera
        self.scene = scene
        self.settings = settings if settings is not None else RenderSettings()
        self.strategy = Sharding(strategy)
        self.tile_size = tile_size
        self.workers = workers
        self._renderer = Renderer(self.settings)
        self._image = Image(width, height)

    @property
    def width(self) -> int:
        """Get the image width."""
        return self._image.width

    @property
    def height(self) -> int:
        """Get the image height."""
        return self._image.height

    @property
    def image(self) -> Image:
        """The framebuffer; complete after a render has finished."""
        return self._image

    @property
    def job_count(self) -> int:
        """Number of jobs a render is split into."""
        if self.strategy is Sharding.SAMPLES:
            return self.settings.samples
        return len(self._image.region.chunks(self.tile_size))

    def _submit(self, executor: ThreadPoolExecutor) -> dict[Future[Image], int]:
        args = (self._renderer, self.camera, self.scene, self.width, self.height)
        if self.strategy is Sharding.SAMPLES:
            return {
                executor.submit(_render_sample, *args, k): k
                for k in range(self.settings.samples)
            }
        tiles = self._image.region.chunks(self.tile_size)
        return {executor.submit(_render_tile, *args, tile): k for k, tile in enumerate(tiles)}

    def render_progressive(self) -> Generator[tuple[int, int], None, None]:
        """Render the image, yielding progress after each merged job.

        The scene is held read-only until the generator finishes or is
        closed. Closing the generator early cancels the jobs that have not
        started yet.

        Yields:
            Tuple of (completed_jobs, total_jobs).

        Raises:
            Exception: Whatever a worker raised is re-raised here; the
                remaining queued jobs are cancelled.
        """
        self._image = Image(self.width, self.height)
        total = self.job_count
        accumulator = None
        if self.strategy is Sharding.SAMPLES:
            accumulator = SampleAccumulator(self.width, self.height, total)

        logger.info(
            "Rendering %dx%d image as %d %s job(s) on %d worker(s)",
            self.width,
            self.height,
            total,
            self.strategy.value,
            self.workers,
        )

        with self.scene.read_only():
            executor = ThreadPoolExecutor(max_workers=self.workers)
            try:
                futures = self._submit(executor)
                completed = 0
                for future in as_completed(futures):
                    index = futures[future]
                    partial = future.result()
                    if accumulator is not None:
                        accumulator.merge(index, partial)
                        # Running mean of the passes merged so far
                        self._image = accumulator.partial_mean()
                    else:
                        self._image.blit(partial)
                    completed += 1
                    logger.debug("Job %d finished (%d/%d)", index, completed, total)
                    yield completed, total
            finally:
                executor.shutdown(wait=True, cancel_futures=True)

        logger.info("Render finished: %d job(s) merged", total)

    def render(self, callback: ProgressCallback | None = None) -> Image:
        """Render the image, blocking until every job has been merged.

        Args:
            callback: Optional callback invoked on the calling thread after
                each merged job with (completed_jobs, total_jobs).

        Returns:
            The final image.

        Example:
            >>> def progress(completed, total):
            ...     print(f"Progress: {completed}/{total} jobs")
            >>> image = renderer.render(callback=progress)
        """
        for completed, total in self.render_progressive():
            if callback is not None:
                callback(completed, total)
        return self._image

    def __repr__(self) -> str:
        return (
            f"ParallelRenderer(width={self.width}, height={self.height}, "
            f"strategy={self.strategy.value}, jobs={self.job_count}, workers={self.workers})"
        )


def render_image(
    camera: Camera,
    scene: Scene,
    width: int,
    height: int,
    settings: RenderSettings | None = None,
    *,
    strategy: Sharding = Sharding.TILES,
    tile_size: int = DEFAULT_TILE_SIZE,
    workers: int | None = None,
    callback: ProgressCallback | None = None,
) -> Image:
    """Render a full image in parallel and return it.

    Args:
        camera: The camera snapshot.
        scene: The scene to render.
        width: Image width in pixels.
        height: Image height in pixels.
        settings: Integrator settings. Defaults to RenderSettings().
        strategy: Tile or sample sharding.
        tile_size: Tile edge length for tile sharding.
        workers: Worker thread count. Defaults to os.cpu_count().
        callback: Optional progress callback, (completed_jobs, total_jobs).

    Returns:
        The rendered image.
    """
    renderer = ParallelRenderer(
        camera,
        scene,
        width,
        height,
        settings,
        strategy=strategy,
        tile_size=tile_size,
        workers=workers,
    )
    return renderer.render(callback=callback)


def render_tiles(
    camera: Camera,
    scene: Scene,
    width: int,
    height: int,
    settings: RenderSettings | None = None,
    **kwargs,
) -> Image:
    """Render with one job per tile."""
    return render_image(camera, scene, width, height, settings, strategy=Sharding.TILES, **kwargs)


def render_samples(
    camera: Camera,
    scene: Scene,
    width: int,
    height: int,
    settings: RenderSettings | None = None,
    **kwargs,
) -> Image:
    """Render with one job per sample index, averaging the passes."""
    return render_image(
        camera, scene, width, height, settings, strategy=Sharding.SAMPLES, **kwargs
    )
