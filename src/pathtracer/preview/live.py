"""Live preview of a render in progress.

LivePreview is a progress observer for the parallel scheduler. Its
``notify`` method is the scheduler callback: it only records the progress
and raises a flag, so it never blocks the merge loop. A display loop then
polls the flag and pulls a fresh frame from the renderer's framebuffer.

Example:
    >>> from pathtracer.core.scheduler import ParallelRenderer
    >>> from pathtracer.preview.live import LivePreview
    >>>
    >>> renderer = ParallelRenderer(camera, scene, 300, 200)
    >>> preview = LivePreview(renderer)
    >>> preview.show()  # Renders in the background until done
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt

from pathtracer.preview.export import image_to_rgb_array

if TYPE_CHECKING:
    from pathtracer.core.scheduler import ParallelRenderer


class LivePreview:
    """Observer that tracks render progress and exposes display frames.

    Attributes:
        renderer: The renderer whose framebuffer is displayed.
    """

    def __init__(self, renderer: ParallelRenderer, *, title: str = "Path Tracer - Live Preview") -> None:
        self.renderer = renderer
        self._title = title
        self._updated = threading.Event()
        self._lock = threading.Lock()
        self._completed = 0
        self._total = 0

    @property
    def progress(self) -> tuple[int, int]:
        """The last reported (completed_jobs, total_jobs)."""
        with self._lock:
            return self._completed, self._total

    @property
    def done(self) -> bool:
        """Whether the last report covered every job."""
        completed, total = self.progress
        return total > 0 and completed == total

    def notify(self, completed: int, total: int) -> None:
        """Record progress; usable directly as a scheduler callback."""
        with self._lock:
            self._completed = completed
            self._total = total
        self._updated.set()

    def poll(self, timeout: float | None = None) -> bool:
        """Wait for a progress report and consume it.

        Args:
            timeout: Seconds to wait; None waits indefinitely.

        Returns:
            True if a report arrived since the last poll.
        """
        if self._updated.wait(timeout):
            self._updated.clear()
            return True
        return False

    def frame(self) -> npt.NDArray[np.uint32]:
        """Current framebuffer packed as 0x00RRGGBB, rows top to bottom."""
        return self.renderer.image.to_u32()

    def show(self, *, interval: float = 0.05) -> None:
        """Render in a background thread while refreshing a Matplotlib window.

        Blocks until the render finishes and the window is closed. An
        exception raised by the render is re-raised here.

        Args:
            interval: Seconds between window refreshes.
        """
        import matplotlib.pyplot as plt

        errors: list[BaseException] = []

        def _run() -> None:
            try:
                self.renderer.render(callback=self.notify)
            except BaseException as exc:
                errors.append(exc)
                self._updated.set()

        worker = threading.Thread(target=_run, name="pathtracer-render", daemon=True)
        worker.start()

        plt.ion()
        fig, ax = plt.subplots(1, 1)
        ax.axis("off")
        artist = ax.imshow(image_to_rgb_array(self.renderer.image))

        while worker.is_alive() and plt.fignum_exists(fig.number):
            if self.poll(interval):
                artist.set_data(image_to_rgb_array(self.renderer.image))
                completed, total = self.progress
                ax.set_title(f"{self._title} - {completed}/{total} jobs")
            plt.pause(0.001)

        worker.join()
        if errors:
            raise errors[0]

        artist.set_data(image_to_rgb_array(self.renderer.image))
        plt.ioff()
        plt.show()
