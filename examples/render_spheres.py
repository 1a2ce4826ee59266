#!/usr/bin/env python3
"""Render the random spheres scene.

This script demonstrates end-to-end rendering of the classic random spheres
scene: it builds the scene and its thin-lens camera, renders the image on a
pool of worker threads and writes the result to a BMP or PNG file.

Usage:
    python examples/render_spheres.py [options]

Options:
    --width WIDTH         Image width in pixels (default: 600)
    --height HEIGHT       Image height in pixels (default: 400)
    --samples SAMPLES     Number of samples per pixel (default: 10)
    --depth DEPTH         Maximum bounces per path (default: 50)
    --seed SEED           Seed for the scene and the sampler (default: 0)
    --strategy STRATEGY   "tiles" or "samples" (default: tiles)
    --tile-size SIZE      Tile edge length (default: 32)
    --workers N           Worker threads (default: CPU count)
    --output OUTPUT       Output file path (default: spheres.bmp)
    --preview             Show a live preview window while rendering
    --quiet               Suppress progress output

Example:
    python examples/render_spheres.py --width 300 --height 200 --samples 20
"""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path

from pathtracer.camera import setup_camera
from pathtracer.core.integrator import RenderSettings
from pathtracer.core.scheduler import DEFAULT_TILE_SIZE, ParallelRenderer, Sharding
from pathtracer.preview import LivePreview, save_image
from pathtracer.scene import create_random_spheres_scene


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render the random spheres scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--width", type=int, default=600, help="Image width in pixels (default: 600)")
    parser.add_argument("--height", type=int, default=400, help="Image height in pixels (default: 400)")
    parser.add_argument(
        "--samples", type=int, default=10, help="Number of samples per pixel (default: 10)"
    )
    parser.add_argument("--depth", type=int, default=50, help="Maximum bounces per path (default: 50)")
    parser.add_argument(
        "--seed", type=int, default=0, help="Seed for the scene and the sampler (default: 0)"
    )
    parser.add_argument(
        "--strategy",
        choices=[s.value for s in Sharding],
        default=Sharding.TILES.value,
        help="Job sharding strategy (default: tiles)",
    )
    parser.add_argument(
        "--tile-size",
        type=int,
        default=DEFAULT_TILE_SIZE,
        help=f"Tile edge length in pixels (default: {DEFAULT_TILE_SIZE})",
    )
    parser.add_argument("--workers", type=int, default=None, help="Worker threads (default: CPU count)")
    parser.add_argument(
        "--output", type=str, default="spheres.bmp", help="Output file path (default: spheres.bmp)"
    )
    parser.add_argument("--preview", action="store_true", help="Show a live preview window")
    parser.add_argument("--quiet", action="store_true", help="Suppress progress output")
    return parser.parse_args()


def render_spheres(
    width: int = 600,
    height: int = 400,
    samples: int = 10,
    max_depth: int = 50,
    seed: int = 0,
    strategy: Sharding = Sharding.TILES,
    tile_size: int = DEFAULT_TILE_SIZE,
    workers: int | None = None,
    output_path: str = "spheres.bmp",
    preview: bool = False,
    quiet: bool = False,
) -> Path:
    """Render the random spheres scene and save to file.

    Returns:
        Path to the saved image file.
    """
    if not quiet:
        print(f"Creating random spheres scene ({width}x{height})...")

    scene, camera_config = create_random_spheres_scene(seed=seed, aspect_ratio=width / height)
    camera = setup_camera(camera_config)
    settings = RenderSettings(samples=samples, max_depth=max_depth, seed=seed)

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

    if not quiet:
        print(f"Rendering {len(scene)} spheres, {samples} samples per pixel: {renderer!r}")

    start_time = time.time()

    if preview:
        LivePreview(renderer).show()
    else:
        for completed, total in renderer.render_progressive():
            if not quiet:
                elapsed = time.time() - start_time
                print(
                    f"\r  Progress: {completed}/{total} jobs "
                    f"({100.0 * completed / total:.1f}%) - {elapsed:.1f}s",
                    end="",
                    flush=True,
                )
        if not quiet:
            print()  # Newline after progress

    output_file = Path(output_path)
    save_image(renderer.image, output_file)

    total_time = time.time() - start_time
    if not quiet:
        print(f"Saved to: {output_file.absolute()}")
        print(f"Total time: {total_time:.2f}s")

    return output_file


def main() -> int:
    """Main entry point."""
    args = parse_args()

    try:
        render_spheres(
            width=args.width,
            height=args.height,
            samples=args.samples,
            max_depth=args.depth,
            seed=args.seed,
            strategy=Sharding(args.strategy),
            tile_size=args.tile_size,
            workers=args.workers,
            output_path=args.output,
            preview=args.preview,
            quiet=args.quiet,
        )
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
