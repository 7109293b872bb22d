#!/usr/bin/env python3
"""Render the demo sphere scene (or a scene loaded from JSON).

Usage:
    python -m examples.render_spheres [options]

Options:
    --width WIDTH       Image width in pixels (default: 500)
    --height HEIGHT     Image height in pixels (default: 500)
    --fov DEGREES       Vertical field of view in degrees (default: 90)
    --scene PATH        JSON scene written by SceneManager.save_json
    --output OUTPUT     Output file path, .png or .ppm (default: render.ppm)
    --rows-per-batch N  Rows per progress update (default: 50)
    --cpu               Force the CPU backend
    --quiet             Suppress progress output

Example:
    python -m examples.render_spheres --width 256 --height 256 --output spheres.png
"""

from __future__ import annotations

import argparse
import math
import sys
import time
from pathlib import Path

import taichi as ti


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render a sphere scene with Whitted-style ray tracing.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=500,
        help="Image width in pixels (default: 500)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=500,
        help="Image height in pixels (default: 500)",
    )
    parser.add_argument(
        "--fov",
        type=float,
        default=90.0,
        help="Vertical field of view in degrees (default: 90)",
    )
    parser.add_argument(
        "--scene",
        type=str,
        default=None,
        help="JSON scene file (default: built-in demo scene)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="render.ppm",
        help="Output file path, .png or .ppm (default: render.ppm)",
    )
    parser.add_argument(
        "--rows-per-batch",
        type=int,
        default=50,
        help="Rows per progress update (default: 50)",
    )
    parser.add_argument(
        "--cpu",
        action="store_true",
        help="Force the CPU backend",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    return parser.parse_args()


def render_spheres(
    width: int = 500,
    height: int = 500,
    fov_degrees: float = 90.0,
    scene_path: str | None = None,
    output_path: str = "render.ppm",
    rows_per_batch: int = 50,
    quiet: bool = False,
) -> Path:
    """Render a scene and save it to file.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
        fov_degrees: Vertical field of view in degrees.
        scene_path: Optional JSON scene file. The demo scene is used if None.
        output_path: Output file path (.png or .ppm).
        rows_per_batch: Rows to render between progress updates.
        quiet: If True, suppress progress output.

    Returns:
        Path to the saved image file.
    """
    # Lazy imports to allow Taichi initialization first
    from whitted.camera.pinhole import PinholeCamera, setup_camera
    from whitted.core.renderer import FrameRenderer
    from whitted.scene.demo import create_demo_scene
    from whitted.scene.manager import SceneManager

    camera = PinholeCamera(fov=math.radians(fov_degrees))
    if scene_path is None:
        if not quiet:
            print(f"Creating demo scene ({width}x{height})...")
        scene, _ = create_demo_scene()
    else:
        if not quiet:
            print(f"Loading scene from {scene_path} ({width}x{height})...")
        scene = SceneManager()
        scene.load_json(scene_path)

    if not quiet:
        print(f"  {scene.get_sphere_count()} spheres, {scene.get_light_count()} lights")

    setup_camera(camera)
    renderer = FrameRenderer(width, height)

    start_time = time.time()

    def progress_callback(done: int, total: int) -> None:
        if not quiet:
            progress_pct = (done / total) * 100 if total > 0 else 0
            print(f"\r  Progress: {done}/{total} rows ({progress_pct:.1f}%)", end="", flush=True)

    renderer.render(rows_per_batch=rows_per_batch, callback=progress_callback)

    if not quiet:
        print()  # Newline after progress

    output_file = Path(output_path)
    renderer.save_image(str(output_file))

    total_time = time.time() - start_time
    if not quiet:
        print(f"Saved to: {output_file.absolute()}")
        print(f"Total time: {total_time:.2f}s")

    return output_file


def main() -> int:
    """Main entry point."""
    args = parse_args()

    if args.cpu:
        ti.init(arch=ti.cpu)
    else:
        # Use GPU if available, Taichi falls back to CPU otherwise
        ti.init(arch=ti.gpu)

    try:
        render_spheres(
            width=args.width,
            height=args.height,
            fov_degrees=args.fov,
            scene_path=args.scene,
            output_path=args.output,
            rows_per_batch=args.rows_per_batch,
            quiet=args.quiet,
        )
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
