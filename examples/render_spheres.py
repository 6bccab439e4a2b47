#!/usr/bin/env python3
"""Render a sphere scene to an ASCII PPM file.

Usage:
    python -m examples.render_spheres [options]

Options:
    --scene NAME        two-spheres or showcase (default: two-spheres)
    --width WIDTH       Image width in pixels (default: 400)
    --aspect-ratio R    Width / height (default: 16/9)
    --samples SAMPLES   Samples per pixel (default: 100)
    --max-depth DEPTH   Maximum bounces per sample (default: 50)
    --vfov DEGREES      Vertical field of view (default: 90)
    --lookfrom X Y Z    Camera position (default: 0 0 0)
    --lookat X Y Z      Point the camera aims at (default: 0 0 -1)
    --vup X Y Z         Camera up reference (default: 0 1 0)
    --seed SEED         Random seed (default: 0)
    --output OUTPUT     Output file path (default: out.ppm)
    --gpu               Request the GPU backend
    --quiet             Suppress progress output

Example:
    python -m examples.render_spheres --scene showcase --samples 20 --output showcase.ppm
"""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path

SCENES = ("two-spheres", "showcase")


def _vector(values: list[float] | None) -> tuple[float, float, float] | None:
    if values is None:
        return None
    return (values[0], values[1], values[2])


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render a sphere scene to an ASCII PPM file.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--scene",
        choices=SCENES,
        default="two-spheres",
        help="Scene to render (default: two-spheres)",
    )
    parser.add_argument(
        "--width",
        type=int,
        default=400,
        help="Image width in pixels (default: 400)",
    )
    parser.add_argument(
        "--aspect-ratio",
        type=float,
        default=16.0 / 9.0,
        help="Image width divided by height (default: 16/9)",
    )
    parser.add_argument(
        "--samples",
        type=int,
        default=100,
        help="Number of samples per pixel (default: 100)",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=50,
        help="Maximum bounces per sample (default: 50)",
    )
    parser.add_argument(
        "--vfov",
        type=float,
        default=None,
        help="Vertical field of view in degrees (default: 90)",
    )
    parser.add_argument("--lookfrom", type=float, nargs=3, default=None, metavar=("X", "Y", "Z"))
    parser.add_argument("--lookat", type=float, nargs=3, default=None, metavar=("X", "Y", "Z"))
    parser.add_argument("--vup", type=float, nargs=3, default=None, metavar=("X", "Y", "Z"))
    parser.add_argument(
        "--seed",
        type=int,
        default=0,
        help="Random seed; equal seeds give identical images (default: 0)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="out.ppm",
        help="Output file path (default: out.ppm)",
    )
    parser.add_argument(
        "--gpu",
        action="store_true",
        help="Request the GPU backend (falls back to CPU when unavailable)",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    return parser.parse_args(argv)


def render_spheres(args: argparse.Namespace) -> Path:
    """Build the requested scene, render it, and save the PPM file.

    Returns:
        Path to the saved image file.
    """
    # Lazy imports to allow Taichi initialization first
    from src.raytracer.output.ppm import save_ppm
    from src.raytracer.scene.demo import (
        create_material_showcase_scene,
        create_two_sphere_scene,
    )

    factory = create_two_sphere_scene if args.scene == "two-spheres" else create_material_showcase_scene
    scene, camera = factory(
        samples_per_pixel=args.samples,
        max_depth=args.max_depth,
        image_width=args.width,
    )

    camera.aspect_ratio = args.aspect_ratio
    camera.seed = args.seed
    if args.vfov is not None:
        camera.vfov = args.vfov
    for name in ("lookfrom", "lookat", "vup"):
        value = _vector(getattr(args, name))
        if value is not None:
            setattr(camera, name, value)

    def progress_callback(remaining: int, height: int) -> None:
        print(f"\rScanlines remaining: {remaining} ", end="", file=sys.stderr, flush=True)

    start_time = time.time()
    text = camera.render_to_string(scene, progress=None if args.quiet else progress_callback)

    output_file = Path(args.output)
    save_ppm(output_file, text)

    if not args.quiet:
        print("\rDone.                 ", file=sys.stderr)
        print(f"Saved to: {output_file.absolute()}", file=sys.stderr)
        print(f"Total time: {time.time() - start_time:.2f}s", file=sys.stderr)

    return output_file


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    from src.raytracer.core.backend import init_taichi

    backend = init_taichi("gpu" if args.gpu else "cpu", seed=args.seed)
    if not args.quiet:
        print(f"Using {backend.upper()} backend", file=sys.stderr)

    try:
        render_spheres(args)
        return 0
    except (ValueError, RuntimeError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
