#!/usr/bin/env python3
"""Render a preset sphere scene to a PNG file.

Renders a number of progressive frames of one of the preset scenes and saves
the converged image.

Usage:
    python examples/render_spheres.py [options]

Options:
    --width WIDTH       Image width in pixels (default: 640)
    --height HEIGHT     Image height in pixels (default: 360)
    --frames FRAMES     Number of frames to accumulate (default: 64)
    --scene NAME        Preset scene: default, showcase, mirrors (default: default)
    --output OUTPUT     Output file path (default: spheres.png)
    --no-accumulate     Render independent frames instead of averaging them
    --cpu               Force the CPU backend
    --seed SEED         Random seed for the Taichi runtime (default: 0)
    --verbose           Enable debug logging
    --quiet             Suppress progress output

Example:
    python examples/render_spheres.py --scene showcase --frames 128
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path

import taichi as ti


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    from raybounce.scene.presets import PRESETS

    parser = argparse.ArgumentParser(
        description="Render a preset sphere scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--width", type=int, default=640, help="Image width in pixels (default: 640)")
    parser.add_argument("--height", type=int, default=360, help="Image height in pixels (default: 360)")
    parser.add_argument(
        "--frames",
        type=int,
        default=64,
        help="Number of frames to accumulate (default: 64)",
    )
    parser.add_argument(
        "--scene",
        choices=sorted(PRESETS),
        default="default",
        help="Preset scene (default: default)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="spheres.png",
        help="Output file path (default: spheres.png)",
    )
    parser.add_argument(
        "--no-accumulate",
        action="store_true",
        help="Render independent frames instead of averaging them",
    )
    parser.add_argument("--cpu", action="store_true", help="Force the CPU backend")
    parser.add_argument("--seed", type=int, default=0, help="Random seed (default: 0)")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--quiet", action="store_true", help="Suppress progress output")
    return parser.parse_args()


def render_spheres(
    width: int = 640,
    height: int = 360,
    num_frames: int = 64,
    scene_name: str = "default",
    output_path: str = "spheres.png",
    accumulate: bool = True,
    quiet: bool = False,
) -> Path:
    """Render a preset scene and save it to a PNG file.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
        num_frames: Number of frames to render.
        scene_name: Key into PRESETS.
        output_path: Output file path (PNG).
        accumulate: Average the frames (False keeps only the last one).
        quiet: If True, suppress progress output.

    Returns:
        Path to the saved image file.
    """
    from raybounce.core.renderer import Renderer, RendererSettings
    from raybounce.preview.export import save_png
    from raybounce.scene.presets import PRESETS

    if not quiet:
        print(f"Creating '{scene_name}' scene ({width}x{height})...")

    scene, camera = PRESETS[scene_name]()
    camera.resize(width, height)

    renderer = Renderer(settings=RendererSettings(accumulate=accumulate))
    renderer.resize(width, height)

    if not quiet:
        print(f"Rendering {num_frames} frames...")

    start_time = time.time()
    for frame in range(1, num_frames + 1):
        renderer.render(scene, camera)
        if not quiet:
            elapsed = time.time() - start_time
            fps = frame / elapsed if elapsed > 0 else 0
            print(
                f"\r  Progress: {frame}/{num_frames} frames "
                f"({frame / num_frames * 100:.1f}%) - {fps:.1f} fps, "
                f"last frame {renderer.last_render_time * 1e3:.1f}ms",
                end="",
                flush=True,
            )

    if not quiet:
        print()

    output_file = Path(output_path)
    save_png(renderer, str(output_file))

    total_time = time.time() - start_time
    if not quiet:
        print(f"Saved to: {output_file.absolute()}")
        print(f"Total time: {total_time:.2f}s")

    return output_file


def main() -> int:
    """Main entry point."""
    args = parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    if args.cpu:
        ti.init(arch=ti.cpu, random_seed=args.seed)
    else:
        # Use GPU if available, fall back to CPU
        try:
            ti.init(arch=ti.gpu, random_seed=args.seed)
            if not args.quiet:
                print("Using GPU backend")
        except Exception:
            ti.init(arch=ti.cpu, random_seed=args.seed)
            if not args.quiet:
                print("Using CPU backend")

    try:
        render_spheres(
            width=args.width,
            height=args.height,
            num_frames=args.frames,
            scene_name=args.scene,
            output_path=args.output,
            accumulate=not args.no_accumulate,
            quiet=args.quiet,
        )
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
