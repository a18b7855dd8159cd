#!/usr/bin/env python3
"""Interactive progressive renderer for the preset sphere scenes.

Opens a Taichi GGUI window that renders one frame per iteration and keeps
averaging frames while the image is static.

Usage:
    python examples/interactive_spheres.py [--scene NAME] [--width W] [--height H]

Controls:
    - Accumulate: toggle frame averaging
    - Reset: restart accumulation
    - Export PNG: save the current image with a timestamp
"""

from __future__ import annotations

import argparse
import platform
import sys

import taichi as ti


def initialize_taichi() -> str:
    """Initialize Taichi with the best available backend.

    On macOS, prefers Metal. Falls back to CPU if GPU is unavailable.

    Returns:
        Name of the backend being used.
    """
    if platform.system() == "Darwin":
        try:
            ti.init(arch=ti.metal)
            return "Metal (GPU)"
        except Exception:
            pass

    try:
        ti.init(arch=ti.gpu)
        return "GPU"
    except Exception:
        pass

    ti.init(arch=ti.cpu)
    return "CPU"


def main() -> int:
    """Main entry point for the interactive renderer."""
    from raybounce.scene.presets import PRESETS

    parser = argparse.ArgumentParser(description="Interactive sphere renderer.")
    parser.add_argument("--scene", choices=sorted(PRESETS), default="default")
    parser.add_argument("--width", type=int, default=800)
    parser.add_argument("--height", type=int, default=600)
    args = parser.parse_args()

    backend = initialize_taichi()
    print(f"Taichi backend: {backend}")

    from raybounce.preview.interactive import InteractivePreview

    if not InteractivePreview.is_display_available():
        print("Error: No display available. Cannot run interactive preview.")
        print("This script requires a graphical display environment.")
        return 1

    scene, camera = PRESETS[args.scene]()

    print(f"Creating interactive preview window ({args.width}x{args.height})...")
    preview = InteractivePreview(args.width, args.height)

    print("Starting interactive rendering...")
    print("  - Toggle 'Accumulate' to average frames")
    print("  - Click 'Reset' to restart accumulation")
    print("  - Click 'Export PNG' to save current render")
    print("  - Close window to exit")
    print()

    try:
        preview.run(scene, camera)
    except KeyboardInterrupt:
        print("\nInterrupted by user.")
    finally:
        preview.close()
        print("Preview window closed.")

    return 0


if __name__ == "__main__":
    sys.exit(main())
