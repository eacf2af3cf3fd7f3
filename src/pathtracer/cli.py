"""Command-line renderer.

Renders a built-in preset or a JSON scene file to a PNG image, with either the
pure-Python reference renderer or the Taichi parallel backend.

Usage:
    pathtracer [options]
    python -m pathtracer.cli [options]

Example:
    pathtracer --scene three-spheres --width 200 --samples 20 --output spheres.png
    pathtracer --scene random --backend taichi --arch gpu --samples 500 --preview
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
import time
from collections.abc import Sequence
from pathlib import Path

import numpy as np
from tqdm import tqdm

from pathtracer.camera.camera import Camera, CameraConfig
from pathtracer.core.integrator import MAX_DEPTH
from pathtracer.core.sampling import RandomSource
from pathtracer.preview.export import save_png
from pathtracer.scene.config import load_scene_file
from pathtracer.scene.presets import PRESETS, build_preset
from pathtracer.scene.world import Scene

logger = logging.getLogger(__name__)

BACKENDS = ("python", "taichi")


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="pathtracer",
        description="Render a scene of spheres with a Monte Carlo path tracer.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--scene",
        choices=sorted(PRESETS),
        default="random",
        help="Built-in scene preset (default: random)",
    )
    parser.add_argument(
        "--scene-file",
        type=str,
        default=None,
        help="JSON scene file to render instead of a preset",
    )
    parser.add_argument("--width", type=int, default=None, help="Image width in pixels")
    parser.add_argument(
        "--aspect-ratio", type=float, default=None, help="Image width divided by height"
    )
    parser.add_argument("--samples", type=int, default=None, help="Samples per pixel")
    parser.add_argument(
        "--vfov", type=float, default=None, help="Vertical field of view in degrees"
    )
    parser.add_argument(
        "--defocus-angle",
        type=float,
        default=None,
        help="Defocus cone angle in degrees (0 disables depth of field)",
    )
    parser.add_argument(
        "--focus-dist", type=float, default=None, help="Distance to the plane of focus"
    )
    parser.add_argument(
        "--seed", type=int, default=None, help="Random seed for reproducible renders"
    )
    parser.add_argument(
        "--backend",
        choices=BACKENDS,
        default="python",
        help="Renderer to use (default: python)",
    )
    parser.add_argument(
        "--arch",
        choices=("cpu", "gpu"),
        default="cpu",
        help="Taichi architecture for the taichi backend (default: cpu)",
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        default=10,
        help="Samples per progress update for the taichi backend (default: 10)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="render.png",
        help="Output file path (default: render.png)",
    )
    parser.add_argument(
        "--preview",
        action="store_true",
        help="Show the result in a matplotlib window after saving",
    )
    parser.add_argument("--quiet", action="store_true", help="Suppress progress output")
    parser.add_argument(
        "--log-level",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        default="WARNING",
        help="Logging level (default: WARNING)",
    )
    return parser.parse_args(argv)


def apply_overrides(config: CameraConfig, args: argparse.Namespace) -> CameraConfig:
    """Return config with every camera option given on the command line applied."""
    overrides = {
        "image_width": args.width,
        "aspect_ratio": args.aspect_ratio,
        "samples_per_pixel": args.samples,
        "vfov": args.vfov,
        "defocus_angle": args.defocus_angle,
        "focus_dist": args.focus_dist,
    }
    changes = {key: value for key, value in overrides.items() if value is not None}
    return dataclasses.replace(config, **changes)


def load_scene(args: argparse.Namespace, rng: RandomSource) -> tuple[Scene, CameraConfig]:
    """Build the scene and camera configuration selected by the arguments."""
    if args.scene_file is not None:
        scene, camera_config = load_scene_file(args.scene_file)
        if camera_config is None:
            camera_config = CameraConfig()
    else:
        scene, camera_config = build_preset(args.scene, rng)
    return scene, apply_overrides(camera_config, args)


def render_python(
    camera: Camera,
    scene: Scene,
    rng: RandomSource,
    max_depth: int = MAX_DEPTH,
    quiet: bool = False,
) -> np.ndarray:
    """Render with the reference renderer, showing scanline progress."""
    with tqdm(total=100, unit="%", desc="Rendering", disable=quiet) as bar:

        def progress_callback(percent: int) -> None:
            bar.update(percent - bar.n)

        return camera.render(scene, rng, progress_callback, max_depth)


def render_taichi(
    camera: Camera,
    scene: Scene,
    arch: str = "cpu",
    seed: int | None = None,
    max_depth: int = MAX_DEPTH,
    batch_size: int = 10,
    quiet: bool = False,
) -> np.ndarray:
    """Render with the Taichi backend, showing per-batch sample progress."""
    from pathtracer.accel import init_backend

    init_backend(arch=arch, seed=seed)

    # Lazy import to allow Taichi initialization first
    from pathtracer.accel.renderer import ParallelRenderer

    renderer = ParallelRenderer(camera, scene, max_depth=max_depth)
    with tqdm(total=camera.samples_per_pixel, unit="spp", desc="Rendering", disable=quiet) as bar:

        def progress_callback(current: int, target: int) -> None:
            bar.update(current - bar.n)

        renderer.render(batch_size=batch_size, callback=progress_callback)

    return renderer.get_image_uint8()


def run(args: argparse.Namespace) -> Path:
    """Render according to parsed arguments and save the image.

    Returns:
        Path to the saved image file.
    """
    rng = RandomSource(args.seed)
    scene, camera_config = load_scene(args, rng)
    camera = Camera(camera_config)

    if not args.quiet:
        print(
            f"Rendering {len(scene)} objects at {camera.image_width}x{camera.image_height}, "
            f"{camera.samples_per_pixel} spp ({args.backend} backend)..."
        )

    start_time = time.time()
    if args.backend == "taichi":
        image = render_taichi(
            camera,
            scene,
            arch=args.arch,
            seed=args.seed,
            batch_size=args.batch_size,
            quiet=args.quiet,
        )
    else:
        image = render_python(camera, scene, rng, quiet=args.quiet)

    output_file = save_png(image, args.output)
    total_time = time.time() - start_time
    if not args.quiet:
        print(f"Saved to: {output_file.absolute()}")
        print(f"Total time: {total_time:.2f}s")

    if args.preview:
        from pathtracer.preview.display import show_image

        show_image(image, title=str(output_file))

    return output_file


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        run(args)
        return 0
    except Exception as e:
        logger.debug("Render failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
