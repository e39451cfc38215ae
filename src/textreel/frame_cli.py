"""CLI for single-frame preview — scrub to one frame and save it as PNG.

Usage:
    textreel frame --manifest reel.yaml --frame 42 --output /tmp/f42.png
"""

import argparse
from pathlib import Path

from PIL import Image

from .frames import compose_frame
from .manifest import load_manifest
from .timeline import locate, total_frames


def render_frame(manifest_path: str, frame: int, output_path: str) -> Path:
    """Render global frame `frame` of a manifest to a PNG file."""
    config = load_manifest(manifest_path)
    total = total_frames(config["scenes"])

    located = locate(config["scenes"], frame)
    if located is None:
        print(f"Frame {frame}: no active scene (timeline has {total} frames)")
    else:
        scene, offset = located
        print(f"Frame {frame}: scene '{scene['id']}' at offset {offset}")

    out = Path(output_path)
    out.parent.mkdir(parents=True, exist_ok=True)
    Image.fromarray(compose_frame(config, frame)).save(out)
    print(f"Done: {out}")
    return out


def main(args=None):
    parser = argparse.ArgumentParser(
        description="Render one frame of a text reel manifest to PNG.",
    )
    parser.add_argument(
        "--manifest", required=True,
        help="Path to YAML project manifest",
    )
    parser.add_argument(
        "--frame", type=int, required=True,
        help="Global frame index (0-based)",
    )
    parser.add_argument(
        "--output", required=True,
        help="Output PNG path",
    )
    args = parser.parse_args(args)

    if args.frame < 0:
        parser.error("--frame must be >= 0")

    render_frame(args.manifest, args.frame, args.output)


if __name__ == "__main__":
    main()
