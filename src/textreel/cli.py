"""CLI for export — render a project manifest to video.

Reads a YAML manifest, validates every scene, and exports the timeline
as an mp4, a PNG frame sequence, or a dry run that only walks the frames.

Usage:
    # Export to mp4 (default name textreel-<ms>.mp4 in the current dir)
    textreel export --manifest reel.yaml --output /tmp/reel.mp4

    # PNG frame sequence, 4 worker processes
    textreel export --manifest reel.yaml --frames-dir /tmp/frames --workers 4

    # Walk all frames without encoding
    textreel export --manifest reel.yaml --dry-run

    # Validate only
    textreel export --manifest reel.yaml --validate
"""

import argparse
import sys
import time

from .export import default_output_name, dry_run, export_frames, export_video
from .manifest import load_manifest
from .timeline import total_frames


def export(
    manifest_path: str,
    output_path: str | None = None,
    frames_dir: str | None = None,
    workers: int = 1,
    simulate: bool = False,
) -> str | None:
    """Load manifest and run one export mode.

    Returns:
        The written artifact path, or None for a dry run.
    """
    config = load_manifest(manifest_path)
    video = config["video"]
    scenes = config["scenes"]
    total = total_frames(scenes)
    w, h = video["resolution"]

    print(f"Timeline: {len(scenes)} scenes, {total} frames "
          f"({total / video['fps']:.1f}s at {video['fps']}fps)")

    t0 = time.monotonic()
    if simulate:
        dry_run(config)
        print(f"\nDry run done ({time.monotonic() - t0:.1f}s wall)")
        return None

    if frames_dir:
        print(f"Resolution: {w}x{h}")
        print(f"Writing frames to: {frames_dir}/")
        export_frames(config, frames_dir, workers=workers)
        print(f"\nDone: {frames_dir}/ ({time.monotonic() - t0:.1f}s wall)")
        return frames_dir

    output_path = output_path or default_output_name()
    print(f"Resolution: {w}x{h}, {video['fps']}fps")
    print(f"Writing to: {output_path}")
    export_video(config, output_path)
    print(f"\nDone: {output_path} ({time.monotonic() - t0:.1f}s wall)")
    return output_path


def main(args=None):
    parser = argparse.ArgumentParser(
        description="Export a text reel manifest to video.",
    )
    parser.add_argument(
        "--manifest", required=True,
        help="Path to YAML project manifest",
    )
    parser.add_argument(
        "--output",
        help="Output mp4 path (default: textreel-<timestamp>.mp4)",
    )
    parser.add_argument(
        "--frames-dir",
        help="Write a PNG frame sequence to this directory instead of mp4",
    )
    parser.add_argument(
        "--workers", type=int, default=None,
        help="Parallel worker processes, --frames-dir only (default: 1)",
    )
    parser.add_argument(
        "--dry-run", action="store_true",
        help="Walk every frame and report progress without encoding",
    )
    parser.add_argument(
        "--validate", action="store_true",
        help="Validate manifest only — don't render",
    )
    args = parser.parse_args(args)

    if args.validate:
        try:
            config = load_manifest(args.manifest)
        except (OSError, ValueError) as e:
            print(f"Manifest invalid: {e}", file=sys.stderr)
            sys.exit(1)
        scenes = config["scenes"]
        print(f"Manifest valid: {len(scenes)} scenes, {total_frames(scenes)} frames")
        for i, s in enumerate(scenes):
            text = (s["text"] or "Empty scene").replace("\n", " ")[:60]
            print(f"  {i}: {s['transition']} ({s['duration']}f) — {text}")
        return

    if args.output and args.frames_dir:
        parser.error("--output and --frames-dir are mutually exclusive")
    if args.workers is not None:
        if not args.frames_dir:
            parser.error("--workers only applies to --frames-dir exports")
        if args.workers < 1:
            parser.error("--workers must be >= 1")

    try:
        artifact = export(
            args.manifest,
            output_path=args.output,
            frames_dir=args.frames_dir,
            workers=args.workers or 1,
            simulate=args.dry_run,
        )
    except (OSError, ValueError, RuntimeError) as e:
        print(f"Export failed: {e}", file=sys.stderr)
        sys.exit(1)

    if artifact:
        print(f"Video exported successfully: {artifact}")


if __name__ == "__main__":
    main()
