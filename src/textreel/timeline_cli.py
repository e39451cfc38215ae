"""CLI for timeline inspection — list scene frame ranges or probe a frame.

Usage:
    textreel timeline --manifest reel.yaml
    textreel timeline --manifest reel.yaml --frame 75
"""

import argparse

from .manifest import load_manifest
from .motion import scene_state
from .timeline import locate, scene_ranges, total_frames


def main(args=None):
    parser = argparse.ArgumentParser(
        description="Show how a manifest's scenes partition the frame axis.",
    )
    parser.add_argument(
        "--manifest", required=True,
        help="Path to YAML project manifest",
    )
    parser.add_argument(
        "--frame", type=int, default=None,
        help="Report the active scene and visual state at this frame",
    )
    args = parser.parse_args(args)

    config = load_manifest(args.manifest)
    scenes = config["scenes"]
    fps = config["video"]["fps"]
    total = total_frames(scenes)

    if args.frame is None:
        print(f"{len(scenes)} scenes, {total} frames ({total / fps:.2f}s at {fps}fps)")
        for i, (scene, start, end) in enumerate(scene_ranges(scenes)):
            print(f"  {i}: [{start:>6}, {end:>6})  {scene['transition']:<5}  {scene['id']}")
        return

    located = locate(scenes, args.frame)
    if located is None:
        print(f"Frame {args.frame}: no active scene (timeline has {total} frames)")
        return

    scene, offset = located
    state = scene_state(scene, offset, fps)
    print(f"Frame {args.frame}: scene '{scene['id']}' offset {offset}")
    print(
        f"  opacity={state['opacity']:.3f}  scale={state['scale']:.3f}  "
        f"translate_y={state['translate_y']:.1f}"
    )


if __name__ == "__main__":
    main()
