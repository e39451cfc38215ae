"""Subcommand dispatcher for textreel.

Usage:
    textreel export    --manifest ... [--output ... | --frames-dir ... | --dry-run]
    textreel frame     --manifest ... --frame N --output frame.png
    textreel timeline  --manifest ... [--frame N]
"""

import argparse
import sys


def main(args=None):
    parser = argparse.ArgumentParser(
        prog="textreel",
        description="Timed text scenes composited into video.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # Register subcommands. Each delegates to its own module's main().
    subparsers.add_parser("export", help="Export a manifest to mp4 or PNG frames")
    subparsers.add_parser("frame", help="Render a single frame to PNG")
    subparsers.add_parser("timeline", help="Inspect the scene timeline")

    # Parse only the subcommand name, pass the rest to the subcommand's parser.
    parsed, remaining = parser.parse_known_args(args)

    if parsed.command is None:
        parser.print_help()
        sys.exit(1)

    if parsed.command == "export":
        from .cli import main as export_main
        export_main(remaining)
    elif parsed.command == "frame":
        from .frame_cli import main as frame_main
        frame_main(remaining)
    elif parsed.command == "timeline":
        from .timeline_cli import main as timeline_main
        timeline_main(remaining)


if __name__ == "__main__":
    main()
