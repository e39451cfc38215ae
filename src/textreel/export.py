"""Export driver — feed compositor frames to an encoder.

Three modes:
  - mp4: a moviepy VideoClip whose frame function maps t -> frame index
    and calls compose_frame. Encoded with libx264.
  - PNG sequence: one file per frame, optionally rendered by parallel
    worker processes. Frames are independent, so workers need no
    coordination.
  - dry run: walk every frame computing visual states only, reporting
    progress. No pixels, no files.

Every mode requests exactly frames 0 .. total - 1. Output is written to a
temporary sibling path and moved into place only after the last frame
succeeds; on any failure or interruption the partial output is removed
and the exception propagates to the caller.
"""

import shutil
import time
from concurrent.futures import ProcessPoolExecutor, as_completed
from pathlib import Path

from PIL import Image
from moviepy import VideoClip

from .frames import compose_frame
from .motion import scene_state
from .timeline import locate, total_frames


FRAME_PATTERN = "frame-{:06d}.png"


def default_output_name() -> str:
    """Name for an exported artifact, unique per millisecond."""
    return f"textreel-{time.time_ns() // 1_000_000}.mp4"


def _snapshot(project: dict) -> dict:
    """Shallow copy with its own scene list, so later edits can't leak in."""
    return {**project, "scenes": list(project["scenes"])}


def _require_frames(project: dict) -> int:
    total = total_frames(project["scenes"])
    if total == 0:
        raise ValueError("No scenes to export")
    return total


# ── mp4 ──────────────────────────────────────────────────────────


def timeline_clip(project: dict) -> VideoClip:
    """moviepy clip that renders the project's timeline frame by frame."""
    project = _snapshot(project)
    total = _require_frames(project)
    fps = project["video"]["fps"]

    def _frame_at(t):
        index = min(total - 1, int(round(t * fps)))
        return compose_frame(project, index)

    # Half a frame of slack so float rounding in duration * fps never
    # drops the last frame.
    return VideoClip(_frame_at, duration=(total + 0.5) / fps).with_fps(fps)


def export_video(
    project: dict,
    output_path: str | Path,
    quiet: bool = False,
) -> Path:
    """Encode the whole timeline to an mp4 file.

    Args:
        project: Project dict (video settings + scenes).
        output_path: Destination mp4 path. Parent dirs are created.
        quiet: Suppress moviepy's progress bar.

    Returns:
        The output path.

    Raises:
        ValueError: The project has no frames.
    """
    output_path = Path(output_path)
    clip = timeline_clip(project)
    fps = project["video"]["fps"]

    output_path.parent.mkdir(parents=True, exist_ok=True)
    partial = output_path.with_name(f".{output_path.stem}.partial.mp4")

    done = False
    try:
        clip.write_videofile(
            str(partial),
            fps=fps,
            codec="libx264",
            audio=False,
            preset="medium",
            ffmpeg_params=["-crf", "20", "-pix_fmt", "yuv420p"],
            logger=None if quiet else "bar",
        )
        partial.replace(output_path)
        done = True
    finally:
        clip.close()
        if not done:
            partial.unlink(missing_ok=True)
    return output_path


# ── PNG sequence ─────────────────────────────────────────────────


def _render_frame_chunk(args):
    """Worker: render frames [start, end) of a project to PNG files.

    Takes a single tuple so it works with ProcessPoolExecutor.submit().
    """
    project, start, end, out_dir = args
    out_dir = Path(out_dir)
    for index in range(start, end):
        frame = compose_frame(project, index)
        Image.fromarray(frame).save(out_dir / FRAME_PATTERN.format(index))
    return start, end


def _chunks(total: int, parts: int) -> list[tuple[int, int]]:
    """Split range(total) into `parts` contiguous (start, end) pieces."""
    size, extra = divmod(total, parts)
    bounds = []
    start = 0
    for i in range(parts):
        end = start + size + (1 if i < extra else 0)
        if end > start:
            bounds.append((start, end))
        start = end
    return bounds


def export_frames(
    project: dict,
    output_dir: str | Path,
    workers: int = 1,
) -> Path:
    """Write every frame of the timeline as a numbered PNG.

    Args:
        project: Project dict.
        output_dir: Destination directory. Must not already exist.
        workers: Worker processes. 1 = sequential.

    Returns:
        The output directory.

    Raises:
        ValueError: No frames.
        FileExistsError: output_dir already exists.
    """
    project = _snapshot(project)
    total = _require_frames(project)

    out_dir = Path(output_dir)
    if out_dir.exists():
        raise FileExistsError(f"Output directory already exists: {out_dir}")
    out_dir.parent.mkdir(parents=True, exist_ok=True)
    partial = out_dir.with_name(f".{out_dir.name}.partial")
    if partial.exists():
        shutil.rmtree(partial)
    partial.mkdir()

    effective_workers = max(1, min(workers, total))
    work = [
        (project, start, end, str(partial))
        for start, end in _chunks(total, effective_workers)
    ]

    done = False
    try:
        if effective_workers == 1:
            for item in work:
                _render_frame_chunk(item)
        else:
            print(f"Rendering {total} frames ({effective_workers} workers)", flush=True)
            with ProcessPoolExecutor(max_workers=effective_workers) as pool:
                futures = [pool.submit(_render_frame_chunk, item) for item in work]
                for future in as_completed(futures):
                    start, end = future.result()  # propagate exceptions
                    print(f"  DONE   frames {start}-{end - 1}", flush=True)
        partial.rename(out_dir)
        done = True
    finally:
        if not done:
            shutil.rmtree(partial, ignore_errors=True)
    return out_dir


# ── Dry run ──────────────────────────────────────────────────────


def dry_run(project: dict, delay: float = 0.0) -> list[dict]:
    """Walk the timeline computing each frame's visual state.

    Prints a progress line whenever the completed percentage changes.
    `delay` sleeps per frame to simulate encoder cost.

    Returns:
        One visual state dict per frame, in frame order.
    """
    project = _snapshot(project)
    total = _require_frames(project)
    scenes = project["scenes"]
    fps = project["video"]["fps"]

    states = []
    last_pct = -1
    for index in range(total):
        scene, offset = locate(scenes, index)
        states.append(scene_state(scene, offset, fps))
        if delay:
            time.sleep(delay)
        pct = (index + 1) * 100 // total
        if pct != last_pct:
            print(f"Rendering: {pct}% complete", flush=True)
            last_pct = pct
    return states
