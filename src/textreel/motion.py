"""Scene motion — per-frame visual state of a single scene.

A scene's visual state at a local offset (frames since the scene's own
start) is the triple:

  - opacity: 15-frame fade in, 15-frame fade out. Applies to every scene.
  - scale: spring from 0 to 1 over the scene duration (zoom only, else 1).
  - translate_y: linear slide from 50 to 0 over the duration (slide only,
    else 0).

Every function here is pure. The state of scene N at offset k depends
only on scene N's own fields, so frames can be evaluated out of order
(scrubbing) or on parallel workers (export) with identical results.

Spring physics use a frame-stepped damped oscillator. Each step advances
the closed-form solution by one frame interval (capped at 64 ms). With
damping ratio >= 1 the critically damped solution is used; below 1 the
underdamped one.
"""

import math
from functools import lru_cache

import numpy as np


FADE_FRAMES = 15
SLIDE_DISTANCE = 50.0

# Spring used by the zoom transition.
ZOOM_SPRING = {"damping": 100.0, "stiffness": 200.0, "mass": 0.5}

DEFAULT_REST_THRESHOLD = 0.005
_MAX_STEP_MS = 64.0
_SETTLE_CHECK_FRAMES = 20

VALID_TRANSITIONS = {"fade", "slide", "zoom"}


# ── Interpolation ────────────────────────────────────────────────


def interpolate(
    x: float,
    input_range: list[float],
    output_range: list[float],
) -> float:
    """Piecewise-linear interpolation, clamped at both ends.

    Values of x outside input_range saturate at the first/last output
    value instead of extrapolating. input_range must be increasing.
    """
    if len(input_range) != len(output_range):
        raise ValueError(
            f"input_range and output_range differ in length: "
            f"{len(input_range)} vs {len(output_range)}"
        )
    if any(b < a for a, b in zip(input_range, input_range[1:])):
        raise ValueError(f"input_range must be increasing, got {input_range}")
    return float(np.interp(x, input_range, output_range))


# ── Spring physics ───────────────────────────────────────────────


def _advance(
    current: float,
    velocity: float,
    delta_ms: float,
    damping: float,
    stiffness: float,
    mass: float,
) -> tuple[float, float]:
    """Advance a 0 -> 1 spring by delta_ms. Returns (position, velocity)."""
    if damping <= 0:
        raise ValueError("Spring damping must be > 0")

    delta_ms = min(delta_ms, _MAX_STEP_MS)
    t = delta_ms / 1000.0

    v0 = -velocity
    x0 = 1.0 - current
    zeta = damping / (2.0 * math.sqrt(stiffness * mass))
    omega0 = math.sqrt(stiffness / mass)

    if zeta < 1:
        omega1 = omega0 * math.sqrt(1.0 - zeta ** 2)
        envelope = math.exp(-zeta * omega0 * t)
        sin1 = math.sin(omega1 * t)
        cos1 = math.cos(omega1 * t)
        frag = envelope * (
            sin1 * ((v0 + zeta * omega0 * x0) / omega1) + x0 * cos1
        )
        position = 1.0 - frag
        new_velocity = zeta * omega0 * frag - envelope * (
            cos1 * (v0 + zeta * omega0 * x0) - omega1 * x0 * sin1
        )
        return position, new_velocity

    envelope = math.exp(-omega0 * t)
    position = 1.0 - envelope * (x0 + (v0 + omega0 * x0) * t)
    new_velocity = envelope * (v0 * (t * omega0 - 1.0) + t * x0 * omega0 ** 2)
    return position, new_velocity


def _spring_position(
    frame: float,
    fps: float,
    damping: float,
    stiffness: float,
    mass: float,
) -> float:
    """Spring position at a (possibly fractional) frame, stepping per frame."""
    frame = max(0.0, float(frame))
    whole = math.floor(frame)
    rest = frame - whole

    current = 0.0
    velocity = 0.0
    last_ms = 0.0
    for f in range(whole + 1):
        step = f + rest if f == whole else f
        now_ms = step / fps * 1000.0
        current, velocity = _advance(
            current, velocity, now_ms - last_ms, damping, stiffness, mass,
        )
        last_ms = now_ms
    return current


@lru_cache(maxsize=128)
def measure_spring(
    fps: float,
    damping: float,
    stiffness: float,
    mass: float,
    threshold: float = DEFAULT_REST_THRESHOLD,
) -> int:
    """Natural duration of a spring in frames.

    The spring is settled once it stays within threshold of its target
    for 20 consecutive frames. Returns the first frame of that run.
    """
    if threshold <= 0:
        raise ValueError("Spring rest threshold must be > 0")
    if threshold >= 1:
        return 0

    def _distance(f):
        return abs(1.0 - _spring_position(f, fps, damping, stiffness, mass))

    frame = 0
    while _distance(frame) >= threshold:
        frame += 1
    finished = frame

    checked = 0
    while checked < _SETTLE_CHECK_FRAMES:
        frame += 1
        checked += 1
        if _distance(frame) >= threshold:
            # Overshoot left the rest band, start the run again.
            checked = 0
            finished = frame + 1
    return finished


def spring(
    frame: float,
    fps: float,
    damping: float,
    stiffness: float,
    mass: float,
    duration_in_frames: float | None = None,
    threshold: float = DEFAULT_REST_THRESHOLD,
) -> float:
    """Spring animation value going from 0 to 1.

    Args:
        frame: Frames since the animation started. Negative frames are
            treated as 0.
        fps: Frame rate, converts frames to physical time.
        damping, stiffness, mass: Spring constants.
        duration_in_frames: If set, time is stretched so the spring's
            natural settle duration lands on this frame. Frames past it
            return exactly 1.
        threshold: Rest threshold used to measure the natural duration.

    Returns:
        Spring position. May overshoot 1 for underdamped springs.
    """
    if duration_in_frames is None:
        return _spring_position(frame, fps, damping, stiffness, mass)

    if frame > duration_in_frames:
        return 1.0

    natural = measure_spring(fps, damping, stiffness, mass, threshold)
    if natural == 0:
        return 1.0
    stretched = frame / (duration_in_frames / natural)
    return _spring_position(stretched, fps, damping, stiffness, mass)


# ── Scene state ──────────────────────────────────────────────────


def opacity_envelope(local_offset: float, duration: float) -> float:
    """Fade-in/fade-out envelope over (0, 15, duration - 15, duration).

    Computed as the lower of the fade-in and fade-out ramps. For scenes
    of 30 frames or more this is the four-point envelope. Shorter scenes
    get a clamped triangular peak that never reaches 1.
    """
    fade_in = interpolate(local_offset, [0, FADE_FRAMES], [0.0, 1.0])
    fade_out = interpolate(
        local_offset, [duration - FADE_FRAMES, duration], [1.0, 0.0],
    )
    return min(1.0, max(0.0, min(fade_in, fade_out)))


def scene_state(scene: dict, local_offset: float, fps: float = 30) -> dict:
    """Visual state of a scene at a local frame offset.

    Never raises for out-of-range offsets: values before 0 or after the
    duration saturate at the boundary values. A non-positive duration is
    treated as 1.

    Args:
        scene: Scene dict (needs duration and transition).
        local_offset: Frames since the scene's start. May be fractional.
        fps: Output frame rate, used only by the zoom spring.

    Returns:
        Dict with opacity (0..1), scale, and translate_y.
    """
    duration = max(1, scene["duration"])
    transition = scene["transition"]

    opacity = opacity_envelope(local_offset, duration)

    scale = 1.0
    if transition == "zoom":
        scale = spring(
            local_offset, fps,
            duration_in_frames=duration,
            **ZOOM_SPRING,
        )

    translate_y = 0.0
    if transition == "slide":
        translate_y = interpolate(
            local_offset, [0, duration], [SLIDE_DISTANCE, 0.0],
        )

    return {"opacity": opacity, "scale": scale, "translate_y": translate_y}
