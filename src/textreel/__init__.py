"""textreel — timed text scenes composited into video.

Scenes play back to back on a frame-accurate timeline. For any frame the
compositor finds the active scene and its visual state (fade, zoom spring,
slide), rasterizes it, and hands it to an exporter. Projects are declared
in YAML manifests.
"""
