"""CHIP-8 interpreter with an optional pygame host.

The interpreter core lives in ``cpu``, ``bus`` and ``video``; ``system``
assembles them into a machine. ``loader``, ``audio`` and ``ui`` make up the
host used by ``run.py``.
"""

from __future__ import annotations

from . import audio, bus, cpu, loader, system, ui, utils, video

__all__: list[str] = [
    "cpu",
    "bus",
    "video",
    "audio",
    "loader",
    "system",
    "ui",
    "utils",
]
