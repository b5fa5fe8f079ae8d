"""Framebuffer and rendering helpers for the CHIP-8 emulator."""

from __future__ import annotations

from .framebuffer import DISPLAY_HEIGHT, DISPLAY_WIDTH, Framebuffer, FramebufferView
from .palette import AMBER, MONOCHROME, PALETTES, validate_palette
from .renderer import RenderResult, Renderer

__all__ = [
    "Framebuffer",
    "FramebufferView",
    "Renderer",
    "RenderResult",
    "MONOCHROME",
    "AMBER",
    "PALETTES",
    "validate_palette",
    "DISPLAY_WIDTH",
    "DISPLAY_HEIGHT",
]
