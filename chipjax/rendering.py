"""CHIP-8 framebuffer rendering utilities."""

import numpy as np
from typing import Tuple

import jax.numpy as jnp


def framebuffer_to_rgb(
    display: jnp.ndarray,
    scale: int = 10,
    on_color: Tuple[int, int, int] = (255, 255, 255),
    off_color: Tuple[int, int, int] = (0, 0, 0),
) -> np.ndarray:
    """Convert CHIP-8 framebuffer to RGB array with optional upscaling.

    Args:
        display: Array of shape (32, 64) holding 0/1 per pixel, indexed [row, column]
        scale: Side length in screen pixels of one CHIP-8 pixel
        on_color: RGB color for lit pixels
        off_color: RGB color for unlit pixels

    Returns:
        RGB array of shape (32*scale, 64*scale, 3) with uint8 values
    """
    pixels = np.asarray(display).astype(np.bool_)
    height, width = pixels.shape

    rgb_frame = np.zeros((height, width, 3), dtype=np.uint8)
    rgb_frame[pixels] = on_color
    rgb_frame[~pixels] = off_color

    # Each CHIP-8 pixel becomes a filled scale x scale block
    if scale > 1:
        rgb_frame = np.repeat(np.repeat(rgb_frame, scale, axis=0), scale, axis=1)

    return rgb_frame


def create_color_scheme(
    scheme: str = "classic",
) -> Tuple[Tuple[int, int, int], Tuple[int, int, int]]:
    """Get predefined color schemes for CHIP-8 rendering.

    Args:
        scheme: Color scheme name ("classic", "green", "amber", "blue", "retro")

    Returns:
        Tuple of (on_color, off_color) as RGB tuples
    """
    schemes = {
        "classic": ((255, 255, 255), (0, 0, 0)),  # White on black
        "green": ((0, 255, 0), (0, 0, 0)),  # Green on black
        "amber": ((255, 176, 0), (0, 0, 0)),  # Amber on black
        "blue": ((0, 255, 255), (0, 0, 64)),  # Cyan on dark blue
        "retro": ((255, 255, 0), (64, 0, 64)),  # Yellow on purple
    }

    if scheme not in schemes:
        raise ValueError(
            f"Unknown color scheme '{scheme}'. Available: {list(schemes.keys())}"
        )

    return schemes[scheme]


def framebuffer_to_text(display: jnp.ndarray, on: str = "#", off: str = ".") -> str:
    """Render the framebuffer as lines of text, one line per row."""
    pixels = np.asarray(display).astype(np.bool_)
    return "\n".join("".join(on if pixel else off for pixel in row) for row in pixels)
