"""CHIP-8 rendering utilities for presenting the framebuffer."""

import jax.numpy as jnp
import numpy as np
from typing import Tuple

from PIL import Image

from chip8vm.state import EmulatorState


def chip8_display_to_rgb(
    display: jnp.ndarray,
    scale: int = 8,
    on_color: Tuple[int, int, int] = (255, 255, 255),
    off_color: Tuple[int, int, int] = (0, 0, 0),
) -> np.ndarray:
    """Convert CHIP-8 display to RGB array with optional upscaling.

    Args:
        display: Array of shape (64, 32) of 0/1 pixels, indexed [x, y]
        scale: Upscaling factor for better visibility (default: 8x)
        on_color: RGB color for "on" pixels (default: white)
        off_color: RGB color for "off" pixels (default: black)

    Returns:
        RGB array of shape (height*scale, width*scale, 3) with uint8 values
    """
    if scale < 1:
        raise ValueError(f"scale must be at least 1, got {scale}")

    pixels = np.array(display, dtype=np.bool_)

    # Framebuffer (64 width, 32 height) -> image rows (32 height, 64 width)
    pixels = pixels.T
    height, width = pixels.shape

    rgb_frame = np.zeros((height, width, 3), dtype=np.uint8)

    rgb_frame[pixels] = on_color
    rgb_frame[~pixels] = off_color

    # Apply upscaling using nearest neighbor interpolation
    if scale > 1:
        rgb_frame = np.repeat(np.repeat(rgb_frame, scale, axis=0), scale, axis=1)

    return rgb_frame


def chip8_display_to_rgba(
    display: jnp.ndarray,
    scale: int = 1,
    on_color: Tuple[int, int, int] = (255, 255, 255),
    off_color: Tuple[int, int, int] = (0, 0, 0),
) -> np.ndarray:
    """Same as :func:`chip8_display_to_rgb` with an opaque alpha channel."""
    rgb = chip8_display_to_rgb(display, scale, on_color, off_color)
    return np.concatenate([rgb, 255 * np.ones((*rgb.shape[:2], 1), dtype=np.uint8)], axis=-1)


def create_color_scheme(
    scheme: str = "white",
) -> Tuple[Tuple[int, int, int], Tuple[int, int, int]]:
    """Get predefined color schemes for CHIP-8 rendering.

    Args:
        scheme: Color scheme name ("white", "classic", "amber", "blue", "retro")

    Returns:
        Tuple of (on_color, off_color) as RGB tuples
    """
    schemes = {
        "white": ((255, 255, 255), (0, 0, 0)),  # White on black
        "classic": ((0, 255, 0), (0, 0, 0)),  # Green on black
        "amber": ((255, 176, 0), (0, 0, 0)),  # Amber on black
        "blue": ((0, 255, 255), (0, 0, 64)),  # Cyan on dark blue
        "retro": ((255, 255, 0), (64, 0, 64)),  # Yellow on purple
    }

    if scheme not in schemes:
        raise ValueError(
            f"Unknown color scheme '{scheme}'. Available: {list(schemes.keys())}"
        )

    return schemes[scheme]


def display_image(state: EmulatorState, scale: int = 1, color_scheme: str = "white") -> Image.Image:
    """Render the state's framebuffer as an RGBA PIL image."""
    on_color, off_color = create_color_scheme(color_scheme)
    return Image.fromarray(chip8_display_to_rgba(state.display, scale, on_color, off_color))
