"""Image output for noise fields.

Paints a field's values as a heat map and optionally draws the lattice
on top: grid lines, gradient arrows and the offsets of a probed point.
"""

import math

import numpy as np
from PIL import Image, ImageDraw

BLACK = (0, 0, 0, 255)
WHITE = (255, 255, 255, 255)
RED = (255, 0, 0, 255)
GREEN = (0, 160, 0, 255)

CHANNELS = ("red", "green", "blue", "gray")


def to_image(values, channel="blue", margin=0):
    """Render an array of values in [0, 1] as an RGBA image.

    Args:
        values: 2D array of shape (height, width).
        channel: Colour channel carrying the value ("red", "green",
            "blue") or "gray" to write it to all three.
        margin: White border in pixels around the field.

    Returns:
        PIL Image in RGBA mode of size (width + 2*margin, height + 2*margin).
    """
    if channel not in CHANNELS:
        raise ValueError(f"channel must be one of {CHANNELS}, got {channel!r}")
    values = np.asarray(values, dtype=np.float64)
    if values.ndim != 2:
        raise ValueError(f"values must be 2D, got shape {values.shape}")

    h, w = values.shape
    level = np.round(np.clip(values, 0.0, 1.0) * 255).astype(np.uint8)

    rgba = np.zeros((h, w, 4), dtype=np.uint8)
    rgba[..., 3] = 255
    if channel == "gray":
        rgba[..., :3] = level[..., np.newaxis]
    else:
        rgba[..., CHANNELS.index(channel)] = level

    field = Image.fromarray(rgba)
    if margin <= 0:
        return field

    canvas = Image.new('RGBA', (w + 2 * margin, h + 2 * margin), WHITE)
    canvas.paste(field, (margin, margin))
    return canvas


def _draw_arrow(draw, start, vector, head_length, fill):
    """Draw a line from ``start`` along ``vector`` with a two-stroke head."""
    x0, y0 = start
    tip_x = x0 + vector[0]
    tip_y = y0 + vector[1]
    draw.line([(x0, y0), (tip_x, tip_y)], fill=fill, width=1)

    angle = math.atan2(vector[1], vector[0])
    right = (tip_x - head_length * math.sin(angle + math.pi / 4),
             tip_y + head_length * math.cos(angle + math.pi / 4))
    left = (tip_x + head_length * math.sin(angle - math.pi / 4),
            tip_y - head_length * math.cos(angle - math.pi / 4))
    draw.line([right, (tip_x, tip_y)], fill=fill, width=1)
    draw.line([left, (tip_x, tip_y)], fill=fill, width=1)


def draw_overlay(image, lattice, cell_size, probe=None, margin=0):
    """Draw the lattice over a rendered field, in place.

    Grid lines run through every corner. Each gradient is drawn as an
    arrow ``cell_size`` pixels long starting at its corner. When a probe
    is given, its four corner offsets are drawn as arrows from their
    corners towards the probed point.

    Returns:
        The same image, for chaining.
    """
    draw = ImageDraw.Draw(image)
    head = cell_size / 8.0
    right_edge = margin + lattice.cols * cell_size
    bottom_edge = margin + lattice.rows * cell_size

    for cx in range(lattice.cols + 1):
        x = margin + cx * cell_size
        draw.line([(x, margin), (x, bottom_edge)], fill=RED, width=1)
    for cy in range(lattice.rows + 1):
        y = margin + cy * cell_size
        draw.line([(margin, y), (right_edge, y)], fill=RED, width=1)

    for cx, cy, gradient in lattice.corners():
        start = (margin + cx * cell_size, margin + cy * cell_size)
        _draw_arrow(draw, start,
                    (gradient.x * cell_size, gradient.y * cell_size),
                    head, BLACK)

    if probe is not None:
        px, py = probe.cell
        corners = ((px, py), (px + 1, py), (px, py + 1), (px + 1, py + 1))
        for (cx, cy), offset in zip(corners, probe.offsets):
            start = (margin + cx * cell_size, margin + cy * cell_size)
            _draw_arrow(draw, start, offset, head, GREEN)

    return image
