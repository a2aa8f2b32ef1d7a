"""CLI entry point for PerlinGrid."""

import argparse
import logging
from pathlib import Path

from . import generate
from .errors import PerlinGridError
from .render import CHANNELS, draw_overlay, to_image


def build_parser():
    parser = argparse.ArgumentParser(
        description="Generate a 2D Perlin noise field over a seeded lattice"
    )
    parser.add_argument(
        "--cols", "-c", type=int, default=3,
        help="Lattice width in cells (default: 3)"
    )
    parser.add_argument(
        "--rows", "-r", type=int, default=3,
        help="Lattice height in cells (default: 3)"
    )
    parser.add_argument(
        "--cell-size", type=float, default=100.0,
        help="Pixels per cell edge (default: 100)"
    )
    parser.add_argument(
        "--seed", "-s", type=int, default=None,
        help="Random seed for reproducible generation (default: clock)"
    )
    parser.add_argument(
        "--workers", "-j", type=int, default=1,
        help="Threads used to evaluate the field (default: 1)"
    )
    parser.add_argument(
        "--output", "-o", default="noise.png",
        help="Output file path (default: noise.png)"
    )
    parser.add_argument(
        "--channel", choices=CHANNELS, default="blue",
        help="Colour channel carrying the noise value (default: blue)"
    )
    parser.add_argument(
        "--margin", "-m", type=int, default=0,
        help="White border in pixels around the field (default: 0)"
    )
    parser.add_argument(
        "--overlay", action="store_true",
        help="Draw grid lines and gradient arrows over the field"
    )
    parser.add_argument(
        "--probe", nargs=2, type=float, default=None,
        metavar=("X", "Y"),
        help="Print debug details for the point (X, Y) in pixels"
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true",
        help="Log progress messages"
    )
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.margin < 0:
        parser.error(f"margin must be >= 0, got {args.margin}")

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format='%(asctime)s - %(levelname)s - %(message)s',
    )

    try:
        field = generate(
            cols=args.cols,
            rows=args.rows,
            cell_size=args.cell_size,
            seed=args.seed,
            workers=args.workers,
        )
        values = field.evaluate_all()
        probe = field.probe(*args.probe) if args.probe else None
    except PerlinGridError as e:
        parser.error(str(e))

    image = to_image(values, channel=args.channel, margin=args.margin)
    if args.overlay:
        draw_overlay(image, field.lattice, field.cell_size, probe=probe,
                     margin=args.margin)

    if probe is not None:
        for line in probe.lines():
            print(line)

    output = Path(args.output)
    output.parent.mkdir(parents=True, exist_ok=True)
    image.save(str(output))
    print(f"Saved noise ({image.size[0]}x{image.size[1]}, "
          f"seed {field.lattice.seed}) to {output}")
    return 0


if __name__ == "__main__":
    main()
