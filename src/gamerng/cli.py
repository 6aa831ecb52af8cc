# cli.py
"""``gamerng`` command line: draw values from the library for scripting and
quick inspection."""
from __future__ import annotations

import argparse
import sys
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from . import distributions, geometry, tokens
from .config import RngConfig
from .hub import RandomHub
from .locking import LockedSource

# shape name -> (sampler, number of float arguments)
SHAPES: Dict[str, Tuple[Callable, int]] = {
    "circle": (geometry.point_in_circle, 3),
    "on-circle": (geometry.point_on_circle, 3),
    "ring": (geometry.point_in_ring, 4),
    "ellipse": (geometry.point_in_ellipse, 4),
    "rect": (geometry.point_in_rect, 4),
    "triangle": (geometry.point_in_triangle, 6),
    "arc": (geometry.point_in_arc, 5),
    "sphere": (geometry.point_in_sphere, 4),
    "on-sphere": (geometry.point_on_sphere, 4),
    "box": (geometry.point_in_box, 6),
}


def _int(text: str) -> int:
    # accepts 0x / 0o / 0b prefixes
    return int(text, 0)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gamerng",
        description="Draw random values with the gamerng engines",
    )
    parser.add_argument("--seed", type=_int, default=0,
                        help="explicit seed for both engines; 0 seeds from clock/entropy")
    parser.add_argument("--secure", action="store_true",
                        help="use the ChaCha20 engine for distribution and point commands")
    parser.add_argument("--repeat", type=int, default=1, help="number of draws to print")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("range", help="integer in [MIN, MAX]")
    p.add_argument("low", type=_int)
    p.add_argument("high", type=_int)

    p = sub.add_parser("float-range", help="float in [MIN, MAX)")
    p.add_argument("low", type=float)
    p.add_argument("high", type=float)

    p = sub.add_parser("dice", help="sum of COUNT rolls of a SIDES-sided die")
    p.add_argument("sides", type=int)
    p.add_argument("count", type=int)

    p = sub.add_parser("gaussian", help="normal draw clamped at 0")
    p.add_argument("mean", type=float)
    p.add_argument("stddev", type=float)

    p = sub.add_parser("format", help="expand a token pattern (X x 9 A !)")
    p.add_argument("pattern")
    p.add_argument("--capacity", type=int, default=None)

    p = sub.add_parser("bytes", help="LENGTH random bytes as hex")
    p.add_argument("length", type=int)

    p = sub.add_parser("uuid", help="version-4 UUID")
    p.add_argument("--count", type=int, default=1)

    p = sub.add_parser("point", help="uniform point in a shape")
    p.add_argument("shape", choices=sorted(SHAPES))
    p.add_argument("params", type=float, nargs="+")
    return parser


def _draw(args: argparse.Namespace, hub: RandomHub) -> List[str]:
    """One repetition of the requested command; raises ``LookupError`` on a
    failure value."""
    engine: LockedSource = hub.secure if args.secure else hub.fast
    cmd = args.command
    if cmd == "range":
        return [str(distributions.rand_range(engine, args.low, args.high))]
    if cmd == "float-range":
        return [repr(distributions.rand_float_range(engine, args.low, args.high))]
    if cmd == "dice":
        total = distributions.dice(engine, args.sides, args.count)
        if total == 0:
            raise LookupError("invalid dice")
        return [str(total)]
    if cmd == "gaussian":
        return [str(distributions.gaussian(engine, args.mean, args.stddev))]
    if cmd == "format":
        text = tokens.pattern_format(hub.secure, args.pattern, args.capacity)
        if text is None:
            raise LookupError("invalid pattern or capacity")
        return [text]
    if cmd == "bytes":
        raw = tokens.random_bytes(hub.secure, args.length)
        if raw is None:
            raise LookupError("invalid length")
        return [raw.hex()]
    if cmd == "uuid":
        return [tokens.uuid_v4(hub.secure) for _ in range(max(args.count, 0))]
    if cmd == "point":
        fn, arity = SHAPES[args.shape]
        if len(args.params) != arity:
            raise LookupError(f"{args.shape} takes {arity} parameters")
        point = fn(engine, *args.params)
        if point is None:
            raise LookupError(f"degenerate {args.shape}")
        return [" ".join(repr(c) for c in point)]
    raise LookupError(f"unknown command {cmd}")


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    config = RngConfig.from_env()
    if args.seed:
        config.fast_seed = args.seed
        config.secure_seed = args.seed
    with RandomHub.from_config(config) as hub:
        for _ in range(max(args.repeat, 1)):
            try:
                lines = _draw(args, hub)
            except LookupError as exc:
                print(f"gamerng: {exc}", file=sys.stderr)
                return 1
            for line in lines:
                print(line)
    return 0


if __name__ == "__main__":
    sys.exit(main())
