"""
CLI Interface

Command-line entry point of the converter.
Supports converting models to OBJ (with rotation and mirroring) and inspecting them.
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

from pydantic import ValidationError

from . import __version__
from .config import ConverterConfig
from .converter import ModelConverter
from .models.summary import ModelSummary
from .models.transform import Transform
from .utils.errors import DXMError

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - CLI - %(levelname)s - %(message)s"


def parse_angle(arg: str) -> float:
    """Parse a rotation in degrees, limited to -180..180."""
    try:
        value = float(arg)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid angle: {arg}")
    if not -180.0 <= value <= 180.0:
        raise argparse.ArgumentTypeError(f"Angle must be between -180 and 180: {arg}")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dxm-converter",
        description="Convert DXM/DLM models to Wavefront OBJ."
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: DXM_LOG_LEVEL or INFO)"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    convert = subparsers.add_parser("convert", help="Export models as OBJ/MTL")
    convert.add_argument("models", nargs="+", help=".dlm, .dxm or .obj files")
    convert.add_argument("-o", "--output-dir", default=None, help="Destination folder (default: DXM_EXPORT_DIR or ./)")
    convert.add_argument("--name", default=None, help="Output base name (single model only)")
    convert.add_argument("--rot-x", type=parse_angle, default=0.0, metavar="DEG", help="Rotation about X")
    convert.add_argument("--rot-y", type=parse_angle, default=0.0, metavar="DEG", help="Rotation about Y")
    convert.add_argument("--rot-z", type=parse_angle, default=0.0, metavar="DEG", help="Rotation about Z")
    convert.add_argument("--flip-x", action="store_true", help="Mirror along X")
    convert.add_argument("--flip-y", action="store_true", help="Mirror along Y")
    convert.add_argument("--flip-z", action="store_true", help="Mirror along Z")

    inspect = subparsers.add_parser("inspect", help="Print model statistics")
    inspect.add_argument("models", nargs="+", help=".dlm, .dxm or .obj files")
    inspect.add_argument("--json", action="store_true", help="Print summaries as JSON")

    return parser


def print_summary(summary: ModelSummary) -> None:
    """Print a human-readable model summary."""
    print(f"\n--- {summary.path} ---")
    print(f"  Format:    {summary.format}")
    if summary.version:
        print(f"  Version:   {summary.version} ({summary.vertex_composition}, {summary.index_byte_count}-byte indices)")
    print(f"  Vertices:  {summary.vertex_count}")
    print(f"  Normals:   {summary.normal_count}")
    print(f"  UVs:       {summary.uv_count}")
    print(f"  Faces:     {summary.face_count}")
    print(f"  Groups:    {len(summary.groups)}")
    for material in summary.materials:
        print(f"    {material.name}: {material.albedo or '(texture not found)'}")


def run_convert(converter: ModelConverter, args: argparse.Namespace) -> int:
    transform = Transform(
        rot_x=args.rot_x, rot_y=args.rot_y, rot_z=args.rot_z,
        flip_x=args.flip_x, flip_y=args.flip_y, flip_z=args.flip_z
    )

    failures = 0
    for path in args.models:
        try:
            mesh = converter.load(path)
        except DXMError as e:
            logger.error(f"Failed to load model {path}: {e}")
            print(f"Failed to load model\n{e.message}", file=sys.stderr)
            failures += 1
            continue

        try:
            result = converter.export_mesh(mesh, path, transform, args.output_dir, args.name)
        except DXMError as e:
            logger.error(f"Failed to export model {path}: {e}")
            print("Failed to export model", file=sys.stderr)
            failures += 1
            continue

        print(f"Model exported: {result.obj_path}")

    return 1 if failures else 0


def run_inspect(converter: ModelConverter, args: argparse.Namespace) -> int:
    failures = 0
    summaries = []
    for path in args.models:
        try:
            summaries.append(converter.inspect(path))
        except DXMError as e:
            logger.error(f"Failed to load model {path}: {e}")
            print(f"Failed to load model\n{e.message}", file=sys.stderr)
            failures += 1

    if args.json:
        print(json.dumps([s.model_dump() for s in summaries], indent=2))
    else:
        for summary in summaries:
            print_summary(summary)

    return 1 if failures else 0


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the dxm-converter script."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "convert" and args.name and len(args.models) > 1:
        parser.error("--name can only be used with a single model")

    try:
        config = ConverterConfig.from_env()
    except ValidationError as e:
        parser.error(f"Invalid configuration: {e}")

    logging.basicConfig(level=args.log_level or config.log_level, format=LOG_FORMAT)
    converter = ModelConverter(config)

    if args.command == "convert":
        return run_convert(converter, args)
    return run_inspect(converter, args)


if __name__ == "__main__":
    sys.exit(main())
