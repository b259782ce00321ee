"""Command-line interface for skin-lens."""

import argparse
import logging
import sys

from skin_lens import __version__, analyze
from skin_lens.exceptions import SkinLensError


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="skin-lens",
        description="Analyze skin condition from a face photo",
    )
    parser.add_argument("image", help="Path to a JPEG or PNG face photo (max 2MB)")
    parser.add_argument(
        "--mode",
        choices=["basic", "advanced"],
        default="basic",
        help="basic: face attributes and skin status; advanced: detailed skin analysis",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"skin-lens {__version__}",
    )

    args = parser.parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    try:
        result = analyze(args.image, mode=args.mode)
    except SkinLensError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.json:
        print(result.model_dump_json(indent=2))
    else:
        _print_formatted(result)

    return 0


def _print_formatted(result) -> None:
    """Print result in human-readable format."""
    print()
    print(f"  skin-lens ({result.mode})")
    print()
    print(f"  {'Health Score:':<18} {result.health_score}/100")

    scores = result.category_scores
    if scores:
        fields = [
            ("Eye Area", scores.eye_area),
            ("Wrinkles", scores.wrinkles),
            ("Pores", scores.pores),
            ("Skin Issues", scores.skin_issues),
        ]
        for label, value in fields:
            print(f"  {label + ':':<18} {value}/100")

    if result.skin_type_label:
        print(f"  {'Skin Type:':<18} {result.skin_type_label}")
    if result.dominant_emotion:
        print(f"  {'Emotion:':<18} {result.dominant_emotion}")
    age = result.demographics.get("age")
    if age is not None:
        print(f"  {'Age:':<18} {age}")

    if result.recommendations:
        print()
        print("  Recommendations")
        for item in result.recommendations:
            print(f"  [{item.priority:<6}] {item.title}")
            print(f"           {item.description}")

    for tip in result.quality_tips:
        print(f"  Tip: {tip}")
    print()


if __name__ == "__main__":
    sys.exit(main())
