"""
Command line entry point: build the import story HTML page.

Usage:
    # Slideshow story from the default data file
    importstory --data data/imports.csv --output output/story.html

    # Reveal variant, ranked by value
    importstory --variant reveal --metric value

    # Apply manual narrative overrides
    importstory --overrides config/story_overrides.yaml

    # Export auto-generated narratives (to edit and use as overrides)
    importstory --export-narratives config/narratives_draft.yaml

    # Also write PNG snapshots of every scene
    importstory --snapshots output/snapshots
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Sequence

from importstory.data.schemas import Metric
from importstory.exceptions import DataLoadError, InsufficientDataError
from importstory.pipeline import build_controller, run_pipeline
from importstory.settings import Settings
from importstory.story.overrides import export_narratives_to_yaml
from importstory.story.renderers.html import (
    render_error_html,
    render_story_html,
    save_story_html,
)
from importstory.story.scenes.registry import VARIANTS
from importstory.story.state import StoryController

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_LOAD_FAILED = 1
EXIT_NO_DATA = 2


def _positive_int(text: str) -> int:
    """argparse type for counts that must be at least 1."""
    try:
        number = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {text!r}") from None
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Generate the imports risers & decliners story as a standalone HTML page",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )

    parser.add_argument(
        "--data",
        type=str,
        default=None,
        help="Path or URL of the imports CSV (default: settings data_path)",
    )

    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Output HTML file (default: settings output_path)",
    )

    parser.add_argument(
        "--variant",
        type=str,
        choices=sorted(VARIANTS),
        default=None,
        help="Scene list to build (default: settings variant)",
    )

    parser.add_argument(
        "--metric",
        type=str,
        choices=[m.value for m in Metric],
        default=None,
        help="Initially selected metric",
    )

    parser.add_argument(
        "--top-n",
        type=_positive_int,
        default=None,
        help="Number of risers and of decliners to highlight",
    )

    parser.add_argument(
        "--overrides",
        type=str,
        default=None,
        help="Path to YAML file with narrative overrides",
    )

    parser.add_argument(
        "--export-narratives",
        type=str,
        default=None,
        help="Export auto-generated narratives to YAML file for editing",
    )

    parser.add_argument(
        "--snapshots",
        type=str,
        default=None,
        metavar="DIR",
        help="Also write a PNG snapshot of every scene into DIR",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    return parser.parse_args(argv)


def settings_from_args(args: argparse.Namespace) -> Settings:
    """Build settings, letting command line flags win over environment values."""
    updates = {
        "data_path": args.data,
        "output_path": args.output,
        "variant": args.variant,
        "default_metric": args.metric,
        "top_n": args.top_n,
        "narrative_overrides_path": args.overrides,
    }
    return Settings(**{k: v for k, v in updates.items() if v is not None})


def export_narratives(controller: StoryController, path: str) -> None:
    """Write the auto-generated text of every scene in the variant."""
    narratives = {
        definition.scene_id: controller.render_definition(definition, controller.context()).narrative
        for definition in controller.scenes
    }
    export_narratives_to_yaml(narratives, path)


def write_snapshots(controller: StoryController, directory: str) -> list[Path]:
    """Write PNG snapshots of every scene (gated scenes in their revealed state)."""
    # matplotlib is only needed for snapshots
    from importstory.reporting.visuals import save_scene_snapshots, set_style

    set_style()
    scenes = [
        controller.render_definition(
            definition, controller.context(revealed=True if definition.gated_by_reveal else None)
        )
        for definition in controller.scenes
    ]
    return save_scene_snapshots(scenes, directory)


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command line tool and return the process exit code."""
    args = parse_args(argv)
    settings = settings_from_args(args)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    output_path = Path(settings.output_path)

    try:
        result = run_pipeline(settings.data_path)
    except DataLoadError as e:
        logger.error(f"Could not load data: {e.message}")
        save_story_html(render_error_html(e, title=settings.title), output_path)
        return EXIT_LOAD_FAILED
    except InsufficientDataError as e:
        logger.error(f"Not enough data to build a story: {e.message}")
        return EXIT_NO_DATA

    summary = result.get_summary()
    logger.info(
        f"{summary['records']} records kept, {summary['dropped']} dropped, "
        f"{summary['countries']} countries"
    )

    controller = build_controller(result, settings)

    if args.export_narratives:
        export_narratives(controller, args.export_narratives)

    html = render_story_html(controller, settings=settings)
    save_story_html(html, output_path)

    if args.snapshots:
        write_snapshots(controller, args.snapshots)

    print(f"Story written to {output_path}")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
