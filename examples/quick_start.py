#!/usr/bin/env python3
"""Quick start example for the import story.

Runs the pipeline on the bundled sample data, walks the slideshow the way a
reader would, and writes the HTML page.

Usage:
    python examples/quick_start.py
"""

from importstory.data.schemas import Metric
from importstory.pipeline import build_controller, run_pipeline
from importstory.settings import Settings
from importstory.story.renderers import render_story_html, save_story_html


def main() -> None:
    """Run a quick story demo."""
    print("=" * 60)
    print("Import Story - Quick Start Demo")
    print("=" * 60)

    result = run_pipeline("data/imports.csv")
    summary = result.get_summary()
    print(f"\nKept {summary['records']} records, dropped {summary['dropped']}")
    print(f"Countries: {', '.join(result.countries)}")
    print(f"Months: {summary['first_month']} to {summary['last_month']}")

    settings = Settings(variant="slideshow", top_n=3)
    controller = build_controller(result, settings)

    print("\n" + "=" * 60)
    print("SCENES")
    print("=" * 60)

    scene = controller.current_scene
    while True:
        print(f"\n[{controller.state.scene_index}] {scene.narrative.headline}")
        print(f"  {scene.narrative.body}")
        if controller.controls().next_disabled:
            break
        scene = controller.next()

    controller.set_metric(Metric.VALUE)
    print(f"\nBy value: {controller.current_scene.narrative.body}")

    path = save_story_html(render_story_html(controller), "output/quick_start_story.html")
    print(f"\nStory written to {path}")


if __name__ == "__main__":
    main()
