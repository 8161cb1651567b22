"""
YAML overrides for scene headlines and body text.

An override file has a single ``narratives`` mapping keyed by scene id, each
entry holding an optional ``headline`` and ``body``. A null or absent field
keeps the generated text for that scene. The same shape is written by
export_narratives_to_yaml, so an exported draft can be edited in place and
fed back through ``--overrides``.
"""

import logging
from pathlib import Path
from typing import Any

import yaml

from importstory.story.base import SceneNarrative

logger = logging.getLogger(__name__)

OVERRIDE_FIELDS = ("headline", "body")

SceneOverrides = dict[str, dict[str, str | None]]

_EXPORT_HEADER = """\
# Story Narrative Overrides
# Edit any field to override the auto-generated text
# Set to null or delete to use auto-generated text
#
# Available scenes:
{scene_list}
#

"""


# =============================================================================
# PARSING
# =============================================================================


def _parse_field(scene_id: str, name: str, raw: Any) -> str | None:
    if raw is None:
        return None
    if isinstance(raw, (dict, list)):
        logger.warning(f"Ignoring {scene_id}.{name}: expected text, got {type(raw).__name__}")
        return None
    # YAML turns bare numbers and dates into non-strings
    return str(raw)


def _parse_scene(scene_id: str, entry: Any) -> dict[str, str | None] | None:
    if not isinstance(entry, dict):
        logger.warning(f"Invalid overrides for {scene_id}, expected dict")
        return None

    unknown = sorted(str(k) for k in entry if k not in OVERRIDE_FIELDS)
    if unknown:
        logger.warning(f"Ignoring unknown override fields for {scene_id}: {', '.join(unknown)}")

    return {name: _parse_field(scene_id, name, entry.get(name)) for name in OVERRIDE_FIELDS}


def parse_overrides(data: Any) -> SceneOverrides:
    """Normalise an already-parsed YAML document into per-scene overrides.

    Entries that are not mappings are skipped with a warning. A document
    without a ``narratives`` mapping yields no overrides.
    """
    if data is None:
        return {}

    narratives = data.get("narratives") if isinstance(data, dict) else None
    if not isinstance(narratives, dict):
        logger.warning("Invalid 'narratives' section in override file, expected dict")
        return {}

    overrides: SceneOverrides = {}
    for scene_id, entry in narratives.items():
        fields = _parse_scene(str(scene_id), entry)
        if fields is not None:
            overrides[str(scene_id)] = fields
    return overrides


def load_overrides(path: Path | str) -> SceneOverrides:
    """Read an override file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        yaml.YAMLError: If the file is not valid YAML
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Override file not found: {path}")

    overrides = parse_overrides(yaml.safe_load(path.read_text(encoding="utf-8")))
    logger.debug(f"Loaded overrides for {len(overrides)} scenes from {path}")
    return overrides


def load_overrides_safe(path: Path | str | None) -> SceneOverrides:
    """Like load_overrides, but a missing path or broken file gives no overrides."""
    if path is None:
        return {}

    try:
        return load_overrides(path)
    except FileNotFoundError:
        logger.info(f"No override file found at {path}")
    except yaml.YAMLError as e:
        logger.warning(f"Invalid YAML in override file {path}: {e}")
    return {}


# =============================================================================
# APPLICATION
# =============================================================================


def apply_override(narrative: SceneNarrative, overrides: SceneOverrides) -> SceneNarrative:
    """Set the override text of one narrative from its scene's entry (in place)."""
    fields = overrides.get(narrative.scene_id) or {}

    headline = fields.get("headline")
    if headline is not None:
        narrative.override_headline = headline

    body = fields.get("body")
    if body is not None:
        narrative.override_body = body

    return narrative


def apply_overrides(
    narratives: dict[str, SceneNarrative],
    overrides: SceneOverrides,
) -> dict[str, SceneNarrative]:
    """Apply overrides to every narrative in a scene_id -> narrative mapping."""
    for narrative in narratives.values():
        apply_override(narrative, overrides)
    return narratives


# =============================================================================
# EXPORT
# =============================================================================


def export_narratives_to_yaml(
    narratives: dict[str, SceneNarrative],
    path: Path | str,
    include_auto: bool = True,
) -> None:
    """Write narratives as an override file ready for editing.

    Args:
        narratives: Narratives keyed by scene id, in story order
        path: Destination file (parent directories are created)
        include_auto: Pre-fill each field with the generated text; when
            False every field is null
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    entries = {
        scene_id: {
            "headline": narrative.auto_headline if include_auto else None,
            "body": narrative.auto_body if include_auto else None,
        }
        for scene_id, narrative in narratives.items()
    }
    header = _EXPORT_HEADER.format(
        scene_list="\n".join(f"#   - {scene_id}" for scene_id in narratives)
    )
    body = yaml.dump(
        {"narratives": entries},
        default_flow_style=False,
        allow_unicode=True,
        sort_keys=False,
        width=100,
    )
    path.write_text(header + body, encoding="utf-8")

    logger.info(f"Exported {len(entries)} scene narratives to {path}")
