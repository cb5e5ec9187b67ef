"""Loading and validating the syllabus catalog."""
import json
from pathlib import Path
from types import MappingProxyType
from typing import Mapping

import yaml

from study_deck.errors import CatalogMissingError
from study_deck.models import Topic

CONTENT_DIR = Path(__file__).parent / "content"
DEFAULT_CATALOG_PATH = str(CONTENT_DIR / "syllabus.json")

Catalog = Mapping[str, tuple[Topic, ...]]


def read_catalog_file(file_path: str) -> dict:
    path = Path(file_path)
    if not path.exists():
        raise CatalogMissingError(f"Syllabus file not found: {file_path}")
    suffix = path.suffix.lower()
    try:
        if suffix in (".yaml", ".yml"):
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        else:
            data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError, yaml.YAMLError) as e:
        raise CatalogMissingError(f"Could not read syllabus {file_path}: {e}") from e
    if not isinstance(data, dict):
        raise CatalogMissingError(f"Syllabus {file_path} must be a mapping")
    return data


def build_catalog(subjects: dict) -> Catalog:
    """Validate a subject -> topics mapping and freeze it.

    Subject order is preserved; it is the order cards appear in a batch.
    """
    if not isinstance(subjects, dict) or not subjects:
        raise CatalogMissingError("Syllabus has no subjects")
    catalog = {}
    for subject, topics in subjects.items():
        if not isinstance(topics, list) or not topics:
            raise CatalogMissingError(f"Subject {subject!r} has no topics")
        entries = []
        for t in topics:
            name = t.get("name") if isinstance(t, dict) else None
            weight = t.get("weight") if isinstance(t, dict) else None
            if not isinstance(name, str) or not name:
                raise CatalogMissingError(f"Topic in {subject!r} is missing a name")
            if not isinstance(weight, int) or isinstance(weight, bool) or weight < 1:
                raise CatalogMissingError(
                    f"Topic {name!r} in {subject!r} needs a positive integer weight"
                )
            entries.append(Topic(name=name, weight=weight))
        catalog[str(subject)] = tuple(entries)
    return MappingProxyType(catalog)


def load_catalog(file_path: str = DEFAULT_CATALOG_PATH) -> Catalog:
    """Load a syllabus from a JSON or YAML file with a top-level `subjects` key."""
    data = read_catalog_file(file_path)
    return build_catalog(data.get("subjects"))


def full_cycle_weight(catalog: Catalog, subject: str) -> int:
    return sum(t.weight for t in catalog[subject])
