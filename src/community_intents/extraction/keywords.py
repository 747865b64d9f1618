"""Keyword lists for the field extractors, loaded from a packaged YAML file."""

import functools
from pathlib import Path

import yaml

_CONFIG_PATH = Path(__file__).resolve().parent / "keywords.yaml"


@functools.lru_cache
def load_keywords() -> dict[str, tuple[str, ...]]:
    """Load keyword lists from the YAML config file. Result is cached."""
    with open(_CONFIG_PATH) as f:
        data = yaml.safe_load(f) or {}
    return {
        "venue_nouns": tuple(data.get("venue_nouns", [])),
        "online_markers": tuple(data.get("online_markers", [])),
        "tag_keywords": tuple(data.get("tag_keywords", [])),
    }
