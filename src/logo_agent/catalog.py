"""Static brand registry and brand source configuration.

The registry and alias map are fixed. The source configuration is supplied
from outside the core: the built-in table can be extended or overridden by a
JSON file (``BRAND_SOURCES_PATH``) shaped like::

    {
        "kfc": {
            "display_name": "肯德基",
            "sources": ["https://example.com/kfc.png"],
            "fallback": null,
            "local_file": "kfc-logo.png",
            "colors": {"primary": "#E4002B", "secondary": "#FFFFFF"},
            "version": "1.0.0",
            "last_updated": "2024-01-01"
        }
    }
"""

import json
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

from logo_agent.entities import BrandIdentity, BrandSourceConfig

logger = logging.getLogger(__name__)


def _identity(name: str, display_name: str, aliases: list[str], categories: list[str]) -> BrandIdentity:
    return BrandIdentity(
        name=name,
        display_name=display_name,
        aliases=frozenset(aliases),
        categories=frozenset(categories),
    )


# Insertion order is the tie-break for fuzzy matches.
BRAND_REGISTRY: Mapping[str, BrandIdentity] = MappingProxyType(
    {
        "mcdonalds": _identity(
            "mcdonalds",
            "麦当劳",
            ["mc", "麦当劳", "金拱门", "mcdonald", "macdonalds"],
            ["fast food", "restaurant", "food"],
        ),
        "starbucks": _identity(
            "starbucks",
            "星巴克",
            ["sbux", "星巴克咖啡", "starbuck", "sb"],
            ["coffee", "cafe", "restaurant"],
        ),
        "luckin": _identity(
            "luckin",
            "瑞幸咖啡",
            ["瑞幸", "luckin coffee", "lk"],
            ["coffee", "cafe", "restaurant"],
        ),
        "kfc": _identity(
            "kfc",
            "肯德基",
            ["肯德基", "kentucky fried chicken", "kentucky"],
            ["fast food", "restaurant", "food"],
        ),
    }
)

# Short abbreviations and native-language names, keyed by normalized form.
BRAND_ALIAS_MAP: Mapping[str, str] = MappingProxyType(
    {
        "m": "mcdonalds",
        "mc": "mcdonalds",
        "麦当劳": "mcdonalds",
        "金拱门": "mcdonalds",
        "s": "starbucks",
        "星巴克": "starbucks",
        "luckin": "luckin",
        "瑞幸": "luckin",
        "瑞幸咖啡": "luckin",
        "kfc": "kfc",
        "肯德基": "kfc",
    }
)

BRAND_SOURCE_CONFIGS: Mapping[str, BrandSourceConfig] = MappingProxyType(
    {
        "mcdonalds": BrandSourceConfig(
            name="mcdonalds",
            display_name="麦当劳",
            sources=(
                "https://upload.wikimedia.org/wikipedia/commons/thumb/3/36/"
                "McDonald%27s_Golden_Arches.svg/1200px-McDonald%27s_Golden_Arches.svg.png",
                "https://www.mcdonalds.com/content/dam/growth/companies/us/"
                "mcdonalds-corporation/mc-logo.svg",
            ),
            local_file="mcdonalds-logo-v2.png",
            primary_color="#FFC72C",
            secondary_color="#DA291C",
            version="2.0.0",
            last_updated="2024-02-14",
        ),
        "starbucks": BrandSourceConfig(
            name="starbucks",
            display_name="星巴克",
            sources=(
                "https://upload.wikimedia.org/wikipedia/en/thumb/3/39/"
                "Starbucks_Corporation_Logo_2011.svg/1200px-Starbucks_Corporation_Logo_2011.svg.png",
                "https://www.starbucks.com/content/dam/starbucks/us/en/logos/starbucks-logo.svg",
            ),
            local_file="starbucks-logo-v2.png",
            primary_color="#00704A",
            secondary_color="#FFFFFF",
            version="2.0.0",
            last_updated="2024-02-14",
        ),
        "luckin": BrandSourceConfig(
            name="luckin",
            display_name="瑞幸咖啡",
            sources=(
                "https://upload.wikimedia.org/wikipedia/commons/thumb/2/29/"
                "Luckin_Coffee_Logo.svg/1200px-Luckin_Coffee_Logo.svg.png",
            ),
            local_file="luckin-logo-v2.png",
            primary_color="#0066CC",
            secondary_color="#FFFFFF",
            version="2.0.0",
            last_updated="2024-02-14",
        ),
        "kfc": BrandSourceConfig(
            name="kfc",
            display_name="肯德基",
            sources=(
                "https://upload.wikimedia.org/wikipedia/commons/thumb/b/b8/"
                "KFC_Logo.svg/1200px-KFC_Logo.svg.png",
            ),
            local_file="kfc-logo.png",
            primary_color="#E4002B",
            secondary_color="#FFFFFF",
            version="1.0.0",
            last_updated="2024-01-01",
        ),
    }
)


def _config_from_dict(name: str, raw: dict[str, Any]) -> BrandSourceConfig:
    colors = raw.get("colors") or {}
    return BrandSourceConfig(
        name=name,
        display_name=raw.get("display_name", name),
        sources=tuple(raw.get("sources") or ()),
        fallback=raw.get("fallback"),
        local_file=raw.get("local_file", f"{name}-logo.png"),
        primary_color=colors.get("primary", "#000000"),
        secondary_color=colors.get("secondary", "#FFFFFF"),
        version=str(raw.get("version", "1.0.0")),
        last_updated=raw.get("last_updated", ""),
    )


def load_source_configs(path: str | Path) -> dict[str, BrandSourceConfig]:
    """Load brand source configuration from a JSON file.

    Args:
        path: JSON file mapping brand keys to configuration objects

    Returns:
        Dictionary of brand key to BrandSourceConfig (keys lowercased)

    Raises:
        ValueError: If the file is not a JSON object
    """
    with open(path, encoding="utf-8") as f:
        raw = json.load(f)

    if not isinstance(raw, dict):
        raise ValueError(f"Brand source file {path} must contain a JSON object")

    configs = {}
    for name, entry in raw.items():
        key = name.lower()
        configs[key] = _config_from_dict(key, entry or {})
    return configs


def get_source_configs(path: str | Path | None = None) -> dict[str, BrandSourceConfig]:
    """Return the built-in source configuration merged with an optional file.

    Entries from the file replace built-in entries with the same key.
    """
    configs = dict(BRAND_SOURCE_CONFIGS)
    if path:
        loaded = load_source_configs(path)
        logger.info("Loaded %d brand source configs from %s", len(loaded), path)
        configs.update(loaded)
    return configs
