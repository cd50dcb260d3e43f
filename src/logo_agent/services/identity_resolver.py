"""Brand identity resolution.

Maps a free-form brand string ("McDonald's", "麦当劳", "sbux") to a canonical
BrandIdentity. Resolution is a pure lookup and never raises for unknown names.
"""

import re
from typing import Mapping

from logo_agent.catalog import BRAND_ALIAS_MAP, BRAND_REGISTRY, BRAND_SOURCE_CONFIGS
from logo_agent.entities import BrandIdentity, BrandSourceConfig

# Everything except ASCII letters, digits and CJK unified ideographs
_STRIP_PATTERN = re.compile(r"[^a-z0-9\u4e00-\u9fa5]")


def normalize_brand_name(raw: str) -> str:
    """Lowercase and strip characters outside ASCII alphanumerics and CJK."""
    if not raw:
        return ""
    return _STRIP_PATTERN.sub("", raw.lower())


def canonicalize_brand_name(raw: str, alias_map: Mapping[str, str] = BRAND_ALIAS_MAP) -> str:
    """Normalize, then map common abbreviations to their canonical key."""
    normalized = normalize_brand_name(raw)
    return alias_map.get(normalized, normalized)


class BrandResolver:
    """Resolve brand names against the static registry.

    Resolution order, first match wins:
    1. normalize the input and apply the alias map
    2. exact match on the canonical key
    3. exact match on any registered alias
    4. brands that only exist in the source configuration
    5. substring containment either way against key and display name

    Example:
        ```python
        resolver = BrandResolver()
        resolver.resolve("麦当劳").name   # "mcdonalds"
        resolver.resolve("doesnotexist")  # None
        ```
    """

    def __init__(
        self,
        registry: Mapping[str, BrandIdentity] | None = None,
        source_configs: Mapping[str, BrandSourceConfig] | None = None,
        alias_map: Mapping[str, str] | None = None,
    ) -> None:
        self._registry = registry if registry is not None else BRAND_REGISTRY
        self._source_configs = source_configs if source_configs is not None else BRAND_SOURCE_CONFIGS
        self._alias_map = alias_map if alias_map is not None else BRAND_ALIAS_MAP

    def resolve(self, raw: str) -> BrandIdentity | None:
        """Resolve a raw brand string to its identity.

        Args:
            raw: Free-form brand name

        Returns:
            The matching BrandIdentity, or None if the brand is unknown
        """
        name = canonicalize_brand_name(raw, self._alias_map)
        if not name:
            return None

        identity = self._registry.get(name)
        if identity is not None:
            return identity

        for identity in self._registry.values():
            if any(normalize_brand_name(alias) == name for alias in identity.aliases):
                return identity

        config = self._source_configs.get(name)
        if config is not None:
            return BrandIdentity(
                name=config.name,
                display_name=config.display_name,
                categories=frozenset({"unknown"}),
            )

        return self._fuzzy_match(name)

    def _fuzzy_match(self, name: str) -> BrandIdentity | None:
        for key, identity in self._registry.items():
            for candidate in (normalize_brand_name(key), normalize_brand_name(identity.display_name)):
                if candidate and (candidate in name or name in candidate):
                    return identity
        return None

    def variants(self, raw: str) -> list[str]:
        """Return every known name of a brand, or ``[raw]`` if unknown."""
        identity = self.resolve(raw)
        if identity is None:
            return [raw]

        variants = [identity.name, identity.display_name]
        for alias in sorted(identity.aliases):
            if alias not in variants:
                variants.append(alias)
        return variants

    def is_supported(self, raw: str) -> bool:
        return self.resolve(raw) is not None

    def all_brands(self) -> list[BrandIdentity]:
        """Return every registered brand in registry order."""
        return list(self._registry.values())
