"""Candidate source resolution.

Turns a brand identity into the ordered list of URLs the fetcher will try.
No network access happens here.
"""

from typing import Literal, Mapping
from urllib.parse import quote

from logo_agent.catalog import BRAND_SOURCE_CONFIGS
from logo_agent.entities import BrandIdentity, BrandSourceConfig

SearchKind = Literal["wikipedia", "cdn"]


def build_logo_search_url(name: str, kind: SearchKind = "wikipedia") -> str:
    """Build a generic logo URL from a canonical brand name.

    Args:
        name: Canonical brand key
        kind: "wikipedia" for the static thumbnail template,
              "cdn" for the jsDelivr package mirror template

    Returns:
        The candidate URL
    """
    encoded = quote(name, safe="")
    if kind == "cdn":
        return f"https://cdn.jsdelivr.net/gh/brandlogos/logos/{encoded.lower()}.svg"
    return (
        "https://upload.wikimedia.org/wikipedia/commons/thumb/"
        f"{name[:1]}/{name[:2]}/{encoded}_logo.svg/1200px-{encoded}_logo.svg.png"
    )


class SourceResolver:
    """Resolve the fetch sources for a brand.

    Configured sources win, in their configured priority order, followed by
    the configured fallback URL. Brands without configured sources get the
    generic templates, so the result is never empty.
    """

    def __init__(self, source_configs: Mapping[str, BrandSourceConfig] | None = None) -> None:
        self._configs = source_configs if source_configs is not None else BRAND_SOURCE_CONFIGS

    def config_for(self, identity: BrandIdentity) -> BrandSourceConfig | None:
        return self._configs.get(identity.name)

    def sources(self, identity: BrandIdentity) -> list[str]:
        """Return candidate URLs for a brand, highest priority first."""
        config = self.config_for(identity)
        if config is not None and config.sources:
            sources = list(config.sources)
            if config.fallback and config.fallback not in sources:
                sources.append(config.fallback)
            return sources

        return [
            build_logo_search_url(identity.name, "wikipedia"),
            build_logo_search_url(identity.name, "cdn"),
        ]
