"""Brand domain entities."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class BrandIdentity:
    """Canonical identity of a real-world brand.

    The canonical name doubles as the cache key.

    Attributes:
        name: Lowercase ASCII canonical key (e.g. "mcdonalds")
        display_name: Human readable name (e.g. "麦当劳")
        aliases: Alternative spellings and abbreviations
        categories: Free-form category tags
    """

    name: str
    display_name: str
    aliases: frozenset[str] = field(default_factory=frozenset)
    categories: frozenset[str] = field(default_factory=frozenset)


@dataclass(frozen=True)
class BrandSourceConfig:
    """Externally supplied fetch configuration for one brand.

    Attributes:
        name: Canonical brand key
        display_name: Human readable name
        sources: Logo URLs, highest priority first
        fallback: Optional URL tried after every configured source
        local_file: File name of a bundled copy of the logo
        primary_color: Theme color (hex)
        secondary_color: Theme color (hex)
        version: Version tag recorded on cache entries
        last_updated: Date the configuration was last reviewed
    """

    name: str
    display_name: str
    sources: tuple[str, ...] = ()
    fallback: str | None = None
    local_file: str = ""
    primary_color: str = "#000000"
    secondary_color: str = "#FFFFFF"
    version: str = "1.0.0"
    last_updated: str = ""
