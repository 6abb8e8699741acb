"""Icon lookup value types."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Sequence, Union

WILDCARD = "*"
DEFAULT_EXTENSIONS: tuple[str, ...] = ("svg", "png", "xpm")
DESCRIPTOR_FILENAME = "index.theme"
ICON_THEME_SECTION = "Icon Theme"

SizeSpec = Union[int, str]


class DirectoryType(Enum):
    """Sizing policy of a theme directory."""

    FIXED = "Fixed"
    SCALABLE = "Scalable"
    THRESHOLD = "Threshold"

    @classmethod
    def parse(cls, raw: str | None) -> "DirectoryType":
        cleaned = (raw or "").strip().lower()
        for member in cls:
            if member.value.lower() == cleaned:
                return member
        return cls.THRESHOLD


@dataclass(frozen=True, slots=True)
class IconSearchRequest:
    """What to look for: icon base name, accepted extensions, context and size."""

    icon_name: str
    extensions: tuple[str, ...] = DEFAULT_EXTENSIONS
    context: str = WILDCARD
    size: SizeSpec = WILDCARD

    def __post_init__(self) -> None:
        name = (self.icon_name or "").strip() if isinstance(self.icon_name, str) else ""
        if not name:
            raise ValueError("icon_name must be a non-empty string")
        object.__setattr__(self, "icon_name", name)
        object.__setattr__(self, "extensions", _normalize_extensions(self.extensions))
        object.__setattr__(self, "context", str(self.context or "").strip() or WILDCARD)
        object.__setattr__(self, "size", _normalize_size(self.size))

    @property
    def any_size(self) -> bool:
        return self.size == WILDCARD

    @property
    def any_context(self) -> bool:
        return self.context == WILDCARD

    @classmethod
    def coerce(
        cls,
        options: "IconSearchRequest | Mapping[str, Any] | str",
        *,
        default_extensions: Sequence[str] | None = None,
    ) -> "IconSearchRequest":
        """Build a request from a bare icon name, a mapping or an existing request.

        Mapping keys accept both ``iconName``/``ext`` and ``icon_name``/``extensions``.
        ``default_extensions`` applies when the options do not name any.
        """
        if isinstance(options, cls):
            return options
        fallback_exts = tuple(default_extensions) if default_extensions else DEFAULT_EXTENSIONS
        if isinstance(options, str):
            return cls(icon_name=options, extensions=fallback_exts)
        if isinstance(options, Mapping):
            name = options.get("icon_name", options.get("iconName"))
            exts = options.get("extensions", options.get("ext")) or fallback_exts
            return cls(
                icon_name=name,
                extensions=exts,
                context=options.get("context") or WILDCARD,
                size=options.get("size") or WILDCARD,
            )
        raise TypeError(f"Unsupported icon options type: {type(options).__name__}")


@dataclass(frozen=True, slots=True)
class IconHit:
    """An icon path found by a theme, tagged with the theme's directory name."""

    icon: str
    theme_name: str


def _normalize_extensions(raw: Sequence[str] | None) -> tuple[str, ...]:
    if isinstance(raw, str):
        raw = raw.split(",")
    cleaned: list[str] = []
    for ext in raw or ():
        value = str(ext).strip().lstrip(".")
        if value and value not in cleaned:
            cleaned.append(value)
    return tuple(cleaned) or DEFAULT_EXTENSIONS


def _normalize_size(raw: SizeSpec | None) -> SizeSpec:
    if isinstance(raw, bool):
        raise ValueError(f"Invalid icon size: {raw!r}")
    if raw is None or raw == "" or raw == 0:
        return WILDCARD
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        if raw.is_integer() and raw > 0:
            return int(raw)
        raise ValueError(f"Invalid icon size: {raw!r}")
    text = str(raw).strip()
    if text == WILDCARD:
        return WILDCARD
    if text.isdigit():
        return int(text) or WILDCARD
    raise ValueError(f"Invalid icon size: {raw!r}")
