"""Style classification value objects.

InDesign exports carry only presentational class names (``Artikelen_Kop``,
``Meditatie_vers``, ``CharOverride-3``). The style classifier maps those
names to semantic roles once per load and the resulting
:class:`StyleClassification` is handed to every later stage.
"""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Iterable, Mapping


class StyleRole(str, Enum):
    """Semantic role of a style class."""

    TITLE = "title"
    CHAPEAU = "chapeau"
    BODY = "body"
    AUTHOR = "author"
    CATEGORY = "category"
    SUBHEADING = "subheading"
    STREAMER = "streamer"
    SIDEBAR = "sidebar"
    CAPTION = "caption"
    COVER_TITLE = "cover-title"
    COVER_CHAPEAU = "cover-chapeau"
    INTRO_VERSE = "intro-verse"
    VERSE_REFERENCE = "verse-reference"
    AUTHOR_BIO = "author-bio"
    QUESTION = "question"
    ARTICLE_BOUNDARY = "article-boundary"


@dataclass(frozen=True)
class OverrideStyle:
    """Inline emphasis declared for a ``CharOverride-N`` class.

    Attributes:
        italic: Whether the override sets ``font-style: italic``
        bold: Whether the override sets a bold ``font-weight``
    """

    italic: bool = False
    bold: bool = False


class StyleClassification:
    """Immutable mapping from class name to :class:`StyleRole`.

    Each class name maps to at most one role. Entries keep insertion order,
    which is the order classes were first seen (CSS rules before HTML usage).

    Attributes:
        class_roles: Read-only class name to role mapping
        char_overrides: Read-only CharOverride class to emphasis mapping
    """

    __slots__ = ("_class_roles", "_char_overrides")

    def __init__(
        self,
        class_roles: Mapping[str, StyleRole] | Iterable[tuple[str, StyleRole]] = (),
        char_overrides: Mapping[str, OverrideStyle] | None = None,
    ):
        roles: dict[str, StyleRole] = {}
        items = class_roles.items() if isinstance(class_roles, Mapping) else class_roles
        for name, role in items:
            roles.setdefault(name, StyleRole(role))
        self._class_roles = MappingProxyType(roles)
        self._char_overrides = MappingProxyType(dict(char_overrides or {}))

    @property
    def class_roles(self) -> Mapping[str, StyleRole]:
        return self._class_roles

    @property
    def char_overrides(self) -> Mapping[str, OverrideStyle]:
        return self._char_overrides

    def role_of(self, class_name: str) -> StyleRole | None:
        """Return the role of a single class name, or None if unclassified."""
        return self._class_roles.get(class_name)

    def classes_for(self, role: StyleRole) -> list[str]:
        """Return every class name classified as ``role`` in insertion order."""
        return [name for name, r in self._class_roles.items() if r == role]

    def override_style(self, class_name: str | None) -> OverrideStyle | None:
        if not class_name:
            return None
        return self._char_overrides.get(class_name)

    def merge(self, other: "StyleClassification") -> "StyleClassification":
        """Return a new classification holding this one's entries plus other's.

        Entries already present are never overwritten, so the receiver's
        classification wins on conflicts. Merging is not commutative but is
        idempotent: ``a.merge(b).merge(b) == a.merge(b)``.

        Args:
            other: Classification whose new entries are appended

        Returns:
            The merged classification
        """
        roles = dict(self._class_roles)
        for name, role in other.class_roles.items():
            roles.setdefault(name, role)
        overrides = dict(self._char_overrides)
        for name, style in other.char_overrides.items():
            overrides.setdefault(name, style)
        return StyleClassification(roles, overrides)

    def __contains__(self, class_name: object) -> bool:
        return class_name in self._class_roles

    def __len__(self) -> int:
        return len(self._class_roles)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, StyleClassification):
            return NotImplemented
        return (
            list(self._class_roles.items()) == list(other.class_roles.items())
            and dict(self._char_overrides) == dict(other.char_overrides)
        )

    def __hash__(self) -> int:
        return hash(tuple(self._class_roles.items()))

    def __repr__(self) -> str:
        return f"StyleClassification({len(self)} classes)"
