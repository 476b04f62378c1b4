"""Free-text field normalization - collapse data-entry variants into display labels."""

from typing import Callable, NamedTuple, Optional, Sequence


UNCATEGORIZED = "Uncategorized"
UNKNOWN = "Unknown"


class NormalizationRule(NamedTuple):
    """Predicate over the lower-cased, trimmed input and the label it maps to."""
    predicate: Callable[[str], bool]
    label: str

    def matches(self, key: str) -> bool:
        return self.predicate(key)


def equals_any(*words: str) -> Callable[[str], bool]:
    """Build a predicate matching any of the given words exactly (case-insensitive)."""
    vocabulary = frozenset(word.lower() for word in words)
    return lambda key: key in vocabulary


def starts_with(prefix: str) -> Callable[[str], bool]:
    """Build a predicate matching any input starting with prefix (case-insensitive)."""
    prefix = prefix.lower()
    return lambda key: key.startswith(prefix)


def capitalize_first(text: str) -> str:
    """Upper-case the first character, keep the rest as entered."""
    first = text[:1]
    upper = first.upper()
    # Skip characters whose upper case does not lower back (e.g. "ß" -> "SS")
    if len(upper) != 1 or upper.lower() != first.lower():
        return text
    return upper + text[1:]


def capitalize_lowered(text: str) -> str:
    """Lower-case everything, then upper-case the first character."""
    return capitalize_first(text.lower())


def keep_trimmed(text: str) -> str:
    return text


class Normalizer:
    """
    Ordered rule list mapping a raw field value to one canonical label.

    Missing or blank input is replaced by the sentinel before matching. The
    first matching rule wins; with no match the fallback formats the trimmed
    input. Every label is checked at construction to normalize to itself, so
    the result is idempotent and a fallback can never land on another rule's
    label.
    """

    def __init__(
        self,
        rules: Sequence[NormalizationRule],
        sentinel: str,
        fallback: Callable[[str], str] = capitalize_first,
    ):
        self.rules = tuple(rules)
        self.sentinel = sentinel
        self.fallback = fallback
        self._validate()

    def __call__(self, raw: Optional[str]) -> str:
        return self.normalize(raw)

    def normalize(self, raw: Optional[str]) -> str:
        text = (raw or "").strip() or self.sentinel
        key = text.lower()
        for rule in self.rules:
            if rule.matches(key):
                return rule.label
        return self.fallback(text)

    def labels(self) -> list[str]:
        """Canonical labels in rule order, without duplicates."""
        return list(dict.fromkeys(rule.label for rule in self.rules))

    def _validate(self) -> None:
        for label in [*self.labels(), self.sentinel]:
            if not label.strip():
                raise ValueError("Normalization labels must be non-empty")
            normalized = self.normalize(label)
            if normalized != label:
                raise ValueError(
                    f"Label {label!r} normalizes to {normalized!r}; "
                    "reorder the rules or change the label"
                )


EQUIPMENT_CATEGORY = Normalizer(
    rules=[
        NormalizationRule(equals_any("lens", "lenses"), "Lenses"),
        NormalizationRule(equals_any("light", "lights", "lighting"), "Lights"),
        NormalizationRule(equals_any("camera", "cameras"), "Cameras"),
        NormalizationRule(equals_any("audio", "sound"), "Audio"),
        NormalizationRule(equals_any("drone", "drones"), "Drones"),
        NormalizationRule(
            equals_any("tripod", "tripods", "stabilizer", "stabilizers", "tripods & stabilizers"),
            "Tripods & Stabilizers",
        ),
        NormalizationRule(equals_any("accessory", "accessories"), "Accessories"),
    ],
    sentinel=UNCATEGORIZED,
    fallback=capitalize_lowered,
)

# sony, sony_g, sony_g_m, sony ff ...
EQUIPMENT_BRAND = Normalizer(
    rules=[
        NormalizationRule(starts_with("sony"), "Sony"),
        NormalizationRule(equals_any("red"), "RED"),
        NormalizationRule(starts_with("canon"), "Canon"),
        NormalizationRule(starts_with("arri"), "ARRI"),
        NormalizationRule(starts_with("zeiss"), "Zeiss"),
        NormalizationRule(starts_with("blackmagic"), "Blackmagic"),
    ],
    sentinel=UNKNOWN,
    fallback=capitalize_first,
)

# Equipment catalog and store catalogue only substitute the sentinel
CATALOG_CATEGORY = Normalizer(rules=[], sentinel=UNCATEGORIZED, fallback=keep_trimmed)

NORMALIZERS: dict[str, dict[str, Normalizer]] = {
    "equipment": {"category": EQUIPMENT_CATEGORY, "brand": EQUIPMENT_BRAND},
    "equipment_catalog": {"category": CATALOG_CATEGORY},
    "store_catalogue": {"category": CATALOG_CATEGORY},
}


def get_normalizer(page: str, field: str) -> Normalizer:
    """Look up the rule set a page uses for a field."""
    try:
        return NORMALIZERS[page][field]
    except KeyError:
        raise KeyError(f"No normalizer for field {field!r} on page {page!r}") from None


def title_key(raw: Optional[str]) -> str:
    """Grouping key for product titles; display keeps the original title."""
    return ((raw or "").strip() or UNKNOWN).lower()


# Display category -> enum name the mobile app reads
CATEGORY_ENUM_NAMES = {
    "Cameras": "camera",
    "Lenses": "lens",
    "Lights": "lighting",
    "Lighting": "lighting",
    "Audio": "audio",
    "Drones": "drone",
    "Tripods & Stabilizers": "grip",
    "Grip": "grip",
    "Storage": "storage",
    "Accessories": "accessories",
}


def category_enum_name(label: str) -> str:
    """Map a display category to the stored enum name."""
    return CATEGORY_ENUM_NAMES.get(label, label.strip().lower())
