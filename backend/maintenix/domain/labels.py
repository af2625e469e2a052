"""Display labels for record enums, used in assignment notifications."""

PRIORITY_LABELS: dict[str, str] = {
    "LOW": "Low",
    "MEDIUM": "Medium",
    "HIGH": "High",
}

CATEGORY_LABELS: dict[str, str] = {
    "ELECTRICAL": "Electrical",
    "MECHANICAL": "Mechanical",
    "PNEUMATIC": "Pneumatic",
    "PROCESS": "Process",
    "ELECTRONIC": "Electronic",
    "AUTOMATION": "Automation",
    "BUILDING": "Building",
    "TOOLING": "Tooling",
    "REFRIGERATION": "Refrigeration",
    "SETUP": "Setup",
    "HYDRAULIC": "Hydraulic",
}

SHIFT_LABELS: dict[str, str] = {
    "FIRST": "First",
    "SECOND": "Second",
    "THIRD": "Third",
}

EMPTY_LABEL = "-"


def lookup_label(value: str | None, mapping: dict[str, str]) -> str:
    """Map a raw enum value to its label.

    Unknown values are humanized instead of failing:
    ``"PREVENTIVE_CHECK"`` -> ``"Preventive check"``.
    """
    if not value:
        return EMPTY_LABEL
    label = mapping.get(value.upper())
    if label:
        return label
    normalized = value.lower().replace("_", " ")
    return normalized[:1].upper() + normalized[1:]


def format_priority(value: str | None) -> str:
    return lookup_label(value, PRIORITY_LABELS)


def format_category(value: str | None) -> str:
    return lookup_label(value, CATEGORY_LABELS)


def format_shift(value: str | None) -> str:
    return lookup_label(value, SHIFT_LABELS)
