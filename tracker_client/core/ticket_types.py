"""Ticket entry types understood by the tracker server."""

ENTRY_TYPE_TIME = "time"

# No time math on these; they carry a unit price and a quantity.
HARDWARE_LIKE_ENTRY_TYPES = frozenset({"hardware", "software", "component", "accessory"})

# Types the server accepts on create. Decoding keeps any other value verbatim
# so newer deployments can introduce types without breaking older clients.
SUPPORTED_ENTRY_TYPES = (
    ENTRY_TYPE_TIME,
    "hardware",
    "deployment_flat_rate",
    "software",
    "component",
    "accessory",
)


def normalize_entry_type(value: str | None) -> str:
    """Return a lowercase entry_type, defaulting to ``time``."""

    return (value or ENTRY_TYPE_TIME).strip().lower() or ENTRY_TYPE_TIME


def is_supported_entry_type(value: str | None) -> bool:
    return value is not None and normalize_entry_type(value) in SUPPORTED_ENTRY_TYPES
