"""
Marketplace template definitions.

Describes how a marketplace template CSV is laid out (which header keywords
identify which column) and the attribute types the template may declare.
"""

# Attribute types understood by the quality checker.
ATTRIBUTE_TYPES: set[str] = {"string", "number", "enum", "array", "boolean"}

# Raw data_type spellings (lowercase) → canonical attribute type.
TYPE_ALIASES: dict[str, str] = {
    "integer": "number",
    "int": "number",
    "float": "number",
    "decimal": "number",
    "text": "string",
    "bool": "boolean",
    "list": "array",
}

# ---------------------------------------------------------------------------
# Header keywords: template column role → substrings that identify it.
# A header matches a role if it contains any of the keywords (lowercase).
# The first matching header wins.
# ---------------------------------------------------------------------------
HEADER_KEYWORDS: dict[str, tuple[str, ...]] = {
    "name": ("attribute", "name"),
    "type": ("type", "data_type"),
    "required": ("required",),
    "max_length": ("max", "length"),
    "allowed_values": ("allowed", "enum", "values"),
    "validation": ("validation", "rules"),
}

# Characters separating the entries of an "allowed values" cell.
ENUM_SEPARATORS: str = r"[,|;]"

# Accepted spellings for boolean attribute values (lowercase).
BOOLEAN_VALUES: set[str] = {"true", "false", "yes", "no", "1", "0"}
