"""Canonical schema paths.

Paths address schema nodes with dots and brackets: ``.`` is the root,
``.spec.replicas`` a named property, ``.[]`` the item schema of an array
and ``.*`` the value schema of a map (additionalProperties). Internally
the root is the empty string so that children can be built by plain
concatenation; ``render_path`` turns it into ``.`` for output.
"""

ROOT = ""
ITEMS_SEGMENT = ".[]"
ADDITIONAL_PROPERTIES_SEGMENT = ".*"


def property_path(path: str, name: str) -> str:
    return f"{path}.{name}"


def items_path(path: str) -> str:
    return path + ITEMS_SEGMENT


def additional_properties_path(path: str) -> str:
    return path + ADDITIONAL_PROPERTIES_SEGMENT


def render_path(path: str) -> str:
    if path == ROOT:
        return "."
    return path
