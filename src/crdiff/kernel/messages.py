"""Messages attached to compatibility findings.

A finding carries a message key plus positional arguments. ``dissect``
turns that pair into a structured, kind-specific detail object (this is
where argument positions become named fields such as ``path``, ``from``
and ``to``), and ``text`` renders the English sentence shown to users.
Keys without a structured form fall back to ``{"key": ..., "args": [...]}``.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple

from crdiff._internal.canonical_json import canonical_dumps
from crdiff.codes import FindingId


@dataclass(frozen=True)
class LocalizedMessage:
    key: str
    args: Tuple[Any, ...] = ()

    def dissect(self) -> Dict[str, Any]:
        """Return the structured details for this message."""
        builder = _DETAIL_BUILDERS.get(self.key)
        if builder is None:
            return {"key": self.key, "args": list(self.args)}
        return builder(self.args)

    def text(self) -> str:
        """Render the message as an English sentence."""
        template = _TEMPLATES.get(self.key)
        if template is None:
            return " ".join([self.key] + [format_value(a) for a in self.args])
        details = self.dissect()
        return template.format(**{k: format_value(v) for k, v in details.items()})

    @property
    def path(self) -> Optional[str]:
        return self.dissect().get("path")


def format_value(value: Any) -> str:
    """Format an argument for display (strings verbatim, everything else as JSON)."""
    if isinstance(value, str):
        return value
    return canonical_dumps(value)


def _type_with_format(type_: Optional[str], format_: Optional[str]) -> str:
    type_ = type_ or "<unset>"
    if format_:
        return f"{type_}/{format_}"
    return type_


def _named(*names: str) -> Callable[[Tuple[Any, ...]], Dict[str, Any]]:
    def build(args: Tuple[Any, ...]) -> Dict[str, Any]:
        return {name: args[i] for i, name in enumerate(names) if i < len(args)}
    return build


def _type_changed(args: Tuple[Any, ...]) -> Dict[str, Any]:
    path, old_type, old_format, new_type, new_format = args
    return {
        "path": path,
        "from": _type_with_format(old_type, old_format),
        "to": _type_with_format(new_type, new_format),
    }


_DETAIL_BUILDERS: Dict[str, Callable[[Tuple[Any, ...]], Dict[str, Any]]] = {
    FindingId.NEW_REQUIRED_PROPERTY.value: _named("path"),
    FindingId.NEW_OPTIONAL_PROPERTY.value: _named("path"),
    FindingId.PROPERTY_BECAME_REQUIRED.value: _named("path"),
    FindingId.PROPERTY_BECAME_OPTIONAL.value: _named("path"),
    FindingId.PROPERTY_REMOVED.value: _named("path"),
    FindingId.PROPERTY_TYPE_CHANGED.value: _type_changed,
    FindingId.PROPERTY_BECAME_ENUM.value: _named("path"),
    FindingId.PROPERTY_ENUM_VALUE_REMOVED.value: _named("value", "path"),
    FindingId.PROPERTY_ENUM_VALUE_ADDED.value: _named("value", "path"),
    FindingId.PROPERTY_MAX_LENGTH_SET.value: _named("path", "length"),
    FindingId.PROPERTY_MAX_LENGTH_DECREASED.value: _named("path", "from", "to"),
    FindingId.PROPERTY_MIN_LENGTH_SET.value: _named("path", "length"),
    FindingId.PROPERTY_MIN_LENGTH_INCREASED.value: _named("path", "from", "to"),
    FindingId.PROPERTY_MIN_ITEMS_SET.value: _named("path", "items"),
    FindingId.PROPERTY_MIN_ITEMS_INCREASED.value: _named("path", "from", "to"),
    FindingId.PROPERTY_MAX_ITEMS_DECREASED.value: _named("path", "from", "to"),
    FindingId.PROPERTY_MIN_SET.value: _named("path", "value"),
    FindingId.PROPERTY_MIN_INCREASED.value: _named("path", "from", "to"),
    FindingId.PROPERTY_MAX_SET.value: _named("path", "value"),
    FindingId.PROPERTY_MAX_DECREASED.value: _named("path", "from", "to"),
    FindingId.PROPERTY_PATTERN_ADDED.value: _named("pattern", "path"),
    FindingId.PROPERTY_PATTERN_CHANGED.value: _named("path", "from", "to"),
    FindingId.PROPERTY_BECAME_NOT_NULLABLE.value: _named("path"),
}

_TEMPLATES: Dict[str, str] = {
    FindingId.NEW_REQUIRED_PROPERTY.value: "added the new required property {path}",
    FindingId.NEW_OPTIONAL_PROPERTY.value: "added the new optional property {path}",
    FindingId.PROPERTY_BECAME_REQUIRED.value: "property {path} became required",
    FindingId.PROPERTY_BECAME_OPTIONAL.value: "property {path} became optional",
    FindingId.PROPERTY_REMOVED.value: "removed the property {path}",
    FindingId.PROPERTY_TYPE_CHANGED.value: "changed the type of property {path} from {from} to {to}",
    FindingId.PROPERTY_BECAME_ENUM.value: "property {path} was restricted to a list of enum values",
    FindingId.PROPERTY_ENUM_VALUE_REMOVED.value: "removed the enum value {value} of property {path}",
    FindingId.PROPERTY_ENUM_VALUE_ADDED.value: "added the new enum value {value} to property {path}",
    FindingId.PROPERTY_MAX_LENGTH_SET.value: "set the maxLength of property {path} to {length}",
    FindingId.PROPERTY_MAX_LENGTH_DECREASED.value: "decreased the maxLength of property {path} from {from} to {to}",
    FindingId.PROPERTY_MIN_LENGTH_SET.value: "set the minLength of property {path} to {length}",
    FindingId.PROPERTY_MIN_LENGTH_INCREASED.value: "increased the minLength of property {path} from {from} to {to}",
    FindingId.PROPERTY_MIN_ITEMS_SET.value: "set the minItems of property {path} to {items}",
    FindingId.PROPERTY_MIN_ITEMS_INCREASED.value: "increased the minItems of property {path} from {from} to {to}",
    FindingId.PROPERTY_MAX_ITEMS_DECREASED.value: "decreased the maxItems of property {path} from {from} to {to}",
    FindingId.PROPERTY_MIN_SET.value: "set the minimum of property {path} to {value}",
    FindingId.PROPERTY_MIN_INCREASED.value: "increased the minimum of property {path} from {from} to {to}",
    FindingId.PROPERTY_MAX_SET.value: "set the maximum of property {path} to {value}",
    FindingId.PROPERTY_MAX_DECREASED.value: "decreased the maximum of property {path} from {from} to {to}",
    FindingId.PROPERTY_PATTERN_ADDED.value: "added the pattern {pattern} to property {path}",
    FindingId.PROPERTY_PATTERN_CHANGED.value: "changed the pattern of property {path} from {from} to {to}",
    FindingId.PROPERTY_BECAME_NOT_NULLABLE.value: "property {path} became not nullable",
}
