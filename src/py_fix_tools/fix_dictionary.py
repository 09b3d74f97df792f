"""
Protocol dictionary model.

Responsibility: Load a QuickFIX style XML data dictionary once and answer
read-only lookups on it: fields by tag or name, the ordered layout
("message parts") of every message type, the header and the trailer.

    <fix type="FIX" major="4" minor="4">
      <header> ... </header>
      <messages><message name="NewOrderSingle" msgtype="D" msgcat="app"> ... </message></messages>
      <trailer> ... </trailer>
      <components><component name="Instrument"> ... </component></components>
      <fields><field number="54" name="Side" type="CHAR"><value enum="1" description="BUY"/></field></fields>
    </fix>
"""

from __future__ import annotations

import dataclasses
import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from py_fix_tools.fix_errors import DictionaryError

logger = logging.getLogger(__name__)

# Declared type of a group-count ("NoXxx") field
NUMINGROUP = "NUMINGROUP"


@dataclass(frozen=True, eq=False)
class FieldDef:
    tag: int
    name: str
    type: str
    enums: Mapping[str, str] = dataclasses.field(default_factory=dict)
    # Layout of one group row; only set on group-count fields declared inside a layout
    members: tuple | None = None

    @property
    def is_group(self) -> bool:
        return self.type == NUMINGROUP

    def enum_description(self, value: str) -> str:
        return self.enums.get(value, "")

    def with_members(self, members) -> FieldDef:
        """Return the group-count variant of this field carrying the row layout."""
        return dataclasses.replace(self, type=NUMINGROUP, members=tuple(members))


@dataclass(frozen=True, eq=False)
class MessagePart:
    """Either a direct field reference or a named component.

    A component carries its own ordered parts and is expanded in place
    wherever it is referenced.
    """
    field: FieldDef | None = None
    component: str | None = None
    parts: tuple = ()
    required: bool = False

    @property
    def is_component(self) -> bool:
        return self.component is not None


@dataclass(frozen=True, eq=False)
class MessageDescriptor:
    msg_type: str
    name: str
    category: str
    parts: tuple


def flatten_parts(parts) -> tuple:
    """Expand components in place and return the field definitions in declared order.

    A tag already seen at this nesting level is not repeated.
    """
    defs, _ = _flatten(parts, frozenset())
    return defs


def _flatten(parts, consumed):
    out = []
    for part in parts:
        if part.is_component:
            sub_defs, consumed = _flatten(part.parts, consumed)
            out.extend(sub_defs)
        elif part.field.tag not in consumed:
            consumed = consumed | {part.field.tag}
            out.append(part.field)
    return tuple(out), consumed


class Dictionary:
    """Immutable, in-memory protocol dictionary. Build it with load_dictionary()."""

    def __init__(self, version, fields, messages, header, trailer):
        self.version = version
        self._fields_by_tag = {f.tag: f for f in fields}
        self._fields_by_name = {f.name: f for f in fields}
        self._messages = {m.msg_type: m for m in messages}
        self._header = tuple(header)
        self._trailer = tuple(trailer)
        self._header_tags = frozenset(f.tag for f in flatten_parts(self._header))
        self._trailer_tags = frozenset(f.tag for f in flatten_parts(self._trailer))

    @property
    def fields(self) -> tuple:
        return tuple(self._fields_by_tag.values())

    @property
    def messages(self) -> Mapping[str, MessageDescriptor]:
        return MappingProxyType(self._messages)

    def field_by_tag(self, tag: int) -> FieldDef | None:
        return self._fields_by_tag.get(tag)

    def field_by_name(self, name: str) -> FieldDef | None:
        return self._fields_by_name.get(name)

    def message(self, msg_type: str) -> MessageDescriptor | None:
        return self._messages.get(msg_type)

    def message_parts(self, msg_type: str) -> tuple:
        """Body layout of a message type; empty when the type is not in the dictionary."""
        desc = self._messages.get(msg_type)
        if desc is None:
            return ()
        return desc.parts

    def header_parts(self) -> tuple:
        return self._header

    def trailer_parts(self) -> tuple:
        return self._trailer

    def header_tags(self) -> frozenset:
        return self._header_tags

    def trailer_tags(self) -> frozenset:
        return self._trailer_tags


def load_dictionary(source) -> Dictionary:
    """Parse a dictionary from a path or a file object.

    Raises DictionaryError if the source can't be read or is inconsistent.
    """
    try:
        root = ET.parse(source).getroot()
    except ET.ParseError as e:
        raise DictionaryError(f"Malformed dictionary {source!r}: {e}") from e
    except OSError as e:
        raise DictionaryError(f"Cannot read dictionary {source!r}: {e}") from e

    dictionary = _DictionaryBuilder(root).build()
    logger.info("Loaded %s dictionary: %d fields, %d messages",
                dictionary.version, len(dictionary.fields), len(dictionary.messages))
    return dictionary


class _DictionaryBuilder:

    def __init__(self, root):
        if root.tag != "fix":
            raise DictionaryError(f"Unexpected root element <{root.tag}>, expected <fix>")
        self.root = root
        self.fields = {}
        self.component_elements = {}
        self.components = {}
        self._resolving = []

    def build(self) -> Dictionary:
        self._load_fields()
        for c in self.root.findall("./components/component"):
            name = c.get("name")
            if not name:
                raise DictionaryError("Component without a name")
            self.component_elements[name] = c

        messages = []
        for m in self.root.findall("./messages/message"):
            msg_type = m.get("msgtype")
            if not msg_type:
                raise DictionaryError(f"Message {m.get('name')!r} has no msgtype")
            messages.append(MessageDescriptor(
                msg_type=msg_type,
                name=m.get("name", ""),
                category=m.get("msgcat", ""),
                parts=self._parse_parts(m),
            ))

        header = self.root.find("header")
        trailer = self.root.find("trailer")
        return Dictionary(
            version=self._version(),
            fields=list(self.fields.values()),
            messages=messages,
            header=self._parse_parts(header) if header is not None else (),
            trailer=self._parse_parts(trailer) if trailer is not None else (),
        )

    def _version(self):
        begin = self.root.get("type", "FIX")
        major = self.root.get("major")
        minor = self.root.get("minor")
        if major is None or minor is None:
            return begin
        return f"{begin}.{major}.{minor}"

    def _load_fields(self):
        tags = set()
        for f in self.root.findall("./fields/field"):
            name = f.get("name")
            number = f.get("number", "")
            try:
                tag = int(number)
            except ValueError:
                raise DictionaryError(f"Field {name!r} has invalid number {number!r}") from None
            if not name or tag <= 0:
                raise DictionaryError(f"Invalid field definition name={name!r} number={number!r}")
            if tag in tags or name in self.fields:
                raise DictionaryError(f"Duplicate field definition {name!r} ({tag})")
            tags.add(tag)

            enums = {v.get("enum"): v.get("description", "") for v in f.findall("value")}
            self.fields[name] = FieldDef(
                tag=tag,
                name=name,
                type=f.get("type", "STRING").upper(),
                enums=MappingProxyType(enums),
            )

    def _field(self, name):
        try:
            return self.fields[name]
        except KeyError:
            raise DictionaryError(f"Reference to undefined field {name!r}") from None

    def _component(self, name):
        if name in self.components:
            return self.components[name]
        if name in self._resolving:
            cycle = " -> ".join(self._resolving + [name])
            raise DictionaryError(f"Circular component reference: {cycle}")
        element = self.component_elements.get(name)
        if element is None:
            raise DictionaryError(f"Reference to undefined component {name!r}")

        self._resolving.append(name)
        try:
            parts = self._parse_parts(element)
        finally:
            self._resolving.pop()
        self.components[name] = parts
        return parts

    def _parse_parts(self, element) -> tuple:
        parts = []
        for child in element:
            name = child.get("name", "")
            required = child.get("required", "N").upper().startswith("Y")
            if child.tag == "field":
                parts.append(MessagePart(field=self._field(name), required=required))
            elif child.tag == "component":
                parts.append(MessagePart(component=name, parts=self._component(name), required=required))
            elif child.tag == "group":
                group_def = self._field(name).with_members(self._parse_parts(child))
                if not flatten_parts(group_def.members):
                    raise DictionaryError(f"Group {name!r} declares no member fields")
                parts.append(MessagePart(field=group_def, required=required))
        return tuple(parts)
