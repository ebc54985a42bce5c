# Copyright 2020 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#      http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import re
from types import MappingProxyType
from lxml import etree  # pytype: disable=import-error
from typing import Any, Container, MutableMapping, NamedTuple, Optional


def svgns():
    return "http://www.w3.org/2000/svg"


def xlinkns():
    return "http://www.w3.org/1999/xlink"


def splitns(name):
    qn = etree.QName(name)
    return qn.namespace, qn.localname


def strip_ns(tagname):
    return splitns(tagname)[1]


def ntos(n: float) -> str:
    # strip superflous .0 decimals
    return str(int(n)) if isinstance(n, float) and n.is_integer() else str(n)


# https://www.w3.org/TR/SVG11/types.html#DataTypeLength
_LENGTH_UNITS = frozenset({"em", "ex", "px", "in", "cm", "mm", "pt", "pc", "%"})
_NUMBER_RE = r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?"
_LENGTH_RE = re.compile(rf"^\s*({_NUMBER_RE})\s*([a-zA-Z%]*)\s*$")
_LINK_RE = re.compile(r"^\s*url\(\s*#([^)\s]+)\s*\)(.*)$", re.DOTALL)


class Length(NamedTuple):
    number: float
    unit: str = ""

    def has_unit(self) -> bool:
        return bool(self.unit)

    def tostring(self) -> str:
        return ntos(float(self.number)) + self.unit


class Link(NamedTuple):
    """Logical reference to another element, by id.

    Paint links may carry a fallback, e.g. url(#grad) red.
    """

    id: str
    fallback: str = ""

    def tostring(self) -> str:
        if self.fallback:
            return f"url(#{self.id}) {self.fallback}"
        return f"url(#{self.id})"


def parse_number(s: str) -> float:
    return float(s.strip())


def parse_length(s: str) -> Length:
    match = _LENGTH_RE.match(s)
    if not match:
        raise ValueError(f"Unable to parse length {s!r}")
    number, unit = match.groups()
    if unit and unit not in _LENGTH_UNITS:
        raise ValueError(f"Unknown length unit {unit!r} in {s!r}")
    return Length(float(number), unit)


def parse_link(s: str) -> Link:
    match = _LINK_RE.match(s)
    if not match:
        raise ValueError(f'Unrecognized url "{s}"')
    return Link(match.group(1), match.group(2).strip())


def parse_paint(s: str):
    """Paint is either a color/keyword string or a link to a paint server."""
    if s.strip().startswith("url("):
        return parse_link(s)
    return s.strip()


def parse_link_or_none(s: str):
    if s.strip() == "none":
        return "none"
    return parse_link(s)


# Closed set of recognized attributes and the kind of value each holds.
# Anything not listed is kept as an opaque string.
ATTRIB_TYPES = MappingProxyType(
    {
        # geometry
        "x": "length",
        "y": "length",
        "width": "length",
        "height": "length",
        "rx": "length",
        "ry": "length",
        "cx": "length",
        "cy": "length",
        "r": "length",
        "x1": "length",
        "y1": "length",
        "x2": "length",
        "y2": "length",
        "fx": "length",
        "fy": "length",
        # painting
        "stroke-width": "length",
        "stroke-dashoffset": "length",
        "stroke-miterlimit": "number",
        "opacity": "number",
        "fill-opacity": "number",
        "stroke-opacity": "number",
        "stop-opacity": "number",
        "fill": "paint",
        "stroke": "paint",
        # references
        "clip-path": "link",
        "mask": "link",
        "filter": "link",
        "marker-start": "link",
        "marker-mid": "link",
        "marker-end": "link",
        # transforms
        "transform": "transform",
        "gradientTransform": "transform",
        "patternTransform": "transform",
        # enumerations
        "gradientUnits": "enum",
        "patternUnits": "enum",
        "vector-effect": "enum",
        "display": "enum",
        "visibility": "enum",
        "fill-rule": "enum",
        "clip-rule": "enum",
        "stroke-linecap": "enum",
        "stroke-linejoin": "enum",
        # strings
        "id": "string",
        "style": "string",
        "stroke-dasharray": "string",
    }
)


def attrib_type(name: str) -> str:
    return ATTRIB_TYPES.get(name, "string")


# makes dict read-only
ATTRIB_DEFAULTS = MappingProxyType(
    {
        "x": Length(0),
        "y": Length(0),
        "cx": Length(0),
        "cy": Length(0),
        "x1": Length(0),
        "y1": Length(0),
        "x2": Length(0),
        "y2": Length(0),
        "stroke-width": Length(1),
        "stroke-dasharray": "none",
        "vector-effect": "none",
        "gradientUnits": "objectBoundingBox",
        "opacity": 1.0,
        "fill-opacity": 1.0,
        "stroke-opacity": 1.0,
    }
)


def attrib_default(name: str, default: Any = ()) -> Any:
    if name in ATTRIB_DEFAULTS:
        return ATTRIB_DEFAULTS[name]
    if default == ():
        raise ValueError(f"No entry for '{name}' and no default given")
    return default


def parse_css_declarations(
    style: str,
    output: MutableMapping[str, Any],
    property_names: Optional[Container[str]] = None,
) -> str:
    """Parse CSS declaration list into {property: value}.

    Args:
        style: CSS declaration list without the enclosing braces,
            as found in an SVG element's "style" attribute.
        output: a dictionary where to store the parsed properties.
        property_names: optional set of property names to limit the declarations
            to be parsed; if not provided, all will be parsed.

    Returns:
        A string containing the unparsed style declarations, if any.

    Raises:
        ValueError if CSS declaration is invalid and can't be parsed.
    """
    unparsed = []
    for declaration in style.split(";"):
        declaration = declaration.strip()
        if declaration.count(":") == 1:
            property_name, value = declaration.split(":")
            property_name, value = property_name.strip(), value.strip()
            if property_names is None or property_name in property_names:
                output[property_name] = value
            else:
                unparsed.append(declaration)
        elif declaration:
            raise ValueError(f"Invalid CSS declaration syntax: {declaration}")
    return "; ".join(unparsed) + ";" if unparsed else ""
