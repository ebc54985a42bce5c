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

"""Typed attribute access over an lxml element tree.

The tree itself is plain lxml: every element has exactly one parent. Links
between elements (gradients, clip paths, masks) are ids resolved by lookup.
"""

import numbers
from lxml import etree  # pytype: disable=import-error
from typing import Any, List, Optional, Tuple
from svgshrink.svg_meta import (
    Length,
    Link,
    attrib_type,
    ntos,
    parse_css_declarations,
    parse_length,
    parse_link_or_none,
    parse_number,
    parse_paint,
    strip_ns,
)
from svgshrink.svg_transform import Affine2D, parse_svg_transform


_FOLDABLE_SHAPES = frozenset({"rect", "circle", "ellipse", "line"})

_PARSERS = {
    "length": parse_length,
    "number": parse_number,
    "transform": parse_svg_transform,
    "link": parse_link_or_none,
    "paint": parse_paint,
    "enum": str.strip,
    "string": lambda s: s,
}


def tag_name(el: etree.Element) -> str:
    if not isinstance(el.tag, str):
        return ""  # comment or processing instruction
    return strip_ns(el.tag)


def is_group(el: etree.Element) -> bool:
    return tag_name(el) == "g"


def is_foldable_shape(el: etree.Element) -> bool:
    return tag_name(el) in _FOLDABLE_SHAPES


def parse_attr(name: str, raw: str) -> Any:
    return _PARSERS[attrib_type(name)](raw)


def get_attr(el: etree.Element, name: str, default: Any = None) -> Any:
    """Typed value of el's attribute, or default if the attribute is absent.

    Raises ValueError if the attribute is present but malformed.
    """
    raw = el.attrib.get(name)
    if raw is None:
        return default
    return parse_attr(name, raw)


def format_attr(value: Any) -> str:
    if isinstance(value, (Length, Link, Affine2D)):
        return value.tostring()
    if isinstance(value, numbers.Number):
        return ntos(float(value))
    return str(value)


def set_attr(el: etree.Element, name: str, value: Any):
    el.attrib[name] = format_attr(value)


def del_attr(el: etree.Element, *attr_names):
    for name in attr_names:
        if name in el.attrib:
            del el.attrib[name]


def children(el: etree.Element) -> List[etree.Element]:
    return [child for child in el if isinstance(child.tag, str)]


def descendants(el: etree.Element) -> Tuple[etree.Element, ...]:
    """Depth-first, pre-order snapshot of el and every element below it.

    It's a snapshot so callers may restructure the tree while walking it.
    """
    return tuple(el.iter("*"))


def element_by_id(el: etree.Element, el_id: str) -> Optional[etree.Element]:
    root = el.getroottree().getroot()
    matches = root.xpath("//*[@id=$el_id]", el_id=el_id)
    return matches[0] if matches else None


def resolve_link(el: etree.Element, link: Link) -> Optional[etree.Element]:
    return element_by_id(el, link.id)


def style_value(el: etree.Element, name: str) -> Optional[str]:
    style = el.attrib.get("style")
    if not style:
        return None
    declarations = {}
    parse_css_declarations(style, declarations, {name})
    return declarations.get(name)


def inherited_attr(el: etree.Element, name: str, default: Any = None) -> Any:
    """Value of a presentation attribute, looking through el and its ancestors.

    A style declaration wins over the attribute on the same element.
    """
    while el is not None:
        raw = style_value(el, name)
        if raw is None:
            raw = el.attrib.get(name)
        if raw is not None and raw.strip() != "inherit":
            return parse_attr(name, raw)
        el = el.getparent()
    return default
