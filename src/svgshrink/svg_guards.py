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

"""Preconditions for folding a transform into an element.

Each guard answers False rather than raising; a node that fails is simply
left alone.
"""

from absl import logging
from lxml import etree  # pytype: disable=import-error
from svgshrink.svg_meta import Link, attrib_type, xlinkns
from svgshrink.svg_tree import (
    element_by_id,
    get_attr,
    inherited_attr,
    resolve_link,
    style_value,
    tag_name,
)


# Attributes whose effect depends on the coordinate system they're in
_TRANSFORM_SENSITIVE_ATTRS = ("clip-path", "mask", "filter", "vector-effect")

# A style declaration of these would override whatever we write as attributes
_STYLE_CONFLICTS = ("stroke-width", "transform")

_HREF_ATTRS = ("href", f"{{{xlinkns()}}}href")


def _skip(el: etree.Element, reason: str) -> bool:
    logging.debug("Not folding <%s>: %s", tag_name(el), reason)
    return False


def has_valid_transform(el: etree.Element, proportional: bool = False) -> bool:
    """True if el has no transform, or one made of only scale and translate.

    With proportional=True the scale must also be uniform and positive.
    """
    try:
        transform = get_attr(el, "transform")
    except ValueError as e:
        return _skip(el, str(e))
    if transform is None:
        return True
    if not transform.is_axis_aligned():
        return _skip(el, "transform has rotation or skew")
    if transform.is_degenerate():
        return _skip(el, "transform is degenerate")
    if proportional:
        sx, sy = transform.getscale()
        if not transform.has_proportional_scale() or sx <= 0:
            return _skip(el, f"scale ({sx}, {sy}) is not uniform and positive")
    return True


def _href_target(el: etree.Element):
    for attr_name in _HREF_ATTRS:
        href = el.attrib.get(attr_name, "").strip()
        if href.startswith("#"):
            return element_by_id(el, href[1:])
    return None


def _paint_server_chain(server: etree.Element):
    """Yield server, then each template it inherits attributes from via href."""
    seen = set()
    while server is not None and server.attrib.get("id") not in seen:
        seen.add(server.attrib.get("id"))
        yield server
        server = _href_target(server)


def _links_to_user_space_paint(el: etree.Element, attr_name: str) -> bool:
    paint = inherited_attr(el, attr_name)
    if not isinstance(paint, Link):
        return False
    units = None
    for server in _paint_server_chain(resolve_link(el, paint)):
        if tag_name(server) == "pattern":
            return True
        # nearest declaration wins
        if units is None:
            units = get_attr(server, "gradientUnits")
    return units == "userSpaceOnUse"


def _own_value(el: etree.Element, name: str):
    value = style_value(el, name)
    if value is None:
        value = el.attrib.get(name)
    return value.strip() if value is not None else None


def has_valid_attrs(el: etree.Element) -> bool:
    """True if el carries nothing whose rendering depends on its coordinate system."""
    try:
        for attr_name in _TRANSFORM_SENSITIVE_ATTRS:
            if _own_value(el, attr_name) not in (None, "none"):
                return _skip(el, f"has {attr_name}")
        for attr_name in _STYLE_CONFLICTS:
            if style_value(el, attr_name) is not None:
                return _skip(el, f"style sets {attr_name}")
        for attr_name in ("fill", "stroke"):
            if _links_to_user_space_paint(el, attr_name):
                return _skip(el, f"{attr_name} is painted in user space")
    except ValueError as e:
        return _skip(el, str(e))
    return True


def has_valid_coords(el: etree.Element) -> bool:
    """True if every length on el is a plain number, no units."""
    for attr_name in el.attrib:
        if attrib_type(attr_name) != "length":
            continue
        try:
            value = get_attr(el, attr_name)
        except ValueError as e:
            return _skip(el, str(e))
        if value.has_unit():
            return _skip(el, f"{attr_name} has unit {value.unit}")
    return True
