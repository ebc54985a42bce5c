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

import copy
import dataclasses
from lxml import etree  # pytype: disable=import-error
from svgshrink import svg_fold
from svgshrink.errors import ParseError
from svgshrink.svg_meta import Length, attrib_type, splitns, svgns, xlinkns
from svgshrink.svg_tree import (
    children,
    del_attr,
    descendants,
    format_attr,
    is_group,
    parse_attr,
    tag_name,
)


_XMLNS = "http://www.w3.org/XML/1998/namespace"


@dataclasses.dataclass(frozen=True)
class ParseOptions:
    remove_blank_text: bool = True
    keep_comments: bool = True


@dataclasses.dataclass(frozen=True)
class WriteOptions:
    pretty_print: bool = False
    xml_declaration: bool = False


def _replace_el(el, replacements):
    parent = el.getparent()
    idx = parent.index(el)
    parent.remove(el)
    for child_idx, child in enumerate(replacements):
        parent.insert(idx + child_idx, child)


def _round_attr(name: str, raw: str, ndigits: int):
    """Rounded text for a numeric attribute, None if there's nothing to do."""
    kind = attrib_type(name)
    if kind not in ("length", "number", "transform"):
        return None
    try:
        value = parse_attr(name, raw)
    except ValueError:
        return None  # not ours to fix; leave it exactly as written
    if kind == "length":
        value = Length(round(value.number, ndigits), value.unit)
    elif kind == "number":
        value = round(value, ndigits)
    else:
        value = value.round(ndigits)
        if value.is_identity():
            return ""
    return format_attr(value)


class SVG:

    svg_root: etree.Element

    def __init__(self, svg_root):
        self.svg_root = svg_root

    def _copy(self):
        return SVG(copy.deepcopy(self.svg_root))

    def remove_comments(self, inplace=False):
        if not inplace:
            return self._copy().remove_comments(inplace=True)

        for el in self.svg_root.xpath("//comment()"):
            if el.getparent() is not None:
                el.getparent().remove(el)

        return self

    def remove_title_meta_desc(self, inplace=False):
        if not inplace:
            return self._copy().remove_title_meta_desc(inplace=True)

        for el in descendants(self.svg_root):
            if tag_name(el) in ("title", "desc", "metadata"):
                el.getparent().remove(el)

        return self

    def remove_nonsvg_content(self, inplace=False):
        """Drops editor data: elements and attributes from foreign namespaces."""
        if not inplace:
            return self._copy().remove_nonsvg_content(inplace=True)

        good_ns = {None, svgns(), xlinkns(), _XMLNS}

        el_to_rm = []
        for el in descendants(self.svg_root):
            ns, _ = splitns(el.tag)
            if ns not in good_ns:
                el_to_rm.append(el)
                continue
            attr_to_rm = [attr for attr in el.attrib if splitns(attr)[0] not in good_ns]
            del_attr(el, *attr_to_rm)

        for el in el_to_rm:
            if el.getparent() is not None:
                el.getparent().remove(el)

        etree.cleanup_namespaces(self.svg_root)

        return self

    def apply_transform_to_shapes(self, inplace=False):
        if not inplace:
            return self._copy().apply_transform_to_shapes(inplace=True)

        svg_fold.apply_transform_to_shapes(self.svg_root)

        return self

    def ungroup_groups(self, inplace=False):
        """Removes groups that have no effect on rendering.

        A group with no attributes is replaced by its children; a group with
        no children (and no id anything could point at) is dropped.
        """
        if not inplace:
            return self._copy().ungroup_groups(inplace=True)

        # bottom-up so nested pointless groups collapse in one go
        for el in reversed(descendants(self.svg_root)):
            if not is_group(el) or el.getparent() is None:
                continue
            if len(el.attrib) == 0:
                _replace_el(el, list(el))
            elif not children(el) and "id" not in el.attrib:
                el.getparent().remove(el)

        return self

    def round_floats(self, ndigits: int, inplace=False):
        if not inplace:
            return self._copy().round_floats(ndigits, inplace=True)

        for el in descendants(self.svg_root):
            for name, raw in list(el.attrib.items()):
                rounded = _round_attr(name, raw, ndigits)
                if rounded is None or len(rounded) > len(raw):
                    continue
                if rounded:
                    el.attrib[name] = rounded
                else:
                    del el.attrib[name]

        return self

    def tobytes(self, write_options: WriteOptions = WriteOptions()) -> bytes:
        return etree.tostring(
            self.svg_root,
            encoding="utf-8",
            xml_declaration=write_options.xml_declaration,
            pretty_print=write_options.pretty_print,
        )

    def tostring(self, pretty_print=False) -> str:
        return self.tobytes(WriteOptions(pretty_print=pretty_print)).decode("utf-8")

    @classmethod
    def fromstring(cls, string, parse_options: ParseOptions = ParseOptions()):
        if isinstance(string, str):
            string = string.encode("utf-8")

        parser = etree.XMLParser(
            remove_blank_text=parse_options.remove_blank_text,
            remove_comments=not parse_options.keep_comments,
            resolve_entities=False,
        )
        try:
            tree = etree.fromstring(string, parser)
        except etree.XMLSyntaxError as e:
            raise ParseError(str(e)) from e
        if tag_name(tree) != "svg":
            raise ParseError(f"Root element is <{tag_name(tree)}>, not <svg>")
        return cls(tree)

    @classmethod
    def parse(cls, file_or_path, parse_options: ParseOptions = ParseOptions()):
        if hasattr(file_or_path, "read"):
            raw_svg = file_or_path.read()
        else:
            with open(file_or_path, "rb") as f:
                raw_svg = f.read()
        return cls.fromstring(raw_svg, parse_options)
