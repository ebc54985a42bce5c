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

"""Fold transforms into the geometry of basic shapes.

Runs in two stages over the whole tree:

1. Groups whose children are all foldable shapes hand their transform down
   to those children.
2. Each rect, circle, ellipse or line with a scale/translate transform has it
   merged into its own coordinates and the transform dropped.

Nodes that don't qualify are left exactly as they were.
"""

from absl import logging
from lxml import etree  # pytype: disable=import-error
from typing import Callable, Dict, Mapping
from svgshrink.svg_guards import (
    has_valid_attrs,
    has_valid_coords,
    has_valid_transform,
)
from svgshrink.svg_meta import Length, attrib_default, attrib_type
from svgshrink.svg_transform import Affine2D
from svgshrink.svg_tree import (
    children,
    del_attr,
    descendants,
    get_attr,
    inherited_attr,
    is_foldable_shape,
    is_group,
    set_attr,
    tag_name,
)


FoldFn = Callable[[Mapping[str, float], Affine2D], Dict[str, float]]


def _map_coords(
    lengths: Mapping[str, float], transform: Affine2D, x_name: str, y_name: str
) -> Dict[str, float]:
    # absent coordinates are 0 and get written out explicitly
    x, y = transform.map_point((lengths.get(x_name, 0.0), lengths.get(y_name, 0.0)))
    return {x_name: x, y_name: y}


def _scale_lengths(
    lengths: Mapping[str, float], transform: Affine2D, *names
) -> Dict[str, float]:
    if not transform.has_scale():
        return {}
    sx, _ = transform.getscale()
    return {name: lengths[name] * sx for name in names if name in lengths}


def fold_rect(lengths, transform):
    return {
        **_map_coords(lengths, transform, "x", "y"),
        **_scale_lengths(lengths, transform, "width", "height", "rx", "ry"),
    }


def fold_circle(lengths, transform):
    return {
        **_map_coords(lengths, transform, "cx", "cy"),
        **_scale_lengths(lengths, transform, "r"),
    }


def fold_ellipse(lengths, transform):
    return {
        **_map_coords(lengths, transform, "cx", "cy"),
        **_scale_lengths(lengths, transform, "rx", "ry"),
    }


def fold_line(lengths, transform):
    return {
        **_map_coords(lengths, transform, "x1", "y1"),
        **_map_coords(lengths, transform, "x2", "y2"),
    }


_SHAPE_FOLDS: Mapping[str, FoldFn] = {
    "rect": fold_rect,
    "circle": fold_circle,
    "ellipse": fold_ellipse,
    "line": fold_line,
}


def _lengths(el: etree.Element) -> Dict[str, float]:
    # only called once has_valid_coords said every length is unit-less
    return {
        name: get_attr(el, name).number
        for name in el.attrib
        if attrib_type(name) == "length"
    }


def _effective_stroke_width(el: etree.Element):
    """The stroke width el renders with, or None if we can't scale it safely."""
    try:
        stroke_width = inherited_attr(
            el, "stroke-width", attrib_default("stroke-width")
        )
        dasharray = inherited_attr(el, "stroke-dasharray", "none")
    except ValueError as e:
        logging.debug("Not folding <%s>: %s", tag_name(el), e)
        return None
    if stroke_width.has_unit():
        logging.debug("Not folding <%s>: stroke-width has a unit", tag_name(el))
        return None
    if dasharray.strip() != "none":
        logging.debug("Not folding <%s>: dashes would need scaling", tag_name(el))
        return None
    return stroke_width


def _fold_shape(el: etree.Element, fold_fn: FoldFn) -> bool:
    if not (
        has_valid_transform(el, proportional=True)
        and has_valid_attrs(el)
        and has_valid_coords(el)
    ):
        return False

    transform = get_attr(el, "transform")
    stroke_width = None
    if transform.has_scale():
        stroke_width = _effective_stroke_width(el)
        if stroke_width is None:
            return False

    for name, value in fold_fn(_lengths(el), transform).items():
        set_attr(el, name, Length(value))
    del_attr(el, "transform")

    if stroke_width is not None:
        # x-scale only; proportional scale means sx == sy anyway
        sx, _ = transform.getscale()
        set_attr(el, "stroke-width", Length(stroke_width.number * sx))

    logging.debug("Folded %s into <%s>", transform.tostring(), tag_name(el))
    return True


def _push_down_group_transform(group: etree.Element) -> bool:
    if not (has_valid_transform(group) and has_valid_attrs(group)):
        return False

    # all or nothing; a half-emptied group would need the transform we dropped
    kids = children(group)
    if not all(
        is_foldable_shape(child)
        and has_valid_transform(child)
        and has_valid_attrs(child)
        and has_valid_coords(child)
        for child in kids
    ):
        return False

    group_transform = get_attr(group, "transform")
    for child in kids:
        child_transform = get_attr(child, "transform")
        if child_transform is None:
            set_attr(child, "transform", group_transform)
        else:
            set_attr(
                child,
                "transform",
                Affine2D.compose(group_transform, child_transform),
            )
    del_attr(group, "transform")
    # the now attribute-less group is for ungroup_groups to remove
    return True


def apply_transform_to_shapes(root: etree.Element) -> int:
    """Fold transforms below root into shape geometry, in place.

    Returns the number of transforms eliminated, counting group push-downs.
    """
    folds = 0
    for el in descendants(root):
        if is_group(el) and "transform" in el.attrib:
            folds += _push_down_group_transform(el)

    # fresh snapshot: stage one may have just handed transforms to shapes
    for el in descendants(root):
        if "transform" not in el.attrib:
            continue
        fold_fn = _SHAPE_FOLDS.get(tag_name(el))
        if fold_fn is not None:
            folds += _fold_shape(el, fold_fn)
    return folds
