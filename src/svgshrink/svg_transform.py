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

"""Helpers for https://www.w3.org/TR/SVG11/coords.html#TransformAttribute.

Everything here is value level; nothing touches the tree.
"""
from functools import reduce
from math import cos, isfinite, sin, radians, tan
import re
from typing import NamedTuple, Sequence, Tuple
from svgshrink.svg_meta import ntos


# Absolute, not ULP based: values end up as decimal text
DEFAULT_ALMOST_EQUAL_TOLERANCE = 1e-9


def almost_equal(c1, c2, tolerance=DEFAULT_ALMOST_EQUAL_TOLERANCE) -> bool:
    return abs(c1 - c2) <= tolerance


class Point(NamedTuple):
    x: float = 0
    y: float = 0


# 2D affine transform.
#
# View as vector of 6 values or matrix:
#
# a   c   e
# b   d   f
class Affine2D(NamedTuple):
    a: float
    b: float
    c: float
    d: float
    e: float
    f: float

    @staticmethod
    def identity():
        return Affine2D._identity

    @staticmethod
    def fromstring(raw_transform):
        return parse_svg_transform(raw_transform)

    def tostring(self):
        sx, sy = self.a, self.d
        tx, ty = self.gettranslate()
        if self.is_axis_aligned():
            if almost_equal(sx, 1) and almost_equal(sy, 1):
                if ty == 0:
                    return f"translate({ntos(tx)})"
                return f"translate({ntos(tx)} {ntos(ty)})"
            if tx == 0 and ty == 0:
                if sx == sy:
                    return f"scale({ntos(sx)})"
                return f"scale({ntos(sx)} {ntos(sy)})"
        return f'matrix({" ".join(ntos(float(v)) for v in self)})'

    @staticmethod
    def product(first: "Affine2D", second: "Affine2D") -> "Affine2D":
        """Returns the product of first x second.

        Mapping a point by the result maps it by first, then by second.
        """
        return Affine2D(
            first.a * second.a + first.b * second.c,
            first.a * second.b + first.b * second.d,
            first.c * second.a + first.d * second.c,
            first.c * second.b + first.d * second.d,
            second.a * first.e + second.c * first.f + second.e,
            second.b * first.e + second.d * first.f + second.f,
        )

    @staticmethod
    def compose(outer: "Affine2D", inner: "Affine2D") -> "Affine2D":
        """Returns outer · inner: apply inner, then outer.

        This is what nesting does, e.g. a group transform (outer) around a
        child's own transform (inner).
        """
        return Affine2D.product(inner, outer)

    def matrix(self, a, b, c, d, e, f):
        return Affine2D.product(Affine2D(a, b, c, d, e, f), self)

    # https://www.w3.org/TR/SVG11/coords.html#TranslationDefined
    def translate(self, tx, ty=0):
        if (0, 0) == (tx, ty):
            return self
        return self.matrix(1, 0, 0, 1, tx, ty)

    # https://www.w3.org/TR/SVG11/coords.html#ScalingDefined
    def scale(self, sx, sy=None):
        if sy is None:
            sy = sx
        return self.matrix(sx, 0, 0, sy, 0, 0)

    # https://www.w3.org/TR/SVG11/coords.html#RotationDefined
    # Note that rotation here is in radians
    def rotate(self, a, cx=0.0, cy=0.0):
        return (
            self.translate(cx, cy)
            .matrix(cos(a), sin(a), -sin(a), cos(a), 0, 0)
            .translate(-cx, -cy)
        )

    # https://www.w3.org/TR/SVG11/coords.html#SkewXDefined
    def skewx(self, a):
        return self.matrix(1, 0, tan(a), 1, 0, 0)

    # https://www.w3.org/TR/SVG11/coords.html#SkewYDefined
    def skewy(self, a):
        return self.matrix(1, tan(a), 0, 1, 0, 0)

    def determinant(self) -> float:
        return self.a * self.d - self.b * self.c

    def is_degenerate(self) -> bool:
        """Return True if [a b c d] matrix is degenerate (determinant is 0)."""
        return almost_equal(self.determinant(), 0)

    def is_identity(self) -> bool:
        return self.almost_equals(Affine2D.identity())

    def is_axis_aligned(self) -> bool:
        """True if there is no rotation or skew, only scale and translate."""
        return almost_equal(self.b, 0) and almost_equal(self.c, 0)

    def has_scale(self) -> bool:
        return not (almost_equal(self.a, 1) and almost_equal(self.d, 1))

    def has_proportional_scale(self) -> bool:
        return almost_equal(self.a, self.d)

    def has_translate(self) -> bool:
        return not (almost_equal(self.e, 0) and almost_equal(self.f, 0))

    def getscale(self) -> Tuple[float, float]:
        if not self.is_axis_aligned():
            raise ValueError(f"{self} has rotation or skew, scale is ambiguous")
        return (self.a, self.d)

    def gettranslate(self) -> Tuple[float, float]:
        return (self.e, self.f)

    def map_point(self, pt: Tuple[float, float]) -> Point:
        """Return Point (x, y) multiplied by Affine2D."""
        x, y = pt
        return Point(self.a * x + self.c * y + self.e, self.b * x + self.d * y + self.f)

    @classmethod
    def compose_ltr(cls, affines: Sequence["Affine2D"]) -> "Affine2D":
        """Creates merged transform equivalent to applying transforms left-to-right order.

        Affines apply like functions - f(g(x)) - so we merge them in reverse order.
        """
        return reduce(
            lambda acc, a: cls.product(a, acc), reversed(affines), cls.identity()
        )

    def round(self, digits: int) -> "Affine2D":
        return Affine2D(*(round(v, digits) for v in self))

    def almost_equals(
        self, other: "Affine2D", tolerance=DEFAULT_ALMOST_EQUAL_TOLERANCE
    ):
        return all(almost_equal(v1, v2, tolerance) for v1, v2 in zip(self, other))


Affine2D._identity = Affine2D(1, 0, 0, 1, 0, 0)


# op as written: (Affine2D method, allowed arg counts). Names are case-sensitive.
_TRANSFORM_ARGS = {
    "matrix": ("matrix", (6,)),
    "translate": ("translate", (1, 2)),
    "scale": ("scale", (1, 2)),
    "rotate": ("rotate", (1, 3)),
    "skewX": ("skewx", (1,)),
    "skewY": ("skewy", (1,)),
}

_TRANSFORM_RE = re.compile(
    r"\s*(matrix|translate|scale|rotate|skewX|skewY)\s*\(([^)]*)\)\s*,?"
)


def parse_svg_transform(raw_transform: str) -> Affine2D:
    """Parse a transform list, raising ValueError if any of it is not understood."""
    transform = Affine2D.identity()

    pos = 0
    raw_transform = raw_transform.strip()
    while pos < len(raw_transform):
        match = _TRANSFORM_RE.match(raw_transform, pos)
        if not match:
            raise ValueError(f"Unable to parse transform {raw_transform!r}")
        pos = match.end()

        op = match.group(1)
        method, arg_counts = _TRANSFORM_ARGS[op]
        raw_args = match.group(2).strip()
        args = [float(p) for p in re.split(r"\s*[,\s]\s*", raw_args)] if raw_args else []
        if len(args) not in arg_counts:
            raise ValueError(f"{op} does not take {len(args)} args: {raw_transform!r}")
        if not all(isfinite(a) for a in args):
            raise ValueError(f"Non-finite {op} args: {raw_transform!r}")
        if method in ("rotate", "skewx", "skewy"):
            args[0] = radians(args[0])
        transform = getattr(transform, method)(*args)

    return transform
