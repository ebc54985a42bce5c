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

import pytest
from math import degrees, pi
from svgshrink.svg_transform import *


@pytest.mark.parametrize(
    "transform, expected_result",
    [
        # empty
        ("", Affine2D(1, 0, 0, 1, 0, 0)),
        # translate(tx)
        ("translate(-5)", Affine2D(1, 0, 0, 1, -5, 0)),
        # translate(tx ty)
        ("translate(3.5, -0.65)", Affine2D(1, 0, 0, 1, 3.5, -0.65)),
        # scale(sx)
        ("scale(2)", Affine2D(2, 0, 0, 2, 0, 0)),
        # scale(sx,sy)
        ("scale(-2 -3)", Affine2D(-2, 0, 0, -3, 0, 0)),
        # translate then scale, as written in a transform list
        ("translate(10 20) scale(2)", Affine2D(2, 0, 0, 2, 10, 20)),
        # rotate(angle)
        (f"rotate({degrees(pi / 4)})", Affine2D(0.707, 0.707, -0.707, 0.707, 0, 0)),
        # rotate(angle cx cy)
        (f"rotate({degrees(pi / 2)}, 5, 6)", Affine2D(0, 1, -1, 0, 11, 1)),
        # skewX(angle)
        (f"skewX({degrees(pi / 8)})", Affine2D(1, 0, 0.414, 1, 0, 0)),
        # skewY(angle)
        (f"skewY({degrees(pi / 8)})", Affine2D(1, 0.414, 0, 1, 0, 0)),
        (
            "matrix(2, 0, 0, 3, 1, 6) matrix(4, 3, 2, 1, 5, 6)",
            Affine2D(8, 9, 4, 3, 11, 24),
        ),
        # svg spec example
        (
            "translate(50 90),rotate(-45) translate(130,160)",
            Affine2D(0.707, -0.707, 0.707, 0.707, 255.061, 111.213),
        ),
        # no separators at all
        (
            "rotate(150)translate(0,6)rotate(66)",
            Affine2D(a=-0.809, b=-0.588, c=0.588, d=-0.809, e=-2.999, f=-5.196),
        ),
        ("rotate (180)\ttranslate(0 6)\n\t", Affine2D(-1, 0, 0, -1, 0, -6)),
        ("matrix( -1,0,0,1,3717.75,0 )", Affine2D(-1, 0, 0, 1, 3717.75, 0)),
    ],
)
def test_parse_svg_transform(transform, expected_result):
    actual = parse_svg_transform(transform)
    print(f"A: {actual}")
    print(f"E: {expected_result}")

    assert actual == pytest.approx(expected_result, rel=1e-3, abs=1e-9)


@pytest.mark.parametrize(
    "transform",
    [
        "translate(10 20) foo(1)",
        "scale()",
        "rotate(1 2)",
        "matrix(1 2 3)",
        "translate(a)",
        "translate(1 2",
        "bogus",
        # names are case-sensitive; renderers drop these
        "TRANSLATE(1)",
        "Scale(2)",
        "skewx(10)",
        # non-finite numbers
        "translate(nan)",
        "scale(inf)",
        "matrix(1 0 0 1 -inf 0)",
    ],
)
def test_parse_svg_transform_rejects_garbage(transform):
    with pytest.raises(ValueError):
        parse_svg_transform(transform)


@pytest.mark.parametrize(
    "affine, expected",
    [
        (Affine2D(1, 0, 0, 1, 10, 20), "translate(10 20)"),
        (Affine2D(1, 0, 0, 1, 10, 0), "translate(10)"),
        (Affine2D(2, 0, 0, 2, 0, 0), "scale(2)"),
        (Affine2D(2, 0, 0, 3, 0, 0), "scale(2 3)"),
        (Affine2D(2, 0, 0, 2, 10, 20), "matrix(2 0 0 2 10 20)"),
        (Affine2D(0, 1, -1, 0, 0, 0), "matrix(0 1 -1 0 0 0)"),
        (Affine2D(0.5, 0, 0, 0.5, 0, 0), "scale(0.5)"),
    ],
)
def test_tostring(affine, expected):
    assert affine.tostring() == expected
    assert Affine2D.fromstring(expected).almost_equals(affine)


def test_compose_applies_inner_then_outer():
    outer = Affine2D.fromstring("translate(10 20) scale(2)")
    inner = Affine2D.fromstring("scale(2)")
    composed = Affine2D.compose(outer, inner)

    assert composed == Affine2D(4, 0, 0, 4, 10, 20)
    pt = (3, -1)
    assert composed.map_point(pt) == outer.map_point(inner.map_point(pt))


def test_compose_matches_nested_transform_list():
    outer = Affine2D.fromstring("translate(5 7)")
    inner = Affine2D.fromstring("scale(3)")
    assert Affine2D.compose(outer, inner).almost_equals(
        Affine2D.fromstring("translate(5 7) scale(3)")
    )


def test_compose_ltr():
    scale = Affine2D.identity().scale(2)
    translate = Affine2D.identity().translate(1, 1)
    # scale first, then translate
    assert Affine2D.compose_ltr((scale, translate)) == Affine2D(2, 0, 0, 2, 1, 1)


class TestAffine2D:
    def test_map_point(self):
        t = Affine2D(2, 0, 0, 1, 10, 20)
        p = t.map_point((-3, 4))
        assert isinstance(p, Point)
        assert p == Point(4, 24)

    @pytest.mark.parametrize(
        "affine, expected",
        [
            (Affine2D(1, 0, 0, 1, 0, 0), True),
            (Affine2D(1 + 1e-12, 0, 0, 1, 0, 1e-12), True),
            (Affine2D(1, 0, 0, 1, 1e-6, 0), False),
        ],
    )
    def test_is_identity(self, affine, expected):
        assert affine.is_identity() == expected

    @pytest.mark.parametrize(
        "transform, axis_aligned",
        [
            ("translate(1 2) scale(3 4)", True),
            ("scale(-1 1)", True),
            ("rotate(180)", True),
            ("rotate(30)", False),
            ("skewX(10)", False),
        ],
    )
    def test_is_axis_aligned(self, transform, axis_aligned):
        assert Affine2D.fromstring(transform).is_axis_aligned() == axis_aligned

    def test_getscale(self):
        assert Affine2D.fromstring("translate(1 2) scale(3 4)").getscale() == (3, 4)

    def test_getscale_of_rotation_is_ambiguous(self):
        with pytest.raises(ValueError):
            Affine2D.fromstring("rotate(30)").getscale()

    def test_gettranslate(self):
        assert Affine2D.fromstring("translate(1 2) scale(3 4)").gettranslate() == (1, 2)

    @pytest.mark.parametrize(
        "affine, has_scale, proportional",
        [
            (Affine2D(1, 0, 0, 1, 5, 5), False, True),
            (Affine2D(2, 0, 0, 2, 0, 0), True, True),
            (Affine2D(2, 0, 0, 3, 0, 0), True, False),
            (Affine2D(1, 0, 0, 1 + 1e-12, 0, 0), False, True),
        ],
    )
    def test_scale_queries(self, affine, has_scale, proportional):
        assert affine.has_scale() == has_scale
        assert affine.has_proportional_scale() == proportional

    def test_has_translate(self):
        assert Affine2D(1, 0, 0, 1, 0, 3).has_translate()
        assert not Affine2D(2, 0, 0, 2, 0, 0).has_translate()

    @pytest.mark.parametrize(
        "affine, degenerate",
        [
            (Affine2D(0, 0, 0, 0, 0, 0), True),
            (Affine2D(1, 0, 0, 0, 5, 5), True),
            (Affine2D(1, 2, 2, 4, 0, 0), True),
            (Affine2D(1, 0, 0, 1, 0, 0), False),
        ],
    )
    def test_is_degenerate(self, affine, degenerate):
        assert affine.is_degenerate() == degenerate

    def test_round(self):
        assert Affine2D(1.00000001, 0, 0, 1, 0.1234567, 0).round(6) == Affine2D(
            1, 0, 0, 1, 0.123457, 0
        )
