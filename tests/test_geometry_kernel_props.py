import pytest

hypothesis = pytest.importorskip("hypothesis")
from hypothesis import given, strategies as st

from geometry.kernel import Footprint, clamp, fits, overlaps

dims = st.floats(min_value=0.1, max_value=20, allow_nan=False, allow_infinity=False)
coords = st.floats(min_value=-30, max_value=30, allow_nan=False, allow_infinity=False)


@given(coords, dims, dims)
def test_clamped_center_keeps_item_inside(center, extent, room_extent):
    c = clamp(center, extent / 2.0, room_extent)
    if fits(extent / 2.0, room_extent):
        assert c - extent / 2.0 >= -1e-9
        assert c + extent / 2.0 <= room_extent + 1e-9
    else:
        assert c == room_extent / 2.0


@given(coords, coords, dims, dims, coords, coords, dims, dims)
def test_overlap_is_symmetric(x1, y1, w1, l1, x2, y2, w2, l2):
    a = Footprint("a", x1, y1, w1, l1)
    b = Footprint("b", x2, y2, w2, l2)
    assert overlaps(a, b) == overlaps(b, a)


@given(coords, coords, dims, dims)
def test_footprint_overlaps_itself(x, y, w, l):
    fp = Footprint("a", x, y, w, l)
    assert overlaps(fp, fp)
