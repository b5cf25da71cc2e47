import pytest

from lofpdf_lib.extent import Cursor, Extent, PageRange


def test_cursor_orders_by_page_then_offset():
    assert Cursor(2, 0.0) > Cursor(1, 500.0)
    assert Cursor(1, 10.0) < Cursor(1, 20.0)
    assert Cursor(3, 5.0).is_after(Cursor(3, 4.0))
    assert not Cursor(3, 5.0).is_after(Cursor(3, 5.0 + 1e-6))


def test_extent_rejects_end_before_start():
    with pytest.raises(ValueError):
        Extent(Cursor(2, 0.0), Cursor(1, 100.0))


def test_extent_defaults_to_empty_span():
    extent = Extent(Cursor(4, 12.0))
    assert extent.end == Cursor(4, 12.0)
    assert extent.page_count == 1


def test_widen_moves_end_forward_only():
    extent = Extent(Cursor(1, 0.0), Cursor(1, 50.0))
    extent.widen_to(Cursor(2, 700.0))
    assert extent.page_range == PageRange(1, 2)

    with pytest.raises(ValueError):
        extent.widen_to(Cursor(1, 10.0))
    assert extent.end == Cursor(2, 700.0)


def test_each_page_flags_the_first_page():
    extent = Extent(Cursor(3, 100.0), Cursor(5, 20.0))
    assert list(extent.each_page()) == [(3, True), (4, False), (5, False)]


def test_extent_contains_cursor():
    extent = Extent(Cursor(1, 100.0), Cursor(2, 50.0))
    assert extent.contains(Cursor(1, 400.0))
    assert extent.contains(Cursor(2, 50.0))
    assert not extent.contains(Cursor(2, 60.0))
    assert not extent.contains(Cursor(1, 50.0))


def test_page_range_is_inclusive():
    page_range = PageRange(2, 4)
    assert list(page_range) == [2, 3, 4]
    assert len(page_range) == 3
    assert 4 in page_range and 5 not in page_range
    assert PageRange(2, 3).within(page_range)
    assert not PageRange(1, 3).within(page_range)
    assert str(PageRange(2, 2)) == "2..2"
