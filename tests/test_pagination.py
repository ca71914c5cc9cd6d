"""
Tests for client-side gallery pagination.
"""

from stream_avatar.pagination import page_count, paginate


def test_slices_requested_page():
    page = paginate(list(range(25)), 2, 10)
    assert page.items == list(range(10, 20))
    assert page.page == 2
    assert page.page_count == 3
    assert page.total == 25
    assert page.has_prev and page.has_next


def test_last_page_is_partial():
    page = paginate(list(range(25)), 3, 10)
    assert page.items == [20, 21, 22, 23, 24]
    assert not page.has_next


def test_out_of_range_pages_are_clamped():
    assert paginate(list(range(25)), 99, 10).page == 3
    assert paginate(list(range(25)), 0, 10).page == 1
    assert paginate(list(range(25)), -4, 10).items == list(range(10))


def test_empty_list_has_one_page():
    page = paginate([], 1, 10)
    assert page.items == []
    assert page.page_count == 1
    assert not page.has_prev and not page.has_next


def test_page_count():
    assert page_count(0, 10) == 1
    assert page_count(10, 10) == 1
    assert page_count(11, 10) == 2
    assert page_count(50, 10) == 5
