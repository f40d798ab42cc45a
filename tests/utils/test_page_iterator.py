import pytest

from pykook.util.page_iterator import CallablePageIterator


def make_fetch(items, calls):
    def fetch(page: int, size: int):
        calls.append((page, size))
        start = (page - 1) * size
        return items[start:start + size]
    return fetch


def test_iterates_until_empty_page() -> None:
    calls = []
    iterator = CallablePageIterator(make_fetch(list(range(5)), calls), page_size=2)

    assert list(iterator) == [[0, 1], [2, 3], [4]]
    assert calls == [(1, 2), (2, 2), (3, 2), (4, 2)]
    assert next(iterator, None) is None
    assert len(calls) == 4


def test_page_size_change_applies_to_next_fetch() -> None:
    calls = []
    iterator = CallablePageIterator(make_fetch(list(range(10)), calls), page_size=2)

    assert next(iterator) == [0, 1]
    iterator.page_size = 5
    assert next(iterator) == [5, 6, 7, 8, 9]
    assert iterator.current_page == 3


@pytest.mark.parametrize("size", [0, -1, 1.5, True])
def test_page_size_must_be_positive_integer(size) -> None:
    with pytest.raises(ValueError):
        CallablePageIterator(lambda page, page_size: [], page_size=size)
