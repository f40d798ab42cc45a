from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, Generic, Iterator, List, TypeVar

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 50


class PageIterator(ABC, Generic[T]):
    """Iterator over pages of a remote collection.

    Whether another page exists is only known by fetching it, so there is no
    look-ahead: iteration ends when a fetch comes back empty.
    """

    def __init__(self, page_size: int = DEFAULT_PAGE_SIZE) -> None:
        self._page_size = DEFAULT_PAGE_SIZE
        self.page_size = page_size

    @property
    def page_size(self) -> int:
        return self._page_size

    @page_size.setter
    def page_size(self, size: int) -> None:
        if isinstance(size, bool) or not isinstance(size, int) or size <= 0:
            raise ValueError(f"Page size must be a positive integer, got {size!r}")
        self._page_size = size

    def __iter__(self) -> Iterator[T]:
        return self

    @abstractmethod
    def __next__(self) -> T: ...


class CallablePageIterator(PageIterator[List[T]]):
    """Page iterator backed by ``fetch(page_number, page_size) -> list``.

    Page numbers start at ``first_page``. A changed ``page_size`` applies to
    the next fetch.
    """

    def __init__(
        self,
        fetch: Callable[[int, int], List[T]],
        page_size: int = DEFAULT_PAGE_SIZE,
        first_page: int = 1,
    ) -> None:
        super().__init__(page_size)
        self._fetch = fetch
        self._page = first_page
        self._exhausted = False

    @property
    def current_page(self) -> int:
        """Number of the page the next call fetches."""
        return self._page

    def __next__(self) -> List[T]:
        if self._exhausted:
            raise StopIteration
        page = self._fetch(self._page, self._page_size)
        if not page:
            self._exhausted = True
            raise StopIteration
        self._page += 1
        return list(page)
