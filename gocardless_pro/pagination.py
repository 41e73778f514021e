"""Cursor pagination over list endpoints.

The iterator is FRESH until its first page arrives, then walks forward with the
``after`` cursor from each page's ``meta.cursors`` until the server returns an
empty cursor. Once exhausted, ``value()`` hands back the cached last page
without touching the network. Instances carry mutable cursor state and must not
be shared between threads.
"""
from __future__ import annotations

from typing import Any, Callable, Dict, Generic, Iterator, List, Optional, Sequence, TypeVar

from .encoding import Params, merge_params
from .options import RequestOption

PageT = TypeVar("PageT")

PageFetcher = Callable[[Dict[str, Any], Sequence[RequestOption]], PageT]


class ListPagingIterator(Generic[PageT]):
    def __init__(
        self,
        fetch_page: PageFetcher,
        params: Params = None,
        options: Sequence[RequestOption] = (),
    ) -> None:
        self._fetch_page = fetch_page
        self._params = merge_params(params)
        self._options = tuple(options)
        self.cursor = ""
        self.response: Optional[PageT] = None

    def has_next(self) -> bool:
        return self.cursor != "" or self.response is None

    def value(self) -> Optional[PageT]:
        if not self.has_next():
            return self.response
        page_params = merge_params(self._params, after=self.cursor or None)
        page = self._fetch_page(page_params, self._options)
        self.response, self.cursor = page, _after_cursor(page)
        return page

    def __iter__(self) -> Iterator[PageT]:
        while self.has_next():
            page = self.value()
            if page is not None:
                yield page

    def items(self) -> Iterator[Any]:
        for page in self:
            records: List[Any] = list(getattr(page, "items", []) or [])
            yield from records


def _after_cursor(page: Any) -> str:
    meta = getattr(page, "meta", None)
    cursors = getattr(meta, "cursors", None)
    return getattr(cursors, "after", None) or ""
