# blogpages/planner.py
"""
Turn a date-sorted list of posts into page descriptors.

- Detail page per post, linked to its neighbours in sort order
- Blog index pages (featured posts excluded): /blog, /blog/page/2, ...
- Category and author pages (featured posts included):
  /blog/category/<key>, /blog/category/<key>/page/2, ...

Pure computation: no I/O, no state between calls.
"""

from __future__ import annotations

import dataclasses
import datetime
import enum
import math
from typing import Callable, Iterable

from .utils import BLOG_PREFIX, page_url


class PageKind(str, enum.Enum):
    LIST = "list"
    CATEGORY = "category"
    AUTHOR = "author"
    DETAIL = "detail"


@dataclasses.dataclass(frozen=True)
class Document:
    """One post. ``slug`` is its absolute site path and must be unique."""

    slug: str
    date: datetime.date
    author: str
    categories: tuple[str, ...]
    featured: bool = False
    title: str = ""
    tags: tuple[str, ...] = ()
    body: str = ""
    source: str = ""

    def __post_init__(self):
        if not self.slug:
            raise ValueError("document slug must be non-empty")
        # categories are a set for grouping; keep first-seen display order
        object.__setattr__(self, "categories", tuple(dict.fromkeys(self.categories)))
        object.__setattr__(self, "tags", tuple(self.tags))
        object.__setattr__(self, "featured", self.featured is True)


@dataclasses.dataclass(frozen=True)
class PageDescriptor:
    path: str
    kind: PageKind
    context: dict

    def as_dict(self) -> dict:
        return {"path": self.path, "kind": self.kind.value, "context": dict(self.context)}


# -------------------------
# Helpers
# -------------------------
def count_pages(count: int, page_size: int) -> int:
    return math.ceil(count / page_size)

def group_counts(documents: Iterable[Document], key_func: Callable[[Document], Iterable[str]]) -> dict[str, int]:
    """Ordered key -> number of documents, keys in first-seen order."""
    counts: dict[str, int] = {}
    for doc in documents:
        for key in key_func(doc):
            counts[key] = counts.get(key, 0) + 1
    return counts

def _categories(doc: Document) -> tuple[str, ...]:
    return doc.categories

def _author(doc: Document) -> tuple[str, ...]:
    return (doc.author,) if doc.author else ()

def _paginate(kind: PageKind, base: str, num_pages: int, page_size: int, extra: dict | None = None) -> list[PageDescriptor]:
    pages = []
    for i in range(num_pages):
        context = {
            "limit": page_size,
            "skip": i * page_size,
            "current_page": i + 1,
            "num_pages": num_pages,
        }
        if extra:
            context.update(extra)
        pages.append(PageDescriptor(path=page_url(base, i + 1), kind=kind, context=context))
    return pages


# -------------------------
# Planning
# -------------------------
def detail_pages(documents: list[Document]) -> list[PageDescriptor]:
    pages = []
    for i, doc in enumerate(documents):
        prev_doc = documents[i - 1] if i > 0 else None
        next_doc = documents[i + 1] if i + 1 < len(documents) else None
        pages.append(
            PageDescriptor(
                path=doc.slug,
                kind=PageKind.DETAIL,
                context={
                    "slug": doc.slug,
                    "previous_slug": prev_doc.slug if prev_doc else None,
                    "next_slug": next_doc.slug if next_doc else None,
                },
            )
        )
    return pages

def list_pages(documents: list[Document], page_size: int, always_emit_index: bool = True) -> list[PageDescriptor]:
    unfeatured = [doc for doc in documents if not doc.featured]
    num_pages = count_pages(len(unfeatured), page_size)
    if num_pages == 0 and always_emit_index:
        num_pages = 1
    return _paginate(PageKind.LIST, BLOG_PREFIX, num_pages, page_size)

def group_pages(documents: list[Document], page_size: int, kind: PageKind) -> list[PageDescriptor]:
    if kind is PageKind.CATEGORY:
        counts, segment = group_counts(documents, _categories), "category"
    elif kind is PageKind.AUTHOR:
        counts, segment = group_counts(documents, _author), "author"
    else:
        raise ValueError(f"not a grouping kind: {kind}")

    all_keys = list(counts)
    pages = []
    for key, count in counts.items():
        pages.extend(
            _paginate(
                kind,
                f"{BLOG_PREFIX}/{segment}/{key}",
                count_pages(count, page_size),
                page_size,
                extra={"group_key": key, "all_keys": list(all_keys)},
            )
        )
    return pages

def plan(documents: Iterable[Document], page_size: int, *, always_emit_index: bool = True) -> list[PageDescriptor]:
    """
    Every page descriptor for one build.

    ``documents`` must already be sorted newest first. With
    ``always_emit_index`` an empty /blog page is emitted when there is no
    unfeatured post, so the blog root is always routed.
    """
    if page_size <= 0:
        raise ValueError(f"page_size must be positive, got {page_size}")
    documents = list(documents)
    return (
        detail_pages(documents)
        + list_pages(documents, page_size, always_emit_index)
        + group_pages(documents, page_size, PageKind.CATEGORY)
        + group_pages(documents, page_size, PageKind.AUTHOR)
    )

def duplicate_paths(pages: Iterable[PageDescriptor]) -> list[str]:
    """Paths planned more than once, in first-repeat order."""
    seen, dupes = set(), []
    for page in pages:
        if page.path in seen and page.path not in dupes:
            dupes.append(page.path)
        seen.add(page.path)
    return dupes
