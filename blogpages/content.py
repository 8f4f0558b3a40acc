# blogpages/content.py
"""
Read markdown posts with YAML front matter into Documents.

Front matter:
  title, date (required), author (required), category (required; string or
  list, "categories" also accepted), tags, featured (bool), slug (overrides
  the dated URL), draft (skipped when true)

Problems are collected per file instead of raised, so a build reports every
broken post at once. require_documents() turns a non-empty error list into
UpstreamQueryFailure.
"""

from __future__ import annotations

import dataclasses
import datetime
from pathlib import Path

import frontmatter
import yaml

from .planner import Document
from .utils import blog_url, clean_title, file_path_slug, unsafe_segments

def log(*args): print("[content]", *args, flush=True)

MD_EXTS = {".md", ".markdown"}

_TRUE = {"true", "yes", "on", "1"}
_FALSE = {"false", "no", "off", "0", ""}


class UpstreamQueryFailure(RuntimeError):
    """Loading posts reported errors; the build must stop."""

    def __init__(self, errors):
        self.errors = list(errors)
        super().__init__(f"{len(self.errors)} content error(s): " + "; ".join(self.errors))


@dataclasses.dataclass
class QueryResult:
    documents: list[Document] = dataclasses.field(default_factory=list)
    errors: list[str] = dataclasses.field(default_factory=list)


# -------------------------
# Field coercion
# -------------------------
def parse_date(value) -> datetime.date:
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    if isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            return datetime.datetime.fromisoformat(text).date()
        except ValueError:
            pass
        try:
            return datetime.date.fromisoformat(text[:10])
        except ValueError:
            pass
    raise ValueError(f"invalid date: {value!r}")

def parse_bool(value) -> bool:
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ValueError(f"invalid boolean: {value!r}")

def as_string_list(value) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)):
        raise ValueError(f"expected a string or list, got {type(value).__name__}")
    return [clean_title(str(v)) for v in value if clean_title(str(v))]

def check_key(value: str, field: str) -> str:
    """Category and author names become one URL segment each."""
    if "/" in value or unsafe_segments(value):
        raise ValueError(f"invalid {field}: {value!r}")
    return value


# -------------------------
# Loading
# -------------------------
def iter_markdown_files(content_dir: Path):
    return sorted(p for p in content_dir.rglob("*") if p.is_file() and p.suffix.lower() in MD_EXTS)

def document_from_post(post: frontmatter.Post, relative_path: Path) -> Document | None:
    """Build a Document from parsed front matter; None for drafts."""
    meta = post.metadata
    if parse_bool(meta.get("draft")):
        return None

    if "date" not in meta:
        raise ValueError("missing date")
    date = parse_date(meta["date"])

    author = clean_title(str(meta.get("author") or ""))
    if not author:
        raise ValueError("missing author")
    check_key(author, "author")

    categories = as_string_list(meta.get("category", meta.get("categories")))
    if not categories:
        raise ValueError("missing category")
    for cat in categories:
        check_key(cat, "category")

    slug = clean_title(str(meta.get("slug") or ""))
    if slug:
        if unsafe_segments(slug):
            raise ValueError(f"invalid slug: {slug!r}")
        slug = "/" + slug.strip("/")
    else:
        slug = blog_url(date, file_path_slug(relative_path))

    return Document(
        slug=slug,
        date=date,
        author=author,
        categories=tuple(categories),
        featured=parse_bool(meta.get("featured")),
        title=clean_title(str(meta.get("title") or "")) or "Untitled",
        tags=tuple(as_string_list(meta.get("tags"))),
        body=post.content,
        source=relative_path.as_posix(),
    )

def sort_documents(documents) -> list[Document]:
    """Newest first; same-day posts by slug."""
    by_slug = sorted(documents, key=lambda d: d.slug)
    return sorted(by_slug, key=lambda d: d.date, reverse=True)

def load_documents(content_dir) -> QueryResult:
    content_dir = Path(content_dir)
    result = QueryResult()
    if not content_dir.is_dir():
        result.errors.append(f"{content_dir}: content directory not found")
        return result

    seen = {}
    docs = []
    for path in iter_markdown_files(content_dir):
        rel = path.relative_to(content_dir)
        try:
            post = frontmatter.load(str(path))
            doc = document_from_post(post, rel)
        except (OSError, yaml.YAMLError, ValueError) as e:
            result.errors.append(f"{rel.as_posix()}: {e}")
            continue
        if doc is None:
            continue
        if doc.slug in seen:
            result.errors.append(f"{rel.as_posix()}: duplicate slug {doc.slug} (also {seen[doc.slug]})")
            continue
        seen[doc.slug] = rel.as_posix()
        docs.append(doc)

    result.documents = sort_documents(docs)
    return result

def require_documents(result: QueryResult) -> list[Document]:
    if result.errors:
        for err in result.errors:
            log(f"ERROR {err}")
        raise UpstreamQueryFailure(result.errors)
    return result.documents
