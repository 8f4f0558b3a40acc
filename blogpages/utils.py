# blogpages/utils.py
import datetime
import re
from pathlib import Path, PurePosixPath

from slugify import slugify

BLOG_PREFIX = "/blog"

# -------------------------
# String / slug helpers
# -------------------------
def clean_title(title: str) -> str:
    """Normalize whitespace, tolerate None."""
    return re.sub(r"\s+", " ", (title or "")).strip()

def safe_segment(s: str) -> str:
    """Slugify one URL path segment; empty input stays empty."""
    return slugify(s or "")

# -------------------------
# File path -> URL
# -------------------------
_MD_SUFFIXES = {".md", ".markdown"}

def file_path_slug(relative_path) -> str:
    """
    Page path for a content file, relative to the content root.

    Examples:
      posts/hello-world.md       -> /posts/hello-world/
      blog/my-trip/index.md      -> /blog/my-trip/
      index.md                   -> /
    """
    p = PurePosixPath(Path(relative_path).as_posix())
    if p.suffix.lower() in _MD_SUFFIXES:
        p = p.with_suffix("")
    parts = [safe_segment(seg) for seg in p.parts]
    if parts and parts[-1] == "index":
        parts = parts[:-1]
    parts = [seg for seg in parts if seg]
    if not parts:
        return "/"
    return "/" + "/".join(parts) + "/"

def blog_url(date: datetime.date, file_slug: str) -> str:
    """
    Canonical post URL: /blog/YYYY/MM/DD + the file slug with the first
    "/blog/" removed and the trailing "/" dropped.

      (2019-01-05, /blog/hello/) -> /blog/2019/01/05/hello
      (2019-01-05, /misc/note/)  -> /blog/2019/01/05/misc/note
    """
    rest = (file_slug or "").replace(BLOG_PREFIX + "/", "/", 1).rstrip("/")
    # deliberate: always separate day and remainder with "/" (plain
    # concatenation would give .../05hello)
    if rest and not rest.startswith("/"):
        rest = "/" + rest
    return f"{BLOG_PREFIX}/{date.year:04d}/{date.month:02d}/{date.day:02d}{rest}"

def page_url(base: str, page_num: int) -> str:
    """1 -> base, 2 -> base/page/2, ..."""
    return base if page_num <= 1 else f"{base}/page/{page_num}"

# -------------------------
# Output helpers
# -------------------------
def output_file_for(output_dir: Path, site_path: str) -> Path:
    """/blog/page/2 -> <output_dir>/blog/page/2/index.html; ValueError outside output_dir."""
    rel = site_path.strip("/")
    folder = output_dir / rel if rel else output_dir
    root = output_dir.resolve()
    target = folder.resolve()
    if target != root and root not in target.parents:
        raise ValueError(f"page path escapes the output directory: {site_path}")
    return folder / "index.html"

def unsafe_segments(value: str) -> bool:
    """True when a path contains "." or ".." segments or backslashes."""
    return "\\" in value or any(seg in (".", "..") for seg in value.split("/"))

def write_text_if_changed(path: Path, content: str) -> bool:
    old = path.read_text("utf-8") if path.exists() else ""
    if old == content:
        return False
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return True
