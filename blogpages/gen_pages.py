#!/usr/bin/env python3
# blogpages/gen_pages.py
"""
Build the blog: read posts, plan pages, render them.
- Reads content/**/*.md (front matter: date, author, category, featured, ...)
- Writes one index.html per planned page under the output dir
- Removes pages from the previous build that are no longer planned
A content error aborts the build before anything is written.
"""

import argparse, json, os
from pathlib import Path

from .build_pages import SiteWriter, TemplateConfig, make_environment, register_pages
from .content import UpstreamQueryFailure, load_documents, require_documents
from .planner import PageKind, duplicate_paths, plan

def log(*args): print("[gen_pages]", *args, flush=True)

CONTENT_DIR = os.environ.get("BLOG_CONTENT_DIR", "content")
OUTPUT_DIR = os.environ.get("BLOG_OUTPUT_DIR", "_site")
TEMPLATES_DIR = os.environ.get("BLOG_TEMPLATES_DIR", "").strip() or None
PER_PAGE = int(os.environ.get("BLOG_PER_PAGE", "3"))

def positive_int(value: str) -> int:
    n = int(value)
    if n <= 0:
        raise argparse.ArgumentTypeError(f"must be positive: {value}")
    return n

def build_parser():
    ap = argparse.ArgumentParser(description="Generate blog list, category, author and post pages")
    ap.add_argument("--content", type=Path, default=Path(CONTENT_DIR), help="Markdown source directory")
    ap.add_argument("--output", type=Path, default=Path(OUTPUT_DIR), help="Where to write the site")
    ap.add_argument("--per-page", type=positive_int, default=PER_PAGE, help="Posts per listing page")
    ap.add_argument("--templates", type=Path, default=TEMPLATES_DIR, help="Directory with template overrides")
    ap.add_argument("--no-empty-index", action="store_true",
                    help="Do not emit an empty /blog page when every post is featured")
    ap.add_argument("--dry-run", action="store_true", help="Print the page plan as JSON, write nothing")
    return ap

def main(argv=None):
    args = build_parser().parse_args(argv)

    try:
        documents = require_documents(load_documents(args.content))
    except UpstreamQueryFailure as e:
        log(f"aborting, {len(e.errors)} content error(s)")
        return 1

    pages = plan(documents, args.per_page, always_emit_index=not args.no_empty_index)

    dupes = duplicate_paths(pages)
    if dupes:
        for path in dupes:
            log(f"ERROR page path planned twice: {path}")
        log(f"aborting, {len(dupes)} duplicate page path(s)")
        return 1

    if args.dry_run:
        print(json.dumps([p.as_dict() for p in pages], indent=2))
        return 0

    templates = TemplateConfig()
    writer = SiteWriter(args.output, documents, env=make_environment(args.templates), templates=templates)
    register_pages(pages, writer, templates)
    removed = writer.finish()

    num_lists = sum(1 for p in pages if p.kind is PageKind.LIST)
    log(f"posts={len(documents)}, per_page={args.per_page}, pages={len(pages)}, "
        f"list_pages={num_lists}, changed={writer.changed}, removed={len(removed)}")
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
