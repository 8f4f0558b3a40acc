# blogpages/validate_site.py
"""Check posts and the built site: content errors, duplicate page paths, missing pages."""

import argparse, sys
from pathlib import Path

from .content import load_documents
from .gen_pages import CONTENT_DIR, OUTPUT_DIR, PER_PAGE, positive_int
from .planner import duplicate_paths, plan
from .utils import output_file_for

def validate(content_dir, output_dir, per_page: int, always_emit_index: bool = True) -> list:
    result = load_documents(content_dir)
    errors = list(result.errors)
    if errors:
        return errors

    pages = plan(result.documents, per_page, always_emit_index=always_emit_index)
    errors += [f"duplicate page path: {path}" for path in duplicate_paths(pages)]

    seen = set()
    for page in pages:
        if page.path in seen:
            continue
        seen.add(page.path)
        try:
            index = output_file_for(Path(output_dir), page.path)
        except ValueError as e:
            errors.append(str(e))
            continue
        if not index.exists():
            errors.append(f"missing page: {page.path}")
    return errors

def main(argv=None):
    ap = argparse.ArgumentParser(description="Validate blog content and the generated site")
    ap.add_argument("--content", type=Path, default=Path(CONTENT_DIR))
    ap.add_argument("--output", type=Path, default=Path(OUTPUT_DIR))
    ap.add_argument("--per-page", type=positive_int, default=PER_PAGE)
    ap.add_argument("--no-empty-index", action="store_true",
                    help="The site was built without an empty /blog page")
    args = ap.parse_args(argv)

    errors = validate(args.content, args.output, args.per_page, always_emit_index=not args.no_empty_index)
    for err in errors:
        print(f"[ERR] {err}")
    print(f"[validate] done; errors={len(errors)}")
    return 1 if errors else 0

if __name__ == "__main__":
    sys.exit(main())
