# blogpages/build_pages.py
"""
Page sinks: hand every planned page to create_page(path, template, context).

SiteWriter renders pages with Jinja2 into <output>/<path>/index.html and
removes pages left over from an earlier build (tracked in .pages.json).
CollectingSink only records the calls.
"""

from __future__ import annotations

import dataclasses
import json
from pathlib import Path

import jinja2
import markdown

from .planner import Document, PageKind
from .utils import BLOG_PREFIX, output_file_for, page_url, write_text_if_changed

def log(*args): print("[build_pages]", *args, flush=True)

MANIFEST_NAME = ".pages.json"
SITE_TITLE = "Blog"

BASE_TEMPLATE = """<!doctype html>
<html lang="en">
<meta charset="utf-8">
<meta name="viewport" content="width=device-width,initial-scale=1">
<title>{% block title %}{{ site_title }}{% endblock %}</title>
<style>
  body{font-family:ui-monospace, SFMono-Regular, Menlo, Consolas, "Liberation Mono", monospace; background:#000; color:#e6e6e6; margin:40px;}
  a{color:#e6e6e6; text-decoration:underline;}
  .meta{opacity:.8; font-size:.9rem; line-height:1.4;}
  .content{line-height:1.6; font-size:1rem; margin-top:16px;}
  .pager{margin-top:24px; border-top:2px solid #7A3A3A; padding-top:12px;}
  .muted{opacity:.7;}
</style>
<nav><a href="{{ blog_root }}">{{ site_title }}</a></nav>
{% block body %}{% endblock %}
</html>
"""

LISTING_MACROS = """{% macro post_list(posts) -%}
<ul class="posts">
  {% for post in posts %}
  <li>
    <a href="{{ post.slug }}">{{ post.title }}</a>
    <span class="meta">{{ post.date.isoformat() }} · {{ post.author }}{% if post.featured %} · featured{% endif %}</span>
  </li>
  {% else %}
  <li class="muted">No posts yet.</li>
  {% endfor %}
</ul>
{%- endmacro %}

{% macro pager(page, pagination) -%}
<div class="pager">
  {% if pagination.prev_url %}<a href="{{ pagination.prev_url }}">Newer</a>{% endif %}
  <span class="muted">Page {{ page.current_page }} of {{ page.num_pages }}</span>
  {% if pagination.next_url %}<a href="{{ pagination.next_url }}">Older</a>{% endif %}
</div>
{%- endmacro %}
"""

LIST_TEMPLATE = """{% extends "base.html" %}
{% from "_listing.html" import post_list, pager %}
{% block body %}
<h1>{{ site_title }}</h1>
{{ post_list(posts) }}
{{ pager(page, pagination) }}
{% endblock %}
"""

GROUP_TEMPLATE = """{% extends "base.html" %}
{% from "_listing.html" import post_list, pager %}
{% block title %}{{ heading }}: {{ page.group_key }} · {{ site_title }}{% endblock %}
{% block body %}
<h1>{{ heading }}: {{ page.group_key }}</h1>
<div class="meta">
  {% for key in page.all_keys %}<a href="{{ group_root }}/{{ key }}">{{ key }}</a>{% if not loop.last %} · {% endif %}{% endfor %}
</div>
{{ post_list(posts) }}
{{ pager(page, pagination) }}
{% endblock %}
"""

CATEGORY_TEMPLATE = '{% extends "_group.html" %}\n'
AUTHOR_TEMPLATE = '{% extends "_group.html" %}\n'

DETAIL_TEMPLATE = """{% extends "base.html" %}
{% block title %}{{ post.title }} · {{ site_title }}{% endblock %}
{% block body %}
<h1>{{ post.title }}</h1>
<div class="meta">
  <div>{{ post.date.isoformat() }} · <a href="{{ blog_root }}/author/{{ post.author }}">{{ post.author }}</a></div>
  <div class="muted">
    {% for cat in post.categories %}<a href="{{ blog_root }}/category/{{ cat }}">{{ cat }}</a>{% if not loop.last %}, {% endif %}{% endfor %}
    {% if post.tags %} · {{ post.tags|join(", ") }}{% endif %}
  </div>
</div>
<div class="content">{{ body_html|safe }}</div>
<div class="pager">
  {% if previous %}<a href="{{ previous.slug }}">← {{ previous.title }}</a>{% endif %}
  {% if next %}<a href="{{ next.slug }}">{{ next.title }} →</a>{% endif %}
</div>
{% endblock %}
"""

BUILTIN_TEMPLATES = {
    "base.html": BASE_TEMPLATE,
    "_listing.html": LISTING_MACROS,
    "_group.html": GROUP_TEMPLATE,
    "blog-list.html": LIST_TEMPLATE,
    "blog-category.html": CATEGORY_TEMPLATE,
    "blog-author.html": AUTHOR_TEMPLATE,
    "blog-post.html": DETAIL_TEMPLATE,
}


@dataclasses.dataclass(frozen=True)
class TemplateConfig:
    """Which template renders which kind of page."""

    detail: str = "blog-post.html"
    list: str = "blog-list.html"
    category: str = "blog-category.html"
    author: str = "blog-author.html"

    def __post_init__(self):
        names = [self.for_kind(kind) for kind in PageKind]
        if len(set(names)) != len(names):
            raise ValueError(f"each page kind needs its own template, got {names}")

    @classmethod
    def from_dict(cls, data: dict) -> "TemplateConfig":
        return cls(**{PageKind(k).value: v for k, v in data.items()})

    def for_kind(self, kind: PageKind) -> str:
        return getattr(self, kind.value)


@dataclasses.dataclass(frozen=True)
class PageRecord:
    path: str
    template: str
    context: dict


def make_environment(templates_dir=None) -> jinja2.Environment:
    """Built-in templates, overridable file by file from ``templates_dir``."""
    loaders = []
    if templates_dir:
        loaders.append(jinja2.FileSystemLoader(str(templates_dir)))
    loaders.append(jinja2.DictLoader(BUILTIN_TEMPLATES))
    return jinja2.Environment(
        loader=jinja2.ChoiceLoader(loaders),
        autoescape=jinja2.select_autoescape(),
    )

def register_pages(descriptors, sink, templates: TemplateConfig | None = None) -> int:
    templates = templates or TemplateConfig()
    n = 0
    for d in descriptors:
        sink.create_page(d.path, templates.for_kind(d.kind), d.context)
        n += 1
    return n


class CollectingSink:
    def __init__(self):
        self.pages: list[PageRecord] = []

    def create_page(self, path, template, context):
        self.pages.append(PageRecord(path=path, template=template, context=dict(context)))


# -------------------------
# HTML output
# -------------------------
def listing_base(kind: PageKind, context: dict) -> str:
    if kind is PageKind.LIST:
        return BLOG_PREFIX
    return f"{BLOG_PREFIX}/{kind.value}/{context['group_key']}"

def _kind_for_template(templates: TemplateConfig, template: str) -> PageKind:
    for kind in PageKind:
        if templates.for_kind(kind) == template:
            return kind
    raise RuntimeError(f"no page kind uses template {template!r}")


class SiteWriter:
    """Render pages into ``output_dir``; call finish() once all pages are in."""

    def __init__(self, output_dir, documents: list[Document], env: jinja2.Environment | None = None,
                 templates: TemplateConfig | None = None, site_title: str = SITE_TITLE):
        self.output_dir = Path(output_dir)
        self.documents = list(documents)
        self.by_slug = {doc.slug: doc for doc in self.documents}
        self.env = env or make_environment()
        self.templates = templates or TemplateConfig()
        self.site_title = site_title
        self.written: list[str] = []
        self.changed = 0
        self._md = markdown.Markdown(extensions=["tables", "fenced_code"])

    def _doc(self, slug):
        if slug is None:
            return None
        try:
            return self.by_slug[slug]
        except KeyError:
            raise RuntimeError(f"page refers to unknown post {slug}") from None

    def posts_for(self, kind: PageKind, context: dict) -> list[Document]:
        if kind is PageKind.LIST:
            pool = [d for d in self.documents if not d.featured]
        elif kind is PageKind.CATEGORY:
            pool = [d for d in self.documents if context["group_key"] in d.categories]
        elif kind is PageKind.AUTHOR:
            pool = [d for d in self.documents if d.author == context["group_key"]]
        else:
            return []
        skip = context["skip"]
        return pool[skip:skip + context["limit"]]

    def render_markdown(self, text: str) -> str:
        self._md.reset()
        return self._md.convert(text or "")

    def render(self, path, template, context) -> str:
        kind = _kind_for_template(self.templates, template)
        values = {
            "site_title": self.site_title,
            "blog_root": BLOG_PREFIX,
            "page": context,
            "path": path,
        }
        if kind is PageKind.DETAIL:
            post = self._doc(context["slug"])
            values.update(
                post=post,
                body_html=self.render_markdown(post.body),
                previous=self._doc(context.get("previous_slug")),
                next=self._doc(context.get("next_slug")),
            )
        else:
            base = listing_base(kind, context)
            current = context["current_page"]
            if kind is not PageKind.LIST:
                values.update(
                    heading=kind.value.title(),
                    group_root=f"{BLOG_PREFIX}/{kind.value}",
                )
            values.update(
                posts=self.posts_for(kind, context),
                pagination={
                    "prev_url": page_url(base, current - 1) if current > 1 else None,
                    "next_url": page_url(base, current + 1) if current < context["num_pages"] else None,
                },
            )
        return self.env.get_template(template).render(**values)

    def create_page(self, path, template, context):
        html = self.render(path, template, context)
        if write_text_if_changed(output_file_for(self.output_dir, path), html):
            self.changed += 1
        self.written.append(path)

    def finish(self) -> list[str]:
        """Write the manifest and delete stale pages; returns removed paths."""
        manifest = self.output_dir / MANIFEST_NAME
        previous = load_manifest(manifest)
        current = set(self.written)
        removed = []
        for path in previous:
            if path in current:
                continue
            try:
                remove_page(self.output_dir, path)
            except ValueError as e:
                log(f"skipping manifest entry: {e}")
                continue
            removed.append(path)
            log(f"removed stale page {path}")
        write_text_if_changed(manifest, json.dumps({"paths": sorted(current)}, indent=2) + "\n")
        return removed


def load_manifest(path: Path) -> list[str]:
    if not path.exists():
        return []
    try:
        data = json.loads(path.read_text("utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        log(f"ignoring unreadable manifest {path}: {e}")
        return []
    paths = data.get("paths") if isinstance(data, dict) else None
    return [p for p in (paths or []) if isinstance(p, str)]

def remove_page(output_dir: Path, site_path: str):
    index = output_file_for(output_dir, site_path)
    if index.exists():
        index.unlink()
    # prune now-empty folders, never the output root
    folder = index.parent
    root = output_dir.resolve()
    while folder.resolve() != root and folder.exists() and not any(folder.iterdir()):
        folder.rmdir()
        folder = folder.parent
