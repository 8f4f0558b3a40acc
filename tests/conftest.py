import datetime
import pathlib

import frontmatter
import pytest

from blogpages.planner import Document


def write_post(content_dir: pathlib.Path, relative: str, body: str = "Hello.", **meta) -> pathlib.Path:
    post = frontmatter.Post(body)
    for key, value in meta.items():
        post[key] = value
    path = content_dir / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(frontmatter.dumps(post) + "\n", encoding="utf-8")
    return path


def make_doc(slug, day, categories=("misc",), author="finch", featured=False, title=None, body="") -> Document:
    return Document(
        slug=slug,
        date=datetime.date(2024, 5, day),
        author=author,
        categories=tuple(categories),
        featured=featured,
        title=title or slug.rsplit("/", 1)[-1],
        body=body,
    )


@pytest.fixture
def content_dir(tmp_path):
    path = tmp_path / "content"
    path.mkdir()
    return path


@pytest.fixture
def sample_site(content_dir):
    write_post(content_dir, "blog/alpha.md", title="Alpha", date="2024-05-03",
               author="ada", category=["x"], featured=False)
    write_post(content_dir, "blog/bravo.md", title="Bravo", date="2024-05-02",
               author="bob", category=["x", "y"], featured=True)
    write_post(content_dir, "blog/charlie.md", title="Charlie", date="2024-05-01",
               author="ada", category="y")
    return content_dir
