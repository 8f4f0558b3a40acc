import datetime

import pytest

from blogpages import content

from conftest import write_post


def test_load_documents_sorted_newest_first(sample_site):
    result = content.load_documents(sample_site)

    assert result.errors == []
    assert [d.slug for d in result.documents] == [
        "/blog/2024/05/03/alpha",
        "/blog/2024/05/02/bravo",
        "/blog/2024/05/01/charlie",
    ]
    bravo = result.documents[1]
    assert bravo.title == "Bravo"
    assert bravo.author == "bob"
    assert bravo.categories == ("x", "y")
    assert bravo.featured is True
    assert bravo.date == datetime.date(2024, 5, 2)
    assert bravo.source == "blog/bravo.md"
    assert result.documents[2].categories == ("y",)
    assert result.documents[2].featured is False


def test_same_day_posts_sorted_by_slug(content_dir):
    write_post(content_dir, "b.md", date="2024-01-01", author="a", category="c")
    write_post(content_dir, "a.md", date="2024-01-01", author="a", category="c")
    write_post(content_dir, "z.md", date="2023-12-31", author="a", category="c")

    docs = content.load_documents(content_dir).documents
    assert [d.slug for d in docs] == [
        "/blog/2024/01/01/a",
        "/blog/2024/01/01/b",
        "/blog/2023/12/31/z",
    ]


def test_front_matter_variants(content_dir):
    write_post(
        content_dir,
        "notes/custom.md",
        date=datetime.datetime(2024, 2, 29, 18, 30),
        author="  Ada   Lovelace ",
        categories=["engines", "engines", "math"],
        tags=["history"],
        featured="yes",
        slug="/writing/custom/",
    )
    write_post(content_dir, "drafts/wip.md", date="2024-03-01", author="a", category="c", draft=True)

    result = content.load_documents(content_dir)
    assert result.errors == []
    (doc,) = result.documents
    assert doc.slug == "/writing/custom"
    assert doc.date == datetime.date(2024, 2, 29)
    assert doc.author == "Ada Lovelace"
    assert doc.categories == ("engines", "math")
    assert doc.tags == ("history",)
    assert doc.featured is True
    assert doc.title == "Untitled"


def test_errors_are_collected_per_file(content_dir):
    write_post(content_dir, "ok.md", date="2024-01-02", author="a", category="c")
    write_post(content_dir, "no-date.md", author="a", category="c")
    write_post(content_dir, "bad-date.md", date="someday", author="a", category="c")
    write_post(content_dir, "no-author.md", date="2024-01-01", category="c")
    write_post(content_dir, "no-category.md", date="2024-01-01", author="a")
    write_post(content_dir, "bad-flag.md", date="2024-01-01", author="a", category="c", featured="maybe")

    result = content.load_documents(content_dir)

    assert [d.slug for d in result.documents] == ["/blog/2024/01/02/ok"]
    joined = "\n".join(result.errors)
    assert len(result.errors) == 5
    assert "no-date.md: missing date" in joined
    assert "bad-date.md: invalid date" in joined
    assert "no-author.md: missing author" in joined
    assert "no-category.md: missing category" in joined
    assert "bad-flag.md: invalid boolean" in joined


def test_duplicate_slug_is_an_error(content_dir):
    write_post(content_dir, "blog/same.md", date="2024-01-01", author="a", category="c")
    write_post(content_dir, "same/index.md", date="2024-01-01", author="a", category="c")

    result = content.load_documents(content_dir)
    assert len(result.documents) == 1
    assert len(result.errors) == 1
    assert "duplicate slug /blog/2024/01/01/same" in result.errors[0]


def test_missing_content_dir(tmp_path):
    result = content.load_documents(tmp_path / "nope")
    assert result.documents == []
    assert "content directory not found" in result.errors[0]


def test_require_documents_logs_and_raises(content_dir, capsys):
    write_post(content_dir, "broken.md", author="a", category="c")

    with pytest.raises(content.UpstreamQueryFailure) as excinfo:
        content.require_documents(content.load_documents(content_dir))

    assert excinfo.value.errors == ["broken.md: missing date"]
    assert "[content] ERROR broken.md: missing date" in capsys.readouterr().out


def test_require_documents_passes_through(sample_site):
    docs = content.require_documents(content.load_documents(sample_site))
    assert len(docs) == 3


@pytest.mark.parametrize(
    "value, expected",
    [
        (datetime.date(2020, 1, 2), datetime.date(2020, 1, 2)),
        ("2020-01-02", datetime.date(2020, 1, 2)),
        ("2020-01-02T23:00:00Z", datetime.date(2020, 1, 2)),
        ("2020-01-02 10:00:00 -0500", datetime.date(2020, 1, 2)),
    ],
)
def test_parse_date(value, expected):
    assert content.parse_date(value) == expected


def test_path_like_keys_and_slugs_are_rejected(content_dir):
    write_post(content_dir, "ok.md", date="2024-01-02", author="a", category="c")
    write_post(content_dir, "cat.md", date="2024-01-01", author="a", category="../../../escaped")
    write_post(content_dir, "author.md", date="2024-01-01", author="ann/bob", category="c")
    write_post(content_dir, "slug.md", date="2024-01-01", author="a", category="c", slug="blog/../../x")

    result = content.load_documents(content_dir)

    assert [d.slug for d in result.documents] == ["/blog/2024/01/02/ok"]
    joined = "\n".join(result.errors)
    assert "cat.md: invalid category" in joined
    assert "author.md: invalid author" in joined
    assert "slug.md: invalid slug" in joined
