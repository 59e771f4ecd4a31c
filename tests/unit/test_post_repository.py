"""Unit tests for the post repository and front matter handling."""
from __future__ import annotations

import datetime

import pytest

from photoblog_admin.repositories import FrontMatter, PostRepository, scan_front_matter


class TestScanFrontMatter:
    """Test the front matter scanner."""

    def test_reads_quoted_values_and_lists(self):
        values, body = scan_front_matter(
            '---\ntitle: "Hello"\ndeveloper: \'Studio\'\ntags: [a, b , c]\ndate: 2024-03-01\n---\nBody'
        )

        assert values["title"] == "Hello"
        assert values["developer"] == "Studio"
        assert values["tags"] == ["a", "b", "c"]
        assert values["date"] == "2024-03-01"
        assert body == "\nBody"

    def test_unescapes_double_quotes(self):
        values, _ = scan_front_matter('---\ntitle: "The \\"Best\\" Shots"\n---')

        assert values["title"] == 'The "Best" Shots'

    def test_handles_crlf(self):
        values, _ = scan_front_matter("---\r\ntitle: Windows\r\n---\r\n")

        assert values["title"] == "Windows"

    def test_empty_list(self):
        values, _ = scan_front_matter("---\ntags: []\n---")

        assert values["tags"] == []

    def test_without_front_matter(self):
        assert scan_front_matter("Just some markdown") is None
        assert scan_front_matter("\n---\ntitle: late\n---") is None

    def test_quoted_brackets_stay_text(self):
        values, _ = scan_front_matter("---\ntitle: \"[Draft]\"\ndeveloper: '[Studio]'\ntags: [a]\n---")

        assert values["title"] == "[Draft]"
        assert values["developer"] == "[Studio]"
        assert values["tags"] == ["a"]

    def test_unescapes_control_characters(self):
        values, _ = scan_front_matter('---\ndescription: "one\\ntwo\\\\three"\n---')

        assert values["description"] == "one\ntwo\\three"


class TestFrontMatter:
    """Test FrontMatter defaults and parsing."""

    def test_missing_fields_use_defaults(self):
        fm = FrontMatter.from_values({})

        assert fm.title is None
        assert fm.date is None
        assert fm.tags == []
        assert (fm.card_image, fm.card_offset, fm.card_offset_x, fm.card_zoom) == (0, 50, 50, 100)
        assert (fm.banner_image, fm.banner_offset, fm.banner_offset_x, fm.banner_zoom) == (0, 50, 50, 100)

    def test_unparseable_ints_fall_back_but_zero_is_kept(self):
        fm = FrontMatter.from_values({"card-offset": "abc", "card-zoom": "0", "banner-offset": "35%"})

        assert fm.card_offset == 50
        assert fm.card_zoom == 0
        assert fm.banner_offset == 35

    def test_tags_from_string(self):
        fm = FrontMatter.from_values({"tags": "night, city ,  rain"})

        assert fm.tags == ["night", "city", "rain"]

    def test_date_with_time_suffix(self):
        fm = FrontMatter.from_values({"date": "2023-07-04 10:00:00 +0000"})

        assert fm.date == datetime.date(2023, 7, 4)

    def test_invalid_date(self):
        assert FrontMatter.from_values({"date": "2023-13-45"}).date is None
        assert FrontMatter.from_values({"date": "soon"}).date is None


class TestPostRepository:
    """Test PostRepository."""

    def test_find_matches_exact_slug(self, tmp_path):
        repo = PostRepository(tmp_path)
        (tmp_path / "2024-01-01-foo-bar.md").write_text("---\n---")
        (tmp_path / "2023-05-05-bar.md").write_text("---\n---")

        assert repo.find("bar").name == "2023-05-05-bar.md"
        assert repo.find("foo-bar").name == "2024-01-01-foo-bar.md"
        assert repo.find("foo") is None

    def test_find_undated_post(self, tmp_path):
        repo = PostRepository(tmp_path)
        (tmp_path / "gallery.md").write_text("---\n---")

        assert repo.find("gallery").name == "gallery.md"

    def test_render_and_read_round_trip(self, tmp_path):
        repo = PostRepository(tmp_path)
        fm = FrontMatter(
            title='Say "Cheese"',
            description="Desc",
            developer="Dev",
            date=datetime.date(2024, 2, 29),
            slug="say-cheese",
            tags=["a", "b"],
            card_image=3,
            banner_zoom=140,
        )
        path = repo.write(tmp_path / repo.filename_for("say-cheese", fm.date), fm)

        assert path.name == "2024-02-29-say-cheese.md"
        assert repo.read(path).front_matter == fm

    def test_render_layout(self, tmp_path):
        repo = PostRepository(tmp_path, layout="gallery", category="shots", default_description="Fallback")
        text = repo.render(FrontMatter(title="T", date=datetime.date(2024, 1, 1), slug="t"))

        assert text.startswith("---\nlayout: gallery\ndate: 2024-01-01\ntitle: \"T\"\n")
        assert 'description: "Fallback"' in text
        assert "categories: [shots]" in text
        assert "tags: []" in text
        assert "card-offset-x: 50" in text
        assert text.endswith("banner-zoom: 100\n---\n")

    def test_body_is_preserved(self, tmp_path):
        repo = PostRepository(tmp_path)
        path = tmp_path / "2024-01-01-x.md"
        path.write_text("---\ntitle: X\n---\n\nSome *markdown* body.\n")

        document = repo.read(path)
        repo.write(path, document.front_matter, document.body)

        assert path.read_text().endswith("---\n\nSome *markdown* body.\n")

    def test_read_without_front_matter(self, tmp_path):
        repo = PostRepository(tmp_path)
        path = tmp_path / "2024-01-01-x.md"
        path.write_text("no front matter here")

        assert repo.read(path) is None

    def test_rename_missing_source_is_skipped(self, tmp_path):
        repo = PostRepository(tmp_path)
        target = tmp_path / "2024-02-02-x.md"

        assert repo.rename(tmp_path / "2024-01-01-x.md", target) == target
        assert not target.exists()

    @pytest.mark.parametrize("description", [
        "First line\nSecond line",
        "intro\n---\nmore",
        'Quote " and backslash \\ and tab \t',
        "Windows\r\nline",
        "[Draft] notes",
    ])
    def test_free_text_round_trip(self, tmp_path, description):
        repo = PostRepository(tmp_path)
        fm = FrontMatter(
            title="[Draft]",
            description=description,
            developer="Studio",
            date=datetime.date(2024, 1, 1),
            slug="x",
            card_zoom=120,
        )
        path = repo.write(tmp_path / "2024-01-01-x.md", fm)

        assert repo.read(path).front_matter == fm

    def test_undated_post_is_rendered_without_date(self, tmp_path):
        repo = PostRepository(tmp_path)

        text = repo.render(FrontMatter(title="T", slug="t"))

        assert "date:" not in text
        assert repo.read(repo.write(tmp_path / "t.md", FrontMatter(title="T", slug="t"))).front_matter.date is None

    def test_tags_with_list_syntax_are_sanitized(self, tmp_path):
        repo = PostRepository(tmp_path)
        fm = FrontMatter(title="T", slug="t", tags=["night, city", "[rain]", "two\nlines", " "])

        path = repo.write(tmp_path / "t.md", fm)

        assert repo.read(path).front_matter.tags == ["night city", "rain", "two lines"]
