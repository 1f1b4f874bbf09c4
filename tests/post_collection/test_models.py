"""Tests for the post record model and validation."""

from datetime import date, datetime

import pytest

from src.post_collection.errors import PostValidationError
from src.post_collection.models import Author, Post, raw_record_id, validate_record


class TestValidateRecord:
    def test_valid_record(self, react_guide_record):
        post = validate_record(react_guide_record)
        assert isinstance(post, Post)
        assert post.id == "1"
        assert post.date == date(2024, 3, 15)
        assert post.tags == frozenset({"react", "typescript", "tutorial"})
        assert post.read_time == "12 min read"
        assert post.author == Author(
            name="Baha",
            avatar="https://avatars.githubusercontent.com/u/91181868?v=4",
        )

    def test_snake_case_read_time_accepted(self, react_guide_record):
        record = dict(react_guide_record)
        del record["readTime"]
        record["read_time"] = "3 min read"
        assert validate_record(record).read_time == "3 min read"

    def test_optional_fields_default(self):
        post = validate_record({
            "id": "x",
            "title": "T",
            "content": "<p>c</p>",
            "date": "2024-01-01",
            "author": {"name": "Baha"},
        })
        assert post.tags == frozenset()
        assert post.excerpt == ""
        assert post.read_time is None
        assert post.image == ""
        assert post.author.avatar == ""

    def test_null_tags_default_to_empty(self, react_guide_record):
        record = dict(react_guide_record, tags=None)
        assert validate_record(record).tags == frozenset()

    def test_duplicate_tags_collapse(self, react_guide_record):
        record = dict(react_guide_record, tags=["react", "react", " react "])
        assert validate_record(record).tags == frozenset({"react"})

    def test_date_object_accepted(self, react_guide_record):
        record = dict(react_guide_record, date=date(2024, 3, 15))
        assert validate_record(record).date == date(2024, 3, 15)

    def test_datetime_truncated_to_date(self, react_guide_record):
        record = dict(react_guide_record, date=datetime(2024, 3, 15, 9, 30))
        assert validate_record(record).date == date(2024, 3, 15)

    def test_numeric_id_coerced_to_str(self, react_guide_record):
        record = dict(react_guide_record, id=7)
        assert validate_record(record).id == "7"

    def test_unknown_keys_ignored(self, react_guide_record):
        record = dict(react_guide_record, slug="building-react")
        assert validate_record(record).id == "1"

    def test_content_kept_verbatim(self, react_guide_record):
        record = dict(react_guide_record, content="  <p>spaced</p>\n")
        assert validate_record(record).content == "  <p>spaced</p>\n"

    def test_post_instance_passes_through(self, react_guide_record):
        post = validate_record(react_guide_record)
        assert validate_record(post) is post


class TestValidationFailures:
    def test_every_violated_field_reported(self):
        with pytest.raises(PostValidationError) as exc_info:
            validate_record({"id": "9", "content": "", "date": "not-a-date", "author": {}})

        reasons = " | ".join(exc_info.value.reasons)
        assert "title" in reasons
        assert "content" in reasons
        assert "date" in reasons
        assert "author.name" in reasons
        assert len(exc_info.value.reasons) == 4
        assert exc_info.value.record_id == "9"

    def test_missing_author(self, react_guide_record):
        record = dict(react_guide_record)
        del record["author"]
        with pytest.raises(PostValidationError) as exc_info:
            validate_record(record)
        assert exc_info.value.reasons[0].startswith("author:")

    @pytest.mark.parametrize(
        "bad_date",
        ["2024-02-30", "15/03/2024", "", 20240315, "1710460800", " 1710460800 "],
    )
    def test_unparsable_date(self, react_guide_record, bad_date):
        record = dict(react_guide_record, date=bad_date)
        with pytest.raises(PostValidationError) as exc_info:
            validate_record(record)
        assert any(r.startswith("date:") for r in exc_info.value.reasons)

    @pytest.mark.parametrize("field", ["id", "title", "content"])
    def test_blank_required_field(self, react_guide_record, field):
        record = dict(react_guide_record, **{field: "   "})
        with pytest.raises(PostValidationError) as exc_info:
            validate_record(record)
        assert any(r.startswith(f"{field}:") for r in exc_info.value.reasons)

    def test_blank_author_name(self, react_guide_record):
        record = dict(react_guide_record, author={"name": " "})
        with pytest.raises(PostValidationError) as exc_info:
            validate_record(record)
        assert exc_info.value.reasons[0].startswith("author.name:")

    def test_blank_read_time(self, react_guide_record):
        record = dict(react_guide_record, readTime="")
        with pytest.raises(PostValidationError):
            validate_record(record)

    def test_blank_tag_label(self, react_guide_record):
        record = dict(react_guide_record, tags=["react", ""])
        with pytest.raises(PostValidationError):
            validate_record(record)

    def test_non_mapping_record(self):
        with pytest.raises(PostValidationError) as exc_info:
            validate_record(["not", "a", "record"])
        assert "expected a mapping" in exc_info.value.reasons[0]
        assert exc_info.value.record_id is None

    def test_error_message_lists_reasons(self):
        with pytest.raises(PostValidationError, match="title"):
            validate_record({"id": "2", "content": "c", "date": "2024-01-01", "author": {"name": "A"}})


class TestPost:
    def test_post_is_immutable(self, react_guide_record):
        post = validate_record(react_guide_record)
        with pytest.raises(Exception):
            post.title = "changed"

    def test_sort_key_newest_first(self, react_guide_record):
        older = validate_record(dict(react_guide_record, id="a", date="2023-01-01"))
        newer = validate_record(dict(react_guide_record, id="b", date="2024-01-01"))
        assert newer.sort_key < older.sort_key

    def test_to_dict_camel_case(self, react_guide_record):
        d = validate_record(react_guide_record).to_dict()
        assert d["readTime"] == "12 min read"
        assert d["date"] == "2024-03-15"
        assert d["tags"] == ["react", "tutorial", "typescript"]
        assert d["author"]["name"] == "Baha"
        assert "read_time" not in d


class TestRawRecordId:
    def test_string_id(self):
        assert raw_record_id({"id": "abc"}) == "abc"

    def test_numeric_id(self):
        assert raw_record_id({"id": 3}) == "3"

    def test_missing_or_bad(self):
        assert raw_record_id({}) is None
        assert raw_record_id({"id": True}) is None
        assert raw_record_id("nope") is None
