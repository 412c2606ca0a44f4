"""Tests for the table-gateway model and its dynamic column finders."""

from __future__ import annotations

import pytest

from bystar.model import Model
from tests.support import RecordingDispatcher


class Tag(Model):
    __tablename__ = "tags"
    __columns__ = ("id", "name")


@pytest.fixture()
def tags(monkeypatch: pytest.MonkeyPatch) -> RecordingDispatcher:
    recorder = RecordingDispatcher(rows=[{"id": 1, "name": "ruby"}, {"id": 2, "name": "ruby"}])
    monkeypatch.setattr(Tag, "dispatcher", recorder)
    return recorder


def test_find_by_returns_first_record(tags: RecordingDispatcher) -> None:
    tag = Tag.find_by_name("ruby")
    assert tag == Tag(id=1, name="ruby")
    assert tags.last.params == ("ruby", 1)


def test_find_by_returns_none_without_rows(tags: RecordingDispatcher) -> None:
    tags.rows = []
    assert Tag.find_by_name("python") is None


def test_find_all_by_returns_every_record(tags: RecordingDispatcher) -> None:
    assert [t.id for t in Tag.find_all_by_name("ruby")] == [1, 2]
    assert tags.last.sql == "SELECT tags.* FROM tags WHERE tags.name = %s"


def test_find_by_none_uses_is_null(tags: RecordingDispatcher) -> None:
    Tag.find_all_by_name(None)
    assert tags.last.sql.endswith("WHERE tags.name IS NULL")
    assert tags.last.params == ()


def test_as_of_names_are_not_routed_on_plain_models(tags: RecordingDispatcher) -> None:
    with pytest.raises(AttributeError):
        Tag.as_of_2_weeks_ago()


def test_private_names_are_never_routed() -> None:
    with pytest.raises(AttributeError):
        Tag._find_by_name  # noqa: B018


def test_missing_dispatcher() -> None:
    class Orphan(Model):
        __tablename__ = "orphans"
        __columns__ = ("id",)

    with pytest.raises(RuntimeError, match=r"Orphan has no dispatcher configured"):
        Orphan.find_by_id(1)


def test_repr_and_equality() -> None:
    assert repr(Tag(id=1, name="ruby")) == "Tag(id=1, name='ruby')"
    assert Tag(id=1) != Tag(id=2)
    assert Tag(id=1) != object()
