"""Tests for time-scoped finders on models bound to a recording dispatcher."""

from __future__ import annotations

from datetime import UTC, date, datetime, timedelta

import pytest

from bystar.sql.builder import Refinement, SQLBuilderError
from bystar.temporal.relative import RelativeParseError
from bystar.temporal.schema import BoundaryPair, Duration
from bystar.temporal.validate import ParseError
from tests.support import NOW, Event, Post, RecordingDispatcher

_YEAR_ERROR = "Invalid arguments detected, year may possibly be outside of valid range (1902-2039)"


def _bounds(dispatcher: RecordingDispatcher) -> tuple[datetime, datetime]:
    start, end = dispatcher.last.params[:2]
    return start, end


def test_by_year_queries_default_field(dispatcher: RecordingDispatcher) -> None:
    Post.by_year()

    assert "posts.created_at BETWEEN %s AND %s" in dispatcher.last.sql
    assert dispatcher.last.sql.endswith("ORDER BY posts.created_at ASC")
    assert _bounds(dispatcher) == (
        datetime(2025, 1, 1, tzinfo=UTC),
        datetime(2025, 12, 31, 23, 59, 59, 999999, tzinfo=UTC),
    )


def test_by_year_accepts_string_and_previous_year(dispatcher: RecordingDispatcher) -> None:
    Post.by_year("2025")
    assert _bounds(dispatcher)[0].year == 2025

    Post.by_year(2024)
    assert _bounds(dispatcher)[0] == datetime(2024, 1, 1, tzinfo=UTC)


def test_by_year_rejects_years_outside_range(dispatcher: RecordingDispatcher) -> None:
    for year in (1901, 2040):
        with pytest.raises(ParseError) as exc_info:
            Post.by_year(year)
        assert str(exc_info.value) == _YEAR_ERROR
    assert dispatcher.queries == []


def test_alternative_field(dispatcher: RecordingDispatcher) -> None:
    Event.by_year(None, field="start_time")
    assert "events.start_time BETWEEN %s AND %s" in dispatcher.last.sql

    Event.by_weekend(None, field="start_time")
    assert dispatcher.last.sql.endswith("ORDER BY events.start_time ASC")


def test_unknown_field_is_rejected(dispatcher: RecordingDispatcher) -> None:
    with pytest.raises(SQLBuilderError, match=r"Unknown column"):
        Post.by_day(field="start_time")


def test_malformed_field_is_rejected(dispatcher: RecordingDispatcher) -> None:
    with pytest.raises(ParseError, match=r"Invalid finder options"):
        Post.by_day(field="created_at; DROP TABLE posts")


def test_by_month_name_with_year_option(dispatcher: RecordingDispatcher) -> None:
    Post.by_month("January", year=2024)
    assert _bounds(dispatcher) == (
        datetime(2024, 1, 1, tzinfo=UTC),
        datetime(2024, 1, 31, 23, 59, 59, 999999, tzinfo=UTC),
    )


def test_by_month_year_option_as_string(dispatcher: RecordingDispatcher) -> None:
    Post.by_month(1, year="2024")
    assert _bounds(dispatcher)[0] == datetime(2024, 1, 1, tzinfo=UTC)


def test_by_month_rejects_malformed_year_option(dispatcher: RecordingDispatcher) -> None:
    with pytest.raises(ParseError):
        Post.by_month(1, year="last year")


@pytest.mark.parametrize("value", [0, 13, "Ryan", [1, 2, 3]])
def test_by_month_invalid(dispatcher: RecordingDispatcher, value: object) -> None:
    with pytest.raises(ParseError):
        Post.by_month(value)


def test_by_fortnight_and_week_use_clock(dispatcher: RecordingDispatcher) -> None:
    Post.by_fortnight()
    assert _bounds(dispatcher)[0] == datetime(2025, 5, 7, tzinfo=UTC)

    Post.by_week()
    assert _bounds(dispatcher)[0] == datetime(2025, 5, 14, tzinfo=UTC)

    Post.by_week(0, year=2024)
    assert _bounds(dispatcher)[0] == datetime(2024, 1, 1, tzinfo=UTC)


def test_by_fortnight_and_week_invalid_index(dispatcher: RecordingDispatcher) -> None:
    with pytest.raises(ParseError, match=r"^by_fortnight takes only"):
        Post.by_fortnight(27)
    with pytest.raises(ParseError, match=r"^by_week takes only"):
        Post.by_week(54)


def test_today_yesterday_tomorrow(dispatcher: RecordingDispatcher) -> None:
    Post.yesterday()
    yesterday = _bounds(dispatcher)
    Post.today()
    today = _bounds(dispatcher)
    Post.tomorrow()
    tomorrow = _bounds(dispatcher)

    assert today[0] == datetime(2025, 5, 15, tzinfo=UTC)
    assert yesterday[1] < today[0] <= today[1] < tomorrow[0]


def test_past_is_newest_first_and_future_oldest_first(dispatcher: RecordingDispatcher) -> None:
    Post.past()
    assert dispatcher.last.sql.endswith("ORDER BY posts.created_at DESC")
    assert _bounds(dispatcher)[1] == NOW

    Event.future(date(2025, 7, 5), field="start_time")
    assert dispatcher.last.sql.endswith("ORDER BY events.start_time ASC")
    assert _bounds(dispatcher)[0] == datetime(2025, 7, 5, tzinfo=UTC)


def test_between_is_order_independent(dispatcher: RecordingDispatcher) -> None:
    Post.between("last tuesday", "next tuesday")
    forward = _bounds(dispatcher)
    Post.between("next tuesday", "last tuesday")
    assert _bounds(dispatcher) == forward


def test_as_of_two_weeks_ago(dispatcher: RecordingDispatcher) -> None:
    Post.as_of_2_weeks_ago()
    assert _bounds(dispatcher) == (NOW - timedelta(days=14), NOW)


def test_up_to_six_weeks_from_now(dispatcher: RecordingDispatcher) -> None:
    Post.up_to_6_weeks_from_now()
    assert _bounds(dispatcher) == (NOW, NOW + timedelta(weeks=6))


def test_dynamic_finders_accept_options(dispatcher: RecordingDispatcher) -> None:
    Event.as_of_3_days_ago(field="start_time")
    assert "events.start_time BETWEEN %s AND %s" in dispatcher.last.sql


def test_explicit_as_of_with_duration(dispatcher: RecordingDispatcher) -> None:
    Post.as_of(Duration(2, "week"))
    assert _bounds(dispatcher) == (NOW - timedelta(days=14), NOW)


@pytest.mark.parametrize("name", ["as_of_ryans_birthday", "up_to_ryans_birthday"])
def test_dynamic_phrase_that_cannot_be_resolved(dispatcher: RecordingDispatcher, name: str) -> None:
    finder = getattr(Post, name)
    with pytest.raises(RelativeParseError) as exc_info:
        finder()
    assert str(exc_info.value) == 'couldn\'t work out "Ryans birthday"; please be more precise.'
    assert dispatcher.queries == []


def test_refinement_is_merged_with_range(dispatcher: RecordingDispatcher) -> None:
    Post.by_year(
        2024,
        refine=lambda: {
            "joins": [
                "JOIN posts_tags pt ON pt.post_id = posts.id",
                "JOIN tags ON tags.id = pt.tag_id",
            ],
            "conditions": ["tags.name = %s"],
            "params": ["ruby"],
        },
    )

    assert dispatcher.last.sql.startswith("SELECT DISTINCT posts.*")
    assert "(tags.name = %s)" in dispatcher.last.sql
    assert dispatcher.last.params[2:] == ("ruby",)


def test_refinement_model_on_dynamic_finder(dispatcher: RecordingDispatcher) -> None:
    Post.as_of_2_weeks_ago(refine=lambda: Refinement(conditions=["posts.text <> %s"], params=[""]))
    assert "(posts.text <> %s)" in dispatcher.last.sql
    assert dispatcher.last.params[2:] == ("",)


def test_records_are_model_instances(dispatcher: RecordingDispatcher) -> None:
    dispatcher.rows = [{"id": 1, "text": "Today's post", "created_at": NOW, "updated_at": NOW}]

    posts = Post.today()

    assert posts == [Post(id=1, text="Today's post", created_at=NOW, updated_at=NOW)]
    assert posts[0].text == "Today's post"


def test_range_for_does_not_query(dispatcher: RecordingDispatcher) -> None:
    assert Post.range_for("day") == BoundaryPair(
        start=datetime(2025, 5, 15, tzinfo=UTC),
        end=datetime(2025, 5, 15, 23, 59, 59, 999999, tzinfo=UTC),
    )
    assert Post.range_for("as_of", Duration(2, "week")).start == NOW - timedelta(days=14)
    assert dispatcher.queries == []


def test_column_finders_still_work(dispatcher: RecordingDispatcher) -> None:
    dispatcher.rows = [{"id": 1, "text": "Today's post", "created_at": NOW, "updated_at": NOW}]

    post = Post.find_by_text("Today's post")

    assert post is not None
    assert post.text == "Today's post"
    assert dispatcher.last.sql == "SELECT posts.* FROM posts WHERE posts.text = %s LIMIT %s"
    assert dispatcher.last.params == ("Today's post", 1)


def test_unknown_names_raise_attribute_error(dispatcher: RecordingDispatcher) -> None:
    with pytest.raises(AttributeError, match=r"has no attribute 'idontexist'"):
        Post.idontexist()
    with pytest.raises(AttributeError, match=r"find_by_start_time"):
        Post.find_by_start_time(NOW)
    assert dispatcher.queries == []


@pytest.mark.parametrize(
    "name",
    ["as_of_5000_years_ago", "up_to_9000_years_from_now", "as_of_99999999999_days_ago"],
)
def test_dynamic_spans_beyond_the_calendar_are_rejected(
        dispatcher: RecordingDispatcher,
        name: str,
) -> None:
    finder = getattr(Post, name)
    with pytest.raises(ParseError, match=r"is out of range$"):
        finder()
    assert dispatcher.queries == []
