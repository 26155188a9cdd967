"""Tests for calendar marks, agenda sections and chart series."""

from liftlog.core.constants import CHART_COLORS, MARKED_DOT_COLOR
from liftlog.core.enums import ChartMetric, ChartPeriod
from liftlog.schemas.calendar import ChartExercise
from liftlog.services.aggregation import (
    add_chart_exercise,
    build_agenda,
    build_calendar_marks,
    build_chart_points,
    build_set_history,
    chart_date_range,
    group_by_date,
    metric_value,
    remove_chart_exercise,
    summarize_day,
)


def test_calendar_marks():
    marks = build_calendar_marks(["2024-01-01", "2024-01-03"])
    assert set(marks) == {"2024-01-01", "2024-01-03"}
    assert all(m.marked and m.dot_color == MARKED_DOT_COLOR for m in marks.values())
    assert build_calendar_marks([]) == {}


def test_group_by_date_keeps_entry_order(make_exercise):
    squat = make_exercise("Squat", "weight_reps", "2024-01-02")
    bench = make_exercise("Bench", "weight_reps", "2024-01-01")
    row = make_exercise("Row", "weight_reps", "2024-01-02")
    grouped = group_by_date([squat, bench, row])
    assert list(grouped) == ["2024-01-02", "2024-01-01"]
    assert grouped["2024-01-02"] == [squat, row]


def test_agenda_with_rest_days(make_exercise):
    exercises = [
        make_exercise("Squat", "weight_reps", "2024-01-01", [{"weight": 100, "reps": 5}]),
        make_exercise("Bench", "weight_reps", "2024-01-03", [{"weight": 80, "reps": 5}]),
    ]
    page = build_agenda(exercises, days_to_show=30, show_rest_days=True, today="2024-01-03")
    assert [s.date for s in page.sections] == ["2024-01-03", "2024-01-02", "2024-01-01"]
    assert page.sections[1].data == []
    assert page.sections[0].title == "Wed, Jan 3, 2024"
    assert not page.has_more_data


def test_agenda_rest_days_run_up_to_today(make_exercise):
    exercises = [make_exercise("Squat", "weight_reps", "2024-01-01")]
    page = build_agenda(exercises, days_to_show=30, show_rest_days=True, today="2024-01-04")
    assert [s.date for s in page.sections] == ["2024-01-04", "2024-01-03", "2024-01-02", "2024-01-01"]


def test_agenda_without_rest_days(make_exercise):
    exercises = [
        make_exercise("Squat", "weight_reps", "2024-01-01"),
        make_exercise("Bench", "weight_reps", "2024-01-03"),
    ]
    page = build_agenda(exercises, days_to_show=30, show_rest_days=False, today="2024-01-10")
    assert [s.date for s in page.sections] == ["2024-01-03", "2024-01-01"]
    assert page.total_days == 2


def test_agenda_has_more_data_iff_longer_than_page(make_exercise):
    exercises = [make_exercise("Squat", "weight_reps", f"2024-01-{day:02d}") for day in range(1, 6)]
    page = build_agenda(exercises, days_to_show=5, show_rest_days=False)
    assert len(page.sections) == 5 and not page.has_more_data

    page = build_agenda(exercises, days_to_show=4, show_rest_days=False)
    assert [s.date for s in page.sections] == ["2024-01-05", "2024-01-04", "2024-01-03", "2024-01-02"]
    assert page.has_more_data

    page = build_agenda(exercises, days_to_show=5, show_rest_days=True, today="2024-01-06")
    assert page.has_more_data and page.total_days == 6


def test_agenda_empty():
    page = build_agenda([], days_to_show=30, show_rest_days=True, today="2024-01-03")
    assert page.sections == [] and not page.has_more_data


def test_agenda_does_not_mutate_input(make_exercise):
    exercises = [make_exercise("Squat", "weight_reps", "2024-01-01", [{"weight": 100, "reps": 5}])]
    before = [e.model_dump() for e in exercises]
    build_agenda(exercises, days_to_show=1, show_rest_days=True, today="2024-01-05")
    assert [e.model_dump() for e in exercises] == before


def test_chart_date_range():
    assert chart_date_range(ChartPeriod.WEEK, today="2024-01-10") == ("2024-01-03", "2024-01-10")
    assert chart_date_range(90, today="2024-04-01") == ("2024-01-02", "2024-04-01")
    assert chart_date_range(ChartPeriod.ALL_TIME, today="2024-01-01")[0] == "2014-01-03"


def test_summarize_day_weight_reps():
    point = summarize_day(
        "2024-01-01",
        [{"weight": 100, "reps": 5}, {"weight": 100, "reps": 8}, {"weight": 90, "reps": 10}],
        "weight_reps",
    )
    assert point.value == 100
    assert point.best_weight == 100
    assert point.best_reps == 10
    assert point.total_volume == 100 * 5 + 100 * 8 + 90 * 10
    assert point.set_count == 3


def test_summarize_day_faster_time_is_best():
    point = summarize_day("2024-01-01", [{"time": 60}, {"time": 48}, {"time": 55}], "time_speed")
    assert point.value == 48
    assert point.best_time == 48
    assert point.total_volume == 0

    point = summarize_day("2024-01-01", [{"time": 60}, {"time": 90}], "time_duration")
    assert point.best_time == 90


def test_chart_points_and_history(make_exercise):
    exercises = [
        make_exercise("Run", "distance_time", "2024-01-03", [{"distance": 5, "time": 1500}]),
        make_exercise("Run", "distance_time", "2024-01-01", [{"distance": 3, "time": 900}]),
        make_exercise("Run", "distance_time", "2024-01-02"),
    ]
    points = build_chart_points(exercises)
    assert [p.date for p in points] == ["2024-01-01", "2024-01-03"]
    assert [p.value for p in points] == [3, 5]
    assert metric_value(points[1], ChartMetric.BEST_DISTANCE) == 5
    assert metric_value(points[1], "bestTime") == 1500
    assert metric_value(points[1], ChartMetric.BEST_WEIGHT) == 0

    history = build_set_history(exercises)
    assert [h.date for h in history] == ["2024-01-01", "2024-01-03"]
    assert history[1].sets[0].distance == 5

    assert build_chart_points([]) == []


def test_chart_exercise_selection():
    selected = add_chart_exercise([], "Squat")
    selected = add_chart_exercise(selected, "Bench")
    assert [(e.name, e.color) for e in selected] == [("Squat", CHART_COLORS[0]), ("Bench", CHART_COLORS[1])]
    assert add_chart_exercise(selected, "Squat") == selected

    many = [ChartExercise(name=f"E{i}", color=CHART_COLORS[i]) for i in range(len(CHART_COLORS))]
    assert add_chart_exercise(many, "Extra")[-1].color == CHART_COLORS[0]

    assert [e.name for e in remove_chart_exercise(selected, "Squat")] == ["Bench"]
    assert remove_chart_exercise(selected, "Missing") == selected
