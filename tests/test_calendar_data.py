"""Tests for CalendarDataService refresh, pagination and chart selection."""

import asyncio

import pytest

from liftlog.core.constants import CHART_EXERCISES_KEY, DEFAULT_DAYS_TO_SHOW
from liftlog.core.enums import ChartPeriod, ViewMode
from liftlog.services.calendar_data import CalendarDataService
from liftlog.services.preferences import PreferenceManager

TODAY = "2024-01-10"


@pytest.fixture
def exercises(make_exercise):
    return [
        make_exercise("Squat", "weight_reps", "2024-01-02", [{"weight": 100, "reps": 5}]),
        make_exercise("Squat", "weight_reps", "2024-01-09", [{"weight": 110, "reps": 3}]),
        make_exercise("Run", "distance_time", "2024-01-05", [{"distance": 5, "time": 1500}]),
        make_exercise("Bench", "weight_reps", "2023-10-01", [{"weight": 60, "reps": 8}]),
    ]


@pytest.fixture
def service(storage_factory, exercises, preference_store):
    storage = storage_factory(exercises)
    preferences = PreferenceManager(preference_store)
    return CalendarDataService(storage, preferences, today=lambda: TODAY)


@pytest.mark.asyncio
async def test_refresh_builds_snapshot(service):
    snapshot = await service.refresh()

    assert snapshot.generation == 1
    assert snapshot.current_month == TODAY
    # Marks cover Dec through Feb around January
    assert set(snapshot.marked_dates) == {"2024-01-02", "2024-01-05", "2024-01-09"}
    assert [s.date for s in snapshot.agenda.sections] == ["2024-01-09", "2024-01-05", "2024-01-02", "2023-10-01"]
    assert [e.name for e in snapshot.available_exercises] == ["Bench", "Run", "Squat"]
    assert snapshot.days_to_show == DEFAULT_DAYS_TO_SHOW
    assert snapshot.chart.points == {}


@pytest.mark.asyncio
async def test_rest_days_toggle_fills_gaps(service):
    snapshot = await service.set_show_rest_days(True)
    dates = [s.date for s in snapshot.agenda.sections]
    assert dates[0] == TODAY
    assert len(dates) == DEFAULT_DAYS_TO_SHOW
    assert snapshot.agenda.has_more_data

    more = await service.load_more()
    assert more.days_to_show == DEFAULT_DAYS_TO_SHOW + 30
    assert len(more.agenda.sections) == DEFAULT_DAYS_TO_SHOW + 30

    snapshot = await service.toggle_rest_days()
    assert not snapshot.show_rest_days


@pytest.mark.asyncio
async def test_load_more_without_more_data_is_a_no_op(service):
    await service.refresh()
    snapshot = await service.load_more()
    assert snapshot.days_to_show == DEFAULT_DAYS_TO_SHOW
    assert service.days_to_show == DEFAULT_DAYS_TO_SHOW


@pytest.mark.asyncio
async def test_chart_selection_loads_series(service, preference_store):
    await service.add_chart_exercise("Squat")
    snapshot = await service.add_chart_exercise("Run")

    assert [e.name for e in snapshot.selected_exercises] == ["Squat", "Run"]
    assert [p.value for p in snapshot.chart.points["Squat"]] == [100, 110]
    assert [h.date for h in snapshot.chart.history["Run"]] == ["2024-01-05"]

    snapshot = await service.set_chart_period(ChartPeriod.WEEK)
    assert [p.date for p in snapshot.chart.points["Squat"]] == ["2024-01-09"]

    snapshot = await service.remove_chart_exercise("Squat")
    assert list(snapshot.chart.points) == ["Run"]

    snapshot = await service.clear_chart_exercises()
    assert snapshot.chart.points == {} and snapshot.selected_exercises == []

    await service._preferences.flush()
    assert preference_store.values[CHART_EXERCISES_KEY] == []


@pytest.mark.asyncio
async def test_duplicate_chart_exercise_is_ignored(service):
    first = await service.add_chart_exercise("Squat")
    again = await service.add_chart_exercise("Squat")
    assert again is first


@pytest.mark.asyncio
async def test_chart_fetches_run_one_exercise_at_a_time(service):
    await service.add_chart_exercise("Squat")
    await service.add_chart_exercise("Run")
    service._storage.calls.clear()

    await service.refresh()
    chart_calls = [c for c in service._storage.calls if ":" in c]
    assert chart_calls == ["chart:Squat", "history:Squat", "chart:Run", "history:Run"]


@pytest.mark.asyncio
async def test_storage_error_keeps_previous_snapshot(service, caplog):
    good = await service.refresh()
    service._storage.fail = True

    with caplog.at_level("ERROR"):
        snapshot = await service.refresh()

    assert snapshot is good
    assert service.snapshot is good
    assert "Calendar refresh 2 failed" in caplog.text


@pytest.mark.asyncio
async def test_storage_error_on_first_refresh_leaves_empty_snapshot(service):
    service._storage.fail = True
    snapshot = await service.refresh()
    assert snapshot.generation == 0
    assert snapshot.agenda.sections == []


@pytest.mark.asyncio
async def test_superseded_refresh_is_discarded(service, make_exercise):
    service._storage.delay = 0.05
    slow = asyncio.create_task(service.refresh())
    await asyncio.sleep(0.01)

    # A newer refresh starts (and finishes) while the first is still waiting on storage
    service._storage.delay = 0
    service._storage.exercises.append(make_exercise("Deadlift", "weight_reps", "2024-01-10"))
    fresh = await service.refresh()

    stale_result = await slow
    assert fresh.generation == 2
    assert stale_result is fresh
    assert service.snapshot.generation == 2
    assert service.snapshot.agenda.sections[0].date == "2024-01-10"


@pytest.mark.asyncio
async def test_inputs_fall_back_to_today(service):
    snapshot = await service.set_selected_date("garbage")
    assert snapshot.selected_date == TODAY

    snapshot = await service.set_current_month("2023-10-15")
    assert snapshot.current_month == "2023-10-15"
    assert set(snapshot.marked_dates) == {"2023-10-01"}

    snapshot = await service.set_current_month("2023-02-29")
    assert snapshot.current_month == TODAY


@pytest.mark.asyncio
async def test_view_mode_is_reflected(service):
    snapshot = await service.set_view_mode(ViewMode.CHARTS)
    assert snapshot.view_mode is ViewMode.CHARTS


@pytest.mark.asyncio
async def test_superseded_refresh_failure_is_not_reported_as_error(service, caplog):
    calls = 0
    get_used = service._storage.get_used_exercises

    async def fail_first_call():
        nonlocal calls
        calls += 1
        if calls == 1:
            await asyncio.sleep(0.05)
            raise OSError("storage unavailable")
        return await get_used()

    service._storage.get_used_exercises = fail_first_call

    with caplog.at_level("DEBUG"):
        slow = asyncio.create_task(service.refresh())
        await asyncio.sleep(0.01)
        fresh = await service.refresh()
        assert await slow is fresh

    assert not [r for r in caplog.records if r.levelname == "ERROR"]
    assert "Calendar refresh 1 failed after being superseded" in caplog.text
