"""
Tests for merging metric aggregates into case records and the daily delta pass.
"""
from datetime import date, timedelta

import pytest

from covidtrack.core import DatasetStore
from covidtrack.core.exceptions import DatasetInvariantViolation
from covidtrack.data.processors import DatasetMerger, MetricAggregate
from covidtrack.domain import CaseRecord, Metric

D1 = date(2023, 1, 20)


def _aggregate(metric, values):
    dates = sorted({d for series in values.values() for d in series}, reverse=True)
    return MetricAggregate(metric=metric, dates=dates, values=values)


def _series(start, counts):
    return {start + timedelta(days=i): value for i, value in enumerate(counts)}


@pytest.fixture
def store():
    return DatasetStore()


@pytest.fixture
def merger(store):
    return DatasetMerger(store)


def test_active_is_floored_at_zero():
    record = CaseRecord(id=1, country_id=1, report_date=D1)
    record.set_counter(Metric.CONFIRMED, 100)
    record.set_counter(Metric.DEATHS, 80)
    record.set_counter(Metric.RECOVERED, 50)

    assert record.active == 0


def test_set_counter_rejects_negative():
    record = CaseRecord(id=1, country_id=1, report_date=D1)
    with pytest.raises(ValueError):
        record.set_counter(Metric.DEATHS, -1)


def test_metrics_merge_into_one_record(store, merger):
    merger.merge({
        Metric.CONFIRMED: _aggregate(Metric.CONFIRMED, {"France": {D1: 100}}),
        Metric.DEATHS: _aggregate(Metric.DEATHS, {"France": {D1: 10}}),
        Metric.RECOVERED: _aggregate(Metric.RECOVERED, {"France": {D1: 30}}),
    })

    records = store.list_cases()
    assert len(records) == 1
    record = records[0]
    assert (record.confirmed, record.deaths, record.recovered, record.active) == (100, 10, 30, 60)
    assert store.get_country(record.country_id).name == "France"


def test_reimport_overwrites_instead_of_summing(store, merger):
    aggregates = {Metric.CONFIRMED: _aggregate(Metric.CONFIRMED, {"Chile": {D1: 350}})}

    merger.merge(aggregates)
    merger.merge(aggregates)

    records = store.list_cases()
    assert len(records) == 1
    assert records[0].confirmed == 350
    assert records[0].id == 1


def test_reimport_with_new_value_is_last_write_wins(store, merger):
    merger.merge({Metric.CONFIRMED: _aggregate(Metric.CONFIRMED, {"Chile": {D1: 350}})})
    merger.merge({Metric.CONFIRMED: _aggregate(Metric.CONFIRMED, {"Chile": {D1: 340}})})

    assert store.list_cases()[0].confirmed == 340


def test_missing_recovered_leaves_zero(store, merger):
    merger.merge({
        Metric.CONFIRMED: _aggregate(Metric.CONFIRMED, {"Chile": _series(D1, [10, 20])}),
        Metric.DEATHS: _aggregate(Metric.DEATHS, {"Chile": _series(D1, [1, 2])}),
        Metric.RECOVERED: None,
    })

    records = store.list_cases()
    assert len(records) == 2
    assert all(r.recovered == 0 for r in records)
    assert [r.active for r in records] == [18, 9]


def test_country_identity_is_first_seen(store, merger):
    merger.merge({
        Metric.CONFIRMED: _aggregate(Metric.CONFIRMED, {"Chile": {D1: 1}, "Peru": {D1: 2}}),
        Metric.DEATHS: _aggregate(Metric.DEATHS, {"Peru": {D1: 0}, "Italy": {D1: 0}}),
    })

    ids = {c.name: c.id for c in store.list_countries()}
    assert ids == {"Chile": 1, "Peru": 2, "Italy": 3}

    merger.merge({Metric.DEATHS: _aggregate(Metric.DEATHS, {"Italy": {D1: 5}, "Spain": {D1: 1}})})
    ids = {c.name: c.id for c in store.list_countries()}
    assert ids == {"Chile": 1, "Peru": 2, "Italy": 3, "Spain": 4}
    assert store.get_country(4).code == "ES"


def test_daily_deltas(store, merger):
    merger.merge({
        Metric.CONFIRMED: _aggregate(Metric.CONFIRMED, {"France": _series(D1, [1000, 1500, 1200])}),
        Metric.DEATHS: _aggregate(Metric.DEATHS, {"France": _series(D1, [10, 25, 30])}),
    })

    records = sorted(store.list_cases_by_country_code("FR"), key=lambda r: r.report_date)
    assert [r.daily_confirmed for r in records] == [1000, 500, 0]
    assert [r.daily_deaths for r in records] == [10, 15, 5]


def test_first_record_delta_equals_its_counters(store, merger):
    merger.merge({
        Metric.CONFIRMED: _aggregate(Metric.CONFIRMED, {"Chile": {D1: 77}}),
        Metric.DEATHS: _aggregate(Metric.DEATHS, {"Chile": {D1: 3}}),
    })

    record = store.list_cases()[0]
    assert record.daily_confirmed == 77
    assert record.daily_deaths == 3


def test_deltas_are_recomputed_after_backfill(store, merger):
    merger.merge({Metric.CONFIRMED: _aggregate(Metric.CONFIRMED, {"Chile": _series(D1, [100, 150])})})
    first = store.list_cases_by_country_code("CH")[-1]
    assert first.daily_confirmed == 100

    # an older date arrives later: the former first record now has a predecessor
    merger.merge({Metric.CONFIRMED: _aggregate(Metric.CONFIRMED, {"Chile": {D1 - timedelta(days=1): 60}})})

    records = sorted(store.list_cases_by_country_code("CH"), key=lambda r: r.report_date)
    assert [r.daily_confirmed for r in records] == [60, 40, 50]


def test_deltas_are_per_country(store, merger):
    merger.merge({
        Metric.CONFIRMED: _aggregate(Metric.CONFIRMED, {
            "Chile": _series(D1, [10, 30]),
            "Peru": _series(D1, [5, 6]),
        }),
    })

    chile = sorted(store.list_cases_by_country_code("CH"), key=lambda r: r.report_date)
    peru = sorted(store.list_cases_by_country_code("PE"), key=lambda r: r.report_date)
    assert [r.daily_confirmed for r in chile] == [10, 20]
    assert [r.daily_confirmed for r in peru] == [5, 1]


def test_invariant_violation_is_raised(store, merger):
    merger.merge({Metric.CONFIRMED: _aggregate(Metric.CONFIRMED, {"Chile": {D1: 1}})})
    store.list_cases()[0].active = -1

    with pytest.raises(DatasetInvariantViolation):
        store.check_invariants()
