import unittest
from datetime import date

from covstat.models import FilterCriteria, CountryTotals, ALL_COUNTRIES, per_1000
from covstat.names import clean_country_name
from covstat.normalize import normalize, parse_date_rep, MalformedDateError
from covstat.aggregate import compute_lifetime_totals, aggregate, daily_series, TotalsLookupError
from covstat.filters import filter_records, DateRangeError
from covstat.indices import build_indices, select_ids, date_range_ids

from tests.helpers import raw, sample_raw


class TestNormalize(unittest.TestCase):
    def test_parse_is_day_first(self):
        assert parse_date_rep("02/01/2020") == date(2020, 1, 2)
        assert parse_date_rep("31/12/2019") == date(2019, 12, 31)
        assert parse_date_rep(" 1/2/2020 ") == date(2020, 2, 1)

    def test_parse_rejects_malformed(self):
        for bad in ("2020-01-02", "01/2020", "1/2/3/4", "", "aa/bb/cccc", "31/02/2020",
                    "01/01/20", "+1/01/2020", "1_0/01/2020", "01/01/ 2020", "01/01/02020"):
            with self.assertRaises(MalformedDateError):
                parse_date_rep(bad)

    def test_one_to_one(self):
        data = sample_raw()
        out = normalize(data)
        assert len(out) == len(data)
        assert [r.country for r in out] == [r.country for r in data]

    def test_rates(self):
        r = normalize([raw("X", "01/01/2020", 10, 1, 1000)])[0]
        assert r.cases_per_1000 == 10.0
        assert r.deaths_per_1000 == 1.0

    def test_zero_or_absent_population_gives_zero_rate(self):
        out = normalize([raw("X", "01/01/2020", 10, 1, 0), raw("Y", "01/01/2020", 10, 1, None)])
        assert [(r.cases_per_1000, r.deaths_per_1000) for r in out] == [(0.0, 0.0), (0.0, 0.0)]
        assert per_1000(5, float("nan")) == 0.0

    def test_bad_row_rejects_whole_load(self):
        with self.assertRaises(MalformedDateError) as ctx:
            normalize([raw("X", "01/01/2020", 1, 0), raw("Y", "2020/01/02", 1, 0)])
        assert "Row 1" in str(ctx.exception)


class TestAggregate(unittest.TestCase):
    def setUp(self):
        self.records = normalize([
            raw("X", "01/01/2020", 10, 1, 1000),
            raw("X", "02/01/2020", 5, 0, 1000),
        ])
        self.totals = compute_lifetime_totals(self.records)

    def test_unfiltered_scenario(self):
        rows = aggregate(self.records, self.totals)
        assert len(rows) == 1
        row = rows[0]
        assert (row.cases, row.deaths, row.total_cases, row.total_deaths) == (15, 1, 15, 1)
        assert row.cases_per_1000 == 15.0
        assert row.deaths_per_1000 == 1.0

    def test_filtered_keeps_lifetime_totals(self):
        crit = FilterCriteria(start=date(2020, 1, 2), end=date(2020, 1, 2))
        rows = aggregate(filter_records(self.records, crit), self.totals)
        assert (rows[0].cases, rows[0].deaths) == (5, 0)
        assert (rows[0].total_cases, rows[0].total_deaths) == (15, 1)

    def test_totals_are_read_only(self):
        with self.assertRaises(TypeError):
            self.totals["X"] = CountryTotals(0, 0)

    def test_totals_match_sums(self):
        records = normalize(sample_raw())
        totals = compute_lifetime_totals(records)
        for country, t in totals.items():
            assert t.total_cases == sum(r.cases for r in records if r.country == country)
            assert t.total_deaths == sum(r.deaths for r in records if r.country == country)

    def test_first_appearance_order(self):
        records = normalize(sample_raw())
        rows = aggregate(records, compute_lifetime_totals(records))
        assert [r.country for r in rows] == ["France", "Germany", "Francelandia", "United_States_of_America"]

    def test_lookup_miss_is_signalled(self):
        with self.assertRaises(TotalsLookupError):
            aggregate(self.records, {})

    def test_idempotent(self):
        records = normalize(sample_raw())
        totals = compute_lifetime_totals(records)
        first = aggregate(filter_records(records, FilterCriteria()), totals)
        second = aggregate(filter_records(records, FilterCriteria()), totals)
        assert first == second

    def test_daily_series(self):
        series = daily_series(normalize(sample_raw()))
        assert series == [
            (date(2020, 1, 1), 14, 1),
            (date(2020, 1, 2), 9, 2),
            (date(2020, 1, 3), 28, 9),
        ]


class TestFilters(unittest.TestCase):
    def setUp(self):
        self.records = normalize(sample_raw())
        self.idx = build_indices(self.records)

    def _countries(self, crit):
        return sorted({r.country for r in filter_records(self.records, crit)})

    def test_country_substring_case_insensitive(self):
        assert self._countries(FilterCriteria(country="franc")) == ["France", "Francelandia"]

    def test_country_matches_display_name(self):
        assert self._countries(FilterCriteria(country="states of")) == ["United_States_of_America"]

    def test_all_countries(self):
        assert len(filter_records(self.records, FilterCriteria(country=ALL_COUNTRIES))) == len(self.records)
        assert len(filter_records(self.records, FilterCriteria(country=""))) == len(self.records)

    def test_date_bounds_inclusive(self):
        crit = FilterCriteria(start=date(2020, 1, 2), end=date(2020, 1, 3))
        out = filter_records(self.records, crit)
        assert {r.date for r in out} == {date(2020, 1, 2), date(2020, 1, 3)}

    def test_one_sided_range_is_a_validation_error(self):
        with self.assertRaises(DateRangeError) as ctx:
            filter_records(self.records, FilterCriteria(start=date(2020, 1, 2)))
        assert str(ctx.exception) == "Please select end date"
        with self.assertRaises(DateRangeError) as ctx:
            filter_records(self.records, FilterCriteria(end=date(2020, 1, 2)))
        assert str(ctx.exception) == "Please select start date"

    def test_inverted_range(self):
        with self.assertRaises(DateRangeError):
            filter_records(self.records, FilterCriteria(start=date(2020, 1, 3), end=date(2020, 1, 1)))

    def test_empty_result_is_fine(self):
        assert filter_records(self.records, FilterCriteria(country="atlantis")) == []

    def test_indexed_path_agrees_with_scan(self):
        cases = [
            FilterCriteria(),
            FilterCriteria(country="franc"),
            FilterCriteria(country="GERMANY", start=date(2020, 1, 2), end=date(2020, 1, 3)),
            FilterCriteria(start=date(2020, 1, 1), end=date(2020, 1, 1)),
            FilterCriteria(country="nowhere"),
        ]
        for crit in cases:
            ids = select_ids(self.idx, len(self.records), crit)
            assert [self.records[i] for i in ids] == filter_records(self.records, crit)

    def test_date_range_ids_open_bounds(self):
        assert date_range_ids(self.idx, None, None) == list(range(len(self.records)))
        assert date_range_ids(self.idx, date(2020, 1, 3), None) == [4, 5]
        assert date_range_ids(self.idx, None, date(2020, 1, 1)) == [0, 1]

    def test_clean_country_name(self):
        assert clean_country_name("United_States_of_America") == "United States of America"
        assert clean_country_name("  Cases_on_an__international ") == "Cases on an international"
