from datetime import date

from resume_screener.experience import (
    calculate_years_of_experience,
    mentioned_years,
    merge_periods,
    total_months,
    years_from_periods,
)
from resume_screener.models import EmploymentPeriod


def period(start, end):
    return EmploymentPeriod.between(start, end)


def test_disjoint_periods_sum_individually():
    periods = [
        period(date(2013, 6, 1), date(2014, 12, 1)),
        period(date(2015, 1, 1), date(2018, 4, 1)),
        period(date(2018, 5, 1), date(2024, 1, 1)),
    ]
    assert total_months(periods) == sum(p.duration_months for p in periods) == 18 + 39 + 68


def test_nested_period_counts_once():
    outer = period(date(2015, 1, 1), date(2020, 1, 1))
    inner = period(date(2016, 3, 1), date(2017, 3, 1))
    assert total_months([inner, outer]) == outer.duration_months


def test_overlapping_periods_are_merged():
    merged = merge_periods([
        period(date(2019, 1, 1), date(2021, 1, 1)),
        period(date(2018, 1, 1), date(2019, 6, 1)),
    ])
    assert len(merged) == 1
    assert merged[0].start_date == date(2018, 1, 1)
    assert merged[0].end_date == date(2021, 1, 1)


def test_touching_periods_are_merged():
    merged = merge_periods([
        period(date(2018, 1, 1), date(2019, 1, 1)),
        period(date(2019, 1, 1), date(2020, 1, 1)),
    ])
    assert len(merged) == 1


def test_invalid_periods_are_ignored():
    assert merge_periods([None]) == []
    assert years_from_periods([]) == 0


def test_sample_resume_aggregates_to_ten_years(sample_cv, today):
    assert calculate_years_of_experience(sample_cv, today) == 10


def test_example_ranges_from_three_lines(today):
    text = "May 2018 - Present\nJan 2015 - Apr 2018\nJun 2013 - Dec 2014"
    assert calculate_years_of_experience(text, today) == 10


def test_concurrent_contracts_do_not_double_count(today):
    text = "Contractor A  Jan 2019 - Dec 2020\nContractor B  Jan 2019 - Dec 2020"
    assert calculate_years_of_experience(text, today) == 1


def test_stated_years_used_without_dates():
    assert mentioned_years("Engineer with 7+ years of experience in Java") == 7
    assert calculate_years_of_experience("Over 4 years experience building APIs") == 4


def test_no_dates_and_no_mention_is_zero():
    assert calculate_years_of_experience("Curious engineer who likes puzzles") == 0
    assert calculate_years_of_experience("") == 0


def test_ids_and_phone_numbers_are_not_experience():
    text = "Employee ID 0000-2019\nPhone +44 1234-5678\nPython dev"
    assert calculate_years_of_experience(text, date(2024, 1, 1)) == 0
