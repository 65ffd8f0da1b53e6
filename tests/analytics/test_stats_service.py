from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest
from conftest import make_log

from worklog_analytics.core.exceptions import ValidationError
from worklog_analytics.scopes.model import SingleUser, Unscoped


@pytest.fixture
def march_logs(worklogs_repo):
    return worklogs_repo.add(
        make_log(1, 1, date(2024, 3, 1), "2.00", project_id=1, category_id=1),
        make_log(2, 1, date(2024, 3, 1), "1.00", project_id=2, category_id=2),
        make_log(3, 1, date(2024, 3, 14), "3.00", project_id=1, category_id=1),
        make_log(4, 1, date(2024, 2, 28), "5.00", project_id=1, category_id=1),
        make_log(5, 2, date(2024, 3, 5), "4.00", project_id=2, category_id=1),
    )


def test_personal_month_cards_use_weekly_and_daily_averages(container, march_logs, fixed_now):
    stats = container.stats_service.personal_stats(SingleUser(1), "month", now=fixed_now)

    card1, card2, card3 = (stats.summary[k] for k in ("card1", "card2", "card3"))
    assert card1["total_hours"] == Decimal("6.00")
    # 31 days -> 5 weeks, 2 days with logs
    assert card2["total_hours"] == Decimal("1.20")
    assert card3["total_hours"] == Decimal("3.00")
    assert card1["log_count"] == 3
    assert (card1["period_start"], card1["period_end"]) == (date(2024, 3, 1), date(2024, 3, 31))


def test_personal_week_cards_all_show_period_total(container, march_logs, fixed_now):
    stats = container.stats_service.personal_stats(SingleUser(1), "week", now=fixed_now)

    totals = {stats.summary[k]["total_hours"] for k in ("card1", "card2", "card3")}
    assert totals == {Decimal("3.00")}


def test_personal_breakdowns_and_trend(container, march_logs, fixed_now):
    stats = container.stats_service.personal_stats(SingleUser(1), "month", now=fixed_now)

    assert [(p["project_name"], p["total_hours"]) for p in stats.by_project] == [
        ("Alpha", Decimal("5.00")),
        ("Beta", Decimal("1.00")),
    ]
    assert stats.by_project[0]["percentage"] == pytest.approx(83.333, abs=0.001)
    assert [c["category_name"] for c in stats.by_category] == ["Dev", "Review"]
    assert stats.trend["daily"] == [
        {"date": date(2024, 3, 1), "total_hours": Decimal("3.00")},
        {"date": date(2024, 3, 14), "total_hours": Decimal("3.00")},
    ]
    assert stats.by_user == []


def test_recent_logs_are_not_limited_to_the_period(container, march_logs, fixed_now):
    stats = container.stats_service.personal_stats(SingleUser(1), "today", now=fixed_now)

    assert stats.summary["card1"]["total_hours"] == Decimal("0")
    assert [r["id"] for r in stats.recent_logs] == [3, 2, 1, 4]
    assert stats.recent_logs[0]["project_name"] == "Alpha"


def test_unscoped_personal_stats_include_per_user_breakdown(container, march_logs, fixed_now):
    stats = container.stats_service.personal_stats(Unscoped(), "month", now=fixed_now)

    assert [(u["user_name"], u["total_hours"]) for u in stats.by_user] == [
        ("Alice", Decimal("6.00")),
        ("bob@example.com", Decimal("4.00")),
    ]


def test_custom_period_needs_dates(container, fixed_now):
    with pytest.raises(ValidationError):
        container.stats_service.personal_stats(SingleUser(1), "custom", now=fixed_now)


def test_project_stats_per_project_breakdown(container, march_logs, fixed_now):
    stats = container.stats_service.project_stats(Unscoped(), "month", now=fixed_now)

    assert stats.summary == {"total_projects": 2, "total_hours": Decimal("10.00"), "total_logs": 4}
    alpha, beta = stats.projects
    assert (alpha["project_name"], alpha["member_count"]) == ("Alpha", 1)
    assert (beta["project_name"], beta["member_count"]) == ("Beta", 2)
    assert [m["user_id"] for m in beta["by_member"]] == [2, 1]
    assert beta["trend"]["daily"][0]["date"] == date(2024, 3, 1)


def test_project_stats_can_focus_one_project(container, march_logs, fixed_now):
    stats = container.stats_service.project_stats(Unscoped(), "month", project_id=2, now=fixed_now)

    assert [p["project_id"] for p in stats.projects] == [2]


@pytest.fixture
def team_week_logs(worklogs_repo):
    return worklogs_repo.add(
        make_log(1, 1, date(2024, 3, 14), "3.00", project_id=1),
        make_log(2, 1, date(2024, 3, 15), "2.00", project_id=2),
        make_log(3, 2, date(2024, 3, 12), "1.00", project_id=1),
        make_log(4, 3, date(2024, 3, 1), "2.00", project_id=1),
    )


def test_team_summary_averages_over_all_members(container, team_week_logs, fixed_now):
    stats = container.stats_service.team_stats([1, 2, 3], "week", now=fixed_now)

    assert stats.summary["total_hours"] == Decimal("6.00")
    assert stats.summary["average_hours_per_member"] == Decimal("2.00")
    assert stats.summary["total_logs"] == 3
    assert stats.by_member[0]["user_id"] == 1
    assert stats.by_member[0]["working_days"] == 2
    assert stats.by_member[0]["last_log_date"] == date(2024, 3, 15)
    assert [(p["project_name"], p["member_count"]) for p in stats.by_project] == [("Alpha", 2), ("Beta", 1)]


def test_team_activity_is_relative_to_now(container, team_week_logs, fixed_now):
    stats = container.stats_service.team_stats([1, 2, 3], "lastMonth", now=fixed_now)

    activity = {a["user_id"]: a for a in stats.activity_status}
    assert (activity[1]["has_log_today"], activity[1]["has_log_this_week"]) == (True, True)
    assert (activity[2]["has_log_today"], activity[2]["has_log_this_week"]) == (False, True)
    assert (activity[3]["has_log_today"], activity[3]["has_log_this_week"]) == (False, False)
    assert activity[3]["last_log_date"] == date(2024, 3, 1)


def test_team_member_without_profile_is_unknown(container, team_week_logs, fixed_now):
    stats = container.stats_service.team_stats([1, 42], "week", now=fixed_now)

    unknown = [a for a in stats.activity_status if a["user_id"] == 42][0]
    assert unknown["user_name"] == "Unknown"
    assert unknown["last_log_date"] is None
    assert stats.summary["average_hours_per_member"] == Decimal("2.50")


def test_team_stats_need_members(container, fixed_now):
    with pytest.raises(ValidationError):
        container.stats_service.team_stats([], "week", now=fixed_now)
