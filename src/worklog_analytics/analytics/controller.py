from __future__ import annotations

from typing import Optional

from flask import Flask, request

from ..auth.identity import require_identity
from ..common.datetime_utils import try_parse_iso_date
from ..common.responses import json_endpoint, ok
from ..common.validators import parse_int
from ..container import Container
from ..core.exceptions import ValidationError
from ..periods.boundaries import resolve_period


def _date_arg(name: str):
    raw = request.args.get(name)
    if raw is None or raw.strip() == "":
        return None
    value = try_parse_iso_date(raw)
    if value is None:
        raise ValidationError(f"Invalid date format for {name}", field=name)
    return value


def _period_args(default_period: str, tz) -> dict:
    args = {
        "period": request.args.get("period") or default_period,
        "start_date": _date_arg("startDate"),
        "end_date": _date_arg("endDate"),
    }
    # Raises for an unknown name or a bad custom range.
    resolve_period(args["period"], tz=tz, start_date=args["start_date"], end_date=args["end_date"])
    return args


def register(app: Flask, container: Container) -> None:
    def resolve_scope(identity, target: Optional[int]):
        return container.scope_resolver.resolve(identity, request.args.get("scope"), target)

    @app.route("/api/dashboard/personal", methods=["GET"], endpoint="api_dashboard_personal")
    @json_endpoint("Failed to fetch dashboard stats")
    def personal_dashboard():
        identity = require_identity()
        period = _period_args("today", container.org_tz)
        target = parse_int(request.args.get("userId"), "userId")

        scope = resolve_scope(identity, target)
        stats = container.stats_service.personal_stats(scope, **period)
        return ok(stats)

    @app.route("/api/dashboard/projects", methods=["GET"], endpoint="api_dashboard_projects")
    @json_endpoint("Failed to fetch project stats")
    def project_dashboard():
        identity = require_identity()
        period = _period_args("week", container.org_tz)
        target = parse_int(request.args.get("userId"), "userId")
        project_id = parse_int(request.args.get("projectId"), "projectId")

        scope = resolve_scope(identity, target)
        stats = container.stats_service.project_stats(scope, project_id=project_id, **period)
        return ok(stats)

    @app.route("/api/dashboard/team", methods=["GET"], endpoint="api_dashboard_team")
    @json_endpoint("Failed to fetch team stats")
    def team_dashboard():
        identity = require_identity()
        period = _period_args("week", container.org_tz)
        team_id = parse_int(request.args.get("teamId"), "teamId")

        team = container.team_service.resolve_team(identity, team_id)
        stats = container.stats_service.team_stats(team.member_ids, **period)
        return ok(
            {
                "team": {"id": team.team_id, "name": team.team_name, "member_count": team.member_count},
                "summary": stats.summary,
                "by_member": stats.by_member,
                "by_project": stats.by_project,
                "activity_status": stats.activity_status,
            }
        )
