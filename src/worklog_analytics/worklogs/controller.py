from __future__ import annotations

from flask import Flask, request

from ..analytics.aggregation import parse_dimension
from ..auth.identity import require_identity
from ..common.responses import json_endpoint, ok
from ..container import Container
from .filters import apply_scope, compile_filters
from .model import WorkLogRow


def serialize_row(row: WorkLogRow) -> dict:
    r = row.record
    return {
        "id": r.worklog_id,
        "user_id": r.user_id,
        "date": r.work_date,
        "hours": r.hours,
        "project_id": r.project_id,
        "category_id": r.category_id,
        "details": r.details,
        "created_at": r.created_at,
        "updated_at": r.updated_at,
        "project": {"id": r.project_id, "name": row.project_name},
        "category": {"id": r.category_id, "name": row.category_name},
        "user": {"id": r.user_id, "name": row.user_display, "email": row.user_email},
    }


def register(app: Flask, container: Container) -> None:
    def scoped_filters(*, paginate: bool):
        identity = require_identity()
        # Shape is checked before the resolver touches the team store.
        filters = compile_filters(request.args, paginate=paginate)
        scope = container.scope_resolver.resolve(identity, request.args.get("scope"), filters.user_id)
        return apply_scope(filters, scope)

    @app.route("/api/work-logs", methods=["GET"], endpoint="api_worklogs_list")
    @json_endpoint("Failed to fetch work logs")
    def list_worklogs():
        filters = scoped_filters(paginate=True)
        page = container.query_service.retrieve(filters)
        return ok([serialize_row(r) for r in page.records], pagination=page.pagination)

    @app.route("/api/work-logs/aggregate", methods=["GET"], endpoint="api_worklogs_aggregate")
    @json_endpoint("Failed to aggregate work logs")
    def aggregate_worklogs():
        dimension = parse_dimension(request.args.get("dimension"))
        filters = scoped_filters(paginate=False)
        return ok(container.aggregation_engine.aggregate(filters, dimension))

    @app.route("/api/work-logs/export", methods=["GET"], endpoint="api_worklogs_export")
    @json_endpoint("Failed to export work logs")
    def export_worklogs():
        identity = require_identity()
        export = container.export_service.export(
            identity,
            date_from=request.args.get("from"),
            date_to=request.args.get("to"),
            scope=request.args.get("scope"),
            project_ids=request.args.get("projects"),
            category_ids=request.args.get("categories"),
            target_user_id=request.args.get("userId"),
        )
        return app.response_class(
            export.content,
            mimetype=export.mimetype,
            headers={"Content-Disposition": f'attachment; filename="{export.filename}"'},
        )
