from __future__ import annotations

from dataclasses import dataclass
from .analytics.aggregation import AggregationEngine
from .analytics.service import StatsService
from .common.datetime_utils import org_timezone as load_timezone
from .database.connection import DBConfig, DatabaseConnection
from .exports.service import CsvExportService
from .scopes.service import ScopeResolver
from .teams.mysql_team_repository import MySQLTeamRepository
from .teams.repository import TeamRepository
from .teams.service import TeamMembershipService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .worklogs.mysql_worklog_repository import MySQLWorkLogRepository
from .worklogs.repository import WorkLogRepository
from .worklogs.service import WorkLogQueryService


@dataclass(frozen=True)
class Container:
    org_tz: object

    worklogs_repo: WorkLogRepository
    teams_repo: TeamRepository
    users_repo: UserRepository

    team_service: TeamMembershipService
    scope_resolver: ScopeResolver
    query_service: WorkLogQueryService
    aggregation_engine: AggregationEngine
    stats_service: StatsService
    export_service: CsvExportService


def wire_container(
    *,
    worklogs_repo: WorkLogRepository,
    teams_repo: TeamRepository,
    users_repo: UserRepository,
    org_timezone: str,
) -> Container:
    org_tz = load_timezone(org_timezone)

    team_service = TeamMembershipService(teams_repo)
    scope_resolver = ScopeResolver(team_service)
    query_service = WorkLogQueryService(worklogs_repo)
    aggregation_engine = AggregationEngine(worklogs_repo)
    stats_service = StatsService(aggregation_engine, query_service, worklogs_repo, users_repo, tz=org_tz)
    export_service = CsvExportService(query_service, scope_resolver)

    return Container(
        org_tz=org_tz,
        worklogs_repo=worklogs_repo,
        teams_repo=teams_repo,
        users_repo=users_repo,
        team_service=team_service,
        scope_resolver=scope_resolver,
        query_service=query_service,
        aggregation_engine=aggregation_engine,
        stats_service=stats_service,
        export_service=export_service,
    )


def build_container(*, db_config: dict, org_timezone: str) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_settings(db_config))

    return wire_container(
        worklogs_repo=MySQLWorkLogRepository(conn),
        teams_repo=MySQLTeamRepository(conn),
        users_repo=MySQLUserRepository(conn),
        org_timezone=org_timezone,
    )
