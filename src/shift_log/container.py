from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .access.auth import AuthVerifier, JWTAuthVerifier
from .access.policy import AccessPolicy
from .common.datetime_utils import resolve_timezone
from .database.connection import DBConfig, DatabaseConnection
from .facility.mysql_facility_repository import MySQLFacilityRepository
from .facility.repository import FacilityRepository
from .facility.service import FacilitySettings, default_location_from_settings
from .operations import ShiftLogOperations
from .shifts.mysql_shift_repository import MySQLShiftRepository
from .shifts.repository import ShiftRepository
from .shifts.service import ShiftLedger
from .stats.service import StatsAggregator
from .workers.mysql_worker_repository import MySQLWorkerRepository
from .workers.repository import WorkerRepository
from .workers.service import WorkerService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    workers_repo: WorkerRepository
    shifts_repo: ShiftRepository
    facility_repo: FacilityRepository

    auth_verifier: AuthVerifier
    worker_service: WorkerService
    facility_settings: FacilitySettings
    ledger: ShiftLedger
    stats: StatsAggregator
    operations: ShiftLogOperations


def assemble(
    *,
    conn: Optional[DatabaseConnection],
    workers_repo: WorkerRepository,
    shifts_repo: ShiftRepository,
    facility_repo: FacilityRepository,
    auth_verifier: AuthVerifier,
    settings,
) -> Container:
    """Wire services over the given repositories (real or in-memory)."""
    tz = resolve_timezone(getattr(settings, "TIMEZONE", "UTC"))

    worker_service = WorkerService(workers_repo)
    facility_settings = FacilitySettings(facility_repo, default=default_location_from_settings(settings))
    ledger = ShiftLedger(
        shifts_repo,
        facility_settings,
        require_location=bool(getattr(settings, "REQUIRE_LOCATION", False)),
    )
    stats = StatsAggregator(shifts_repo, worker_service, tz=tz)
    operations = ShiftLogOperations(
        policy=AccessPolicy(),
        workers=worker_service,
        ledger=ledger,
        stats=stats,
        facility=facility_settings,
        tz=tz,
    )

    return Container(
        conn=conn,
        workers_repo=workers_repo,
        shifts_repo=shifts_repo,
        facility_repo=facility_repo,
        auth_verifier=auth_verifier,
        worker_service=worker_service,
        facility_settings=facility_settings,
        ledger=ledger,
        stats=stats,
        operations=operations,
    )


def build_container(*, settings) -> Container:
    db_config = dict(getattr(settings, "DB_CONFIG"))
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
        connect_timeout=int(getattr(settings, "DB_CONNECT_TIMEOUT", 5)),
        retry_attempts=int(getattr(settings, "STORE_RETRY_ATTEMPTS", 3)),
        retry_backoff=float(getattr(settings, "STORE_RETRY_BACKOFF", 0.2)),
    )
    conn = DatabaseConnection.get_instance(config)

    verifier = JWTAuthVerifier(
        getattr(settings, "JWT_SECRET", ""),
        algorithm=getattr(settings, "JWT_ALGORITHM", "HS256"),
        audience=getattr(settings, "JWT_AUDIENCE", None),
        issuer=getattr(settings, "JWT_ISSUER", None),
        role_claim=getattr(settings, "JWT_ROLE_CLAIM", "role"),
    )

    return assemble(
        conn=conn,
        workers_repo=MySQLWorkerRepository(conn),
        shifts_repo=MySQLShiftRepository(conn),
        facility_repo=MySQLFacilityRepository(conn),
        auth_verifier=verifier,
        settings=settings,
    )
