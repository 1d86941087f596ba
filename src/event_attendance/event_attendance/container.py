from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.check_in import CheckInService
from .attendance.factory import VerdictStrategyFactory
from .attendance.finalizer import AttendanceFinalizer
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.tracker import PresenceTracker
from .biometrics.client import FaceVerificationClient, FaceVerifier
from .biometrics.mysql_biometric_repository import MySQLBiometricRepository
from .biometrics.repository import BiometricRepository
from .core.constants import (
    DEFAULT_FINALIZATION_SWEEP_SECONDS,
    DEFAULT_IDLE_RATIO,
    DEFAULT_PRESENT_RATIO,
    DEFAULT_STATUS_SWEEP_SECONDS,
)
from .database.bootstrap import as_db_config
from .database.connection import DatabaseConnection
from .directory.mysql_directory_repository import MySQLDirectoryRepository
from .directory.repository import DirectoryRepository
from .eligibility.resolver import EligibilityResolver
from .events.lifecycle import EventLifecycleService
from .events.mysql_event_repository import MySQLEventRepository
from .events.repository import EventRepository
from .jobs.periodic import Scheduler, build_lifecycle_scheduler
from .locations.mysql_location_repository import MySQLLocationRepository
from .locations.repository import LocationRepository


@dataclass(frozen=True)
class Container:
    events_repo: EventRepository
    locations_repo: LocationRepository
    attendance_repo: AttendanceRepository
    directory_repo: DirectoryRepository
    biometrics_repo: Optional[BiometricRepository]

    eligibility_resolver: EligibilityResolver
    presence_tracker: PresenceTracker
    check_in_service: CheckInService
    finalizer: AttendanceFinalizer
    lifecycle_service: EventLifecycleService
    scheduler: Scheduler


def wire_services(
    *,
    events_repo: EventRepository,
    locations_repo: LocationRepository,
    attendance_repo: AttendanceRepository,
    directory_repo: DirectoryRepository,
    biometrics_repo: Optional[BiometricRepository] = None,
    face_verifier: Optional[FaceVerifier] = None,
    present_ratio: float = DEFAULT_PRESENT_RATIO,
    idle_ratio: float = DEFAULT_IDLE_RATIO,
    status_sweep_seconds: float = DEFAULT_STATUS_SWEEP_SECONDS,
    finalization_sweep_seconds: float = DEFAULT_FINALIZATION_SWEEP_SECONDS,
) -> Container:
    """Build the service graph over any set of repositories."""
    resolver = EligibilityResolver(directory_repo)
    tracker = PresenceTracker(events_repo, locations_repo, attendance_repo)
    check_in = CheckInService(
        events_repo,
        locations_repo,
        attendance_repo,
        resolver,
        biometrics=biometrics_repo,
        face_verifier=face_verifier,
    )
    finalizer = AttendanceFinalizer(
        attendance_repo,
        resolver,
        strategy_factory=VerdictStrategyFactory(present_ratio=present_ratio, idle_ratio=idle_ratio),
    )
    lifecycle = EventLifecycleService(events_repo, finalizer)
    scheduler = build_lifecycle_scheduler(
        lifecycle,
        status_interval=status_sweep_seconds,
        finalization_interval=finalization_sweep_seconds,
    )

    return Container(
        events_repo=events_repo,
        locations_repo=locations_repo,
        attendance_repo=attendance_repo,
        directory_repo=directory_repo,
        biometrics_repo=biometrics_repo,
        eligibility_resolver=resolver,
        presence_tracker=tracker,
        check_in_service=check_in,
        finalizer=finalizer,
        lifecycle_service=lifecycle,
        scheduler=scheduler,
    )


def build_container(
    *,
    db_config: dict,
    face_service_url: Optional[str] = None,
    face_service_timeout: float = 10.0,
    present_ratio: float = DEFAULT_PRESENT_RATIO,
    idle_ratio: float = DEFAULT_IDLE_RATIO,
    status_sweep_seconds: float = DEFAULT_STATUS_SWEEP_SECONDS,
    finalization_sweep_seconds: float = DEFAULT_FINALIZATION_SWEEP_SECONDS,
) -> Container:
    conn = DatabaseConnection.get_instance(as_db_config(db_config))

    face_verifier = FaceVerificationClient(face_service_url, timeout=face_service_timeout) if face_service_url else None

    return wire_services(
        events_repo=MySQLEventRepository(conn),
        locations_repo=MySQLLocationRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        directory_repo=MySQLDirectoryRepository(conn),
        biometrics_repo=MySQLBiometricRepository(conn),
        face_verifier=face_verifier,
        present_ratio=present_ratio,
        idle_ratio=idle_ratio,
        status_sweep_seconds=status_sweep_seconds,
        finalization_sweep_seconds=finalization_sweep_seconds,
    )
