"""
Health checks report whether a running component, e.g., an auction and its escrow, is in a consistent state.

A check signals its status by what `execute` raises: nothing for GREEN, `YellowHealthCheck` for YELLOW, and
`RedHealthCheck` or any other exception for RED.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timedelta, UTC
from enum import IntEnum, auto


class HealthCheckStatus(IntEnum):
    """
    Ordered from healthy to unhealthy
    """

    # healthy
    GREEN = auto()

    # functioning but requires attention, e.g., an administrative pause is in effect
    YELLOW = auto()

    # unhealthy, e.g., custodied funds no longer cover outstanding claims
    RED = auto()


class HealthCheckImpact(IntEnum):
    """
    Used to indicate the impact of health check failures in the context of the application or system.

    The impact can be used to prioritize healthcheck failures. For example, the priority order would be
        RED, HIGH
        RED, MEDIUM
        RED, LOW
        YELLOW, HIGH
        YELLOW, MEDIUM
        YELLOW, LOW
    """

    HIGH = auto()
    MEDIUM = auto()
    LOW = auto()


class YellowHealthCheck(Exception):
    """
    Indicates HealthCheck is in a YELLOW state
    """


class RedHealthCheck(Exception):
    """
    Indicates HealthCheck is in a RED state
    """


@dataclass(slots=True)
class HealthCheckResult:
    """
    Outcome of a single health check run. `error` is set for YELLOW and RED results.
    """

    # HealthCheck.name
    name: str

    status: HealthCheckStatus

    # when the health check was run
    timestamp: datetime
    # how long it took to run the health check
    duration: timedelta

    error: Exception | None = None


@dataclass(slots=True)
class HealthCheck(ABC):
    """
    Calling the health check runs `execute` and records the outcome as `last_result`.
    Exceptions raised by `execute` are mapped to a status and never propagate to the caller.
    """

    name: str

    # used to categorize healthchecks, e.g. accounting, custody
    tags: set[str]
    description: str

    impact: HealthCheckImpact

    last_result: HealthCheckResult | None = field(default=None, init=False)

    def __call__(self) -> HealthCheckResult:
        start = datetime.now(UTC)
        try:
            self.execute()
            self.last_result = HealthCheckResult(
                name=self.name,
                status=HealthCheckStatus.GREEN,
                timestamp=start,
                duration=datetime.now(UTC) - start,
            )
        except YellowHealthCheck as err:
            self.last_result = HealthCheckResult(
                name=self.name,
                status=HealthCheckStatus.YELLOW,
                timestamp=start,
                duration=datetime.now(UTC) - start,
                error=err,
            )
        except Exception as err:  # pylint: disable=broad-exception-caught
            self.last_result = HealthCheckResult(
                name=self.name,
                status=HealthCheckStatus.RED,
                timestamp=start,
                duration=datetime.now(UTC) - start,
                error=err,
            )
        return self.last_result

    @abstractmethod
    def execute(self):
        """
        Execute the health check

        :exception YellowHealthCheck: indicates healthcheck current status is `YELLOW`
        :exception RedHealthCheck: indicates healthcheck current status is `RED`
        :exception Exception: any other exception is treated as `RED`
        """
