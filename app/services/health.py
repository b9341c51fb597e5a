import logging
import resource
import sys
from collections.abc import Awaitable, Callable
from pathlib import Path

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.schemas.health import HealthIndicatorSchema, HealthSchema
from app.services.errors import ServiceUnavailableError

logger = logging.getLogger(__name__)

RSS_THRESHOLD_BYTES = 300 * 1024 * 1024
STATM_PATH = Path("/proc/self/statm")

type HealthIndicator = Callable[[], Awaitable[HealthIndicatorSchema]]


def current_rss_bytes() -> int:
    """Current resident set size of the process.

    Read from ``/proc/self/statm`` (resident pages). Platforms without procfs
    fall back to the peak RSS reported by ``getrusage``.
    """
    try:
        resident_pages = int(STATM_PATH.read_text().split()[1])
    except OSError:
        usage = resource.getrusage(resource.RUSAGE_SELF).ru_maxrss
        # macOS reports bytes, Linux kilobytes
        return usage if sys.platform == "darwin" else usage * 1024
    return resident_pages * resource.getpagesize()


class HealthChecker:
    rss_threshold = RSS_THRESHOLD_BYTES

    def __init__(self, session: AsyncSession):
        self.session = session

    async def database(self) -> HealthIndicatorSchema:
        try:
            await self.session.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as exc:
            logger.warning("Database ping failed: %s", exc)
            return HealthIndicatorSchema(status="down", details={"message": str(exc)})
        return HealthIndicatorSchema(status="up")

    async def memory_rss(self) -> HealthIndicatorSchema:
        rss = current_rss_bytes()
        return HealthIndicatorSchema(
            status="up" if rss <= self.rss_threshold else "down",
            details={"rss": rss, "threshold": self.rss_threshold},
        )

    async def check(self, indicators: dict[str, HealthIndicator]) -> HealthSchema:
        results = {name: await indicator() for name, indicator in indicators.items()}
        info = {name: result for name, result in results.items() if result.status == "up"}
        error = {name: result for name, result in results.items() if result.status == "down"}
        health = HealthSchema(
            status="error" if error else "ok",
            info=info,
            error=error,
            details=results,
        )
        if error:
            raise ServiceUnavailableError(
                "Service health check failed",
                errors=[health.model_dump(mode="json")],
            )
        return health
