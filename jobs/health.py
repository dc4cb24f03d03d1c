"""
Health check server for the distribution scheduler.

Reports whether the scheduler is running and when the daily distribution
job fires next.
"""

import asyncio

from aiohttp import web
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from loguru import logger

# Global scheduler reference for health checks
_scheduler: AsyncIOScheduler | None = None


def set_scheduler(scheduler: AsyncIOScheduler | None) -> None:
    """
    Register the scheduler instance for health checks.

    Args:
        scheduler: Scheduler to monitor, None to unregister
    """
    global _scheduler
    _scheduler = scheduler
    logger.info("Scheduler registered for health checks")


def _job_info(scheduler: AsyncIOScheduler) -> list[dict]:
    return [
        {
            "id": job.id,
            "name": job.name,
            "next_run_time": job.next_run_time.isoformat() if job.next_run_time else None,
        }
        for job in scheduler.get_jobs()
    ]


async def health_handler(request: web.Request) -> web.Response:
    """
    Health endpoint.

    Returns:
        JSON with scheduler state and scheduled distribution jobs
    """
    if _scheduler is None:
        return web.json_response(
            {"status": "unhealthy", "error": "Scheduler not initialized"},
            status=503,
        )

    try:
        jobs = _job_info(_scheduler)
    except Exception as e:
        logger.error(f"Health check failed: {e}")
        return web.json_response(
            {"status": "unhealthy", "error": str(e)},
            status=503,
        )

    is_running = _scheduler.running
    return web.json_response(
        {
            "status": "healthy" if is_running else "stopped",
            "scheduler_running": is_running,
            "jobs_count": len(jobs),
            "jobs": jobs,
        },
        status=200 if is_running else 503,
    )


async def readiness_handler(request: web.Request) -> web.Response:
    """
    Readiness endpoint.

    Ready once the scheduler runs and has at least one distribution job.
    """
    ready = (
        _scheduler is not None
        and _scheduler.running
        and bool(_scheduler.get_jobs())
    )
    return web.json_response(
        {"status": "ready" if ready else "not_ready", "ready": ready},
        status=200 if ready else 503,
    )


def create_health_app() -> web.Application:
    """Build the aiohttp application with health routes."""
    app = web.Application()
    app.router.add_get("/health", health_handler)
    app.router.add_get("/readiness", readiness_handler)
    return app


async def start_health_server(
    host: str = "0.0.0.0",
    port: int = 8081,
) -> tuple[web.AppRunner, web.TCPSite]:
    """
    Start health check server.

    Args:
        host: Host to bind to
        port: Port to bind to

    Returns:
        Tuple of (AppRunner, TCPSite) for cleanup
    """
    runner = web.AppRunner(create_health_app())
    await runner.setup()
    site = web.TCPSite(runner, host, port)
    await site.start()

    logger.info(f"Health check server started on {host}:{port}")
    return runner, site


async def stop_health_server(
    runner: web.AppRunner,
    timeout: int = 5,
) -> None:
    """
    Stop health check server.

    Args:
        runner: AppRunner to cleanup
        timeout: Maximum time to wait for cleanup in seconds
    """
    try:
        await asyncio.wait_for(runner.cleanup(), timeout=timeout)
        logger.info("Health check server stopped")
    except TimeoutError:
        logger.warning(f"Health check server cleanup timed out after {timeout}s")
