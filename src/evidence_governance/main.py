"""Evidence governance FastAPI application."""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from evidence_governance.api.routes_jurisdictions import router as jurisdictions_router
from evidence_governance.api.routes_policy import router as policy_router
from evidence_governance.api.routes_routing import router as routing_router
from evidence_governance.context import build_access_context
from evidence_governance.db.engine import create_async_engine_factory, get_async_session_factory
from evidence_governance.settings import DatabaseSettings, OTelSettings, PolicySettings, RoutingSettings
from evidence_governance.telemetry import init_telemetry, instrument_app, instrument_engine, shutdown_telemetry

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:  # pragma: no cover
    """Manage application lifecycle: OTel + DB engine + access context."""
    telemetry_enabled = init_telemetry(OTelSettings())

    engine = create_async_engine_factory(DatabaseSettings())
    if telemetry_enabled:
        instrument_engine(engine)
    app.state.session_factory = get_async_session_factory(engine)

    app.state.access_context = build_access_context(
        policy_settings=PolicySettings(),
        routing_settings=RoutingSettings(),
    )
    logger.info("Access context ready (jurisdictions: %s)", ", ".join(app.state.access_context.jurisdictions.codes))
    if not app.state.access_context.policy_engine.get_policies():
        logger.warning("No access policies configured; every policy evaluation will be allowed")

    yield

    await engine.dispose()
    shutdown_telemetry()


app = FastAPI(
    title="Evidence Governance",
    version="0.1.0",
    lifespan=lifespan,
)

instrument_app(app)

app.include_router(policy_router)
app.include_router(routing_router)
app.include_router(jurisdictions_router)


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/ready")
async def ready() -> dict[str, str]:
    return {"status": "ready"}
