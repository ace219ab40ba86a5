"""Read-only HTTP inspection API: health, topics, stats, subjects, metrics.

Nothing here publishes or changes subscriptions; it reports the state of the
router and subjects handed to ``create_app``.
"""

import time
from contextlib import asynccontextmanager
from typing import Dict, Mapping, Optional

from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from dispatchcore.config import DispatchSettings
from dispatchcore.observability import get_logger
from dispatchcore.protocol import (
    HealthResponse,
    SubjectInfo,
    TopicInfo,
    stats_response,
    subjects_list_response,
    topic_not_found,
    topics_list_response,
    unauthorized,
)
from dispatchcore.router import TopicRouter
from dispatchcore.subject import Subject

API_PREFIX = "/api/v1"


class XAPIKeyMiddleware(BaseHTTPMiddleware):
    """Require an X-API-Key header matching the configured key."""

    def __init__(self, app, api_key: str) -> None:
        super().__init__(app)
        self._api_key = api_key

    async def dispatch(self, request: Request, call_next):
        key = (request.headers.get("X-API-Key") or "").strip()
        if key != self._api_key:
            get_logger("dispatchcore.server").warning(
                "unauthorized",
                extra={"path": request.url.path},
            )
            return JSONResponse(
                status_code=401,
                content=unauthorized("invalid or missing X-API-Key"),
            )
        return await call_next(request)


def create_app(
    router: TopicRouter,
    subjects: Optional[Mapping[str, Subject]] = None,
    settings: Optional[DispatchSettings] = None,
) -> FastAPI:
    """Build the inspection app over an existing router and optional named subjects."""
    settings = settings or DispatchSettings()
    subjects_by_name: Dict[str, Subject] = dict(subjects or {})
    started = {"at": time.time()}

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        started["at"] = time.time()
        get_logger("dispatchcore.server", settings.log_level_number).info(
            "inspection_api_started",
            extra={"router": router.name, "subjects": len(subjects_by_name)},
        )
        yield

    app = FastAPI(title="Dispatch Core Inspection API", lifespan=lifespan)
    if settings.admin_api_key:
        app.add_middleware(XAPIKeyMiddleware, api_key=settings.admin_api_key)

    api = APIRouter(prefix=API_PREFIX)

    @api.get("/health")
    def health() -> JSONResponse:
        """GET /health → { uptime_sec, topics, subscribers }."""
        body = HealthResponse(
            uptime_sec=time.time() - started["at"],
            topics=len(router.topics()),
            subscribers=router.subscriber_count(),
        ).to_dict()
        return JSONResponse(content=body, status_code=200)

    @api.get("/topics")
    def list_topics() -> JSONResponse:
        """GET /topics → { topics: [ { name, subscribers } ] }."""
        topics = [TopicInfo(name=t, subscribers=router.subscriber_count(t)) for t in router.topics()]
        return JSONResponse(content=topics_list_response(topics), status_code=200)

    @api.get("/topics/{name}")
    def get_topic(name: str) -> JSONResponse:
        """GET /topics/{name} → { name, subscribers } or 404."""
        if not router.has_topic(name):
            return JSONResponse(content=topic_not_found(name), status_code=404)
        info = TopicInfo(name=name, subscribers=router.subscriber_count(name))
        return JSONResponse(content=info.to_dict(), status_code=200)

    @api.get("/stats")
    def stats() -> JSONResponse:
        """GET /stats → { topics: { name: { messages, subscribers } } }."""
        return JSONResponse(content=stats_response(router.stats()), status_code=200)

    @api.get("/subjects")
    def list_subjects() -> JSONResponse:
        """GET /subjects → { subjects: [ { name, observers, notifications } ] }."""
        infos = []
        for name, subject in subjects_by_name.items():
            subject_stats = subject.stats()
            infos.append(SubjectInfo(
                name=name,
                observers=subject_stats["observers"],
                notifications=subject_stats["notifications"],
            ))
        return JSONResponse(content=subjects_list_response(infos), status_code=200)

    @api.get("/metrics")
    def metrics() -> JSONResponse:
        """GET /metrics → { counters, gauges } of the router's metrics."""
        return JSONResponse(content=router.metrics.snapshot(), status_code=200)

    app.include_router(api)
    return app
