"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from fitness_coach.api.coach_models import ChatRequest, GeneratePlanRequest
from fitness_coach.app_logging import configure_logging
from fitness_coach.config import parse_allowed_origins
from fitness_coach.containers import AppContainer
from fitness_coach.domain.errors import CoachError


def create_app(container: AppContainer) -> FastAPI:  # noqa: C901
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)
    allowed_origins = parse_allowed_origins(container.settings.allowed_origins)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("CORS allowed origins: %s", ", ".join(allowed_origins))
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(CoachError)
    async def coach_error_handler(request: Request, exc: CoachError) -> JSONResponse:
        if exc.status_code >= 500:  # noqa: PLR2004
            logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        return _error_response(exc.status_code, str(exc))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return _error_response(400, _describe_request_errors(exc))

    @app.get("/healthz")
    async def healthz() -> dict[str, object]:
        """Simple health check endpoint."""
        return {"ok": True, "message": "AI Fitness Coach server running"}

    @app.post("/api/coach/generate-plan")
    async def generate_plan(
        body: GeneratePlanRequest, request: Request
    ) -> dict[str, object]:
        """Generate, persist and return a weekly plan for a member."""
        state_container: AppContainer = request.app.state.container
        try:
            result = await state_container.plan_service.generate(
                body.member_id, body.profile
            )
        except CoachError:
            raise
        except Exception:
            logger.exception("Plan generation failed")
            return _error_response(500, "Failed to generate a plan.")
        if (
            result.persistence_error is not None
            and state_container.settings.require_plan_persistence
        ):
            raise result.persistence_error
        return {"plan": result.plan.to_payload(), "persisted": result.persisted}

    @app.post("/api/coach/chat")
    async def chat(body: ChatRequest, request: Request) -> dict[str, object]:
        """Answer a member message with the coach model."""
        state_container: AppContainer = request.app.state.container
        try:
            reply = await state_container.chat_service.reply(
                body.member_id, body.message, body.history
            )
        except CoachError:
            raise
        except Exception:
            logger.exception("Coach chat failed")
            return _error_response(500, "Failed to talk to the coach.")
        return {
            "reply": reply.reply,
            "messages": [message.to_payload() for message in reply.messages],
        }

    @app.get("/api/coach/members/{member_id}/stats")
    async def member_stats(member_id: str, request: Request) -> dict[str, object]:
        """Return progress and workout statistics for a member."""
        state_container: AppContainer = request.app.state.container
        try:
            stats = state_container.stats_service.get_stats(member_id)
        except CoachError:
            raise
        except Exception:
            logger.exception("Member stats failed", extra={"member_id": member_id})
            return _error_response(500, "Failed to load member statistics.")
        return {"stats": stats.to_payload()}

    @app.get("/api/coach/members/{member_id}/plan")
    async def member_plan(member_id: str, request: Request) -> dict[str, object]:
        """Return the stored plan for a member, or nulls when none exists."""
        state_container: AppContainer = request.app.state.container
        try:
            stored = state_container.plan_service.get_plan(member_id)
        except CoachError:
            raise
        except Exception:
            logger.exception(
                "Member plan lookup failed", extra={"member_id": member_id}
            )
            return _error_response(500, "Failed to load the member plan.")
        if stored is None:
            return {"plan": None, "updatedAt": None}
        return {
            "plan": stored.plan.to_payload(),
            "updatedAt": stored.updated_at.isoformat() if stored.updated_at else None,
        }

    @app.get("/api/coach/exercises/videos")
    async def exercise_videos(
        request: Request,
        q: str | None = None,
        max_results: int | None = Query(default=None, alias="maxResults"),
        language: str | None = None,
    ) -> dict[str, object]:
        """Search exercise videos."""
        state_container: AppContainer = request.app.state.container
        try:
            videos = await state_container.video_service.search(
                q or "", max_results=max_results, language=language
            )
        except CoachError:
            raise
        except Exception:
            logger.exception("Exercise video search failed")
            return _error_response(500, "Failed to search exercise videos.")
        return {"videos": [video.to_payload() for video in videos]}

    return app


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _describe_request_errors(exc: RequestValidationError) -> str:
    """Summarize request validation errors as field: message pairs."""
    details = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part != "body"]
        field = ".".join(location) or "body"
        details.append(f"{field}: {error.get('msg', 'invalid value')}")
    return "Invalid request: " + "; ".join(details)
