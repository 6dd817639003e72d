"""aiohttp binding of the hub engine.

Handlers only parse the request into a validated model, call one engine
operation and serialize the result. They never await between reading and
writing engine state, so on a single event loop every reconciliation runs
to completion before the next request touches the same visitor.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Awaitable, Callable, Mapping
from datetime import datetime
from typing import Any, TypeVar

from aiohttp import web
from pydantic import BaseModel, ValidationError

from hubstate.config import HubConfig
from hubstate.engine import HubEngine
from hubstate.exceptions import HubNotFoundError, HubValidationError
from hubstate.models.requests import (
    AggregateHistoryQuery,
    HistoryQuery,
    RegisterProfileRequest,
    ResetStateRequest,
    ToggleHistoryRequest,
    UpdateStateRequest,
)

_logger = logging.getLogger(__name__)

ENGINE_KEY = web.AppKey("engine", HubEngine)

TRequest = TypeVar("TRequest", bound=BaseModel)

_Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]

_CORS_HEADERS: dict[str, str] = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


def _jsonable(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Mapping):
        return {str(k): _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    return value


def _json(payload: Any, *, status: int = 200) -> web.Response:
    return web.json_response(_jsonable(payload), status=status)


def _ok(**fields: Any) -> web.Response:
    return _json({"ok": True, **fields})


def _error(status: int, message: str) -> web.Response:
    return _json({"ok": False, "error": message}, status=status)


def _parse(model: type[TRequest], data: Mapping[str, Any]) -> TRequest:
    """Validate *data* into *model*, reporting failures as :class:`HubValidationError`."""
    try:
        return model.model_validate(dict(data))
    except ValidationError as exc:
        first = exc.errors()[0]
        location = ".".join(str(part) for part in first.get("loc", ()))
        if first.get("type") == "missing":
            message = f"{location} is required"
        elif first.get("type") == "value_error":
            message = str(first.get("ctx", {}).get("error", first.get("msg", "invalid value")))
        else:
            message = f"{location}: {first.get('msg', 'invalid value')}"
        raise HubValidationError(message, field=location) from exc


async def _read_body(request: web.Request) -> dict[str, Any]:
    if not request.body_exists:
        return {}
    try:
        body = await request.json()
    except json.JSONDecodeError as exc:
        raise HubValidationError("Request body must be valid JSON") from exc
    if body is None:
        return {}
    if not isinstance(body, dict):
        raise HubValidationError("Request body must be a JSON object")
    return body


def _engine(request: web.Request) -> HubEngine:
    return request.app[ENGINE_KEY]


# ---------------------------------------------------------------------------
# Middlewares
# ---------------------------------------------------------------------------


@web.middleware
async def error_middleware(request: web.Request, handler: _Handler) -> web.StreamResponse:
    """Translate engine errors into the ``{"ok": false, "error": ...}`` envelope."""
    try:
        return await handler(request)
    except web.HTTPException:
        raise
    except HubValidationError as exc:
        return _error(400, str(exc))
    except HubNotFoundError as exc:
        return _error(404, str(exc))
    except Exception:
        # Covers HubInternalError and anything unexpected; details stay in the log.
        _logger.exception("Error handling %s %s", request.method, request.path)
        return _error(500, "Internal server error")


@web.middleware
async def cors_middleware(request: web.Request, handler: _Handler) -> web.StreamResponse:
    if request.method == "OPTIONS":
        return web.Response(status=204, headers=_CORS_HEADERS)
    response = await handler(request)
    response.headers.update(_CORS_HEADERS)
    return response


# ---------------------------------------------------------------------------
# Hub state
# ---------------------------------------------------------------------------


async def update_state(request: web.Request) -> web.Response:
    body = _parse(UpdateStateRequest, await _read_body(request))
    result = _engine(request).update_state(body.user_id, body.state, body.display_name)
    return _ok(state=result.state, visitorId=result.visitor_id)


async def get_state(request: web.Request) -> web.Response:
    return _json(_engine(request).get_state(request.match_info["user_id"]))


async def reset_state(request: web.Request) -> web.Response:
    body = _parse(ResetStateRequest, await _read_body(request))
    return _ok(state=_engine(request).reset_state(body.user_id))


async def list_users(request: web.Request) -> web.Response:
    directory = _engine(request).list_visitors()
    return _json(
        {
            "count": len(directory.visitor_ids),
            "visitorIds": directory.visitor_ids,
            "profiles": directory.profiles,
            "voiceMappings": directory.voice_mappings,
        }
    )


async def list_tasks(request: web.Request) -> web.Response:
    return _json({"tasks": _engine(request).list_tasks()})


# ---------------------------------------------------------------------------
# Profiles
# ---------------------------------------------------------------------------


async def list_profiles(request: web.Request) -> web.Response:
    profiles = _engine(request).list_profiles()
    return _json({"count": len(profiles), "profiles": profiles})


async def register_profile(request: web.Request) -> web.Response:
    body = _parse(RegisterProfileRequest, await _read_body(request))
    registration = _engine(request).register_profile(body.user_id, body.name)
    return _ok(profile=registration.profile, visitorId=registration.visitor_id)


# ---------------------------------------------------------------------------
# Grocery lists
# ---------------------------------------------------------------------------


async def all_grocery_items(request: web.Request) -> web.Response:
    aggregate = _engine(request).aggregate_grocery_items()
    return _ok(items=aggregate.items, totalItems=aggregate.total_items, userCount=aggregate.user_count)


async def clear_all_grocery_items(request: web.Request) -> web.Response:
    result = _engine(request).clear_all_grocery_items()
    return _ok(
        message=f"Cleared {result.total_cleared} items from {len(result.users_affected)} users",
        totalCleared=result.total_cleared,
        usersAffected=result.users_affected,
    )


# ---------------------------------------------------------------------------
# Voice history
# ---------------------------------------------------------------------------


async def all_history(request: web.Request) -> web.Response:
    query = _parse(AggregateHistoryQuery, request.query)
    history = _engine(request).aggregate_history(query.limit)
    return _ok(total=len(history), history=history)


async def clear_all_history(request: web.Request) -> web.Response:
    result = _engine(request).clear_all_history()
    return _ok(
        message=f"Deleted {result.total_deleted} history entries from {len(result.users_affected)} users",
        totalDeleted=result.total_deleted,
        usersAffected=result.users_affected,
        deletedAt=result.deleted_at,
    )


async def get_history(request: web.Request) -> web.Response:
    query = _parse(HistoryQuery, request.query)
    page = _engine(request).get_history(request.match_info["user_id"], query.limit, query.offset)
    if not page.enabled:
        return _ok(
            historyEnabled=False,
            message="Voice history is disabled for this user",
            history=[],
            total=0,
        )
    return _ok(
        historyEnabled=True,
        visitorId=page.visitor_id,
        total=page.total,
        limit=page.limit,
        offset=page.offset,
        history=page.entries,
    )


async def delete_history(request: web.Request) -> web.Response:
    deletion = _engine(request).delete_history(request.match_info["user_id"])
    return _ok(
        message="Voice history deleted successfully",
        deleted=deletion.deleted,
        deletedAt=deletion.deleted_at,
    )


async def delete_history_entry(request: web.Request) -> web.Response:
    _engine(request).delete_history(request.match_info["user_id"], request.match_info["entry_id"])
    return _ok(message="History entry deleted successfully")


async def toggle_history(request: web.Request) -> web.Response:
    body = _parse(ToggleHistoryRequest, await _read_body(request))
    enabled = body.is_enabled
    privacy = _engine(request).toggle_history(request.match_info["user_id"], enabled, body.clear_history)
    return _ok(
        historyEnabled=privacy.history_enabled,
        message=f"Voice history {'enabled' if enabled else 'disabled'} successfully",
    )


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------


async def health(request: web.Request) -> web.Response:
    return _json(_engine(request).health())


def create_app(engine: HubEngine | None = None, *, config: HubConfig | None = None) -> web.Application:
    """Build the aiohttp application serving *engine*.

    When *engine* is omitted a fresh one is built from *config* (or
    :meth:`HubConfig.from_env`).
    """
    if engine is None:
        engine = HubEngine(config or HubConfig.from_env())
    middlewares = [error_middleware]
    if engine.config.cors_enabled:
        middlewares.insert(0, cors_middleware)

    app = web.Application(middlewares=middlewares)
    app[ENGINE_KEY] = engine

    # "/hub/history/all" must be registered before "/hub/history/{user_id}".
    app.router.add_get("/health", health)
    app.router.add_get("/hub/state/{user_id}", get_state)
    app.router.add_post("/hub/state", update_state)
    app.router.add_get("/hub/profiles", list_profiles)
    app.router.add_post("/hub/profile/register", register_profile)
    app.router.add_get("/hub/tasks", list_tasks)
    app.router.add_post("/hub/reset", reset_state)
    app.router.add_get("/hub/users", list_users)
    app.router.add_get("/hub/grocery/all", all_grocery_items)
    app.router.add_delete("/hub/grocery/all", clear_all_grocery_items)
    app.router.add_get("/hub/history/all", all_history)
    app.router.add_delete("/hub/history/all", clear_all_history)
    app.router.add_get("/hub/history/{user_id}", get_history)
    app.router.add_delete("/hub/history/{user_id}", delete_history)
    app.router.add_delete("/hub/history/{user_id}/{entry_id}", delete_history_entry)
    app.router.add_post("/hub/history/toggle/{user_id}", toggle_history)
    return app
