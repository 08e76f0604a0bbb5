from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, Response, WebSocket, WebSocketDisconnect, status

from vodtimer.api.deps import get_facade
from vodtimer.api.models import Event, EventDraft, EventListResponse, PurgeResponse, TimerSnapshot
from vodtimer.errors import NotFound, StorageFatal, ValidationFailed
from vodtimer.schedule import ScheduleFacade
from vodtimer.websocket_hub import hub

router = APIRouter()


def _storage_unavailable(e: StorageFatal) -> HTTPException:
    return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))


@router.websocket("/ws/timer")
async def timer_updates_ws(websocket: WebSocket) -> None:
    await hub.connect(websocket)

    try:
        # Keep the socket open; client can optionally send pings.
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        await hub.disconnect(websocket)
    except Exception:
        await hub.disconnect(websocket)
        raise


@router.get("/healthcheck")
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/events", response_model=EventListResponse)
async def list_events_route(
    on: date | None = Query(default=None, alias="date"),
    facade: ScheduleFacade = Depends(get_facade),
) -> EventListResponse:
    try:
        events = facade.list_events(on)
    except StorageFatal as e:
        raise _storage_unavailable(e) from e
    return EventListResponse(events=events)


@router.post("/events", response_model=Event, status_code=status.HTTP_201_CREATED)
async def create_event_route(payload: EventDraft, facade: ScheduleFacade = Depends(get_facade)) -> Event:
    try:
        return facade.create_event(payload)
    except ValidationFailed as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)) from e
    except StorageFatal as e:
        raise _storage_unavailable(e) from e


@router.put("/events/{event_id}", response_model=Event)
async def update_event_route(
    event_id: str,
    payload: EventDraft,
    facade: ScheduleFacade = Depends(get_facade),
) -> Event:
    try:
        return facade.update_event(event_id, payload)
    except ValidationFailed as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)) from e
    except NotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except StorageFatal as e:
        raise _storage_unavailable(e) from e


@router.delete("/events/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_event_route(event_id: str, facade: ScheduleFacade = Depends(get_facade)) -> Response:
    try:
        facade.remove_event(event_id)
    except StorageFatal as e:
        raise _storage_unavailable(e) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/events/purge_expired", response_model=PurgeResponse)
async def purge_expired_route(facade: ScheduleFacade = Depends(get_facade)) -> PurgeResponse:
    try:
        removed = facade.purge_expired()
    except StorageFatal as e:
        raise _storage_unavailable(e) from e
    return PurgeResponse(removed=removed)


@router.get("/timer", response_model=TimerSnapshot)
async def timer_snapshot_route(facade: ScheduleFacade = Depends(get_facade)) -> TimerSnapshot:
    return facade.snapshot()


@router.post("/timer/reload", response_model=TimerSnapshot)
async def timer_reload_route(facade: ScheduleFacade = Depends(get_facade)) -> TimerSnapshot:
    try:
        return facade.refresh()
    except StorageFatal as e:
        raise _storage_unavailable(e) from e


@router.post("/timer/{command}", response_model=TimerSnapshot)
async def timer_command_route(command: str, facade: ScheduleFacade = Depends(get_facade)) -> TimerSnapshot:
    handlers = {
        "start": facade.start,
        "pause": facade.pause,
        "reset": facade.reset,
        "skip": facade.skip,
    }
    handler = handlers.get(command)
    if handler is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Unknown timer command: {command}")
    return handler()
