"""FastAPI application exposing the player session."""

import asyncio
import json
import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, HTTPException, Request
from pydantic import BaseModel
from sse_starlette.sse import EventSourceResponse

from .config import get_settings
from .errors import NetworkError, NoSourceSetError
from .services.player import PlayerSession
from .services.presenter import PlayerViewModel
from .services.state import StateChange, serialize_field
from .sources import SourceKind, available_sources, create_source
from .sources import audiodb

# Configure logging
settings = get_settings()
logging.basicConfig(
    level=logging.DEBUG if settings.server.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    # Startup
    current_settings = get_settings()
    logger.info("Starting music player...")
    logger.info(f"Server: http://{current_settings.server.host}:{current_settings.server.port}")

    session = PlayerSession(tick_interval=current_settings.player.tick_interval)
    view_model = PlayerViewModel(session)
    view_model.attach()
    await session.start()
    app.state.session = session
    app.state.view_model = view_model

    if current_settings.sources.default:
        try:
            await session.set_source(create_source(current_settings.sources.default))
        except NoSourceSetError as e:
            logger.warning(f"Default source not loaded: {e}")
    yield
    # Shutdown
    logger.info("Shutting down...")
    view_model.detach()
    await session.close()
    await audiodb.close_client()


app = FastAPI(
    title="Music Player",
    description="Player session with switchable mock music sources",
    version="0.1.0",
    lifespan=lifespan,
)


def get_session(request: Request) -> PlayerSession:
    return request.app.state.session


def get_view_model(request: Request) -> PlayerViewModel:
    return request.app.state.view_model


class SeekRequest(BaseModel):
    time: float | None = None
    fraction: float | None = None


class QueueAddRequest(BaseModel):
    song_id: str


class ReorderRequest(BaseModel):
    from_index: int
    to_index: int


@app.get("/api/state")
async def get_state(session: PlayerSession = Depends(get_session)):
    """Get current session state."""
    return session.state.to_dict()


@app.get("/api/view")
async def get_view(view_model: PlayerViewModel = Depends(get_view_model)):
    """Get display-ready player fields."""
    return view_model.to_dict()


@app.get("/api/sources")
async def get_sources(session: PlayerSession = Depends(get_session)):
    """List the enabled music sources."""
    current = session.state.current_source
    return {
        "sources": [
            {
                "kind": kind.value,
                "name": kind.display_name,
                "active": current is not None and current.kind == kind,
            }
            for kind in available_sources()
        ]
    }


@app.post("/api/source/{kind}")
async def set_source(kind: str, session: PlayerSession = Depends(get_session)):
    """Switch to a new instance of the given source."""
    if kind not in get_settings().sources.enabled:
        raise HTTPException(status_code=404, detail=f"Unknown music source: {kind}")
    try:
        source = create_source(kind)
    except NoSourceSetError as e:
        raise HTTPException(status_code=404, detail=str(e))
    await session.set_source(source)
    return session.state.to_dict()


@app.post("/api/play")
async def play(session: PlayerSession = Depends(get_session)):
    await session.play()
    return session.state.to_dict()


@app.post("/api/pause")
async def pause(session: PlayerSession = Depends(get_session)):
    await session.pause()
    return session.state.to_dict()


@app.post("/api/stop")
async def stop(session: PlayerSession = Depends(get_session)):
    await session.stop()
    return session.state.to_dict()


@app.post("/api/skip")
async def skip(session: PlayerSession = Depends(get_session)):
    await session.skip()
    return session.state.to_dict()


@app.post("/api/previous")
async def previous(session: PlayerSession = Depends(get_session)):
    await session.previous()
    return session.state.to_dict()


@app.post("/api/toggle")
async def toggle(
    session: PlayerSession = Depends(get_session),
    view_model: PlayerViewModel = Depends(get_view_model),
):
    """Play when idle, pause when playing."""
    await view_model.play_pause_toggle()
    return session.state.to_dict()


@app.post("/api/seek")
async def seek(
    body: SeekRequest,
    session: PlayerSession = Depends(get_session),
    view_model: PlayerViewModel = Depends(get_view_model),
):
    """Seek by absolute time (seconds) or by fraction of the song."""
    if body.time is not None:
        await session.seek(body.time)
    elif body.fraction is not None:
        await view_model.seek_fraction(body.fraction)
    else:
        raise HTTPException(status_code=422, detail="Provide 'time' or 'fraction'")
    return session.state.to_dict()


@app.post("/api/queue")
async def add_to_queue(body: QueueAddRequest, session: PlayerSession = Depends(get_session)):
    """Append one of the available songs to the queue."""
    song = next((s for s in session.state.available_songs if s.id == body.song_id), None)
    if song is None:
        raise HTTPException(status_code=404, detail=f"Unknown song: {body.song_id}")
    await session.add_to_queue(song)
    return session.state.to_dict()


@app.post("/api/queue/reorder")
async def reorder_queue(body: ReorderRequest, session: PlayerSession = Depends(get_session)):
    await session.reorder_queue(body.from_index, body.to_index)
    return session.state.to_dict()


@app.post("/api/queue/{index}/play")
async def play_song(index: int, session: PlayerSession = Depends(get_session)):
    await session.play_song(index)
    return session.state.to_dict()


@app.delete("/api/queue/{index}")
async def remove_from_queue(index: int, session: PlayerSession = Depends(get_session)):
    await session.remove_from_queue(index)
    return session.state.to_dict()


@app.delete("/api/queue")
async def clear_queue(session: PlayerSession = Depends(get_session)):
    await session.clear_queue()
    return session.state.to_dict()


@app.delete("/api/error")
async def clear_error(session: PlayerSession = Depends(get_session)):
    await session.clear_error()
    return session.state.to_dict()


@app.get("/api/sources/audiodb/search")
async def search_audiodb(artist: str, title: str):
    """Search AudioDB for tracks (results can be queued via the song data)."""
    source = create_source(SourceKind.AUDIODB)
    try:
        songs = await source.search_tracks(artist, title)
    except NetworkError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return {"songs": [song.to_dict() for song in songs]}


@app.get("/api/stream")
async def stream(request: Request, session: PlayerSession = Depends(get_session)):
    """SSE endpoint with one event per changed state field."""

    async def event_generator():
        queue: asyncio.Queue = asyncio.Queue()

        async def on_change(change: StateChange):
            await queue.put(change)

        # Subscribe to state changes
        session.state.subscribe(on_change)

        try:
            # Send initial state
            yield {
                "event": "state",
                "data": json.dumps(session.state.to_dict()),
            }

            while True:
                # Check for disconnect
                if await request.is_disconnected():
                    break

                try:
                    # Wait for updates with timeout
                    change = await asyncio.wait_for(queue.get(), timeout=30.0)
                    yield {
                        "event": change.field,
                        "data": json.dumps(serialize_field(change.field, change.value)),
                    }
                except asyncio.TimeoutError:
                    # Send keepalive
                    yield {"event": "ping", "data": ""}
        finally:
            session.state.unsubscribe(on_change)

    return EventSourceResponse(event_generator())


def run():
    """Run the application with uvicorn."""
    import argparse

    import uvicorn

    from .config import Settings, set_settings

    parser = argparse.ArgumentParser(description="Music Player")
    parser.add_argument(
        "--source",
        choices=[kind.value for kind in SourceKind],
        help="Source to load at startup (overrides config.toml)",
    )
    parser.add_argument(
        "--port",
        type=int,
        help="Port to run on (overrides config.toml)",
    )
    args = parser.parse_args()

    # Load settings and apply CLI overrides
    settings = Settings.load()
    if args.source:
        settings.sources.default = args.source
    if args.port:
        settings.server.port = args.port

    # Store settings so they're available to the app
    set_settings(settings)

    uvicorn.run(
        "music_player.main:app",
        host=settings.server.host,
        port=settings.server.port,
        reload=settings.server.debug,
    )


if __name__ == "__main__":
    run()
