from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from artifact_chat.services.event_bus import event_bus

router = APIRouter()


@router.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket):
    """Stream agent events (tool calls, model round-trips) to the UI."""
    await event_bus.connect(websocket)
    try:
        while True:
            # Listeners never send anything meaningful; this only detects disconnects
            await websocket.receive_text()
    except WebSocketDisconnect:
        await event_bus.disconnect(websocket)
