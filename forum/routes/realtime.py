import logging
from fastapi import APIRouter, HTTPException, WebSocket, WebSocketDisconnect
from forum.db.session import SessionLocal
from forum.schemas.event_schema import SocketEvent
from forum.services.auth import user_from_token
from forum.services.broadcast import ConnectionRegistry

router = APIRouter(tags=["realtime"])


def _post_id(data: dict) -> int:
    try:
        return int(data["postId"])
    except (KeyError, TypeError, ValueError):
        raise ValueError("postId is required")


async def _authenticate(registry: ConnectionRegistry, connection_id: str, data: dict):
    db = SessionLocal()
    try:
        user = user_from_token(data.get("token"), db)
    except HTTPException as exc:
        await registry.send(connection_id, "error", {"message": exc.detail})
        return
    finally:
        db.close()

    registry.authenticate(connection_id, user.id)
    await registry.broadcast("userOnline", {"userId": user.id})


async def _handle(registry: ConnectionRegistry, connection_id: str, message: SocketEvent):
    data = message.data
    if message.event == "authenticate":
        await _authenticate(registry, connection_id, data)
    elif message.event == "ping":
        await registry.send(connection_id, "pong", {})
    elif message.event == "subscribe":
        registry.subscribe(connection_id, _post_id(data))
    elif message.event == "unsubscribe":
        registry.unsubscribe(connection_id, _post_id(data))
    elif message.event == "typing":
        post_id = _post_id(data)
        await registry.broadcast("userTyping", {"postId": post_id, "user": data.get("user")},
                                 post_id=post_id, exclude=connection_id)
    else:
        raise ValueError(f"Unknown event: {message.event}")


@router.websocket("/ws")
async def events(websocket: WebSocket):
    registry: ConnectionRegistry = websocket.app.state.registry
    connection_id = await registry.connect(websocket)
    try:
        while True:
            try:
                message = SocketEvent.model_validate(await websocket.receive_json())
                await _handle(registry, connection_id, message)
            except ValueError as exc:
                logging.debug(f"Rejected frame from {connection_id}: {exc}")
                await registry.send(connection_id, "error", {"message": str(exc)})
    except WebSocketDisconnect:
        pass
    finally:
        user_id = registry.disconnect(connection_id)
        if user_id is not None and user_id not in registry.online_users():
            await registry.broadcast("userOffline", {"userId": user_id})
