from fastapi import APIRouter, WebSocket, WebSocketDisconnect, Query
from ..auth import decode_token
from ..ws_manager import manager

router = APIRouter()

@router.websocket('/presence')
async def presence_ws(websocket: WebSocket, token: str = Query(None)):
    user = None
    if token:
        user = decode_token(token)
    if not user:
        await websocket.close(code=1008)
        return
    user_id = user['id']
    await manager.connect(user_id, websocket)
    try:
        while True:
            # any client frame counts as a heartbeat
            await websocket.receive_text()
            await manager.heartbeat(user_id)
    except WebSocketDisconnect:
        pass
    finally:
        await manager.disconnect(user_id, websocket)
