import asyncio
import os
import time
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, NoResultFound
from .routes import router
from .core import redis_startup, init_metrics, shutdown_connections
from .ws_manager import manager
import logging
from pythonjsonlogger import jsonlogger

def setup_logging(level: str = os.getenv('LOG_LEVEL', 'INFO')) -> logging.Logger:
    """JSON lines on stderr for the whole ``socialhub`` logger tree"""
    root = logging.getLogger('socialhub')
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(jsonlogger.JsonFormatter('%(asctime)s %(levelname)s %(name)s %(message)s'))
        root.addHandler(handler)
    root.setLevel(level)
    return root

logger = setup_logging()

app = FastAPI(title="SocialHub API", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=['*'],
    allow_credentials=True,
    allow_methods=['*'],
    allow_headers=['*'],
)

app.include_router(router, prefix="/api")

_presence_listener = None

@app.get('/healthz')
async def healthz():
    return {'status': 'ok'}

@app.middleware('http')
async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    logger.info({
        'msg': 'request',
        'method': request.method,
        'path': request.url.path,
        'status': response.status_code,
        'duration_ms': round((time.perf_counter() - started) * 1000, 2),
    })
    return response

@app.exception_handler(NoResultFound)
async def not_found_handler(request: Request, exc: NoResultFound):
    return JSONResponse(status_code=404, content={'detail': 'Not found'})

@app.exception_handler(IntegrityError)
async def integrity_error_handler(request: Request, exc: IntegrityError):
    logger.info({'msg': 'integrity_error', 'path': request.url.path, 'error': str(exc.orig)})
    return JSONResponse(status_code=409, content={'detail': 'Conflicts with existing data'})

@app.on_event("startup")
async def startup():
    global _presence_listener
    # dependencies are optional at boot; the API serves without them
    try:
        await redis_startup()
    except Exception as e:
        logger.warning({'msg': 'redis_start_failed', 'error': str(e)})
    init_metrics()
    _presence_listener = asyncio.create_task(manager.start_redis_listener())

@app.on_event("shutdown")
async def shutdown():
    if _presence_listener:
        _presence_listener.cancel()
    await shutdown_connections()
