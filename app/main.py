# app/main.py
from fastapi import FastAPI, Request, HTTPException
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from app.routers import chat_proxy
from app.db.mongo import client, chat_histories_collection, ensure_indexes, verify_mongodb_connection
from app.core.config import settings
from app.core.logger import logger
from app.services.chat_relay import ChatRelay
from app.services.webhook import WebhookClient
from app.utils.responses import format_error_response


app = FastAPI(
    title="Clinic Chat Relay",
    version="0.1.0",
    description="Chat relay between the clinic dashboard, MongoDB and the workflow webhook",
)

# ✅ CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
)


# ✅ Startup/shutdown
@app.on_event("startup")
async def startup():
    await verify_mongodb_connection()
    try:
        await ensure_indexes()
    except Exception as e:
        logger.warning(f"Could not ensure chat indexes: {e}")
    app.state.chat_relay = ChatRelay(
        chat_histories_collection,
        WebhookClient(str(settings.CHAT_WEBHOOK_URL), settings.CHAT_WEBHOOK_TIMEOUT),
    )

@app.on_event("shutdown")
async def shutdown():
    relay = getattr(app.state, "chat_relay", None)
    if relay is not None:
        await relay.drain()
    client.close()

# ✅ Health check
@app.get("/", tags=["root"], summary="Health check")
async def root():
    return {"status": "ok", "service": "Clinic Chat Relay"}

# ✅ Error handlers
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=format_error_response(exc),
        headers=getattr(exc, "headers", None),
    )

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=422,
        content=format_error_response(exc),
    )

@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=500,
        content=format_error_response(exc),
    )

# ✅ Routes
app.include_router(chat_proxy.router, prefix="/chat-proxy")
