import logging
from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from postgrest.exceptions import APIError
from src.config import settings
from src.domain.access_errors import AccessError, access_error_detail, access_error_http_status
from src.observability import bind_request_id, log_event, unbind_request_id
from src.routers import (
    analytics,
    auth_routes,
    clients,
    notes,
    enquiries,
    sales,
    inventory,
    settings as settings_routes,
    team,
    admin,
    organizations,
)

app = FastAPI(title="Patron", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def attach_request_id(request: Request, call_next):
    request_id = (
        request.headers.get("X-Request-ID")
        or request.headers.get("X-Correlation-ID")
        or str(uuid4())
    )
    request.state.request_id = request_id
    token = bind_request_id(request_id)
    try:
        response = await call_next(request)
    finally:
        unbind_request_id(token)
    response.headers["X-Request-ID"] = request_id
    return response


@app.exception_handler(AccessError)
async def handle_access_error(request: Request, exc: AccessError):
    return JSONResponse(
        status_code=access_error_http_status(exc),
        content={"detail": access_error_detail(exc)},
    )


@app.exception_handler(APIError)
async def handle_storage_error(request: Request, exc: APIError):
    log_event(
        "storage_error",
        level=logging.WARNING,
        path=request.url.path,
        code=exc.code,
        error=exc.message,
    )
    return JSONResponse(status_code=400, content={"detail": exc.message or "Storage error"})


app.include_router(auth_routes.router)
app.include_router(organizations.router)
app.include_router(clients.router)
app.include_router(notes.router)
app.include_router(enquiries.router)
app.include_router(sales.router)
app.include_router(inventory.router)
app.include_router(settings_routes.router)
app.include_router(team.router)
app.include_router(analytics.router)
app.include_router(admin.router)


@app.get("/")
async def root():
    return {"status": "ok", "service": "patron"}


@app.get("/health")
async def health():
    return {"status": "healthy"}
