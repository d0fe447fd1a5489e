import logging
import sys
from contextlib import asynccontextmanager

from starlette.middleware.base import BaseHTTPMiddleware
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import HTMLResponse, JSONResponse

from mapty.api.deps import get_controller
from mapty.api.v1 import maps, view, workouts

# Ensure app loggers print to stdout so you see them in the terminal
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    stream=sys.stdout,
)
logging.getLogger("mapty").setLevel(logging.DEBUG)
from mapty.config import settings
from mapty.core.errors import MaptyError
from mapty.services.controller import build_controller
from mapty.services.renderer import render_page
from mapty.services.storage import get_storage
from prometheus_client import make_asgi_app

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.controller = build_controller(get_storage())
    yield
    app.state.controller = None


app = FastAPI(
    title="Mapty API",
    description="Map your workouts: running and cycling entries pinned on a map",
    version="0.1.0",
    lifespan=lifespan,
)
app.add_middleware(GZipMiddleware, minimum_size=500)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request, call_next):
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response.headers["Permissions-Policy"] = "geolocation=(self), camera=(), microphone=()"
        if getattr(settings, "enable_hsts", False):
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        return response


app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(MaptyError)
async def mapty_error_handler(request: Request, exc: MaptyError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


app.include_router(workouts.router, prefix="/api/v1")
app.include_router(maps.router, prefix="/api/v1")
app.include_router(view.router, prefix="/api/v1")

metrics_app = make_asgi_app()
app.mount("/metrics", metrics_app)


@app.get("/health")
def health(request: Request):
    return {"status": "ok"}


@app.get("/", response_class=HTMLResponse)
async def page(request: Request) -> str:
    controller = get_controller(request)
    return render_page(controller.list_view.items, controller.form.hidden)
