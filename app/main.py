# app/main.py
import logging
import traceback
from typing import Optional

from dotenv import load_dotenv
from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import Settings, load_settings
from .database import ProductStore
from .errors import InternalError, Result, RouteError, error_response, respond
from .guard import authorize
from .handlers import (
    create_product_logic,
    delete_product_logic,
    get_product_logic,
    list_products_logic,
    product_stats_logic,
    search_products_logic,
    update_product_logic,
)
from .logger import log_requests, setup_logging

logger = logging.getLogger(__name__)

WELCOME_TEXT = "Welcome to the Product API! Go to /api/products to see all products."


def get_store(request: Request) -> ProductStore:
    return request.app.state.store


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


# ---------------------------
# Product endpoints
# ---------------------------
router = APIRouter(prefix="/api/products", tags=["products"])


@router.get("")
async def list_products(
    category: Optional[str] = None,
    page: Optional[str] = None,
    limit: Optional[str] = None,
    auth: Result = Depends(authorize),
    store: ProductStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    result = await list_products_logic(auth, store, category, page, limit, settings.max_page_limit)
    return respond(result, 200, not settings.is_production)


@router.get("/search")
async def search_products(
    q: Optional[str] = None,
    auth: Result = Depends(authorize),
    store: ProductStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    result = await search_products_logic(auth, store, q)
    return respond(result, 200, not settings.is_production)


@router.get("/stats")
async def product_stats(
    auth: Result = Depends(authorize),
    store: ProductStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    result = await product_stats_logic(auth, store)
    return respond(result, 200, not settings.is_production)


@router.get("/{product_id}")
async def get_product(
    product_id: str,
    auth: Result = Depends(authorize),
    store: ProductStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    result = await get_product_logic(auth, store, product_id)
    return respond(result, 200, not settings.is_production)


@router.post("")
async def create_product(
    request: Request,
    auth: Result = Depends(authorize),
    store: ProductStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    result = await create_product_logic(auth, store, request)
    return respond(result, 201, not settings.is_production)


@router.put("/{product_id}")
async def update_product(
    product_id: str,
    request: Request,
    auth: Result = Depends(authorize),
    store: ProductStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    result = await update_product_logic(auth, store, request, product_id)
    return respond(result, 200, not settings.is_production)


@router.delete("/{product_id}")
async def delete_product(
    product_id: str,
    auth: Result = Depends(authorize),
    store: ProductStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    result = await delete_product_logic(auth, store, product_id)
    return respond(result, 204, not settings.is_production)


async def welcome():
    return PlainTextResponse(WELCOME_TEXT)


async def route_exception(request: Request, exc: StarletteHTTPException):
    settings = request.app.state.settings
    expose = not settings.is_production
    # anything under /api is guarded, even paths or methods with no route
    if request.url.path.startswith("/api"):
        auth = authorize(request)
        if not auth.ok:
            return error_response(auth.error, expose)
    response = error_response(RouteError(exc.status_code, str(exc.detail)), expose)
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def unhandled_exception(request: Request, exc: Exception):
    settings = request.app.state.settings
    logger.error("Unhandled error on %s %s\n%s", request.method, request.url.path, traceback.format_exc())
    error = InternalError("Internal Server Error", {"exception": type(exc).__name__, "detail": str(exc)})
    return error_response(error, not settings.is_production)


def create_app(settings: Optional[Settings] = None, store: Optional[ProductStore] = None) -> FastAPI:
    settings = settings or load_settings()

    app = FastAPI(title="Product API (in-memory)")
    app.state.settings = settings
    app.state.store = store if store is not None else ProductStore()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.middleware("http")(log_requests)
    app.add_exception_handler(StarletteHTTPException, route_exception)
    app.add_exception_handler(Exception, unhandled_exception)

    app.add_api_route("/", welcome, methods=["GET"], response_class=PlainTextResponse)
    app.include_router(router)
    return app


load_dotenv()
settings = load_settings()
setup_logging(settings)
app = create_app(settings)


if __name__ == "__main__":
    import uvicorn

    logger.info("Starting %s (%s) on port %s", settings.service_name, settings.environment, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())
