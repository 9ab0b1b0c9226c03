from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from src.domain.errors import StorefrontError
from .error import ERROR_STATUS, ClientError, ServerError
import logging

logger = logging.getLogger(__name__)


async def handle_client_error(request: Request, exc: ClientError):
    error_dict = {"code": exc.base_error.code, "message": exc.base_error.message}
    logger.warning(f"Client error: {error_dict}")
    return JSONResponse(status_code=exc.status_code, content={"error": error_dict})


async def handle_server_error(request: Request, exc: ServerError):
    error_dict = {"code": exc.base_error.code, "message": "Internal server error"}
    logger.error(f"Server error: {exc.base_error.code} ({exc.base_error.reason})")
    return JSONResponse(status_code=exc.status_code, content={"error": error_dict})


async def handle_storefront_error(request: Request, exc: StorefrontError):
    status_code = ERROR_STATUS.get(exc.code, status.HTTP_500_INTERNAL_SERVER_ERROR)
    if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        return await handle_server_error(request, ServerError(exc.to_error(), status_code))
    return await handle_client_error(request, ClientError(exc.to_error(), status_code))


@asynccontextmanager
async def lifespan(app: FastAPI):
    from src.depends import engine, tenant_router
    from src.adapter.services.scope_storage import create_platform_schema

    async with engine.begin() as conn:
        await conn.run_sync(create_platform_schema)
    yield
    await tenant_router.close()
    await engine.dispose()


def create_app(ApplicationConfig) -> FastAPI:
    app = FastAPI(title="Storefront API", version="0.1.0", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ApplicationConfig.CORS_ORIGINS,
        allow_credentials=ApplicationConfig.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from src.api.routes import (
        admin,
        cart,
        catalog,
        customers,
        health_check,
        orders,
    )

    app.include_router(health_check.router, tags=["Health"])
    app.include_router(admin.router, tags=["Admin"])
    app.include_router(catalog.router, tags=["Catalog"])
    app.include_router(customers.router, tags=["Customers"])
    app.include_router(cart.router, tags=["Cart"])
    app.include_router(orders.router, tags=["Orders"])

    app.add_exception_handler(ClientError, handle_client_error)
    app.add_exception_handler(ServerError, handle_server_error)
    app.add_exception_handler(StorefrontError, handle_storefront_error)

    return app
