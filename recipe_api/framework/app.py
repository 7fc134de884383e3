from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from recipe_api.config import get_config_for_service
from recipe_api.framework.helpers import HttpRequest, Router
from recipe_api.framework.logging import log_event
from recipe_api.framework.tracing import tracing_middleware

FORWARDED_METHODS = ["GET", "POST", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS", "TRACE"]


def raw_path(request: Request) -> str:
    """
    The path as received on the wire, percent-escapes intact, so ids map
    to `recipe:<id>` keys byte for byte.
    """
    raw = request.scope.get("raw_path")
    if raw is None:
        return request.url.path
    return raw.decode("latin-1").split("?", 1)[0]


def create_microservice(service_name: str, get_store) -> FastAPI:
    """
    Build a FastAPI microservice from config.yaml.
    FastAPI is only the transport here: all requests go to one catch-all
    endpoint and routing is done by the service Router.
    """

    # Load config for service
    service = get_config_for_service(service_name)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        await get_store().bucket.close()
        log_event("shutdown", service_name=service_name, bucket=service.bucket)

    app = FastAPI(
        title=f"{service.name} service",
        version=service.version,
        openapi_url=None,
        docs_url=None,
        redoc_url=None,
        lifespan=lifespan,
    )

    router = Router(service.routes, get_store)

    for route in service.routes:
        log_event(
            "startup",
            action="route_registration",
            service_name=service_name,
            method=route.method,
            path=route.path,
            handler=route.handler,
        )

    async def endpoint(request: Request):
        result = await router.handle(
            HttpRequest(
                method=request.method,
                path=raw_path(request),
                query=request.url.query,
                stream=request.stream(),
            )
        )
        return Response(
            content=result.body,
            status_code=result.status,
            headers=result.headers,
        )

    async def unrouted(request: Request, exc: StarletteHTTPException):
        # verbs outside FORWARDED_METHODS are rejected by Starlette before
        # reaching the endpoint; answer them through the service Router too
        return await endpoint(request)

    app.add_api_route(
        "/{path:path}",
        endpoint,
        methods=FORWARDED_METHODS,
        include_in_schema=False,
    )
    app.add_exception_handler(StarletteHTTPException, unrouted)
    app.middleware("http")(tracing_middleware)
    app.state.router = router

    return app
