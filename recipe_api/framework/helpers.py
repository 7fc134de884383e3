import importlib
import inspect
from dataclasses import dataclass
from typing import AsyncIterable, Callable, Dict, List, Optional, Tuple

from recipe_api.config import Route
from recipe_api.framework.errors import BodyReadError, MethodNotAllowed, NotFound
from recipe_api.framework.logging import Span, log_event
from recipe_api.framework.responses import HttpResponse, error_response, json_response
from recipe_api.shared.lib.codec import decode

HANDLED_METHODS = ("GET", "POST", "PUT", "DELETE")


@dataclass
class HttpRequest:
    """
    Inbound request as seen by the router.
    The body is either given whole in `body` or streamed through `stream`.
    """

    method: str
    path: str
    query: str = ""
    body: bytes = b""
    stream: Optional[AsyncIterable[bytes]] = None

    @classmethod
    def from_target(cls, method: str, target: str, body: bytes = b"") -> "HttpRequest":
        """
        Build a request from a path-with-query such as "/api/recipes?x=1".
        """
        path, _, query = target.partition("?")
        return cls(method=method, path=path, query=query, body=body)

    async def read_body(self) -> bytes:
        if self.stream is None:
            return self.body
        chunks = []
        try:
            async for chunk in self.stream:
                chunks.append(chunk)
        except Exception as exc:
            raise BodyReadError(f"body stream failed: {exc!r}") from exc
        return b"".join(chunks)


def resolve_handler(handler_path: str):
    """
    Resolve a handler function from a string path, e.g. "recipe_api.recipes.crud.get_recipe".
    """
    module_name, func_name = handler_path.rsplit(".", 1)
    module = importlib.import_module(module_name)
    return getattr(module, func_name)


def path_segments(path: str) -> List[str]:
    """
    Non-empty `/`-separated segments of a path, query string dropped.
    """
    path = path.split("?", 1)[0]
    return [s for s in path.split("/") if s]


def match_segments(pattern: List[str], segments: List[str]) -> Optional[Dict[str, str]]:
    if len(pattern) != len(segments):
        return None
    params = {}
    for expected, actual in zip(pattern, segments):
        if expected.startswith("{") and expected.endswith("}"):
            params[expected[1:-1]] = actual
        elif expected != actual:
            return None
    return params


def match_route(routes: List[Route], method: str, path: str) -> Tuple[Route, Dict[str, str]]:
    """
    Finds the route for (method, path).
    Methods outside HANDLED_METHODS are rejected on every path; a handled
    method with no matching route is NotFound.
    """
    method = method.upper()
    if method not in HANDLED_METHODS:
        raise MethodNotAllowed(method=method)

    segments = path_segments(path)
    for route in routes:
        if route.method != method:
            continue
        params = match_segments(route.segments, segments)
        if params is not None:
            return route, params

    raise NotFound(path=path)


async def _run(handler_fn, params, data, store):
    """
    Helper to run a handler function with the correct arguments:
    path params in route order, then the decoded body if any, then the store.
    """
    args = list(params.values())

    if data is not None:
        args.append(data)

    args.append(store)

    res = handler_fn(*args)
    return await res if inspect.isawaitable(res) else res


class Router:
    """
    Dispatches requests onto the handlers named in the service routes and
    turns their outcome into an HttpResponse. No exception escapes `handle`.
    """

    def __init__(self, routes: List[Route], get_store: Callable):
        self.routes = routes
        self.get_store = get_store
        self.handlers = {route.handler: resolve_handler(route.handler) for route in routes}

    async def handle(self, request: HttpRequest) -> HttpResponse:
        log_event("request_received", method=request.method, path=request.path)

        operation = "route"
        params: Dict[str, str] = {}
        try:
            route, params = match_route(self.routes, request.method, request.path)
            handler_fn = self.handlers[route.handler]
            operation = handler_fn.__name__

            with Span(operation, **params):
                data = None
                if route.request_model is not None:
                    body = await request.read_body()
                    data = decode(body, route.request_model)

                result = await _run(handler_fn, params, data, self.get_store())

            return json_response(route.status_code, result)
        except Exception as exc:
            return error_response(exc, operation, **params)
