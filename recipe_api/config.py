import importlib
import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Dict, List, Optional

import yaml

CONFIG_ENV_VAR = "RECIPE_API_CONFIG"
ID_STRATEGIES = ("timestamp", "uuid")


@dataclass
class Route:
    """
    Represents a route in the service.
    """

    method: str
    path: str
    handler: str
    request_model: Optional[Any] = None
    status_code: int = 200
    description: Optional[str] = None

    @property
    def segments(self) -> List[str]:
        return [s for s in self.path.split("/") if s]


@dataclass
class ServiceOptions:
    """
    Switches for behaviors that are kept as-is by default but may be
    tightened per deployment.
    """

    update_requires_existing: bool = False
    update_touches_timestamps: bool = False
    id_strategy: str = "timestamp"


@dataclass
class Service:
    """
    Represents a service with its configuration, including routes and key-value bucket.
    """

    name: str
    version: str
    title: str
    kv: str
    bucket: str
    routes: List[Route]
    options: ServiceOptions = field(default_factory=ServiceOptions)


@dataclass
class Config:
    """
    Represents the entire configuration of the application, including all services.
    """

    urlPrefix: str
    title: str
    version: str
    services: dict[str, Service]


def load_model(ref: Optional[str]):
    """
    Loads a model class from a string reference.
    """
    if not ref:
        return None

    module_name, class_name = ref.rsplit(".", 1)
    module = importlib.import_module(module_name)
    return getattr(module, class_name)


def parse_options(data: Optional[dict]) -> ServiceOptions:
    """
    Parses the optional `options` block of a service.
    """
    options = ServiceOptions(**(data or {}))
    if options.id_strategy not in ID_STRATEGIES:
        raise ValueError(
            f"Unknown id_strategy {options.id_strategy!r}, expected one of {ID_STRATEGIES}"
        )
    return options


def parse_route(route_data: dict) -> Route:
    """
    Parses a dictionary of route configurations into a Route object.
    """
    return Route(
        method=route_data["method"].upper(),
        path=route_data["path"],
        handler=route_data["handler"],
        request_model=load_model(route_data.get("request_model")),
        status_code=int(route_data.get("status_code", 200)),
        description=route_data.get("description"),
    )


def parse_service(service_data: dict) -> Service:
    """
    Parses a dictionary of service configurations into a Service object.
    """
    return Service(
        name=service_data["name"],
        title=service_data["title"],
        version=service_data["version"],
        kv=service_data.get("kv", "memory://"),
        bucket=service_data.get("bucket", service_data["name"]),
        routes=[parse_route(route) for route in service_data["routes"]],
        options=parse_options(service_data.get("options")),
    )


def get_config_for_service(name: str) -> Service:
    """
    Retrieves the configuration for a specific service by its name.
    """
    svc = get_config().services.get(name)
    if svc:
        return svc
    raise ValueError(f"Service with name {name} not found.")


def config_path() -> str:
    BASE_DIR = os.path.dirname(os.path.dirname(__file__))
    return os.getenv(CONFIG_ENV_VAR) or os.path.join(BASE_DIR, "config.yaml")


def parse_config(raw_config: Dict[str, Any]) -> Config:
    """
    Builds a Config object out of the raw YAML document.
    """
    services = {
        name: parse_service({"name": name, **data})
        for name, data in raw_config["services"].items()
    }

    return Config(
        urlPrefix=raw_config.get("urlPrefix", ""),
        title=raw_config["title"],
        version=raw_config["version"],
        services=services,
    )


@lru_cache(maxsize=None)
def get_config() -> Config:
    """
    Loads and parses the entire application configuration from the config.yaml file.
    """
    with open(config_path(), "r") as f:
        raw_config = yaml.safe_load(f)

    return parse_config(raw_config)
