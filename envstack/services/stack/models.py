"""Service, route and profile models for the generated stack."""
import re
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class StackContext(BaseModel):
    """Values substituted into the templates.

    ``secret`` is only consumed by services that need a random key.
    """

    model_config = ConfigDict(extra='forbid', frozen=True)

    address: str = Field(..., min_length=1, description="Published address of the host")
    secret: Optional[str] = Field(None, description="Random token for services that need one")

    @property
    def base_url(self) -> str:
        return f"http://{self.address}"


class ProxyRoute(BaseModel):
    """A path prefix served by the reverse proxy."""

    model_config = ConfigDict(extra='forbid')

    path: str = Field(..., description="Location prefix, e.g. /gitea/")
    upstream_host: str
    upstream_port: int = 80
    directives: List[str] = Field(default_factory=list, description="Extra nginx directives for the location")
    strip_prefix: bool = Field(True, description="Drop the path prefix before forwarding")

    @field_validator('path')
    @classmethod
    def validate_path(cls, v):
        """Paths are wrapped in slashes so the prefix is stripped upstream."""
        if not (v.startswith('/') and v.endswith('/')):
            raise ValueError(f"Route path must start and end with '/'. Got: {v}")
        return v

    @property
    def upstream(self) -> str:
        # A URI part on proxy_pass replaces the matched prefix
        base = f"http://{self.upstream_host}:{self.upstream_port}"
        return f"{base}/" if self.strip_prefix else base


class ServiceSpec(BaseModel):
    """One service of the orchestration descriptor.

    Environment values may contain ``{address}``, ``{base_url}`` and
    ``{secret}`` placeholders, filled from a StackContext at render time.
    """

    model_config = ConfigDict(extra='forbid')

    name: str
    title: str = ""
    image: str
    container_name: Optional[str] = None
    environment: Dict[str, str] = Field(default_factory=dict)
    volumes: List[str] = Field(default_factory=list)
    ports: List[str] = Field(default_factory=list)
    networks: List[str] = Field(default_factory=lambda: ['proxy-net'])
    depends_on: List[str] = Field(default_factory=list)
    restart: str = "always"
    route: Optional[ProxyRoute] = None
    needs_secret: bool = False

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        if not re.match(r'^[a-z0-9][a-z0-9_.-]*$', v):
            raise ValueError(
                f"Service name '{v}' must be lowercase letters, digits, '.', '_' or '-'."
            )
        return v

    def render_environment(self, context: StackContext) -> List[str]:
        """Environment as compose KEY=value entries with placeholders filled."""
        values = {
            'address': context.address,
            'base_url': context.base_url,
            'secret': context.secret or '',
        }
        return [f"{key}={value.format(**values)}" for key, value in self.environment.items()]

    def public_url(self, context: StackContext) -> Optional[str]:
        if self.route is None:
            return None
        return f"{context.base_url}{self.route.path.rstrip('/')}"


class StackProfile(BaseModel):
    """A named service set plus the proxy in front of it."""

    model_config = ConfigDict(extra='forbid')

    name: str
    description: str = ""
    services: List[ServiceSpec]
    proxy: ServiceSpec
    network: str = "proxy-net"

    @property
    def routes(self) -> List[ProxyRoute]:
        return [s.route for s in self.services if s.route is not None]

    @property
    def needs_secret(self) -> bool:
        return any(s.needs_secret for s in self.services)

    def all_services(self) -> List[ServiceSpec]:
        return [*self.services, self.proxy]
