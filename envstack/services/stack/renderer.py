"""Render the orchestration descriptor and the reverse-proxy configuration."""
from typing import Any, Dict

import yaml
from jinja2 import BaseLoader, Environment, StrictUndefined

from envstack.services.stack.models import ServiceSpec, StackContext, StackProfile

COMPOSE_FILE = "docker-compose.yml"
PROXY_FILE = "nginx.conf"

COMPOSE_VERSION = "3.8"

FORWARDED_HEADERS = [
    ("Host", "$host"),
    ("X-Real-IP", "$remote_addr"),
    ("X-Forwarded-For", "$proxy_add_x_forwarded_for"),
    ("X-Forwarded-Proto", "$scheme"),
]

NGINX_TEMPLATE = """\
worker_processes 1;

events {
    worker_connections 1024;
}

http {
    sendfile on;
    tcp_nopush on;
    types_hash_max_size 2048;

    include /etc/nginx/mime.types;
    default_type application/octet-stream;

    server {
        listen {{ listen_port }};
        server_name {{ server_name }};
{% for route in routes %}

        location {{ route.path }} {
            proxy_pass {{ route.upstream }};
{% for name, value in headers %}
            proxy_set_header {{ name }} {{ value }};
{% endfor %}
{% if route.directives %}

{% for directive in route.directives %}
            {{ directive }};
{% endfor %}
{% endif %}
        }
{% endfor %}
    }
}
"""

_jinja_env = Environment(
    loader=BaseLoader(),
    autoescape=False,
    trim_blocks=True,
    lstrip_blocks=True,
    keep_trailing_newline=True,
    undefined=StrictUndefined,
)


def _service_entry(service: ServiceSpec, context: StackContext, network: str) -> Dict[str, Any]:
    entry: Dict[str, Any] = {'image': service.image}
    if service.container_name:
        entry['container_name'] = service.container_name
    if service.environment:
        entry['environment'] = service.render_environment(context)
    if service.ports:
        entry['ports'] = list(service.ports)
    if service.volumes:
        entry['volumes'] = list(service.volumes)
    entry['networks'] = list(service.networks or [network])
    if service.depends_on:
        entry['depends_on'] = list(service.depends_on)
    entry['restart'] = service.restart
    return entry


def build_compose(profile: StackProfile, context: StackContext) -> Dict[str, Any]:
    """Compose document as a plain dictionary."""
    return {
        'version': COMPOSE_VERSION,
        'services': {
            service.name: _service_entry(service, context, profile.network)
            for service in profile.all_services()
        },
        'networks': {
            profile.network: {'driver': 'bridge'},
        },
    }


def render_compose(profile: StackProfile, context: StackContext) -> str:
    """Render docker-compose.yml for the profile.

    Raises:
        ValueError: If the profile needs a secret and the context has none
    """
    if profile.needs_secret and not context.secret:
        raise ValueError(f"Profile '{profile.name}' requires a secret")
    return yaml.dump(
        build_compose(profile, context),
        default_flow_style=False,
        sort_keys=False,
    )


def render_proxy_config(profile: StackProfile, context: StackContext, listen_port: int = 80) -> str:
    """Render nginx.conf routing each service's path prefix to its upstream."""
    template = _jinja_env.from_string(NGINX_TEMPLATE)
    return template.render(
        listen_port=listen_port,
        server_name=context.address,
        routes=profile.routes,
        headers=FORWARDED_HEADERS,
    )
