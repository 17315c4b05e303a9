"""Generated multi-service stack: models, catalog, rendering and launch."""
from envstack.services.stack.catalog import DEFAULT_PROFILE, builtin_profiles, get_profile
from envstack.services.stack.launcher import ComposeLauncher
from envstack.services.stack.materializer import MaterializedStack, StackMaterializer, generate_secret
from envstack.services.stack.models import ProxyRoute, ServiceSpec, StackContext, StackProfile
from envstack.services.stack.renderer import render_compose, render_proxy_config

__all__ = [
    'DEFAULT_PROFILE',
    'builtin_profiles',
    'get_profile',
    'ComposeLauncher',
    'MaterializedStack',
    'StackMaterializer',
    'generate_secret',
    'ProxyRoute',
    'ServiceSpec',
    'StackContext',
    'StackProfile',
    'render_compose',
    'render_proxy_config',
]
