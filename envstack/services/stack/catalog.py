"""Built-in services and the profiles that combine them."""
from typing import Dict, List

from envstack.services.stack.models import ProxyRoute, ServiceSpec, StackProfile

DEFAULT_PROFILE = "standard"


def gitea() -> ServiceSpec:
    return ServiceSpec(
        name='gitea',
        title='Gitea',
        image='gitea/gitea:latest',
        container_name='gitea',
        environment={
            'USER_UID': '1000',
            'USER_GID': '1000',
            'GITEA__database__DB_TYPE': 'sqlite3',
            'GITEA__server__ROOT_URL': '{base_url}/gitea',
        },
        volumes=[
            './gitea-data:/data',
            '/etc/timezone:/etc/timezone:ro',
            '/etc/localtime:/etc/localtime:ro',
        ],
        route=ProxyRoute(path='/gitea/', upstream_host='gitea', upstream_port=3000),
    )


def kanboard() -> ServiceSpec:
    return ServiceSpec(
        name='kanboard',
        title='Kanboard',
        image='kanboard/kanboard:latest',
        container_name='kanboard',
        environment={
            'KANBOARD_URL': '{base_url}/kb',
        },
        volumes=[
            './kanboard-data:/var/www/app/data',
            './kanboard-plugins:/var/www/app/plugins',
        ],
        route=ProxyRoute(path='/kb/', upstream_host='kanboard', upstream_port=80),
    )


def nextcloud() -> ServiceSpec:
    return ServiceSpec(
        name='nextcloud',
        title='Nextcloud',
        image='nextcloud:latest',
        container_name='nextcloud',
        environment={
            'NEXTCLOUD_TRUSTED_DOMAINS': '{address}',
            'OVERWRITEPROTOCOL': 'http',
            'OVERWRITEHOST': '{address}',
            'OVERWRITEWEBROOT': '/nextcloud',
        },
        volumes=[
            './nextcloud-data:/var/www/html',
        ],
        route=ProxyRoute(
            path='/nextcloud/',
            upstream_host='nextcloud',
            upstream_port=80,
            directives=[
                'client_max_body_size 512M',
                'proxy_request_buffering off',
            ],
        ),
    )


def openproject() -> ServiceSpec:
    # Served under a relative URL root, so the prefix is forwarded as-is
    return ServiceSpec(
        name='openproject',
        title='OpenProject',
        image='openproject/openproject:14',
        container_name='openproject',
        environment={
            'OPENPROJECT_SECRET_KEY_BASE': '{secret}',
            'OPENPROJECT_HOST__NAME': '{address}',
            'OPENPROJECT_HTTPS': 'false',
            'OPENPROJECT_RAILS__RELATIVE__URL__ROOT': '/openproject',
        },
        volumes=[
            './openproject-pgdata:/var/openproject/pgdata',
            './openproject-assets:/var/openproject/assets',
        ],
        route=ProxyRoute(
            path='/openproject/',
            upstream_host='openproject',
            upstream_port=80,
            strip_prefix=False,
            directives=['client_max_body_size 256M'],
        ),
        needs_secret=True,
    )


def nginx_proxy(depends_on: List[str]) -> ServiceSpec:
    return ServiceSpec(
        name='nginx',
        title='nginx',
        image='nginx:latest',
        container_name='nginx_proxy',
        ports=['80:80'],
        volumes=['./nginx.conf:/etc/nginx/nginx.conf:ro'],
        depends_on=depends_on,
    )


def _profile(name: str, description: str, services: List[ServiceSpec]) -> StackProfile:
    return StackProfile(
        name=name,
        description=description,
        services=services,
        proxy=nginx_proxy([s.name for s in services]),
    )


def builtin_profiles() -> Dict[str, StackProfile]:
    """Fresh copies of every built-in profile, keyed by name."""
    profiles = [
        _profile(
            'standard',
            'Gitea, Kanboard and Nextcloud behind nginx',
            [gitea(), kanboard(), nextcloud()],
        ),
        _profile(
            'project',
            'The standard stack plus OpenProject',
            [gitea(), kanboard(), nextcloud(), openproject()],
        ),
    ]
    return {p.name: p for p in profiles}


def get_profile(name: str = DEFAULT_PROFILE) -> StackProfile:
    """Look up a built-in profile.

    Raises:
        KeyError: If no profile has that name
    """
    profiles = builtin_profiles()
    if name not in profiles:
        raise KeyError(
            f"Unknown profile '{name}'. Available: {', '.join(sorted(profiles))}"
        )
    return profiles[name]
