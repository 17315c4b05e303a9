"""The provisioning pipeline.

A strictly linear sequence of stages; each stage either succeeds and moves
the pipeline forward or raises, leaving it at the last stage reached.
Nothing is retried and nothing is rolled back.
"""
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional

from envstack.core.config import get_config
from envstack.core.logger import get_logger
from envstack.core.preflight import PreflightChecker
from envstack.core.runner import CommandRunner
from envstack.discovery.network import AUTO, AddressResolver, ResolvedAddress
from envstack.services.docker_installer import DockerInstaller
from envstack.services.stack.catalog import DEFAULT_PROFILE, get_profile
from envstack.services.stack.launcher import ComposeLauncher
from envstack.services.stack.materializer import MaterializedStack, StackMaterializer

logger = get_logger(__name__)


class Stage(Enum):
    UNCHECKED = "unchecked"
    PRIVILEGE_VERIFIED = "privilege-verified"
    OS_VERIFIED = "os-verified"
    ADDRESS_RESOLVED = "address-resolved"
    DEPENDENCIES_INSTALLED = "dependencies-installed"
    REPOSITORY_REGISTERED = "repository-registered"
    RUNTIME_INSTALLED = "runtime-installed"
    PERMISSIONS_GRANTED = "permissions-granted"
    FILES_MATERIALIZED = "files-materialized"
    STACK_LAUNCHED = "stack-launched"

    @property
    def next(self) -> Optional["Stage"]:
        stages = list(Stage)
        idx = stages.index(self)
        return stages[idx + 1] if idx + 1 < len(stages) else None


INSTALL_STAGES = (
    Stage.DEPENDENCIES_INSTALLED,
    Stage.REPOSITORY_REGISTERED,
    Stage.RUNTIME_INSTALLED,
    Stage.PERMISSIONS_GRANTED,
)


@dataclass
class PipelineOptions:
    """Choices that distinguish one provisioning run from another."""
    profile: str = DEFAULT_PROFILE
    strategy: str = AUTO
    static_address: Optional[str] = None
    strict_address: bool = False
    workdir: Optional[str] = None
    project_name: Optional[str] = None
    skip_install: bool = False
    secret: Optional[str] = None


@dataclass
class ProvisionResult:
    """What a completed run produced."""
    address: ResolvedAddress
    stack: MaterializedStack
    stage: Stage
    urls: Dict[str, str] = field(default_factory=dict)
    docker_user: Optional[str] = None
    skipped: List[Stage] = field(default_factory=list)


class ProvisionPipeline:
    """Runs preflight, address resolution, Docker installation and stack launch."""

    def __init__(
        self,
        options: Optional[PipelineOptions] = None,
        runner: Optional[CommandRunner] = None,
        preflight: Optional[PreflightChecker] = None,
        resolver: Optional[AddressResolver] = None,
        installer: Optional[DockerInstaller] = None,
    ):
        config = get_config()
        self.options = options or PipelineOptions()
        self.runner = runner or CommandRunner()
        self.preflight = preflight or PreflightChecker(skip_privileges=self.runner.mock)
        self.resolver = resolver or AddressResolver()
        self.installer = installer or DockerInstaller(runner=self.runner, config=config)
        self.workdir = Path(self.options.workdir or config.workdir)
        self.project_name = self.options.project_name or config.project_name
        self.stage = Stage.UNCHECKED
        self.skipped: List[Stage] = []

    def advance(self, stage: Stage) -> None:
        """Move to the next stage; only forward steps of one are allowed."""
        if self.stage.next is not stage:
            raise RuntimeError(f"Cannot move from {self.stage.value} to {stage.value}")
        logger.debug(f"Pipeline stage: {stage.value}")
        self.stage = stage

    def run(self) -> ProvisionResult:
        # Resolve the profile first so a typo fails before anything runs
        profile = get_profile(self.options.profile)

        self.preflight.check_privileges()
        self.advance(Stage.PRIVILEGE_VERIFIED)
        release = self.preflight.check_os()
        self.advance(Stage.OS_VERIFIED)

        address = self.resolver.resolve(
            strategy=self.options.strategy,
            static_address=self.options.static_address,
            strict=self.options.strict_address,
        )
        self.advance(Stage.ADDRESS_RESOLVED)

        docker_user = None
        if self.options.skip_install:
            logger.info("Skipping Docker installation")
            for stage in INSTALL_STAGES:
                self.skipped.append(stage)
                self.advance(stage)
        else:
            self.installer.install_prerequisites()
            self.advance(Stage.DEPENDENCIES_INSTALLED)
            self.installer.register_repository(release.version_codename)
            self.advance(Stage.REPOSITORY_REGISTERED)
            self.installer.install_runtime()
            self.advance(Stage.RUNTIME_INSTALLED)
            docker_user = self.installer.grant_permissions()
            self.advance(Stage.PERMISSIONS_GRANTED)

        materializer = StackMaterializer(self.workdir)
        context = materializer.context_for(profile, address.address, self.options.secret)
        stack = materializer.materialize(profile, context)
        self.advance(Stage.FILES_MATERIALIZED)

        ComposeLauncher(self.workdir, runner=self.runner, project_name=self.project_name).up()
        self.advance(Stage.STACK_LAUNCHED)

        urls = {
            service.title or service.name: service.public_url(context)
            for service in profile.services
            if service.route is not None
        }
        return ProvisionResult(
            address=address,
            stack=stack,
            stage=self.stage,
            urls=urls,
            docker_user=docker_user,
            skipped=list(self.skipped),
        )
