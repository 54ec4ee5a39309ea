"""
Kong configuration generation pipeline.

Standard mode (no override document):
1. Check auth preconditions (auth template mode or external OIDC)
2. Parse the OpenAPI document of every backend service
3. Generate Kong services per security tier
4. Write the framework document (always regenerated)
5. Load the user document, seeding it on first run
6. Merge framework + user documents
7. Resolve ${NAME} placeholders and normalize CORS origins
8. Write the final document

Custom mode: when the override document exists it replaces steps 1-6
entirely; only resolution, normalization and the final write run.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from shared.config import GeneratorConfig
from shared.errors import (
    Diagnostic, FatalConfigurationError, MissingDependencyError, StructuralInputError,
    MISSING_DISCOVERY_SOURCE
)
from shared.logging import get_logger, set_run_id, set_project_context
from shared.secrets_manager import SecretsManager, extract_port, get_required_secret
from .documents import DocumentStore
from .kong.builder import GatewayServiceBuilder, ServiceRouteConfig
from .kong.cors import CorsNormalizer
from .kong.merger import ConfigMerger
from .kong.models import GatewayDocument, GatewayService, FORMAT_VERSION, TRANSFORM, OIDC_DISCOVERY_PLACEHOLDER
from .kong.resolver import PlaceholderResolver
from .openapi.classifier import SecurityClassifier
from .openapi.parser import ParsedServiceSecurity, parse_openapi_security
from .project import (
    ProjectConfig, ServiceDescriptor, load_project_config,
    AUTH_SERVICE_NAME, DEFAULT_AUTH_PREFIX
)

MODE_STANDARD = "standard"
MODE_CUSTOM = "custom"


@dataclass
class AuthContext:
    """Where JWT routes get their OIDC discovery document from."""
    use_auth_template: bool
    auth_service_url: Optional[str] = None
    auth_service_prefix: Optional[str] = None
    oidc_discovery_url: Optional[str] = None


@dataclass
class GenerationResult:
    """Outcome of one generation run."""
    mode: str
    output_path: Path
    written: List[Path] = field(default_factory=list)
    services: List[str] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)
    document: Dict[str, Any] = field(default_factory=dict)


class KongConfigGenerator:
    """Runs the generation pipeline for one project."""

    def __init__(
        self,
        config: GeneratorConfig,
        *,
        classifier: Optional[SecurityClassifier] = None,
        builder: Optional[GatewayServiceBuilder] = None,
        merger: Optional[ConfigMerger] = None,
        store: Optional[DocumentStore] = None,
    ):
        self.config = config
        self.logger = get_logger("kong_config.generator")
        self.classifier = classifier or SecurityClassifier()
        self.builder = builder or GatewayServiceBuilder()
        self.merger = merger or ConfigMerger()
        self.store = store or DocumentStore()

    def generate(
        self,
        project: Optional[ProjectConfig] = None,
        secrets: Optional[Dict[str, str]] = None,
    ) -> GenerationResult:
        """
        Generate the final Kong document.

        Raises:
            FatalConfigurationError: On project-level precondition failures,
                before any document is written.
            StructuralInputError: If the user or override document is malformed.
        """
        set_run_id()
        set_project_context(str(self.config.project_root))

        if secrets is None:
            secrets = SecretsManager(self.config.resolve(self.config.secrets_file)).load()
        secrets = dict(secrets)
        # Kong runs in Docker and reaches Redis by its compose service name
        secrets["REDIS_HOST"] = self.config.redis_host_override

        if self.store.exists(self.config.override_config_path):
            return self._generate_custom(secrets)

        if project is None:
            project = load_project_config(self.config.resolve(self.config.project_config_file))
        return self._generate_standard(project, secrets)

    def _generate_custom(self, secrets: Dict[str, str]) -> GenerationResult:
        override_path = self.config.override_config_path
        self.logger.warning(
            "Override document detected, skipping framework and user documents",
            path=str(override_path),
        )

        document = self.store.read(override_path)
        resolved, diagnostics = self._resolve(document, secrets)

        output_path = self.store.write(self.config.output_config_path, resolved)
        self.logger.info("Kong configuration generated", mode=MODE_CUSTOM, output=str(output_path))

        return GenerationResult(
            mode=MODE_CUSTOM,
            output_path=output_path,
            written=[output_path],
            services=[s.get("name", "") for s in resolved.get("services") or [] if isinstance(s, dict)],
            diagnostics=diagnostics,
            document=resolved,
        )

    def _generate_standard(self, project: ProjectConfig, secrets: Dict[str, str]) -> GenerationResult:
        auth = self._auth_context(project, secrets)
        diagnostics: List[Diagnostic] = []

        parsed_services = self._parse_services(project)
        if not parsed_services:
            raise FatalConfigurationError(
                "No backend services with valid OpenAPI documents found",
                hint="Generate the OpenAPI documents of your services and try again",
            )

        kong_services = self._build_services(parsed_services, auth, secrets, diagnostics)

        # Read before any write: a malformed user document leaves existing outputs untouched
        user_doc = self._read_user_document()

        framework_doc = GatewayDocument(
            format_version=FORMAT_VERSION,
            transform=TRANSFORM,
            services=kong_services,
            consumers=[],
        )
        written = [self.store.write(self.config.framework_config_path, framework_doc)]
        self.logger.info("Framework document written", path=str(written[0]), services=len(kong_services))

        if user_doc is None:
            user_doc = self._seed_user_document(auth.use_auth_template)
            written.append(self.config.user_config_path)

        merged = self.merger.merge(framework_doc, user_doc)
        resolved, resolve_diagnostics = self._resolve(merged, secrets)
        diagnostics.extend(resolve_diagnostics)

        output_path = self.store.write(self.config.output_config_path, resolved)
        written.append(output_path)

        for service in kong_services:
            route = service.routes[0]
            self.logger.info("Kong service", name=service.name, paths=route.paths or [])
        self.logger.info("Kong configuration generated", mode=MODE_STANDARD, output=str(output_path))

        return GenerationResult(
            mode=MODE_STANDARD,
            output_path=output_path,
            written=written,
            services=[service.name for service in kong_services],
            diagnostics=diagnostics,
            document=resolved,
        )

    def _auth_context(self, project: ProjectConfig, secrets: Dict[str, str]) -> AuthContext:
        if not project.has_auth_template:
            self.logger.info("No auth template, JWT routes use the external OIDC provider")
            return AuthContext(use_auth_template=False, oidc_discovery_url=OIDC_DISCOVERY_PLACEHOLDER)

        auth_service = project.find_service(AUTH_SERVICE_NAME)
        if auth_service is None:
            raise FatalConfigurationError(
                f"{AUTH_SERVICE_NAME} not found in project configuration",
                hint=f"Add {AUTH_SERVICE_NAME} to the project configuration or unset the framework template",
            )

        auth_url = get_required_secret(
            secrets,
            "AUTH_SERVICE_URL",
            hint="AUTH_SERVICE_URL is required in auth template mode",
        )
        auth_port = extract_port(auth_url)
        if not auth_port:
            raise FatalConfigurationError(
                "AUTH_SERVICE_URL must include a port number (e.g., http://localhost:3001)",
                hint="Update AUTH_SERVICE_URL in the local secrets file to include the port",
                details={"url": auth_url},
            )

        self.logger.info("Auth template mode", auth_service_url=auth_url)
        return AuthContext(
            use_auth_template=True,
            auth_service_url=f"{self.config.service_host_placeholder}:{auth_port}",
            auth_service_prefix=auth_service.global_prefix or DEFAULT_AUTH_PREFIX,
        )

    def _parse_services(self, project: ProjectConfig) -> List[Tuple[ServiceDescriptor, ParsedServiceSecurity]]:
        parsed: List[Tuple[ServiceDescriptor, ParsedServiceSecurity]] = []

        for service in project.services:
            if service.type not in self.config.backend_service_types:
                self.logger.info("Skipping service", service=service.name, type=service.type)
                continue

            openapi_path = self.config.openapi_path(service.name)
            if not openapi_path.is_file():
                self.logger.warning("Skipping service, OpenAPI document not found",
                                    service=service.name, path=str(openapi_path))
                continue

            try:
                security = parse_openapi_security(service.name, openapi_path, classifier=self.classifier)
            except StructuralInputError as e:
                self.logger.warning("Skipping service", service=service.name, error=e.message)
                continue

            if security.grouped_routes.is_empty():
                self.logger.warning("No routes in OpenAPI document", service=service.name, path=str(openapi_path))
            else:
                self.logger.info("Routes parsed", service=service.name, **security.grouped_routes.counts())
            parsed.append((service, security))

        return parsed

    def _build_services(
        self,
        parsed_services: List[Tuple[ServiceDescriptor, ParsedServiceSecurity]],
        auth: AuthContext,
        secrets: Dict[str, str],
        diagnostics: List[Diagnostic],
    ) -> List[GatewayService]:
        kong_services: List[GatewayService] = []

        for service, security in parsed_services:
            service_url = self._kong_service_url(service, secrets)
            if service_url is None:
                continue

            grouped = security.grouped_routes
            if grouped.jwt and not auth.use_auth_template:
                try:
                    self._check_discovery_source(service, secrets)
                except MissingDependencyError as e:
                    diagnostics.append(
                        Diagnostic(code=MISSING_DISCOVERY_SOURCE, message=e.message, details=e.details)
                    )
                    self.logger.warning(
                        "JWT routes detected but no OIDC discovery URL configured",
                        service=service.name,
                        hint="Set OIDC_DISCOVERY_URL, e.g. https://your-domain.auth0.com/.well-known/openid-configuration",
                    )

            builder_start = len(self.builder.diagnostics)
            generated = self.builder.build(
                ServiceRouteConfig(
                    service_name=service.name,
                    service_url=service_url,
                    global_prefix=service.prefix,
                    grouped_routes=grouped,
                    auth_service_url=auth.auth_service_url,
                    auth_service_prefix=auth.auth_service_prefix,
                    oidc_discovery_url=auth.oidc_discovery_url,
                )
            )
            diagnostics.extend(self.builder.diagnostics[builder_start:])

            kong_services.extend(generated)
            self.logger.info("Kong services generated", service=service.name, count=len(generated))

        return kong_services

    def _kong_service_url(self, service: ServiceDescriptor, secrets: Dict[str, str]) -> Optional[str]:
        """Return ${KONG_SERVICE_HOST}:PORT for a service, or None when it cannot be routed."""
        key = service.url_secret_key
        url = secrets.get(key)
        if not url:
            self.logger.warning("Skipping service, URL not found in secrets", service=service.name, secret=key)
            return None

        port = extract_port(url)
        if not port:
            self.logger.warning("Skipping service, URL must include a port number",
                                service=service.name, secret=key)
            return None

        return f"{self.config.service_host_placeholder}:{port}"

    @staticmethod
    def _check_discovery_source(service: ServiceDescriptor, secrets: Dict[str, str]) -> None:
        if not secrets.get("OIDC_DISCOVERY_URL"):
            raise MissingDependencyError(
                f"JWT routes detected in {service.name} but OIDC_DISCOVERY_URL is not set",
                details={"service": service.name},
            )

    def _read_user_document(self) -> Optional[Dict[str, Any]]:
        user_path = self.config.user_config_path
        if not self.store.exists(user_path):
            return None
        self.logger.info("Using existing user document", path=str(user_path))
        return self.store.read_user_document(user_path)

    def _seed_user_document(self, use_auth_template: bool) -> GatewayDocument:
        user_path = self.config.user_config_path
        self.logger.info("User document not found, creating template", path=str(user_path))
        return self.store.seed_user_document(user_path, use_auth_template)

    @staticmethod
    def _resolve(document: Dict[str, Any], secrets: Dict[str, str]):
        resolver = PlaceholderResolver(secrets)
        resolved = resolver.resolve(document)

        normalizer = CorsNormalizer()
        normalizer.normalize(resolved)

        return resolved, resolver.diagnostics + normalizer.diagnostics
