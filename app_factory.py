"""
Application Factory

Creates and configures Flask application with all dependencies.
This factory pattern improves testability by allowing dependency injection
and configuration overrides.
"""

import logging
import os
import secrets
from typing import Optional

from flask import Flask, jsonify
from flask_cors import CORS

from cloudpix.application.dependency_container import DependencyContainer
from cloudpix.application.event_publisher import EventPublisher
from cloudpix.application.file_service import FileService
from cloudpix.application.share_link_service import (
    DEFAULT_PUBLIC_BASE_URL,
    ShareLinkService,
)
from cloudpix.config.celery_config import make_celery
from cloudpix.config.redis_config import (
    RedisConfig,
    create_redis_manager,
    create_redis_repository,
)
from cloudpix.config.share_config import ShareLinkConfig
from cloudpix.config.storage_config import StorageConfig
from cloudpix.domain.files.repositories import FileRepository
from cloudpix.domain.files.services import FileManager
from cloudpix.domain.files.signed_url_service import SignedUrlService
from cloudpix.domain.files.storage_repository import IObjectStorageRepository
from cloudpix.domain.share_links.cascade import CascadeCoordinator
from cloudpix.domain.share_links.repositories import ShareLinkRepository
from cloudpix.domain.share_links.services import ShareLinkManager
from cloudpix.infrastructure.jwt_token_verifier import JWTTokenVerifier
from cloudpix.infrastructure.redis_file_repository import RedisFileRepository
from cloudpix.infrastructure.redis_repository import RedisConnectionManager
from cloudpix.infrastructure.redis_share_link_repository import (
    RedisShareLinkRepository,
)
from cloudpix.infrastructure.storage_factory import StorageFactory

logger = logging.getLogger(__name__)


class AppConfig:
    """Application configuration."""

    def __init__(self):
        self.api_version = os.getenv("API_VERSION", "v1")
        self.flask_env = os.getenv("FLASK_ENV", "development")
        self.is_production = self.flask_env == "production"

        # Origin of the frontend that renders /share/<link_id>
        self.public_base_url = os.getenv("PUBLIC_BASE_URL", DEFAULT_PUBLIC_BASE_URL)

        self.jwt_secret = os.getenv("JWT_SECRET")
        self.jwt_algorithm = os.getenv("JWT_ALGORITHM", "HS256")

        self.redis = RedisConfig()
        self.storage = StorageConfig()
        self.share = ShareLinkConfig()


def create_app(config: Optional[AppConfig] = None) -> Flask:
    """
    Create and configure Flask application.

    Args:
        config: Application configuration, uses default if None

    Returns:
        Configured Flask application
    """
    if config is None:
        config = AppConfig()

    app = Flask(__name__)

    CORS(
        app,
        resources={
            r"/*": {
                "origins": "*",
                "methods": ["GET", "POST", "PUT", "DELETE", "OPTIONS"],
                "allow_headers": ["Content-Type", "Authorization"],
                "expose_headers": ["Content-Type"],
                "max_age": 3600,
            }
        },
    )

    _initialize_infrastructure(app, config)
    _initialize_services(app, config)
    _register_blueprints(app, config)
    _register_health_endpoint(app)

    return app


def _initialize_infrastructure(app: Flask, config: AppConfig) -> None:
    """
    Initialize infrastructure components (Redis, Celery).

    Connections are opened lazily; Redis being down at startup shows up in
    /health, not as a startup failure.
    """
    app.redis_manager = create_redis_manager(config.redis)
    logger.info(f"Redis configured at {config.redis.host}:{config.redis.port}")

    try:
        app.celery = make_celery(app)
        logger.info("Celery initialized successfully")
    except Exception as e:
        logger.warning(f"Could not initialize Celery: {e}")
        app.celery = None


def _initialize_services(app: Flask, config: AppConfig) -> None:
    """
    Build every service once and register it in the DependencyContainer.

    PATTERN:
    --------
    1. Register infrastructure adapters (repositories, storage, verifier)
    2. Register domain services (managers, cascade coordinator)
    3. Register application services (orchestrators)
    4. Attach container to the Flask app

    API handlers and tasks resolve services from ``app.container``.
    """
    container = DependencyContainer()

    container.register_singleton(RedisConnectionManager, app.redis_manager)
    redis_repo = create_redis_repository(app.redis_manager, config.redis)

    # Infrastructure adapters
    share_link_repository = RedisShareLinkRepository(
        redis_repo, retention_grace_seconds=config.share.retention_grace_seconds
    )
    file_repository = RedisFileRepository(redis_repo)

    signed_url_service = SignedUrlService(
        secret_key=config.storage.signing_key,
        base_url=config.storage.download_base_url,
    )
    if not config.storage.signing_key and config.storage.backend == "local":
        logger.warning(
            "STORAGE_SIGNING_KEY not set; signed download URLs will not survive restarts"
        )
    storage_repository = StorageFactory.create_storage(config.storage, signed_url_service)

    jwt_secret = config.jwt_secret
    if not jwt_secret:
        if config.is_production:
            raise RuntimeError("JWT_SECRET must be set in production")
        jwt_secret = secrets.token_hex(32)
        logger.warning("JWT_SECRET not set; using a random secret for this process")
    token_verifier = JWTTokenVerifier(jwt_secret, [config.jwt_algorithm])

    container.register_singleton(ShareLinkRepository, share_link_repository)
    container.register_singleton(FileRepository, file_repository)
    container.register_singleton(SignedUrlService, signed_url_service)
    container.register_singleton(IObjectStorageRepository, storage_repository)
    container.register_singleton(JWTTokenVerifier, token_verifier)

    # Domain services
    cascade_coordinator = CascadeCoordinator(share_link_repository)
    file_manager = FileManager(
        file_repository,
        storage_repository,
        cascade_coordinator,
        upload_policy=config.storage.upload_policy(),
    )
    share_link_manager = ShareLinkManager(
        share_link_repository,
        file_repository,
        expiration_policy=config.share.expiration_policy(),
    )

    container.register_singleton(CascadeCoordinator, cascade_coordinator)
    container.register_singleton(FileManager, file_manager)
    container.register_singleton(ShareLinkManager, share_link_manager)

    # Application services
    event_publisher = EventPublisher()
    container.setup_event_handlers(event_publisher)

    share_link_service = ShareLinkService(
        share_link_manager,
        file_manager,
        storage_repository,
        credential_policy=config.share.credential_policy(),
        event_publisher=event_publisher,
        public_base_url=config.public_base_url,
    )
    file_service = FileService(file_manager, event_publisher=event_publisher)

    container.register_singleton(EventPublisher, event_publisher)
    container.register_singleton(ShareLinkService, share_link_service)
    container.register_singleton(FileService, file_service)

    app.container = container
    logger.info("Application services initialized with DependencyContainer")


def _register_blueprints(app: Flask, config: AppConfig) -> None:
    """Register API blueprints."""
    from cloudpix.api.v1 import api_v1_bp

    app.register_blueprint(api_v1_bp)

    logger.info(
        f"API {config.api_version} registered at /api/{config.api_version} "
        f"with Swagger UI at /api/{config.api_version}/docs"
    )


def _get_health_status(app: Flask) -> tuple[dict, int]:
    """
    Get health status of all system components.

    Returns:
        Tuple of (health_status_dict, http_status_code)
    """
    health_status = {
        "status": "ok",
        "message": "backend ready",
        "redis": "unknown",
        "celery": "unknown",
    }

    if app.redis_manager.health_check():
        health_status["redis"] = "connected"
    else:
        health_status["redis"] = "disconnected"
        health_status["status"] = "degraded"

    if getattr(app, "celery", None) is not None:
        health_status["celery"] = "available"
    else:
        health_status["celery"] = "unavailable"
        health_status["status"] = "degraded"

    status_code = 200 if health_status["status"] == "ok" else 503
    return health_status, status_code


def _register_health_endpoint(app: Flask) -> None:
    """Register health check endpoint."""

    @app.route("/health", methods=["GET"])
    def health():
        """
        Health check endpoint.
        Returns overall health status of the application and its dependencies.
        """
        health_status, status_code = _get_health_status(app)
        return jsonify(health_status), status_code
