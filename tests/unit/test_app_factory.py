"""
Unit tests for the application factory and the health endpoint.
"""

from unittest.mock import patch

import pytest

from app_factory import AppConfig, create_app
from cloudpix.application.file_service import FileService
from cloudpix.application.share_link_service import ShareLinkService
from cloudpix.domain.files.storage_repository import IObjectStorageRepository
from cloudpix.infrastructure.jwt_token_verifier import JWTTokenVerifier
from cloudpix.infrastructure.local_file_storage_repository import (
    LocalFileStorageRepository,
)
from cloudpix.infrastructure.redis_repository import RedisConnectionManager


@pytest.fixture
def config(tmp_path, monkeypatch):
    monkeypatch.setenv("STORAGE_BACKEND", "local")
    monkeypatch.setenv("STORAGE_DIR", str(tmp_path))
    monkeypatch.setenv("JWT_SECRET", "factory-secret")
    monkeypatch.setenv("PUBLIC_BASE_URL", "https://share.example")
    monkeypatch.delenv("FLASK_ENV", raising=False)
    return AppConfig()


def test_container_wiring(config):
    app = create_app(config)

    container = app.container
    assert isinstance(container.resolve(IObjectStorageRepository), LocalFileStorageRepository)
    assert container.resolve(JWTTokenVerifier).secret_key == "factory-secret"
    assert container.resolve(ShareLinkService).public_base_url == "https://share.example"
    assert container.resolve(FileService) is container.resolve(FileService)


def test_missing_jwt_secret_in_production(config):
    config.jwt_secret = None
    config.is_production = True

    with pytest.raises(RuntimeError):
        create_app(config)


def test_missing_jwt_secret_in_development(config):
    config.jwt_secret = None

    app = create_app(config)

    assert app.container.resolve(JWTTokenVerifier).secret_key


def test_health_ok(config):
    app = create_app(config)

    with patch.object(RedisConnectionManager, "health_check", return_value=True):
        response = app.test_client().get("/health")

    assert response.status_code == 200
    assert response.get_json()["redis"] == "connected"


def test_health_degraded_without_redis(config):
    app = create_app(config)

    with patch.object(RedisConnectionManager, "health_check", return_value=False):
        response = app.test_client().get("/health")

    body = response.get_json()
    assert response.status_code == 503
    assert body["status"] == "degraded"
    assert body["redis"] == "disconnected"


def test_swagger_docs_served(config):
    response = create_app(config).test_client().get("/api/v1/swagger.json")

    assert response.status_code == 200
    assert "/share/{link_id}" in response.get_json()["paths"]
