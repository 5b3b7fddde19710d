import pytest
from fastapi.testclient import TestClient

from config.settings import RunCfg
from rescaler.core.rescaler import Rescaler
from rescaler.service.scale_service import ScaleService, get_scale_service
from tests.fixtures.run_api import (
    FakeCredentialProvider,
    FakeRunApi,
    StaticProjectResolver,
    StaticServiceNameResolver,
)


@pytest.fixture
def run_api() -> FakeRunApi:
    return FakeRunApi()


@pytest.fixture
def credentials(run_api: FakeRunApi) -> FakeCredentialProvider:
    return FakeCredentialProvider(run_api)


@pytest.fixture
def rescaler(credentials: FakeCredentialProvider) -> Rescaler:
    return Rescaler(
        credentials=credentials,
        projects=StaticProjectResolver(),
        services=StaticServiceNameResolver(),
        run_cfg=RunCfg(),
    )


@pytest.fixture
def scale_service(rescaler: Rescaler) -> ScaleService:
    return ScaleService(rescaler=rescaler)


@pytest.fixture
def client(scale_service: ScaleService):
    """App wired to the in-memory Run API instead of Google."""
    from main import create_app

    app = create_app()
    app.dependency_overrides[get_scale_service] = lambda: scale_service
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
