import asyncio
import logging
import os
from typing import List, Mapping, Optional, Protocol

import google.auth
import httpx
from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request

from rescaler.core.errors import CredentialError, IdentityResolutionError

logger = logging.getLogger(__name__)


class CredentialProvider(Protocol):
    async def acquire_client(self) -> httpx.AsyncClient:
        """Return a client authorised against the management API. Caller closes it."""
        ...


class ProjectResolver(Protocol):
    async def resolve_project_id(self) -> str:
        ...


class ServiceNameResolver(Protocol):
    def resolve_service_name(self) -> str:
        ...


class GoogleCredentialProvider:
    """
    Application Default Credentials -> bearer-token httpx client.

    google-auth only ships a blocking transport, so the lookup and token
    refresh run in a worker thread to keep the event loop free.
    """

    def __init__(self, scopes: List[str], timeout: float):
        self.scopes = scopes
        self.timeout = timeout

    async def acquire_client(self) -> httpx.AsyncClient:
        try:
            token = await asyncio.to_thread(self._fetch_token)
        except GoogleAuthError as e:
            raise CredentialError(f"Failed to obtain Google credentials: {e}") from e

        return httpx.AsyncClient(
            headers={"Authorization": f"Bearer {token}"},
            timeout=self.timeout,
        )

    def _fetch_token(self) -> str:
        credentials, _ = google.auth.default(scopes=self.scopes)
        credentials.refresh(Request())
        logger.debug(f"[Auth] refreshed token for {type(credentials).__name__}")
        return credentials.token


class MetadataProjectResolver:
    """
    Works out which project we run in: the configured project, then the
    project Application Default Credentials detect (gcloud config,
    GOOGLE_CLOUD_PROJECT), then the GCE/Cloud Run metadata server.
    """

    def __init__(
        self,
        url: str,
        headers: Mapping[str, str],
        timeout: float,
        project: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        adc_project: bool = True,
    ):
        self.url = url
        self.headers = dict(headers)
        self.timeout = timeout
        self.project = project
        self._transport = transport
        self.adc_project = adc_project

    async def resolve_project_id(self) -> str:
        if self.project:
            return self.project

        if self.adc_project:
            project = await asyncio.to_thread(self._detect_adc_project)
            if project:
                return project

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(self.url, headers=self.headers)
        except httpx.HTTPError as e:
            raise IdentityResolutionError(f"Metadata server unreachable: {e}") from e

        if response.status_code != httpx.codes.OK:
            raise IdentityResolutionError(
                f"Metadata server answered {response.status_code} for project id"
            )

        project = response.text.strip()
        if not project:
            raise IdentityResolutionError("Metadata server returned an empty project id")
        return project

    def _detect_adc_project(self) -> Optional[str]:
        try:
            _, project = google.auth.default()
        except GoogleAuthError as e:
            logger.debug(f"[Auth] no project from default credentials: {e}")
            return None
        return project


class EnvServiceNameResolver:
    def __init__(self, env_var: str, environ: Optional[Mapping[str, str]] = None):
        self.env_var = env_var
        self._environ = environ

    def resolve_service_name(self) -> str:
        environ = os.environ if self._environ is None else self._environ
        name = environ.get(self.env_var, "")
        if not name:
            raise IdentityResolutionError(f"{self.env_var} is not set")
        return name
