from dataclasses import dataclass, field
from typing import Dict, List, Optional

@dataclass
class RunCfg:
    region: str = "us-central1"
    api_host: str = "googleapis.com"
    api_group: str = "knative.dev"
    # Read from the process environment; Cloud Run sets it for every service
    service_env_var: str = "K_SERVICE"
    # Skips the metadata server lookup when set
    project: Optional[str] = None
    launch_stage: str = "BETA"
    launch_stage_annotation: str = "run.googleapis.com/launch-stage"
    min_scale_annotation: str = "autoscaling.knative.dev/minScale"
    max_scale_annotation: str = "autoscaling.knative.dev/maxScale"

    def service_url(self, project: str, service: str) -> str:
        return (
            f"https://{self.region}-run.{self.api_host}"
            f"/apis/serving.{self.api_group}/v1/namespaces/{project}/services/{service}"
        )

@dataclass
class AuthCfg:
    scopes: List[str] = field(default_factory=lambda: [
        "https://www.googleapis.com/auth/cloud-platform",
    ])

@dataclass
class MetadataCfg:
    project_id_url: str = "http://metadata.google.internal/computeMetadata/v1/project/project-id"
    headers: Dict[str, str] = field(default_factory=lambda: {"Metadata-Flavor": "Google"})
    timeout_seconds: float = 5.0

@dataclass
class HttpCfg:
    timeout_seconds: float = 30.0

@dataclass
class Settings:
    run: RunCfg = field(default_factory=RunCfg)
    auth: AuthCfg = field(default_factory=AuthCfg)
    metadata: MetadataCfg = field(default_factory=MetadataCfg)
    http: HttpCfg = field(default_factory=HttpCfg)
    # Routes registered as /scale/<name>, e.g. hit "up" before a known burst
    presets: Dict[str, Dict[str, int]] = field(default_factory=lambda: {
        "up": {"min": 100, "max": 1000},
        "down": {"min": 0, "max": 1000},
    })
    log_level: str = "INFO"

settings = Settings()
