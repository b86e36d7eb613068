from typing import Optional
from urllib.parse import urlparse

from pydantic import Field, field_validator, model_validator

from core.domain.probe_spec import DEFAULT_TIMEOUT_MS
from infra.schemas import CamelModel


def _check_absolute_url(url: str) -> str:
    parsed = urlparse(url)
    if not all([parsed.scheme, parsed.netloc]):
        raise ValueError(f"Invalid URL: {url}")

    if parsed.scheme not in ("http", "https"):
        raise ValueError(f"URL must use http or https scheme: {url}")

    return url


class ValidationRuleDocument(CamelModel):
    field: str = Field(min_length=1)
    value: str


class ComponentDocument(CamelModel):
    id: str = Field(min_length=1)
    name: str
    endpoint: Optional[str] = None
    url: Optional[str] = None
    params: bool = False
    timeout: int = Field(default=DEFAULT_TIMEOUT_MS, gt=0)
    validation: Optional[ValidationRuleDocument] = Field(default=None, alias="validate")
    expected_status_codes: list[int] = Field(default_factory=lambda: [200], min_length=1)

    @field_validator("url", mode="after")
    @classmethod
    def is_url_valid(cls, url: Optional[str]):
        if url is not None:
            _check_absolute_url(url)

        return url

    @model_validator(mode="after")
    def has_target(self) -> "ComponentDocument":
        if not self.url and not self.endpoint:
            raise ValueError(f"Component '{self.id}' must declare either 'url' or 'endpoint'")

        return self


class GroupDocument(CamelModel):
    id: str = Field(min_length=1)
    name: str
    description: str = ""
    components: list[ComponentDocument] = Field(default_factory=list)


class ExternalDocument(CamelModel):
    id: str = Field(min_length=1)
    name: str
    url: str
    timeout: int = Field(default=DEFAULT_TIMEOUT_MS, gt=0)

    @field_validator("url", mode="after")
    @classmethod
    def is_url_valid(cls, url: str):
        return _check_absolute_url(url)


class MonitorDocument(CamelModel):
    base_url: str = ""
    test_lat: float = 0.0
    test_lon: float = 0.0
    groups: list[GroupDocument] = Field(default_factory=list)
    external: list[ExternalDocument] = Field(default_factory=list)

    @model_validator(mode="after")
    def base_url_required_for_endpoints(self) -> "MonitorDocument":
        uses_endpoint = any(
            component.url is None for group in self.groups for component in group.components
        )

        if uses_endpoint:
            if not self.base_url:
                raise ValueError("baseUrl is required when a component declares an endpoint")

            _check_absolute_url(self.base_url)

        return self
