from dataclasses import dataclass, field
from typing import Optional, Union

from core.domain.probe_spec import DEFAULT_TIMEOUT_MS, FieldEquals


@dataclass(frozen=True)
class DirectSource:
    url: str


@dataclass(frozen=True)
class TemplatedSource:
    endpoint: str
    use_coordinates: bool = False


ProbeSource = Union[DirectSource, TemplatedSource]


@dataclass(frozen=True)
class ComponentDefinition:
    id: str
    name: str
    source: ProbeSource
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    validation: Optional[FieldEquals] = None
    expected_status_codes: tuple[int, ...] = (200,)


@dataclass(frozen=True)
class GroupDefinition:
    id: str
    name: str
    description: str = ""
    components: tuple[ComponentDefinition, ...] = ()


@dataclass(frozen=True)
class ExternalDefinition:
    id: str
    name: str
    url: str
    timeout_ms: int = DEFAULT_TIMEOUT_MS


@dataclass(frozen=True)
class MonitorDefinition:
    base_url: str
    test_lat: float
    test_lon: float
    groups: tuple[GroupDefinition, ...] = field(default_factory=tuple)
    external: tuple[ExternalDefinition, ...] = field(default_factory=tuple)
