from abc import ABC, abstractmethod

from core.domain.monitor_definition import MonitorDefinition


class MonitorDefinitionSource(ABC):
    @abstractmethod
    def load(self) -> MonitorDefinition:
        raise NotImplementedError
