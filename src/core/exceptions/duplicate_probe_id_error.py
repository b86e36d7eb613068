from core.exceptions.configuration_error import ConfigurationError


class DuplicateProbeIdError(ConfigurationError):
    def __init__(self, probe_id: str):
        self.probe_id = probe_id
        super().__init__(f"Probe with id='{probe_id}' is declared more than once")
