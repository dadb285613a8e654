"""Exceptions raised at the host boundary."""


class ServiceResolutionError(Exception):
    """Raised when the host service provider cannot supply a required service."""

    def __init__(self, service_type: type) -> None:
        self.service_type = service_type
        super().__init__(f"Service provider returned no {service_type.__name__}")


class PluginConfigError(Exception):
    """Raised when plugin configuration is invalid."""

    pass
