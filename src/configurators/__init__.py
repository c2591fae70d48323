"""Configurators: per contract kind reconciliation of a topology graph."""

from .base import (
    ContractCall,
    ContractReader,
    Configurator,
    ConfiguratorStep,
    ContractSdk,
    SdkFactory,
    create_sdk_factory,
    run_configurators,
)
from .endpoint import (
    Endpoint,
    EndpointConfigurator,
    EndpointEdgeConfig,
    configure_endpoint,
)
from .uln302 import (
    Uln302,
    Uln302Configurator,
    Uln302ExecutorConfig,
    Uln302NodeConfig,
    Uln302UlnConfig,
    configure_uln302,
)

__all__ = [
    "ContractCall",
    "ContractReader",
    "Configurator",
    "ConfiguratorStep",
    "ContractSdk",
    "SdkFactory",
    "create_sdk_factory",
    "run_configurators",
    "Endpoint",
    "EndpointConfigurator",
    "EndpointEdgeConfig",
    "configure_endpoint",
    "Uln302",
    "Uln302Configurator",
    "Uln302ExecutorConfig",
    "Uln302NodeConfig",
    "Uln302UlnConfig",
    "configure_uln302",
]
