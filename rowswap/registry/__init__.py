from .endpoint_registry import EndpointRegistry as EndpointRegistry
