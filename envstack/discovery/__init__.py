"""Host discovery helpers."""
from envstack.discovery.network import AddressResolver, ResolvedAddress

__all__ = ['AddressResolver', 'ResolvedAddress']
