"""Collaborator factory.

Provides get_ports() / set_ports() to swap implementations. Defaults to the
in-memory adapters, which start out empty.
"""

from dataclasses import dataclass

from pricing.ports.memory_adapter import InMemoryCatalogStore, InMemoryDiscountRegistry, InMemoryLoyaltyLedger
from pricing.ports.port import CatalogStore, DiscountRegistry, LoyaltyLedger


@dataclass(frozen=True)
class Ports:
    catalog: CatalogStore
    registry: DiscountRegistry
    ledger: LoyaltyLedger


_current_ports: Ports | None = None


def get_ports() -> Ports:
    """Return the active collaborators. Defaults to empty in-memory adapters."""
    global _current_ports
    if _current_ports is None:
        _current_ports = Ports(
            catalog=InMemoryCatalogStore(),
            registry=InMemoryDiscountRegistry(),
            ledger=InMemoryLoyaltyLedger(),
        )
    return _current_ports


def set_ports(ports: Ports) -> None:
    """Override the active collaborators (useful for tests)."""
    global _current_ports
    _current_ports = ports


def reset_ports() -> None:
    """Reset to default collaborators."""
    global _current_ports
    _current_ports = None
