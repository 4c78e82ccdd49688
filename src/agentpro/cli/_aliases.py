"""Central registry for Agent Pro CLI aliases."""

from __future__ import annotations

from typing import Dict, List, Tuple

# Canonical domain (folder) -> extra CLI aliases.
DOMAIN_ALIASES: Dict[str, List[str]] = {
    "resources": ["res"],
}


def domain_cli_names(canonical_domain: str) -> Tuple[str, List[str]]:
    """Return (primary, aliases) for an on-disk canonical domain name."""
    return canonical_domain, list(DOMAIN_ALIASES.get(canonical_domain, []))


__all__ = ["DOMAIN_ALIASES", "domain_cli_names"]
