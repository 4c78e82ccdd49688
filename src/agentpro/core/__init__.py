"""Agent Pro core: resource installation, virtual filesystem, tree and commands."""
