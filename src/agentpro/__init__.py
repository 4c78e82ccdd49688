"""
Agent Pro - global distribution of expert agents, prompts, instructions and skills

Agent Pro installs a bundled tree of reference documents into a per-user
storage location and exposes it through a read-only virtual filesystem,
a navigable tree projection and a small set of pick-and-act commands.
"""

__version__ = "1.0.0"
__all__ = ["__version__"]
