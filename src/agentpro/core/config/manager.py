"""
Agent Pro configuration management (YAML layers + environment overrides).
"""
from __future__ import annotations

import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple

import jsonschema
import yaml

from agentpro.core.exceptions import ConfigError
from agentpro.core.utils.merge import deep_merge as _deep_merge
from agentpro.data import get_data_path, read_json

logger = logging.getLogger(__name__)

ENV_PREFIX = "AGENTPRO_"
SCHEMA_NAME = "config.schema.json"


class ConfigManager:
    """Load, merge, and validate Agent Pro configuration.

    Configuration sources (highest to lowest priority):
    1. Environment variables: AGENTPRO_<section>__<key>
    2. User config: <user-config-dir>/config/*.yaml (alphabetical order)
    3. Bundled defaults: agentpro.data/config/*.yaml (alphabetical order)
    """

    def __init__(self, user_config_dir: Optional[Path] = None) -> None:
        if user_config_dir is None:
            from agentpro.core.utils.paths import get_user_config_dir

            user_config_dir = get_user_config_dir(create=False)
        self.user_root_dir = Path(user_config_dir)

        # Bundled defaults from agentpro.data package (always available)
        self.core_config_dir = get_data_path("config")
        # User-specific config overlays (e.g. ~/.agentpro/config)
        self.user_config_dir = self.user_root_dir / "config"

        self._cache: Optional[Dict[str, Any]] = None

    def deep_merge(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Recursively merge dictionaries. Delegates to shared implementation."""
        return _deep_merge(base, override)

    def load_yaml(self, path: Path) -> Dict[str, Any]:
        from agentpro.core.utils.io import read_yaml

        # Fail closed: configuration must never silently ignore invalid YAML.
        try:
            data = read_yaml(path, default={}, raise_on_error=True)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in {path}: {exc}", context={"path": str(path)}) from exc
        if not isinstance(data, dict):
            raise ConfigError(f"Config file must contain a mapping: {path}", context={"path": str(path)})
        return data

    def validate_schema(self, config: Dict[str, Any]) -> None:
        schema = read_json("schemas", SCHEMA_NAME)
        try:
            jsonschema.validate(instance=config, schema=schema)
        except jsonschema.ValidationError as exc:
            location = ".".join(str(p) for p in exc.absolute_path) or "<root>"
            raise ConfigError(
                f"Invalid configuration at {location}: {exc.message}",
                context={"key": location},
            ) from exc

    # ========== Environment overrides ==========

    def _as_bool(self, v: str) -> Optional[bool]:
        low = v.strip().lower()
        if low in {"true", "false"}:
            return low == "true"
        return None

    def _as_int(self, v: str) -> Optional[int]:
        if re.fullmatch(r"[-+]?\d+", v.strip() or " "):
            return int(v)
        return None

    def _as_float(self, v: str) -> Optional[float]:
        s = v.strip()
        if re.fullmatch(r"[-+]?\d*\.\d+", s) or re.fullmatch(r"[-+]?\d+\.\d*", s):
            return float(s)
        return None

    def _as_json(self, v: str) -> Optional[Any]:
        s = v.strip()
        if (s.startswith("{") and s.endswith("}")) or (s.startswith("[") and s.endswith("]")):
            try:
                return json.loads(s)
            except json.JSONDecodeError:
                return None
        return None

    def _coerce_type(self, value: str) -> Any:
        for caster in (self._as_bool, self._as_int, self._as_float, self._as_json):
            result = caster(value)
            if result is not None:
                return result
        return value.strip()

    def _parse_env_key(self, raw: str) -> List[str]:
        # Only double-underscore keys are overrides; plain AGENTPRO_FOO vars are ignored.
        if not raw or "__" not in raw:
            return []
        segs = raw.split("__")
        if any(seg == "" for seg in segs):
            raise ConfigError(f"Malformed {ENV_PREFIX}* key: empty segment in '{raw}'.")
        return [seg.lower() for seg in segs]

    def _iter_env_overrides(self) -> Iterator[Tuple[List[str], Any]]:
        for key in sorted(os.environ.keys()):
            if not key.startswith(ENV_PREFIX):
                continue
            path = self._parse_env_key(key[len(ENV_PREFIX):])
            if not path:
                continue
            yield path, self._coerce_type(os.environ[key])

    def _set_nested(self, root: Dict[str, Any], path: List[str], value: Any) -> None:
        cur: Any = root
        for part in path[:-1]:
            nxt = cur.setdefault(part, {})
            if not isinstance(nxt, dict):
                raise ConfigError(
                    f"Environment override {'.'.join(path)} traverses a non-mapping value",
                    context={"key": ".".join(path)},
                )
            cur = nxt
        cur[path[-1]] = value

    def apply_env_overrides(self, cfg: Dict[str, Any]) -> None:
        for path, typed_value in self._iter_env_overrides():
            self._set_nested(cfg, path, typed_value)

    # ========== Loading ==========

    def _load_directory(self, directory: Path, cfg: Dict[str, Any]) -> Dict[str, Any]:
        """Merge every ``*.yaml``/``*.yml`` file of ``directory`` into ``cfg``."""
        if not directory.is_dir():
            return cfg
        files = sorted(list(directory.glob("*.yaml")) + list(directory.glob("*.yml")))
        for path in files:
            cfg = self.deep_merge(cfg, self.load_yaml(path))
        return cfg

    def _load_config_uncached(self) -> Dict[str, Any]:
        cfg: Dict[str, Any] = {}
        cfg = self._load_directory(self.core_config_dir, cfg)
        cfg = self._load_directory(self.user_config_dir, cfg)
        self.apply_env_overrides(cfg)
        return cfg

    def load_config(self, validate: bool = True) -> Dict[str, Any]:
        """Load the merged configuration (cached per manager instance).

        Returned dict should be treated as immutable.
        """
        if self._cache is None:
            self._cache = self._load_config_uncached()
            logger.debug("Loaded configuration from %s and %s", self.core_config_dir, self.user_config_dir)
        if validate:
            self.validate_schema(self._cache)
        return self._cache

    def clear_cache(self) -> None:
        self._cache = None

    # ========== Accessor Methods ==========

    def get_all(self) -> Dict[str, Any]:
        """Get full merged configuration."""
        return self.load_config(validate=False)

    def get(self, key: str, default: Any = None) -> Any:
        """Get a config value by dot-notation key.

        Example:
            >>> manager.get('resources.scheme')
            'agentpro'
            >>> manager.get('nonexistent.key', 'fallback')
            'fallback'
        """
        current: Any = self.load_config(validate=False)
        for part in key.split("."):
            if isinstance(current, dict) and part in current:
                current = current[part]
            else:
                return default
        return current


__all__ = ["ConfigManager", "ENV_PREFIX"]
