from __future__ import annotations

import os
from contextlib import contextmanager
from dataclasses import dataclass, fields, replace
from typing import Any, Iterator, Mapping

from .dtypes import normalize_dtype


ENV_LEAF_SIZE = "PYSTRASSEN_LEAF_SIZE"
ENV_EDGE_ITEMS = "PYSTRASSEN_EDGE_ITEMS"
ENV_DEFAULT_DTYPE = "PYSTRASSEN_DEFAULT_DTYPE"
ENV_OVERFLOW_PREFLIGHT = "PYSTRASSEN_OVERFLOW_PREFLIGHT"
ENV_TEXTBOOK_WARN_PRODUCTS = "PYSTRASSEN_TEXTBOOK_WARN_PRODUCTS"

_FALSE_TOKENS = ("0", "false", "no", "off")
_TRUE_TOKENS = ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    leaf_size: int = 1
    edge_items: int = 4
    default_dtype: str = "int32"
    overflow_preflight: bool = True
    textbook_warn_products: int = 1 << 20

    def validated(self) -> "Settings":
        if not isinstance(self.leaf_size, int) or self.leaf_size < 1:
            raise ValueError(f"leaf_size must be an integer >= 1, got {self.leaf_size!r}")
        if not isinstance(self.edge_items, int) or self.edge_items < 1:
            raise ValueError(f"edge_items must be an integer >= 1, got {self.edge_items!r}")
        if normalize_dtype(self.default_dtype) is None:
            raise ValueError(f"default_dtype {self.default_dtype!r} is not a supported dtype")
        if not isinstance(self.textbook_warn_products, int) or self.textbook_warn_products < 1:
            raise ValueError(
                f"textbook_warn_products must be an integer >= 1, got {self.textbook_warn_products!r}"
            )
        return self


def _env_int(environ: Mapping[str, str], name: str, default: int, *, minimum: int = 1) -> int:
    raw = environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw.strip())
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}, got {raw!r}")
    return value


def _env_bool(environ: Mapping[str, str], name: str, default: bool) -> bool:
    raw = environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    s = raw.strip().lower()
    if s in _FALSE_TOKENS:
        return False
    if s in _TRUE_TOKENS:
        return True
    raise ValueError(f"{name} must be a boolean flag (1/0, true/false, yes/no, on/off), got {raw!r}")


def settings_from_env(environ: Mapping[str, str] | None = None) -> Settings:
    env = os.environ if environ is None else environ
    defaults = Settings()
    dtype = env.get(ENV_DEFAULT_DTYPE) or defaults.default_dtype
    if normalize_dtype(dtype) is None:
        raise ValueError(f"{ENV_DEFAULT_DTYPE} is not a supported dtype: {dtype!r}")
    settings = Settings(
        leaf_size=_env_int(env, ENV_LEAF_SIZE, defaults.leaf_size),
        edge_items=_env_int(env, ENV_EDGE_ITEMS, defaults.edge_items),
        default_dtype=normalize_dtype(dtype).name,
        overflow_preflight=_env_bool(env, ENV_OVERFLOW_PREFLIGHT, defaults.overflow_preflight),
        textbook_warn_products=_env_int(
            env, ENV_TEXTBOOK_WARN_PRODUCTS, defaults.textbook_warn_products
        ),
    )
    return settings.validated()


class Runtime:
    """Process-wide settings holder.

    Settings are read from the environment on first use and cached; explicit
    overrides replace the cached value until `reset()`.
    """

    def __init__(self) -> None:
        self._settings_cache: Settings | None = None

    def settings(self) -> Settings:
        if self._settings_cache is not None:
            return self._settings_cache
        self._settings_cache = settings_from_env()
        return self._settings_cache

    def configure(self, **overrides: Any) -> Settings:
        known = {f.name for f in fields(Settings)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise TypeError(f"unknown setting(s): {', '.join(unknown)}")
        if "default_dtype" in overrides:
            dt = normalize_dtype(overrides["default_dtype"])
            if dt is None:
                raise ValueError(
                    f"default_dtype {overrides['default_dtype']!r} is not a supported dtype"
                )
            overrides["default_dtype"] = dt.name
        self._settings_cache = replace(self.settings(), **overrides).validated()
        return self._settings_cache

    def reset(self) -> None:
        self._settings_cache = None


_runtime = Runtime()


def default_runtime() -> Runtime:
    return _runtime


def get_settings() -> Settings:
    return _runtime.settings()


@contextmanager
def temporary_settings(**overrides: Any) -> Iterator[Settings]:
    """Temporarily override settings, restoring the previous values on exit.

    Note: settings are process-global; this is not intended to provide thread
    isolation.
    """

    prev = _runtime.settings()
    try:
        yield _runtime.configure(**overrides)
    finally:
        _runtime._settings_cache = prev


@contextmanager
def temporary_leaf_size(leaf_size: int) -> Iterator[Settings]:
    with temporary_settings(leaf_size=leaf_size) as settings:
        yield settings
