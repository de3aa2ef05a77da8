"""
Fact resolvers: where facts come from.

A resolver is anything that answers "is this fact available right now?":

    def CustomerIsVIP():          # plain function
        return account.tier == "vip"

    async def PaymentProcessed(): # coroutine function, awaited
        return await gateway.settled(order_id)

    {"IsProduction": True}        # static value, custom resolver maps only

Resolvers are found by scanning a directory of Python modules. Each module
contributes its public functions (or the names in __all__ if it declares
one) and the callables inside its public dicts, e.g.

    business_resolvers = {"CustomerIsVIP": lambda: True}

Running resolvers turns them into the plain {name: bool} map the core
consumes. A resolver that raises counts as False.
"""

import asyncio
import importlib.util
import inspect
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .core.exceptions import ResolverDiscoveryError

logger = logging.getLogger(__name__)


@dataclass
class ResolverDiscovery:
    resolvers: dict = field(default_factory=dict)
    loaded_files: list = field(default_factory=list)
    errors: list = field(default_factory=list)

    @property
    def total_resolvers(self) -> int:
        return len(self.resolvers)


def _public_names(module) -> list:
    names = getattr(module, "__all__", None)
    if names is not None:
        return list(names)
    return [n for n in vars(module) if not n.startswith("_")]


def extract_resolver_functions(module) -> dict:
    """Resolvers a module offers, keyed by fact name."""
    resolvers = {}
    explicit = hasattr(module, "__all__")
    for name in _public_names(module):
        value = getattr(module, name, None)
        if inspect.isfunction(value):
            # skip helpers imported from elsewhere unless listed in __all__
            if explicit or value.__module__ == module.__name__:
                resolvers[name] = value
        elif isinstance(value, dict):
            for key, inner in value.items():
                if isinstance(key, str) and callable(inner):
                    resolvers[key] = inner
    return resolvers


def _load_module(path: Path, index: int):
    module_name = f"_gentzen_resolvers_{index}_{path.stem}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise ImportError(f"cannot load {path}")
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except BaseException:
        del sys.modules[module_name]
        raise
    return module


def discover_resolvers(resolvers_path, log: Optional[logging.Logger] = None) -> ResolverDiscovery:
    """
    Import every *.py file under resolvers_path (recursively) and collect
    its resolvers. Files starting with "_" are skipped. Later files win on
    name clashes. A file that fails to import is recorded in errors.
    """
    log = log or logger
    if not resolvers_path:
        raise ResolverDiscoveryError(
            "resolvers_path is required: specify where your resolvers are located")

    root = Path(resolvers_path)
    discovery = ResolverDiscovery()
    if not root.is_dir():
        log.warning("Could not read resolver directory %s", root)
        return discovery

    files = sorted(p for p in root.rglob("*.py") if not p.name.startswith("_"))
    if not files:
        log.warning("No .py files found in resolvers path: %s", root)
        return discovery
    log.debug("Found %d Python files in %s", len(files), root)

    for index, path in enumerate(files):
        try:
            module = _load_module(path, index)
        except Exception as e:
            discovery.errors.append({"file": str(path), "error": str(e)})
            log.warning("Failed to load resolver file %s: %s", path, e)
            continue
        found = extract_resolver_functions(module)
        if found:
            discovery.resolvers.update(found)
            discovery.loaded_files.append(str(path))
            log.debug("Loaded %d resolvers from %s", len(found), path)

    log.info("Loaded %d resolvers from %d files",
             discovery.total_resolvers, len(discovery.loaded_files))
    return discovery


async def run_fact_resolvers_async(resolvers: dict, log: Optional[logging.Logger] = None) -> dict:
    """Evaluate every resolver, awaiting coroutines, into {name: bool}."""
    log = log or logger
    fact_map = {}
    for name, resolver in resolvers.items():
        try:
            value = resolver() if callable(resolver) else resolver
            if inspect.isawaitable(value):
                value = await value
            fact_map[name] = bool(value)
        except Exception as e:
            log.warning("Fact resolver for %r failed: %s", name, e)
            fact_map[name] = False
    return fact_map


def run_fact_resolvers(resolvers: dict, log: Optional[logging.Logger] = None) -> dict:
    """
    Synchronous entry point. Starts its own event loop, so call
    run_fact_resolvers_async instead from code that is already async.
    """
    return asyncio.run(run_fact_resolvers_async(resolvers, log))
