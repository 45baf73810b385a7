"""
Type Registry - per-category catalog, matcher and client factory.

One TypeRegistry exists per model category. It:
1. Stores specs under ``providerDisplayName:modelId`` (lowercased, last write wins)
2. Computes online/cold/offline status by awaiting each spec's probes
3. Resolves ``provider:model[?feature=value&...]`` names (with ``*``
   wildcards) to exactly one spec plus a typed feature map
4. Builds client handles for resolved specs

Name syntax:
    <providerDisplayName>:<modelId>[?<feature>[=<value>]{&<feature>[=<value>]}]

A bare feature token implies the value "1". Wildcards are permitted anywhere
in the ``providerDisplayName:modelId`` segment and must resolve to exactly
one registered key.
"""

import asyncio
import logging
import re
from collections.abc import Callable, Iterable
from typing import Generic, TypeVar
from urllib.parse import unquote

from model_catalog.errors import (
    AmbiguousModelError,
    ModelNotFoundError,
    NoOnlineModelError,
    UnknownFeatureError,
)
from model_catalog.registry.models import (
    FeatureOptions,
    ModelSpec,
    ModelStatus,
    derive_status,
)

logger = logging.getLogger(__name__)

SpecT = TypeVar("SpecT", bound=ModelSpec)
ClientT = TypeVar("ClientT")

WILDCARD = "*"


def split_name(name: str) -> tuple[str, str | None]:
    """Split ``base?query`` at the first '?'; query is None when absent."""
    base, sep, query = name.partition("?")
    return base, (query if sep else None)


def iter_feature_pairs(query: str | None) -> Iterable[tuple[str, str]]:
    """
    Yield decoded (name, raw_value) pairs from a feature query segment.

    A bare token yields the value "1". Empty segments are skipped.
    """
    if not query:
        return
    for part in query.split("&"):
        if not part:
            continue
        raw_key, sep, raw_value = part.partition("=")
        yield unquote(raw_key), (unquote(raw_value) if sep else "1")


def compile_pattern(pattern: str) -> re.Pattern:
    """Compile a ``*`` glob into a case-insensitive full-match regex."""
    regex = ".*".join(re.escape(piece) for piece in pattern.split(WILDCARD))
    return re.compile(regex, re.IGNORECASE | re.DOTALL)


async def probe_available(spec: ModelSpec) -> bool:
    """Await a spec's availability probe; absent or failing means unavailable."""
    if spec.is_available is None:
        return False
    try:
        return bool(await spec.is_available())
    except Exception as e:
        logger.warning(f"Availability probe failed for {spec.key}: {e}")
        return False


async def probe_hot(spec: ModelSpec) -> bool:
    """Await a spec's hot probe; absent means hot, failing means not hot."""
    if spec.is_hot is None:
        return True
    try:
        return bool(await spec.is_hot())
    except Exception as e:
        logger.warning(f"Hot probe failed for {spec.key}: {e}")
        return False


class TypeRegistry(Generic[SpecT, ClientT]):
    """
    Registry of model specs for one category.

    Usage:
        registry = TypeRegistry("chat", ChatClient)
        registry.register_all([spec_a, spec_b])
        statuses = await registry.all_statuses()
        client = registry.resolve("OpenAI:gpt-4.1?temperature=0.2")

    Attributes:
        category: Category name (e.g., "chat", "embedding")
        client_factory: Callable building a client from (spec, features)
    """

    def __init__(
        self,
        category: str,
        client_factory: Callable[[SpecT, FeatureOptions], ClientT],
    ) -> None:
        self.category = category
        self.client_factory = client_factory
        self._specs: dict[str, SpecT] = {}
        self._background_tasks: set[asyncio.Task] = set()

    def __len__(self) -> int:
        return len(self._specs)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.lower() in self._specs

    # -------------------------------------------------------------------------
    # Registration
    # -------------------------------------------------------------------------

    def register(self, spec: SpecT) -> None:
        """Register one spec, replacing any spec with the same key."""
        if spec.key in self._specs:
            logger.debug(f"[{self.category}] Replacing registered model {spec.key}")
        self._specs[spec.key] = spec

    def register_all(self, specs: Iterable[SpecT]) -> None:
        """
        Register a batch of specs and schedule a background status sweep.

        The sweep only warms the probes' own caches. It runs on a later turn
        of the running event loop and its errors are discarded. Without a
        running loop the sweep is skipped.
        """
        count = 0
        for spec in specs:
            self.register(spec)
            count += 1
        logger.info(f"[{self.category}] Registered {count} model(s), {len(self)} total")
        self._schedule_status_sweep()

    def _schedule_status_sweep(self) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug(f"[{self.category}] No running event loop, skipping status pre-warm")
            return

        task = loop.create_task(self.all_statuses())
        self._background_tasks.add(task)
        task.add_done_callback(self._on_sweep_done)

    def _on_sweep_done(self, task: asyncio.Task) -> None:
        self._background_tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.debug(f"[{self.category}] Background status sweep failed: {error}")

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def registered_keys(self) -> list[str]:
        """Return all registered keys in registration order."""
        return list(self._specs)

    def get_spec(self, key: str) -> SpecT | None:
        """Return the spec registered under key (case-insensitive)."""
        return self._specs.get(key.lower())

    def all_specs(self) -> list[SpecT]:
        """Return a snapshot of all registered specs."""
        return list(self._specs.values())

    def match_keys(self, pattern: str) -> list[str]:
        """
        Return registered keys matching a ``*`` glob pattern.

        Without a wildcard this is an exact (case-insensitive) lookup.
        """
        if WILDCARD not in pattern:
            key = pattern.lower()
            return [key] if key in self._specs else []
        regex = compile_pattern(pattern)
        return [key for key in self._specs if regex.fullmatch(key)]

    def resolve_key(self, base: str) -> str:
        """
        Resolve a name (possibly with wildcards) to exactly one key.

        Raises:
            ModelNotFoundError: If nothing matches
            AmbiguousModelError: If a wildcard matches more than one key
        """
        matches = self.match_keys(base)
        if not matches:
            raise ModelNotFoundError(f"Model {base} not found", name=base)
        if len(matches) > 1:
            raise AmbiguousModelError(
                f"Model pattern {base} is ambiguous, matches: {', '.join(matches)}",
                name=base,
                matches=matches,
            )
        return matches[0]

    # -------------------------------------------------------------------------
    # Status
    # -------------------------------------------------------------------------

    async def all_statuses(self) -> dict[str, ModelStatus]:
        """
        Compute status for every registered spec.

        Operates over a snapshot taken at the start of the call. Probe
        failures degrade to negative results and are never raised.

        Returns:
            Dictionary mapping registry key to ModelStatus
        """
        snapshot = list(self._specs.items())
        statuses = await asyncio.gather(*(self._status_of(spec) for _, spec in snapshot))
        return {key: status for (key, _), status in zip(snapshot, statuses)}

    async def _status_of(self, spec: SpecT) -> ModelStatus:
        available, hot = await asyncio.gather(probe_available(spec), probe_hot(spec))
        return ModelStatus(
            status=derive_status(available, hot),
            available=available,
            hot=hot,
            model_spec=spec,
        )

    async def models_by_provider(self) -> dict[str, dict[str, ModelStatus]]:
        """
        Return all statuses grouped by provider display name.

        Returns:
            Dictionary mapping provider display name to {key: ModelStatus}
        """
        grouped: dict[str, dict[str, ModelStatus]] = {}
        for key, status in (await self.all_statuses()).items():
            provider = status.model_spec.provider_display_name
            grouped.setdefault(provider, {})[key] = status
        return grouped

    # -------------------------------------------------------------------------
    # Name + feature resolution
    # -------------------------------------------------------------------------

    def parse_features(self, spec: SpecT, query: str | None) -> FeatureOptions:
        """
        Parse a feature query against the spec's declared features.

        Raises:
            UnknownFeatureError: If a feature is not declared by the spec
            FeatureValidationError: If a number is unparseable or out of bounds
        """
        features: FeatureOptions = {}
        for name, raw_value in iter_feature_pairs(query):
            feature_spec = spec.features.get(name)
            if feature_spec is None:
                raise UnknownFeatureError(
                    f'Unknown feature "{name}" for model {spec.key}', name=name
                )
            features[name] = feature_spec.coerce(raw_value, name)
        return features

    def resolve_spec(self, name: str) -> tuple[SpecT, FeatureOptions]:
        """Resolve a full name to its spec and parsed feature map."""
        base, query = split_name(name)
        spec = self._specs.get(self.resolve_key(base))
        if spec is None:
            raise ModelNotFoundError(f"Model {base} not found", name=base)
        return spec, self.parse_features(spec, query)

    def resolve(self, name: str) -> ClientT:
        """
        Resolve a name with optional feature query to a client handle.

        Args:
            name: ``provider:model[?feature=value&...]``, wildcards allowed

        Returns:
            A client built from the resolved spec and features

        Raises:
            ModelLookupError: If the name is unknown, ambiguous, or names
                an undeclared feature
            FeatureValidationError: If a feature value is invalid
        """
        spec, features = self.resolve_spec(name)
        logger.debug(f"[{self.category}] Resolved {name} -> {spec.key} {features}")
        return self.client_factory(spec, features)

    def matching_specs(self, name_like: str) -> list[SpecT]:
        """
        Return specs matching a name pattern that declare every named feature.

        Feature values in the query are ignored; only presence is checked.
        Any number of matches is allowed.
        """
        base, query = split_name(name_like)
        required = [name for name, _ in iter_feature_pairs(query)]
        specs = [self._specs[key] for key in self.match_keys(base)]
        return [spec for spec in specs if all(name in spec.features for name in required)]

    # -------------------------------------------------------------------------
    # Selection
    # -------------------------------------------------------------------------

    async def first_online_client(
        self,
        specs: Iterable[SpecT],
        features: FeatureOptions | None = None,
    ) -> ClientT:
        """
        Build a client for the first reachable spec, preferring hot models.

        The first pass picks the first available-and-hot spec in the given
        order; only if none qualifies does a second pass pick the first
        merely available spec.

        Raises:
            NoOnlineModelError: If no candidate is available
        """
        candidates = list(specs)
        available = [spec for spec in candidates if await probe_available(spec)]

        for spec in available:
            if await probe_hot(spec):
                logger.debug(f"[{self.category}] Selected hot model {spec.key}")
                return self.client_factory(spec, dict(features or {}))

        if available:
            spec = available[0]
            logger.info(f"[{self.category}] No hot model available, using cold model {spec.key}")
            return self.client_factory(spec, dict(features or {}))

        raise NoOnlineModelError("No online model found")
