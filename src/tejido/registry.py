"""Resolver registry for node and mark rendering.

The registry maps a node or mark type to the resolver that renders it.
Built-in defaults are overlaid by caller overrides; the pre-override
default for every key stays reachable so a custom resolver can wrap the
default instead of replacing it.

Thread Safety:
ResolverRegistry is immutable after creation. Safe to share.
Use ResolverRegistryBuilder for incremental construction.

Example:
    >>> registry = create_registry(DEFAULT_RESOLVERS, {"paragraph": my_paragraph})
    >>> resolve(registry, "paragraph") is my_paragraph
    True
    >>> registry.original("paragraph") is DEFAULT_RESOLVERS["paragraph"]
    True
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from tejido.renderers.context import RenderContext


type Resolver = Callable[[Any, RenderContext], Any]


def empty_resolver(node: Any, ctx: RenderContext) -> None:
    """Resolver used for keys nothing is registered for. Renders nothing."""
    return None


EMPTY_RESOLVER: Resolver = empty_resolver


class ResolverRegistry:
    """Immutable mapping of type key to resolver.

    Thread Safety:
        Immutable after creation. Safe to share across threads.
    """

    __slots__ = ("_resolvers", "_originals")

    def __init__(
        self,
        resolvers: Mapping[str, Resolver],
        originals: Mapping[str, Resolver],
    ) -> None:
        """Initialize registry with pre-built mappings.

        Use create_registry() or ResolverRegistryBuilder to create instances.
        """
        self._resolvers = MappingProxyType(dict(resolvers))
        self._originals = MappingProxyType(dict(originals))

    def get(self, key: str) -> Resolver | None:
        """Get the effective resolver for ``key``, or None if unregistered."""
        return self._resolvers.get(str(key))

    def original(self, key: str) -> Resolver:
        """Get the pre-override default for ``key``.

        Falls back to the empty resolver when no default exists.
        """
        return self._originals.get(str(key), EMPTY_RESOLVER)

    def has(self, key: str) -> bool:
        """Check if ``key`` has a resolver."""
        return str(key) in self._resolvers

    def is_overridden(self, key: str) -> bool:
        key = str(key)
        return key in self._resolvers and self._resolvers[key] is not self._originals.get(key)

    def keys(self) -> frozenset[str]:
        """All registered type keys."""
        return frozenset(self._resolvers)

    def with_overrides(self, overrides: Mapping[str, Resolver]) -> ResolverRegistry:
        """Return a new registry with ``overrides`` on top, keeping originals."""
        merged = dict(self._resolvers)
        merged.update({str(k): v for k, v in overrides.items()})
        return ResolverRegistry(merged, self._originals)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key in self._resolvers

    def __iter__(self) -> Iterator[str]:
        return iter(self._resolvers)

    def __len__(self) -> int:
        return len(self._resolvers)

    def __repr__(self) -> str:
        return f"ResolverRegistry({sorted(self._resolvers)})"


class ResolverRegistryBuilder:
    """Mutable builder for ResolverRegistry.

    Defaults registered here become the originals; overrides are layered
    on top and win.

    Example:
        >>> builder = ResolverRegistryBuilder()
        >>> builder.register_all(DEFAULT_RESOLVERS)
        >>> builder.override("heading", my_heading)
        >>> registry = builder.build()
    """

    __slots__ = ("_defaults", "_overrides")

    def __init__(self) -> None:
        self._defaults: dict[str, Resolver] = {}
        self._overrides: dict[str, Resolver] = {}

    def register(self, key: str, resolver: Resolver) -> ResolverRegistryBuilder:
        """Register a default resolver.

        Raises:
            ValueError: If a default is already registered for ``key``
        """
        key = str(key)
        if key in self._defaults:
            raise ValueError(f"Resolver for '{key}' already registered")
        self._defaults[key] = resolver
        return self

    def register_all(self, resolvers: Mapping[str, Resolver]) -> ResolverRegistryBuilder:
        for key, resolver in resolvers.items():
            self.register(key, resolver)
        return self

    def override(self, key: str, resolver: Resolver) -> ResolverRegistryBuilder:
        """Override the resolver for ``key``. Last write wins."""
        self._overrides[str(key)] = resolver
        return self

    def build(self) -> ResolverRegistry:
        merged = {**self._defaults, **self._overrides}
        return ResolverRegistry(merged, self._defaults)


def create_registry(
    defaults: Mapping[str, Resolver],
    overrides: Mapping[str, Resolver] | None = None,
) -> ResolverRegistry:
    """Merge ``overrides`` on top of ``defaults``.

    Keys may be plain strings or NodeType/MarkType members. A None value in
    ``overrides`` is ignored so partial configuration dicts can be passed
    through unchanged.
    """
    builder = ResolverRegistryBuilder()
    builder.register_all(defaults)
    for key, resolver in (overrides or {}).items():
        if resolver is not None:
            builder.override(key, resolver)
    return builder.build()


def resolve(registry: ResolverRegistry, key: str) -> Resolver:
    """Return the effective resolver for ``key``; the empty resolver if none."""
    resolver = registry.get(key)
    return resolver if resolver is not None else EMPTY_RESOLVER


__all__ = [
    "EMPTY_RESOLVER",
    "Resolver",
    "ResolverRegistry",
    "ResolverRegistryBuilder",
    "create_registry",
    "empty_resolver",
    "resolve",
]
