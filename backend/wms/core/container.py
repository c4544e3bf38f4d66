"""
Minimal dependency-injection container.

Services are registered under a string token together with a factory and
the tokens of their dependencies. Resolving a token resolves its
dependencies first and passes them to the factory positionally.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence


class ContainerError(Exception):
    pass


@dataclass
class ServiceDefinition:
    factory: Callable[..., Any]
    singleton: bool = False
    dependencies: List[str] = field(default_factory=list)


class Container:
    _default: Optional["Container"] = None

    def __init__(self):
        self._services: Dict[str, ServiceDefinition] = {}
        self._singletons: Dict[str, Any] = {}
        self._resolving: List[str] = []

    @classmethod
    def get_instance(cls) -> "Container":
        if cls._default is None:
            cls._default = cls()
        return cls._default

    @classmethod
    def reset_instance(cls) -> None:
        cls._default = None

    def register(
        self,
        token: str,
        factory: Callable[..., Any],
        singleton: bool = False,
        dependencies: Sequence[str] = (),
    ) -> None:
        self._services[token] = ServiceDefinition(factory, singleton, list(dependencies))
        # a re-registered singleton must be rebuilt
        self._singletons.pop(token, None)

    def register_class(
        self,
        token: str,
        cls: type,
        singleton: bool = False,
        dependencies: Sequence[str] = (),
    ) -> None:
        self.register(token, cls, singleton, dependencies)

    def register_value(self, token: str, value: Any) -> None:
        self.register(token, lambda: value, singleton=True)

    def resolve(self, token: str) -> Any:
        if token in self._resolving:
            chain = " -> ".join(self._resolving + [token])
            raise ContainerError(f"Circular dependency detected: {chain}")

        definition = self._services.get(token)
        if definition is None:
            raise ContainerError(f"Service '{token}' not registered in container")

        if definition.singleton and token in self._singletons:
            return self._singletons[token]

        self._resolving.append(token)
        try:
            deps = [self.resolve(dep) for dep in definition.dependencies]
            instance = definition.factory(*deps)
        finally:
            self._resolving.pop()

        if definition.singleton:
            self._singletons[token] = instance
        return instance

    def has(self, token: str) -> bool:
        return token in self._services

    def clear(self) -> None:
        self._services.clear()
        self._singletons.clear()
        self._resolving.clear()

    def tokens(self) -> List[str]:
        return list(self._services)

    def singleton_tokens(self) -> List[str]:
        return [t for t, d in self._services.items() if d.singleton]


container = Container.get_instance()
