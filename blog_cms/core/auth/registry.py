"""
Policy engine registry.

Engines register themselves with a decorator and are looked up by the
name configured in AUTH_POLICY_ENGINE.

Usage:
    @AuthRegistry.policy_engine("my_engine")
    class MyPolicyEngine(PolicyEngine):
        ...

    engine = AuthRegistry.get_policy_engine("my_engine")
"""

from typing import Type, Callable, Any

from .interfaces import PolicyEngine


class AuthRegistry:
    """Central registry for authorization components."""

    _policy_engines: dict[str, Type[PolicyEngine]] = {}

    @classmethod
    def policy_engine(cls, name: str) -> Callable[[Type[PolicyEngine]], Type[PolicyEngine]]:
        """Decorator to register a policy engine."""
        def decorator(engine_class: Type[PolicyEngine]) -> Type[PolicyEngine]:
            cls._policy_engines[name] = engine_class
            return engine_class
        return decorator

    @classmethod
    def get_policy_engine(cls, name: str, **kwargs: Any) -> PolicyEngine:
        """
        Get a policy engine by name.

        Raises:
            ValueError: If engine not found
        """
        engine_class = cls._policy_engines.get(name)
        if not engine_class:
            available = list(cls._policy_engines.keys())
            raise ValueError(
                f"Unknown policy engine: '{name}'. "
                f"Available: {available}"
            )
        return engine_class(**kwargs)

    @classmethod
    def has_policy_engine(cls, name: str) -> bool:
        return name in cls._policy_engines
