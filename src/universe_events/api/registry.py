from __future__ import annotations

import inspect
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional


class UnknownFunctionError(KeyError):
    """Raised when calling a name that was never registered."""


@dataclass(frozen=True)
class ApiFunction:
    name: str
    func: Callable[..., Any]
    description: str
    category: str
    tags: tuple[str, ...]
    signature: inspect.Signature

    @property
    def parameters(self) -> Dict[str, str]:
        described: Dict[str, str] = {}
        for param in self.signature.parameters.values():
            annotation = param.annotation
            label = annotation if isinstance(annotation, str) else getattr(annotation, "__name__", str(annotation))
            if param.default is not inspect.Parameter.empty:
                label = f"{label} = {param.default!r}"
            described[param.name] = label
        return described

    def describe(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "tags": list(self.tags),
            "parameters": self.parameters,
        }

    def bind(self, arguments: Dict[str, Any]) -> inspect.BoundArguments:
        """Check ``arguments`` against the signature; raises ``TypeError`` on mismatch."""

        return self.signature.bind(**arguments)


REGISTRY: Dict[str, ApiFunction] = {}


def register_api(
    name: str,
    *,
    description: str,
    category: str,
    tags: Optional[Iterable[str]] = None,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        if name in REGISTRY:
            raise ValueError(f"API function '{name}' is already registered.")
        REGISTRY[name] = ApiFunction(
            name=name,
            func=func,
            description=description,
            category=category,
            tags=tuple(tags or ()),
            signature=inspect.signature(func),
        )
        return func

    return decorator


def get_api_functions() -> List[ApiFunction]:
    return list(REGISTRY.values())


def get_api_function(name: str) -> ApiFunction:
    if name not in REGISTRY:
        raise UnknownFunctionError(f"API function '{name}' is not registered.")
    return REGISTRY[name]


def call_api(function_name: str, /, **kwargs: Any) -> Any:
    spec = get_api_function(function_name)
    bound = spec.bind(kwargs)
    return spec.func(*bound.args, **bound.kwargs)
