import inspect
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, get_origin, get_type_hints

from bindwire.exceptions import BindwireDependencyExtractionError
from bindwire.markers import is_constructor

EMPTY = inspect.Parameter.empty

_VARIADIC_KINDS = (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)


@dataclass(frozen=True, slots=True)
class ParameterInfo:
    """Information about a constructor/method parameter."""

    name: str
    annotation: Any
    kind: Any
    default: Any = EMPTY

    @property
    def has_default(self) -> bool:
        return self.default is not EMPTY

    @property
    def is_annotated(self) -> bool:
        return self.annotation is not EMPTY


@dataclass(frozen=True, slots=True)
class Executable:
    """A constructor or method together with its injectable parameters.

    ``function`` is what gets called with the resolved arguments: the class
    itself for ``__init__``, the bound classmethod for alternate constructors
    and the bound method for ``Container.call``.
    """

    owner: Any
    name: str
    function: Callable[..., Any]
    parameters: tuple[ParameterInfo, ...]

    @property
    def signature(self) -> tuple[Any, ...]:
        return tuple(parameter.annotation for parameter in self.parameters)

    def matches(self, signature: tuple[Any, ...]) -> bool:
        """Return true when ``signature`` equals the parameter types positionally.

        A requested type also matches a parametrised annotation with that
        origin, so ``deque`` matches ``deque[Service]``.
        """
        if len(signature) != len(self.parameters):
            return False
        return all(
            _type_matches(parameter.annotation, requested)
            for parameter, requested in zip(self.parameters, signature, strict=True)
        )


def _type_matches(annotation: Any, requested: Any) -> bool:
    if annotation is EMPTY:
        return False
    return bool(annotation == requested) or get_origin(annotation) is requested


class DependenciesExtractor:
    """Extract constructors and type-hinted parameters from classes and methods."""

    def __init__(self) -> None:
        self._constructors_cache: dict[type, list[Executable]] = {}

    def get_constructors(self, cls: type) -> list[Executable]:
        """Return constructors of ``cls``: ``__init__`` first, then ``@constructor`` classmethods."""
        cached = self._constructors_cache.get(cls)
        if cached is not None:
            return cached

        init_func = cls.__init__
        constructors = [
            Executable(
                owner=cls,
                name="__init__",
                function=cls,
                parameters=self._extract_parameters(cls, init_func, skip_first=True),
            ),
        ]

        seen: set[str] = set()
        for klass in cls.__mro__:
            for name, attribute in vars(klass).items():
                if name in seen:
                    continue
                seen.add(name)
                if not is_constructor(attribute):
                    continue
                bound = getattr(cls, name)
                constructors.append(
                    Executable(
                        owner=cls,
                        name=name,
                        function=bound,
                        parameters=self._extract_parameters(cls, bound, skip_first=False),
                    ),
                )

        self._constructors_cache[cls] = constructors
        return constructors

    def get_method(self, instance: Any, method_name: str) -> Executable | None:
        """Return the bound method ``method_name`` of ``instance``, or None if absent."""
        owner = type(instance)
        if not callable(getattr(owner, method_name, None)):
            return None
        bound = getattr(instance, method_name)
        return Executable(
            owner=owner,
            name=method_name,
            function=bound,
            parameters=self._extract_parameters(owner, bound, skip_first=False),
        )

    def _extract_parameters(
        self,
        owner: Any,
        func: Callable[..., Any],
        *,
        skip_first: bool,
    ) -> tuple[ParameterInfo, ...]:
        try:
            sig = inspect.signature(func)
        except (ValueError, TypeError) as e:
            raise BindwireDependencyExtractionError(owner, str(e)) from e

        try:
            type_hints = get_type_hints(getattr(func, "__func__", func))
        except (TypeError, NameError) as e:
            raise BindwireDependencyExtractionError(owner, str(e)) from e

        parameters = list(sig.parameters.values())
        if skip_first and parameters and parameters[0].kind not in _VARIADIC_KINDS:
            parameters = parameters[1:]

        return tuple(
            ParameterInfo(
                name=param.name,
                annotation=type_hints.get(param.name, EMPTY),
                kind=param.kind,
                default=param.default,
            )
            for param in parameters
            if param.kind not in _VARIADIC_KINDS
        )
