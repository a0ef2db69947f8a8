"""
Annotation-driven injection of generators into test callbacks.

A parameter is a generator slot when its annotation is a type the resolver
supports. Its slot index is its position in the callback's own parameter
list, ignoring a leading ``self`` or ``cls``, so a setup fixture and a test
that both take ``random: SeededRandom`` first share one generator::

    @pytest.fixture
    @seeded
    def customer(random: SeededRandom):
        return Customer(id=random.next_uuid())

    @seeded
    def test_checkout(customer, random: SeededRandom, other: SeededRandom):
        # ``random`` is the instance ``customer`` was built with,
        # ``other`` is an independent generator for slot 2.
        ...
"""

from __future__ import annotations

import functools
import inspect
import logging
import typing
from typing import Any, Callable, MutableMapping, NamedTuple

from seededrandom.resolver import SeedResolver

logger = logging.getLogger(__name__)

_DEFAULT_RESOLVER = SeedResolver()

_SLOT_KINDS = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
    inspect.Parameter.KEYWORD_ONLY,
)


class GeneratorParameter(NamedTuple):
    """A callback parameter that will receive a generator."""

    slot_index: int
    name: str
    declared_type: Any


def _annotations(func: Callable[..., Any], sig: inspect.Signature) -> dict[str, Any]:
    try:
        return typing.get_type_hints(func)
    except (NameError, TypeError) as e:
        logger.debug("Could not resolve all annotations of %r: %s", func, e)

    # Per parameter: an unresolvable name only drops its own annotation.
    globalns = getattr(inspect.unwrap(func), "__globals__", {})
    hints = {}
    for name, param in sig.parameters.items():
        annotation = param.annotation
        if annotation is inspect.Parameter.empty:
            continue
        if isinstance(annotation, str):
            try:
                annotation = eval(annotation, globalns)
            except (NameError, AttributeError, SyntaxError, TypeError) as e:
                logger.debug("Skipping annotation %r of %s: %s", annotation, name, e)
                continue
        hints[name] = annotation
    return hints


def generator_parameters(
    func: Callable[..., Any],
    resolver: SeedResolver | None = None,
) -> list[GeneratorParameter]:
    """
    Find the parameters of *func* that should receive a generator.

    Args:
        func: The callback to inspect.
        resolver: Resolver deciding which types are generator types.

    Returns:
        One entry per generator parameter, in declaration order.
    """
    resolver = resolver or _DEFAULT_RESOLVER
    sig = inspect.signature(func)
    hints = _annotations(func, sig)

    params = list(sig.parameters.values())
    if params and params[0].name in ("self", "cls"):
        params = params[1:]

    found = []
    for position, param in enumerate(params):
        if param.kind not in _SLOT_KINDS or param.name not in hints:
            continue
        if resolver.supports(hints[param.name]):
            found.append(GeneratorParameter(position, param.name, hints[param.name]))
    return found


def resolve_parameters(
    func: Callable[..., Any],
    display_name: str,
    cache: MutableMapping[Any, Any],
    resolver: SeedResolver | None = None,
) -> dict[str, Any]:
    """
    Resolve every generator parameter of *func* for one invocation.

    Returns:
        Mapping of parameter name to generator instance.
    """
    resolver = resolver or _DEFAULT_RESOLVER
    return {
        param.name: resolver.resolve(param.slot_index, display_name, cache, param.declared_type)
        for param in generator_parameters(func, resolver)
    }


def seeded(
    func: Callable[..., Any] | None = None,
    *,
    resolver: SeedResolver | None = None,
) -> Any:
    """
    Decorate a pytest test or fixture so its generator parameters are injected.

    The generator parameters are removed from the signature pytest sees, and
    a ``request`` parameter is added if the callback does not already take
    one. At call time the generators are resolved against the invocation
    cache of ``request.node``.

    Can be used bare (``@seeded``) or with a custom resolver
    (``@seeded(resolver=...)``).
    """
    if func is None:
        return functools.partial(seeded, resolver=resolver)

    from seededrandom.plugin import invocation_cache

    resolver = resolver or _DEFAULT_RESOLVER
    slots = generator_parameters(func, resolver)
    if not slots:
        return func

    sig = inspect.signature(func)
    slot_names = {slot.name for slot in slots}
    takes_request = "request" in sig.parameters

    kept = [p for p in sig.parameters.values() if p.name not in slot_names]
    if not takes_request:
        request_param = inspect.Parameter("request", inspect.Parameter.KEYWORD_ONLY)
        if kept and kept[-1].kind is inspect.Parameter.VAR_KEYWORD:
            kept.insert(len(kept) - 1, request_param)
        else:
            kept.append(request_param)

    def inject(kwargs: dict[str, Any]) -> dict[str, Any]:
        request = kwargs["request"] if takes_request else kwargs.pop("request")
        node = request.node
        cache = invocation_cache(node)
        for slot in slots:
            kwargs[slot.name] = resolver.resolve(
                slot.slot_index, node.nodeid, cache, slot.declared_type
            )
        return kwargs

    if inspect.isgeneratorfunction(func):

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            return (yield from func(*args, **inject(kwargs)))

    else:

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            return func(*args, **inject(kwargs))

    wrapper.__signature__ = sig.replace(parameters=kept)  # type: ignore[attr-defined]
    return wrapper
