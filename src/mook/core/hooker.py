"""
Member hooking for mook

``hook()`` replaces one member of any object with an interceptor that receives
the original behaviour as a fallback; ``unhook()`` undoes the most recent hook of
that member. Hooks on the same member stack: the newest interceptor sees the
previous one as its original.

Callable members are replaced by a ``HookedCallable``, called as::

    interceptor(receiver, *args, original, **kwargs)

where ``args`` is padded with ``MISSING`` up to the original's positional arity.
Data members are replaced by a ``HookedAttribute`` accessor whose reads return
``interceptor(value)``, re-reading the original accessor each time when the
member was computed.
"""

import contextlib
import functools
import logging
from typing import Any, Callable, Dict, Iterator, List, Optional

from ..config import Config
from .errors import PlatformRestoreError
from .registry import (
    HookRegistry,
    InterceptionRecord,
    OwnSlot,
    attach_registry,
    find_registry,
    remove_own,
    write_own,
)
from .resolution import (
    MISSING,
    MemberAnalysis,
    analyze_member,
    is_descriptor,
    is_data_descriptor,
    lookup_static,
    positional_parameters,
)

logger = logging.getLogger(__name__)

# (instance, owner) -> original value or callable for that access
Resolver = Callable[[Any, Optional[type]], Any]


class HookedCallable:
    """Callable installed in place of a hooked method or function."""

    def __init__(self, target: Any, name: str, interceptor: Callable, resolve: Resolver):
        original = resolve(None, target if isinstance(target, type) else None)

        # Copy metadata first: update_wrapper also copies the original's __dict__
        functools.update_wrapper(self, original)
        self._target = target
        self._name = name
        self._interceptor = interceptor
        self._resolve = resolve
        self._original = original
        self._parameters = positional_parameters(original)

    def __get__(self, instance: Any, owner: Optional[type] = None):
        if owner is None:
            owner = type(instance)
        receiver = owner if instance is None else instance
        original = self._resolve(instance, owner)
        parameters = positional_parameters(original)

        @functools.wraps(original)
        def bound(*args, **kwargs):
            return self._invoke(receiver, original, parameters, args, kwargs)

        return bound

    def __call__(self, *args, **kwargs):
        return self._invoke(self._target, self._original, self._parameters, args, kwargs)

    def _invoke(
        self,
        receiver: Any,
        original: Callable,
        parameters: List[Optional[str]],
        args: tuple,
        kwargs: Dict[str, Any],
    ) -> Any:
        positional = list(args)
        remaining = dict(kwargs)
        for param in parameters[len(positional):]:
            if param is not None and param in remaining:
                positional.append(remaining.pop(param))
            else:
                positional.append(MISSING)
        positional.append(original)
        return self._interceptor(receiver, *positional, **remaining)

    def __repr__(self):
        return f"<hooked callable {self._name!r} wrapping {self._original!r}>"


class HookedAttribute:
    """Accessor installed in place of a hooked data member.

    A non-data descriptor, so instances keep their own values when it is
    installed on a class.
    """

    def __init__(
        self, name: str, interceptor: Callable, resolve: Resolver, class_access: bool = True
    ):
        self.__name__ = name
        self._interceptor = interceptor
        self._resolve = resolve
        self.class_access = class_access

    def __get__(self, instance: Any, owner: Optional[type] = None):
        if instance is None and not self.class_access:
            return self
        return self._interceptor(self._resolve(instance, owner))

    def __repr__(self):
        return f"<hooked attribute {self.__name__!r}>"


class HookedProperty(HookedAttribute):
    """Data-descriptor variant; writes go to the original accessor if it takes them."""

    def __init__(
        self,
        name: str,
        interceptor: Callable,
        resolve: Resolver,
        setter: Optional[Callable] = None,
        deleter: Optional[Callable] = None,
        class_access: bool = False,
    ):
        super().__init__(name, interceptor, resolve, class_access=class_access)
        self._setter = setter
        self._deleter = deleter

    def __set__(self, instance: Any, value: Any) -> None:
        if self._setter is None:
            raise AttributeError(f"hooked attribute {self.__name__!r} is read-only")
        self._setter(instance, value)

    def __delete__(self, instance: Any) -> None:
        if self._deleter is None:
            raise AttributeError(f"hooked attribute {self.__name__!r} cannot be deleted")
        self._deleter(instance)


def _resolver(analysis: MemberAnalysis) -> Resolver:
    """Build the fallback that produces the original member for one access."""
    raw = analysis.raw
    if analysis.target_is_class and analysis.is_accessor:
        return lambda instance, owner: raw.__get__(instance, owner)

    if not analysis.target_is_class and analysis.is_accessor and not analysis.is_callable:
        target, raw_owner = analysis.target, analysis.raw_owner
        return lambda instance, owner: raw.__get__(target, raw_owner)

    value = analysis.value
    return lambda instance, owner: value


def _build_replacement(analysis: MemberAnalysis, interceptor: Callable, registry: HookRegistry) -> OwnSlot:
    target, name, raw = analysis.target, analysis.name, analysis.raw
    resolve = _resolver(analysis)

    if analysis.is_callable:
        wrapper = HookedCallable(target, name, interceptor, resolve)
        if analysis.target_is_class:
            return OwnSlot(wrapper)
        # A class data descriptor would hide an instance dict entry
        _, class_raw = lookup_static(registry.base_class or type(target), name)
        return OwnSlot(wrapper, on_shadow=is_data_descriptor(class_raw))

    setter = deleter = None
    if analysis.is_data_accessor:
        setter = getattr(raw, "__set__", None)
        deleter = getattr(raw, "__delete__", None)

    if analysis.target_is_class:
        class_access = not (is_descriptor(raw) and analysis.value is raw)
        if analysis.is_data_accessor:
            accessor = HookedProperty(name, interceptor, resolve, setter, deleter, class_access)
        else:
            accessor = HookedAttribute(name, interceptor, resolve, class_access)
        return OwnSlot(accessor)

    # The shadow class has a single instance, so the descriptor always sees the target
    return OwnSlot(HookedProperty(name, interceptor, resolve, setter, deleter), on_shadow=True)


def hook(target: Any, name: str, interceptor: Callable) -> int:
    """
    Install ``interceptor`` in place of ``target.<name>``.

    Args:
        target: Any object with a ``__dict__`` (instance, class, module...)
        name: Member to intercept; it does not need to exist
        interceptor: For callable members, called as
            ``interceptor(receiver, *args, original, **kwargs)``; for data
            members, called with the original value on every read

    Returns:
        Number of active hooks on the member, this one included.

    Raises:
        TypeError: ``interceptor`` is not callable
        ConflictError: ``__hook_registry__`` on the target is used by something else
        PlatformRestoreError: the target refuses the new member

    Example:
        >>> hook(account, "balance", lambda value: value * 2)
        1
    """
    if not callable(interceptor):
        raise TypeError(f"interceptor must be callable, got {type(interceptor).__name__}")

    try:
        registry = attach_registry(target, thread_safe=Config.get("thread_safe", True))
    except (AttributeError, TypeError) as e:
        logger.warning(f"Cannot attach hook registry to {type(target).__name__}: {e}")
        raise PlatformRestoreError(target, name, "hook", e) from e

    with registry.locked():
        analysis = analyze_member(target, name, registry)
        replacement = _build_replacement(analysis, interceptor, registry)
        try:
            write_own(target, name, replacement, registry)
        except (AttributeError, TypeError) as e:
            logger.warning(f"Cannot hook {name!r} of {type(target).__name__}: {e}")
            raise PlatformRestoreError(target, name, "hook", e) from e

        record = InterceptionRecord(inherited=analysis.inherited, slot=analysis.own_slot)
        level = registry.push(name, record)

    logger.debug(
        f"Hooked {name!r} of {type(target).__name__} "
        f"({'inherited' if record.inherited else 'own'}, "
        f"{'callable' if analysis.is_callable else 'data'}), depth={level}"
    )
    return level


def unhook(target: Any, name: str) -> int:
    """
    Remove the most recent hook of ``target.<name>``.

    Returns:
        Number of hooks still active on the member; 0 (and no change at all)
        when the member was not hooked.

    Raises:
        PlatformRestoreError: the target refuses to take back the original
            member; the hook stays registered
    """
    registry = find_registry(target)
    if registry is None:
        return 0

    with registry.locked():
        record = registry.peek(name)
        if record is None:
            return 0

        try:
            if record.inherited:
                remove_own(target, name, registry)
            else:
                write_own(target, name, record.slot, registry)
        except (AttributeError, TypeError) as e:
            logger.warning(f"Cannot restore {name!r} of {type(target).__name__}: {e}")
            raise PlatformRestoreError(target, name, "restore", e) from e

        level = registry.pop(name)

    logger.debug(f"Unhooked {name!r} of {type(target).__name__}, depth={level}")
    return level


def depth(target: Any, name: str) -> int:
    """Number of active hooks on ``target.<name>``."""
    registry = find_registry(target)
    return registry.depth(name) if registry else 0


def unhook_all(target: Any, name: str) -> int:
    """Remove every hook of ``target.<name>``; returns how many were removed."""
    removed = 0
    while depth(target, name):
        unhook(target, name)
        removed += 1
    return removed


@contextlib.contextmanager
def hooked(target: Any, name: str, interceptor: Callable) -> Iterator[int]:
    """Context manager hooking ``target.<name>`` for the duration of the block."""
    level = hook(target, name, interceptor)
    try:
        yield level
    finally:
        unhook(target, name)
