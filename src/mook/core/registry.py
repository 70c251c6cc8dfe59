"""
Per-target hook registry for mook

Every hooked object carries one ``HookRegistry`` under the reserved attribute
``__hook_registry__``. The registry keeps the interception stacks (one LIFO list
of records per member name), a per-target lock, and the bookkeeping for the
private shadow class used to give a single object its own accessors.

This module also owns the primitives that read, write and remove a target's own
slots. Class targets keep their own slots in ``cls.__dict__``; every other
target keeps plain values in ``vars(target)`` and accessors on its shadow class.
"""

import contextlib
import threading
from dataclasses import dataclass
from typing import Any, ContextManager, Dict, List, Optional, Set

from .errors import ConflictError

REGISTRY_ATTR = "__hook_registry__"

# Serializes the creation of registries; each registry then has its own lock.
_attach_lock = threading.RLock()


@dataclass(frozen=True)
class OwnSlot:
    """An own slot of a target, captured verbatim."""

    value: Any
    on_shadow: bool = False


@dataclass(frozen=True)
class InterceptionRecord:
    """Everything needed to undo exactly one hook."""

    inherited: bool
    slot: Optional[OwnSlot] = None


class HookRegistry:
    """Interception stacks of a single target."""

    def __init__(self, target: Any, thread_safe: bool = True):
        self.owner_id: Optional[int] = id(target)
        self.stacks: Dict[str, List[InterceptionRecord]] = {}
        self.thread_safe = thread_safe
        self._lock = threading.RLock()
        self.copied_while_hooked = False

        # Shadow class state (non-class targets only)
        self.shadow: Optional[type] = None
        self.base_class: Optional[type] = None
        self.shadow_members: Set[str] = set()

    def locked(self) -> ContextManager:
        """Lock spanning one read-modify-write of the stacks."""
        if self.thread_safe:
            return self._lock
        return contextlib.nullcontext()

    def depth(self, name: str) -> int:
        return len(self.stacks.get(name, ()))

    def push(self, name: str, record: InterceptionRecord) -> int:
        stack = self.stacks.setdefault(name, [])
        stack.append(record)
        return len(stack)

    def peek(self, name: str) -> Optional[InterceptionRecord]:
        stack = self.stacks.get(name)
        return stack[-1] if stack else None

    def pop(self, name: str) -> int:
        stack = self.stacks[name]
        stack.pop()
        if not stack:
            del self.stacks[name]
        return len(stack)

    def owns(self, target: Any) -> bool:
        return self.owner_id == id(target)

    @property
    def active(self) -> bool:
        """True while hooks are installed, or when copied from a hooked object."""
        return bool(self.stacks) or self.shadow is not None or self.copied_while_hooked

    def __reduce__(self):
        # Copies carry neither stacks nor the lock; the owner stays as is so
        # the copy never matches the object it is attached to.
        return _copied_registry, (self.owner_id, self.thread_safe, self.active)

    def __repr__(self):
        depths = {name: len(stack) for name, stack in self.stacks.items()}
        return f"HookRegistry(depths={depths})"


def _copied_registry(owner_id: Optional[int], thread_safe: bool, copied_while_hooked: bool) -> HookRegistry:
    """Rebuild a registry from ``HookRegistry.__reduce__``."""
    registry = HookRegistry(None, thread_safe=thread_safe)
    registry.owner_id = owner_id
    registry.copied_while_hooked = copied_while_hooked
    return registry


def own_namespace(target: Any) -> Dict[str, Any]:
    """Return the mapping holding the target's own slots.

    Raises ``TypeError`` when the target has no ``__dict__``.
    """
    return vars(target)


def find_registry(target: Any) -> Optional[HookRegistry]:
    """Return the registry attached to ``target`` itself, never an inherited one."""
    try:
        attached = own_namespace(target).get(REGISTRY_ATTR)
    except TypeError:
        return None
    if isinstance(attached, HookRegistry) and attached.owns(target):
        return attached
    return None


def attach_registry(target: Any, thread_safe: bool = True) -> HookRegistry:
    """Return the target's registry, creating it on first use.

    An idle registry carried over from another object (by ``copy.copy``,
    ``copy.deepcopy`` or pickling) is replaced by a fresh one.

    Raises:
        ConflictError: the reserved attribute holds something else, or the
            registry of another object that still has hooks.
        TypeError, AttributeError: the target refuses the new attribute.
    """
    with _attach_lock:
        namespace = own_namespace(target)
        if REGISTRY_ATTR in namespace:
            attached = namespace[REGISTRY_ATTR]
            if not isinstance(attached, HookRegistry):
                raise ConflictError(target, REGISTRY_ATTR, f"holds {type(attached).__name__}")
            if attached.owns(target):
                return attached
            if attached.active:
                raise ConflictError(target, REGISTRY_ATTR, "registry belongs to another object")

        registry = HookRegistry(target, thread_safe=thread_safe)
        if isinstance(target, type):
            setattr(target, REGISTRY_ATTR, registry)
        else:
            namespace[REGISTRY_ATTR] = registry
        return registry


def read_own(target: Any, name: str, registry: Optional[HookRegistry]) -> Optional[OwnSlot]:
    """Return the own slot named ``name``, or None when the target has none."""
    if registry is not None and registry.shadow is not None and name in registry.shadow_members:
        return OwnSlot(registry.shadow.__dict__[name], on_shadow=True)
    try:
        namespace = own_namespace(target)
    except TypeError:
        return None
    if name in namespace:
        return OwnSlot(namespace[name])
    return None


def write_own(target: Any, name: str, slot: OwnSlot, registry: HookRegistry) -> None:
    """Make ``slot`` the target's own slot, replacing whatever was there."""
    if isinstance(target, type):
        setattr(target, name, slot.value)
        return

    namespace = own_namespace(target)
    if slot.on_shadow:
        shadow = _ensure_shadow(target, registry)
        setattr(shadow, name, slot.value)
        registry.shadow_members.add(name)
        namespace.pop(name, None)
    else:
        namespace[name] = slot.value
        _drop_shadow_member(target, name, registry)


def remove_own(target: Any, name: str, registry: HookRegistry) -> None:
    """Delete the target's own slot so lookups fall through to its class."""
    if isinstance(target, type):
        if name in target.__dict__:
            delattr(target, name)
        return

    own_namespace(target).pop(name, None)
    _drop_shadow_member(target, name, registry)


def _ensure_shadow(target: Any, registry: HookRegistry) -> type:
    if registry.shadow is not None:
        return registry.shadow

    base = type(target)
    namespace = {
        "__slots__": (),
        "__module__": base.__module__,
        "__qualname__": base.__qualname__,
        "__doc__": base.__doc__,
    }
    shadow = type(base)(base.__name__, (base,), namespace)
    target.__class__ = shadow
    registry.shadow = shadow
    registry.base_class = base
    return shadow


def _drop_shadow_member(target: Any, name: str, registry: HookRegistry) -> None:
    if registry.shadow is None or name not in registry.shadow_members:
        return

    delattr(registry.shadow, name)
    registry.shadow_members.discard(name)
    if not registry.shadow_members:
        # Last accessor gone: the object gets its original class back
        target.__class__ = registry.base_class
        registry.shadow = None
        registry.base_class = None
