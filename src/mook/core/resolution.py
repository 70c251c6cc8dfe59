"""
Member resolution analysis for mook

Answers, without changing anything, how a member of an object is resolved:
whether the object owns the slot or inherits it through its class chain, what
value a read produces right now, and whether that value comes from an accessor
that has to be re-evaluated on every read.
"""

import inspect
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from .registry import HookRegistry, OwnSlot, find_registry, read_own


class _Missing:
    """Placeholder for absent members and omitted arguments."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self):
        return False

    def __repr__(self):
        return "MISSING"

    def __reduce__(self):
        return "MISSING"


MISSING = _Missing()


def is_descriptor(obj: Any) -> bool:
    """True when Python would call ``obj.__get__`` on attribute reads."""
    return hasattr(type(obj), "__get__")


def is_data_descriptor(obj: Any) -> bool:
    tp = type(obj)
    return hasattr(tp, "__get__") and (hasattr(tp, "__set__") or hasattr(tp, "__delete__"))


def lookup_static(cls: type, name: str) -> Tuple[Optional[type], Any]:
    """Find ``name`` along ``cls.__mro__`` without invoking descriptors.

    Returns:
        ``(owner, raw)``, or ``(None, MISSING)`` when no class defines it.
    """
    for klass in cls.__mro__:
        namespace = klass.__dict__
        if name in namespace:
            return klass, namespace[name]
    return None, MISSING


def positional_parameters(func: Any) -> List[Optional[str]]:
    """Names of the positional parameters of ``func``, in order.

    Positional-only parameters are reported as None since they cannot be
    passed by keyword. Callables without an introspectable signature have
    no positional parameters.
    """
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        return []

    names = []
    for param in signature.parameters.values():
        if param.kind is inspect.Parameter.POSITIONAL_ONLY:
            names.append(None)
        elif param.kind is inspect.Parameter.POSITIONAL_OR_KEYWORD:
            names.append(param.name)
    return names


@dataclass(frozen=True)
class MemberAnalysis:
    """How one member of one target is resolved."""

    target: Any
    name: str
    own_slot: Optional[OwnSlot]
    raw: Any  # the namespace entry that produces the value
    raw_owner: Any  # the target itself, a class of its chain, or None
    value: Any

    @property
    def target_is_class(self) -> bool:
        return isinstance(self.target, type)

    @property
    def own(self) -> bool:
        return self.own_slot is not None

    @property
    def inherited(self) -> bool:
        return self.own_slot is None

    @property
    def absent(self) -> bool:
        return self.value is MISSING

    @property
    def is_callable(self) -> bool:
        return not self.absent and callable(self.value)

    @property
    def is_accessor(self) -> bool:
        """Whether reads go through a descriptor of the owning slot."""
        if self.raw is MISSING or not is_descriptor(self.raw):
            return False
        # Values stored in an instance dict are returned as they are
        return self.target_is_class or isinstance(self.raw_owner, type)

    @property
    def is_data_accessor(self) -> bool:
        return self.is_accessor and is_data_descriptor(self.raw)

    def describe(self) -> Dict[str, Any]:
        """Summarize the analysis with JSON-friendly values."""
        if self.absent:
            ownership = "absent"
        elif self.own:
            ownership = "own"
        else:
            ownership = "inherited"

        if self.raw_owner is None:
            owner = None
        elif self.raw_owner is self.target:
            owner = _display_name(self.target)
        else:
            owner = _display_name(self.raw_owner)

        registry = find_registry(self.target)
        return {
            "target": _display_name(self.target),
            "member": self.name,
            "ownership": ownership,
            "owner": owner,
            "callable": self.is_callable,
            "accessor": self.is_accessor and not self.is_callable,
            "arity": len(positional_parameters(self.value)) if self.is_callable else None,
            "depth": registry.depth(self.name) if registry else 0,
        }


def _display_name(obj: Any) -> str:
    if isinstance(obj, type):
        return f"{obj.__module__}.{obj.__qualname__}"
    if inspect.ismodule(obj):
        return obj.__name__
    return f"<{type(obj).__name__} object>"


def analyze_member(target: Any, name: str, registry: Optional[HookRegistry] = None) -> MemberAnalysis:
    """Analyze how ``target.<name>`` is currently resolved."""
    if registry is None:
        registry = find_registry(target)

    own_slot = read_own(target, name, registry)
    value = getattr(target, name, MISSING)

    if isinstance(target, type):
        raw_owner, raw = lookup_static(target, name)
        return MemberAnalysis(target, name, own_slot, raw, raw_owner, value)

    # Attribute precedence for everything else: shadow accessor, class data
    # descriptor, instance dict, then class non-data descriptor or plain value.
    if own_slot is not None and own_slot.on_shadow:
        return MemberAnalysis(target, name, own_slot, own_slot.value, registry.shadow, value)

    base = registry.base_class if registry is not None and registry.base_class else type(target)
    klass, class_raw = lookup_static(base, name)
    if klass is not None and is_data_descriptor(class_raw):
        raw, raw_owner = class_raw, klass
    elif own_slot is not None:
        raw, raw_owner = own_slot.value, target
    else:
        raw, raw_owner = class_raw, klass
    return MemberAnalysis(target, name, own_slot, raw, raw_owner, value)
