"""Unit tests for member resolution analysis."""

import copy
import pickle

from mook import MISSING, HookedProperty, analyze_member, hook, unhook
from mook.core.resolution import _Missing, lookup_static, positional_parameters


class Box:
    def __init__(self, **attrs):
        self.__dict__.update(attrs)


class Pair:
    def __init__(self, x=2, y=3):
        self.x = x
        self.y = y

    def sum(self):
        return self.x + self.y


class SubPair(Pair):
    pass


class Totals:
    def __init__(self, a=1, b=2):
        self.a = a
        self.b = b

    @property
    def sum(self):
        return self.a + self.b


class TestMissing:
    def test_singleton(self):
        assert _Missing() is MISSING
        assert not MISSING
        assert repr(MISSING) == "MISSING"

    def test_survives_copy_and_pickle(self):
        assert copy.copy(MISSING) is MISSING
        assert copy.deepcopy(MISSING) is MISSING
        assert pickle.loads(pickle.dumps(MISSING)) is MISSING


class TestAnalyzeMember:
    """How members of instances, modules and classes are resolved."""

    def test_own_plain_value(self):
        box = Box(num=3)
        analysis = analyze_member(box, "num")

        assert analysis.own
        assert analysis.raw == 3
        assert analysis.raw_owner is box
        assert analysis.value == 3
        assert not analysis.is_accessor
        assert not analysis.is_callable

    def test_inherited_method(self):
        analysis = analyze_member(Pair(), "sum")

        assert analysis.inherited
        assert analysis.raw is Pair.__dict__["sum"]
        assert analysis.raw_owner is Pair
        assert analysis.is_callable
        assert analysis.is_accessor
        assert not analysis.is_data_accessor

    def test_class_property(self):
        analysis = analyze_member(Totals(), "sum")

        assert analysis.inherited
        assert analysis.value == 3
        assert analysis.is_data_accessor
        assert not analysis.is_callable

    def test_absent_member(self):
        analysis = analyze_member(Box(), "missing")

        assert analysis.absent
        assert analysis.inherited
        assert analysis.raw is MISSING
        assert analysis.raw_owner is None
        assert not analysis.is_callable

    def test_own_value_hidden_by_data_descriptor(self):
        """A property wins over an instance dict entry of the same name."""
        totals = Totals()
        vars(totals)["sum"] = 99
        analysis = analyze_member(totals, "sum")

        assert analysis.own
        assert analysis.own_slot.value == 99
        assert analysis.raw is Totals.__dict__["sum"]
        assert analysis.value == 3

    def test_function_stored_on_instance(self):
        """Functions in an instance dict are plain values, not accessors."""
        box = Box(run=lambda: 1)
        analysis = analyze_member(box, "run")

        assert analysis.own
        assert analysis.is_callable
        assert not analysis.is_accessor

    def test_class_targets(self):
        own = analyze_member(Pair, "sum")
        assert own.target_is_class
        assert own.own
        assert own.raw_owner is Pair

        inherited = analyze_member(SubPair, "sum")
        assert inherited.inherited
        assert inherited.raw_owner is Pair
        assert inherited.is_accessor

    def test_hooked_member_lives_on_shadow_class(self):
        box = Box(num=3)
        hook(box, "num", lambda v: v + 1)

        analysis = analyze_member(box, "num")
        assert analysis.own
        assert analysis.own_slot.on_shadow
        assert isinstance(analysis.raw, HookedProperty)
        assert analysis.raw_owner is type(box)
        assert analysis.value == 4

        unhook(box, "num")
        assert not analyze_member(box, "num").own_slot.on_shadow


class TestLookupStatic:
    def test_finds_defining_class(self):
        assert lookup_static(SubPair, "sum") == (Pair, Pair.__dict__["sum"])

    def test_does_not_invoke_descriptors(self):
        owner, raw = lookup_static(Totals, "sum")
        assert owner is Totals
        assert isinstance(raw, property)

    def test_not_found(self):
        assert lookup_static(Pair, "nothing") == (None, MISSING)


class TestPositionalParameters:
    def test_mixed_parameters(self):
        def func(a, b=1, *args, c, **kwargs):
            pass

        assert positional_parameters(func) == ["a", "b"]

    def test_positional_only(self):
        assert positional_parameters(divmod) == [None, None]

    def test_bound_method(self):
        assert positional_parameters(Pair().sum) == []

    def test_not_introspectable(self):
        assert positional_parameters(5) == []


class TestDescribe:
    def test_method(self):
        info = analyze_member(Pair(), "sum").describe()

        assert info["target"] == "<Pair object>"
        assert info["member"] == "sum"
        assert info["ownership"] == "inherited"
        assert info["owner"].endswith("Pair")
        assert info["callable"] is True
        assert info["accessor"] is False
        assert info["arity"] == 0
        assert info["depth"] == 0

    def test_property(self):
        info = analyze_member(Totals(), "sum").describe()

        assert info["accessor"] is True
        assert info["callable"] is False
        assert info["arity"] is None

    def test_absent(self):
        info = analyze_member(Box(), "missing").describe()

        assert info["ownership"] == "absent"
        assert info["owner"] is None

    def test_depth_counts_active_hooks(self):
        box = Box(num=1)
        hook(box, "num", lambda v: v)
        hook(box, "num", lambda v: v)

        assert analyze_member(box, "num").describe()["depth"] == 2
        unhook(box, "num")
        unhook(box, "num")
