"""Integration tests for end-to-end dependency resolution."""

from abc import ABC
from datetime import timezone, tzinfo
from typing import Annotated, List

import pytest

from graphwire import (
    AmbiguousBindingError,
    CircularDependencyError,
    ContextBuilder,
    DoNotResolve,
    NoBindingFoundError,
    ResolveAll,
    ResolveByName,
    UnsupportedOptionalParameterError,
    resolve_dependencies,
    resolve_dependencies_and_get,
)

CONST_STRING = "some random const value"


class SomeInterface(ABC):
    pass


class A:
    def __init__(self, b: "B"):
        self.b = b


class B:
    def __init__(self, a: A):
        self.a = a


class FactoryCreatedFoo:
    pass


def foo_factory() -> FactoryCreatedFoo:
    return FactoryCreatedFoo()


class StringHolder:
    def __init__(self, value: str):
        self.value = value


class NumberHolder:
    def __init__(self, value: int):
        self.value = value


def length_calculator(s: StringHolder) -> NumberHolder:
    return NumberHolder(len(s.value))


def enterprise_adder(a: Annotated[int, ResolveByName()], b: Annotated[int, ResolveByName()]) -> int:
    return a + b


class Clock:
    def __init__(self, zone: tzinfo):
        self.zone = zone

    @classmethod
    def system(cls, zone: tzinfo) -> "Clock":
        return cls(zone)


class TestBasicResolution:
    """Test resolving simple dependency graphs."""

    def test_single_constructed_dependency(self):
        """Test resolving a dependency constructed from a class."""

        class Foo:
            pass

        class DependsOnFoo:
            def __init__(self, foo: Foo):
                self.foo = foo

        context = ContextBuilder().add(Foo, DependsOnFoo).build()

        assert context.get(DependsOnFoo).foo is context.get(Foo)

    def test_single_value_dependency(self):
        """Test resolving a dependency registered as a value."""

        class Foo:
            pass

        class DependsOnFoo:
            def __init__(self, foo: Foo):
                self.foo = foo

        foo = Foo()
        context = ContextBuilder().add(foo, DependsOnFoo).build()

        assert context.get(DependsOnFoo).foo is foo

    def test_implementations_of_interfaces(self):
        """Test that implementations satisfy parameters declared with their interface."""

        class Foo(SomeInterface):
            pass

        class DependsOnFoo:
            def __init__(self, foo: SomeInterface):
                self.foo = foo

        context = ContextBuilder().add(Foo, DependsOnFoo).build()

        assert isinstance(context.get(DependsOnFoo).foo, Foo)

    def test_layer_wise_context_building(self):
        """Test building a context from several layers."""

        class FooRepository:
            pass

        class FooService:
            def __init__(self, foo_repository: FooRepository):
                self.foo_repository = foo_repository

        class App:
            def __init__(self, foo_service: FooService):
                self.foo_service = foo_service

        repository_layer = [FooRepository]
        service_layer = [FooService]

        builder = ContextBuilder()
        builder.add_all(repository_layer)
        builder.add_all(service_layer)
        builder.add(App)

        assert isinstance(builder.build().get(App).foo_service.foo_repository, FooRepository)


class TestRegistrationOrder:
    """Test that registration order never matters."""

    @pytest.mark.parametrize("reverse", [False, True])
    def test_dependent_before_dependency(self, reverse):
        """Test both registration orders of a dependency pair."""

        class Foo:
            pass

        class DependsOnFoo:
            def __init__(self, foo: Foo):
                self.foo = foo

        sources = [DependsOnFoo, Foo]
        if reverse:
            sources.reverse()

        context = ContextBuilder().add_all(sources).build()

        assert context.get(DependsOnFoo).foo is context.get(Foo)

    def test_deep_graph_in_reverse_order(self):
        """Test a chain of dependencies registered from the top down."""

        class Config:
            pass

        class Database:
            def __init__(self, config: Config):
                self.config = config

        class Repository:
            def __init__(self, database: Database):
                self.database = database

        class Service:
            def __init__(self, repository: Repository, config: Config):
                self.repository = repository
                self.config = config

        context = resolve_dependencies(Service, Repository, Database, Config)
        service = context.get(Service)

        assert service.config is service.repository.database.config


class TestNamedResolution:
    """Test resolution by name."""

    def test_implicitly_named_parameters(self):
        """Test that the parameter name is used as binding name."""

        class Foo:
            pass

        class DependsOnFoo:
            def __init__(self, named_foo: Annotated[Foo, ResolveByName()]):
                self.named_foo = named_foo

        context = ContextBuilder().add(("named_foo", Foo), DependsOnFoo).build()

        assert isinstance(context.get(DependsOnFoo).named_foo, Foo)

    def test_explicitly_named_parameters(self):
        """Test that an explicit binding name is used."""

        class Foo:
            pass

        class DependsOnFoo:
            def __init__(self, foo: Annotated[Foo, ResolveByName("named_foo")]):
                self.foo = foo

        context = ContextBuilder().add(("named_foo", Foo), DependsOnFoo).build()

        assert isinstance(context.get(DependsOnFoo).foo, Foo)

    def test_no_type_fallback_for_named_parameters(self):
        """Test that a parameter resolved by name never resolves by type."""

        class Foo:
            pass

        class DependsOnFoo:
            def __init__(self, foo: Annotated[Foo, ResolveByName()]):
                self.foo = foo

        with pytest.raises(NoBindingFoundError, match="No binding found for name foo"):
            ContextBuilder().add(Foo, DependsOnFoo).build()

    @pytest.mark.parametrize("with_unnamed_foo", [False, True])
    def test_type_compatible_binding_does_not_change_named_outcome(self, with_unnamed_foo):
        """Test that adding or removing a type-compatible binding does not matter."""

        class Foo:
            pass

        class DependsOnFoo:
            def __init__(self, foo: Annotated[Foo, ResolveByName("primary")]):
                self.foo = foo

        primary = Foo()
        sources = [("primary", primary), DependsOnFoo]
        if with_unnamed_foo:
            sources.append(Foo())

        context = ContextBuilder().add_all(sources).build()

        assert context.get(DependsOnFoo).foo is primary

    def test_directs_devs_to_where_resolution_is_set_up(self):
        """Test that the error names the function building the context."""

        class Foo:
            pass

        class DependsOnFoo:
            def __init__(self, foo: Annotated[Foo, ResolveByName()]):
                self.foo = foo

        with pytest.raises(NoBindingFoundError) as exc_info:
            ContextBuilder().add(Foo, DependsOnFoo).build()

        assert "test_directs_devs_to_where_resolution_is_set_up" in str(exc_info.value)

    def test_named_value_does_not_satisfy_type_lookup(self):
        """Test that named bindings are invisible to parameters resolved by type."""

        class DependsOnUrl:
            def __init__(self, url: str):
                self.url = url

        with pytest.raises(NoBindingFoundError, match="only registered by name \\(url\\)"):
            ContextBuilder().add(("url", "http://x"), DependsOnUrl).build()


class TestMissingAndAmbiguous:
    """Test missing and ambiguous bindings."""

    def test_missing_dependency(self):
        """Test that a missing dependency names the parameter and producer."""

        class Foo:
            pass

        class DependsOnFoo:
            def __init__(self, foo: Foo):
                self.foo = foo

        with pytest.raises(NoBindingFoundError, match="foo in DependsOnFoo"):
            ContextBuilder().add(DependsOnFoo).build()

    def test_ambiguity(self):
        """Test that two candidates for a single-value parameter fail."""

        class Foo:
            pass

        class DependsOnFoo:
            def __init__(self, foo: Foo):
                self.foo = foo

        with pytest.raises(AmbiguousBindingError, match="ambiguously defined"):
            ContextBuilder().add(Foo(), Foo, DependsOnFoo).build()

    def test_two_values_ambiguous_but_collectable(self):
        """Test that two values of a type are ambiguous alone and collected in order."""

        class Foo:
            pass

        class DependsOnFoo:
            def __init__(self, foo: Foo):
                self.foo = foo

        class DependsOnFoos:
            def __init__(self, foos: Annotated[List[Foo], ResolveAll()]):
                self.foos = foos

        first, second = Foo(), Foo()

        with pytest.raises(AmbiguousBindingError) as exc_info:
            ContextBuilder().add(first, second, DependsOnFoo).build()
        assert exc_info.value.candidates == [first, second]

        context = ContextBuilder().add(first, second, DependsOnFoos).build()
        assert context.get(DependsOnFoos).foos == [first, second]


class TestOptionalParameters:
    """Test the optional parameter policy."""

    def test_unannotated_optional_parameter(self):
        """Test that an optional parameter without DoNotResolve fails."""

        class HasOptionalParameter:
            def __init__(self, some_option: str = "the option value"):
                self.some_option = some_option

        with pytest.raises(UnsupportedOptionalParameterError, match="Optional parameters") as exc_info:
            ContextBuilder().add(HasOptionalParameter).build()

        assert "some_option" in str(exc_info.value)

    def test_annotated_optional_parameter_keeps_default(self):
        """Test that an ignored parameter keeps its default despite a compatible binding."""

        class HasOptionalParameter:
            def __init__(self, some_option: Annotated[str, DoNotResolve()] = CONST_STRING):
                self.some_option = some_option

        context = ContextBuilder().add("some string that should not be used", HasOptionalParameter).build()

        assert context.get(HasOptionalParameter).some_option == CONST_STRING


class TestFactories:
    """Test factory function producers."""

    def test_output_of_factories(self):
        """Test that a factory's return type is its lookup key."""

        class DependsOnFactoryCreatedFoo:
            def __init__(self, foo: FactoryCreatedFoo):
                self.foo = foo

        context = ContextBuilder().add(foo_factory, DependsOnFactoryCreatedFoo).build()

        assert isinstance(context.get(DependsOnFactoryCreatedFoo).foo, FactoryCreatedFoo)

    def test_local_factories(self):
        """Test that factories defined inside functions work."""

        class DependsOnFactoryCreatedFoo:
            def __init__(self, foo: FactoryCreatedFoo):
                self.foo = foo

        def inline_foo_factory() -> FactoryCreatedFoo:
            return FactoryCreatedFoo()

        context = ContextBuilder().add(inline_foo_factory, DependsOnFactoryCreatedFoo).build()

        assert isinstance(context.get(DependsOnFactoryCreatedFoo).foo, FactoryCreatedFoo)

    def test_parameters_of_factories(self):
        """Test that factory parameters are resolved by type."""
        context = ContextBuilder().add("hello", StringHolder, length_calculator).build()

        assert context.get(NumberHolder).value == 5

    def test_named_parameters_of_factories(self):
        """Test that factory parameters are resolved by name."""
        context = ContextBuilder().add(("a", 5), ("b", 10), ("output", enterprise_adder)).build()

        assert context.get(int, name="output") == 15

    def test_collect_all_parameters_of_factories(self):
        """Test that factory parameters can collect every implementation."""

        class FooOne(SomeInterface):
            pass

        class FooTwo(SomeInterface):
            pass

        def count_implementations(foos: Annotated[List[SomeInterface], ResolveAll()]) -> int:
            return len(foos)

        context = ContextBuilder().add(FooOne, FooTwo, ("count", count_implementations)).build()

        assert context.get(int, name="count") == 2

    def test_class_method_factories(self):
        """Test that bound methods can be factories."""

        class DependsOnClock:
            def __init__(self, clock: Clock):
                self.clock = clock

        context = ContextBuilder().add(timezone.utc, Clock.system, DependsOnClock).build()

        assert context.get(DependsOnClock).clock.zone is timezone.utc


class TestCollectAll:
    """Test resolving every implementation."""

    def test_list_of_dependencies(self):
        """Test that every implementation is injected."""

        class FooOne(SomeInterface):
            pass

        class FooTwo(SomeInterface):
            pass

        class DependsOnFoo:
            def __init__(self, foos: Annotated[List[SomeInterface], ResolveAll()]):
                self.foos = foos

        bar = resolve_dependencies_and_get(DependsOnFoo, FooOne, FooTwo, DependsOnFoo)

        assert len(bar.foos) == 2
        assert any(isinstance(foo, FooOne) for foo in bar.foos)
        assert any(isinstance(foo, FooTwo) for foo in bar.foos)

    def test_single_implementation(self):
        """Test that a single implementation is injected as a list."""

        class FooOne(SomeInterface):
            pass

        class DependsOnFoo:
            def __init__(self, foos: Annotated[List[SomeInterface], ResolveAll()]):
                self.foos = foos

        context = resolve_dependencies(FooOne, DependsOnFoo)

        assert context.get(DependsOnFoo).foos == [context.get(FooOne)]

    def test_no_implementations(self):
        """Test that no implementations inject an empty list."""

        class DependsOnFoo:
            def __init__(self, foos: Annotated[List[SomeInterface], ResolveAll()]):
                self.foos = foos

        assert resolve_dependencies_and_get(DependsOnFoo, DependsOnFoo).foos == []


class TestCycles:
    """Test cycle detection."""

    def test_tells_you_about_cycles(self):
        """Test that a two-node cycle renders the chain."""
        with pytest.raises(CircularDependencyError, match="A -> B -> A"):
            ContextBuilder().add(A, B).build()

    def test_cycle_in_either_order(self):
        """Test that the cycle is found regardless of registration order."""
        with pytest.raises(CircularDependencyError, match="B -> A -> B"):
            ContextBuilder().add(B, A).build()


class TestMemoization:
    """Test that every producer is invoked exactly once."""

    def test_shared_dependency_is_constructed_once(self):
        """Test that a dependency shared by several producers is constructed once."""
        constructed = []

        class Config:
            def __init__(self):
                constructed.append(self)

        class ServiceA:
            def __init__(self, config: Config):
                self.config = config

        class ServiceB:
            def __init__(self, config: Config):
                self.config = config

        context = ContextBuilder().add(ServiceA, ServiceB, Config).build()

        assert len(constructed) == 1
        assert context.get(ServiceA).config is context.get(ServiceB).config

    def test_repeated_get_returns_same_instance(self):
        """Test that repeated lookups return the same instance."""

        class Foo:
            pass

        context = ContextBuilder().add(Foo).build()

        assert context.get(Foo) is context.get(Foo)

    def test_factory_invoked_once(self):
        """Test that a factory used by several producers is called once."""
        calls = []

        def create_foo() -> FactoryCreatedFoo:
            calls.append(1)
            return FactoryCreatedFoo()

        class First:
            def __init__(self, foo: FactoryCreatedFoo):
                self.foo = foo

        class Second:
            def __init__(self, foo: FactoryCreatedFoo):
                self.foo = foo

        context = ContextBuilder().add(First, Second, create_foo).build()

        assert len(calls) == 1
        assert context.get(First).foo is context.get(Second).foo
