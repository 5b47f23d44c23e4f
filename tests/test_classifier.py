"""Tests for MethodClassifier on hand-built type snapshots."""

from lifecycle_audit.src.lifecycle_audit.classifier import MethodClassifier
from lifecycle_audit.src.lifecycle_audit.config import load_config
from lifecycle_audit.src.lifecycle_audit.rules import AnnotationRuleSet, SpiInterfaceRuleSet

TEST = "org.testng.annotations.Test"
BEFORE_METHOD = "org.testng.annotations.BeforeMethod"
DATA_PROVIDER = "org.testng.annotations.DataProvider"
BENCHMARK = "org.openjdk.jmh.annotations.Benchmark"
BEFORE_WITH_CONTEXT = "io.prestosql.tempto.BeforeTestWithContext"
INJECT = "com.google.inject.Inject"


def names(methods):
    return [m.name for m in methods]


# ------------------------------------------------------------------
# Scenarios
# ------------------------------------------------------------------

class TestScenarios:
    def test_unannotated_override_of_annotated_method(self, types):
        base = types.cls("com.acme.Base", types.m("setUp", annotations=(BEFORE_METHOD,)))
        child = types.cls("com.acme.Child", types.m("setUp"), superclass=base)

        assert MethodClassifier().classify(child) == []

    def test_plain_helper_is_reported(self, types):
        plain = types.cls("com.acme.Plain", types.m("helper"))

        violations = MethodClassifier().classify(plain)

        assert names(violations) == ["helper"]
        assert violations[0].declaring_type is plain

    def test_service_interface_method_is_recognized(self, types):
        contract = types.interface(
            "io.prestosql.tempto.ServiceContract",
            types.m("onContext", "io.prestosql.tempto.Context"),
        )
        impl = types.cls(
            "com.acme.Impl",
            types.m("onContext", "io.prestosql.tempto.Context"),
            interfaces=(contract,),
        )

        assert MethodClassifier().classify(impl) == []

    def test_bridge_method_is_never_a_candidate(self, types):
        impl = types.cls(
            "com.acme.Impl",
            types.m("get", annotations=(TEST,), return_type="java.lang.String"),
            types.m("get", is_bridge=True, return_type="java.lang.Object"),
        )

        assert len(impl.public_methods) > 2
        assert MethodClassifier().classify(impl) == []


# ------------------------------------------------------------------
# Candidate selection
# ------------------------------------------------------------------

class TestCandidates:
    def test_static_methods_are_skipped(self, types):
        t = types.cls("com.acme.T", types.m("create", is_static=True))
        assert MethodClassifier().classify(t) == []

    def test_unannotated_bridge_is_skipped(self, types):
        t = types.cls("com.acme.T", types.m("compareTo", "java.lang.Object", is_bridge=True))
        assert MethodClassifier().classify(t) == []

    def test_methods_inherited_from_root_are_skipped(self, types):
        t = types.cls("com.acme.T")
        assert [m.name for m in t.public_methods][:3] == ["equals", "toString", "hashCode"]
        assert MethodClassifier().classify(t) == []

    def test_order_follows_public_methods(self, types):
        base = types.cls("com.acme.Base", types.m("inheritedHelper"))
        t = types.cls(
            "com.acme.T",
            types.m("zeta"),
            types.m("test", annotations=(TEST,)),
            types.m("alpha"),
            superclass=base,
        )
        assert names(MethodClassifier().classify(t)) == ["zeta", "alpha", "inheritedHelper"]


# ------------------------------------------------------------------
# Annotation-based recognition
# ------------------------------------------------------------------

class TestFrameworkRecognition:
    def test_any_testng_annotation(self, types):
        t = types.cls(
            "com.acme.T",
            types.m("test", annotations=(TEST,)),
            types.m("rows", annotations=(DATA_PROVIDER,), return_type="java.lang.Object[][]"),
        )
        assert MethodClassifier().classify(t) == []

    def test_benchmark_and_companion_annotations(self, types):
        t = types.cls(
            "com.acme.T",
            types.m("measure", annotations=(BENCHMARK,)),
            types.m("prepare", annotations=(BEFORE_WITH_CONTEXT,)),
        )
        assert MethodClassifier().classify(t) == []

    def test_foreign_annotation_is_not_enough(self, types):
        t = types.cls("com.acme.T", types.m("setInjector", "com.google.inject.Injector", annotations=(INJECT,)))
        assert names(MethodClassifier().classify(t)) == ["setInjector"]

    def test_annotated_method_at_any_depth(self, types):
        a = types.cls("com.acme.A", types.m("check"))
        b = types.cls("com.acme.B", types.m("check"), superclass=a)
        c = types.cls("com.acme.C", types.m("check", annotations=(TEST,)), superclass=b)
        assert MethodClassifier().classify(c) == []

    def test_recognition_inherited_over_several_levels(self, types):
        a = types.cls("com.acme.A", types.m("tearDown", annotations=(BEFORE_METHOD,)))
        b = types.cls("com.acme.B", types.m("tearDown"), superclass=a)
        c = types.cls("com.acme.C", types.m("tearDown"), superclass=b)
        assert MethodClassifier().classify(c) == []

    def test_recognition_through_intermediate_inherited_entry(self, types):
        a = types.cls("com.acme.A", types.m("tearDown", annotations=(BEFORE_METHOD,)))
        b = types.cls("com.acme.B", superclass=a)
        c = types.cls("com.acme.C", types.m("tearDown"), superclass=b)
        assert MethodClassifier().classify(c) == []

    def test_override_of_unrecognized_method_is_reported(self, types):
        base = types.cls("com.acme.Base", types.m("helper"))
        child = types.cls("com.acme.Child", types.m("helper"), superclass=base)
        violations = MethodClassifier().classify(child)
        assert names(violations) == ["helper"]
        assert violations[0].declaring_type is child

    def test_overload_is_not_an_override(self, types):
        base = types.cls("com.acme.Base", types.m("setUp", annotations=(BEFORE_METHOD,)))
        child = types.cls("com.acme.Child", types.m("setUp", "java.lang.String"), superclass=base)
        violations = MethodClassifier().classify(child)
        assert [m.parameter_types for m in violations] == [("java.lang.String",)]

    def test_parameter_names_are_case_sensitive(self, types):
        base = types.cls("com.acme.Base", types.m("run", "com.acme.Context", annotations=(TEST,)))
        child = types.cls("com.acme.Child", types.m("run", "com.acme.context"), superclass=base)
        assert names(MethodClassifier().classify(child)) == ["run"]

    def test_override_of_root_method(self, types):
        t = types.cls(
            "com.acme.T",
            types.m("toString", return_type="java.lang.String"),
            types.m("equals", "java.lang.Object", return_type="boolean"),
        )
        assert MethodClassifier().classify(t) == []

    def test_custom_namespace(self, types):
        config = load_config({}, test_namespace="org.junit.jupiter.api")
        classifier = MethodClassifier(AnnotationRuleSet(config), SpiInterfaceRuleSet(config))
        t = types.cls(
            "com.acme.T",
            types.m("junit", annotations=("org.junit.jupiter.api.Test",)),
            types.m("testng", annotations=(TEST,)),
        )
        assert names(classifier.classify(t)) == ["testng"]


# ------------------------------------------------------------------
# Service-provider interfaces
# ------------------------------------------------------------------

class TestServiceInterfaceMatch:
    def test_signature_must_match(self, types):
        contract = types.interface("io.prestosql.tempto.Requirements", types.m("getRequirements", "a.Config"))
        impl = types.cls(
            "com.acme.Impl",
            types.m("getRequirements", "b.Config"),
            interfaces=(contract,),
        )
        assert names(MethodClassifier().classify(impl)) == ["getRequirements"]

    def test_interface_outside_companion_namespace(self, types):
        contract = types.interface("com.acme.Contract", types.m("onContext"))
        impl = types.cls("com.acme.Impl", types.m("onContext"), interfaces=(contract,))
        assert names(MethodClassifier().classify(impl)) == ["onContext"]

    def test_companion_subpackage_does_not_count(self, types):
        contract = types.interface("io.prestosql.tempto.fulfillment.Contract", types.m("onContext"))
        impl = types.cls("com.acme.Impl", types.m("onContext"), interfaces=(contract,))
        assert names(MethodClassifier().classify(impl)) == ["onContext"]

    def test_interface_of_ancestor_is_not_consulted(self, types):
        contract = types.interface("io.prestosql.tempto.Contract", types.m("onContext"))
        base = types.cls("com.acme.Base", interfaces=(contract,))
        child = types.cls("com.acme.Child", types.m("onContext"), superclass=base)
        assert names(MethodClassifier().classify(child)) == ["onContext"]

    def test_inherited_method_uses_its_own_declaring_type(self, types):
        contract = types.interface("io.prestosql.tempto.Contract", types.m("onContext"))
        base = types.cls("com.acme.Base", types.m("onContext"), interfaces=(contract,))
        child = types.cls("com.acme.Child", superclass=base)
        assert MethodClassifier().classify(child) == []

    def test_super_interface_is_not_consulted(self, types):
        parent = types.interface("io.prestosql.tempto.Parent", types.m("onContext"))
        contract = types.interface("com.acme.Contract", interfaces=(parent,))
        impl = types.cls("com.acme.Impl", types.m("onContext"), interfaces=(contract,))
        assert names(MethodClassifier().classify(impl)) == ["onContext"]
