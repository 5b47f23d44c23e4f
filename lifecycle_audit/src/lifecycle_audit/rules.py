# --- Recognition and exclusion rules -----------------------------------------
from lifecycle_audit.src.lifecycle_audit.config import DEFAULT_CONFIG, AuditConfig
from lifecycle_audit.src.lifecycle_audit.models.type_models import AnnotationType, TypeDescriptor


class AnnotationRuleSet:
    """
    Decides whether an annotation makes a method visible to the test framework:
    the benchmark annotation, anything from the framework's annotation package
    (@Test, @BeforeMethod, @DataProvider, ...), or anything from the companion
    library's package (@BeforeTestWithContext, @AfterTestWithContext).
    """

    def __init__(self, config: AuditConfig = DEFAULT_CONFIG):
        self.benchmark_annotation = config.benchmark_annotation
        self.test_namespace = config.test_namespace
        self.companion_namespace = config.companion_namespace

    def recognizes(self, annotation: AnnotationType) -> bool:
        if annotation.name == self.benchmark_annotation:
            return True
        if annotation.namespace == self.test_namespace:
            return True
        if annotation.namespace == self.companion_namespace:
            return True
        return False


class SpiInterfaceRuleSet:
    """Interfaces of the companion library are invoked purely by override."""

    def __init__(self, config: AuditConfig = DEFAULT_CONFIG):
        self.companion_namespace = config.companion_namespace

    def is_service_interface(self, type_desc: TypeDescriptor) -> bool:
        return type_desc.namespace == self.companion_namespace


class ClassExclusionRule:
    """Skips classes generated by the companion library's convention-test proxy generator."""

    def __init__(self, config: AuditConfig = DEFAULT_CONFIG):
        self.proxy_marker = config.proxy_marker

    def is_excluded(self, type_desc: TypeDescriptor) -> bool:
        superclass = type_desc.superclass
        return superclass is not None and superclass.name == self.proxy_marker
