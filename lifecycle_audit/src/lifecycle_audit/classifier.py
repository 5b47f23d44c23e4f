# --- Method classification ---------------------------------------------------
from typing import Optional

from lifecycle_audit.src.lifecycle_audit.models.type_models import MethodDescriptor, TypeDescriptor
from lifecycle_audit.src.lifecycle_audit.rules import AnnotationRuleSet, SpiInterfaceRuleSet


class MethodClassifier:
    """
    Finds the public methods of a type that the test framework would never call:
    not annotated, not overriding an annotated method, and not implementing a
    service-provider interface method.

    Stateless; one instance can be shared between threads.
    """

    def __init__(self, annotation_rules: Optional[AnnotationRuleSet] = None,
                 spi_rules: Optional[SpiInterfaceRuleSet] = None):
        self.annotation_rules = annotation_rules or AnnotationRuleSet()
        self.spi_rules = spi_rules or SpiInterfaceRuleSet()

    def classify(self, type_desc: TypeDescriptor) -> list[MethodDescriptor]:
        """
        Returns the violating methods of `type_desc`, in the order of its
        public methods. The caller is expected to have checked class exclusion.
        """
        return [
            method for method in type_desc.public_methods
            if self.is_candidate(method)
            and not self.is_framework_recognized(method)
            and not self.is_service_interface_match(method)
        ]

    @staticmethod
    def is_candidate(method: MethodDescriptor) -> bool:
        # Bridge methods repeat a real signature with another return type
        return (
            not method.declaring_type.is_root
            and not method.is_static
            and not method.is_bridge
        )

    def is_framework_recognized(self, method: MethodDescriptor) -> bool:
        """
        Explicitly annotated, or overrides (same name and parameter types) a
        method that is itself recognized. Anything inherited from the root type
        counts as recognized.
        """
        if method.declaring_type.is_root:
            return True
        if any(self.annotation_rules.recognizes(a) for a in method.annotations):
            return True

        superclass = method.declaring_type.superclass
        if superclass is None:
            return False
        # Simplistic override detection
        overridden = superclass.find_method(method.signature)
        if overridden is None:
            return False
        return self.is_framework_recognized(overridden)

    def is_service_interface_match(self, method: MethodDescriptor) -> bool:
        """
        Overrides a method of a service-provider interface implemented directly
        by the declaring type. Super-interfaces and interfaces of ancestors are
        not consulted.
        """
        for interface in method.declaring_type.interfaces:
            if not self.spi_rules.is_service_interface(interface):
                continue
            if interface.find_method(method.signature) is not None:
                return True
        return False
