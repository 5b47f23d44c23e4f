"""
Class listener that reports public methods a test run would silently skip.

The host calls `on_before_class` once per test class, before that class's tests
run. Violations and internal faults both go to the injected reporter; nothing
is raised back into the host.
"""

import logging
import traceback
from typing import Optional, Union

from lifecycle_audit.src.lifecycle_audit.classifier import MethodClassifier
from lifecycle_audit.src.lifecycle_audit.metadata import MetadataProvider
from lifecycle_audit.src.lifecycle_audit.models.type_models import MethodDescriptor, TypeDescriptor
from lifecycle_audit.src.lifecycle_audit.outputs.output import (
    ViolationReporter,
    format_fault_message,
    format_violation_message,
)
from lifecycle_audit.src.lifecycle_audit.rules import ClassExclusionRule

logger = logging.getLogger(__name__)


class ReportUnannotatedMethods:

    def __init__(self, reporter: ViolationReporter,
                 metadata: Optional[MetadataProvider] = None,
                 classifier: Optional[MethodClassifier] = None,
                 exclusion_rule: Optional[ClassExclusionRule] = None):
        self.reporter = reporter
        self.metadata = metadata
        self.classifier = classifier or MethodClassifier()
        self.exclusion_rule = exclusion_rule or ClassExclusionRule()

    @property
    def source_component(self) -> str:
        return type(self).__qualname__

    def on_before_class(self, test_class: Union[TypeDescriptor, str]) -> list[MethodDescriptor]:
        """
        Audits one class. Accepts a descriptor, or a binary class name when a
        metadata provider was given. Returns the violations that were reported
        (empty on an internal fault).
        """
        try:
            return self._report_unannotated_methods(test_class)
        except Exception:
            logger.debug("Audit of %s failed", test_class, exc_info=True)
            self.reporter.report(
                self.source_component,
                format_fault_message(test_class, traceback.format_exc()),
            )
            return []

    def on_after_class(self, test_class: Union[TypeDescriptor, str]):
        pass

    def analyze_before_tests_run(self, type_desc: TypeDescriptor) -> list[MethodDescriptor]:
        if self.exclusion_rule.is_excluded(type_desc):
            # Generated convention tests
            logger.debug("Skipping generated class %s", type_desc.name)
            return []
        return self.classifier.classify(type_desc)

    def _report_unannotated_methods(self, test_class: Union[TypeDescriptor, str]) -> list[MethodDescriptor]:
        if isinstance(test_class, str):
            if self.metadata is None:
                raise ValueError(f"No metadata provider to resolve class {test_class}")
            type_desc = self.metadata.get_type(test_class)
        else:
            type_desc = test_class

        violations = self.analyze_before_tests_run(type_desc)
        if violations:
            self.reporter.report(
                self.source_component,
                format_violation_message(type_desc.name, violations),
            )
        return violations
