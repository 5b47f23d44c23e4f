#!/usr/bin/env python3
"""
Unannotated test method audit
-----------------------------
Parses Java test sources and reports public methods of test classes that the
test framework will never call: methods carrying no TestNG/Tempto/JMH
annotation, not overriding such a method, and not implementing a Tempto
service-provider interface method. These are usually tests missing @Test.

USAGE EXAMPLES
--------------
# 1) Run against an in-code sample (no files needed):
lifecycle-audit

# 2) Run against Java sources (files and/or directories, recursive):
lifecycle-audit src/test/java
lifecycle-audit --json src/test/java > report.json

Exit status is 1 when anything was reported, 0 otherwise.

DEPENDENCIES
------------
    pip install tree-sitter tree-sitter-java
"""

import argparse
import sys
from typing import Optional

from lifecycle_audit.src.lifecycle_audit.classifier import MethodClassifier
from lifecycle_audit.src.lifecycle_audit.config import configure_logging, load_config
from lifecycle_audit.src.lifecycle_audit.indexer import JavaIndexer
from lifecycle_audit.src.lifecycle_audit.inputs.directory_scanning import index_paths
from lifecycle_audit.src.lifecycle_audit.listener import ReportUnannotatedMethods
from lifecycle_audit.src.lifecycle_audit.metadata import MetadataProvider
from lifecycle_audit.src.lifecycle_audit.outputs.output import LoggingReporter, print_summary, to_json
from lifecycle_audit.src.lifecycle_audit.rules import AnnotationRuleSet, ClassExclusionRule, SpiInterfaceRuleSet

# --- Demo sample -------------------------------------------------------------

SAMPLE_JAVA = r"""
package com.acme.demo;

import org.testng.annotations.BeforeMethod;
import org.testng.annotations.Test;

abstract class AbstractUserTest {
    @BeforeMethod
    public void setUp() {}

    public void createFixtures() {}
}

public class UserServiceTest extends AbstractUserTest {
    @Override
    public void setUp() {
        super.setUp();
    }

    @Test
    public void testAddUser() {}

    public void testDeleteUser() {}

    public static UserServiceTest create() { return new UserServiceTest(); }

    @Override
    public String toString() { return "UserServiceTest"; }
}
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lifecycle-audit",
        description="Report public test-class methods that carry no test framework annotation.",
    )
    parser.add_argument("paths", nargs="*", help=".java files or directories to scan (default: built-in sample)")
    parser.add_argument("--json", action="store_true", help="print results as JSON instead of a summary")
    parser.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING or ERROR")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    config = load_config(log_level=args.log_level)
    configure_logging(config)

    # Create indexer (loads the Tree-sitter Java grammar once)
    indexer = JavaIndexer()
    if args.paths:
        index_paths(indexer, args.paths)
    else:
        indexer.index_source(SAMPLE_JAVA, "<sample>")

    metadata = MetadataProvider(indexer, config)
    reporter = LoggingReporter()
    listener = ReportUnannotatedMethods(
        reporter,
        metadata=metadata,
        classifier=MethodClassifier(AnnotationRuleSet(config), SpiInterfaceRuleSet(config)),
        exclusion_rule=ClassExclusionRule(config),
    )

    results = {}
    for name in metadata.analyzable_type_names():
        results[name] = listener.on_before_class(name)
        listener.on_after_class(name)

    if args.json:
        print(to_json(results))
    else:
        print_summary(results)
    return 1 if reporter.failure_count else 0


if __name__ == "__main__":
    sys.exit(main())
