"""
Settings for the audit rules and logging.

Defaults describe a TestNG suite that also uses Tempto and JMH. Every value
can be overridden through the environment:

  LIFECYCLE_AUDIT_LOG_LEVEL:             DEBUG, INFO, WARNING, ERROR (default: WARNING)
  LIFECYCLE_AUDIT_BENCHMARK_ANNOTATION:  fully-qualified benchmark annotation
  LIFECYCLE_AUDIT_TEST_NAMESPACE:        package of the test framework's lifecycle annotations
  LIFECYCLE_AUDIT_COMPANION_NAMESPACE:   package of the companion test-generation library
  LIFECYCLE_AUDIT_PROXY_MARKER:          superclass name of generated convention-test proxies
"""

import logging
import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional

BENCHMARK_ANNOTATION = "org.openjdk.jmh.annotations.Benchmark"
TEST_NAMESPACE = "org.testng.annotations"
COMPANION_NAMESPACE = "io.prestosql.tempto"
PROXY_MARKER = (
    "io.prestosql.tempto.internal.convention."
    "ConventionBasedTestProxyGenerator$ConventionBasedTestProxy"
)

ENV_PREFIX = "LIFECYCLE_AUDIT_"
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuditConfig:
    benchmark_annotation: str = BENCHMARK_ANNOTATION
    test_namespace: str = TEST_NAMESPACE
    companion_namespace: str = COMPANION_NAMESPACE
    proxy_marker: str = PROXY_MARKER
    log_level: str = "WARNING"


DEFAULT_CONFIG = AuditConfig()


def load_config(environ: Optional[Mapping[str, str]] = None, **overrides) -> AuditConfig:
    """
    Builds the config from defaults, then environment variables, then explicit
    keyword overrides (highest precedence).
    """
    env = os.environ if environ is None else environ
    values = {}
    for name in AuditConfig.__dataclass_fields__:
        raw = env.get(ENV_PREFIX + name.upper())
        if raw is not None and raw.strip():
            values[name] = raw.strip()
    values.update({k: v for k, v in overrides.items() if v is not None})

    config = replace(DEFAULT_CONFIG, **values)
    level = config.log_level.upper()
    if level not in _LOG_LEVELS:
        raise ValueError(f"Invalid log level {config.log_level!r}; expected one of {', '.join(_LOG_LEVELS)}")
    return replace(config, log_level=level)


def configure_logging(config: AuditConfig):
    """Sends log records to stderr at the configured level."""
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        force=True,
    )
    logger.debug("Logging configured at %s", config.log_level)
