"""Continuous integration detection."""

import os

CI_ENV_VARS = (
    "CI",
    "CONTINUOUS_INTEGRATION",
    "BUILD_ID",
    "BUILD_NUMBER",
    "RUN_ID",
    "JENKINS_URL",
    "TEAMCITY_VERSION",
    "TRAVIS",
    "CIRCLECI",
    "GITHUB_ACTIONS",
    "GITLAB_CI",
    "BUILDKITE",
    "TF_BUILD",
)


def is_ci(environ: dict[str, str] | None = None) -> bool:
    """Return True when running under a CI service.

    Args:
        environ: Environment mapping to inspect (defaults to os.environ)
    """
    env = os.environ if environ is None else environ
    return any(env.get(name) for name in CI_ENV_VARS)
