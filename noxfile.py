# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.
"""Test with different environment configuration with nox.

Documentation:
    https://nox.thea.codes/
"""

import nox

nox.options.error_on_missing_interpreters = False


COMMON_TEST_DEPENDENCIES = (
    "hypothesis",
    "numpy",
    "parameterized",
    "pytest-cov",
    "pytest-randomly",
    "pytest-subtests",
    "pytest-xdist",
    "pytest!=7.1.0",
    "typing_extensions>=4.10",
)
ONNX = "onnx==1.17"
ONNX_WEEKLY = "onnx-weekly"


@nox.session(tags=["build"])
def build(session):
    """Build package."""
    session.install("build", "wheel")
    session.run("python", "-m", "build")


@nox.session(tags=["test"])
def test(session):
    """Test graphcanon."""
    session.install(*COMMON_TEST_DEPENDENCIES, ONNX)
    session.install(".", "--no-deps")
    session.run("pip", "list")
    session.run("pytest", "graphcanon", "--doctest-modules", *session.posargs)
    session.run("pytest", "tests", *session.posargs)


@nox.session(tags=["test-onnx-weekly"])
def test_onnx_weekly(session):
    """Test with ONNX weekly (preview) build."""
    session.install(*COMMON_TEST_DEPENDENCIES, ONNX_WEEKLY)
    session.install(".", "--no-deps")
    session.run("pip", "list")
    session.run("pytest", "graphcanon", "--doctest-modules", *session.posargs)
    session.run("pytest", "tests", *session.posargs)
