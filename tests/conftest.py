"""Shared fixtures for the ROSA HCP CLI tests."""

import pytest

from common.parameter_store import ParameterStore

PARAMETERS = """\
# cluster settings
CLUSTER_NAME=jeretan
REGION=ap-southeast-1
VPC_CIDR=10.0.0.0/16
PUBLIC_CIDR_SUBNET=10.0.1.0/24
PRIVATE_CIDR_SUBNET=10.0.0.0/24
ACCOUNT_ROLES_PREFIX=jeretan-hcp
OPERATOR_ROLES_PREFIX=jeretan-hcp
"""


@pytest.fixture
def parameter_file(tmp_path, monkeypatch):
    """Write a complete parameter file and point the CLI at it."""
    path = tmp_path / "variable.txt"
    path.write_text(PARAMETERS)
    monkeypatch.setenv("ROSA_HCP_PARAMETER_FILE", str(path))
    return path


@pytest.fixture
def store(parameter_file):
    return ParameterStore(parameter_file).load()
