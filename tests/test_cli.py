"""Tests for the command line dispatch."""

from unittest.mock import PropertyMock, patch

import pytest
from click.testing import CliRunner

from main import OPERATIONS, cli
from services.cloud.aws.aws_manager import AWSManager
from services.pipeline import ProvisioningPipeline
from services.rosa.rosa_wrapper import RosaWrapper

FLAGS = {
    "create_vpc": "--create-vpc",
    "create_permission": "--create-permission",
    "install_hcp": "--install-hcp",
    "delete_hcp": "--delete-hcp",
    "create_admin": "--create-admin",
    "install_operators": "--install-operators",
}


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def environment_ok():
    """Tools on PATH and valid AWS and ROSA sessions."""
    with patch("services.cloud.aws.aws_manager.detect_command_presence", return_value=True), \
            patch("services.rosa.rosa_wrapper.detect_command_presence", return_value=True), \
            patch("services.k8s.operator_installer.detect_command_presence", return_value=True), \
            patch.object(AWSManager, "evaluate_credentials", return_value=True), \
            patch.object(RosaWrapper, "has_valid_session", return_value=True):
        yield


@pytest.fixture
def operations():
    """Replace every pipeline operation with a mock."""
    patchers = {name: patch.object(ProvisioningPipeline, name) for name in OPERATIONS}
    mocks = {name: patcher.start() for name, patcher in patchers.items()}
    yield mocks
    for patcher in patchers.values():
        patcher.stop()


class TestUsage:
    """Test suite for flag parsing."""

    def test_no_flag_prints_help(self, runner, operations):
        result = runner.invoke(cli, [])
        assert result.exit_code == 1
        assert "Usage: rosa-hcp" in result.output
        assert not any(m.called for m in operations.values())

    def test_unknown_flag(self, runner, operations):
        result = runner.invoke(cli, ["--create-oidc"])
        assert result.exit_code == 1
        assert "Unknown argument: --create-oidc" in result.output
        assert "Usage: rosa-hcp" in result.output
        assert not any(m.called for m in operations.values())

    def test_unknown_positional(self, runner):
        result = runner.invoke(cli, ["create-vpc"])
        assert result.exit_code == 1
        assert "Unknown argument: create-vpc" in result.output

    def test_help(self, runner):
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        for flag in FLAGS.values():
            assert flag in result.output

    def test_two_flags(self, runner, operations):
        result = runner.invoke(cli, ["--create-vpc", "--install-hcp"])
        assert result.exit_code == 1
        assert "Only 1 option can be selected" in result.output
        assert not any(m.called for m in operations.values())


class TestDispatch:
    """Test suite for gate and single operation dispatch."""

    @pytest.mark.parametrize("operation", OPERATIONS)
    def test_single_operation(self, runner, environment_ok, parameter_file, operations, operation):
        result = runner.invoke(cli, [FLAGS[operation]])

        assert result.exit_code == 0, result.output
        for name, mock in operations.items():
            assert mock.call_count == (1 if name == operation else 0)

    @pytest.mark.parametrize("operation", OPERATIONS)
    def test_missing_parameter_file(self, runner, environment_ok, operations, operation, tmp_path, monkeypatch):
        monkeypatch.setenv("ROSA_HCP_PARAMETER_FILE", str(tmp_path / "missing.txt"))

        result = runner.invoke(cli, [FLAGS[operation]])

        assert result.exit_code == 1
        assert "Failed" in result.output
        assert not any(m.called for m in operations.values())

    def test_incomplete_parameter_file(self, runner, environment_ok, operations, parameter_file):
        parameter_file.write_text("CLUSTER_NAME=jeretan\n")

        result = runner.invoke(cli, ["--delete-hcp"])

        assert result.exit_code == 1
        assert "VPC_CIDR" in result.output
        operations["delete_hcp"].assert_not_called()

    def test_invalid_aws_identity(self, runner, parameter_file, operations):
        with patch("services.cloud.aws.aws_manager.detect_command_presence", return_value=True), \
                patch("services.rosa.rosa_wrapper.detect_command_presence", return_value=True), \
                patch.object(AWSManager, "account", new_callable=PropertyMock, return_value="none"):
            result = runner.invoke(cli, ["--create-vpc"])

        assert result.exit_code == 2
        assert "aws configure" in result.output
        assert not any(m.called for m in operations.values())

    def test_missing_rosa_cli(self, runner, parameter_file, operations):
        with patch("services.cloud.aws.aws_manager.detect_command_presence", return_value=True), \
                patch("services.rosa.rosa_wrapper.detect_command_presence", return_value=False):
            result = runner.invoke(cli, ["--delete-hcp"])

        assert result.exit_code == 1
        assert "rosa cli not found" in result.output

    def test_operation_failure_exits_non_zero(self, runner, environment_ok, parameter_file, operations):
        operations["delete_hcp"].side_effect = RuntimeError("rosa delete cluster failed")

        result = runner.invoke(cli, ["--delete-hcp"])

        assert result.exit_code == 1
        assert "Failed: rosa delete cluster failed" in result.output

    def test_unusable_kubeconfig_reports_failure(self, runner, environment_ok, parameter_file, tmp_path, monkeypatch):
        monkeypatch.setenv("KUBECONFIG", str(tmp_path / "no-kubeconfig"))

        result = runner.invoke(cli, ["--install-operators"])

        assert result.exit_code == 1
        assert result.exception is None or isinstance(result.exception, SystemExit)
        assert "Failed:" in result.output
