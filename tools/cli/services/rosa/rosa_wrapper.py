"""
ROSA wrapper for CLI operations.
"""
import json
import re
import subprocess
from typing import List, Optional

from common.const.const import ROSA_CLI
from common.logging_config import logger
from common.tracing_decorator import trace
from common.utils.os_utils import detect_command_presence

_OCM_ACCOUNT_ID_LINE = "OCM Account ID"
_ACCOUNT_PATTERN = re.compile(r"[0-9a-zA-Z]")


class RosaCommandError(RuntimeError):
    """Raised when a rosa command exits with a non-zero status."""

    def __init__(self, args: List[str], returncode: int, stderr: str):
        super().__init__(f"rosa {' '.join(args)} failed with exit code {returncode}: {stderr.strip()}")
        self.args_list = args
        self.returncode = returncode
        self.stderr = stderr


class RosaWrapper:
    """Wrapper for ROSA CLI commands."""

    def __init__(self, binary: str = ROSA_CLI):
        self._binary = binary

    @classmethod
    def detect_cli_presence(cls) -> bool:
        return detect_command_presence(ROSA_CLI)

    def _run_rosa(self, args: List[str], check: bool = True) -> subprocess.CompletedProcess:
        """
        Run rosa command with given arguments.

        :param args: List of arguments for rosa command
        :param check: Whether to raise exception on non-zero exit code
        :return: CompletedProcess instance
        """
        cmd = [self._binary] + args

        logger.info(f"Running rosa command: {' '.join(cmd)}")
        result = subprocess.run(cmd, capture_output=True, text=True)

        if result.returncode != 0:
            logger.error(f"Rosa command failed: {result.stderr}")
            if check:
                raise RosaCommandError(args, result.returncode, result.stderr)

        return result

    @trace()
    def whoami_account_id(self) -> Optional[str]:
        """
        Return the OCM account id of the logged in session.

        :return: OCM account id, or None when not logged in
        """
        try:
            result = self._run_rosa(["whoami"], check=False)
        except OSError as e:
            logger.error(f"Unable to run rosa whoami: {e}")
            return None

        if result.returncode != 0:
            return None

        for line in result.stdout.splitlines():
            if _OCM_ACCOUNT_ID_LINE in line:
                fields = line.split()
                # "OCM Account ID:  <id>"
                if len(fields) >= 4:
                    return fields[3]
        return None

    @trace()
    def has_valid_session(self) -> bool:
        account_id = self.whoami_account_id()
        return bool(account_id) and _ACCOUNT_PATTERN.search(account_id) is not None

    @trace()
    def create_account_roles(self, prefix: str) -> str:
        """
        Create the hosted control plane account roles.

        :param prefix: Account role name prefix
        :return: rosa output
        """
        result = self._run_rosa([
            "create", "account-roles",
            "--hosted-cp",
            "--prefix", prefix,
            "--mode", "auto",
            "--yes",
        ])
        return result.stdout

    @trace()
    def create_oidc_config(self) -> str:
        """
        Create a managed OIDC configuration.

        :return: OIDC configuration id
        """
        result = self._run_rosa([
            "create", "oidc-config",
            "--mode", "auto",
            "--managed",
            "--yes",
            "-o", "json",
        ])
        try:
            oidc_id = json.loads(result.stdout)["id"]
        except (ValueError, KeyError, TypeError) as e:
            raise RuntimeError(f"Unexpected oidc-config output: {result.stdout!r}") from e

        if not oidc_id:
            raise RuntimeError("rosa returned an empty OIDC configuration id")
        return oidc_id

    @trace()
    def create_operator_roles(self, prefix: str, oidc_config_id: str, installer_role_arn: str) -> str:
        result = self._run_rosa([
            "create", "operator-roles",
            "--hosted-cp",
            "--mode", "auto",
            "--yes",
            "--prefix", prefix,
            "--oidc-config-id", oidc_config_id,
            "--installer-role-arn", installer_role_arn,
        ])
        return result.stdout

    @trace()
    def create_cluster(
        self,
        cluster_name: str,
        region: str,
        subnet_ids: List[str],
        oidc_config_id: str,
        operator_roles_prefix: str,
        installer_role_arn: str,
        support_role_arn: str,
        worker_role_arn: str,
    ) -> str:
        """
        Request an STS hosted control plane cluster. Returns once the request
        is accepted; the cluster keeps installing on the service side.

        :param cluster_name: Cluster name
        :param region: AWS region
        :param subnet_ids: Subnet ids, public first
        :param oidc_config_id: OIDC configuration id
        :param operator_roles_prefix: Operator role name prefix
        :param installer_role_arn: Installer role ARN
        :param support_role_arn: Support role ARN
        :param worker_role_arn: Worker instance role ARN
        :return: rosa output
        """
        result = self._run_rosa([
            "create", "cluster",
            "--sts",
            "--hosted-cp",
            "--mode", "auto",
            "--yes",
            "--cluster-name", cluster_name,
            "--region", region,
            "--subnet-ids", ",".join(subnet_ids),
            "--oidc-config-id", oidc_config_id,
            "--operator-roles-prefix", operator_roles_prefix,
            "--role-arn", installer_role_arn,
            "--support-role-arn", support_role_arn,
            "--worker-iam-role", worker_role_arn,
        ])
        return result.stdout

    @trace()
    def delete_cluster(self, cluster_name: str) -> str:
        result = self._run_rosa(["delete", "cluster", "--cluster", cluster_name, "--yes"])
        return result.stdout

    @trace()
    def create_admin(self, cluster_name: str) -> str:
        # output carries the admin password, keep it out of the log
        result = self._run_rosa(["create", "admin", "--cluster", cluster_name])
        return result.stdout
