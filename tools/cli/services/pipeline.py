"""
Provisioning operations for a ROSA hosted control plane cluster.

Each operation reads what it needs from the parameter store, performs its
external calls in a fixed order and saves the values later operations depend
on. Operations never chain; a full build is

    --create-vpc -> --create-permission -> --install-hcp

run as separate invocations against the same parameter file.
"""
from typing import Callable, Dict, Optional

import click

from common.const import parameter_names as p
from common.const.const import NAT_GATEWAY_DEFAULT_TIMEOUT
from common.logging_config import logger
from common.parameter_store import ParameterError, ParameterStore
from common.tracing_decorator import trace
from common.utils.arn_builder import installer_role_arn, support_role_arn, worker_role_arn
from services.cloud.aws.aws_manager import AWSManager, NetworkProvisioningError
from services.k8s.operator_installer import OperatorInstaller
from services.rosa.rosa_wrapper import RosaWrapper

_RULER = "##############################################"
_TRUTHY = ("1", "true", "yes", "y", "on")


class ProvisioningPipeline:
    """ROSA HCP provisioning operations."""

    def __init__(self, store: ParameterStore, aws_manager: AWSManager, rosa: RosaWrapper,
                 operator_installer: Optional[OperatorInstaller] = None, echo: Callable[..., None] = click.echo):
        self._store = store
        self._aws = aws_manager
        self._rosa = rosa
        self._operators = operator_installer
        self._echo = echo

    def _require(self, *names: str, produced_by: str = None):
        missing = self._store.missing(names)
        if missing:
            hint = f", run {produced_by} first" if produced_by else ""
            raise ParameterError(f"Missing parameters {', '.join(missing)}{hint}", missing)

    def _partition(self) -> str:
        return self._store.get_input_param(p.AWS_PARTITION) or self._aws.partition

    def _publish(self, title: str, values: Dict[str, str]):
        """Persist derived values and print them as an export block."""
        self._store.update(values)
        self._store.save()

        self._echo(title)
        self._echo(_RULER)
        for k, v in values.items():
            self._echo(f"export {k}={v}")
        self._echo(_RULER)

    @trace()
    def create_vpc(self):
        self._require(p.CLUSTER_NAME, p.VPC_CIDR, p.PUBLIC_CIDR_SUBNET, p.PRIVATE_CIDR_SUBNET)

        try:
            nat_timeout = int(self._store.get_input_param(p.NAT_GATEWAY_TIMEOUT, str(NAT_GATEWAY_DEFAULT_TIMEOUT)))
        except ValueError:
            raise ParameterError(f"{p.NAT_GATEWAY_TIMEOUT} must be a number of seconds",
                                 [p.NAT_GATEWAY_TIMEOUT]) from None
        rollback = self._store.get_input_param(p.ROLLBACK_ON_FAILURE, "false").lower() in _TRUTHY

        self._echo("Creating VPC...")
        try:
            network = self._aws.create_hcp_network(
                cluster_name=self._store[p.CLUSTER_NAME],
                vpc_cidr=self._store[p.VPC_CIDR],
                public_cidr=self._store[p.PUBLIC_CIDR_SUBNET],
                private_cidr=self._store[p.PRIVATE_CIDR_SUBNET],
                nat_timeout=nat_timeout,
                rollback_on_failure=rollback,
                progress=self._echo,
            )
        except NetworkProvisioningError as e:
            if e.resources and not e.rolled_back:
                self._echo("The following resources were created and need manual cleanup:")
                for resource in e.resources:
                    self._echo(f"  {resource}")
            raise

        self._publish("VPC Setup complete", {
            p.VPC_ID: network.vpc_id,
            p.PUBLIC_SUBNET_ID: network.public_subnet_id,
            p.PRIVATE_SUBNET_ID: network.private_subnet_id,
        })
        return network

    @trace()
    def create_permission(self):
        self._require(p.ACCOUNT_ROLES_PREFIX, p.OPERATOR_ROLES_PREFIX)
        account_prefix = self._store[p.ACCOUNT_ROLES_PREFIX]
        operator_prefix = self._store[p.OPERATOR_ROLES_PREFIX]

        account_id = self._aws.account
        installer_arn = installer_role_arn(account_id, account_prefix, self._partition())

        self._echo("Creating Account ROLES...", nl=False)
        self._rosa.create_account_roles(account_prefix)
        self._echo("done.")

        self._echo("Creating oidc...", nl=False)
        oidc_id = self._rosa.create_oidc_config()
        self._echo("done.")
        logger.info(f"Created OIDC config {oidc_id}")

        self._echo("Creating Operator ROLES...", nl=False)
        self._rosa.create_operator_roles(operator_prefix, oidc_id, installer_arn)
        self._echo("done.")

        self._publish("Permission Setup complete", {
            p.OIDC_ID: oidc_id,
            p.AWS_ACCOUNT_ID: account_id,
        })
        return oidc_id

    @trace()
    def install_hcp(self):
        self._require(p.CLUSTER_NAME, p.REGION, p.OPERATOR_ROLES_PREFIX, p.ACCOUNT_ROLES_PREFIX)
        self._require(p.PUBLIC_SUBNET_ID, p.PRIVATE_SUBNET_ID, produced_by="--create-vpc")
        self._require(p.OIDC_ID, p.AWS_ACCOUNT_ID, produced_by="--create-permission")

        account_id = self._store[p.AWS_ACCOUNT_ID]
        prefix = self._store[p.ACCOUNT_ROLES_PREFIX]
        partition = self._partition()

        self._echo("Installing ROSA HCP")
        output = self._rosa.create_cluster(
            cluster_name=self._store[p.CLUSTER_NAME],
            region=self._store[p.REGION],
            subnet_ids=[self._store[p.PUBLIC_SUBNET_ID], self._store[p.PRIVATE_SUBNET_ID]],
            oidc_config_id=self._store[p.OIDC_ID],
            operator_roles_prefix=self._store[p.OPERATOR_ROLES_PREFIX],
            installer_role_arn=installer_role_arn(account_id, prefix, partition),
            support_role_arn=support_role_arn(account_id, prefix, partition),
            worker_role_arn=worker_role_arn(account_id, prefix, partition),
        )
        self._echo(output)
        self._echo(f"Cluster {self._store[p.CLUSTER_NAME]} requested, "
                   f"follow progress with: rosa logs install --cluster {self._store[p.CLUSTER_NAME]} --watch")

    @trace()
    def delete_hcp(self):
        self._require(p.CLUSTER_NAME)
        cluster_name = self._store[p.CLUSTER_NAME]

        self._echo(f"Deleting ROSA HCP {cluster_name}")
        self._echo(self._rosa.delete_cluster(cluster_name))

    @trace()
    def create_admin(self):
        self._require(p.CLUSTER_NAME)
        cluster_name = self._store[p.CLUSTER_NAME]

        self._echo(f"Creating cluster admin for {cluster_name}")
        # credentials go to the terminal only
        self._echo(self._rosa.create_admin(cluster_name))
        self._echo("Record the admin credentials now, they are not stored.")

    @trace()
    def install_operators(self):
        installer = self._operators or OperatorInstaller()

        self._echo("Installing OpenShift GitOps operator...", nl=False)
        installer.install_gitops_operator()
        self._echo("done.")
