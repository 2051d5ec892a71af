import re
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from botocore.exceptions import BotoCoreError, ClientError

from common.const.const import AWS_CLI, INTERNAL_ELB_TAG, NAT_GATEWAY_DEFAULT_TIMEOUT, PUBLIC_ELB_TAG
from common.logging_config import logger
from common.tracing_decorator import trace
from common.utils.arn_builder import partition_from_arn
from common.utils.os_utils import detect_command_presence
from services.cloud.aws.aws_sdk import AwsSdk

CLI = AWS_CLI

_ACCOUNT_PATTERN = re.compile(r"[0-9A-Z]")


@dataclass
class CreatedResource:
    kind: str
    resource_id: str
    parent_id: Optional[str] = None

    def __str__(self):
        return f"{self.kind} {self.resource_id}"


@dataclass
class HcpNetwork:
    vpc_id: str
    public_subnet_id: str
    private_subnet_id: str
    internet_gateway_id: str
    public_route_table_id: str
    private_route_table_id: str
    nat_gateway_id: str
    nat_allocation_id: str
    resources: List[CreatedResource] = field(default_factory=list)


class NetworkProvisioningError(Exception):
    """Raised when a network step fails; carries the resources created before the failure."""

    def __init__(self, message: str, resources: List[CreatedResource], rolled_back: bool = False):
        super().__init__(message)
        self.resources = resources
        self.rolled_back = rolled_back


class AWSManager:
    """AWS wrapper."""

    def __init__(self, region: Optional[str] = None, profile: Optional[str] = None, key: Optional[str] = None,
                 secret: Optional[str] = None, aws_sdk: Optional[AwsSdk] = None):
        self._aws_sdk = aws_sdk or AwsSdk(region, profile, key, secret)

    @property
    def region(self) -> str:
        """AWS region"""
        return self._aws_sdk.region

    @property
    def account(self) -> str:
        """AWS account id"""
        return self._aws_sdk.account_id

    @property
    def partition(self) -> str:
        """AWS partition of the caller, e.g. aws or aws-us-gov"""
        return partition_from_arn(self._aws_sdk.current_user_arn())

    @classmethod
    def detect_cli_presence(cls) -> bool:
        """Check whether the aws cli is on PATH."""
        return detect_command_presence(CLI)

    @trace()
    def evaluate_credentials(self) -> bool:
        """
        Check if the configured credentials resolve to an account
        :return: True or False
        """
        try:
            account = self.account
        except (BotoCoreError, ClientError) as e:
            logger.warning(f"Unable to resolve caller identity: {e}")
            return False
        return bool(account) and _ACCOUNT_PATTERN.search(account) is not None

    @trace()
    def create_hcp_network(self, cluster_name: str, vpc_cidr: str, public_cidr: str, private_cidr: str,
                           nat_timeout: int = NAT_GATEWAY_DEFAULT_TIMEOUT, rollback_on_failure: bool = False,
                           progress: Callable[[str], None] = logger.info) -> HcpNetwork:
        """
        Create a single AZ VPC for a hosted control plane cluster.

        Public subnet routes through an internet gateway, private subnet through
        a NAT gateway placed in the public subnet. Every created resource is
        recorded in order so a failure can report, and optionally tear down,
        what was left behind.

        :param cluster_name: Cluster name, used for Name tags
        :param vpc_cidr: VPC CIDR block
        :param public_cidr: Public subnet CIDR block
        :param private_cidr: Private subnet CIDR block
        :param nat_timeout: Seconds to wait for the NAT gateway to become available
        :param rollback_on_failure: Delete created resources in reverse order on failure
        :param progress: Callback receiving a status line after each step
        :return: Identifiers of the created network
        """
        sdk = self._aws_sdk
        created: List[CreatedResource] = []

        def record(kind: str, resource_id: str, parent_id: str = None) -> str:
            created.append(CreatedResource(kind, resource_id, parent_id))
            logger.info(f"Created {kind} {resource_id}")
            return resource_id

        try:
            vpc_id = record("vpc", sdk.create_vpc(vpc_cidr))
            sdk.tag_resources([vpc_id], {"Name": cluster_name})
            sdk.enable_dns_hostnames(vpc_id)
            progress(f"Created VPC {vpc_id}")

            public_subnet_id = record("subnet", sdk.create_subnet(vpc_id, public_cidr))
            sdk.tag_resources([public_subnet_id], {"Name": f"{cluster_name}-public", PUBLIC_ELB_TAG: "1"})
            progress(f"Created public subnet {public_subnet_id}")

            private_subnet_id = record("subnet", sdk.create_subnet(vpc_id, private_cidr))
            sdk.tag_resources([private_subnet_id], {"Name": f"{cluster_name}-private", INTERNAL_ELB_TAG: "1"})
            progress(f"Created private subnet {private_subnet_id}")

            igw_id = record("internet-gateway", sdk.create_internet_gateway())
            sdk.tag_resources([igw_id], {"Name": cluster_name})
            sdk.attach_internet_gateway(igw_id, vpc_id)
            record("internet-gateway-attachment", igw_id, vpc_id)
            progress(f"Created internet gateway {igw_id} and attached it to VPC")

            public_rt_id = record("route-table", sdk.create_route_table(vpc_id))
            sdk.tag_resources([public_rt_id], {"Name": cluster_name})
            sdk.create_default_route(public_rt_id, gateway_id=igw_id)
            record("route-table-association", sdk.associate_route_table(public_rt_id, public_subnet_id))
            progress(f"Created public route table {public_rt_id}")

            allocation_id = record("elastic-ip", sdk.allocate_address())
            nat_gateway_id = record("nat-gateway", sdk.create_nat_gateway(public_subnet_id, allocation_id))
            sdk.tag_resources([allocation_id, nat_gateway_id], {"Name": cluster_name})
            progress(f"Created NAT gateway {nat_gateway_id}, waiting for it to become available")
            sdk.wait_nat_gateway_available(nat_gateway_id, timeout=nat_timeout)

            private_rt_id = record("route-table", sdk.create_route_table(vpc_id))
            sdk.tag_resources([private_rt_id], {"Name": f"{cluster_name}-private"})
            sdk.create_default_route(private_rt_id, nat_gateway_id=nat_gateway_id)
            record("route-table-association", sdk.associate_route_table(private_rt_id, private_subnet_id))
            progress(f"Created private route table {private_rt_id}")
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Network provisioning failed after creating {len(created)} resources: {e}")
            rolled_back = False
            if rollback_on_failure and created:
                rolled_back = self.destroy_resources(created, nat_timeout=nat_timeout, progress=progress)
            raise NetworkProvisioningError(str(e), created, rolled_back) from e

        return HcpNetwork(
            vpc_id=vpc_id,
            public_subnet_id=public_subnet_id,
            private_subnet_id=private_subnet_id,
            internet_gateway_id=igw_id,
            public_route_table_id=public_rt_id,
            private_route_table_id=private_rt_id,
            nat_gateway_id=nat_gateway_id,
            nat_allocation_id=allocation_id,
            resources=created,
        )

    @trace()
    def destroy_resources(self, resources: List[CreatedResource], nat_timeout: int = NAT_GATEWAY_DEFAULT_TIMEOUT,
                          progress: Callable[[str], None] = logger.info) -> bool:
        """
        Best effort teardown of recorded resources in reverse creation order.

        :param nat_timeout: Seconds to wait for a NAT gateway to be deleted
        :return: True if every resource was removed
        """
        sdk = self._aws_sdk
        teardown = {
            "route-table-association": lambda r: sdk.disassociate_route_table(r.resource_id),
            "route-table": lambda r: sdk.delete_route_table(r.resource_id),
            "nat-gateway": lambda r: sdk.delete_nat_gateway(r.resource_id, timeout=nat_timeout),
            "elastic-ip": lambda r: sdk.release_address(r.resource_id),
            "internet-gateway-attachment": lambda r: sdk.detach_internet_gateway(r.resource_id, r.parent_id),
            "internet-gateway": lambda r: sdk.delete_internet_gateway(r.resource_id),
            "subnet": lambda r: sdk.delete_subnet(r.resource_id),
            "vpc": lambda r: sdk.delete_vpc(r.resource_id),
        }

        clean = True
        for resource in reversed(resources):
            try:
                teardown[resource.kind](resource)
                progress(f"Deleted {resource}")
            except (BotoCoreError, ClientError) as e:
                clean = False
                logger.error(f"Failed to delete {resource}: {e}")
                progress(f"Failed to delete {resource}")
        return clean
