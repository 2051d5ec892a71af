from typing import Dict, List, Optional

import boto3

from common.const.const import ANY_IPV4_CIDR, NAT_GATEWAY_DEFAULT_TIMEOUT, NAT_GATEWAY_POLL_INTERVAL
from common.logging_config import logger
from common.tracing_decorator import trace


class AwsSdk:
    """Thin boto3 wrapper for the STS and EC2 calls used to build the cluster network."""

    def __init__(self, region: Optional[str] = None, profile: Optional[str] = None, key: Optional[str] = None,
                 secret: Optional[str] = None):
        self._session = boto3.Session(
            region_name=region,
            profile_name=profile,
            aws_access_key_id=key,
            aws_secret_access_key=secret,
        )
        self._ec2 = None
        self._sts = None
        self._caller_identity = None

    @property
    def region(self) -> Optional[str]:
        return self._session.region_name

    @property
    def ec2(self):
        if self._ec2 is None:
            self._ec2 = self._session.client("ec2")
        return self._ec2

    @property
    def sts(self):
        if self._sts is None:
            self._sts = self._session.client("sts")
        return self._sts

    def caller_identity(self) -> dict:
        if self._caller_identity is None:
            self._caller_identity = self.sts.get_caller_identity()
        return self._caller_identity

    @property
    def account_id(self) -> str:
        return self.caller_identity()["Account"]

    def current_user_arn(self) -> str:
        return self.caller_identity()["Arn"]

    # network

    @trace()
    def create_vpc(self, cidr: str) -> str:
        response = self.ec2.create_vpc(CidrBlock=cidr)
        return response["Vpc"]["VpcId"]

    @trace()
    def enable_dns_hostnames(self, vpc_id: str):
        self.ec2.modify_vpc_attribute(VpcId=vpc_id, EnableDnsHostnames={"Value": True})

    @trace()
    def create_subnet(self, vpc_id: str, cidr: str) -> str:
        response = self.ec2.create_subnet(VpcId=vpc_id, CidrBlock=cidr)
        return response["Subnet"]["SubnetId"]

    @trace()
    def create_internet_gateway(self) -> str:
        response = self.ec2.create_internet_gateway()
        return response["InternetGateway"]["InternetGatewayId"]

    @trace()
    def attach_internet_gateway(self, igw_id: str, vpc_id: str):
        self.ec2.attach_internet_gateway(InternetGatewayId=igw_id, VpcId=vpc_id)

    @trace()
    def create_route_table(self, vpc_id: str) -> str:
        response = self.ec2.create_route_table(VpcId=vpc_id)
        return response["RouteTable"]["RouteTableId"]

    @trace()
    def create_default_route(self, route_table_id: str, gateway_id: str = None, nat_gateway_id: str = None):
        target = {"GatewayId": gateway_id} if gateway_id else {"NatGatewayId": nat_gateway_id}
        self.ec2.create_route(RouteTableId=route_table_id, DestinationCidrBlock=ANY_IPV4_CIDR, **target)

    @trace()
    def associate_route_table(self, route_table_id: str, subnet_id: str) -> str:
        response = self.ec2.associate_route_table(RouteTableId=route_table_id, SubnetId=subnet_id)
        return response["AssociationId"]

    @trace()
    def allocate_address(self) -> str:
        response = self.ec2.allocate_address(Domain="vpc")
        return response["AllocationId"]

    @trace()
    def create_nat_gateway(self, subnet_id: str, allocation_id: str) -> str:
        response = self.ec2.create_nat_gateway(SubnetId=subnet_id, AllocationId=allocation_id)
        return response["NatGateway"]["NatGatewayId"]

    @trace()
    def wait_nat_gateway_available(self, nat_gateway_id: str, timeout: int = NAT_GATEWAY_DEFAULT_TIMEOUT,
                                   delay: int = NAT_GATEWAY_POLL_INTERVAL):
        """
        Poll the NAT gateway state until it is `available`.

        :raises botocore.exceptions.WaiterError: if the gateway fails or the timeout elapses
        """
        max_attempts = max(1, timeout // delay)
        logger.info(f"Waiting up to {timeout}s for NAT gateway {nat_gateway_id}")
        waiter = self.ec2.get_waiter("nat_gateway_available")
        waiter.wait(NatGatewayIds=[nat_gateway_id], WaiterConfig={"Delay": delay, "MaxAttempts": max_attempts})

    @trace()
    def tag_resources(self, resource_ids: List[str], tags: Dict[str, str]):
        self.ec2.create_tags(
            Resources=resource_ids,
            Tags=[{"Key": k, "Value": v} for k, v in tags.items()],
        )

    # teardown

    @trace()
    def disassociate_route_table(self, association_id: str):
        self.ec2.disassociate_route_table(AssociationId=association_id)

    @trace()
    def delete_route_table(self, route_table_id: str):
        self.ec2.delete_route_table(RouteTableId=route_table_id)

    @trace()
    def delete_nat_gateway(self, nat_gateway_id: str, timeout: int = NAT_GATEWAY_DEFAULT_TIMEOUT,
                           delay: int = NAT_GATEWAY_POLL_INTERVAL):
        self.ec2.delete_nat_gateway(NatGatewayId=nat_gateway_id)
        # the elastic IP stays associated until the gateway is fully deleted
        waiter = self.ec2.get_waiter("nat_gateway_deleted")
        waiter.wait(NatGatewayIds=[nat_gateway_id],
                    WaiterConfig={"Delay": delay, "MaxAttempts": max(1, timeout // delay)})

    @trace()
    def release_address(self, allocation_id: str):
        self.ec2.release_address(AllocationId=allocation_id)

    @trace()
    def detach_internet_gateway(self, igw_id: str, vpc_id: str):
        self.ec2.detach_internet_gateway(InternetGatewayId=igw_id, VpcId=vpc_id)

    @trace()
    def delete_internet_gateway(self, igw_id: str):
        self.ec2.delete_internet_gateway(InternetGatewayId=igw_id)

    @trace()
    def delete_subnet(self, subnet_id: str):
        self.ec2.delete_subnet(SubnetId=subnet_id)

    @trace()
    def delete_vpc(self, vpc_id: str):
        self.ec2.delete_vpc(VpcId=vpc_id)

