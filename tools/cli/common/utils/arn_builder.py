"""
IAM role ARN builders for the ROSA HCP account roles.

Account roles are created by `rosa create account-roles --prefix <prefix>` and
follow the fixed naming scheme `<prefix>-HCP-ROSA-<Kind>-Role`.
"""
import re

from common.const.const import DEFAULT_AWS_PARTITION, INSTALLER_ROLE_SUFFIX, SUPPORT_ROLE_SUFFIX, \
    WORKER_ROLE_SUFFIX

_ACCOUNT_ID_PATTERN = re.compile(r"^\d{12}$")
_PARTITION_PATTERN = re.compile(r"^aws(-[a-z]+)*$")
# IAM role names allow [\w+=,.@-], the suffix is appended after a dash
_PREFIX_PATTERN = re.compile(r"^[\w+=,.@-]+$")
_MAX_ROLE_NAME_LENGTH = 64


def partition_from_arn(arn: str | None) -> str:
    """
    Extract the partition from an ARN such as a caller identity ARN.

    :param arn: ARN, e.g. arn:aws-us-gov:iam::123456789012:user/admin
    :return: partition name, or the default partition when the ARN cannot be parsed
    """
    if not arn:
        return DEFAULT_AWS_PARTITION
    parts = arn.split(":")
    if len(parts) < 6 or parts[0] != "arn" or not _PARTITION_PATTERN.match(parts[1]):
        return DEFAULT_AWS_PARTITION
    return parts[1]


def role_arn(account_id: str, prefix: str, suffix: str, partition: str = DEFAULT_AWS_PARTITION) -> str:
    if not account_id or not _ACCOUNT_ID_PATTERN.match(account_id):
        raise ValueError(f"Invalid AWS account id: {account_id!r}")
    if not partition or not _PARTITION_PATTERN.match(partition):
        raise ValueError(f"Invalid AWS partition: {partition!r}")
    if not prefix or not _PREFIX_PATTERN.match(prefix):
        raise ValueError(f"Invalid role prefix: {prefix!r}")

    role_name = f"{prefix}-{suffix}"
    if len(role_name) > _MAX_ROLE_NAME_LENGTH:
        raise ValueError(f"Role name {role_name} exceeds {_MAX_ROLE_NAME_LENGTH} characters")

    return f"arn:{partition}:iam::{account_id}:role/{role_name}"


def installer_role_arn(account_id: str, prefix: str, partition: str = DEFAULT_AWS_PARTITION) -> str:
    return role_arn(account_id, prefix, INSTALLER_ROLE_SUFFIX, partition)


def support_role_arn(account_id: str, prefix: str, partition: str = DEFAULT_AWS_PARTITION) -> str:
    return role_arn(account_id, prefix, SUPPORT_ROLE_SUFFIX, partition)


def worker_role_arn(account_id: str, prefix: str, partition: str = DEFAULT_AWS_PARTITION) -> str:
    return role_arn(account_id, prefix, WORKER_ROLE_SUFFIX, partition)
