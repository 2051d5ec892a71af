# User supplied, immutable for the lifetime of a cluster
CLUSTER_NAME = 'CLUSTER_NAME'
REGION = 'REGION'
VPC_CIDR = 'VPC_CIDR'
PUBLIC_CIDR_SUBNET = 'PUBLIC_CIDR_SUBNET'
PRIVATE_CIDR_SUBNET = 'PRIVATE_CIDR_SUBNET'
ACCOUNT_ROLES_PREFIX = 'ACCOUNT_ROLES_PREFIX'
OPERATOR_ROLES_PREFIX = 'OPERATOR_ROLES_PREFIX'

REQUIRED_PARAMETERS = (
    CLUSTER_NAME,
    REGION,
    VPC_CIDR,
    PUBLIC_CIDR_SUBNET,
    PRIVATE_CIDR_SUBNET,
    ACCOUNT_ROLES_PREFIX,
    OPERATOR_ROLES_PREFIX,
)

# Produced by --create-vpc
VPC_ID = 'VPC_ID'
PUBLIC_SUBNET_ID = 'PUBLIC_SUBNET_ID'
PRIVATE_SUBNET_ID = 'PRIVATE_SUBNET_ID'

# Produced by --create-permission
OIDC_ID = 'OIDC_ID'
AWS_ACCOUNT_ID = 'AWS_ACCOUNT_ID'

# Optional settings
AWS_PARTITION = 'AWS_PARTITION'
NAT_GATEWAY_TIMEOUT = 'NAT_GATEWAY_TIMEOUT'
ROLLBACK_ON_FAILURE = 'ROLLBACK_ON_FAILURE'
