AWS_CLI = "aws"
ROSA_CLI = "rosa"
OC_CLI = "oc"

DEFAULT_PARAMETER_FILE = "variable.txt"
PARAMETER_FILE_ENV_VAR = "ROSA_HCP_PARAMETER_FILE"

DEFAULT_AWS_PARTITION = "aws"
ANY_IPV4_CIDR = "0.0.0.0/0"
NAT_GATEWAY_POLL_INTERVAL = 10
NAT_GATEWAY_DEFAULT_TIMEOUT = 300

# Tag keys used by the AWS load balancer controller for subnet discovery
PUBLIC_ELB_TAG = "kubernetes.io/role/elb"
INTERNAL_ELB_TAG = "kubernetes.io/role/internal-elb"

INSTALLER_ROLE_SUFFIX = "HCP-ROSA-Installer-Role"
SUPPORT_ROLE_SUFFIX = "HCP-ROSA-Support-Role"
WORKER_ROLE_SUFFIX = "HCP-ROSA-Worker-Role"

ROSA_TOKEN_URL = "https://console.redhat.com/openshift/token/rosa"
ROSA_DOWNLOAD_URL = "https://mirror.openshift.com/pub/openshift-v4/clients/rosa/latest/rosa-linux.tar.gz"
OC_DOWNLOAD_URL = "https://mirror.openshift.com/pub/openshift-v4/clients/ocp/stable/openshift-client-linux.tar.gz"
AWS_CLI_DOWNLOAD_URL = "https://awscli.amazonaws.com/awscli-exe-linux-x86_64.zip"
