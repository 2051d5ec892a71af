import textwrap

import click
from botocore.exceptions import BotoCoreError, ClientError
from kubernetes.client.rest import ApiException
from kubernetes.config.config_exception import ConfigException
from urllib3.exceptions import HTTPError

from common.const import parameter_names as p
from common.logging_config import configure_logging, logger
from common.parameter_store import ParameterError, ParameterStore
from services.cloud.aws.aws_manager import AWSManager, NetworkProvisioningError
from services.pipeline import ProvisioningPipeline
from services.preflight import PreconditionError, PreconditionGate
from services.rosa.rosa_wrapper import RosaWrapper

HELP = textwrap.dedent('''
Usage: rosa-hcp [OPTION]

Automation to create a ROSA Hosted Control Plane cluster:

  --create-vpc          Create new VPC, subnets, NAT gateway
  --create-permission   Create new IAM roles and OIDC config
  --install-hcp         Install HCP cluster (Single AZ)
  --delete-hcp          Delete HCP cluster
  --create-admin        Create cluster admin user
  --install-operators   Install OpenShift GitOps operator
  --help                Show this message

Parameters are read from variable.txt, or from the file named by
ROSA_HCP_PARAMETER_FILE.
''')

# pipeline operations, in help order
OPERATIONS = (
    "create_vpc",
    "create_permission",
    "install_hcp",
    "delete_hcp",
    "create_admin",
    "install_operators",
)

# operations that talk to the running cluster and need the oc cli
CLUSTER_OPERATIONS = ("install_operators",)

PIPELINE_ERRORS = (
    NetworkProvisioningError,
    BotoCoreError,
    ClientError,
    ApiException,
    ConfigException,
    HTTPError,
    RuntimeError,
    ValueError,
    OSError,
)


def run_operation(operation: str) -> int:
    """
    Run the gate and a single pipeline operation.

    :return: process exit code
    """
    store = ParameterStore()
    if store.exists():
        store.load()

    aws_manager = AWSManager(region=store.get_input_param(p.REGION))
    rosa = RosaWrapper()

    try:
        PreconditionGate(aws_manager, rosa, store).run(require_cluster_cli=operation in CLUSTER_OPERATIONS)
    except PreconditionError as e:
        click.echo(e.hint)
        return e.exit_code

    try:
        store.validate()
        pipeline = ProvisioningPipeline(store, aws_manager, rosa)
        getattr(pipeline, operation)()
    except ParameterError as e:
        logger.error(str(e))
        click.echo(click.style(f"Failed: {e}", fg="red"))
        return 1
    except PIPELINE_ERRORS as e:
        logger.exception(f"Operation {operation} failed")
        click.echo(click.style(f"Failed: {e}", fg="red"))
        return 1

    return 0


@click.command(
    context_settings=dict(ignore_unknown_options=True, allow_extra_args=True, help_option_names=[]),
    add_help_option=False,
)
@click.option("--create-vpc", "create_vpc", is_flag=True, default=False)
@click.option("--create-permission", "create_permission", is_flag=True, default=False)
@click.option("--install-hcp", "install_hcp", is_flag=True, default=False)
@click.option("--delete-hcp", "delete_hcp", is_flag=True, default=False)
@click.option("--create-admin", "create_admin", is_flag=True, default=False)
@click.option("--install-operators", "install_operators", is_flag=True, default=False)
@click.option("--help", "show_help", is_flag=True, default=False)
@click.pass_context
def cli(ctx: click.Context, show_help: bool, **flags):
    """Provision a ROSA hosted control plane cluster, one step per invocation."""
    configure_logging()

    if ctx.args:
        click.echo(f"Unknown argument: {ctx.args[0]}")
        click.echo(HELP)
        ctx.exit(1)

    selected = [name for name in OPERATIONS if flags.get(name)]
    if show_help:
        selected.append("help")

    if not selected:
        click.echo(HELP)
        ctx.exit(1)

    if len(selected) > 1:
        click.echo("Only 1 option can be selected")
        ctx.exit(1)

    if show_help:
        click.echo(HELP)
        ctx.exit(0)

    logger.info(f"Running {selected[0]}")
    ctx.exit(run_operation(selected[0]))


def main():
    cli()


if __name__ == "__main__":
    main()
