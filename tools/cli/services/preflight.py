import textwrap
from dataclasses import dataclass
from typing import Callable, List

import click

from common.const.const import AWS_CLI_DOWNLOAD_URL, OC_DOWNLOAD_URL, ROSA_DOWNLOAD_URL, ROSA_TOKEN_URL
from common.logging_config import logger
from common.parameter_store import ParameterStore
from services.cloud.aws.aws_manager import AWSManager
from services.k8s.operator_installer import OperatorInstaller
from services.rosa.rosa_wrapper import RosaWrapper

ENVIRONMENT_ERROR = 1
AUTHENTICATION_ERROR = 2

AWS_CLI_HINT = textwrap.dedent(f'''\
  aws cli not found !
  Make sure these steps are followed:
    $ curl "{AWS_CLI_DOWNLOAD_URL}" -o "awscliv2.zip"
    $ unzip awscliv2.zip
    $ sudo ./aws/install''')

ROSA_CLI_HINT = textwrap.dedent(f'''\
  rosa cli not found !
  Make sure these steps are followed:
    $ wget {ROSA_DOWNLOAD_URL}
    $ tar zxvf rosa-linux.tar.gz
    $ sudo mv rosa /usr/local/bin''')

OC_CLI_HINT = textwrap.dedent(f'''\
  oc cli not found !
  Make sure these steps are followed:
    $ wget {OC_DOWNLOAD_URL}
    $ tar zxvf openshift-client-linux.tar.gz
    $ sudo mv oc /usr/local/bin''')

AWS_CREDENTIALS_HINT = textwrap.dedent('''\
  Ensure AWS access keys are configured
    $ aws configure
    AWS Access Key ID [None]: accesskey
    AWS Secret Access Key [None]: secretkey
    Default region name [None]: ap-southeast-1
    Default output format [None]:''')

ROSA_TOKEN_HINT = textwrap.dedent(f'''\
  Retrieve token from {ROSA_TOKEN_URL}
    $ rosa login --token="xxxxx"''')


class PreconditionError(Exception):
    """Raised by the gate; carries the remediation hint and the process exit code."""

    def __init__(self, message: str, hint: str = "", exit_code: int = ENVIRONMENT_ERROR):
        super().__init__(message)
        self.hint = hint
        self.exit_code = exit_code


@dataclass
class Check:
    title: str
    probe: Callable[[], bool]
    message: str
    hint: str
    exit_code: int


class PreconditionGate:
    """
    Verifies tools, credentials and the parameter file before any mutating call.

    Checks run in order and the first failing one aborts the run.
    """

    def __init__(self, aws_manager: AWSManager, rosa: RosaWrapper, store: ParameterStore,
                 echo: Callable[..., None] = click.echo):
        self._aws = aws_manager
        self._rosa = rosa
        self._store = store
        self._echo = echo

    def checks(self, require_cluster_cli: bool = False) -> List[Check]:
        checks = [
            Check("Checking for AWS CLI... ", AWSManager.detect_cli_presence,
                  "aws cli not found", AWS_CLI_HINT, ENVIRONMENT_ERROR),
            Check("Checking for ROSA CLI... ", RosaWrapper.detect_cli_presence,
                  "rosa cli not found", ROSA_CLI_HINT, ENVIRONMENT_ERROR),
        ]
        if require_cluster_cli:
            checks.append(Check("Checking for OC CLI... ", OperatorInstaller.detect_cli_presence,
                                "oc cli not found", OC_CLI_HINT, ENVIRONMENT_ERROR))
        checks.extend([
            Check("Checking if you have AWS permission... ", self._aws.evaluate_credentials,
                  "AWS credentials are missing or invalid", AWS_CREDENTIALS_HINT, AUTHENTICATION_ERROR),
            Check("Checking if you have ROSA permission... ", self._rosa.has_valid_session,
                  "ROSA session is missing or expired", ROSA_TOKEN_HINT, AUTHENTICATION_ERROR),
            Check("Checking if you have variable file... ", self._store.exists,
                  "Variables file not found!", f"  Expected parameter file at {self._store.path}",
                  ENVIRONMENT_ERROR),
        ])
        return checks

    def run(self, require_cluster_cli: bool = False):
        for check in self.checks(require_cluster_cli):
            self._echo(check.title, nl=False)
            if check.probe():
                self._echo(click.style("Pass", fg="green"))
                continue

            self._echo(click.style("Failed", fg="red"))
            logger.error(f"Precondition failed: {check.message}")
            raise PreconditionError(check.message, check.hint, check.exit_code)
