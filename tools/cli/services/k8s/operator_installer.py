import os
from pathlib import Path
from typing import Optional

import yaml
from kubernetes import client, config
from kubernetes.client.rest import ApiException

from common.const.const import OC_CLI
from common.const.namespaces import MARKETPLACE_NAMESPACE, OPERATORS_NAMESPACE
from common.logging_config import logger
from common.tracing_decorator import trace
from common.utils.os_utils import detect_command_presence

SUBSCRIPTION_GROUP = "operators.coreos.com"
SUBSCRIPTION_VERSION = "v1alpha1"
SUBSCRIPTION_PLURAL = "subscriptions"

GITOPS_SUBSCRIPTION_TEMPLATE = Path(__file__).parent / "gitops_subscription.yaml"


def load_subscription_manifest(template_path: Path = GITOPS_SUBSCRIPTION_TEMPLATE) -> dict:
    with open(template_path, "r") as file:
        data = file.read()

    data = data.replace("<OPERATORS_NAMESPACE>", OPERATORS_NAMESPACE)
    data = data.replace("<MARKETPLACE_NAMESPACE>", MARKETPLACE_NAMESPACE)
    return yaml.safe_load(data)


class OperatorInstaller:
    """Applies OLM subscriptions to the cluster of the current kubeconfig context."""

    def __init__(self, kubeconfig_path: Optional[str] = None, api: Optional[client.CustomObjectsApi] = None):
        # the client library reads KUBECONFIG only once, at import
        self._kubeconfig = kubeconfig_path or os.environ.get("KUBECONFIG")
        self._api = api

    @classmethod
    def detect_cli_presence(cls) -> bool:
        return detect_command_presence(OC_CLI)

    def _custom_objects_api(self) -> client.CustomObjectsApi:
        if self._api is None:
            config.load_kube_config(config_file=self._kubeconfig)
            self._api = client.CustomObjectsApi()
        return self._api

    @trace()
    def apply_subscription(self, manifest: dict) -> dict:
        """
        Create the subscription, or patch it when it already exists.

        :param manifest: Subscription manifest
        :return: Subscription object returned by the API server
        """
        api = self._custom_objects_api()
        namespace = manifest["metadata"]["namespace"]
        name = manifest["metadata"]["name"]

        try:
            result = api.create_namespaced_custom_object(
                group=SUBSCRIPTION_GROUP,
                version=SUBSCRIPTION_VERSION,
                namespace=namespace,
                plural=SUBSCRIPTION_PLURAL,
                body=manifest,
            )
            logger.info(f"Subscription {namespace}/{name} created")
        except ApiException as e:
            if e.status != 409:
                raise
            result = api.patch_namespaced_custom_object(
                group=SUBSCRIPTION_GROUP,
                version=SUBSCRIPTION_VERSION,
                namespace=namespace,
                plural=SUBSCRIPTION_PLURAL,
                name=name,
                body=manifest,
            )
            logger.info(f"Subscription {namespace}/{name} already exists, patched")
        return result

    @trace()
    def install_gitops_operator(self) -> dict:
        return self.apply_subscription(load_subscription_manifest())
