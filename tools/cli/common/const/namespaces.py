OPERATORS_NAMESPACE = "openshift-operators"
MARKETPLACE_NAMESPACE = "openshift-marketplace"
