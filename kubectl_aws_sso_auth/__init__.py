"""kubectl exec-credential plugin for EKS clusters behind AWS SSO."""
