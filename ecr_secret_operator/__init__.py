# ecr_secret_operator/__init__.py

"""
Kubernetes operator that keeps docker-registry pull secrets for Amazon ECR
fresh, regenerating them before their authorization tokens expire.
"""

__version__ = "0.1.0"
