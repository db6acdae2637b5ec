"""
Embedded server package.

- app.py: mounts the application under test below its deployment path
- lifecycle.py: starts and stops the single uvicorn server of a test run
"""

from .app import DeploymentApp, build_deployment
from .lifecycle import BaseUri, ServerInstance, ServerLifecycleManager

__all__ = [
    "BaseUri",
    "DeploymentApp",
    "ServerInstance",
    "ServerLifecycleManager",
    "build_deployment",
]
