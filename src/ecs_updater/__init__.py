"""ECS Image Updater.

Roll a new container image onto an ECS service by registering a cloned task definition.
"""

__version__ = "0.1.0"
__author__ = "Platform Engineering Team"
__license__ = "Apache-2.0"
