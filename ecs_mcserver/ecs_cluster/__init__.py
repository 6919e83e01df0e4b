#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
ECS Cluster of the MC server, with the Fargate capacity providers.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ecs_mcserver.common.settings import DeploymentSettings

from troposphere.ecs import Cluster, ClusterSetting

from ecs_mcserver import __version__ as version
from ecs_mcserver.common.graph import ResourceGraph, ResourceHandle
from ecs_mcserver.ecs_cluster.ecs_cluster_params import (
    CLUSTER_NAME,
    CLUSTER_T,
    FARGATE_PROVIDERS,
)

metadata = {
    "Type": "ecs-mcserver",
    "Properties": {
        "ecs_mcserver::module": "ecs_mcserver.ecs_cluster",
        "Version": version,
    },
}


def add_cluster(graph: ResourceGraph, settings: DeploymentSettings) -> ResourceHandle:
    """
    Adds the ECS Cluster, with Container Insights enabled

    :param ResourceGraph graph:
    :param DeploymentSettings settings:
    :return: the cluster handle
    """
    return graph.declare(
        Cluster(
            CLUSTER_T,
            ClusterName=settings.resource_name(CLUSTER_NAME),
            CapacityProviders=FARGATE_PROVIDERS,
            ClusterSettings=[ClusterSetting(Name="containerInsights", Value="enabled")],
            Metadata=metadata,
        )
    )
