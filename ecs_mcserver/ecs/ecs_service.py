#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
ECS Service running the MC server. A single task at a time, on FARGATE_SPOT.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ecs_mcserver.common.settings import DeploymentSettings

from troposphere.ecs import (
    AwsvpcConfiguration,
    CapacityProviderStrategyItem,
    DeploymentConfiguration,
    NetworkConfiguration,
    Service,
)

from ecs_mcserver.common.graph import ResourceGraph, ResourceHandle
from ecs_mcserver.ecs import metadata
from ecs_mcserver.ecs.ecs_params import (
    DESIRED_COUNT,
    MAXIMUM_PERCENT,
    MINIMUM_HEALTHY_PERCENT,
    PLATFORM_VERSION,
    SERVICE_NAME,
    SERVICE_T,
)
from ecs_mcserver.ecs_cluster.ecs_cluster_params import FARGATE_SPOT_PROVIDER


def define_capacity_provider_strategy() -> list:
    return [
        CapacityProviderStrategyItem(CapacityProvider=FARGATE_SPOT_PROVIDER, Weight=1)
    ]


def add_service(
    graph: ResourceGraph,
    settings: DeploymentSettings,
    cluster: ResourceHandle,
    task_definition: ResourceHandle,
    security_group: ResourceHandle,
    subnets,
    depends_on: list = None,
) -> ResourceHandle:
    """
    Adds the ECS service

    :param ResourceGraph graph:
    :param DeploymentSettings settings:
    :param ResourceHandle cluster:
    :param ResourceHandle task_definition:
    :param ResourceHandle security_group: the ecs security group
    :param subnets: the subnets IDs, or pointer to them
    :param list[ResourceHandle] depends_on: resources the tasks need before starting, i.e. mount targets
    """
    return graph.declare(
        Service(
            SERVICE_T,
            ServiceName=settings.resource_name(SERVICE_NAME),
            Cluster=cluster.ref(),
            TaskDefinition=task_definition.ref(),
            DesiredCount=DESIRED_COUNT,
            DeploymentConfiguration=DeploymentConfiguration(
                MinimumHealthyPercent=MINIMUM_HEALTHY_PERCENT,
                MaximumPercent=MAXIMUM_PERCENT,
            ),
            CapacityProviderStrategy=define_capacity_provider_strategy(),
            PlatformVersion=PLATFORM_VERSION,
            EnableExecuteCommand=True,
            NetworkConfiguration=NetworkConfiguration(
                AwsvpcConfiguration=AwsvpcConfiguration(
                    AssignPublicIp="ENABLED",
                    SecurityGroups=[security_group.get_att("GroupId")],
                    Subnets=subnets,
                )
            ),
            PropagateTags="SERVICE",
            Metadata=metadata,
        ),
        depends_on=depends_on,
    )
