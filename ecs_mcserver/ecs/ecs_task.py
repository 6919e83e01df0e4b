#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Task definition and container definition of the MC server
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ecs_mcserver.common.settings import DeploymentSettings

from troposphere.ecs import (
    AuthorizationConfig,
    ContainerDefinition,
    EFSVolumeConfiguration,
    LinuxParameters,
    MountPoint,
    PortMapping,
    TaskDefinition,
    Volume,
)

from ecs_mcserver.common.graph import ResourceGraph, ResourceHandle
from ecs_mcserver.ecs import metadata
from ecs_mcserver.ecs.ecs_logging import define_awslogs_configuration
from ecs_mcserver.ecs.ecs_params import (
    CONTAINER_MOUNT_PATH,
    CONTAINER_NAME,
    NETWORK_MODE,
    TASK_FAMILY_NAME,
    TASK_T,
    TASK_VOLUME_NAME,
)
from ecs_mcserver.security_groups.sg_params import MC_SERVER_PORTS


def define_port_mappings(ports: list = None) -> list:
    """
    One port mapping per port and protocol. Host port is the container port (awsvpc).

    :param list ports: ports definitions. Defaults to MC_SERVER_PORTS
    :rtype: list[troposphere.ecs.PortMapping]
    """
    if ports is None:
        ports = MC_SERVER_PORTS
    return [
        PortMapping(
            Name=f"{port_def['Name']}-{protocol}-mapping",
            ContainerPort=port_def["Port"],
            HostPort=port_def["Port"],
            Protocol=protocol,
        )
        for port_def in ports
        for protocol in port_def["Protocols"]
    ]


def define_task_volume(
    settings: DeploymentSettings,
    file_system: ResourceHandle,
    access_point: ResourceHandle,
) -> Volume:
    """
    The EFS volume of the task, mounted through the access point with encryption in transit.
    """
    return Volume(
        Name=settings.resource_name(TASK_VOLUME_NAME),
        EFSVolumeConfiguration=EFSVolumeConfiguration(
            FilesystemId=file_system.ref(),
            TransitEncryption="ENABLED",
            AuthorizationConfig=AuthorizationConfig(
                AccessPointId=access_point.ref(), IAM="DISABLED"
            ),
        ),
    )


def define_container(
    settings: DeploymentSettings, log_group: ResourceHandle
) -> ContainerDefinition:
    """
    The MC server container, with the game ports and the data volume mounted on /mc
    """
    return ContainerDefinition(
        Name=settings.resource_name(CONTAINER_NAME),
        Image=settings.image,
        Essential=True,
        LogConfiguration=define_awslogs_configuration(log_group),
        PortMappings=define_port_mappings(),
        MountPoints=[
            MountPoint(
                ContainerPath=CONTAINER_MOUNT_PATH,
                SourceVolume=settings.resource_name(TASK_VOLUME_NAME),
                ReadOnly=False,
            )
        ],
        LinuxParameters=LinuxParameters(InitProcessEnabled=True),
    )


def add_task_definition(
    graph: ResourceGraph,
    settings: DeploymentSettings,
    execution_role: ResourceHandle,
    task_role: ResourceHandle,
    log_group: ResourceHandle,
    file_system: ResourceHandle,
    access_point: ResourceHandle,
) -> ResourceHandle:
    """
    Adds the Fargate task definition of the MC server
    """
    return graph.declare(
        TaskDefinition(
            TASK_T,
            Family=settings.resource_name(TASK_FAMILY_NAME),
            Cpu=str(settings.cpu),
            Memory=str(settings.memory),
            NetworkMode=NETWORK_MODE,
            RequiresCompatibilities=["FARGATE"],
            ExecutionRoleArn=execution_role.get_att("Arn"),
            TaskRoleArn=task_role.get_att("Arn"),
            ContainerDefinitions=[define_container(settings, log_group)],
            Volumes=[define_task_volume(settings, file_system, access_point)],
            Metadata=metadata,
        )
    )
