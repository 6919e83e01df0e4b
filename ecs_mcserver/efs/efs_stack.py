# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Creates the EFS file system storing the MC server data.

The file system is only reachable through its mount targets, in the efs security group.
The access point is the identity every client gets: uid/gid 1000 on /.
The file system policy allows to mount and write via the mount targets, but not root access.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ecs_mcserver.common.settings import DeploymentSettings

from troposphere import Select, Tags
from troposphere.efs import (
    AccessPoint,
    CreationInfo,
    FileSystem,
    LifecyclePolicy,
    MountTarget,
    PosixUser,
    RootDirectory,
)

from ecs_mcserver.common.graph import ResourceGraph, ResourceHandle
from ecs_mcserver.common.logging import LOG
from ecs_mcserver.efs import metadata
from ecs_mcserver.efs.efs_params import (
    ACCESS_POINT_PATH,
    ACCESS_POINT_PERMISSIONS,
    ACCESS_POINT_T,
    CLIENT_ACTIONS,
    DELETION_POLICY,
    FS_NAME,
    FS_T,
    MOUNT_TARGET_T,
    PERFORMANCE_MODE,
    POSIX_GID,
    POSIX_UID,
    THROUGHPUT_MODE,
    TRANSITION_TO_IA,
)


def define_file_system_policy() -> dict:
    """
    Policy of the file system: clients can mount and write via mount targets. No root access.
    """
    return {
        "Version": "2012-10-17",
        "Statement": [
            {
                "Sid": "AllowMountAndWriteViaMountTargets",
                "Effect": "Allow",
                "Principal": {"AWS": "*"},
                "Action": CLIENT_ACTIONS,
                "Condition": {
                    "Bool": {"elasticfilesystem:AccessedViaMountTarget": "true"}
                },
            }
        ],
    }


def add_file_system(
    graph: ResourceGraph, settings: DeploymentSettings
) -> ResourceHandle:
    """
    Adds the encrypted file system. It is deleted along with the stack.
    """
    return graph.declare(
        FileSystem(
            FS_T,
            Encrypted=True,
            LifecyclePolicies=[LifecyclePolicy(TransitionToIA=TRANSITION_TO_IA)],
            PerformanceMode=PERFORMANCE_MODE,
            ThroughputMode=THROUGHPUT_MODE,
            FileSystemPolicy=define_file_system_policy(),
            FileSystemTags=Tags(Name=settings.resource_name(FS_NAME)),
            DeletionPolicy=DELETION_POLICY,
            UpdateReplacePolicy=DELETION_POLICY,
            Metadata=metadata,
        )
    )


def add_mount_targets(
    graph: ResourceGraph,
    file_system: ResourceHandle,
    security_group: ResourceHandle,
    subnets,
    subnets_count: int,
) -> list:
    """
    Adds one mount target per subnet, in the efs security group

    :param ResourceGraph graph:
    :param ResourceHandle file_system:
    :param ResourceHandle security_group: the efs security group
    :param subnets: list of subnets IDs or pointer to the list
    :param int subnets_count: number of subnets
    :rtype: list[ResourceHandle]
    """
    if subnets_count < 1:
        raise ValueError("At least one subnet is required for the mount targets")
    mount_targets = []
    for count in range(subnets_count):
        mount_targets.append(
            graph.declare(
                MountTarget(
                    f"{MOUNT_TARGET_T}{count}",
                    FileSystemId=file_system.ref(),
                    SecurityGroups=[security_group.get_att("GroupId")],
                    SubnetId=Select(count, subnets),
                )
            )
        )
    LOG.debug(f"{file_system.title} - {subnets_count} mount targets")
    return mount_targets


def add_access_point(
    graph: ResourceGraph, settings: DeploymentSettings, file_system: ResourceHandle
) -> ResourceHandle:
    """
    Adds the only access point of the file system, mapping all clients to uid/gid 1000 on /
    """
    return graph.declare(
        AccessPoint(
            ACCESS_POINT_T,
            FileSystemId=file_system.ref(),
            PosixUser=PosixUser(Uid=POSIX_UID, Gid=POSIX_GID),
            RootDirectory=RootDirectory(
                Path=ACCESS_POINT_PATH,
                CreationInfo=CreationInfo(
                    OwnerUid=POSIX_UID,
                    OwnerGid=POSIX_GID,
                    Permissions=ACCESS_POINT_PERMISSIONS,
                ),
            ),
            AccessPointTags=Tags(
                Name=settings.resource_name(f"{FS_NAME}-access-point")
            ),
            DeletionPolicy=DELETION_POLICY,
            UpdateReplacePolicy=DELETION_POLICY,
        )
    )


def add_shared_storage(
    graph: ResourceGraph,
    settings: DeploymentSettings,
    security_group: ResourceHandle,
    subnets,
    subnets_count: int,
) -> dict:
    """
    Creates the file system, its mount targets and access point.

    :return: the handles of the file system, access point and mount targets
    :rtype: dict
    """
    file_system = add_file_system(graph, settings)
    mount_targets = add_mount_targets(
        graph, file_system, security_group, subnets, subnets_count
    )
    access_point = add_access_point(graph, settings, file_system)
    return {
        FS_T: file_system,
        ACCESS_POINT_T: access_point,
        MOUNT_TARGET_T: mount_targets,
    }
