# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Creates the security groups and their ingress rules.
Rules are separate SecurityGroupIngress resources, so that two groups can reference each other.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ecs_mcserver.common.settings import DeploymentSettings

from troposphere import Tags
from troposphere.ec2 import SecurityGroup, SecurityGroupIngress, SecurityGroupRule

from ecs_mcserver.common import title_from_name
from ecs_mcserver.common.graph import ResourceGraph, ResourceHandle
from ecs_mcserver.common.logging import LOG
from ecs_mcserver.security_groups import metadata
from ecs_mcserver.security_groups.sg_params import (
    ALL_PROTOCOLS,
    ALL_TCP_FROM,
    ALL_TCP_TO,
    ANY_IPV4,
    ECS_SG_NAME,
    ECS_SG_T,
    ECS_TO_EFS_DESCRIPTION,
    EFS_SG_NAME,
    EFS_SG_T,
    MAINTENANCE_SG_NAME,
    MAINTENANCE_SG_T,
    MAINTENANCE_TO_EFS_DESCRIPTION,
    public_ingress_rules,
)


def add_security_group(
    graph: ResourceGraph, title: str, group_name: str, description: str, vpc_id
) -> ResourceHandle:
    """
    Adds a security group allowing all outbound traffic

    :param ResourceGraph graph:
    :param str title: logical ID of the security group
    :param str group_name: name of the security group
    :param str description:
    :param vpc_id: the VPC ID, or pointer to it
    """
    return graph.declare(
        SecurityGroup(
            title,
            GroupName=group_name,
            GroupDescription=description,
            VpcId=vpc_id,
            SecurityGroupEgress=[
                SecurityGroupRule(
                    IpProtocol=ALL_PROTOCOLS,
                    CidrIp=ANY_IPV4,
                    Description="Allow all outbound traffic by default",
                )
            ],
            Tags=Tags(Name=group_name),
            Metadata=metadata,
        )
    )


def allow_all_tcp_from(
    graph: ResourceGraph,
    target: ResourceHandle,
    source: ResourceHandle,
    description: str,
) -> ResourceHandle:
    """
    Allows all TCP ports into target from the source security group
    """
    return graph.declare(
        SecurityGroupIngress(
            f"From{source.title}To{target.title}",
            GroupId=target.get_att("GroupId"),
            SourceSecurityGroupId=source.get_att("GroupId"),
            IpProtocol="tcp",
            FromPort=ALL_TCP_FROM,
            ToPort=ALL_TCP_TO,
            Description=description,
        )
    )


def add_public_ingress(
    graph: ResourceGraph, target: ResourceHandle, rules: list = None
) -> list:
    """
    Adds one ingress rule per MC server port and protocol, from anywhere.

    :return: the ingress rules handles
    :rtype: list[ResourceHandle]
    """
    if rules is None:
        rules = public_ingress_rules()
    handles = []
    for rule in rules:
        title = title_from_name(
            f"{target.title}-{rule['Name']}-{rule['IpProtocol']}-ingress"
        )
        LOG.debug(
            f"{target.title} - {rule['IpProtocol']}/{rule['Port']} from {rule['CidrIp']}"
        )
        handles.append(
            graph.declare(
                SecurityGroupIngress(
                    title,
                    GroupId=target.get_att("GroupId"),
                    CidrIp=rule["CidrIp"],
                    IpProtocol=rule["IpProtocol"],
                    FromPort=rule["Port"],
                    ToPort=rule["Port"],
                    Description=rule["Description"],
                )
            )
        )
    return handles


def add_network_boundaries(
    graph: ResourceGraph, settings: DeploymentSettings, vpc_id
) -> dict:
    """
    Creates the ecs, efs and maintenance security groups, and their ingress rules.

    :param ResourceGraph graph:
    :param DeploymentSettings settings:
    :param vpc_id: the VPC ID, or pointer to it
    :return: the security groups handles, by title
    :rtype: dict
    """
    efs_sg = add_security_group(
        graph,
        EFS_SG_T,
        settings.resource_name(EFS_SG_NAME),
        f"{settings.deployment_type} MC server file system",
        vpc_id,
    )
    maintenance_sg = add_security_group(
        graph,
        MAINTENANCE_SG_T,
        settings.resource_name(MAINTENANCE_SG_NAME),
        f"{settings.deployment_type} MC server file system maintenance",
        vpc_id,
    )
    ecs_sg = add_security_group(
        graph,
        ECS_SG_T,
        settings.resource_name(ECS_SG_NAME),
        f"{settings.deployment_type} MC server tasks",
        vpc_id,
    )
    allow_all_tcp_from(graph, efs_sg, maintenance_sg, MAINTENANCE_TO_EFS_DESCRIPTION)
    allow_all_tcp_from(graph, efs_sg, ecs_sg, ECS_TO_EFS_DESCRIPTION)
    add_public_ingress(graph, ecs_sg)
    return {
        EFS_SG_T: efs_sg,
        MAINTENANCE_SG_T: maintenance_sg,
        ECS_SG_T: ecs_sg,
    }
