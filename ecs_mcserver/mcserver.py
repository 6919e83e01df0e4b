# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Main module generating the MC server stacks:

* the shared infrastructure stack, with the VPC used by all deployment types
* the service stack of one deployment type

"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ecs_mcserver.common.settings import DeploymentSettings

from troposphere import Output, Ref

from ecs_mcserver.common.aws import assert_session_account, deploy, plan
from ecs_mcserver.common.graph import ResourceGraph
from ecs_mcserver.common.logging import LOG
from ecs_mcserver.common.stacks import McServerStack
from ecs_mcserver.common.tagging import define_stack_tags
from ecs_mcserver.common.troposphere_tools import add_outputs, build_template
from ecs_mcserver.ecs.ecs_logging import create_log_group
from ecs_mcserver.ecs.ecs_service import add_service
from ecs_mcserver.ecs.ecs_task import add_task_definition
from ecs_mcserver.ecs_cluster import add_cluster
from ecs_mcserver.efs.efs_params import ACCESS_POINT_T, FS_T, MOUNT_TARGET_T
from ecs_mcserver.efs.efs_stack import add_shared_storage
from ecs_mcserver.iam.iam_roles import add_execution_role, add_task_role
from ecs_mcserver.security_groups.sg_params import (
    ECS_SG_T,
    EFS_SG_T,
    MAINTENANCE_SG_T,
)
from ecs_mcserver.security_groups.sg_template import add_network_boundaries
from ecs_mcserver.vpc.vpc_aws import lookup_vpc_by_name
from ecs_mcserver.vpc.vpc_params import PUBLIC_SUBNETS, PUBLIC_SUBNETS_T, VPC_ID
from ecs_mcserver.vpc.vpc_template import generate_vpc_graph


def generate_service_graph(
    settings: DeploymentSettings, subnets_count: int
) -> ResourceGraph:
    """
    Builds all the resources of the MC server for the deployment type, leaves first.
    The VPC ID and subnets are template parameters.

    :param DeploymentSettings settings:
    :param int subnets_count: number of subnets in PublicSubnets, one mount target per subnet
    :rtype: ResourceGraph
    """
    graph = ResourceGraph(
        build_template(
            f"{settings.application_name} MC server on ECS Fargate - {settings.deployment_type}",
            [VPC_ID, PUBLIC_SUBNETS],
        )
    )
    log_group = create_log_group(graph, settings)
    execution_role = add_execution_role(graph, settings)
    task_role = add_task_role(graph, settings)
    security_groups = add_network_boundaries(graph, settings, Ref(VPC_ID))
    storage = add_shared_storage(
        graph,
        settings,
        security_groups[EFS_SG_T],
        Ref(PUBLIC_SUBNETS),
        subnets_count,
    )
    task_definition = add_task_definition(
        graph,
        settings,
        execution_role,
        task_role,
        log_group,
        storage[FS_T],
        storage[ACCESS_POINT_T],
    )
    cluster = add_cluster(graph, settings)
    service = add_service(
        graph,
        settings,
        cluster,
        task_definition,
        security_groups[ECS_SG_T],
        Ref(PUBLIC_SUBNETS),
        depends_on=storage[MOUNT_TARGET_T],
    )
    add_outputs(
        graph.template,
        [
            Output("ClusterName", Value=cluster.ref()),
            Output("ServiceName", Value=service.get_att("Name")),
            Output("FileSystemId", Value=storage[FS_T].ref()),
            Output("AccessPointId", Value=storage[ACCESS_POINT_T].ref()),
            Output("LogGroupName", Value=log_group.ref()),
            Output(
                "EcsSecurityGroupId",
                Value=security_groups[ECS_SG_T].get_att("GroupId"),
            ),
            Output(
                "MaintenanceSecurityGroupId",
                Value=security_groups[MAINTENANCE_SG_T].get_att("GroupId"),
            ),
        ],
    )
    return graph


def generate_service_stack(settings: DeploymentSettings) -> McServerStack:
    """
    Generates the service stack. When lookup is enabled, finds the VPC by name and sets
    the VPC parameters values. Otherwise they are left for the user to set.

    :param DeploymentSettings settings:
    :raises VpcLookupError: when the VPC cannot be found
    :rtype: McServerStack
    """
    if settings.lookup_vpc:
        vpc_settings = lookup_vpc_by_name(settings.session, settings.vpc_name)
        subnets_count = len(vpc_settings[PUBLIC_SUBNETS_T])
    else:
        LOG.warning(
            f"VPC lookup disabled. {VPC_ID.title} and {PUBLIC_SUBNETS.title} parameters"
            f" must be set to {settings.az_count} subnets when creating the stack."
        )
        vpc_settings = {}
        subnets_count = settings.az_count
    return McServerStack(
        settings.service_stack_name,
        generate_service_graph(settings, subnets_count),
        stack_parameters=vpc_settings,
        stack_tags=define_stack_tags(settings),
    )


def generate_shared_stack(settings: DeploymentSettings) -> McServerStack:
    """
    Generates the shared infrastructure stack, with the VPC named after settings.

    :param DeploymentSettings settings:
    :rtype: McServerStack
    """
    return McServerStack(
        settings.shared_stack_name,
        generate_vpc_graph(settings),
        stack_tags=define_stack_tags(settings, shared=True),
    )


def process_stack(
    settings: DeploymentSettings, stack: McServerStack, wait: bool = False
) -> None:
    """
    Renders the stack files, and deploys or plans the stack depending on the command.

    :param DeploymentSettings settings:
    :param McServerStack stack:
    :param bool wait: wait for the stack to complete once deployed or the change set executed
    """
    stack.render(settings)
    if not (settings.deploy or settings.plan):
        return
    stack.template_file.validate(settings)
    if settings.deploy:
        deploy(settings, stack, wait=wait)
    elif settings.plan:
        plan(settings, stack, wait=wait)


def generate_stacks(settings: DeploymentSettings) -> list:
    """
    Generates and processes the stacks selected in settings. The shared stack goes first,
    so that the VPC exists when the service stack looks it up.

    :param DeploymentSettings settings:
    :return: the stacks processed
    :rtype: list[McServerStack]
    """
    if settings.deploy or settings.plan or (
        settings.render_service and settings.lookup_vpc
    ):
        assert_session_account(settings)
    stacks = []
    if settings.render_shared:
        shared_stack = generate_shared_stack(settings)
        process_stack(settings, shared_stack, wait=settings.render_service)
        stacks.append(shared_stack)
    if settings.render_service:
        service_stack = generate_service_stack(settings)
        LOG.debug(
            f"{service_stack.name} - resources order: {service_stack.graph.topological_order()}"
        )
        process_stack(settings, service_stack)
        stacks.append(service_stack)
    return stacks
