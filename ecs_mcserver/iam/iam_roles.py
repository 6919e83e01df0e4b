# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2022 John Mille <john@compose-x.io>

"""
IAM Roles of the MC server task.

The execution role is used by the ECS agent to pull the image and send the logs.
The task role is used by the container itself, and only allows for ECS Execute Command.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ecs_mcserver.common.settings import DeploymentSettings

from troposphere.iam import Policy, Role

from ecs_mcserver.common.graph import ResourceGraph, ResourceHandle
from ecs_mcserver.iam import managed_policy_arn, service_role_trust_policy
from ecs_mcserver.iam.iam_params import (
    ECS_TASKS_SERVICE,
    EXEC_COMMAND_POLICY,
    EXEC_COMMAND_POLICY_NAME,
    EXEC_ROLE_MANAGED_POLICY,
    EXEC_ROLE_NAME,
    EXEC_ROLE_T,
    TASK_ROLE_NAME,
    TASK_ROLE_T,
)


def add_execution_role(
    graph: ResourceGraph, settings: DeploymentSettings
) -> ResourceHandle:
    """
    Adds the task execution role, with the AmazonECSTaskExecutionRolePolicy managed policy only.
    """
    return graph.declare(
        Role(
            EXEC_ROLE_T,
            RoleName=settings.resource_name(EXEC_ROLE_NAME),
            AssumeRolePolicyDocument=service_role_trust_policy(ECS_TASKS_SERVICE),
            ManagedPolicyArns=[managed_policy_arn(EXEC_ROLE_MANAGED_POLICY)],
            Description=f"{settings.deployment_type} MC server ECS task execution role",
        )
    )


def add_task_role(
    graph: ResourceGraph, settings: DeploymentSettings
) -> ResourceHandle:
    """
    Adds the task role, allowing the SSM messages channels ECS Execute Command uses.
    """
    return graph.declare(
        Role(
            TASK_ROLE_T,
            RoleName=settings.resource_name(TASK_ROLE_NAME),
            AssumeRolePolicyDocument=service_role_trust_policy(ECS_TASKS_SERVICE),
            Policies=[
                Policy(
                    PolicyName=EXEC_COMMAND_POLICY_NAME,
                    PolicyDocument=EXEC_COMMAND_POLICY,
                )
            ],
            Description=f"{settings.deployment_type} MC server ECS task role",
        )
    )
