# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2022 John Mille <john@compose-x.io>

"""
IAM Roles titles and names suffixes
"""

from ecs_mcserver.ecs.ecs_params import EXEC_COMMAND_ACTIONS, SERVER_NAME

ECS_TASKS_SERVICE = "ecs-tasks"

EXEC_ROLE_T = "McServerExecutionRole"
EXEC_ROLE_NAME = f"{SERVER_NAME}-ecs-task-role"
EXEC_ROLE_MANAGED_POLICY = "service-role/AmazonECSTaskExecutionRolePolicy"

TASK_ROLE_T = "McServerTaskRole"
TASK_ROLE_NAME = f"{SERVER_NAME}-ecs-task-runtime-role"

EXEC_COMMAND_POLICY_NAME = "EnableExecuteCommand"
EXEC_COMMAND_POLICY = {
    "Version": "2012-10-17",
    "Statement": [
        {
            "Effect": "Allow",
            "Action": EXEC_COMMAND_ACTIONS,
            "Resource": ["*"],
        }
    ],
}
