# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Parameters and constants bound to ecs_mcserver.ecs
All the titles, marked `_T` are strings which are then used the same way across all imports.
"""

from ecs_mcserver.common.cfn_params import Parameter

WORKLOAD_NAME = "mc"
SERVER_NAME = f"{WORKLOAD_NAME}-server"

LOG_GROUP_T = "McServerLogGroup"
TASK_T = "McTaskDefinition"
SERVICE_T = "McServerService"
CONTAINER_NAME = f"{SERVER_NAME}-container"
TASK_FAMILY_NAME = f"{SERVER_NAME}-task"
TASK_VOLUME_NAME = f"{SERVER_NAME}-task-volume"
SERVICE_NAME = f"{SERVER_NAME}-ecs-service"

LOGGING_SETTINGS = "Logging settings"
LOG_GROUP_RETENTION_T = "ServiceLogGroupRetentionPeriod"
LOG_GROUP_RETENTION = Parameter(
    LOG_GROUP_RETENTION_T,
    group_label=LOGGING_SETTINGS,
    label="Retention period of the MC server logs, in days",
    Type="Number",
    Default=731,
    AllowedValues=[
        1,
        3,
        5,
        7,
        14,
        30,
        60,
        90,
        120,
        150,
        180,
        365,
        400,
        545,
        731,
        1827,
        3653,
    ],
)
LOG_STREAM_PREFIX = f"{SERVER_NAME}-logs"

DEFAULT_IMAGE = "marctv/minecraft-papermc-server:latest"
CONTAINER_MOUNT_PATH = "/mc"
NETWORK_MODE = "awsvpc"
PLATFORM_VERSION = "LATEST"

DESIRED_COUNT = 1
MINIMUM_HEALTHY_PERCENT = 0
MAXIMUM_PERCENT = 100

DEFAULT_CPU = 2048
DEFAULT_RAM = 4096

FARGATE_MODES = {
    256: [2**i for i in [9, 10, 11]],
    512: [(2**10) * i for i in range(1, 5)],
    1024: [(2**10) * i for i in range(2, 9)],
    2048: [(2**10) * i for i in range(4, 17)],
    4096: [(2**10) * i for i in range(8, 31)],
    8192: [(2**10) * i for i in range(16, 61, 4)],
    16384: [(2**10) * i for i in range(32, 121, 8)],
}

FARGATE_MODES_VALUES = []
for cpu in FARGATE_MODES.keys():
    for ram in FARGATE_MODES[cpu]:
        FARGATE_MODES_VALUES.append(f"{cpu}!{ram}")

EXEC_COMMAND_ACTIONS = [
    "ssmmessages:CreateControlChannel",
    "ssmmessages:CreateDataChannel",
    "ssmmessages:OpenControlChannel",
    "ssmmessages:OpenDataChannel",
]
