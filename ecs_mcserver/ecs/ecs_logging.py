#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
CloudWatch log group the MC server containers send their logs to.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ecs_mcserver.common.settings import DeploymentSettings

from troposphere import Ref
from troposphere.ecs import LogConfiguration
from troposphere.logs import LogGroup

from ecs_mcserver.common.graph import ResourceGraph, ResourceHandle
from ecs_mcserver.ecs.ecs_params import (
    LOG_GROUP_RETENTION,
    LOG_GROUP_T,
    LOG_STREAM_PREFIX,
)


def create_log_group(
    graph: ResourceGraph, settings: DeploymentSettings
) -> ResourceHandle:
    """
    Function to create the Log Group for the MC server. Deleted with the stack.
    """
    graph.add_parameter(LOG_GROUP_RETENTION)
    return graph.declare(
        LogGroup(
            LOG_GROUP_T,
            LogGroupName=settings.log_group_name,
            RetentionInDays=Ref(LOG_GROUP_RETENTION),
            DeletionPolicy="Delete",
            UpdateReplacePolicy="Delete",
        )
    )


def define_awslogs_configuration(
    log_group: ResourceHandle, stream_prefix: str = LOG_STREAM_PREFIX
) -> LogConfiguration:
    """
    awslogs driver configuration, sending the logs to the log group

    :param ResourceHandle log_group:
    :param str stream_prefix:
    """
    return LogConfiguration(
        LogDriver="awslogs",
        Options={
            "awslogs-group": log_group.ref(),
            "awslogs-region": Ref("AWS::Region"),
            "awslogs-stream-prefix": stream_prefix,
        },
    )
