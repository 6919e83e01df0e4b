# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2022 John Mille <john@compose-x.io>

"""
ECS resources of the MC server stack.

* Log group for the containers
* Task definition and its container
* Service definition, running on FARGATE_SPOT

"""

from ecs_mcserver import __version__ as version

metadata = {
    "Type": "ecs-mcserver",
    "Properties": {
        "ecs_mcserver::module": "ecs_mcserver.ecs",
        "Version": version,
    },
}
