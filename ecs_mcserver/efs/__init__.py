# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Shared storage of the MC server data: EFS file system, mount targets and access point.
"""

from ecs_mcserver import __version__ as version

metadata = {
    "Type": "ecs-mcserver",
    "Properties": {
        "ecs_mcserver::module": "ecs_mcserver.efs",
        "Version": version,
    },
}
