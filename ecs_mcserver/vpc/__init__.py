# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Shared VPC the MC server runs into, and how to find it.
"""

from ecs_mcserver import __version__ as version

metadata = {
    "Type": "ecs-mcserver",
    "Properties": {
        "ecs_mcserver::module": "ecs_mcserver.vpc",
        "Version": version,
    },
}
