# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Network boundaries of the MC server

* ecs: the MC server tasks, open to the internet on the game ports
* efs: the file system mount targets, open to ecs and maintenance only
* efs-ec2-maintenance: for EC2 instances used to manage the data on the file system

"""

from ecs_mcserver import __version__ as version

metadata = {
    "Type": "ecs-mcserver",
    "Properties": {
        "ecs_mcserver::module": "ecs_mcserver.security_groups",
        "Version": version,
    },
}
