# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2022 John Mille <john@compose-x.io>

"""
EFS titles and settings
"""

from ecs_mcserver.ecs.ecs_params import SERVER_NAME

FS_T = "McServerFileSystem"
FS_NAME = f"{SERVER_NAME}-efs"
MOUNT_TARGET_T = "McServerMountTarget"
ACCESS_POINT_T = "McServerAccessPoint"

TRANSITION_TO_IA = "AFTER_14_DAYS"
PERFORMANCE_MODE = "generalPurpose"
THROUGHPUT_MODE = "bursting"
DELETION_POLICY = "Delete"

ACCESS_POINT_PATH = "/"
POSIX_UID = "1000"
POSIX_GID = "1000"
ACCESS_POINT_PERMISSIONS = "777"

CLIENT_ACTIONS = [
    "elasticfilesystem:ClientMount",
    "elasticfilesystem:ClientWrite",
]
