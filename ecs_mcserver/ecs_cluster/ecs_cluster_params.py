#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

from ecs_mcserver.ecs.ecs_params import SERVER_NAME

CLUSTER_T = "McServerCluster"
CLUSTER_NAME = f"{SERVER_NAME}-cluster"
FARGATE_PROVIDER = "FARGATE"
FARGATE_SPOT_PROVIDER = "FARGATE_SPOT"
FARGATE_PROVIDERS = [FARGATE_PROVIDER, FARGATE_SPOT_PROVIDER]
