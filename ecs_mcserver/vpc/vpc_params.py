# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Parameters related to the VPC settings. Used by ecs_mcserver.vpc and others
"""

from ecs_mcserver.common.cfn_params import Parameter

VPC_TYPE = "AWS::EC2::VPC::Id"
SUBNETS_TYPE = "List<AWS::EC2::Subnet::Id>"

DEFAULT_VPC_NAME = "mc-ecs-fargate-server-vpc"
DEFAULT_VPC_CIDR = "10.0.0.0/16"
DEFAULT_AZ_COUNT = 2

VPC_SETTINGS = "VPC Settings"

VPC_T = "Vpc"
IGW_T = "InternetGatewayV4"
PUBLIC_RTB_T = "PublicRtb"

VPC_ID_T = "VpcId"
VPC_ID = Parameter(VPC_ID_T, group_label=VPC_SETTINGS, Type=VPC_TYPE)

PUBLIC_SUBNETS_T = "PublicSubnets"
PUBLIC_SUBNETS = Parameter(
    PUBLIC_SUBNETS_T, group_label=VPC_SETTINGS, Type=SUBNETS_TYPE
)
