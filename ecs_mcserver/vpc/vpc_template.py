# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Create the shared VPC template and its associated resources

* VPC, named from settings (mc-ecs-fargate-server-vpc by default)
* Internet Gateway
* One public route table, with default route to the internet gateway
* One public subnet per AZ

"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ecs_mcserver.common.settings import DeploymentSettings

from troposphere import GetAZs, Join, Output, Select, Tags
from troposphere.ec2 import VPC as VPCType
from troposphere.ec2 import (
    InternetGateway,
    Route,
    RouteTable,
    Subnet,
    SubnetRouteTableAssociation,
    VPCGatewayAttachment,
)

from ecs_mcserver.common.graph import ResourceGraph, ResourceHandle
from ecs_mcserver.common.troposphere_tools import add_outputs, build_template
from ecs_mcserver.vpc import metadata
from ecs_mcserver.vpc.vpc_maths import get_public_subnets
from ecs_mcserver.vpc.vpc_params import (
    IGW_T,
    PUBLIC_RTB_T,
    PUBLIC_SUBNETS_T,
    VPC_ID_T,
    VPC_T,
)


def add_vpc_core(graph: ResourceGraph, vpc_name: str, vpc_cidr: str) -> tuple:
    """
    Function to create the core resources of the VPC

    :param ResourceGraph graph:
    :param str vpc_name: Name tag of the VPC
    :param str vpc_cidr: the VPC CIDR i.e. 10.0.0.0/16
    :return: the vpc and igw handles
    :rtype: tuple[ResourceHandle, ResourceHandle]
    """
    vpc = graph.declare(
        VPCType(
            VPC_T,
            CidrBlock=vpc_cidr,
            EnableDnsHostnames=True,
            EnableDnsSupport=True,
            Tags=Tags(Name=vpc_name),
            Metadata=metadata,
        )
    )
    igw = graph.declare(
        InternetGateway(IGW_T, Tags=Tags(Name=f"{vpc_name}-igw"))
    )
    graph.declare(
        VPCGatewayAttachment(
            "VPCGatewayAttachement",
            InternetGatewayId=igw.ref(),
            VpcId=vpc.ref(),
            Metadata=metadata,
        )
    )
    return vpc, igw


def add_public_subnets(
    graph: ResourceGraph,
    vpc: ResourceHandle,
    igw: ResourceHandle,
    vpc_name: str,
    subnets_cidrs: list,
) -> list:
    """
    Function to add the public subnets of the VPC, all associated to the same route table.

    :return: the subnets handles
    :rtype: list[ResourceHandle]
    """
    rtb = graph.declare(
        RouteTable(
            PUBLIC_RTB_T,
            VpcId=vpc.ref(),
            Tags=Tags(Name=f"{vpc_name}-public"),
            Metadata=metadata,
        )
    )
    graph.declare(
        Route(
            "PublicDefaultRoute",
            GatewayId=igw.ref(),
            RouteTableId=rtb.ref(),
            DestinationCidrBlock="0.0.0.0/0",
        ),
        depends_on=[graph.handle("VPCGatewayAttachement")],
    )
    subnets = []
    for count, subnet_cidr in enumerate(subnets_cidrs):
        subnet = graph.declare(
            Subnet(
                f"PublicSubnet{count}",
                CidrBlock=subnet_cidr,
                VpcId=vpc.ref(),
                AvailabilityZone=Select(count, GetAZs("")),
                MapPublicIpOnLaunch=True,
                Tags=Tags(Name=f"{vpc_name}-public-{count}"),
                Metadata=metadata,
            )
        )
        graph.declare(
            SubnetRouteTableAssociation(
                f"PublicSubnetsRtbAssoc{count}",
                RouteTableId=rtb.ref(),
                SubnetId=subnet.ref(),
            )
        )
        subnets.append(subnet)
    return subnets


def generate_vpc_graph(settings: DeploymentSettings) -> ResourceGraph:
    """
    Builds the shared VPC template

    :param DeploymentSettings settings:
    :rtype: ResourceGraph
    """
    graph = ResourceGraph(
        build_template(
            f"Shared infrastructure for {settings.application_name} MC servers"
        )
    )
    vpc, igw = add_vpc_core(graph, settings.vpc_name, settings.vpc_cidr)
    subnets = add_public_subnets(
        graph,
        vpc,
        igw,
        settings.vpc_name,
        get_public_subnets(settings.vpc_cidr, settings.az_count),
    )
    add_outputs(
        graph.template,
        [
            Output(VPC_ID_T, Value=vpc.ref()),
            Output(
                PUBLIC_SUBNETS_T,
                Value=Join(",", [subnet.ref() for subnet in subnets]),
            ),
        ],
    )
    return graph
