# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Finds the VPC the MC server is deployed into, from its Name tag.
"""

from boto3.session import Session
from botocore.exceptions import ClientError
from compose_x_common.compose_x_common import keyisset

from ecs_mcserver.common.logging import LOG
from ecs_mcserver.exceptions import VpcLookupError
from ecs_mcserver.vpc.vpc_params import PUBLIC_SUBNETS_T, VPC_ID_T


def lookup_subnets(client, vpc_id: str) -> list:
    """
    Returns one subnet ID per AZ of the VPC, sorted by AZ. Public subnets (public IP on launch) are
    preferred. If the VPC has none, all the subnets are used.

    :param client: EC2 client
    :param str vpc_id:
    :raises VpcLookupError: when the VPC has no subnets
    :rtype: list[str]
    """
    subnets_r = client.describe_subnets(
        Filters=[{"Name": "vpc-id", "Values": [vpc_id]}]
    )
    if not keyisset("Subnets", subnets_r):
        raise VpcLookupError(f"No subnets found in VPC {vpc_id}")
    subnets = subnets_r["Subnets"]
    public_subnets = [
        subnet for subnet in subnets if keyisset("MapPublicIpOnLaunch", subnet)
    ]
    if not public_subnets:
        LOG.warning(
            f"VPC {vpc_id} - No subnet maps public IP on launch. Using all {len(subnets)} subnets"
        )
        public_subnets = subnets
    per_az: dict = {}
    for subnet in sorted(
        public_subnets,
        key=lambda subnet: (subnet.get("AvailabilityZone", ""), subnet["SubnetId"]),
    ):
        az = subnet.get("AvailabilityZone", subnet["SubnetId"])
        if az in per_az:
            LOG.info(
                f"VPC {vpc_id} - Skipping {subnet['SubnetId']}, {per_az[az]} already used for {az}"
            )
            continue
        per_az[az] = subnet["SubnetId"]
    return list(per_az.values())


def lookup_vpc_by_name(session: Session, vpc_name: str) -> dict:
    """
    Function to find the VPC from its Name tag, and its subnets

    :param boto3.session.Session session:
    :param str vpc_name: value of the Name tag of the VPC
    :raises VpcLookupError: if there is not exactly one VPC with that name, or it has no subnets
    :return: the VPC settings, VpcId and PublicSubnets
    :rtype: dict
    """
    client = session.client("ec2")
    try:
        vpcs_r = client.describe_vpcs(
            Filters=[{"Name": "tag:Name", "Values": [vpc_name]}]
        )
        if not keyisset("Vpcs", vpcs_r):
            raise VpcLookupError(f"No VPC found with Name tag {vpc_name}")
        vpcs = vpcs_r["Vpcs"]
        if len(vpcs) > 1:
            raise VpcLookupError(
                f"More than one VPC found with Name tag {vpc_name}",
                [vpc["VpcId"] for vpc in vpcs],
            )
        vpc_id = vpcs[0]["VpcId"]
        subnets = lookup_subnets(client, vpc_id)
    except ClientError as error:
        LOG.error(f"Failed to lookup VPC {vpc_name}")
        LOG.error(error)
        raise
    LOG.info(f"VPC {vpc_name} - Found {vpc_id} with subnets {subnets}")
    return {VPC_ID_T: vpc_id, PUBLIC_SUBNETS_T: subnets}
