# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Public subnets calculator for the shared VPC
"""

import ipaddress
from math import ceil, log

MAX_SUBNET_PREFIX = 28


def get_public_subnets(cidr, azs):
    """
    Splits the VPC CIDR into one public subnet CIDR per AZ.

    :param str cidr: CIDR of the VPC, i.e. 10.0.0.0/16
    :param int azs: number of AZs
    :return: list of the subnets CIDR
    :rtype: list[str]
    """
    if azs < 1:
        raise ValueError("At least one AZ is required. Got", azs)
    vpc_net = ipaddress.IPv4Network(f"{cidr}")
    prefixlen_diff = int(ceil(log(azs, 2))) if azs > 1 else 0
    if vpc_net.prefixlen + prefixlen_diff > MAX_SUBNET_PREFIX:
        raise ValueError(
            f"VPC CIDR {cidr} is too small to fit {azs} subnets of at least /{MAX_SUBNET_PREFIX}"
        )
    subnets = list(vpc_net.subnets(prefixlen_diff=prefixlen_diff))
    return [f"{subnet}" for subnet in subnets[:azs]]
