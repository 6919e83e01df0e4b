# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Security groups titles, names and the ingress rules they get.
"""

from ecs_mcserver.ecs.ecs_params import SERVER_NAME

ANY_IPV4 = "0.0.0.0/0"
ALL_PROTOCOLS = "-1"
ALL_TCP_FROM = 0
ALL_TCP_TO = 65535

EFS_SG_T = "McServerEfsSecurityGroup"
EFS_SG_NAME = f"{SERVER_NAME}-efs-security-group"

MAINTENANCE_SG_T = "McServerEfsEc2MaintenanceSecurityGroup"
MAINTENANCE_SG_NAME = f"{SERVER_NAME}-efs-ec2-maintenance-security-group"

ECS_SG_T = "McServerEcsSecurityGroup"
ECS_SG_NAME = f"{SERVER_NAME}-ecs-security-group"

ECS_TO_EFS_DESCRIPTION = "allow ECS access"
MAINTENANCE_TO_EFS_DESCRIPTION = "Allow EC2 access for managing data"

MC_SERVER_PORTS = [
    {"Name": "mc", "Port": 25565, "Protocols": ["tcp", "udp"]},
    {"Name": "geyser", "Port": 19132, "Protocols": ["tcp", "udp"]},
]


def public_ingress_rules(ports: list = None) -> list:
    """
    Lists the ingress rules from anywhere, one per protocol of each MC server port

    :param list ports: ports definitions. Defaults to MC_SERVER_PORTS
    :return: the rules, with the protocol, port, source CIDR and description
    :rtype: list[dict]
    """
    if ports is None:
        ports = MC_SERVER_PORTS
    rules = []
    for port_def in ports:
        for protocol in port_def["Protocols"]:
            rules.append(
                {
                    "Name": port_def["Name"],
                    "IpProtocol": protocol,
                    "Port": port_def["Port"],
                    "CidrIp": ANY_IPV4,
                    "Description": f"IP range for {protocol.upper()} for {port_def['Name']}",
                }
            )
    return rules
