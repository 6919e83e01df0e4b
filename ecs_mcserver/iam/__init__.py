# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2022 John Mille <john@compose-x.io>

import re

from troposphere import Sub

AWS_MANAGED_POLICY_RE = re.compile(r"^[a-zA-Z0-9-_./]+$")


def service_role_trust_policy(service_name: str, conditions: dict = None) -> dict:
    """
    Simple function to format the trust relationship for a Role and an AWS Service

    :param str service_name: name of the service, i.e. ecs-tasks
    :param dict conditions: optional conditions on the AssumeRole statement
    :return: policy document
    :rtype: dict
    """
    statement = {
        "Effect": "Allow",
        "Principal": {"Service": [Sub(f"{service_name}.${{AWS::URLSuffix}}")]},
        "Action": ["sts:AssumeRole"],
    }
    if conditions:
        statement["Condition"] = conditions
    policy_doc = {"Version": "2012-10-17", "Statement": [statement]}
    return policy_doc


def managed_policy_arn(policy_name: str) -> Sub:
    """
    Returns the ARN of an AWS managed policy, in the current partition.

    :param str policy_name: i.e. service-role/AmazonECSTaskExecutionRolePolicy
    :rtype: troposphere.Sub
    """
    if not AWS_MANAGED_POLICY_RE.match(policy_name):
        raise ValueError(
            f"policy name {policy_name} does not match expected regexp",
            AWS_MANAGED_POLICY_RE.pattern,
        )
    return Sub(f"arn:${{AWS::Partition}}:iam::aws:policy/{policy_name}")
