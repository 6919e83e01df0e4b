# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Tags set on the stacks. CloudFormation propagates the stack tags to all the resources that support tagging.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ecs_mcserver.common.settings import DeploymentSettings

APPLICATION_TAG = "Application"
ABBREVIATION_TAG = "ApplicationAbbreviation"
DEPLOYMENT_TYPE_TAG = "DeploymentType"
SHARED_DEPLOYMENT_TYPE = "shared"


def define_stack_tags(settings: DeploymentSettings, shared: bool = False) -> dict:
    """
    Function to define the tags of a stack

    :param DeploymentSettings settings:
    :param bool shared: whether the tags are for the account-wide shared stack
    :return: the tags as a dict
    :rtype: dict
    """
    return {
        APPLICATION_TAG: settings.application_name,
        ABBREVIATION_TAG: settings.application_abbreviation,
        DEPLOYMENT_TYPE_TAG: (
            SHARED_DEPLOYMENT_TYPE if shared else settings.deployment_type
        ),
    }


def render_tags_list_cfn(tags: dict) -> list:
    """
    Renders the tags for the CloudFormation API (Key/Value list)
    """
    return [{"Key": key, "Value": value} for key, value in tags.items()]
