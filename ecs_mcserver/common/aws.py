# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Common functions to deploy the stacks to AWS CloudFormation.
"""

from __future__ import annotations

import secrets
from string import ascii_lowercase
from time import sleep
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ecs_mcserver.common.settings import DeploymentSettings
    from ecs_mcserver.common.stacks import McServerStack

from botocore.exceptions import ClientError
from compose_x_common.aws import get_account_id, get_assume_role_session
from compose_x_common.compose_x_common import keyisset
from tabulate import tabulate

from ecs_mcserver.common.logging import LOG
from ecs_mcserver.exceptions import ConfigurationError

CAPABILITIES = ["CAPABILITY_NAMED_IAM"]


def get_cross_role_session(session, arn, region_name=None, session_name=None):
    """
    Function to get a session in the account of the role to assume

    :param boto3.session.Session session: The original session fetching the credentials for X-Role
    :param str arn:
    :param str region_name: Name of region for session
    :param str session_name: Override name of the session
    :return: boto3 session from assumed role
    :rtype: boto3.session.Session
    """
    if not session_name:
        session_name = "McServer@Deploy"
    try:
        return get_assume_role_session(
            session, arn, session_name=session_name, region=region_name
        )
    except ClientError:
        LOG.error(f"Failed to use the Role ARN {arn}")
        raise


def assert_session_account(settings: DeploymentSettings) -> None:
    """
    Checks that the AWS credentials in use belong to the account set in the settings, if any.

    :param DeploymentSettings settings:
    :raises ConfigurationError: when the session account is not the expected one
    """
    if not settings.account_id:
        return
    session_account = get_account_id(settings.session)
    if session_account != str(settings.account_id):
        raise ConfigurationError(
            f"AWS credentials are for account {session_account},"
            f" expected {settings.account_id}"
        )
    LOG.debug(f"Using AWS account {session_account}")


def assert_can_create_stack(client, name):
    """
    Checks whether a stack already exists or not
    """
    try:
        stack_r = client.describe_stacks(StackName=name)
        if not keyisset("Stacks", stack_r):
            return True
        stacks = stack_r["Stacks"]
        if len(stacks) != 1:
            raise LookupError("Too many stacks found with machine name", name)
        stack = stacks[0]
        if stack["StackStatus"] == "REVIEW_IN_PROGRESS":
            return stack
        return False
    except ClientError as error:
        if (
            error.response["Error"]["Code"] == "ValidationError"
            and error.response["Error"]["Message"].find("does not exist") > 0
        ):
            return True
        raise error


def assert_can_update_stack(client, name):
    """
    Checks whether the stack is in a state that allows for an update
    """
    can_update_statuses = [
        "CREATE_COMPLETE",
        "ROLLBACK_COMPLETE",
        "UPDATE_COMPLETE",
        "UPDATE_ROLLBACK_COMPLETE",
    ]
    res = client.describe_stacks(StackName=name)
    if not res["Stacks"]:
        return False
    stack = res["Stacks"][0]
    LOG.info(f"{name} - {stack['StackStatus']}")
    if stack["StackStatus"] in can_update_statuses:
        return True
    return False


def wait_for_stack(client, stack_name: str, created: bool) -> None:
    """
    Waits for the stack to be created or updated.

    :param client: CloudFormation client
    :param str stack_name:
    :param bool created: whether the stack was created (or updated)
    """
    waiter_name = "stack_create_complete" if created else "stack_update_complete"
    LOG.info(f"{stack_name} - Waiting for {waiter_name}")
    client.get_waiter(waiter_name).wait(StackName=stack_name)


def deploy(
    settings: DeploymentSettings, stack: McServerStack, wait: bool = False
) -> str | None:
    """
    Function to deploy (create or update) the stack to CFN.

    :param DeploymentSettings settings:
    :param McServerStack stack:
    :param bool wait: wait for the stack to be complete before returning
    :return: the stack ID, if the stack was created or updated
    """
    client = settings.session.client("cloudformation")
    stack_args = {
        "StackName": stack.name,
        "Capabilities": CAPABILITIES,
        "Parameters": stack.render_parameters_list_cfn(),
        "TemplateBody": stack.body,
        "Tags": stack.tags,
    }
    try:
        can_create = assert_can_create_stack(client, stack.name)
        if isinstance(can_create, dict):
            LOG.error(
                f"Stack {stack.name} is {can_create['StackStatus']}."
                " Execute or delete its pending change set first."
            )
            return None
        if can_create:
            res = client.create_stack(
                DisableRollback=settings.disable_rollback, **stack_args
            )
            LOG.info(f"Stack {stack.name} successfully deployed.")
            created = True
        elif assert_can_update_stack(client, stack.name):
            LOG.warning(f"Stack {stack.name} already exists. Updating.")
            res = client.update_stack(
                DisableRollback=settings.disable_rollback, **stack_args
            )
            LOG.info(f"Stack {stack.name} successfully updating.")
            created = False
        else:
            LOG.error(f"Stack {stack.name} cannot be created nor updated.")
            return None
    except ClientError as error:
        if error.response["Error"]["Message"].startswith(
            "No updates are to be performed"
        ):
            LOG.info(f"Stack {stack.name} - No updates are to be performed.")
            return None
        LOG.error(error)
        raise
    LOG.info(res["StackId"])
    if wait:
        wait_for_stack(client, stack.name, created)
    return res["StackId"]


def get_change_set_status(client, change_set_name: str, stack_name: str) -> dict:
    """
    Waits for the change set to be ready and prints out the changes in a table.
    """
    pending_statuses = [
        "CREATE_PENDING",
        "CREATE_IN_PROGRESS",
        "DELETE_PENDING",
        "DELETE_IN_PROGRESS",
        "REVIEW_IN_PROGRESS",
    ]
    success_statuses = ["CREATE_COMPLETE", "DELETE_COMPLETE"]
    failed_statuses = ["DELETE_FAILED", "FAILED"]
    ready = False
    status = None
    while not ready:
        status = client.describe_change_set(
            ChangeSetName=change_set_name, StackName=stack_name
        )
        if status["Status"] in failed_statuses:
            raise SystemExit(
                "Change set is unsuccessful",
                status["Status"],
                status.get("StatusReason"),
            )
        if status["Status"] in pending_statuses:
            print(
                "ChangeSet creation in progress. Waiting 10 seconds",
                end="\r",
                flush=True,
            )
            sleep(10)
        elif status["Status"] in success_statuses:
            ready = True

    print(
        tabulate(
            [
                [
                    change["ResourceChange"]["LogicalResourceId"],
                    change["ResourceChange"]["ResourceType"],
                    change["ResourceChange"]["Action"],
                ]
                for change in status["Changes"]
            ],
            ["LogicalResourceId", "ResourceType", "Action"],
            tablefmt="rst",
        )
    )
    return status


def plan(
    settings: DeploymentSettings, stack: McServerStack, wait: bool = False
) -> None:
    """
    Function to create a change-set for the stack and show the diff

    :param DeploymentSettings settings:
    :param McServerStack stack:
    :param bool wait: when the change set is executed, wait for the stack to complete
    """
    client = settings.session.client("cloudformation")
    change_set_name = f"{stack.name}" + "".join(
        secrets.choice(ascii_lowercase) for _ in range(10)
    )
    if assert_can_create_stack(client, stack.name):
        change_set_type = "CREATE"
    elif assert_can_update_stack(client, stack.name):
        change_set_type = "UPDATE"
    else:
        LOG.error(f"Stack {stack.name} cannot be updated at this time.")
        return
    client.create_change_set(
        StackName=stack.name,
        Capabilities=CAPABILITIES,
        Parameters=stack.render_parameters_list_cfn(),
        TemplateBody=stack.body,
        Tags=stack.tags,
        UsePreviousTemplate=False,
        ChangeSetType=change_set_type,
        ChangeSetName=change_set_name,
    )
    status = get_change_set_status(client, change_set_name, stack.name)
    if status:
        apply_q = input("Want to apply? [yN]: ")
        if apply_q in ["y", "Y", "YES", "Yes", "yes"]:
            client.execute_change_set(
                ChangeSetName=change_set_name,
                StackName=stack.name,
                DisableRollback=settings.disable_rollback,
            )
            if wait:
                wait_for_stack(client, stack.name, change_set_type == "CREATE")
        else:
            delete_q = input("Cleanup ChangeSet ? [yN]: ")
            if delete_q in ["y", "Y", "YES", "Yes", "yes"]:
                client.delete_change_set(
                    ChangeSetName=change_set_name, StackName=stack.name
                )
                if change_set_type == "CREATE":
                    client.delete_stack(StackName=stack.name)
