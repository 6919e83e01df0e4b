#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

from datetime import datetime

from botocore.exceptions import ClientError
from botocore.stub import ANY, Stubber
from pytest import fixture, raises

from ecs_mcserver.common.aws import (
    assert_can_create_stack,
    assert_can_update_stack,
    assert_session_account,
    deploy,
    plan,
)
from ecs_mcserver.exceptions import ConfigurationError
from ecs_mcserver.mcserver import generate_shared_stack, generate_stacks

STACK_NAME = "campfire-shared-mcEcsFargateServerInfrastructureStack"
STACK_ID = f"arn:aws:cloudformation:eu-west-1:123456789012:stack/{STACK_NAME}/abcd"


def describe_stack_response(status):
    return {
        "Stacks": [
            {
                "StackName": STACK_NAME,
                "StackId": STACK_ID,
                "CreationTime": datetime(2022, 1, 1),
                "StackStatus": status,
            }
        ]
    }


def add_stack_does_not_exist(stubber):
    stubber.add_client_error(
        "describe_stacks",
        service_error_code="ValidationError",
        service_message=f"Stack with id {STACK_NAME} does not exist",
        expected_params={"StackName": STACK_NAME},
    )


def stack_args(stack):
    return {
        "StackName": STACK_NAME,
        "Capabilities": ["CAPABILITY_NAMED_IAM"],
        "Parameters": [],
        "TemplateBody": ANY,
        "Tags": stack.tags,
        "DisableRollback": False,
    }


@fixture
def stubbed_settings(settings, cfn_client, stubbed_session):
    settings.session = stubbed_session(cfn_client)
    return settings


def test_assert_can_create(cfn_client):
    stubber = Stubber(cfn_client)
    add_stack_does_not_exist(stubber)
    stubber.add_response(
        "describe_stacks", describe_stack_response("REVIEW_IN_PROGRESS")
    )
    stubber.add_response("describe_stacks", describe_stack_response("CREATE_COMPLETE"))
    with stubber:
        assert assert_can_create_stack(cfn_client, STACK_NAME) is True
        assert assert_can_create_stack(cfn_client, STACK_NAME)["StackId"] == STACK_ID
        assert assert_can_create_stack(cfn_client, STACK_NAME) is False


def test_assert_can_update(cfn_client):
    stubber = Stubber(cfn_client)
    stubber.add_response(
        "describe_stacks", describe_stack_response("UPDATE_ROLLBACK_COMPLETE")
    )
    stubber.add_response(
        "describe_stacks", describe_stack_response("UPDATE_IN_PROGRESS")
    )
    with stubber:
        assert assert_can_update_stack(cfn_client, STACK_NAME)
        assert not assert_can_update_stack(cfn_client, STACK_NAME)


def test_deploy_create(stubbed_settings, cfn_client):
    stack = generate_shared_stack(stubbed_settings)
    stubber = Stubber(cfn_client)
    add_stack_does_not_exist(stubber)
    stubber.add_response("create_stack", {"StackId": STACK_ID}, stack_args(stack))
    stubber.add_response("describe_stacks", describe_stack_response("CREATE_COMPLETE"))
    with stubber:
        assert deploy(stubbed_settings, stack, wait=True) == STACK_ID
    stubber.assert_no_pending_responses()


def test_deploy_update(stubbed_settings, cfn_client):
    stack = generate_shared_stack(stubbed_settings)
    stubber = Stubber(cfn_client)
    stubber.add_response("describe_stacks", describe_stack_response("CREATE_COMPLETE"))
    stubber.add_response("describe_stacks", describe_stack_response("CREATE_COMPLETE"))
    stubber.add_response("update_stack", {"StackId": STACK_ID}, stack_args(stack))
    with stubber:
        assert deploy(stubbed_settings, stack) == STACK_ID
    stubber.assert_no_pending_responses()


def test_deploy_no_updates(stubbed_settings, cfn_client):
    stack = generate_shared_stack(stubbed_settings)
    stubber = Stubber(cfn_client)
    stubber.add_response("describe_stacks", describe_stack_response("CREATE_COMPLETE"))
    stubber.add_response("describe_stacks", describe_stack_response("CREATE_COMPLETE"))
    stubber.add_client_error(
        "update_stack",
        service_error_code="ValidationError",
        service_message="No updates are to be performed.",
    )
    with stubber:
        assert deploy(stubbed_settings, stack) is None


def test_deploy_in_progress(stubbed_settings, cfn_client):
    stack = generate_shared_stack(stubbed_settings)
    stubber = Stubber(cfn_client)
    stubber.add_response(
        "describe_stacks", describe_stack_response("UPDATE_IN_PROGRESS")
    )
    stubber.add_response(
        "describe_stacks", describe_stack_response("UPDATE_IN_PROGRESS")
    )
    with stubber:
        assert deploy(stubbed_settings, stack) is None


def test_deploy_pending_change_set(stubbed_settings, cfn_client):
    """A stack created by a change set not yet executed cannot be created again"""
    stack = generate_shared_stack(stubbed_settings)
    stubber = Stubber(cfn_client)
    stubber.add_response(
        "describe_stacks", describe_stack_response("REVIEW_IN_PROGRESS")
    )
    with stubber:
        assert deploy(stubbed_settings, stack) is None
    stubber.assert_no_pending_responses()


def test_deploy_fails(stubbed_settings, cfn_client):
    stack = generate_shared_stack(stubbed_settings)
    stubber = Stubber(cfn_client)
    add_stack_does_not_exist(stubber)
    stubber.add_client_error(
        "create_stack",
        service_error_code="InsufficientCapabilitiesException",
        service_message="Requires capabilities : [CAPABILITY_NAMED_IAM]",
    )
    with stubber:
        with raises(ClientError):
            deploy(stubbed_settings, stack)


def add_change_set_created(stubber, stack):
    stubber.add_response(
        "create_change_set",
        {"Id": "arn:aws:cloudformation:change-set", "StackId": STACK_ID},
        {
            "StackName": STACK_NAME,
            "Capabilities": ["CAPABILITY_NAMED_IAM"],
            "Parameters": [],
            "TemplateBody": ANY,
            "Tags": stack.tags,
            "UsePreviousTemplate": False,
            "ChangeSetType": "CREATE",
            "ChangeSetName": ANY,
        },
    )
    stubber.add_response(
        "describe_change_set",
        {
            "Status": "CREATE_COMPLETE",
            "Changes": [
                {
                    "Type": "Resource",
                    "ResourceChange": {
                        "LogicalResourceId": "Vpc",
                        "ResourceType": "AWS::EC2::VPC",
                        "Action": "Add",
                    },
                }
            ],
        },
        {"ChangeSetName": ANY, "StackName": STACK_NAME},
    )


def test_plan_create(stubbed_settings, cfn_client, monkeypatch):
    stack = generate_shared_stack(stubbed_settings)
    stubber = Stubber(cfn_client)
    add_stack_does_not_exist(stubber)
    add_change_set_created(stubber, stack)
    stubber.add_response(
        "delete_change_set", {}, {"ChangeSetName": ANY, "StackName": STACK_NAME}
    )
    stubber.add_response("delete_stack", {}, {"StackName": STACK_NAME})
    answers = iter(["n", "y"])
    monkeypatch.setattr("builtins.input", lambda prompt: next(answers))
    with stubber:
        plan(stubbed_settings, stack)
    stubber.assert_no_pending_responses()


def test_generate_stacks_deploy(settings_factory, cfn_client, stubbed_session):
    settings = settings_factory(command="up", Stack="shared")
    settings.session = stubbed_session(cfn_client)
    stubber = Stubber(cfn_client)
    stubber.add_response("validate_template", {}, {"TemplateBody": ANY})
    add_stack_does_not_exist(stubber)
    stubber.add_response("create_stack", {"StackId": STACK_ID})
    with stubber:
        stacks = generate_stacks(settings)
    stubber.assert_no_pending_responses()
    assert [stack.name for stack in stacks] == [STACK_NAME]


def test_plan_apply_and_wait(stubbed_settings, cfn_client, monkeypatch):
    stack = generate_shared_stack(stubbed_settings)
    stubber = Stubber(cfn_client)
    add_stack_does_not_exist(stubber)
    add_change_set_created(stubber, stack)
    stubber.add_response(
        "execute_change_set",
        {},
        {"ChangeSetName": ANY, "StackName": STACK_NAME, "DisableRollback": False},
    )
    stubber.add_response("describe_stacks", describe_stack_response("CREATE_COMPLETE"))
    monkeypatch.setattr("builtins.input", lambda prompt: "y")
    with stubber:
        plan(stubbed_settings, stack, wait=True)
    stubber.assert_no_pending_responses()


def add_caller_identity(stubber, account_id):
    stubber.add_response(
        "get_caller_identity",
        {
            "UserId": "AIDAEXAMPLE",
            "Account": account_id,
            "Arn": f"arn:aws:iam::{account_id}:user/mc-admin",
        },
    )


def test_session_account(settings_factory, sts_client, stubbed_session):
    settings = settings_factory(AccountId="111111111111")
    settings.session = stubbed_session(sts_client)
    stubber = Stubber(sts_client)
    add_caller_identity(stubber, "111111111111")
    add_caller_identity(stubber, "222222222222")
    with stubber:
        assert_session_account(settings)
        with raises(ConfigurationError):
            assert_session_account(settings)
    stubber.assert_no_pending_responses()


def test_session_account_not_set(settings, sts_client, stubbed_session):
    settings.session = stubbed_session(sts_client)
    stubber = Stubber(sts_client)
    with stubber:
        assert_session_account(settings)


def test_generate_stacks_wrong_account(settings_factory, sts_client, stubbed_session):
    settings = settings_factory(command="up", Stack="shared", AccountId="111111111111")
    settings.session = stubbed_session(sts_client)
    stubber = Stubber(sts_client)
    add_caller_identity(stubber, "222222222222")
    with stubber:
        with raises(ConfigurationError):
            generate_stacks(settings)
    stubber.assert_no_pending_responses()
