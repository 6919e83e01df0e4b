#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

import json
from os import path

import yaml
from botocore.stub import Stubber
from pytest import raises

from ecs_mcserver.common.files import FileArtifact
from ecs_mcserver.common.graph import ResourceGraph
from ecs_mcserver.common.stacks import McServerStack, render_codepipeline_config_file
from ecs_mcserver.common.tagging import define_stack_tags
from ecs_mcserver.mcserver import generate_service_graph, generate_shared_stack


def test_codepipeline_config():
    config = render_codepipeline_config_file(
        [{"ParameterKey": "VpcId", "ParameterValue": "vpc-123"}],
        [{"Key": "Application", "Value": "campfire"}],
    )
    assert config == {
        "Parameters": {"VpcId": "vpc-123"},
        "Tags": {"Application": "campfire"},
    }


def test_stack_requires_graph():
    with raises(TypeError):
        McServerStack("test", {})
    with raises(TypeError):
        McServerStack("test", ResourceGraph(), stack_parameters=["vpc-123"])


def test_render_shared_stack(settings, tmp_path):
    stack = generate_shared_stack(settings)
    files = stack.render(settings)
    assert [path.basename(file.file_path) for file in files] == [
        "campfiresharedmcEcsFargateServerInfrastructureStack.json",
        "campfiresharedmcEcsFargateServerInfrastructureStack.params.json",
        "campfiresharedmcEcsFargateServerInfrastructureStack.config.json",
    ]
    for file in files:
        assert path.exists(file.file_path)
    with open(files[0].file_path) as template_fd:
        template = json.load(template_fd)
    assert template["AWSTemplateFormatVersion"] == "2010-09-09"
    assert "Vpc" in template["Resources"]
    with open(files[2].file_path) as config_fd:
        config = json.load(config_fd)
    assert config == {
        "Parameters": {},
        "Tags": {
            "Application": "campfire",
            "ApplicationAbbreviation": "cf",
            "DeploymentType": "shared",
        },
    }
    assert stack.body == files[0].body


def test_render_yaml(settings_factory):
    settings = settings_factory(TemplateFormat="yaml")
    stack = generate_shared_stack(settings)
    files = stack.render(settings)
    assert files[0].file_path.endswith(
        "campfiresharedmcEcsFargateServerInfrastructureStack.yaml"
    )
    with open(files[0].file_path) as template_fd:
        content = template_fd.read()
    assert "Resources:" in content
    assert files[1].file_path.endswith(".params.json")


def test_render_parameters(settings, tmp_path):
    stack = McServerStack(
        settings.service_stack_name,
        generate_service_graph(settings, 2),
        stack_parameters={
            "VpcId": "vpc-123",
            "PublicSubnets": ["subnet-a", "subnet-b"],
        },
        stack_tags=define_stack_tags(settings),
    )
    assert stack.render_parameters_list_cfn() == [
        {"ParameterKey": "VpcId", "ParameterValue": "vpc-123"},
        {"ParameterKey": "PublicSubnets", "ParameterValue": "subnet-a,subnet-b"},
    ]
    stack.render(settings)
    with open(
        tmp_path / "campfirestagingmcEcsFargateServerStack.params.json"
    ) as params_fd:
        assert json.load(params_fd) == stack.render_parameters_list_cfn()
    assert stack.tags == [
        {"Key": "Application", "Value": "campfire"},
        {"Key": "ApplicationAbbreviation", "Value": "cf"},
        {"Key": "DeploymentType", "Value": "staging"},
    ]


def test_file_artifact_content(settings):
    with raises(TypeError):
        FileArtifact("test", settings=settings, content="not a dict")
    yaml_file = FileArtifact(
        "settings", settings=settings, content={"Cpu": 2048}, file_format="yaml"
    )
    assert yaml_file.file_name == "settings.yaml"
    assert yaml.safe_load(yaml_file.body) == {"Cpu": 2048}
    other_file = FileArtifact(
        "settings", settings=settings, content=[1], file_format="txt"
    )
    assert other_file.file_name == "settings.template"


def test_validate_template(settings, stubbed_session, cfn_client):
    stack = generate_shared_stack(settings)
    stack.render(settings)
    stubber = Stubber(cfn_client)
    stubber.add_response(
        "validate_template", {}, {"TemplateBody": stack.template_file.body}
    )
    settings.session = stubbed_session(cfn_client)
    with stubber:
        stack.template_file.validate(settings)
    stubber.assert_no_pending_responses()
