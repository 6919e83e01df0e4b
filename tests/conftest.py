#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

from os import path

import boto3
from pytest import fixture

from ecs_mcserver.common.settings import DeploymentSettings


class StubbedSession:
    """
    Session returning the same, stubbed, client for any service
    """

    def __init__(self, client, region_name="eu-west-1"):
        self._client = client
        self.region_name = region_name

    def client(self, service_name, **kwargs):
        return self._client


@fixture
def here():
    return path.abspath(path.dirname(__file__))


@fixture
def settings_factory(tmp_path):
    def build_settings(deployment_type="staging", environ=None, **kwargs):
        args = {
            DeploymentSettings.command_arg: DeploymentSettings.render_arg,
            DeploymentSettings.deployment_type_arg: deployment_type,
            DeploymentSettings.application_name_arg: "campfire",
            DeploymentSettings.application_abbreviation_arg: "cf",
            DeploymentSettings.no_lookup_arg: True,
            DeploymentSettings.output_dir_arg: str(tmp_path),
        }
        args.update(kwargs)
        return DeploymentSettings(environ=environ if environ else {}, **args)

    return build_settings


@fixture
def settings(settings_factory):
    return settings_factory()


@fixture
def stubbed_session():
    return StubbedSession


def stubbable_client(service_name):
    return boto3.session.Session(
        aws_access_key_id="testing",
        aws_secret_access_key="testing",
        region_name="eu-west-1",
    ).client(service_name)


@fixture
def cfn_client():
    return stubbable_client("cloudformation")


@fixture
def ec2_client():
    return stubbable_client("ec2")


@fixture
def sts_client():
    return stubbable_client("sts")
