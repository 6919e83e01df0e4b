# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Module for the DeploymentSettings class
"""

from __future__ import annotations

import os
from copy import deepcopy
from datetime import datetime as dt
from os import path
from types import MappingProxyType

import boto3
import jsonschema
from compose_x_common.aws import validate_iam_role_arn
from compose_x_common.compose_x_common import keyisset, set_else_none
from dotenv import dotenv_values

from ecs_mcserver.common.aws import get_cross_role_session
from ecs_mcserver.common.logging import LOG
from ecs_mcserver.ecs.ecs_params import DEFAULT_CPU, DEFAULT_IMAGE, DEFAULT_RAM
from ecs_mcserver.ecs.task_compute import validate_fargate_configuration
from ecs_mcserver.exceptions import ConfigurationError
from ecs_mcserver.specs import REGISTRY, load_spec
from ecs_mcserver.vpc.vpc_params import (
    DEFAULT_AZ_COUNT,
    DEFAULT_VPC_CIDR,
    DEFAULT_VPC_NAME,
)


class DeploymentSettings:
    """
    Class to handle the settings of one deployment of the MC server.
    Values are read once, validated, and cannot be changed afterwards.

    :ivar boto3.session.Session session: session used for lookups and deployments
    :ivar str output_dir: where to write the templates to
    :ivar str format: templates output format
    """

    deployment_type_arg = "DeploymentType"
    application_name_arg = "ApplicationName"
    application_abbreviation_arg = "ApplicationAbbreviation"
    account_arg = "AccountId"
    region_arg = "RegionName"

    image_arg = "Image"
    cpu_arg = "Cpu"
    ram_arg = "Memory"
    vpc_name_arg = "VpcName"
    vpc_cidr_arg = "VpcCidr"
    az_count_arg = "AzCount"

    command_arg = "command"
    output_dir_arg = "OutputDirectory"
    format_arg = "TemplateFormat"
    stack_arg = "Stack"
    no_lookup_arg = "NoLookup"
    arn_arg = "RoleArn"
    env_file_arg = "EnvFile"
    disable_rollback_arg = "DisableRollback"

    environment_variables = {
        deployment_type_arg: "deploymentType",
        application_name_arg: "applicationName",
        application_abbreviation_arg: "applicationAbbreviation",
        account_arg: "account",
        region_arg: "region",
    }
    optional_environment_settings = [account_arg, region_arg]

    deploy_arg = "up"
    render_arg = "render"
    plan_arg = "plan"
    config_render_arg = "config"
    version_arg = "version"

    default_format = "json"
    allowed_formats = ["json", "yaml"]
    default_stack = "all"
    allowed_stacks = ["all", "shared", "service"]
    default_output_dir = f"/tmp/{dt.utcnow().strftime('%s')}"

    active_commands = [
        {
            "name": deploy_arg,
            "help": "Generates & Validates the CFN templates, Creates/Updates the stacks in CFN",
        },
        {
            "name": render_arg,
            "help": "Generates & Validates the CFN templates locally.",
        },
        {
            "name": plan_arg,
            "help": "Creates a change-set per stack to show the diff prior to an update",
        },
    ]
    validation_commands = [
        {
            "name": config_render_arg,
            "help": "Prints the deployment settings once merged from env file, environment and CLI",
        }
    ]
    neutral_commands = [{"name": version_arg, "help": "ECS MC Server Version"}]
    all_commands = active_commands + validation_commands + neutral_commands

    def __init__(self, session=None, profile_name=None, environ=None, **kwargs):
        """
        Class to init the configuration

        :param boto3.session.Session session: override session for the AWS API calls
        :param str profile_name: Name of a profile configured in .aws/config
        :param dict environ: environment variables to use instead of os.environ
        """
        self.__args = deepcopy(kwargs)
        self.command = set_else_none(self.command_arg, kwargs, self.render_arg)
        self.deploy = False
        self.plan = False
        self.parse_command(kwargs)
        config = self.merge_configuration(kwargs, environ)
        self.validate_configuration(config)
        self.__config = MappingProxyType(config)
        if not self.image_is_pinned:
            LOG.warning(
                f"Image {self.image} is not pinned to a digest or version tag."
                " Each new task may run a different server version."
            )
        self.format = self.default_format
        self.output_dir = self.default_output_dir
        self.stack = self.default_stack
        self.set_output_settings(kwargs)
        self.lookup_vpc = not keyisset(self.no_lookup_arg, kwargs)
        self.session = boto3.session.Session(region_name=self.region)
        self.override_session(session, profile_name, kwargs)

    def __repr__(self):
        return f"DeploymentSettings({self.application_name}, {self.deployment_type})"

    @property
    def deployment_type(self) -> str:
        return self.__config[self.deployment_type_arg]

    @property
    def application_name(self) -> str:
        return self.__config[self.application_name_arg]

    @property
    def application_abbreviation(self) -> str:
        return self.__config[self.application_abbreviation_arg]

    @property
    def account_id(self):
        return set_else_none(self.account_arg, self.__config)

    @property
    def region(self):
        return set_else_none(self.region_arg, self.__config)

    @property
    def image(self) -> str:
        return self.__config[self.image_arg]

    @property
    def cpu(self) -> int:
        return self.__config[self.cpu_arg]

    @property
    def memory(self) -> int:
        return self.__config[self.ram_arg]

    @property
    def vpc_name(self) -> str:
        return self.__config[self.vpc_name_arg]

    @property
    def vpc_cidr(self) -> str:
        return self.__config[self.vpc_cidr_arg]

    @property
    def az_count(self) -> int:
        return self.__config[self.az_count_arg]

    @property
    def disable_rollback(self) -> bool:
        return bool(
            set_else_none(self.disable_rollback_arg, self.__args, alt_value=False)
        )

    @property
    def image_is_pinned(self) -> bool:
        """
        An image is pinned when it uses a digest, or a tag other than latest.
        """
        if "@sha256:" in self.image:
            return True
        image_name = self.image.rsplit("/", 1)[-1]
        if ":" not in image_name:
            return False
        return image_name.split(":", 1)[-1] != "latest"

    @property
    def render_shared(self) -> bool:
        return self.stack in ["all", "shared"]

    @property
    def render_service(self) -> bool:
        return self.stack in ["all", "service"]

    @property
    def shared_stack_name(self) -> str:
        return f"{self.application_name}-shared-mcEcsFargateServerInfrastructureStack"

    @property
    def service_stack_name(self) -> str:
        return (
            f"{self.application_name}-{self.deployment_type}-mcEcsFargateServerStack"
        )

    @property
    def log_group_name(self) -> str:
        return f"/ecs/{self.deployment_type}-mc-Server"

    def resource_name(self, suffix: str) -> str:
        """
        Qualifies a resource name with the deployment type.

        :param str suffix: i.e. mc-server-cluster
        :return: i.e. staging-mc-server-cluster
        """
        return f"{self.deployment_type}-{suffix}"

    @classmethod
    def merge_configuration(cls, kwargs: dict, environ: dict = None) -> dict:
        """
        Merges the deployment parameters from, by increasing priority, the env file,
        the environment variables and the CLI arguments.
        Sets the default values of the settings not set.

        :param dict kwargs: CLI arguments
        :param dict environ: environment variables. Defaults to os.environ
        :return: the merged configuration
        :rtype: dict
        """
        if environ is None:
            environ = os.environ
        env_file = set_else_none(cls.env_file_arg, kwargs)
        file_values = {}
        if env_file:
            if not path.exists(env_file):
                raise ConfigurationError(f"Env file {env_file} does not exist")
            LOG.info(f"Loading deployment parameters from {env_file}")
            file_values = dotenv_values(env_file)
        config = {}
        for setting_name, variable_name in cls.environment_variables.items():
            for source in (
                kwargs.get(setting_name),
                environ.get(variable_name),
                file_values.get(variable_name),
            ):
                if source is not None:
                    config[setting_name] = source
                    break
            if setting_name in cls.optional_environment_settings and not config.get(
                setting_name
            ):
                config.pop(setting_name, None)
        defaults = {
            cls.image_arg: DEFAULT_IMAGE,
            cls.cpu_arg: DEFAULT_CPU,
            cls.ram_arg: DEFAULT_RAM,
            cls.vpc_name_arg: DEFAULT_VPC_NAME,
            cls.vpc_cidr_arg: DEFAULT_VPC_CIDR,
            cls.az_count_arg: DEFAULT_AZ_COUNT,
        }
        for setting_name, default in defaults.items():
            config[setting_name] = set_else_none(setting_name, kwargs, default)
        return config

    @staticmethod
    def validate_configuration(config: dict) -> None:
        """
        Validates the configuration against the deployment JSON schema and the Fargate modes.

        :raises ConfigurationError: with all the validation errors found
        """
        validator = jsonschema.Draft7Validator(
            load_spec("deployment.spec.json"), registry=REGISTRY
        )
        errors = sorted(
            validator.iter_errors(config), key=lambda error: error.message
        )
        if errors:
            messages = [
                f"{'.'.join(str(part) for part in error.path) or 'settings'}: {error.message}"
                for error in errors
            ]
            for message in messages:
                LOG.error(message)
            raise ConfigurationError("Invalid deployment settings", messages)
        validate_fargate_configuration(
            config[DeploymentSettings.cpu_arg], config[DeploymentSettings.ram_arg]
        )

    def parse_command(self, kwargs):
        """
        Method to analyze the command and set execution settings accordingly.

        :param dict kwargs:
        """
        command_names = [cmd["name"] for cmd in self.all_commands]
        if self.command not in command_names:
            raise ConfigurationError(
                f"Unknown command {self.command}. Must be one of", command_names
            )
        if self.command == self.deploy_arg:
            self.deploy = True
        elif self.command == self.plan_arg:
            self.plan = True

    def override_session(self, session, profile_name, kwargs):
        """
        Method to set the session based on input params

        :param boto3.session.Session session: The session to override the API calls with
        :param str profile_name: Name of a profile configured in .aws/config
        :param dict kwargs: CLI kwargs
        """
        if profile_name and not session:
            self.session = boto3.session.Session(
                profile_name=profile_name, region_name=self.region
            )
        elif session and not (profile_name or keyisset(self.arn_arg, kwargs)):
            self.session = session
        if keyisset(self.arn_arg, kwargs):
            validate_iam_role_arn(arn=kwargs[self.arn_arg])
            self.session = get_cross_role_session(
                session if session else self.session,
                kwargs[self.arn_arg],
                region_name=self.region,
                session_name=f"McServerSettings@{self.command}",
            )

    def set_output_settings(self, kwargs):
        """
        Method to set the output settings based on kwargs
        """
        if keyisset(self.format_arg, kwargs):
            if kwargs[self.format_arg] not in self.allowed_formats:
                raise ConfigurationError(
                    f"Format {kwargs[self.format_arg]} is not supported. Must be one of",
                    self.allowed_formats,
                )
            self.format = kwargs[self.format_arg]
        if keyisset(self.stack_arg, kwargs):
            if kwargs[self.stack_arg] not in self.allowed_stacks:
                raise ConfigurationError(
                    f"Stack {kwargs[self.stack_arg]} is not valid. Must be one of",
                    self.allowed_stacks,
                )
            self.stack = kwargs[self.stack_arg]
        self.output_dir = set_else_none(
            self.output_dir_arg, kwargs, self.default_output_dir
        )

    def to_dict(self) -> dict:
        """
        Returns the resolved settings, i.e. to print them out
        """
        settings = dict(self.__config)
        settings["Stacks"] = {
            "Shared": self.shared_stack_name,
            "Service": self.service_stack_name,
        }
        settings["LogGroupName"] = self.log_group_name
        return settings
