# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Module to handle the stacks of ecs-mcserver: the template built from a resource graph,
the parameters values and tags to create the stack with, and the files to write.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ecs_mcserver.common.settings import DeploymentSettings

from troposphere import Template

from ecs_mcserver.common import NONALPHANUM
from ecs_mcserver.common.files import FileArtifact
from ecs_mcserver.common.graph import ResourceGraph
from ecs_mcserver.common.logging import LOG
from ecs_mcserver.common.tagging import render_tags_list_cfn


def render_codepipeline_config_file(parameters: list, tags: list = None) -> dict:
    """
    Method to write all the parameters in the AWS CFN Config format for Codepipeline

    :param list parameters:
    :param list tags:
    :return:
    """
    config = {"Parameters": {}, "Tags": {}}
    for param in parameters:
        config["Parameters"].update({param["ParameterKey"]: param["ParameterValue"]})
    if tags:
        for tag in tags:
            config["Tags"].update({tag["Key"]: tag["Value"]})
    return config


class McServerStack:
    """
    Class to define a CFN Stack as a composition of its resource graph, parameters, tags etc.

    :ivar str name: the CloudFormation stack name
    :ivar ResourceGraph graph: the graph holding the template resources
    :ivar dict stack_parameters: parameters values to create/update the stack with
    :ivar dict stack_tags: tags of the stack
    :ivar FileArtifact template_file: once rendered, the template file
    """

    def __init__(
        self,
        name: str,
        graph: ResourceGraph,
        stack_parameters: dict = None,
        stack_tags: dict = None,
        file_name: str = None,
    ):
        if not isinstance(graph, ResourceGraph):
            raise TypeError("graph is", type(graph), "expected", ResourceGraph)
        self.name = name
        self.graph = graph
        self.file_name = file_name if file_name else NONALPHANUM.sub("", name)
        if stack_parameters is None:
            stack_parameters = {}
        elif not isinstance(stack_parameters, dict):
            raise TypeError("parameters is", type(stack_parameters), "expected", dict)
        self.stack_parameters = stack_parameters
        self.stack_tags = stack_tags if stack_tags else {}
        self.template_file = None

    def __repr__(self):
        return self.name

    @property
    def stack_template(self) -> Template:
        return self.graph.template

    @property
    def body(self) -> str:
        if self.template_file:
            return self.template_file.body
        return self.stack_template.to_json()

    @property
    def tags(self) -> list:
        return render_tags_list_cfn(self.stack_tags)

    def render_parameters_list_cfn(self) -> list:
        """
        Renders the parameters values to use with the CloudFormation API.
        Parameters without a value are skipped, so their default (if any) is used.
        """
        parameters = []
        for title in self.stack_template.parameters:
            if title not in self.stack_parameters:
                LOG.debug(f"{self.name} - No value set for parameter {title}")
                continue
            value = self.stack_parameters[title]
            if isinstance(value, (list, tuple)):
                value = ",".join(value)
            parameters.append({"ParameterKey": title, "ParameterValue": str(value)})
        return parameters

    def render(self, settings: DeploymentSettings) -> list:
        """
        Renders the template, parameters and config files and writes them to the output directory.

        :param DeploymentSettings settings:
        :return: the files written
        :rtype: list[FileArtifact]
        """
        self.template_file = FileArtifact(
            self.file_name, settings=settings, template=self.stack_template
        )
        parameters = self.render_parameters_list_cfn()
        params_file = FileArtifact(
            f"{self.file_name}.params",
            settings=settings,
            content=parameters,
            file_format="json",
        )
        config_file = FileArtifact(
            f"{self.file_name}.config",
            settings=settings,
            content=render_codepipeline_config_file(parameters, self.tags),
            file_format="json",
        )
        files = [self.template_file, params_file, config_file]
        for file in files:
            file.write(settings)
        return files
