# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Functions to manage a template or configuration file and write it to the local filesystem
"""

from __future__ import annotations

import json
import pprint
from os import makedirs
from os.path import abspath
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ecs_mcserver.common.settings import DeploymentSettings

import yaml
from botocore.exceptions import ClientError
from cfn_flip.yaml_dumper import LongCleanDumper
from troposphere import Template

from ecs_mcserver.common.logging import LOG

JSON_MIME = "application/json"
YAML_MIME = "application/x-yaml"
TEMPLATE_BODY_MAX_SIZE = 51200


class FileArtifact:
    """
    Class to handle files artifacts, such as configuration files or templates.
    It also handles CloudFormation templates validation.

    :cvar str body: The content of the FileArtifact
    :cvar troposphere.Template template: the CFN template
    :cvar str file_name: the base name of the file
    :cvar str mime: MIME-type of the file
    :cvar str file_path: Output file path for the FileArtifact
    """

    mime = "text/plain"
    file_path = None

    def __init__(
        self,
        file_name: str,
        settings: DeploymentSettings,
        file_format: str = None,
        template: Template = None,
        content=None,
    ):
        """
        Init method for FileArtifact

        :param file_name: Name of the file. Mandatory
        :param template: If you are providing a template to generate
        :param content: If you are providing a dict/list to generate
        """
        self.template = None
        self.content = None
        self.file_name = file_name
        self.body = None
        if file_format is None:
            file_format = settings.format
        if template is not None and not isinstance(template, Template):
            raise TypeError("template must be of type", Template, "got", type(template))
        elif template is None and not isinstance(content, (tuple, dict, list)):
            raise TypeError(
                "content must be of type", tuple, dict, list, "Got", type(content)
            )
        if template is not None:
            self.template = template
        else:
            self.content = content
        self.define_file_specs(file_name, file_format, settings)
        self.file_path = f"{settings.output_dir}/{self.file_name}"
        self.define_body()

    def __repr__(self):
        return self.file_path

    def write(self, settings: DeploymentSettings) -> None:
        """
        Method to write the files to local filesystem based on parameters (directory name etc.)
        """
        makedirs(settings.output_dir, exist_ok=True)
        with open(self.file_path, "w") as file_fd:
            file_fd.write(self.body)
        LOG.info(f"{self.file_name} written successfully at {abspath(self.file_path)}")

    def validate(self, settings: DeploymentSettings) -> None:
        """
        Method to validate the CloudFormation template via TemplateBody
        """
        if not self.template:
            return
        if len(self.body) >= TEMPLATE_BODY_MAX_SIZE:
            LOG.warning(
                f"Template body for {self.file_name} is too big for TemplateBody validation. Skipping."
            )
            return
        try:
            settings.session.client("cloudformation").validate_template(
                TemplateBody=self.body
            )
            LOG.info(f"Template {self.file_name} was validated successfully by CFN")
        except ClientError as error:
            LOG.error(error)
            LOG.error(f"Failed validation template written at {self.file_path}")
            raise

    def define_body(self) -> None:
        """
        Method to define the body of the file artifact from the template or the content.
        """
        if isinstance(self.template, Template):
            try:
                if self.mime == YAML_MIME:
                    self.body = self.template.to_yaml()
                else:
                    self.body = self.template.to_json()
            except Exception:
                pp = pprint.PrettyPrinter(indent=2)
                pp.pprint(self.template.to_dict())
                raise
        elif self.mime == YAML_MIME:
            self.body = yaml.dump(self.content, Dumper=LongCleanDumper)
        else:
            self.body = json.dumps(self.content, indent=4)

    def define_file_specs(
        self, file_name: str, file_format: str, settings: DeploymentSettings
    ) -> None:
        """
        Method to set the file name and mime type from the format

        :param file_name: name of the file
        :param file_format: format to use for the file.
        :param settings: The settings for execution
        """
        if file_format is not None and file_format in settings.allowed_formats:
            self.file_name = f"{file_name}.{file_format}"

        if self.file_name.endswith(".json"):
            self.mime = JSON_MIME
        elif self.file_name.endswith(".yml") or self.file_name.endswith(".yaml"):
            self.mime = YAML_MIME
        else:
            self.mime = JSON_MIME
            self.file_name = f"{self.file_name}.template"
