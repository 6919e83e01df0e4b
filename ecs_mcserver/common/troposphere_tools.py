# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Helper functions around troposphere Template
"""

from __future__ import annotations

from troposphere import Output, Parameter, Template

from ecs_mcserver.common.cfn_params import Parameter as GroupedParameter
from ecs_mcserver.common.logging import LOG

INTERFACE_KEY = "AWS::CloudFormation::Interface"


def set_parameters_interface(template: Template) -> None:
    """
    Groups and labels the template parameters in the CFN console, from their group_label and label

    :param troposphere.Template template:
    """
    groups = {}
    labels = {}
    for title, param in template.parameters.items():
        if not isinstance(param, GroupedParameter):
            continue
        groups.setdefault(param.group_label, []).append(title)
        if param.label:
            labels[title] = {"default": param.label}
    if not groups:
        return
    interface = {
        "ParameterGroups": [
            {"Label": {"default": label}, "Parameters": titles}
            for label, titles in groups.items()
        ]
    }
    if labels:
        interface["ParameterLabels"] = labels
    template.metadata[INTERFACE_KEY] = interface


def add_parameters(template: Template, parameters: list) -> None:
    """
    Function to add parameters to the template

    :param troposphere.Template template:
    :param list[Parameter] parameters:
    """
    for param in parameters:
        if not isinstance(param, Parameter):
            raise TypeError("Expected", Parameter, "got", type(param))
        if param.title in template.parameters:
            LOG.debug(f"Parameter {param.title} already in template")
            continue
        template.add_parameter(param)
    set_parameters_interface(template)


def build_template(description: str = None, parameters: list = None) -> Template:
    """
    Function to build a new template with the default description and parameters.

    :param str description: description of the template
    :param list[Parameter] parameters: parameters to add to the template
    :return: the template
    :rtype: troposphere.Template
    """
    template = Template(
        description if description else "Template generated by ecs-mcserver"
    )
    template.set_version()
    if parameters:
        add_parameters(template, parameters)
    return template


def add_outputs(template: Template, outputs: list) -> None:
    """
    Adds outputs to the template, skipping the ones already present.

    :param troposphere.Template template:
    :param list[Output] outputs:
    """
    for output in outputs:
        if not isinstance(output, Output):
            raise TypeError("Expected", Output, "got", type(output))
        if output.title in template.outputs:
            LOG.debug(f"Output {output.title} already in template")
            continue
        template.add_output(output)
