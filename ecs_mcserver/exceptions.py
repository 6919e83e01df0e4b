# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Custom exceptions for ecs-mcserver
"""


class McServerBaseException(Exception):
    """
    Top class for ecs-mcserver Exceptions
    """

    def __init__(self, msg, *args):
        super().__init__(msg, *args)


class ConfigurationError(McServerBaseException):
    """
    Exception when the deployment settings are missing, empty or invalid.
    """


class InvalidFargateConfiguration(ConfigurationError):
    """
    Exception when the CPU/RAM combination is not one Fargate supports
    """


class VpcLookupError(McServerBaseException):
    """
    Exception when the VPC or its subnets could not be found in the account/region
    """


class DanglingReferenceError(McServerBaseException):
    """
    Exception when a resource points to a resource or parameter that was not declared before it
    """


class UnknownAttributeError(McServerBaseException):
    """
    Exception when using Fn::GetAtt with an attribute the resource type does not return
    """


class DuplicateResourceError(McServerBaseException):
    """
    Exception when two resources are declared with the same logical ID in a graph
    """


class DependencyCycleError(McServerBaseException):
    """
    Exception when the explicit dependencies between resources would form a cycle
    """
