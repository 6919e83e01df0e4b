# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Resource graph for a stack.

Every resource of a template is declared through the graph, which hands back a
:class:`ResourceHandle`. Handles are the only way a resource points to another one
(``handle.ref()`` / ``handle.get_att()``). When a resource is declared, all the Ref/GetAtt/Sub
and DependsOn it carries must resolve to resources already declared in the same graph,
or to template parameters. Anything else is a dangling reference and fails immediately.

The graph does not create anything: CloudFormation uses the same references to order
the changes. The graph only makes the edges explicit and checkable.
"""

from __future__ import annotations

import re

from troposphere import AWSObject, GetAtt, Parameter, Ref, Template

from ecs_mcserver.common.logging import LOG
from ecs_mcserver.common.troposphere_tools import add_parameters
from ecs_mcserver.exceptions import (
    DanglingReferenceError,
    DependencyCycleError,
    DuplicateResourceError,
    UnknownAttributeError,
)

SUB_VARIABLES_RE = re.compile(r"\$\{(?!!)([^}]+)}")

RETURN_VALUES = {
    "AWS::EC2::InternetGateway": ["InternetGatewayId"],
    "AWS::EC2::RouteTable": ["RouteTableId"],
    "AWS::EC2::SecurityGroup": ["GroupId", "VpcId"],
    "AWS::EC2::Subnet": [
        "AvailabilityZone",
        "CidrBlock",
        "NetworkAclAssociationId",
        "SubnetId",
        "VpcId",
    ],
    "AWS::EC2::VPC": [
        "CidrBlock",
        "CidrBlockAssociations",
        "DefaultNetworkAcl",
        "DefaultSecurityGroup",
        "VpcId",
    ],
    "AWS::ECS::Cluster": ["Arn"],
    "AWS::ECS::Service": ["Name", "ServiceArn"],
    "AWS::ECS::TaskDefinition": ["TaskDefinitionArn"],
    "AWS::EFS::AccessPoint": ["AccessPointId", "Arn"],
    "AWS::EFS::FileSystem": ["Arn", "FileSystemId"],
    "AWS::EFS::MountTarget": ["Id", "IpAddress"],
    "AWS::IAM::Role": ["Arn", "RoleId"],
    "AWS::Logs::LogGroup": ["Arn"],
}


def find_references(value, found: set = None) -> set:
    """
    Walks a rendered CFN structure and returns the logical IDs it points to via Ref, Fn::GetAtt and Fn::Sub.
    Pseudo parameters (AWS::*) are ignored.

    :param value: the rendered value (dict, list or scalar)
    :param set found: set to update
    :rtype: set[str]
    """
    if found is None:
        found = set()
    if isinstance(value, list):
        for item in value:
            find_references(item, found)
    elif isinstance(value, dict):
        if "Ref" in value and isinstance(value["Ref"], str):
            if not value["Ref"].startswith("AWS::"):
                found.add(value["Ref"])
        elif "Fn::GetAtt" in value:
            target = value["Fn::GetAtt"]
            if isinstance(target, list):
                find_references(target[1:], found)
                target = target[0]
            if isinstance(target, str):
                found.add(target.split(".")[0])
        elif "Fn::Sub" in value:
            sub = value["Fn::Sub"]
            local_vars = {}
            if isinstance(sub, list):
                sub, local_vars = sub[0], sub[1] if len(sub) > 1 else {}
                find_references(list(local_vars.values()), found)
            for var in SUB_VARIABLES_RE.findall(sub):
                name = var.split(".")[0]
                if name.startswith("AWS::") or name in local_vars:
                    continue
                found.add(name)
        else:
            for item in value.values():
                find_references(item, found)
    return found


class ResourceHandle:
    """
    Opaque reference to a resource declared in a :class:`ResourceGraph`.
    """

    __slots__ = ("_graph", "_resource")

    def __init__(self, graph: ResourceGraph, resource: AWSObject):
        self._graph = graph
        self._resource = resource

    def __repr__(self):
        return f"ResourceHandle({self.title}, {self.resource_type})"

    @property
    def title(self) -> str:
        return self._resource.title

    @property
    def resource_type(self) -> str:
        return self._resource.resource_type

    @property
    def resource(self) -> AWSObject:
        return self._resource

    @property
    def graph(self) -> ResourceGraph:
        return self._graph

    def ref(self) -> Ref:
        return Ref(self._resource)

    def get_att(self, attribute: str) -> GetAtt:
        """
        Fn::GetAtt on the resource. Checks the attribute is returned by the resource type, when known.

        :param str attribute:
        :raises UnknownAttributeError: if the resource type does not return that attribute
        """
        valid_attributes = RETURN_VALUES.get(self.resource_type)
        if valid_attributes is not None and attribute not in valid_attributes:
            raise UnknownAttributeError(
                f"{self.title} ({self.resource_type}) does not return {attribute}",
                valid_attributes,
            )
        return GetAtt(self._resource, attribute)


class ResourceGraph:
    """
    Directed acyclic graph of the resources of one template.

    :ivar troposphere.Template template: the template the resources are added to
    """

    def __init__(self, template: Template = None):
        self.template = template if template is not None else Template()
        self._handles = {}
        self._dependencies = {}

    def __contains__(self, title) -> bool:
        return title in self._handles

    def __len__(self) -> int:
        return len(self._handles)

    def __iter__(self):
        return iter(self._handles.values())

    @property
    def edges(self) -> list:
        """
        List of (dependent, dependency) logical IDs, in declaration order.
        """
        return [
            (title, dependency)
            for title in self._handles
            for dependency in sorted(self._dependencies[title])
        ]

    def dependencies(self, title: str) -> set:
        return set(self._dependencies[title])

    def dependents(self, title: str) -> set:
        return {
            dependent
            for dependent, dependencies in self._dependencies.items()
            if title in dependencies
        }

    def handle(self, title: str) -> ResourceHandle:
        return self._handles[title]

    def add_parameter(self, parameter: Parameter) -> Parameter:
        add_parameters(self.template, [parameter])
        return parameter

    def _check_handle(self, handle: ResourceHandle) -> None:
        if not isinstance(handle, ResourceHandle):
            raise TypeError("Expected", ResourceHandle, "got", type(handle))
        if handle.graph is not self or handle.title not in self._handles:
            raise DanglingReferenceError(
                f"{handle.title} was declared in another graph. Cannot be used here"
            )

    def resolve_references(self, resource: AWSObject) -> set:
        """
        Lists the resources the resource points to, and makes sure they all exist.

        :raises DanglingReferenceError: when a reference is neither a declared resource nor a parameter
        :return: the logical IDs of the resources this one depends on
        """
        rendered = resource.to_dict()
        references = find_references(rendered)
        depends_on = rendered.get("DependsOn", [])
        if isinstance(depends_on, str):
            depends_on = [depends_on]
        references.update(depends_on)
        dependencies = set()
        for reference in references:
            if reference in self._handles:
                dependencies.add(reference)
            elif reference in self.template.parameters and reference not in depends_on:
                continue
            else:
                raise DanglingReferenceError(
                    f"{resource.title} references {reference} which is not declared"
                )
        return dependencies

    def declare(self, resource: AWSObject, depends_on: list = None) -> ResourceHandle:
        """
        Adds the resource to the template and to the graph.

        :param troposphere.AWSObject resource: the resource to add
        :param list[ResourceHandle] depends_on: explicit dependencies, set as DependsOn
        :return: the handle to use to reference the resource
        """
        if not isinstance(resource, AWSObject):
            raise TypeError("Expected", AWSObject, "got", type(resource))
        if resource.title in self._handles or resource.title in self.template.resources:
            raise DuplicateResourceError(
                f"{resource.title} is already declared in this graph"
            )
        if depends_on:
            for handle in depends_on:
                self._check_handle(handle)
            existing = getattr(resource, "DependsOn", [])
            if isinstance(existing, str):
                existing = [existing]
            resource.DependsOn = list(existing) + [
                handle.title for handle in depends_on if handle.title not in existing
            ]
        dependencies = self.resolve_references(resource)
        self.template.add_resource(resource)
        handle = ResourceHandle(self, resource)
        self._handles[resource.title] = handle
        self._dependencies[resource.title] = dependencies
        LOG.debug(f"{resource.title} declared. Depends on {sorted(dependencies)}")
        return handle

    def _reaches(self, start: str, target: str) -> bool:
        to_visit = [start]
        visited = set()
        while to_visit:
            current = to_visit.pop()
            if current == target:
                return True
            if current in visited:
                continue
            visited.add(current)
            to_visit += list(self._dependencies[current])
        return False

    def add_dependency(
        self, dependent: ResourceHandle, dependency: ResourceHandle
    ) -> None:
        """
        Adds an explicit DependsOn from dependent onto dependency.

        :raises DependencyCycleError: if dependency already (transitively) depends on dependent
        """
        self._check_handle(dependent)
        self._check_handle(dependency)
        if self._reaches(dependency.title, dependent.title):
            raise DependencyCycleError(
                f"{dependent.title} cannot depend on {dependency.title}:"
                f" {dependency.title} already depends on {dependent.title}"
            )
        existing = getattr(dependent.resource, "DependsOn", [])
        if isinstance(existing, str):
            existing = [existing]
        if dependency.title not in existing:
            dependent.resource.DependsOn = list(existing) + [dependency.title]
        self._dependencies[dependent.title].add(dependency.title)

    def topological_order(self) -> list:
        """
        Returns the logical IDs so that every resource comes after all the ones it depends on.
        Ties are broken by declaration order.

        :raises DependencyCycleError: if the graph has a cycle
        """
        declaration_index = {title: index for index, title in enumerate(self._handles)}
        remaining = {
            title: set(dependencies)
            for title, dependencies in self._dependencies.items()
        }
        ordered = []
        while remaining:
            ready = sorted(
                [title for title, dependencies in remaining.items() if not dependencies],
                key=lambda title: declaration_index[title],
            )
            if not ready:
                raise DependencyCycleError(
                    "Resources depend on each other", sorted(remaining.keys())
                )
            for title in ready:
                ordered.append(title)
                del remaining[title]
            for dependencies in remaining.values():
                dependencies.difference_update(ready)
        return ordered
