#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

from pytest import raises
from troposphere import GetAtt, Parameter, Ref, Sub
from troposphere.ec2 import SecurityGroup, SecurityGroupIngress
from troposphere.logs import LogGroup

from ecs_mcserver.common import title_from_name
from ecs_mcserver.common.graph import ResourceGraph, ResourceHandle, find_references
from ecs_mcserver.exceptions import (
    DanglingReferenceError,
    DependencyCycleError,
    DuplicateResourceError,
    UnknownAttributeError,
)


def security_group(title, vpc_id="vpc-123"):
    return SecurityGroup(title, GroupDescription=title, VpcId=vpc_id)


def test_title_from_name():
    assert title_from_name("mc-server-efs-security-group") == "McServerEfsSecurityGroup"
    assert title_from_name("staging_mc-server") == "StagingMcServer"
    with raises(ValueError):
        title_from_name("---")
    with raises(TypeError):
        title_from_name(123)


def test_find_references():
    value = {
        "A": {"Ref": "SecurityGroup"},
        "B": {"Ref": "AWS::Region"},
        "C": {"Fn::GetAtt": ["Role", "Arn"]},
        "D": {"Fn::Sub": "${Bucket}-${AWS::StackName}-${Table.Arn}"},
        "E": {"Fn::Sub": ["${Local}-${Queue}", {"Local": {"Ref": "Topic"}}]},
        "F": [{"Ref": "Cluster"}, "string", 1],
    }
    assert find_references(value) == {
        "SecurityGroup",
        "Role",
        "Bucket",
        "Table",
        "Queue",
        "Topic",
        "Cluster",
    }


def test_declare_returns_handle():
    graph = ResourceGraph()
    handle = graph.declare(security_group("SgA"))
    assert isinstance(handle, ResourceHandle)
    assert handle.title == "SgA"
    assert handle.resource_type == "AWS::EC2::SecurityGroup"
    assert handle.ref().to_dict() == {"Ref": "SgA"}
    assert handle.get_att("GroupId").to_dict() == {"Fn::GetAtt": ["SgA", "GroupId"]}
    assert "SgA" in graph
    assert "SgA" in graph.template.resources
    assert len(graph) == 1


def test_unknown_attribute():
    graph = ResourceGraph()
    handle = graph.declare(security_group("SgA"))
    with raises(UnknownAttributeError):
        handle.get_att("Arn")


def test_duplicate_declaration():
    graph = ResourceGraph()
    graph.declare(security_group("SgA"))
    with raises(DuplicateResourceError):
        graph.declare(security_group("SgA"))


def test_dangling_references():
    graph = ResourceGraph()
    with raises(DanglingReferenceError):
        graph.declare(
            SecurityGroupIngress(
                "Ingress",
                GroupId=GetAtt("NotDeclared", "GroupId"),
                IpProtocol="tcp",
                FromPort=0,
                ToPort=0,
                CidrIp="0.0.0.0/0",
            )
        )
    assert "Ingress" not in graph
    assert "Ingress" not in graph.template.resources
    with raises(DanglingReferenceError):
        graph.declare(security_group("SgB", vpc_id=Ref("VpcId")))


def test_handle_from_other_graph():
    graph = ResourceGraph()
    other_graph = ResourceGraph()
    other_sg = other_graph.declare(security_group("SgOther"))
    with raises(DanglingReferenceError):
        graph.declare(
            SecurityGroupIngress(
                "Ingress",
                GroupId=other_sg.get_att("GroupId"),
                IpProtocol="tcp",
                FromPort=0,
                ToPort=0,
                CidrIp="0.0.0.0/0",
            )
        )
    with raises(DanglingReferenceError):
        graph.declare(security_group("SgA"), depends_on=[other_sg])


def test_parameters_references():
    graph = ResourceGraph()
    vpc_id = graph.add_parameter(Parameter("VpcId", Type="AWS::EC2::VPC::Id"))
    handle = graph.declare(security_group("SgA", vpc_id=Ref(vpc_id)))
    assert graph.dependencies(handle.title) == set()
    log_group = graph.declare(
        LogGroup("Logs", LogGroupName=Sub("/ecs/${VpcId}-${AWS::StackName}"))
    )
    assert graph.dependencies(log_group.title) == set()


def test_dependencies_and_order():
    graph = ResourceGraph()
    sg_b = graph.declare(security_group("SgB"))
    sg_a = graph.declare(security_group("SgA"))
    ingress = graph.declare(
        SecurityGroupIngress(
            "AToB",
            GroupId=sg_b.get_att("GroupId"),
            SourceSecurityGroupId=sg_a.get_att("GroupId"),
            IpProtocol="tcp",
            FromPort=0,
            ToPort=65535,
        )
    )
    assert graph.dependencies(ingress.title) == {"SgA", "SgB"}
    assert graph.dependents("SgA") == {"AToB"}
    assert ("AToB", "SgA") in graph.edges
    assert graph.topological_order() == ["SgB", "SgA", "AToB"]


def test_explicit_dependencies():
    graph = ResourceGraph()
    sg_a = graph.declare(security_group("SgA"))
    sg_b = graph.declare(security_group("SgB"), depends_on=[sg_a])
    assert sg_b.resource.DependsOn == ["SgA"]
    sg_c = graph.declare(security_group("SgC"))
    graph.add_dependency(sg_a, sg_c)
    assert graph.topological_order() == ["SgC", "SgA", "SgB"]
    with raises(DependencyCycleError):
        graph.add_dependency(sg_c, sg_b)
    with raises(DependencyCycleError):
        graph.add_dependency(sg_a, sg_a)
