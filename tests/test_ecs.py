#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

from pytest import fixture

from ecs_mcserver.ecs.ecs_params import (
    LOG_GROUP_RETENTION_T,
    LOG_GROUP_T,
    SERVICE_T,
    TASK_T,
)
from ecs_mcserver.ecs.ecs_task import define_port_mappings
from ecs_mcserver.ecs_cluster.ecs_cluster_params import CLUSTER_T
from ecs_mcserver.iam.iam_params import EXEC_ROLE_T, TASK_ROLE_T
from ecs_mcserver.mcserver import generate_service_graph


@fixture
def resources(settings):
    return generate_service_graph(settings, 2).template.to_dict()["Resources"]


def test_port_mappings():
    mappings = [mapping.to_dict() for mapping in define_port_mappings()]
    assert mappings == [
        {
            "Name": "mc-tcp-mapping",
            "ContainerPort": 25565,
            "HostPort": 25565,
            "Protocol": "tcp",
        },
        {
            "Name": "mc-udp-mapping",
            "ContainerPort": 25565,
            "HostPort": 25565,
            "Protocol": "udp",
        },
        {
            "Name": "geyser-tcp-mapping",
            "ContainerPort": 19132,
            "HostPort": 19132,
            "Protocol": "tcp",
        },
        {
            "Name": "geyser-udp-mapping",
            "ContainerPort": 19132,
            "HostPort": 19132,
            "Protocol": "udp",
        },
    ]


def test_task_definition(resources):
    properties = resources[TASK_T]["Properties"]
    assert properties["Family"] == "staging-mc-server-task"
    assert properties["Cpu"] == "2048"
    assert properties["Memory"] == "4096"
    assert properties["NetworkMode"] == "awsvpc"
    assert properties["RequiresCompatibilities"] == ["FARGATE"]
    assert properties["ExecutionRoleArn"] == {"Fn::GetAtt": [EXEC_ROLE_T, "Arn"]}
    assert properties["TaskRoleArn"] == {"Fn::GetAtt": [TASK_ROLE_T, "Arn"]}
    assert properties["Volumes"] == [
        {
            "Name": "staging-mc-server-task-volume",
            "EFSVolumeConfiguration": {
                "FilesystemId": {"Ref": "McServerFileSystem"},
                "TransitEncryption": "ENABLED",
                "AuthorizationConfig": {
                    "AccessPointId": {"Ref": "McServerAccessPoint"},
                    "IAM": "DISABLED",
                },
            },
        }
    ]


def test_container_definition(resources):
    containers = resources[TASK_T]["Properties"]["ContainerDefinitions"]
    assert len(containers) == 1
    container = containers[0]
    assert container["Name"] == "staging-mc-server-container"
    assert container["Image"] == "marctv/minecraft-papermc-server:latest"
    assert container["Essential"] is True
    assert container["MountPoints"] == [
        {
            "ContainerPath": "/mc",
            "SourceVolume": "staging-mc-server-task-volume",
            "ReadOnly": False,
        }
    ]
    assert container["LinuxParameters"] == {"InitProcessEnabled": True}
    assert len(container["PortMappings"]) == 4
    assert container["LogConfiguration"] == {
        "LogDriver": "awslogs",
        "Options": {
            "awslogs-group": {"Ref": LOG_GROUP_T},
            "awslogs-region": {"Ref": "AWS::Region"},
            "awslogs-stream-prefix": "mc-server-logs",
        },
    }


def test_container_image_and_size(settings_factory):
    settings = settings_factory(
        Image="marctv/minecraft-papermc-server:1.20.4", Cpu=1024, Memory=8192
    )
    properties = generate_service_graph(settings, 2).template.to_dict()[
        "Resources"
    ][TASK_T]["Properties"]
    assert properties["Cpu"] == "1024"
    assert properties["Memory"] == "8192"
    assert (
        properties["ContainerDefinitions"][0]["Image"]
        == "marctv/minecraft-papermc-server:1.20.4"
    )


def test_log_group(settings):
    graph = generate_service_graph(settings, 2)
    template = graph.template.to_dict()
    log_group = template["Resources"][LOG_GROUP_T]
    assert log_group["Properties"] == {
        "LogGroupName": "/ecs/staging-mc-Server",
        "RetentionInDays": {"Ref": LOG_GROUP_RETENTION_T},
    }
    assert log_group["DeletionPolicy"] == "Delete"
    assert template["Parameters"][LOG_GROUP_RETENTION_T]["Default"] == 731


def test_service(resources):
    properties = resources[SERVICE_T]["Properties"]
    assert properties["ServiceName"] == "staging-mc-server-ecs-service"
    assert properties["Cluster"] == {"Ref": CLUSTER_T}
    assert properties["TaskDefinition"] == {"Ref": TASK_T}
    assert properties["DesiredCount"] == 1
    assert properties["DeploymentConfiguration"] == {
        "MinimumHealthyPercent": 0,
        "MaximumPercent": 100,
    }
    assert properties["CapacityProviderStrategy"] == [
        {"CapacityProvider": "FARGATE_SPOT", "Weight": 1}
    ]
    assert "LaunchType" not in properties
    assert properties["PlatformVersion"] == "LATEST"
    assert properties["EnableExecuteCommand"] is True
    assert properties["NetworkConfiguration"] == {
        "AwsvpcConfiguration": {
            "AssignPublicIp": "ENABLED",
            "SecurityGroups": [
                {"Fn::GetAtt": ["McServerEcsSecurityGroup", "GroupId"]}
            ],
            "Subnets": {"Ref": "PublicSubnets"},
        }
    }
    assert sorted(resources[SERVICE_T]["DependsOn"]) == [
        "McServerMountTarget0",
        "McServerMountTarget1",
    ]


def test_cluster(resources):
    properties = resources[CLUSTER_T]["Properties"]
    assert properties["ClusterName"] == "staging-mc-server-cluster"
    assert properties["CapacityProviders"] == ["FARGATE", "FARGATE_SPOT"]
    assert properties["ClusterSettings"] == [
        {"Name": "containerInsights", "Value": "enabled"}
    ]


def test_execution_role(resources):
    properties = resources[EXEC_ROLE_T]["Properties"]
    assert properties["RoleName"] == "staging-mc-server-ecs-task-role"
    assert properties["ManagedPolicyArns"] == [
        {
            "Fn::Sub": "arn:${AWS::Partition}:iam::aws:policy/service-role/AmazonECSTaskExecutionRolePolicy"
        }
    ]
    assert "Policies" not in properties
    statement = properties["AssumeRolePolicyDocument"]["Statement"][0]
    assert statement["Action"] == ["sts:AssumeRole"]
    assert statement["Principal"] == {
        "Service": [{"Fn::Sub": "ecs-tasks.${AWS::URLSuffix}"}]
    }


def test_task_role(resources):
    properties = resources[TASK_ROLE_T]["Properties"]
    assert properties["RoleName"] == "staging-mc-server-ecs-task-runtime-role"
    assert "ManagedPolicyArns" not in properties
    assert len(properties["Policies"]) == 1
    policy = properties["Policies"][0]
    assert policy["PolicyName"] == "EnableExecuteCommand"
    assert policy["PolicyDocument"]["Statement"][0]["Action"] == [
        "ssmmessages:CreateControlChannel",
        "ssmmessages:CreateDataChannel",
        "ssmmessages:OpenControlChannel",
        "ssmmessages:OpenDataChannel",
    ]
