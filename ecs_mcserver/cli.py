# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Console script for ecs_mcserver.
"""

import argparse
import sys

import yaml
from botocore.exceptions import ClientError
from cfn_flip.yaml_dumper import LongCleanDumper

from ecs_mcserver import __version__
from ecs_mcserver.common.logging import LOG, VALID_LEVELS, set_log_level
from ecs_mcserver.common.settings import DeploymentSettings
from ecs_mcserver.exceptions import ConfigurationError, VpcLookupError
from ecs_mcserver.mcserver import generate_stacks


class ArgparseHelper(argparse._HelpAction):
    """
    Used to help print top level '--help' arguments from argparse
    when used with subparsers
    """

    def __call__(self, parser, namespace, values, option_string=None):
        parser.print_help()
        print()
        subparsers_actions = [
            action
            for action in parser._actions
            if isinstance(action, argparse._SubParsersAction)
        ]
        for subparsers_action in subparsers_actions:
            for choice, subparser in list(subparsers_action.choices.items()):
                if choice in [
                    cmd["name"] for cmd in DeploymentSettings.active_commands
                ] or choice in [
                    cmd["name"] for cmd in DeploymentSettings.validation_commands
                ]:
                    print(f"Command '{choice}'")
                    print(subparser.format_usage())
        parser.exit()


def main_parser():
    """
    Console script for ecs_mcserver.
    """
    parser = argparse.ArgumentParser(add_help=False)
    parser.add_argument(
        "-h",
        "--help",
        action=ArgparseHelper,
        help="show this help message and exit",
    )

    cmd_parsers = parser.add_subparsers(
        dest=DeploymentSettings.command_arg, help="Command to execute."
    )
    deployment_parser = argparse.ArgumentParser(add_help=False)
    base_command_parser = argparse.ArgumentParser(add_help=False)
    deployment_parser.add_argument(
        "--deployment-type",
        dest=DeploymentSettings.deployment_type_arg,
        required=False,
        type=str,
        help="Deployment type / environment, i.e. staging. Overrides env var deploymentType",
    )
    deployment_parser.add_argument(
        "--application-name",
        dest=DeploymentSettings.application_name_arg,
        required=False,
        type=str,
        help="Name of the application. Overrides env var applicationName",
    )
    deployment_parser.add_argument(
        "--application-abbreviation",
        dest=DeploymentSettings.application_abbreviation_arg,
        required=False,
        type=str,
        help="Application abbreviation. Overrides env var applicationAbbreviation",
    )
    deployment_parser.add_argument(
        "--account",
        dest=DeploymentSettings.account_arg,
        required=False,
        type=str,
        help="AWS Account ID to deploy to. Overrides env var account",
    )
    deployment_parser.add_argument(
        "--region",
        dest=DeploymentSettings.region_arg,
        required=False,
        type=str,
        help="Specify the region you want to build for. Overrides env var region",
    )
    deployment_parser.add_argument(
        "--env-file",
        dest=DeploymentSettings.env_file_arg,
        required=False,
        type=str,
        help="Path to a .env file to read the deployment parameters from",
    )
    deployment_parser.add_argument(
        "--image",
        dest=DeploymentSettings.image_arg,
        required=False,
        type=str,
        help="Docker image of the MC server.",
    )
    deployment_parser.add_argument(
        "--cpu",
        dest=DeploymentSettings.cpu_arg,
        required=False,
        type=int,
        help="Task CPU units. Defaults to 2048",
    )
    deployment_parser.add_argument(
        "--memory",
        dest=DeploymentSettings.ram_arg,
        required=False,
        type=int,
        help="Task memory in MiB. Defaults to 4096",
    )
    deployment_parser.add_argument(
        "--loglevel", type=str, help="Log level. Defaults to INFO", required=False
    )
    base_command_parser.add_argument(
        "-d",
        "--output-dir",
        required=False,
        help="Output directory to write all the templates to.",
        type=str,
        dest=DeploymentSettings.output_dir_arg,
        default=DeploymentSettings.default_output_dir,
    )
    base_command_parser.add_argument(
        "--format",
        help="Defines the format you want to use.",
        type=str,
        dest=DeploymentSettings.format_arg,
        choices=DeploymentSettings.allowed_formats,
        default=DeploymentSettings.default_format,
    )
    base_command_parser.add_argument(
        "--stack",
        help="Which stacks to generate. Defaults to all",
        type=str,
        dest=DeploymentSettings.stack_arg,
        choices=DeploymentSettings.allowed_stacks,
        default=DeploymentSettings.default_stack,
    )
    base_command_parser.add_argument(
        "--no-lookup",
        dest=DeploymentSettings.no_lookup_arg,
        action="store_true",
        help="Do not lookup the VPC. VpcId and PublicSubnets are left as parameters",
    )
    base_command_parser.add_argument(
        "--role-arn",
        dest=DeploymentSettings.arn_arg,
        help="Allow you to run API calls using a specific IAM role, within same or for cross-account",
        required=False,
    )
    base_command_parser.add_argument(
        "--disable-rollback",
        dest=DeploymentSettings.disable_rollback_arg,
        help="On create/plan, disable stack automatic rollback.",
        required=False,
        action="store_true",
    )
    for command in DeploymentSettings.active_commands:
        cmd_parsers.add_parser(
            name=command["name"],
            help=command["help"],
            parents=[deployment_parser, base_command_parser],
        )
    for command in DeploymentSettings.validation_commands:
        cmd_parsers.add_parser(
            name=command["name"], help=command["help"], parents=[deployment_parser]
        )

    for command in DeploymentSettings.neutral_commands:
        cmd_parsers.add_parser(name=command["name"], help=command["help"])
    return parser


def main(args=None):
    """
    Main entry point for CLI
    :return: status code
    """
    parser = main_parser()
    if args is None:
        args = sys.argv[1:]
    if not args:
        parser.print_help()
        return 0
    options = parser.parse_args(args)
    command = getattr(options, DeploymentSettings.command_arg)
    if command == DeploymentSettings.version_arg:
        print("ECS MC Server", __version__)
        return 0
    loglevel = getattr(options, "loglevel", None)
    if loglevel and not set_log_level(loglevel):
        print(f"Log level value {loglevel} is invalid. Must be one of {VALID_LEVELS}")
    LOG.debug(options)
    kwargs = {
        key: value
        for key, value in vars(options).items()
        if key != "loglevel" and value is not None
    }
    try:
        settings = DeploymentSettings(**kwargs)
        LOG.debug(settings)
        if command == DeploymentSettings.config_render_arg:
            print(yaml.dump(settings.to_dict(), Dumper=LongCleanDumper))
            return 0
        generate_stacks(settings)
    except (ConfigurationError, VpcLookupError, ClientError) as error:
        LOG.error(error)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())  # pragma: no cover
