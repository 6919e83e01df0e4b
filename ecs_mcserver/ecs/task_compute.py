#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Fargate CPU/RAM combinations

| CPU Value | Memory Value                                    |
|-----------|-------------------------------------------------|
| 256       | 512 MiB, 1 GB, 2 GB                             |
| 512       | 1 GB, 2 GB, 3 GB, 4 GB                          |
| 1024      | 2 GB, 3 GB, 4 GB, 5 GB, 6 GB, 7 GB, 8 GB        |
| 2048      | Between 4 GB and 16 GB in 1 GB increments       |
| 4096      | Between 8 GB and 30 GB in 1 GB increments       |
| 8192      | Between 16 GB and 60 GB in 4 GB increments      |
| 16384     | Between 32 GB and 120 GB in 8 GB increments     |
"""

from ecs_mcserver.common.logging import LOG
from ecs_mcserver.ecs.ecs_params import FARGATE_MODES
from ecs_mcserver.exceptions import InvalidFargateConfiguration


def find_closest_ram_config(ram, ram_range):
    """
    Function to find the closest RAM configuration

    :param int ram: amount of RAM we are trying to match up
    :param list ram_range: List of possible values for Fargate
    :return: the closest amount of RAM.
    :rtype: int
    """
    LOG.debug(f"RAM RANGE {ram_range}")
    for ram_value in ram_range:
        if ram_value >= ram:
            LOG.debug(f"Found RAM {ram_value} closest to {ram}")
            return ram_value
    return ram_range[-1]


def find_closest_fargate_configuration(cpu, ram, as_param_string=False):
    """
    Function to get the closest Fargate CPU / RAM Configuration out of a CPU and RAM combination.

    :param int cpu: CPU count for the Task Definition
    :param int ram: RAM in MB for the Task Definition
    :param bool as_param_string: Returns the value as a CPU!RAM string.
    :return:
    """
    fargate_cpus = sorted(FARGATE_MODES.keys())
    fargate_cpu = fargate_cpus[-1]
    for cpu_value in fargate_cpus:
        if cpu_value >= cpu:
            fargate_cpu = cpu_value
            break
    fargate_ram = find_closest_ram_config(ram, FARGATE_MODES[fargate_cpu])
    if as_param_string:
        return f"{fargate_cpu}!{fargate_ram}"
    return fargate_cpu, fargate_ram


def is_valid_fargate_configuration(cpu: int, ram: int) -> bool:
    return cpu in FARGATE_MODES and ram in FARGATE_MODES[cpu]


def validate_fargate_configuration(cpu: int, ram: int) -> None:
    """
    Makes sure the CPU/RAM combination is accepted by Fargate

    :raises InvalidFargateConfiguration: when it is not
    """
    if is_valid_fargate_configuration(cpu, ram):
        return
    closest_cpu, closest_ram = find_closest_fargate_configuration(cpu, ram)
    raise InvalidFargateConfiguration(
        f"CPU {cpu} / RAM {ram} is not a valid Fargate configuration."
        f" Closest valid configuration is CPU {closest_cpu} / RAM {closest_ram}",
    )
