# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Most commonly used functions shared across all modules.
"""

import re

NONALPHANUM = re.compile(r"([^a-zA-Z\d]+)")


def title_from_name(name: str) -> str:
    """
    Function to turn a dash/underscore separated name into a CFN compatible logical ID

    :param str name: the name, i.e. mc-server-efs-security-group
    :return: the logical ID, i.e. McServerEfsSecurityGroup
    :rtype: str
    """
    if not isinstance(name, str):
        raise TypeError("name must be of type", str, "got", type(name))
    title = "".join(part[:1].upper() + part[1:] for part in NONALPHANUM.split(name))
    title = NONALPHANUM.sub("", title)
    if not title:
        raise ValueError(f"Unable to define a logical ID from {name}")
    return title
