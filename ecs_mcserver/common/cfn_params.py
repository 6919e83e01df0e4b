# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Common parameters for CFN
All the titles, marked `_T` are strings which are then used the same way
across all imports, which gives consistency for CFN to use the same names.

You can change the names *values* so you like so long as you keep it Alphanumerical [a-zA-Z0-9]
"""

from troposphere import Parameter as CfnParameter

DEFAULT_GROUP_LABEL = "Uncategorized parameters"


class Parameter(CfnParameter):
    """
    Class to extend the default Parameter behaviour with the console group and label
    """

    def __init__(self, title, group_label=None, label=None, **kwargs):
        self.group_label = group_label if group_label else DEFAULT_GROUP_LABEL
        self.label = label
        super().__init__(title, **kwargs)
