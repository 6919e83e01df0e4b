#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Loads the JSON schemas shipped with ecs_mcserver
"""

import json

from importlib_resources import files
from referencing import Resource


def _schemas():
    specs_folder = files("ecs_mcserver").joinpath("specs")
    for spec_file in specs_folder.iterdir():
        if not spec_file.name.endswith(".spec.json"):
            continue
        yield Resource.from_contents(json.loads(spec_file.read_text()))


def load_spec(file_name: str) -> dict:
    """
    Returns the content of a JSON schema file shipped in ecs_mcserver/specs

    :param str file_name: name of the file, i.e. deployment.spec.json
    """
    return json.loads(
        files("ecs_mcserver").joinpath("specs").joinpath(file_name).read_text()
    )
