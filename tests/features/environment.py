#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

from tempfile import mkdtemp


# -- CLEANUP FUNCTIONS:
def cleanup_mcserver_settings(context):
    print("CALLED: cleanup_mcserver_settings")
    for attribute in ["settings", "stacks"]:
        if hasattr(context, attribute):
            delattr(context, attribute)


# -- HOOKS:
def before_scenario(context, scenario):
    print("CALLED-HOOK: before_scenario:%s" % scenario.name)
    context.output_dir = mkdtemp(prefix="ecs-mcserver-")


def after_scenario(context, scenario):
    print("CALLED-HOOK: after_scenario:%s" % scenario.name)
    cleanup_mcserver_settings(context)
