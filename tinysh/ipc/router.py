"""
Stage Router

Hands a parsed list of stages to the handler for the operator that
follows the first stage.

Author: YSNRFD
Version: 1.0.0
"""

from typing import List, NoReturn

from tinysh.core.config_loader import Config
from tinysh.exceptions import PipelineSyntaxError
from tinysh.ipc.pipe import handle_pipe
from tinysh.ipc.redirection import RedirectMode, handle_redirect
from tinysh.logger import get_logger
from tinysh.process.launcher import Launcher
from tinysh.shell.parser import FeatureType, Stage


def run_stages(stages: List[Stage], config: Config) -> NoReturn:
    """
    Execute stages in the current process; never returns.

    - PIPE: pipe the first stage into the remaining ones
    - OVERWRITE / APPEND: redirect the first stage into the file named
      by the second
    - NONE: launch the only stage left
    """
    if not stages:
        raise PipelineSyntaxError("empty command")

    stage = stages[0]
    operator = stage.operator

    if operator is FeatureType.PIPE:
        handle_pipe(stage.argv, stages[1:], config)

    if operator.is_redirection:
        handle_redirect(
            stage.argv,
            stages[1].argv,
            RedirectMode.from_feature(operator),
            config
        )

    get_logger('router').trace(
        f"Executing the tail command: {stage.argv[0]}", config.verbose
    )
    Launcher(config).launch(stage.argv)
