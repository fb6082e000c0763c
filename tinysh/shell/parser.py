"""
Command Parser Module

Turns a raw input line into argument vectors and pipeline stages.

Author: YSNRFD
Version: 1.0.0
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List

from tinysh.core.config_loader import DEFAULT_DELIMITERS
from tinysh.exceptions import PipelineSyntaxError


class FeatureType(Enum):
    """Operators that connect or redirect pipeline stages."""
    NONE = "none"
    APPEND = ">>"
    OVERWRITE = ">"
    PIPE = "|"

    @property
    def is_redirection(self) -> bool:
        return self in (FeatureType.APPEND, FeatureType.OVERWRITE)


# Checked in this order: ">>" before ">".
OPERATORS = {
    '>>': FeatureType.APPEND,
    '>': FeatureType.OVERWRITE,
    '|': FeatureType.PIPE,
}


@dataclass
class Pipeline:
    """A command split around exactly one operator, which belongs to neither side."""
    head: List[str] = field(default_factory=list)
    tail: List[str] = field(default_factory=list)


@dataclass
class Stage:
    """One argument vector and the operator that follows it."""
    argv: List[str]
    operator: FeatureType = FeatureType.NONE


def tokenize(line: str, delimiters: str = DEFAULT_DELIMITERS) -> List[str]:
    """
    Split a line into words on any of the delimiter characters.

    The line is never modified and no state survives the call, so
    independent callers may tokenize concurrently.

    Example:
        >>> tokenize("  ls  -la ")
        ['ls', '-la']
    """
    tokens = []
    current = []

    for char in line:
        if char in delimiters:
            if current:
                tokens.append(''.join(current))
                current = []
            continue
        current.append(char)

    # Don't forget last token
    if current:
        tokens.append(''.join(current))

    return tokens


def classify(argv: List[str]) -> FeatureType:
    """Return the first operator found in argv, or FeatureType.NONE."""
    for token in argv:
        if token == '>>':
            return FeatureType.APPEND
        if token == '>':
            return FeatureType.OVERWRITE
        if token == '|':
            return FeatureType.PIPE
    return FeatureType.NONE


def split(argv: List[str]) -> Pipeline:
    """
    Split argv around its first operator.

    The tail keeps any further operators untouched.

    Raises:
        PipelineSyntaxError: If argv holds no operator at all
    """
    for i, token in enumerate(argv):
        if token in OPERATORS:
            return Pipeline(head=list(argv[:i]), tail=list(argv[i + 1:]))
    raise PipelineSyntaxError("no operator to split on")


def parse_stages(argv: List[str]) -> List[Stage]:
    """
    Parse argv into the flat, ordered list of its stages.

    Each stage carries the operator that follows it; the last stage
    carries FeatureType.NONE. The stage after a redirection holds the
    destination path and must end the command.

    Example:
        >>> parse_stages(['ls', '|', 'wc', '-l', '>', 'count.txt'])
        [Stage(argv=['ls'], operator=<FeatureType.PIPE: '|'>),
         Stage(argv=['wc', '-l'], operator=<FeatureType.OVERWRITE: '>'>),
         Stage(argv=['count.txt'], operator=<FeatureType.NONE: 'none'>)]

    Raises:
        PipelineSyntaxError: For an empty stage or a redirection that is
            followed by another operator
    """
    stages: List[Stage] = []
    rest = list(argv)

    while True:
        feature = classify(rest)
        if feature is FeatureType.NONE:
            break

        pipeline = split(rest)
        if not pipeline.head and stages and stages[-1].operator.is_redirection:
            raise PipelineSyntaxError(
                f"missing file name after '{stages[-1].operator.value}'",
                token=stages[-1].operator.value
            )
        if not pipeline.head:
            raise PipelineSyntaxError(
                f"missing command before '{feature.value}'",
                token=feature.value
            )
        if stages and stages[-1].operator.is_redirection:
            raise PipelineSyntaxError(
                f"redirection must end the command, found '{feature.value}' "
                f"after '{stages[-1].operator.value} {pipeline.head[0]}'",
                token=feature.value
            )
        stages.append(Stage(argv=pipeline.head, operator=feature))
        rest = pipeline.tail

    if not rest:
        if not stages:
            raise PipelineSyntaxError("empty command")
        last = stages[-1].operator
        if last.is_redirection:
            raise PipelineSyntaxError(
                f"missing file name after '{last.value}'",
                token=last.value
            )
        raise PipelineSyntaxError(
            f"missing command after '{last.value}'",
            token=last.value
        )

    stages.append(Stage(argv=rest))
    return stages
