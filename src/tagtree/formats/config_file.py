"""``name = value`` configuration files.

Each non-blank line outside ``#`` comments names an option and its value.
Options are dispatched to handlers registered in a :class:`ConfigRegistry`.
Bad lines never abort loading; they are collected as diagnostics.
"""

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional, Union

from tagtree.character import LineReader, TextBuffer
from tagtree.shared import DiagnosticEntry, DiagnosticSeverity, get_logger

ENTRY_PATTERN = re.compile(r"^\s*(\S+.*?\S*)\s*=\s*(.+)$")
COMMENT_MARKER = "#"

ConfigAction = Callable[[str], None]


class ConfigRegistry:
    """Maps option names to the actions that consume their values.

    Examples:
        >>> settings = {}
        >>> registry = ConfigRegistry()
        >>> registry.register("Name", lambda value: settings.update(name=value))
        >>> registry.apply("NAME", "tagtree")
        True
        >>> settings
        {'name': 'tagtree'}
    """

    def __init__(self, case_sensitive: bool = False) -> None:
        self.case_sensitive = case_sensitive
        self._actions: Dict[str, ConfigAction] = {}

    def _key(self, variable: str) -> str:
        return variable if self.case_sensitive else variable.lower()

    def register(self, variable: str, action: ConfigAction) -> None:
        """Call ``action`` with the value whenever ``variable`` is set."""
        if not variable:
            raise ValueError("Config variable name cannot be empty")
        self._actions[self._key(variable)] = action

    def apply(self, variable: str, value: str) -> bool:
        """Run the action for ``variable``; False when no action is registered."""
        action = self._actions.get(self._key(variable))
        if action is None:
            return False
        action(value)
        return True

    def __contains__(self, variable: str) -> bool:
        return self._key(variable) in self._actions

    @property
    def variables(self) -> List[str]:
        return list(self._actions)


@dataclass
class ConfigLoadResult:
    """Options applied from one config file and the problems found in it."""

    applied: Dict[str, str] = field(default_factory=dict)
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.diagnostics

    def add_warning(self, message: str, line: int, **details: str) -> None:
        self.diagnostics.append(DiagnosticEntry(
            severity=DiagnosticSeverity.WARNING,
            message=message,
            component="config_loader",
            line=line,
            details=details or None,
        ))


def _open(source: Union[str, Path, TextBuffer, LineReader]) -> LineReader:
    if isinstance(source, LineReader):
        return source
    if isinstance(source, Path):
        return LineReader(TextBuffer.load(source))
    return LineReader(source)


def load_config(
    source: Union[str, Path, TextBuffer, LineReader],
    registry: ConfigRegistry,
    correlation_id: Optional[str] = None
) -> ConfigLoadResult:
    """Read every option in ``source`` into ``registry``.

    A ``str`` is the config text itself; pass a :class:`~pathlib.Path` to read
    a file. Lines that do not match ``name = value``, unknown options and
    values rejected by their action become warnings in the result.
    """
    logger = get_logger(__name__, correlation_id, "config_loader")
    result = ConfigLoadResult()

    for line_number, line in enumerate(_open(source), start=1):
        line = line.split(COMMENT_MARKER, 1)[0].strip()
        if not line:
            continue

        match = ENTRY_PATTERN.match(line)
        if match is None:
            result.add_warning(f"{line}: isn't correct syntax for a config line", line_number)
            logger.warning("Malformed config line", extra={"line": line_number})
            continue

        variable, value = match.group(1), match.group(2).strip()
        try:
            applied = registry.apply(variable, value)
        except (TypeError, ValueError) as e:
            result.add_warning(
                f"Invalid value for config option {variable}: {e}",
                line_number,
                variable=variable,
                value=value,
            )
            logger.warning(
                "Config value rejected",
                extra={"line": line_number, "variable": variable},
            )
            continue

        if not applied:
            result.add_warning(
                f"Invalid config option: {variable}", line_number, variable=variable
            )
            logger.warning(
                "Unknown config option",
                extra={"line": line_number, "variable": variable},
            )
            continue
        result.applied[variable] = value

    logger.debug(
        "Config loaded",
        extra={"applied": len(result.applied), "problems": len(result.diagnostics)},
    )
    return result
