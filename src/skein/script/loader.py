"""Loading compiled dialogue scripts from JSON data.

The compiler that turns authored dialogue into this format lives outside this
package. Its output is a JSON document listing nodes, each with a body of
statements tagged by ``"type"``.

Script anatomy:
{
  "nodes": [
    {
      "title": "Start",
      "tags": ["intro"],
      "body": [
        {"type": "declare", "name": "$my_var", "default": false},
        {"type": "line", "text": "Martin: Hello {$player_name}!", "id": "line:0", "tags": ["greeting"]},
        {"type": "command", "text": "set_background \"town square\""},
        {"type": "command", "name": "echo", "args": ["hi"]},
        {"type": "set", "name": "$my_var", "expression": "!$my_var"},
        {"type": "options", "options": [
          {"text": "Option 1", "body": [{"type": "set", "name": "$my_var", "expression": "true"}]},
          {"text": "Secret", "condition": "$my_var == true", "jump": "Secret"},
          {"text": "Leave", "jump": "End"}
        ]},
        {"type": "if", "clauses": [{"condition": "$my_var", "body": [...]}], "else": [...]},
        {"type": "jump", "target": "End"}
      ]
    }
  ]
}

Expressions (``condition`` and ``expression``) may be expression text or a
tagged expression tree; see skein.expressions.expression_from_data().
``var_type`` on a declaration is optional and inferred from the default.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from skein.commands import parse_command_text
from skein.conf import settings
from skein.errors import ScriptLoadError, TypeMismatchError, UnknownNodeError
from skein.expressions import expression_from_data
from skein.script.model import (
    Command,
    Conditional,
    ConditionalClause,
    Jump,
    Line,
    Node,
    Option,
    OptionBlock,
    Script,
    SetVariable,
    Statement,
    VariableDeclaration,
)
from skein.variables import VariableType, normalize

logger = logging.getLogger(__name__)


def load_script_file(script_path: str | Path, *, validate_references: bool | None = None) -> Script:
    """Load a compiled script from a JSON file.

    Args:
        script_path: Path to the compiled script JSON file.
        validate_references: Fail on jumps to unknown nodes. Defaults to the
            DIALOGUE_VALIDATE_REFERENCES setting.

    Raises:
        ScriptLoadError: If the file is missing, not JSON, or malformed.
        UnknownNodeError: If validating and a reference is unresolved.
    """
    path = Path(script_path)
    try:
        with path.open(encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as exc:
        msg = f"Script file not found: {path}"
        raise ScriptLoadError(msg) from exc
    except (OSError, json.JSONDecodeError) as exc:
        msg = f"Failed to read script file {path}: {exc}"
        raise ScriptLoadError(msg) from exc

    script = load_script_data(data, validate_references=validate_references)
    logger.info("ScriptLoader: Loaded %d nodes from %s", len(script), path)
    return script


def load_script_data(data: dict[str, Any], *, validate_references: bool | None = None) -> Script:
    """Build a Script from already-parsed JSON data.

    Args:
        data: Dictionary with a "nodes" list.
        validate_references: Fail on jumps to unknown nodes. Defaults to the
            DIALOGUE_VALIDATE_REFERENCES setting.

    Raises:
        ScriptLoadError: If the data is malformed.
        UnknownNodeError: If validating and a reference is unresolved.
    """
    if not isinstance(data, dict) or not isinstance(data.get("nodes"), list):
        msg = "Compiled script must be an object with a 'nodes' list"
        raise ScriptLoadError(msg)

    script = Script.from_nodes(_parse_node(node_data) for node_data in data["nodes"])

    if validate_references is None:
        validate_references = settings.DIALOGUE_VALIDATE_REFERENCES
    missing = script.missing_references()
    if missing:
        if validate_references:
            _, target = missing[0]
            raise UnknownNodeError(target)
        for title, target in missing:
            logger.warning("ScriptLoader: Node '%s' references unknown node '%s'", title, target)

    logger.debug("ScriptLoader: Parsed %d nodes", len(script))
    return script


def _parse_node(data: Any) -> Node:  # noqa: ANN401
    if not isinstance(data, dict):
        msg = f"Node must be an object, got {data!r}"
        raise ScriptLoadError(msg)
    title = data.get("title")
    if not isinstance(title, str) or not title:
        msg = f"Node is missing a title: {data!r}"
        raise ScriptLoadError(msg)
    try:
        body = _parse_body(data.get("body", []))
    except ScriptLoadError as exc:
        msg = f"In node '{title}': {exc}"
        raise ScriptLoadError(msg) from exc
    return Node(title, body, _parse_tags(data))


def _parse_body(data: Any) -> tuple[Statement, ...]:  # noqa: ANN401
    if not isinstance(data, list):
        msg = f"Statement list expected, got {data!r}"
        raise ScriptLoadError(msg)
    return tuple(_parse_statement(item) for item in data)


def _parse_tags(data: dict[str, Any]) -> tuple[str, ...]:
    tags = data.get("tags", [])
    if not isinstance(tags, list) or not all(isinstance(tag, str) for tag in tags):
        msg = f"Tags must be a list of strings, got {tags!r}"
        raise ScriptLoadError(msg)
    return tuple(tags)


def _require(data: dict[str, Any], key: str, kind: type | tuple[type, ...]) -> Any:  # noqa: ANN401
    value = data.get(key)
    if not isinstance(value, kind):
        msg = f"'{data.get('type')}' statement needs '{key}', got {value!r}"
        raise ScriptLoadError(msg)
    return value


def _parse_statement(data: Any) -> Statement:  # noqa: ANN401, PLR0911
    if not isinstance(data, dict):
        msg = f"Statement must be an object, got {data!r}"
        raise ScriptLoadError(msg)

    kind = data.get("type")
    if kind == "line":
        return Line(_require(data, "text", str), data.get("id"), _parse_tags(data))
    if kind == "command":
        return _parse_command(data)
    if kind == "declare":
        return _parse_declaration(data)
    if kind == "set":
        return SetVariable(_require(data, "name", str), expression_from_data(data.get("expression")))
    if kind == "jump":
        return Jump(_require(data, "target", str))
    if kind == "options":
        options = _require(data, "options", list)
        return OptionBlock(tuple(_parse_option(option) for option in options))
    if kind == "if":
        clauses = _require(data, "clauses", list)
        return Conditional(
            tuple(_parse_clause(clause) for clause in clauses),
            _parse_body(data.get("else", [])),
        )

    msg = f"Unknown statement type: {kind!r}"
    raise ScriptLoadError(msg)


def _parse_command(data: dict[str, Any]) -> Command:
    if "text" in data:
        text = _require(data, "text", str)
        name, args = parse_command_text(text)
        return Command(name, tuple(args), text)
    name = _require(data, "name", str)
    args = data.get("args", [])
    if not isinstance(args, list):
        msg = f"Command args must be a list, got {args!r}"
        raise ScriptLoadError(msg)
    args = tuple(str(arg) for arg in args)
    return Command(name, args, " ".join((name, *args)))


def _parse_declaration(data: dict[str, Any]) -> VariableDeclaration:
    name = _require(data, "name", str)
    default = data.get("default")
    type_name = data.get("var_type")
    if type_name is not None and not isinstance(type_name, str):
        msg = f"Declaration of '{name}' has invalid var_type {type_name!r}"
        raise ScriptLoadError(msg)
    try:
        default_type = VariableType.of_value(default)
        var_type = VariableType.from_name(type_name) if type_name is not None else default_type
    except TypeMismatchError as exc:
        msg = f"Invalid declaration of '{name}': {exc}"
        raise ScriptLoadError(msg) from exc
    if default_type is not var_type:
        msg = f"Default {default!r} of '{name}' is not a {var_type.value}"
        raise ScriptLoadError(msg)
    return VariableDeclaration(name, var_type, normalize(default))


def _parse_option(data: Any) -> Option:  # noqa: ANN401
    if not isinstance(data, dict):
        msg = f"Option must be an object, got {data!r}"
        raise ScriptLoadError(msg)
    text = data.get("text")
    if not isinstance(text, str):
        msg = f"Option needs 'text', got {text!r}"
        raise ScriptLoadError(msg)
    condition = data.get("condition")
    jump = data.get("jump")
    if jump is not None and not isinstance(jump, str):
        msg = f"Option jump must be a node title, got {jump!r}"
        raise ScriptLoadError(msg)
    return Option(
        text=text,
        guard=expression_from_data(condition) if condition is not None else None,
        body=_parse_body(data.get("body", [])),
        jump_target=jump,
        line_id=data.get("id"),
        tags=_parse_tags(data),
    )


def _parse_clause(data: Any) -> ConditionalClause:  # noqa: ANN401
    if not isinstance(data, dict) or "condition" not in data:
        msg = f"Conditional clause needs a 'condition': {data!r}"
        raise ScriptLoadError(msg)
    return ConditionalClause(expression_from_data(data["condition"]), _parse_body(data.get("body", [])))
