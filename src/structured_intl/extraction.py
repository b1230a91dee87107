"""
Message extraction from Python source code.

This module scans Python source files for calls to the ``intl`` message
functions and converts them into ``MainMessage`` objects.

Recognized call shapes::

    intl.message(f"Hello {name}", name="greeting", args=[name], desc="...")
    intl.plural(count, one="One item", other=f"{count} items",
                name="items", args=[count])
    intl.gender(who, female="her", male="him", other="them",
                name="pronoun", args=[who])
    intl.select(mode, {"fast": "Fast", "other": "Normal"},
                name="mode", args=[mode])

Plural, gender and select calls may also be interpolated inside the
f-string of a ``message`` call.

Usage Examples:
    >>> extraction = MessageExtraction(suppress_warnings=True)
    >>> messages = extraction.parse_file(Path("app/strings.py"))
    >>> sorted(messages)
    ['greeting', 'items']
"""

from __future__ import annotations

import ast
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import override

from .messages import (
    GENDER_CLAUSES,
    PLURAL_CLAUSES,
    Literal,
    MainMessage,
    Piece,
    Placeholder,
    SubMessage,
    SubMessageKind,
)

logger = logging.getLogger(__name__)

# Functions of the intl runtime that define messages
MESSAGE_FUNCTIONS = {"message", "plural", "gender", "select"}

# Module names the message functions may be called through
INTL_NAMESPACES = {"intl", "Intl"}

# Parameters never treated as message arguments in transformer mode
IMPLICIT_PARAMETERS = {"self", "cls"}


@dataclass(frozen=True)
class ExtractionWarning:
    """A recoverable problem found while scanning a source file."""

    filename: str
    line: int
    message: str

    @override
    def __str__(self) -> str:
        return f"{self.filename}:{self.line}: {self.message}"


class _InvalidMessage(Exception):
    """Raised inside the visitor to skip a malformed message call."""

    def __init__(self, reason: str, node: ast.AST) -> None:
        super().__init__(reason)
        self.reason: str = reason
        self.line: int = getattr(node, "lineno", 0)


@dataclass(frozen=True)
class _FunctionContext:
    name: str
    parameters: tuple[str, ...]


def get_function_name(func_node: ast.AST) -> str | None:
    """
    Return the intl function a call refers to, if any.

    Args:
        func_node: The ``func`` node of an ``ast.Call``

    Returns:
        The function name for bare names and ``intl.<name>`` attributes,
        None otherwise
    """
    if isinstance(func_node, ast.Name):
        name = func_node.id
    elif (
        isinstance(func_node, ast.Attribute)
        and isinstance(func_node.value, ast.Name)
        and func_node.value.id in INTL_NAMESPACES
    ):
        name = func_node.attr
    else:
        return None
    return name if name in MESSAGE_FUNCTIONS else None


class MessageExtraction:
    """
    Extracts messages from Python source files.

    Warnings are accumulated across every file parsed by the same instance
    and logged as they are found unless ``suppress_warnings`` is set.
    """

    def __init__(
        self,
        suppress_warnings: bool = False,
        allow_embedded_plurals: bool = True,
        description_required: bool = False,
    ) -> None:
        self.suppress_warnings: bool = suppress_warnings
        self.allow_embedded_plurals: bool = allow_embedded_plurals
        self.description_required: bool = description_required
        self.warnings: list[ExtractionWarning] = []

    @property
    def has_warnings(self) -> bool:
        """Whether any warning was reported so far."""
        return bool(self.warnings)

    def warn(self, filename: str, line: int, message: str) -> None:
        """Record a warning and log it unless warnings are suppressed."""
        warning = ExtractionWarning(filename, line, message)
        self.warnings.append(warning)
        if not self.suppress_warnings:
            logger.warning(str(warning))

    def parse_file(self, filepath: Path, transformer: bool = False) -> dict[str, MainMessage]:
        """
        Extract the messages defined in a single Python file.

        Args:
            filepath: Path to the Python file to process
            transformer: Take missing names and args from the enclosing
                function

        Returns:
            Mapping from message id to message

        Raises:
            FileNotFoundError: If the file doesn't exist
        """
        try:
            content = filepath.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.error(f"File not found: {filepath}")
            raise

        messages = self.parse_source(content, filepath, transformer)
        logger.info(f"Extracted {len(messages)} message(s) from {filepath}")
        return messages

    def parse_source(
        self, source: str, filepath: Path | None = None, transformer: bool = False
    ) -> dict[str, MainMessage]:
        """
        Extract the messages defined in Python source text.

        Args:
            source: Python source code
            filepath: Path the source came from, used in warnings
            transformer: Take missing names and args from the enclosing
                function

        Returns:
            Mapping from message id to message; empty if the source does not
            parse
        """
        filename = str(filepath) if filepath is not None else "<string>"
        try:
            tree = ast.parse(source, filename=filename)
        except SyntaxError as e:
            self.warn(filename, e.lineno or 0, f"Skipping file with syntax error: {e.msg}")
            return {}

        finder = MessageFinder(self, filename, filepath, transformer)
        finder.visit(tree)
        return finder.messages


class MessageFinder(ast.NodeVisitor):
    """AST visitor converting intl message calls into messages."""

    def __init__(
        self,
        extraction: MessageExtraction,
        filename: str,
        filepath: Path | None,
        transformer: bool,
    ) -> None:
        self.extraction: MessageExtraction = extraction
        self.filename: str = filename
        self.filepath: Path | None = filepath
        self.transformer: bool = transformer
        self.messages: dict[str, MainMessage] = {}
        self._functions: list[_FunctionContext] = []

    @override
    def visit_FunctionDef(self, node: ast.FunctionDef) -> None:
        self._visit_function(node)

    @override
    def visit_AsyncFunctionDef(self, node: ast.AsyncFunctionDef) -> None:
        self._visit_function(node)

    def _visit_function(self, node: ast.FunctionDef | ast.AsyncFunctionDef) -> None:
        arguments = node.args
        parameters = tuple(
            arg.arg
            for arg in [*arguments.posonlyargs, *arguments.args, *arguments.kwonlyargs]
            if arg.arg not in IMPLICIT_PARAMETERS
        )
        self._functions.append(_FunctionContext(node.name, parameters))
        self.generic_visit(node)
        _ = self._functions.pop()

    @override
    def visit_Call(self, node: ast.Call) -> None:
        """
        Visit function call nodes to find message definitions.

        Arguments of a recognized call are not visited further; nested
        plural/gender/select calls are handled as part of the message.

        Args:
            node: AST Call node to examine
        """
        func_name = get_function_name(node.func)
        if func_name is None:
            self.generic_visit(node)
            return

        try:
            message = self._convert_call(node, func_name)
        except _InvalidMessage as e:
            self.extraction.warn(self.filename, e.line, e.reason)
            return

        if message is None:
            return

        existing = self.messages.get(message.id)
        if existing is not None and existing.pieces != message.pieces:
            self.extraction.warn(
                self.filename,
                node.lineno,
                f"Message {message.id!r} is defined more than once with different text",
            )
        self.messages[message.id] = message
        logger.debug(f"Found message {message.id!r} at line {node.lineno}")

    def _convert_call(self, node: ast.Call, func_name: str) -> MainMessage | None:
        keywords = {kw.arg: kw.value for kw in node.keywords if kw.arg is not None}
        if _is_true(keywords.get("skip")):
            return None

        function = self._functions[-1] if self._functions else None
        arguments = self._message_arguments(keywords.get("args"), function, node)

        if func_name == "message":
            if not node.args:
                raise _InvalidMessage("intl.message requires the message text", node)
            pieces = self._convert_text(node.args[0], arguments)
        else:
            pieces = (self._convert_sub_message(node, func_name, arguments),)

        message_id = self._message_name(keywords.get("name"), function, arguments, pieces, node)
        description = self._description(keywords.get("desc"), message_id, node)
        examples = self._examples(keywords.get("examples"), node)

        return MainMessage(
            id=message_id,
            pieces=pieces,
            arguments=arguments,
            description=description,
            examples=examples,
            source_file=self.filepath,
        )

    def _message_arguments(
        self,
        args_node: ast.expr | None,
        function: _FunctionContext | None,
        node: ast.Call,
    ) -> tuple[str, ...]:
        if args_node is None:
            if self.transformer and function is not None:
                return function.parameters
            return ()

        if not isinstance(args_node, (ast.List, ast.Tuple)) or not all(
            isinstance(element, ast.Name) for element in args_node.elts
        ):
            raise _InvalidMessage(
                "The 'args' argument must be a list of simple variable names", node
            )
        names = tuple(element.id for element in args_node.elts if isinstance(element, ast.Name))

        if function is not None:
            unknown = [name for name in names if name not in function.parameters]
            if unknown:
                raise _InvalidMessage(
                    f"The 'args' argument must match the parameters of {function.name}(): "
                    f"unknown {', '.join(unknown)}",
                    node,
                )
        return names

    def _message_name(
        self,
        name_node: ast.expr | None,
        function: _FunctionContext | None,
        arguments: tuple[str, ...],
        pieces: tuple[Piece, ...],
        node: ast.Call,
    ) -> str:
        if name_node is not None:
            name = _string_constant(name_node)
            if not name:
                raise _InvalidMessage("The 'name' argument must be a non-empty string literal", node)
            if function is not None and not self.transformer and name != function.name:
                raise _InvalidMessage(
                    f"The 'name' argument {name!r} must match the enclosing function {function.name!r}",
                    node,
                )
            return name

        if self.transformer and function is not None:
            return function.name
        if not arguments and len(pieces) == 1 and isinstance(pieces[0], Literal):
            # Messages without parameters are identified by their text
            return pieces[0].text
        raise _InvalidMessage(
            "The 'name' argument is required for messages with arguments or selectors", node
        )

    def _description(
        self, desc_node: ast.expr | None, message_id: str, node: ast.Call
    ) -> str | None:
        description: str | None = None
        if desc_node is not None:
            description = _string_constant(desc_node)
            if description is None:
                raise _InvalidMessage("The 'desc' argument must be a string literal", node)
        if self.extraction.description_required and not description:
            self.extraction.warn(
                self.filename, node.lineno, f"Message {message_id!r} has no description"
            )
        return description

    def _examples(self, examples_node: ast.expr | None, node: ast.Call) -> dict[str, tuple[str, ...]]:
        if examples_node is None:
            return {}
        try:
            value: object = ast.literal_eval(examples_node)
        except (ValueError, TypeError, SyntaxError, MemoryError, RecursionError) as e:
            raise _InvalidMessage("The 'examples' argument must be a literal dict", node) from e
        if not isinstance(value, dict):
            raise _InvalidMessage("The 'examples' argument must be a literal dict", node)

        examples: dict[str, tuple[str, ...]] = {}
        for key, example in value.items():  # pyright: ignore[reportUnknownVariableType]
            if isinstance(example, str):
                examples[str(key)] = (example,)  # pyright: ignore[reportUnknownArgumentType]
            elif isinstance(example, (list, tuple)) and all(
                isinstance(item, str) for item in example  # pyright: ignore[reportUnknownVariableType]
            ):
                examples[str(key)] = tuple(example)  # pyright: ignore[reportUnknownArgumentType]
            else:
                raise _InvalidMessage(
                    f"Examples for {key!r} must be a string or a list of strings", node
                )
        return examples

    def _convert_text(
        self, node: ast.expr, arguments: tuple[str, ...], nested: bool = False
    ) -> tuple[Piece, ...]:
        if isinstance(node, ast.Constant) and isinstance(node.value, str):
            return (Literal(node.value),) if node.value else ()
        if not isinstance(node, ast.JoinedStr):
            raise _InvalidMessage("Message text must be a string literal or an f-string", node)

        pieces: list[Piece] = []
        for value in node.values:
            if isinstance(value, ast.Constant) and isinstance(value.value, str):
                pieces.append(Literal(value.value))
            elif isinstance(value, ast.FormattedValue):
                pieces.append(self._convert_interpolation(value, arguments, nested))
            else:
                raise _InvalidMessage("Unsupported f-string element", value)
        return tuple(pieces)

    def _convert_interpolation(
        self, value: ast.FormattedValue, arguments: tuple[str, ...], nested: bool
    ) -> Piece:
        if value.conversion != -1 or value.format_spec is not None:
            raise _InvalidMessage("Conversions and format specs are not allowed in messages", value)

        expression = value.value
        if isinstance(expression, ast.Name):
            if expression.id not in arguments:
                raise _InvalidMessage(
                    f"{expression.id!r} is interpolated but is not one of the message args",
                    value,
                )
            return Placeholder(arguments.index(expression.id))

        if isinstance(expression, ast.Call):
            func_name = get_function_name(expression.func)
            if func_name is not None and func_name != "message":
                if not nested and not self.extraction.allow_embedded_plurals:
                    raise _InvalidMessage(
                        "Plurals, genders and selects must be at the top level of a message",
                        value,
                    )
                return self._convert_sub_message(expression, func_name, arguments)

        raise _InvalidMessage(
            "Only message args and plural/gender/select calls can be interpolated", value
        )

    def _convert_sub_message(
        self, node: ast.Call, func_name: str, arguments: tuple[str, ...]
    ) -> SubMessage:
        kind = SubMessageKind(func_name)
        if not node.args or not isinstance(node.args[0], ast.Name):
            raise _InvalidMessage(f"intl.{func_name} requires a variable as its first argument", node)
        argument = node.args[0].id
        if argument not in arguments:
            raise _InvalidMessage(f"{argument!r} is not one of the message args", node)

        keywords = {kw.arg: kw.value for kw in node.keywords if kw.arg is not None}
        clause_nodes: dict[str, ast.expr] = {}
        match kind:
            case SubMessageKind.PLURAL:
                clause_nodes = {key: keywords[key] for key in PLURAL_CLAUSES if key in keywords}
            case SubMessageKind.GENDER:
                clause_nodes = {key: keywords[key] for key in GENDER_CLAUSES if key in keywords}
            case SubMessageKind.SELECT:
                cases = node.args[1] if len(node.args) > 1 else keywords.get("cases")
                if not isinstance(cases, ast.Dict):
                    raise _InvalidMessage("intl.select requires a literal dict of cases", node)
                for key_node, value_node in zip(cases.keys, cases.values):
                    key = _string_constant(key_node) if key_node is not None else None
                    if key is None:
                        raise _InvalidMessage("Select case keys must be string literals", node)
                    clause_nodes[key] = value_node

        if "other" not in clause_nodes:
            raise _InvalidMessage(f"intl.{func_name} requires an 'other' case", node)

        clauses = {
            key: self._convert_text(clause, arguments, nested=True)
            for key, clause in clause_nodes.items()
        }
        return SubMessage(kind, argument, clauses)


def _string_constant(node: ast.expr) -> str | None:
    if isinstance(node, ast.Constant) and isinstance(node.value, str):
        return node.value
    return None


def _is_true(node: ast.expr | None) -> bool:
    return isinstance(node, ast.Constant) and node.value is True
