"""Scanning of JavaScript/TypeScript module code for imports and exports."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Dict, Iterator, List, Optional, Set

import tree_sitter_javascript as tsjs
import tree_sitter_typescript as tsts
from tree_sitter import Language, Node, Parser

from find_unused_exports.core.exceptions import ModuleParseError

logger = logging.getLogger(__name__)

# Module import names that aren't plain export names.
DEFAULT = "default"
NAMESPACE = "*"

TYPESCRIPT_EXTENSIONS = (".ts", ".mts", ".cts")
TSX_EXTENSIONS = (".tsx",)

IGNORE_COMMENT_PATTERN = re.compile(r"ignore unused exports *(.*)", re.IGNORECASE)
IGNORE_NAME_LIST_PATTERN = re.compile(r"\w+(?:, *\w+)*", re.ASCII)

# Named export declarations that declare a single name through their `name`
# field, e.g. `export function a() {}` or `export class A {}`.
NAMED_DECLARATION_TYPES = {
    "function_declaration",
    "generator_function_declaration",
    "function_signature",
    "class_declaration",
    "abstract_class_declaration",
    "interface_declaration",
    "type_alias_declaration",
    "enum_declaration",
    "internal_module",
}
VARIABLE_DECLARATION_TYPES = {"lexical_declaration", "variable_declaration"}

_SIMPLE_ESCAPES = {
    "0": "\0",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
}


@dataclass(slots=True)
class ModuleScan:
    """Scan of an ECMAScript module's imports and exports.

    ``imports`` maps each import specifier to the names imported through it,
    including ``"default"`` for a default import and ``"*"`` for a namespace
    import. ``exports`` holds the declared export names, including
    ``"default"`` for a default export. For example these statements::

        export const a = 1;
        export const b = 2;
        export default 3;

    are scanned as ``exports == {"a", "b", "default"}``.
    """

    imports: Dict[str, Set[str]] = field(default_factory=dict)
    exports: Set[str] = field(default_factory=set)

    def to_dict(self) -> Dict[str, object]:
        """Return a JSON-serializable representation."""
        return {
            "imports": {specifier: sorted(names) for specifier, names in self.imports.items()},
            "exports": sorted(self.exports),
        }


@lru_cache(maxsize=None)
def _get_language(grammar: str) -> Language:
    if grammar == "typescript":
        return Language(tsts.language_typescript())
    if grammar == "tsx":
        return Language(tsts.language_tsx())
    return Language(tsjs.language())


def _grammar_for_path(path: Optional[str]) -> str:
    if path and path.endswith(TYPESCRIPT_EXTENSIONS):
        return "typescript"
    if path and path.endswith(TSX_EXTENSIONS):
        return "tsx"
    # The JavaScript grammar also covers JSX, class fields and decorators.
    return "javascript"


def parse_module_code(code: str, path: Optional[str] = None) -> Node:
    """Parse module code and return the root ``program`` node.

    Raises :class:`ModuleParseError` at the first syntax error, as partial
    syntax trees aren't analysed.
    """
    parser = Parser(_get_language(_grammar_for_path(path)))
    tree = parser.parse(code.encode("utf-8"))
    root = tree.root_node

    if root.has_error:
        error_node = _find_first_error(root)
        row, column = error_node.start_point
        if error_node.is_missing:
            message = f"Missing {error_node.type}."
        else:
            message = f"Unexpected token {_node_text(error_node)[:20]!r}."
        raise ModuleParseError(message, path=path, line=row + 1, column=column + 1)

    return root


def _find_first_error(root: Node) -> Node:
    for node in _iter_nodes(root):
        if node.is_error or node.is_missing:
            return node
    return root


def _iter_nodes(root: Node, skip_types: frozenset = frozenset()) -> Iterator[Node]:
    """Yield nodes in document order, not descending into ``skip_types``."""
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        if node.type not in skip_types:
            stack.extend(reversed(node.children))


def _node_text(node: Node) -> str:
    return node.text.decode("utf-8") if node.text is not None else ""


def _named_children(node: Node) -> List[Node]:
    # Comments are "extras" and may appear between any tokens.
    return [child for child in node.named_children if child.type != "comment"]


def _has_token(node: Node, token: str) -> bool:
    """Check if ``node`` has an anonymous direct child ``token``."""
    return any(not child.is_named and child.type == token for child in node.children)


def _decode_escape(sequence: str) -> str:
    body = sequence[1:]
    if body in _SIMPLE_ESCAPES:
        return _SIMPLE_ESCAPES[body]
    if body.startswith("u{") and body.endswith("}"):
        return chr(int(body[2:-1], 16))
    if body[:1] in ("u", "x") and len(body) > 1:
        return chr(int(body[1:], 16))
    if body[:1] in ("\r", "\n", "\u2028", "\u2029"):
        # Line continuation.
        return ""
    return body


def string_value(node: Node) -> str:
    """Get the value of a ``string`` literal node."""
    parts = []
    for child in node.named_children:
        if child.type == "escape_sequence":
            parts.append(_decode_escape(_node_text(child)))
        else:
            parts.append(_node_text(child))
    return "".join(parts)


def _module_export_name(node: Node) -> str:
    # E.g. `export { a as "a-b-c" }`
    #                     ^^^^^^^
    if node.type == "string":
        return string_value(node)
    return _node_text(node)


def get_variable_declaration_identifier_names(variable_declaration: Node) -> List[str]:
    """Get identifier names bound by a variable declaration node.

    Used to find export names within a named export declaration that contains
    a variable declaration, e.g. ``export const { a, b: [c] } = d`` binds
    ``a`` and ``c``. Every declarator is considered (``var a, b = 1``), and
    only the bound side of each declarator, never its initial value.
    """
    if not isinstance(variable_declaration, Node) or (
        variable_declaration.type not in VARIABLE_DECLARATION_TYPES
    ):
        raise TypeError(
            "Argument 1 `variable_declaration` must be a variable declaration syntax node."
        )

    names: List[str] = []

    def collect_identifier_names(node: Node) -> None:
        if node.type in ("identifier", "shorthand_property_identifier_pattern"):
            # E.g. `export const a = 1`, `export const { a } = b`
            names.append(_node_text(node))
        elif node.type == "object_pattern":
            for prop in _named_children(node):
                if prop.type == "pair_pattern":
                    # The value, not the key, accounts for property renaming.
                    # E.g. `export const { a: b } = c`
                    #                         ^
                    value = prop.child_by_field_name("value")
                    if value is not None:
                        collect_identifier_names(value)
                else:
                    collect_identifier_names(prop)
        elif node.type == "array_pattern":
            # Skipped items (e.g. `[, a]`) have no node at all.
            for element in _named_children(node):
                collect_identifier_names(element)
        elif node.type == "rest_pattern":
            # E.g. `export const [a, ...b] = c`
            for argument in _named_children(node):
                collect_identifier_names(argument)
        elif node.type in ("assignment_pattern", "object_assignment_pattern"):
            # E.g. `export const { a = 1 } = b`
            left = node.child_by_field_name("left")
            if left is not None:
                collect_identifier_names(left)

    for declarator in _named_children(variable_declaration):
        if declarator.type != "variable_declarator":
            continue
        name = declarator.child_by_field_name("name")
        if name is not None:
            collect_identifier_names(name)

    return names


class _ModuleScanner:
    """Accumulate a :class:`ModuleScan` while walking a syntax tree."""

    # Import and export statements are handled whole, so nothing within them
    # (e.g. a dynamic import in an exported function) is visited.
    HANDLED_STATEMENTS = frozenset({"import_statement", "export_statement"})

    def __init__(self) -> None:
        self.scan = ModuleScan()

    def _imports_for(self, specifier: str) -> Set[str]:
        # There may be multiple statements for the same specifier.
        return self.scan.imports.setdefault(specifier, set())

    def visit(self, root: Node) -> None:
        for node in _iter_nodes(root, skip_types=self.HANDLED_STATEMENTS):
            if node.type == "import_statement":
                self._visit_import_statement(node)
            elif node.type == "export_statement":
                self._visit_export_statement(node)
            elif node.type == "call_expression":
                self._visit_call_expression(node)

    def _visit_import_statement(self, node: Node) -> None:
        source = node.child_by_field_name("source")
        if source is None:
            # E.g. TypeScript `import a = require("a")`
            return

        imports = self._imports_for(string_value(source))
        for clause in _named_children(node):
            if clause.type != "import_clause":
                continue
            for part in _named_children(clause):
                if part.type == "identifier":
                    # E.g. `import a from "a"`
                    imports.add(DEFAULT)
                elif part.type == "namespace_import":
                    # E.g. `import * as a from "a"`
                    imports.add(NAMESPACE)
                elif part.type == "named_imports":
                    # E.g. `import { a as b } from "a"` imports `a`.
                    for specifier in _named_children(part):
                        if specifier.type != "import_specifier":
                            continue
                        imported = specifier.child_by_field_name("name")
                        if imported is not None:
                            imports.add(_module_export_name(imported))

    def _visit_call_expression(self, node: Node) -> None:
        function = node.child_by_field_name("function")
        if function is None or function.type != "import":
            return

        arguments = node.child_by_field_name("arguments")
        if arguments is None:
            return
        args = _named_children(arguments)
        if args and args[0].type == "string":
            # A dynamic import pulls in everything; the names used at runtime
            # can't be determined statically.
            imports = self._imports_for(string_value(args[0]))
            imports.add(DEFAULT)
            imports.add(NAMESPACE)

    def _visit_export_statement(self, node: Node) -> None:
        exports = self.scan.exports

        if _has_token(node, "default"):
            # E.g. `export default 1`
            exports.add(DEFAULT)
            return

        declaration = node.child_by_field_name("declaration")
        if declaration is not None:
            self._visit_export_declaration(declaration)
            return

        source = node.child_by_field_name("source")
        if source is not None:
            imports = self._imports_for(string_value(source))

            if _has_token(node, "*"):
                imports.add(NAMESPACE)
                if _has_token(node, "as"):
                    # E.g. `export * as a from "a"` in grammars without a
                    # `namespace_export` node.
                    for child in _named_children(node):
                        if child.type in ("identifier", "string") and child != source:
                            exports.add(_module_export_name(child))
                # E.g. `export * from "a"`
                # The export names are unknown, so only the import is recorded.
                return

            for child in _named_children(node):
                if child.type == "namespace_export":
                    # E.g. `export * as a from "a"`
                    imports.add(NAMESPACE)
                    if _has_token(child, "default"):
                        # E.g. `export * as default from "a"`
                        exports.add(DEFAULT)
                    for alias in _named_children(child):
                        exports.add(_module_export_name(alias))
                elif child.type == "export_clause":
                    # E.g. `export { default as a, b as c } from "a"`
                    for specifier in self._export_specifiers(child):
                        name = specifier.child_by_field_name("name")
                        alias = specifier.child_by_field_name("alias")
                        imports.add(_module_export_name(name))
                        exports.add(_module_export_name(alias or name))
            return

        for child in _named_children(node):
            if child.type == "export_clause":
                # E.g. `const a = 1; export { a as b }`
                for specifier in self._export_specifiers(child):
                    exported = specifier.child_by_field_name("alias") or specifier.child_by_field_name("name")
                    exports.add(_module_export_name(exported))

    @staticmethod
    def _export_specifiers(clause: Node) -> Iterator[Node]:
        for specifier in _named_children(clause):
            if specifier.type == "export_specifier" and specifier.child_by_field_name("name") is not None:
                yield specifier

    def _visit_export_declaration(self, declaration: Node) -> None:
        if declaration.type == "ambient_declaration":
            # E.g. `export declare const a: number`
            for inner in _named_children(declaration):
                self._visit_export_declaration(inner)
        elif declaration.type in VARIABLE_DECLARATION_TYPES:
            # E.g. `export const a = 1`
            self.scan.exports.update(get_variable_declaration_identifier_names(declaration))
        elif declaration.type in NAMED_DECLARATION_TYPES:
            # E.g. `export function a() {}`
            name = declaration.child_by_field_name("name")
            if name is not None:
                self.scan.exports.add(_node_text(name))

    def apply_ignore_comments(self, root: Node) -> None:
        """Remove exports ignored by ``ignore unused exports`` comments."""
        for node in _iter_nodes(root):
            if node.type != "comment":
                continue

            match = IGNORE_COMMENT_PATTERN.fullmatch(_comment_value(node).strip())
            if not match:
                continue

            name_list = match.group(1)
            if not name_list:
                # No export names were listed, so all are ignored.
                self.scan.exports.clear()
            elif IGNORE_NAME_LIST_PATTERN.fullmatch(name_list):
                for name in name_list.split(","):
                    self.scan.exports.discard(name.strip())
            else:
                logger.debug("Ignoring malformed export name list %r", name_list)


def _comment_value(node: Node) -> str:
    text = _node_text(node)
    if text.startswith("//"):
        return text[2:]
    if text.startswith("/*") and text.endswith("*/"):
        return text[2:-2]
    return text


def scan_module_code(code: str, path: Optional[str] = None) -> ModuleScan:
    """
    Scans a JavaScript/TypeScript module's code for ECMAScript module imports
    and exports. CommonJS modules may only contain dynamic imports, but as they
    might be source code to be bundled or transpiled, regular imports and
    exports are still analysed.

    ``path`` selects the TypeScript grammar for ``.ts``, ``.mts``, ``.cts``
    and ``.tsx`` files and is included in parse errors.
    """
    if not isinstance(code, str):
        raise TypeError("Argument 1 `code` must be a string.")
    if path is not None and not isinstance(path, str):
        raise TypeError("Argument 2 `path` must be a string.")

    root = parse_module_code(code, path)
    scanner = _ModuleScanner()
    scanner.visit(root)
    scanner.apply_ignore_comments(root)
    return scanner.scan
