import os
import re

import pytest

from find_unused_exports.core.analyzer import find_unused_exports, is_directory_path
from find_unused_exports.core.exceptions import ConfigurationError, ModuleParseError


def make_project(root, files):
    for relative_path, content in files.items():
        path = root / relative_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return root


def module_path(root, relative_path):
    return os.path.join(str(root), *relative_path.split("/"))


def test_files_without_exports_or_imports(tmp_path):
    make_project(tmp_path, {"a.mjs": "const a = 1;\n", "b.mjs": "console.log(1);\n"})
    assert find_unused_exports(cwd=str(tmp_path)) == {}


def test_multiple_files_importing_from_the_same_file(tmp_path):
    make_project(
        tmp_path,
        {
            "a.mjs": "export const a = 1;\nexport const b = 1;\n",
            "b.mjs": 'import { a } from "./a.mjs";\n',
            "c.mjs": 'import { b } from "./a.mjs";\n',
        },
    )
    assert find_unused_exports(cwd=str(tmp_path)) == {}


def test_some_unused_exports(tmp_path):
    make_project(
        tmp_path,
        {
            "a.mjs": "export const a = 1;\nexport const b = 1;\nexport default 1;\n",
            "b.mjs": 'import { b } from "./a.mjs";\nexport const c = 1;\nexport { b };\n',
        },
    )
    assert find_unused_exports(cwd=str(tmp_path)) == {
        module_path(tmp_path, "a.mjs"): {"default", "a"},
        module_path(tmp_path, "b.mjs"): {"b", "c"},
    }


def test_namespace_import_without_default_import(tmp_path):
    make_project(
        tmp_path,
        {
            "a.mjs": "export const a = 1;\nexport default 1;\n",
            "b.mjs": 'import * as a from "./a.mjs";\n',
        },
    )
    # A namespace import uses every export, including the default.
    assert find_unused_exports(cwd=str(tmp_path)) == {}


def test_dynamic_import(tmp_path):
    make_project(
        tmp_path,
        {
            "a.mjs": "export const a = 1;\nexport default 1;\n",
            "b.cjs": 'import("./a.mjs").then(console.log);\n',
        },
    )
    assert find_unused_exports(cwd=str(tmp_path)) == {}


def test_bare_and_unresolvable_import_specifiers(tmp_path):
    make_project(
        tmp_path,
        {
            "a.mjs": 'import a from "a";\nimport b from "./missing.mjs";\nexport default [a, b];\n',
            "b.mjs": 'import c from "./a.mjs";\n',
        },
    )
    assert find_unused_exports(cwd=str(tmp_path)) == {}


def test_gitignore(tmp_path):
    make_project(
        tmp_path,
        {
            ".gitignore": "ignored\n",
            "a.mjs": "export const a = 1;\n",
            "b.mjs": 'import { a } from "./a.mjs";\n',
            "ignored/c.mjs": "export const c = 1;\n",
        },
    )
    assert find_unused_exports(cwd=str(tmp_path)) == {}


def test_ignore_unused_exports_comments(tmp_path):
    make_project(
        tmp_path,
        {
            "a.mjs": "// ignore unused exports\nexport const a = 1;\nexport default 1;\n",
            "b.mjs": "// ignore unused exports default\nexport const a = 1;\nexport default 1;\n",
            "c.mjs": "/* ignore unused exports a */\nexport const a = 1;\nexport default 1;\n",
        },
    )
    assert find_unused_exports(cwd=str(tmp_path)) == {
        module_path(tmp_path, "b.mjs"): {"a"},
        module_path(tmp_path, "c.mjs"): {"default"},
    }


def test_typescript_modules(tmp_path):
    make_project(
        tmp_path,
        {
            "a.mts": 'import { b } from "./b.mjs";\nimport { c } from "./c.js";\nlet d: number = b + c;\n',
            "b.mts": "export const b: number = 1;\nexport type B = number;\n",
            "c.tsx": "export const c = 1;\nexport default function C() { return <div />; }\n",
            "types.d.ts": "export declare const e: number;\n",
        },
    )
    assert find_unused_exports(cwd=str(tmp_path)) == {
        module_path(tmp_path, "b.mts"): {"B"},
        module_path(tmp_path, "c.tsx"): {"default"},
    }


def test_module_glob(tmp_path):
    make_project(tmp_path, {"a.txt": "export default 1;\n", "b.mjs": "export default 1;\n"})
    assert find_unused_exports(cwd=str(tmp_path), module_glob="**/*.txt") == {
        module_path(tmp_path, "a.txt"): {"default"},
    }


def test_module_glob_selects_declaration_files(tmp_path):
    make_project(
        tmp_path,
        {
            "a.ts": "export const b = 1;\n",
            "types.d.ts": "export declare const a: number;\n",
        },
    )
    assert find_unused_exports(cwd=str(tmp_path), module_glob="**/*.d.ts") == {
        module_path(tmp_path, "types.d.ts"): {"a"},
    }


def test_resolve_file_extensions(tmp_path):
    make_project(
        tmp_path,
        {
            "a.mjs": 'import a from "./b";\n',
            "b.mjs": "export default 1;\n",
            "b.a.mjs": "export default 1;\n",
        },
    )
    assert find_unused_exports(cwd=str(tmp_path), resolve_file_extensions=["mjs", "a.mjs"]) == {
        module_path(tmp_path, "b.a.mjs"): {"default"},
    }


def test_resolve_file_extensions_and_index_files(tmp_path):
    make_project(
        tmp_path,
        {
            "a.mjs": 'import a from "./b";\n',
            "b/index.mjs": "export default 1;\n",
            "b/index.a.mjs": "export default 1;\n",
        },
    )
    assert find_unused_exports(
        cwd=str(tmp_path),
        resolve_file_extensions=["mjs", "a.mjs"],
        resolve_index_files=True,
    ) == {
        module_path(tmp_path, "b/index.a.mjs"): {"default"},
    }


def test_default_cwd(tmp_path, monkeypatch):
    make_project(tmp_path, {"a.mjs": "export default 1;\n"})
    monkeypatch.chdir(tmp_path)
    assert find_unused_exports() == {module_path(tmp_path, "a.mjs"): {"default"}}


def test_parse_error(tmp_path):
    make_project(tmp_path, {"a.mjs": "export default (;\n"})
    with pytest.raises(ModuleParseError):
        find_unused_exports(cwd=str(tmp_path))


@pytest.mark.parametrize(
    "options, message",
    [
        ({"cwd": True}, "Option `cwd` must be a string."),
        ({"module_glob": True}, "Option `moduleGlob` must be a string."),
        ({"resolve_file_extensions": True}, "Option `resolveFileExtensions` must be an array of strings."),
        ({"resolve_file_extensions": []}, "Option `resolveFileExtensions` must be an array of strings."),
        ({"resolve_file_extensions": [True]}, "Option `resolveFileExtensions` must be an array of strings."),
        ({"resolve_index_files": "true"}, "Option `resolveIndexFiles` must be a boolean."),
        (
            {"resolve_index_files": True},
            "Option `resolveIndexFiles` can only be `true` if the option `resolveFileExtensions` is used.",
        ),
    ],
)
def test_invalid_options(tmp_path, options, message):
    options.setdefault("cwd", str(tmp_path))
    with pytest.raises(ConfigurationError, match=re.escape(message)):
        find_unused_exports(**options)


def test_inaccessible_cwd(tmp_path):
    message = "Option `cwd` must be an accessible directory path."
    with pytest.raises(ConfigurationError, match=re.escape(message)):
        find_unused_exports(cwd=str(tmp_path / "nonexistent"))


def test_invalid_options_are_type_errors(tmp_path):
    with pytest.raises(TypeError):
        find_unused_exports(cwd=str(tmp_path), module_glob=1)


def test_is_directory_path(tmp_path):
    file_path = tmp_path / "a.mjs"
    file_path.write_text("", encoding="utf-8")

    assert is_directory_path(str(tmp_path)) is True
    assert is_directory_path(tmp_path) is True
    assert is_directory_path(str(file_path)) is False
    assert is_directory_path(str(tmp_path / "nonexistent")) is False
    with pytest.raises(TypeError, match=re.escape("Argument 1 `path` must be a string.")):
        is_directory_path(True)
