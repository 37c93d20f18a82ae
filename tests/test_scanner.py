import pytest

from find_unused_exports.core.exceptions import ModuleParseError, ModuleReadError
from find_unused_exports.core.scanner import (
    MODULE_GLOB,
    ProjectScanner,
    compile_glob,
    parse_gitignore,
    scan_module_file,
)


def write(root, relative_path, content=""):
    path = root / relative_path
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def relative_paths(scanner):
    return [
        str(path)[len(str(scanner.cwd)) + 1:].replace("\\", "/")
        for path in scanner.iter_module_paths()
    ]


@pytest.mark.parametrize(
    "path, matches",
    [
        ("a.mjs", True),
        ("a.cjs", True),
        ("a.js", True),
        ("a.jsx", True),
        ("a.mts", True),
        ("a.cts", True),
        ("a.ts", True),
        ("a.tsx", True),
        ("src/nested/a.mjs", True),
        (".hidden/a.mjs", True),
        ("a.json", False),
        ("a.mjs.map", False),
        ("README.md", False),
    ],
)
def test_module_glob(path, matches):
    assert (compile_glob(MODULE_GLOB).fullmatch(path) is not None) is matches


def test_glob_syntax():
    assert compile_glob("src/*.mjs").fullmatch("src/a.mjs")
    assert not compile_glob("src/*.mjs").fullmatch("src/a/b.mjs")
    assert compile_glob("src/**/*.mjs").fullmatch("src/a.mjs")
    assert compile_glob("src/**/*.mjs").fullmatch("src/a/b/c.mjs")
    assert compile_glob("a?.mjs").fullmatch("ab.mjs")
    assert compile_glob("[ab].mjs").fullmatch("b.mjs")
    assert not compile_glob("[!ab].mjs").fullmatch("b.mjs")
    assert compile_glob("{a,b/{c,d}}.mjs").fullmatch("b/d.mjs")


def test_parse_gitignore():
    rules = parse_gitignore("# Comment\n\n/dist\nnode_modules/\n*.log\n!keep.log\n\\#hash\n")
    assert [(rule.negated, rule.directory_only) for rule in rules] == [
        (False, False),
        (False, True),
        (False, False),
        (True, False),
        (False, False),
    ]
    dist, node_modules, logs, keep, hashed = rules
    assert dist.matches("dist", True)
    assert not dist.matches("src/dist", True)
    assert node_modules.matches("src/node_modules", True)
    assert not node_modules.matches("node_modules", False)
    assert logs.matches("a/b.log", False)
    assert keep.matches("keep.log", False)
    assert hashed.matches("#hash", False)


def test_iter_module_paths(tmp_path):
    write(tmp_path, "a.mjs")
    write(tmp_path, "b.ts")
    write(tmp_path, "types.d.ts")
    write(tmp_path, "styles.css")
    write(tmp_path, ".config/c.mjs")
    write(tmp_path, "src/d.tsx")
    write(tmp_path, ".git/hooks/e.mjs")

    scanner = ProjectScanner(tmp_path)
    assert relative_paths(scanner) == ["a.mjs", "b.ts", ".config/c.mjs", "src/d.tsx"]


def test_custom_module_glob(tmp_path):
    write(tmp_path, "a.mjs")
    write(tmp_path, "b.js")
    write(tmp_path, "src/c.mjs")

    scanner = ProjectScanner(tmp_path, module_glob="*.mjs")
    assert relative_paths(scanner) == ["a.mjs"]


def test_gitignore(tmp_path):
    write(tmp_path, ".gitignore", "dist\n*.generated.mjs\n")
    write(tmp_path, "a.mjs")
    write(tmp_path, "b.generated.mjs")
    write(tmp_path, "dist/c.mjs")
    write(tmp_path, "src/.gitignore", "/local.mjs\n!keep.generated.mjs\n")
    write(tmp_path, "src/local.mjs")
    write(tmp_path, "src/nested/local.mjs")
    write(tmp_path, "src/keep.generated.mjs")

    scanner = ProjectScanner(tmp_path)
    assert relative_paths(scanner) == [
        "a.mjs",
        "src/keep.generated.mjs",
        "src/nested/local.mjs",
    ]


def test_custom_module_glob_selects_declaration_files(tmp_path):
    write(tmp_path, "a.ts")
    write(tmp_path, "types.d.ts")
    write(tmp_path, "src/more.d.mts")

    scanner = ProjectScanner(tmp_path, module_glob="**/*.d.{ts,mts}")
    assert relative_paths(scanner) == ["types.d.ts", "src/more.d.mts"]


def test_extra_ignore_globs(tmp_path):
    write(tmp_path, "a.mjs")
    write(tmp_path, "a.test.mjs")

    scanner = ProjectScanner(tmp_path, ignore_globs=["**/*.test.mjs"])
    assert relative_paths(scanner) == ["a.mjs"]


def test_scan(tmp_path):
    a = write(tmp_path, "a.mjs", 'import { b } from "./b.mjs";\n')
    b = write(tmp_path, "b.mjs", "export const b = 1;\nexport const c = 1;\n")

    index = ProjectScanner(tmp_path, max_workers=2).scan()

    assert set(index) == {str(a), str(b)}
    assert index[str(a)].imports == {"./b.mjs": {"b"}}
    assert index[str(b)].exports == {"b", "c"}


def test_scan_parse_error(tmp_path):
    write(tmp_path, "a.mjs", "export const a = 1;\n")
    bad = write(tmp_path, "b.mjs", "export const = ;\n")

    with pytest.raises(ModuleParseError) as exc_info:
        ProjectScanner(tmp_path).scan()
    assert exc_info.value.path == str(bad)


def test_scan_module_file_strips_bom(tmp_path):
    path = tmp_path / "a.mjs"
    path.write_bytes(b"\xef\xbb\xbfexport default 1;\n")
    assert scan_module_file(str(path)).exports == {"default"}


def test_scan_module_file_read_error(tmp_path):
    missing = str(tmp_path / "missing.mjs")
    with pytest.raises(ModuleReadError) as exc_info:
        scan_module_file(missing)
    assert exc_info.value.code == "READ_FAILED"
    assert exc_info.value.details["path"] == missing


def test_scan_module_file_invalid_utf8(tmp_path):
    path = tmp_path / "a.mjs"
    path.write_bytes(b"export default '\xff';\n")
    with pytest.raises(ModuleReadError):
        scan_module_file(str(path))
