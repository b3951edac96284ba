from core.paths import (
    escape_glob,
    expand_braces,
    glob_match,
    glob_match_any,
    normalize_pattern,
    normalize_posix_relpath,
    to_display_path,
)


def test_normalize_posix_relpath():
    assert normalize_posix_relpath(" ./././a\\b.txt ") == "a/b.txt"
    assert normalize_posix_relpath("/etc/passwd") == "etc/passwd"


def test_normalize_pattern_keeps_absolute():
    assert normalize_pattern("./src\\*.py") == "src/*.py"
    assert normalize_pattern("/abs/x.md") == "/abs/x.md"


def test_glob_match_is_component_wise():
    assert glob_match("a.md", "*.md")
    assert not glob_match("sub/a.md", "*.md")
    assert glob_match("sub/a.md", "**/*.md")
    assert glob_match("a.md", "**/*.md")
    assert glob_match("node_modules/c.md", "**/node_modules/**")


def test_glob_match_case_insensitive_flag():
    assert not glob_match("README.MD", "*.md")
    assert glob_match("README.MD", "*.md", case_insensitive=True)


def test_glob_match_matches_dotfiles():
    assert glob_match(".env", "*")
    assert glob_match(".github/workflows/ci.yml", "**/*.yml")


def test_escape_glob_keeps_literal_filenames_literal():
    pattern = escape_glob("file[1].txt")
    assert glob_match("file[1].txt", pattern)
    assert not glob_match("file1.txt", pattern)
    # unescaped, the brackets are a character class
    assert glob_match("file1.txt", "file[1].txt")


def test_glob_match_any():
    assert glob_match_any("x.log", ["*.txt", "*.log"])
    assert not glob_match_any("x.log", [])


def test_to_display_path(tmp_path):
    target = tmp_path / "ws"
    assert to_display_path(str(target / "src" / "a.py"), str(target)) == "src/a.py"
    assert to_display_path(str(tmp_path / "other" / "b.md"), str(target)) == "../other/b.md"


def test_expand_braces():
    assert expand_braces("*.{md,txt}") == ["*.md", "*.txt"]
    assert expand_braces("src/**/*.{ts,tsx}") == ["src/**/*.ts", "src/**/*.tsx"]
    assert expand_braces("{a,b{c,d}}.py") == ["a.py", "bc.py", "bd.py"]
    assert expand_braces("{x,x}") == ["x"]


def test_expand_braces_leaves_literals_alone():
    assert expand_braces("{single}.md") == ["{single}.md"]
    assert expand_braces("open{a,b") == ["open{a,b"]
    assert expand_braces("[{]a,b[}]") == ["[{]a,b[}]"]
    assert expand_braces("plain/*.md") == ["plain/*.md"]


def test_glob_match_brace_alternatives():
    assert glob_match("a.md", "*.{md,txt}")
    assert glob_match("b.txt", "*.{md,txt}")
    assert not glob_match("c.py", "*.{md,txt}")
    assert glob_match("lib/x/y.py", "{src,lib}/**/*.py")
    assert glob_match("A.MD", "*.{md,txt}", case_insensitive=True)


def test_escape_glob_keeps_braces_literal():
    pattern = escape_glob("a{b,c}.txt")
    assert glob_match("a{b,c}.txt", pattern)
    assert not glob_match("ab.txt", pattern)


def test_glob_match_many_globstars_on_deep_path():
    deep = "/".join(["a"] * 60) + "/x.py"
    pattern = "**/a/**/a/**/a/**/a/**/a/**/b.py"
    assert not glob_match(deep, pattern)
    assert glob_match(deep, "**/a/**/a/**/a/**/a/**/a/**/*.py")
