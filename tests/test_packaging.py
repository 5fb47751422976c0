import ast
import re
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parent.parent

# Import names whose distribution is published under a different name
DISTRIBUTIONS = {
    "dotenv": "python-dotenv",
    "pydantic_core": "pydantic-core",
    "pydantic_settings": "pydantic-settings",
}


def quoted_names(text):
    """Every quoted requirement or module name in a pyproject section."""
    return {re.split(r"[<>=!~\[ ]", name, maxsplit=1)[0].lower() for name in re.findall(r'"([^"]+)"', text)}


def pyproject_section(pyproject, header):
    match = re.search(rf"^{re.escape(header)}\s*=\s*\[(.*?)\]", pyproject, re.MULTILINE | re.DOTALL)
    assert match, f"{header} missing from pyproject.toml"
    return match.group(1)


def top_level_imports(path):
    tree = ast.parse(path.read_text(), filename=str(path))
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            for alias in node.names:
                yield alias.name.split(".")[0]
        elif isinstance(node, ast.ImportFrom) and node.level == 0:
            yield node.module.split(".")[0]


@pytest.mark.skipif(sys.version_info < (3, 10), reason="needs sys.stdlib_module_names")
def test_every_third_party_import_is_declared():
    pyproject = (ROOT / "pyproject.toml").read_text()
    declared = quoted_names(pyproject_section(pyproject, "dependencies"))
    declared_for_tests = declared | quoted_names(pyproject_section(pyproject, "test"))
    modules = quoted_names(pyproject_section(pyproject, "py-modules"))
    packages = quoted_names(pyproject_section(pyproject, "packages")) | {"tests"}
    local = modules | packages

    sources = [ROOT / f"{name}.py" for name in modules]
    for package in packages:
        sources.extend((ROOT / package).rglob("*.py"))

    missing = set()
    for path in sources:
        in_tests = "tests" in path.relative_to(ROOT).parts
        allowed = declared_for_tests if in_tests else declared
        for name in top_level_imports(path):
            if name in sys.stdlib_module_names or name in local:
                continue
            if DISTRIBUTIONS.get(name, name).lower() not in allowed:
                missing.add((str(path.relative_to(ROOT)), name))

    assert not missing


def test_admin_script_points_at_click_group():
    import click
    import ledger_admin

    pyproject = (ROOT / "pyproject.toml").read_text()
    assert 'ledger-admin = "ledger_admin:main"' in pyproject
    assert isinstance(ledger_admin.main, click.Group)
    assert set(ledger_admin.main.commands) == {"init", "list"}
