import re
from pathlib import Path

_REPO_ROOT = Path(__file__).resolve().parents[2]


def test_readme_is_a_user_facing_document():
    text = (_REPO_ROOT / "pyproject.toml").read_text(encoding="utf-8")
    match = re.search(r'^readme\s*=\s*"([^"]+)"', text, re.MULTILINE)
    assert match is not None
    readme = _REPO_ROOT / match.group(1)
    assert readme.name == "README.md"
    assert readme.read_text(encoding="utf-8").startswith("# pystrassen")
