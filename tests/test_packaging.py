import pathlib
import re

ROOT = pathlib.Path(__file__).resolve().parent.parent


def test_requires_python_matches_supported_floor():
    text = (ROOT / "pyproject.toml").read_text(encoding="utf-8")
    m = re.search(r'^requires-python = "(.+)"$', text, re.MULTILINE)
    assert m and m.group(1) == ">=3.10"
