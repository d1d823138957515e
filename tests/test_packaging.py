from pathlib import Path

PYPROJECT = Path(__file__).resolve().parent.parent / "pyproject.toml"


def test_project_metadata():
    text = PYPROJECT.read_text(encoding="utf-8")
    assert 'name = "awop"' in text
    assert 'awop = "awop.main:run"' in text
    assert "DESIGN.md" not in text
