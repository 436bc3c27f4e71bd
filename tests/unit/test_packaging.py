"""Unit tests for project packaging metadata."""

import tomllib
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent.parent.parent


class TestPyproject:
    """Tests for pyproject.toml."""

    def test_readme_is_project_readme(self) -> None:
        """Test the package description comes from README.md, which exists."""
        with open(PROJECT_ROOT / "pyproject.toml", "rb") as f:
            project = tomllib.load(f)["project"]

        assert project["readme"] == "README.md"
        assert (PROJECT_ROOT / project["readme"]).is_file()
