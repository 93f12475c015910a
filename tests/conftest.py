import sys
from pathlib import Path

from click.testing import CliRunner
import pytest


def _ensure_repo_on_path() -> None:
    repo_root = Path(__file__).resolve().parent.parent
    if str(repo_root) not in sys.path:
        sys.path.insert(0, str(repo_root))


_ensure_repo_on_path()


@pytest.fixture
def write_rule():
    def _write(path: Path, text: str) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def cursor_root(tmp_path: Path) -> Path:
    return tmp_path / ".cursor" / "rules"


@pytest.fixture
def copilot_root(tmp_path: Path) -> Path:
    return tmp_path / ".github" / "instructions"


@pytest.fixture
def cli_runner() -> CliRunner:
    return CliRunner()
