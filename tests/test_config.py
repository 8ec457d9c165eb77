from __future__ import annotations

from pathlib import Path

from codepad.config import PlaygroundConfig
from codepad.persistence import DEFAULT_ARCHIVE_KEY, MemoryStore
from codepad.session import PlaygroundSession


def test_defaults_without_environment() -> None:
    config = PlaygroundConfig.from_env({})

    assert config.archive_key == DEFAULT_ARCHIVE_KEY
    assert config.device == "desktop"
    assert config.tab_width == 2
    assert config.store_path.name == "codepad.db"
    assert not config.in_memory


def test_environment_overrides(tmp_path: Path) -> None:
    env = {
        "CODEPAD_STORE": str(tmp_path / "state.db"),
        "CODEPAD_ARCHIVE_KEY": "versions",
        "CODEPAD_PREVIEW_PATH": str(tmp_path / "out.html"),
        "CODEPAD_DEVICE": "mobile",
        "CODEPAD_TAB_WIDTH": "4",
    }

    config = PlaygroundConfig.from_env(env)

    assert config.store_path == tmp_path / "state.db"
    assert config.archive_key == "versions"
    assert config.preview_path == tmp_path / "out.html"
    assert config.device == "mobile"
    assert config.tab_width == 4


def test_invalid_tab_width_falls_back() -> None:
    assert PlaygroundConfig.from_env({"CODEPAD_TAB_WIDTH": "wide"}).tab_width == 2


def test_session_from_in_memory_config(tmp_path: Path) -> None:
    config = PlaygroundConfig.from_env(
        {
            "CODEPAD_STORE": ":memory:",
            "CODEPAD_PREVIEW_PATH": str(tmp_path / "preview.html"),
            "CODEPAD_DEVICE": "tablet",
        }
    )

    session = PlaygroundSession.from_config(config)
    session.start()

    assert config.in_memory
    assert isinstance(session.store, MemoryStore)
    assert session.surface is not None
    assert session.surface.width == "768px"
    assert 'style="width: 768px"' in (tmp_path / "preview.html").read_text(encoding="utf-8")
    session.close()
