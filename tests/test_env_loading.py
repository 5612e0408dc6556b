from __future__ import annotations

import os

from charms.env import _reset_for_tests, load_dotenv_if_present


def test_dotenv_loaded_once_and_env_wins(tmp_path, monkeypatch) -> None:
    p = tmp_path / ".env"
    p.write_text("CHARMS_TEST_DOTENV_A=from_file\nCHARMS_TEST_DOTENV_B=from_file\n", encoding="utf-8")

    monkeypatch.delenv("CHARMS_TEST_DOTENV_A", raising=False)
    monkeypatch.setenv("CHARMS_TEST_DOTENV_B", "from_env")
    _reset_for_tests()
    try:
        assert load_dotenv_if_present(str(p)) is True
        assert os.environ["CHARMS_TEST_DOTENV_A"] == "from_file"
        assert os.environ["CHARMS_TEST_DOTENV_B"] == "from_env"

        # second call is a no-op
        assert load_dotenv_if_present(str(p)) is False
    finally:
        os.environ.pop("CHARMS_TEST_DOTENV_A", None)
        _reset_for_tests()


def test_missing_dotenv_is_not_an_error(tmp_path) -> None:
    _reset_for_tests()
    try:
        assert load_dotenv_if_present(str(tmp_path / "nope.env")) is False
    finally:
        _reset_for_tests()
