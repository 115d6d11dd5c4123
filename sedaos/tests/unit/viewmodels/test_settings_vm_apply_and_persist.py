from __future__ import annotations

import json
from pathlib import Path

import pytest

from sedaos.adapters.storage_local import StorageLocal
from sedaos.domain.validation import COMPACT_RULES, FULL_RULES
from sedaos.viewmodels.settings_vm import SettingsVM, default_settings_payload


def test_apply_dict_updates_flat_keys() -> None:
    vm = SettingsVM()
    vm.apply_dict(
        {
            "api_base_url": " https://library.example/ ",
            "request_timeout_s": "12",
            "retries": 0,
            "profile_rules": "Compact",
            "debug_logging": "yes",
        }
    )

    assert vm.api_base_url == "https://library.example"
    assert vm.request_timeout_s == 12
    assert vm.retries == 0
    assert vm.profile_rules is COMPACT_RULES
    assert vm.debug_logging is True


def test_apply_dict_rejects_unknown_and_invalid_values() -> None:
    vm = SettingsVM()

    with pytest.raises(ValueError, match="Unsupported settings keys: api_keys"):
        vm.apply_dict({"api_keys": {"A": "x"}})
    with pytest.raises(ValueError, match="request_timeout_s must be >= 1"):
        vm.apply_dict({"request_timeout_s": 0})
    with pytest.raises(ValueError, match="retries must be an integer"):
        vm.apply_dict({"retries": True})
    with pytest.raises(ValueError, match="profile_rules must be one of"):
        vm.apply_dict({"profile_rules": "wide"})

    assert vm.profile_rules is FULL_RULES
    assert vm.request_timeout_s == 10


def test_is_valid_and_cmd_save() -> None:
    saved = []
    vm = SettingsVM(on_save=saved.append)

    vm.api_base_url = "ftp://library.example"
    assert vm.is_valid() is False
    with pytest.raises(ValueError, match="Settings invalid"):
        vm.cmd_save()

    vm.api_base_url = "http://localhost:8080"
    vm.cmd_save()
    assert saved[-1]["api_base_url"] == "http://localhost:8080"
    assert saved[-1]["profile_rules"] == "full"


def test_storage_local_defaults_and_roundtrip(tmp_path: Path) -> None:
    storage = StorageLocal(root_dir=str(tmp_path))
    settings_path = tmp_path / "user_settings.json"
    assert storage.load_user_settings() == {}
    assert not settings_path.exists()

    vm = SettingsVM()
    vm.apply_dict({"api_base_url": "https://library.example", "retries": 3, "profile_rules": "compact"})
    payload = vm.to_dict()

    storage.save_user_settings(payload)
    assert settings_path.exists()
    assert list(tmp_path.glob("user_settings_*.tmp")) == []
    assert storage.load_user_settings() == payload

    with settings_path.open("r", encoding="utf-8") as fh:
        parsed = json.load(fh)
    assert parsed == payload

    restored = SettingsVM()
    restored.apply_dict(storage.load_user_settings())
    assert restored.to_dict() == payload


def test_storage_rejects_non_object_file(tmp_path: Path) -> None:
    (tmp_path / "user_settings.json").write_text("[1, 2]", encoding="utf-8")

    with pytest.raises(ValueError, match="must contain a JSON object"):
        StorageLocal(root_dir=str(tmp_path)).load_user_settings()


def test_default_payload_shape(monkeypatch: pytest.MonkeyPatch) -> None:
    for var in ("SEDAOS_LOG_LEVEL", "SEDAOS_GUI_LOG_LEVEL", "SEDAOS_DEBUG_LOGGING", "SEDAOS_DEBUG"):
        monkeypatch.delenv(var, raising=False)

    assert default_settings_payload() == {
        "api_base_url": "",
        "request_timeout_s": 10,
        "retries": 2,
        "profile_rules": "full",
        "debug_logging": False,
    }
