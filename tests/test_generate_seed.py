import pytest

from policy_compiler.config.settings import settings
from policy_compiler.scripts import generate_seed as script


def test_generate_seed_writes_script(tmp_path) -> None:
    output = tmp_path / "nested" / "seed.sql"

    path = script.generate_seed("solo", str(output), root_account_id="root-1")

    content = path.read_text(encoding="utf-8")
    assert path == output
    assert content.startswith("-- Creating system settings")
    assert "WHERE auth_user_id = 'root-1'" in content
    assert "INSERT INTO supamode.role_permission_groups" in content


def test_main_uses_settings(tmp_path, monkeypatch) -> None:
    output = tmp_path / "seed.sql"
    monkeypatch.setattr(settings, "seed_template", "small_team")
    monkeypatch.setattr(settings, "output_path", str(output))
    monkeypatch.setattr(settings, "root_account_id", None)

    script.main()

    assert "'Global Admin'" in output.read_text(encoding="utf-8")


def test_main_exits_on_unknown_template(tmp_path, monkeypatch) -> None:
    monkeypatch.setattr(settings, "seed_template", "missing")
    monkeypatch.setattr(settings, "output_path", str(tmp_path / "seed.sql"))

    with pytest.raises(SystemExit) as exc:
        script.main()

    assert exc.value.code == 1
    assert not (tmp_path / "seed.sql").exists()
