import pytest

from policy_compiler.config.presets import PRESETS, ROOT_ACCOUNT_ID, build_preset
from policy_compiler.core.exceptions import ConfigurationError


@pytest.mark.parametrize("name", sorted(PRESETS))
def test_presets_validate_and_compile_cleanly(name) -> None:
    registry = build_preset(name)

    registry.validate()
    result = registry.compile()

    assert result.diagnostics == []
    assert any("INSERT INTO supamode.account_roles" in s for s in result.statements)


def test_presets_build_independent_registries() -> None:
    first = build_preset("solo")
    second = build_preset("solo")

    assert first is not second
    assert len(first.permissions()) == len(second.permissions())


def test_solo_preset_shape() -> None:
    registry = build_preset("solo")

    assert len(registry.permissions()) == 10
    assert [a.identifier() for a in registry.accounts()] == [ROOT_ACCOUNT_ID]
    assert registry.get_role("solopreneur_role").config.rank == 100
    assert registry.get_system_setting("requires_mfa").value == "false"
    assert len(registry.get_permission_group("solopreneur_group").get_permissions()) == 10


def test_saas_preset_shape() -> None:
    registry = build_preset("saas")

    assert len(registry.permissions()) == 25
    assert len(registry.permission_groups()) == 6
    assert {r.identifier(): r.config.rank for r in registry.roles()} == {
        "root_role": 100,
        "admin_role": 90,
        "developer_role": 80,
        "manager_role": 70,
        "support_role": 60,
        "readonly_role": 50,
    }
    assert all(len(role.get_permission_groups()) == 1 for role in registry.roles())
    assert registry.get_role("root_role").get_permission_groups() == ["super_admin_group"]
    assert registry.get_account(ROOT_ACCOUNT_ID).get_roles() == ["root_role"]
    assert registry.get_system_setting("requires_mfa").value == "false"
    assert "delete_accounts" in registry.get_permission_group("super_admin_group").get_permissions()


def test_root_account_id_override() -> None:
    registry = build_preset("small_team", root_account_id="abc-123")

    assert [a.identifier() for a in registry.accounts()] == ["abc-123"]
    assert registry.get_account("abc-123").get_roles() == ["global_admin_role"]


def test_starter_preset_assigns_one_role_per_account() -> None:
    registry = build_preset("starter", root_account_id="root-id")

    roles = {account.identifier(): account.get_roles() for account in registry.accounts()}
    assert roles["root-id"] == ["root_role"]
    assert all(len(assigned) == 1 for assigned in roles.values())


def test_unknown_preset() -> None:
    with pytest.raises(ConfigurationError) as exc:
        build_preset("enterprise")

    assert "seed_template" in exc.value.fields
