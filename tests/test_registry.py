import logging

import pytest

from policy_compiler.core.exceptions import (
    CompilationError, ConfigurationError, DuplicateIdentifierError, NotFoundError, ValidationError
)
from policy_compiler.modules.accounts.definition import AccountDefinition
from policy_compiler.modules.permission_groups.definition import PermissionGroupDefinition
from policy_compiler.modules.permissions.definition import PermissionDefinition
from policy_compiler.modules.registry.service import ConfigurationRegistry
from policy_compiler.modules.roles.definition import RoleDefinition
from policy_compiler.modules.system_settings.definition import SystemSettingDefinition

SERVICE_LOGGER = "policy_compiler.modules.registry.service"


def _non_comment(statements):
    return [s for s in statements if not s.strip().startswith("--")]


def _index_of(statements, fragment):
    return next(i for i, s in enumerate(statements) if fragment in s)


class _Ghost:
    """Stands in for an entity that was never registered"""

    def __init__(self, id):
        self.id = id
        self.name = id

    def identifier(self):
        return self.id


def test_lookup_unknown_ids(registry) -> None:
    for getter, kind in [
        (registry.get_permission, "Permission"),
        (registry.get_role, "Role"),
        (registry.get_account, "Account"),
        (registry.get_permission_group, "Permission group"),
    ]:
        with pytest.raises(NotFoundError) as exc:
            getter("missing")
        assert exc.value.entity_kind == kind
        assert "missing" in str(exc.value)


def test_invalid_schema_name_rejected() -> None:
    with pytest.raises(ConfigurationError):
        ConfigurationRegistry(schema_name="supamode; drop")


def test_custom_schema_name_flows_into_statements() -> None:
    registry = ConfigurationRegistry(schema_name="policy", auth_schema_name="identity")
    AccountDefinition.create(registry, "u1")

    statements = registry.generate_sql()

    assert any("INSERT INTO policy.accounts" in s for s in statements)
    assert any("UPDATE identity.users" in s for s in statements)


def test_example_scenario_counts_and_order(developer_graph) -> None:
    statements = developer_graph["registry"].generate_sql()
    body = _non_comment(statements)

    assert len(body) == 10
    assert sum("INSERT INTO supamode.permissions " in s for s in body) == 2
    assert sum("INSERT INTO supamode.permission_groups " in s for s in body) == 1
    assert sum("INSERT INTO supamode.roles " in s for s in body) == 1
    assert sum("UPDATE auth.users" in s for s in body) == 1
    assert sum("INSERT INTO supamode.accounts " in s for s in body) == 1
    assert sum("permission_group_permissions" in s for s in body) == 2
    assert sum("role_permission_groups" in s for s in body) == 1
    assert sum("account_roles" in s for s in body) == 1
    assert sum("account_permissions" in s for s in body) == 0

    kinds = [
        "INSERT INTO supamode.permissions ",
        "INSERT INTO supamode.permission_groups ",
        "INSERT INTO supamode.roles ",
        "UPDATE auth.users",
        "INSERT INTO supamode.accounts ",
        "permission_group_permissions",
        "role_permission_groups",
        "account_roles",
    ]
    positions = [_index_of(body, kind) for kind in kinds]
    assert positions == sorted(positions)


def test_entity_rows_precede_every_reference(developer_graph) -> None:
    registry = developer_graph["registry"]
    account = developer_graph["account"]
    account.grant_permission(developer_graph["read_logs"])
    statements = registry.generate_sql()

    row_positions = [i for i, s in enumerate(statements) if "INSERT INTO supamode.permissions " in s
                     or "INSERT INTO supamode.permission_groups " in s
                     or "INSERT INTO supamode.roles " in s
                     or "INSERT INTO supamode.accounts " in s]
    reference_positions = [i for i, s in enumerate(statements) if "(SELECT id FROM" in s]

    assert reference_positions
    assert max(row_positions) < min(reference_positions)


def test_junction_statements_use_natural_keys(developer_graph) -> None:
    statements = developer_graph["registry"].generate_sql()
    junction = statements[_index_of(statements, "permission_group_permissions")]

    assert developer_graph["group"].natural_key_lookup() in junction
    assert developer_graph["read_logs"].natural_key_lookup() in junction
    assert "ON CONFLICT DO NOTHING" in junction


def test_phase_markers_present_for_empty_registry(registry) -> None:
    statements = registry.generate_sql()

    assert statements[0] == "-- Creating system settings"
    assert statements[-1] == "-- Creating account permission overrides"
    assert len(statements) == 10
    assert _non_comment(statements) == []


def test_system_settings_come_first(developer_graph) -> None:
    registry = developer_graph["registry"]
    SystemSettingDefinition.create(registry, "requires_mfa", "true")

    body = _non_comment(registry.generate_sql())

    assert "supamode.configuration" in body[0]


def test_missing_permission_is_skipped_with_warning(registry, caplog) -> None:
    present = PermissionDefinition.create_system_permission(
        registry, "present", resource="log", action="select", name="Present",
    )
    role = RoleDefinition.create(registry, "broken", {"name": "Broken"})
    role.add_permission(present).add_permission(_Ghost("absent"))

    with caplog.at_level(logging.WARNING):
        statements = registry.generate_sql()

    role_links = [s for s in statements if "supamode.role_permissions" in s]
    assert len(role_links) == 1
    assert present.natural_key_lookup() in role_links[0]
    assert "absent" in caplog.text
    assert "broken" in caplog.text


def test_compile_returns_diagnostics(registry) -> None:
    group = PermissionGroupDefinition.create(registry, "g", {"name": "G"})
    group.add_permission(_Ghost("nope"))
    role = RoleDefinition.create(registry, "r", {"name": "R"})
    role.add_permission_group(_Ghost("no_group"))
    account = AccountDefinition.create(registry, "u1")
    account.assign_role(_Ghost("no_role"))

    result = registry.compile()

    assert result.has_warnings
    assert [(d.relation, d.owner_id, d.missing_id) for d in result.diagnostics] == [
        ("permission group", "g", "nope"),
        ("role", "r", "no_group"),
        ("account", "u1", "no_role"),
    ]
    assert not any("permission_group_permissions" in s for s in result.statements)


def test_validate_passes_for_complete_graph(developer_graph) -> None:
    developer_graph["registry"].validate()


def test_validate_fails_fast_on_missing_permission(registry) -> None:
    present = PermissionDefinition.create_system_permission(
        registry, "present", resource="log", action="select", name="Present",
    )
    role = RoleDefinition.create(registry, "broken", {"name": "Broken"})
    role.add_permission(present).add_permission(_Ghost("absent")).add_permission(_Ghost("also_absent"))

    with pytest.raises(ValidationError) as exc:
        registry.validate()

    assert "broken" in str(exc.value)
    assert "absent" in str(exc.value)
    assert exc.value.missing_id == "absent"


def test_validate_reports_missing_group_and_role(registry) -> None:
    role = RoleDefinition.create(registry, "r", {"name": "R"})
    account = AccountDefinition.create(registry, "u1")
    account.assign_role(_Ghost("ghost_role"))

    with pytest.raises(ValidationError) as exc:
        registry.validate()
    assert exc.value.owner_id == "u1"

    role.add_permission_group(_Ghost("ghost_group"))
    with pytest.raises(ValidationError) as exc:
        registry.validate()
    assert exc.value.owner_id == "r"
    assert exc.value.missing_id == "ghost_group"


def test_grant_then_deny_emits_two_overrides(developer_graph) -> None:
    account = developer_graph["account"]
    read_logs = developer_graph["read_logs"]
    account.grant_permission(read_logs)
    account.deny_permission(read_logs)

    statements = developer_graph["registry"].generate_sql()
    overrides = [s for s in statements if "supamode.account_permissions" in s]

    assert len(overrides) == 2
    assert "  true," in overrides[0]
    assert "  false," in overrides[1]
    for override in overrides:
        assert "(SELECT id FROM supamode.permissions WHERE name = 'Read Logs')" in override
        assert "(SELECT id FROM supamode.accounts WHERE auth_user_id = 'u1')" in override


def test_override_resolves_by_name_without_registry_lookup(registry) -> None:
    account = AccountDefinition.create(registry, "u1")
    account.grant_permission(_Ghost("Unregistered Permission"))

    result = registry.compile()

    assert result.diagnostics == []
    assert any("WHERE name = 'Unregistered Permission'" in s for s in result.statements)


def test_emit_failure_is_wrapped(developer_graph, monkeypatch) -> None:
    def boom():
        raise RuntimeError("emit exploded")

    monkeypatch.setattr(developer_graph["role"], "emit", boom)

    with pytest.raises(CompilationError) as exc:
        developer_graph["registry"].generate_sql()

    assert "emit exploded" in str(exc.value)
    assert isinstance(exc.value.__cause__, RuntimeError)


def test_to_script_joins_statements(developer_graph) -> None:
    script = developer_graph["registry"].to_script()

    assert script.startswith("-- Creating system settings\n")
    assert script.endswith("-- Creating account permission overrides\n")
    assert "\n\n\n" not in script


def test_introspection_preserves_registration_order(developer_graph) -> None:
    registry = developer_graph["registry"]

    assert [p.identifier() for p in registry.permissions()] == ["read_logs", "manage_tables"]
    assert [g.identifier() for g in registry.permission_groups()] == ["dev"]
    assert [r.identifier() for r in registry.roles()] == ["developer"]
    assert [a.identifier() for a in registry.accounts()] == ["u1"]
    assert registry.system_settings() == []


def test_duplicate_names_rejected_per_kind(registry) -> None:
    PermissionDefinition.create_system_permission(registry, "a", resource="log", action="select", name="Shared")
    RoleDefinition.create(registry, "role_a", {"name": "Shared"})

    with pytest.raises(DuplicateIdentifierError) as exc:
        PermissionDefinition.create_system_permission(registry, "b", resource="role", action="select", name="Shared")

    assert exc.value.entity_kind == "Permission name"
    assert [p.identifier() for p in registry.permissions()] == ["a"]


def test_compile_logs_each_phase_at_debug(developer_graph, caplog) -> None:
    with caplog.at_level(logging.DEBUG, logger=SERVICE_LOGGER):
        statements = developer_graph["registry"].compile().statements

    markers = [s[len("-- "):] for s in statements if s.startswith("-- ")]
    phases = [r.getMessage() for r in caplog.records if r.name == SERVICE_LOGGER and r.levelno == logging.DEBUG]
    assert len(markers) == 10
    assert phases == [f"Phase: {marker}" for marker in markers]
