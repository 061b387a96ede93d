"""Unit tests for guard naming, decisions and compilation."""

from __future__ import annotations

import pytest
from structlog.testing import capture_logs

from mp_access.application.guards import (
    FORBIDDEN_STATUS,
    Guard,
    GuardCompiler,
    GuardKind,
    GuardState,
    InMemoryDispatcher,
    Outcome,
    OutcomeKind,
    denies,
    guard_name,
)
from mp_access.config import AccessSettings
from mp_access.kernel.errors import InvalidArgumentError
from mp_access.kernel.security import StaticSubjectResolver
from mp_access.observability.logging import AuditOutcome
from mp_access.testing.fakes import RecordingSubject

# md5("admin/*")
_ADMIN_HASH = "923b092dc41d575fb5afad4175bedc9e"


class FakeAudit:
    def __init__(self) -> None:
        self.entries: list[dict] = []

    def log_decision(self, subject, resource, guard, outcome, **extra) -> None:
        self.entries.append(
            {"subject": subject, "resource": resource, "guard": guard, "outcome": outcome, **extra}
        )


def _compiler(
    subject=None,
    dispatcher: InMemoryDispatcher | None = None,
    **settings,
) -> GuardCompiler:
    settings.setdefault("audit_denials", False)
    return GuardCompiler(
        StaticSubjectResolver(subject),
        dispatcher if dispatcher is not None else InMemoryDispatcher(),
        settings=AccessSettings(**settings),
    )


# ---------------------------------------------------------------------------
# Outcome
# ---------------------------------------------------------------------------


class TestOutcome:
    def test_allow(self) -> None:
        outcome = Outcome.allow()
        assert outcome.kind is OutcomeKind.ALLOW
        assert outcome.is_allowed and not outcome.is_denied
        assert bool(outcome) is True
        assert outcome.status_code is None

    def test_forbidden(self) -> None:
        outcome = Outcome.forbidden()
        assert outcome.is_denied
        assert outcome.status_code == FORBIDDEN_STATUS == 403
        assert outcome.value is None

    def test_fallback(self) -> None:
        outcome = Outcome.fallback("/login")
        assert outcome.kind is OutcomeKind.FALLBACK
        assert outcome.value == "/login"
        assert outcome.is_denied
        assert outcome.status_code is None


# ---------------------------------------------------------------------------
# Naming
# ---------------------------------------------------------------------------


class TestGuardName:
    def test_roles_then_hash(self) -> None:
        assert guard_name("admin/*", ["admin", "editor"]) == f"admin_editor_{_ADMIN_HASH[:6]}"

    def test_roles_and_permissions(self) -> None:
        assert (
            guard_name("admin/*", ["admin"], ["users:edit"])
            == f"admin_users:edit_{_ADMIN_HASH[:6]}"
        )

    def test_permissions_only(self) -> None:
        assert guard_name("admin/*", (), ["users:edit"]) == f"users:edit_{_ADMIN_HASH[:6]}"

    def test_length(self) -> None:
        assert guard_name("admin/*", ["admin"], length=10) == f"admin_{_ADMIN_HASH[:10]}"

    def test_depends_on_name_set_not_order(self) -> None:
        assert guard_name("admin/*", ["editor", "admin"]) == guard_name("admin/*", ["admin", "editor"])

    def test_distinct_patterns_distinct_names(self) -> None:
        assert guard_name("admin/*", ["admin"]) != guard_name("admin/users/*", ["admin"])


# ---------------------------------------------------------------------------
# Deny rule
# ---------------------------------------------------------------------------


class TestDenyRule:
    @pytest.mark.parametrize(
        ("checks", "cumulative", "expected"),
        [
            ((), True, False),
            ((), False, False),
            ((True,), True, False),
            ((True, True), False, False),
            ((False,), True, True),
            ((False,), False, True),
            ((True, False), True, True),
            ((True, False), False, False),
            ((False, False), False, True),
            ((False, True, False), False, False),
        ],
    )
    def test_table(self, checks: tuple[bool, ...], cumulative: bool, expected: bool) -> None:
        assert denies(checks, cumulative) is expected


# ---------------------------------------------------------------------------
# Role guard
# ---------------------------------------------------------------------------


class TestRoleGuard:
    def test_cumulative_denies_when_a_role_is_missing(self) -> None:
        guard = _compiler(RecordingSubject(roles={"admin"})).compile_role_guard(
            "admin/*", ["admin", "editor"], cumulative=True
        )
        assert guard() == Outcome.forbidden()

    def test_non_cumulative_allows_partial_match(self) -> None:
        guard = _compiler(RecordingSubject(roles={"admin"})).compile_role_guard(
            "admin/*", ["admin", "editor"], cumulative=False
        )
        assert guard() == Outcome.allow()

    def test_non_cumulative_denies_when_no_role_matches(self) -> None:
        guard = _compiler(RecordingSubject(roles={"viewer"})).compile_role_guard(
            "admin/*", ["admin", "editor"], cumulative=False
        )
        assert guard().is_denied

    def test_all_roles_present(self) -> None:
        guard = _compiler(RecordingSubject(roles={"admin", "editor"})).compile_role_guard(
            "admin/*", "admin,editor"
        )
        assert guard().is_allowed

    def test_default_is_cumulative(self) -> None:
        guard = _compiler(RecordingSubject()).compile_role_guard("admin/*", "admin")
        assert guard.cumulative is True
        assert guard.kind is GuardKind.ROLE

    @pytest.mark.parametrize("cumulative", [True, False])
    def test_anonymous_denied(self, cumulative: bool) -> None:
        guard = _compiler(None).compile_role_guard("admin/*", "admin", cumulative=cumulative)
        assert guard() == Outcome.forbidden()

    def test_anonymous_gets_fallback(self) -> None:
        guard = _compiler(None).compile_role_guard("admin/*", "admin", fallback="/login")
        assert guard() == Outcome.fallback("/login")

    def test_only_roles_checked(self) -> None:
        subject = RecordingSubject(roles={"admin"})
        _compiler(subject).compile_role_guard("admin/*", "admin")()
        assert subject.calls == [("has_role", "admin")]


# ---------------------------------------------------------------------------
# Permission guard
# ---------------------------------------------------------------------------


class TestPermissionGuard:
    def test_cumulative(self) -> None:
        subject = RecordingSubject(permissions={"posts:edit"})
        guard = _compiler(subject).compile_permission_guard("posts/*", "posts:edit posts:delete")
        assert guard().is_denied
        assert guard.kind is GuardKind.PERMISSION

    def test_non_cumulative_partial(self) -> None:
        subject = RecordingSubject(permissions={"posts:edit"})
        guard = _compiler(subject).compile_permission_guard(
            "posts/*", ["posts:edit", "posts:delete"], cumulative=False
        )
        assert guard().is_allowed

    def test_permissions_checked_without_params(self) -> None:
        subject = RecordingSubject(permissions={"posts:edit"})
        _compiler(subject).compile_permission_guard("posts/*", "posts:edit")()
        assert subject.calls == [("has_permission", "posts:edit", None)]

    def test_name(self) -> None:
        guard = _compiler().compile_permission_guard("admin/*", "users:edit")
        assert guard.name == f"users:edit_{_ADMIN_HASH[:6]}"


# ---------------------------------------------------------------------------
# Combined guard
# ---------------------------------------------------------------------------


class TestCombinedGuard:
    def test_default_is_not_cumulative(self) -> None:
        subject = RecordingSubject(roles={"admin"})
        guard = _compiler(subject).compile_combined_guard("admin/*", "admin", "users:edit")
        assert guard.cumulative is False
        assert guard.kind is GuardKind.COMBINED
        assert guard().is_allowed

    def test_cumulative_requires_everything(self) -> None:
        subject = RecordingSubject(roles={"admin"})
        guard = _compiler(subject).compile_combined_guard(
            "admin/*", "admin", "users:edit", cumulative=True
        )
        assert guard().is_denied

    def test_nothing_matches(self) -> None:
        guard = _compiler(RecordingSubject()).compile_combined_guard("admin/*", "admin", "users:edit")
        assert guard().is_denied

    def test_roles_checked_before_permissions(self) -> None:
        subject = RecordingSubject()
        _compiler(subject).compile_combined_guard("admin/*", "admin,owner", "users:edit")()
        assert subject.calls == [
            ("has_role", "admin"),
            ("has_role", "owner"),
            ("has_permission", "users:edit", None),
        ]

    def test_one_side_may_be_empty(self) -> None:
        guard = _compiler(RecordingSubject(permissions={"users:edit"})).compile_combined_guard(
            "admin/*", [], "users:edit"
        )
        assert guard().is_allowed

    def test_name(self) -> None:
        guard = _compiler().compile_combined_guard("admin/*", ["owner", "admin"], "users:edit")
        assert guard.name == f"admin_owner_users:edit_{_ADMIN_HASH[:6]}"


# ---------------------------------------------------------------------------
# Fallbacks
# ---------------------------------------------------------------------------


class TestFallback:
    def test_value_returned_on_deny(self) -> None:
        sentinel = object()
        guard = _compiler(RecordingSubject()).compile_role_guard("admin/*", "admin", fallback=sentinel)
        outcome = guard()
        assert outcome.kind is OutcomeKind.FALLBACK
        assert outcome.value is sentinel

    def test_callable_invoked_per_denial(self) -> None:
        calls: list[int] = []

        def redirect() -> str:
            calls.append(1)
            return "/home"

        guard = _compiler(RecordingSubject()).compile_role_guard("admin/*", "admin", fallback=redirect)
        assert guard() == Outcome.fallback("/home")
        assert guard() == Outcome.fallback("/home")
        assert len(calls) == 2

    def test_callable_object_returned_as_is(self) -> None:
        class Page:
            def __call__(self, scope, receive, send) -> None:
                pytest.fail("response object invoked")

        page = Page()
        guard = _compiler(RecordingSubject()).compile_role_guard("admin/*", "admin", fallback=page)
        assert guard().value is page

    def test_not_used_on_allow(self) -> None:
        guard = _compiler(RecordingSubject(roles={"admin"})).compile_role_guard(
            "admin/*", "admin", fallback=lambda: pytest.fail("fallback built on allow")
        )
        assert guard().is_allowed


# ---------------------------------------------------------------------------
# Compilation & registration
# ---------------------------------------------------------------------------


class TestCompilation:
    def test_registers_and_binds(self) -> None:
        dispatcher = InMemoryDispatcher()
        guard = _compiler(dispatcher=dispatcher).compile_role_guard("admin/*", "admin")
        assert dispatcher.get(guard.name) is guard
        assert dispatcher.bindings == [("admin/*", guard.name)]

    def test_state_transition(self) -> None:
        compiler = _compiler()
        guard = compiler.build(GuardKind.ROLE, "admin/*", ("admin",), ())
        assert guard.state is GuardState.UNEVALUATED
        compiler.register(guard)
        assert guard.state is GuardState.ACTIVE

    def test_idempotent(self) -> None:
        dispatcher = InMemoryDispatcher()
        compiler = _compiler(dispatcher=dispatcher)
        first = compiler.compile_role_guard("admin/*", "admin,editor")
        second = compiler.compile_role_guard("admin/*", ["editor", "admin"])
        assert first.name == second.name
        assert first == second
        assert dispatcher.names == [first.name]
        assert dispatcher.bindings == [("admin/*", first.name)]
        assert dispatcher.get(first.name) is second
        assert compiler.guards == {first.name: second}

    def test_same_inputs_on_separate_compilers(self) -> None:
        a = _compiler().compile_combined_guard("reports/*", "auditor", "reports:read")
        b = _compiler().compile_combined_guard("reports/*", "auditor", "reports:read")
        assert a.name == b.name
        assert a == b
        assert hash(a) == hash(b)

    def test_role_and_permission_guards_with_one_name_conflict(self) -> None:
        dispatcher = InMemoryDispatcher()
        compiler = _compiler(dispatcher=dispatcher)
        role_guard = compiler.compile_role_guard("admin/*", "admin")
        with pytest.raises(InvalidArgumentError) as exc_info:
            compiler.compile_permission_guard("admin/*", "admin")
        assert exc_info.value.argument == "name"
        assert dispatcher.get(role_guard.name) is role_guard
        assert compiler.guards == {role_guard.name: role_guard}

    def test_conflict_keeps_role_check_enforced(self) -> None:
        dispatcher = InMemoryDispatcher()
        compiler = _compiler(RecordingSubject(permissions={"admin"}), dispatcher=dispatcher)
        compiler.compile_role_guard("admin/*", "admin")
        with pytest.raises(InvalidArgumentError):
            compiler.compile_permission_guard("admin/*", "admin")
        assert dispatcher.dispatch("/admin/users").is_denied

    def test_combined_guard_colliding_with_role_guard(self) -> None:
        compiler = _compiler()
        compiler.compile_role_guard("admin/*", "admin,owner")
        with pytest.raises(InvalidArgumentError):
            compiler.compile_combined_guard("admin/*", "admin", "owner")

    def test_recompile_with_new_cumulative_replaces(self) -> None:
        dispatcher = InMemoryDispatcher()
        compiler = _compiler(dispatcher=dispatcher)
        compiler.compile_role_guard("admin/*", "admin,editor", cumulative=True)
        relaxed = compiler.compile_role_guard("admin/*", "admin,editor", cumulative=False)
        assert dispatcher.get(relaxed.name) is relaxed
        assert dispatcher.bindings == [("admin/*", relaxed.name)]

    def test_same_policy(self) -> None:
        compiler = _compiler()
        role = compiler.build(GuardKind.ROLE, "admin/*", ("admin", "editor"), ())
        relaxed = compiler.build(
            GuardKind.ROLE, "admin/*", ("editor", "admin"), (), cumulative=False
        )
        as_permissions = compiler.build(GuardKind.PERMISSION, "admin/*", (), ("admin", "editor"))
        elsewhere = compiler.build(GuardKind.ROLE, "users/*", ("admin", "editor"), ())
        assert role.same_policy(relaxed)
        assert not role.same_policy(as_permissions)
        assert not role.same_policy(elsewhere)

    def test_fingerprint_length_from_settings(self) -> None:
        guard = _compiler(fingerprint_length=12).compile_role_guard("admin/*", "admin")
        assert guard.name == f"admin_{_ADMIN_HASH[:12]}"

    @pytest.mark.parametrize("roles", [None, "", [], " , "])
    def test_role_guard_needs_roles(self, roles) -> None:
        with pytest.raises(InvalidArgumentError) as exc_info:
            _compiler().compile_role_guard("admin/*", roles)
        assert exc_info.value.argument == "roles"

    def test_permission_guard_needs_permissions(self) -> None:
        with pytest.raises(InvalidArgumentError) as exc_info:
            _compiler().compile_permission_guard("admin/*", "")
        assert exc_info.value.argument == "permissions"

    def test_combined_guard_needs_something(self) -> None:
        with pytest.raises(InvalidArgumentError):
            _compiler().compile_combined_guard("admin/*", "", [])

    @pytest.mark.parametrize("pattern", ["", "   ", None])
    def test_pattern_required(self, pattern) -> None:
        dispatcher = InMemoryDispatcher()
        with pytest.raises(InvalidArgumentError) as exc_info:
            _compiler(dispatcher=dispatcher).compile_role_guard(pattern, "admin")
        assert exc_info.value.argument == "pattern"
        assert dispatcher.names == []

    def test_cumulative_must_be_bool(self) -> None:
        with pytest.raises(InvalidArgumentError):
            _compiler().compile_role_guard("admin/*", "admin", cumulative="yes")  # type: ignore[arg-type]

    def test_repr(self) -> None:
        guard = _compiler().compile_role_guard("admin/*", "admin")
        assert "state='active'" in repr(guard)
        assert isinstance(guard, Guard)


# ---------------------------------------------------------------------------
# Auditing
# ---------------------------------------------------------------------------


class TestAudit:
    def _compiler(self, subject, audit: FakeAudit, **settings) -> GuardCompiler:
        return GuardCompiler(
            StaticSubjectResolver(subject),
            InMemoryDispatcher(),
            settings=AccessSettings(**settings),
            audit=audit,  # type: ignore[arg-type]
        )

    def test_denial_audited(self) -> None:
        audit = FakeAudit()
        subject = RecordingSubject(roles={"admin"})
        guard = self._compiler(subject, audit).compile_role_guard("admin/*", "admin,editor")
        guard()
        assert len(audit.entries) == 1
        entry = audit.entries[0]
        assert entry["subject"] is subject
        assert entry["resource"] == "admin/*"
        assert entry["guard"] == guard.name
        assert entry["outcome"] is AuditOutcome.DENIED
        assert entry["checks"] == [True, False]

    def test_fallback_audited(self) -> None:
        audit = FakeAudit()
        guard = self._compiler(None, audit).compile_role_guard("admin/*", "admin", fallback="/x")
        guard()
        assert audit.entries[0]["outcome"] is AuditOutcome.FALLBACK

    def test_allow_not_audited(self) -> None:
        audit = FakeAudit()
        guard = self._compiler(RecordingSubject(roles={"admin"}), audit).compile_role_guard(
            "admin/*", "admin"
        )
        guard()
        assert audit.entries == []

    def test_explicit_sink_used_when_setting_off(self) -> None:
        audit = FakeAudit()
        guard = self._compiler(None, audit, audit_denials=False).compile_role_guard("admin/*", "admin")
        guard()
        assert len(audit.entries) == 1

    def test_default_sink_disabled_by_settings(self) -> None:
        compiler = GuardCompiler(
            StaticSubjectResolver(None),
            InMemoryDispatcher(),
            settings=AccessSettings(audit_denials=False),
        )
        guard = compiler.compile_role_guard("admin/*", "admin")
        with capture_logs() as logs:
            guard()
        assert [entry for entry in logs if entry["event"] == "audit.access"] == []
