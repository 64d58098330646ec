"""Tests for routescope.sources — call-site patterns and source scanning."""

import functools

import acme_shop
import pytest

from routescope.issues import IssueStage
from routescope.sources import (
    CapabilitySource,
    InspectSource,
    NullSource,
    ScanCache,
    ScanResult,
    StaticSource,
    build_patterns,
    scan_text,
)


class TestScanText:
    def test_check_function(self) -> None:
        assert scan_text("return current_user_can('edit_posts')") == ("edit_posts",)

    def test_double_quotes_and_spacing(self) -> None:
        assert scan_text('current_user_can (  "read" )') == ("read",)

    def test_user_check_function(self) -> None:
        assert scan_text("user_can($user, 'publish_posts')") == ("publish_posts",)

    def test_deduplicated_in_order(self) -> None:
        source = "current_user_can('b') and current_user_can('a') or current_user_can('b')"
        assert scan_text(source) == ("b", "a")

    def test_check_captures_come_first(self) -> None:
        source = "user_can(u, 'first') and current_user_can('second')"
        assert scan_text(source) == ("second", "first")

    def test_variable_argument_ignored(self) -> None:
        assert scan_text("current_user_can(capability)") == ()

    def test_user_pattern_does_not_match_inside_check_name(self) -> None:
        assert scan_text("current_user_can('edit_post', 'extra')") == ("edit_post",)

    def test_custom_helper_names(self) -> None:
        patterns = build_patterns(["has_perm"], ["user_has_perm"])
        source = "has_perm('shop.view') or user_has_perm(request.user, 'shop.edit')"
        assert scan_text(source, patterns) == ("shop.view", "shop.edit")


class TestInspectSource:
    def test_bound_method(self) -> None:
        result = InspectSource(acme_shop.ItemsController().can_edit).scan()
        assert result == ScanResult(capabilities=("edit_posts", "delete_posts"))

    def test_free_function(self) -> None:
        result = InspectSource(acme_shop.check_editor_or_reader).scan()
        assert result.capabilities == ("edit_pages", "read")

    def test_mixed_patterns(self) -> None:
        result = InspectSource(acme_shop.check_mixed).scan()
        assert result.capabilities == ("edit_posts", "publish_posts")

    def test_no_checks(self) -> None:
        result = InspectSource(acme_shop.ItemsController().can_do_anything).scan()
        assert result.capabilities == ()
        assert result.issue is None

    def test_lambdas_in_one_statement(self) -> None:
        assert InspectSource(acme_shop.ROUTE_CHECKS["items"]).scan().capabilities == ("read",)
        assert InspectSource(acme_shop.ROUTE_CHECKS["settings"]).scan().capabilities == ("manage_options",)

    def test_lambdas_on_one_line(self) -> None:
        first, second = acme_shop.PAIRED_CHECKS
        assert InspectSource(first).scan().capabilities == ("read",)
        assert InspectSource(second).scan().capabilities == ("edit_posts",)

    def test_nested_lambda(self) -> None:
        assert InspectSource(acme_shop.NESTED_CHECK).scan().capabilities == ("edit_posts", "read")

    def test_unwraps_decorators(self) -> None:
        @functools.wraps(acme_shop.check_mixed)
        def wrapper() -> bool:
            return acme_shop.check_mixed()

        assert InspectSource(wrapper).scan().capabilities == ("edit_posts", "publish_posts")

    def test_callable_instance(self) -> None:
        class Checker:
            def __call__(self) -> bool:
                return acme_shop.current_user_can("list_users")

        assert InspectSource(Checker()).scan().capabilities == ("list_users",)

    def test_builtin_reports_issue(self) -> None:
        result = InspectSource(len).scan()
        assert result.capabilities == ()
        assert result.issue is not None
        assert result.issue.stage is IssueStage.SOURCE

    def test_missing_source_reports_issue(self) -> None:
        namespace: dict[str, object] = {}
        exec("def generated():\n    return current_user_can('read')\n", namespace)  # noqa: S102
        result = InspectSource(namespace["generated"]).scan()  # type: ignore[arg-type]
        assert result.capabilities == ()
        assert result.issue is not None
        assert "generated" in result.issue.message


class TestOtherSources:
    def test_null(self) -> None:
        assert NullSource().scan() == ScanResult()

    def test_static(self) -> None:
        assert StaticSource(("read", "read", "edit_posts")).scan().capabilities == ("read", "edit_posts")

    @pytest.mark.parametrize("source", [NullSource(), StaticSource(), InspectSource(len)])
    def test_protocol(self, source: object) -> None:
        assert isinstance(source, CapabilitySource)


class TestScanCache:
    def test_each_routine_scanned_once(self) -> None:
        calls: list[object] = []

        class CountingSource:
            def __init__(self, target: object) -> None:
                self.target = target

            def scan(self) -> ScanResult:
                calls.append(self.target)
                return ScanResult(capabilities=("read",))

        cache = ScanCache(CountingSource)
        controller = acme_shop.ItemsController()
        first = cache.source_for(controller.can_read).scan()
        second = cache.source_for(controller.can_read).scan()
        cache.source_for(acme_shop.check_mixed).scan()

        assert first == second
        assert len(calls) == 2
