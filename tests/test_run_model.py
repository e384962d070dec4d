# ============================================================================
# RUN MODEL TESTS
# ============================================================================
# EPOCH: 6 - DASHBOARD RUNTIME
# STATUS: Tests - Run aggregate
# PURPOSE: Verify input validation, composition guard and state machine
# CREATED: 10 FEB 2026
# ============================================================================
"""
Run Model Tests

Run with:
    pytest tests/test_run_model.py -v
"""

import pytest

from core.contracts import RunStatus
from core.errors import InvalidOperationError, ValidationError
from core.models import EventType, Input, InputType, Run, RunInputValue

from builders import make_app, make_resource, make_user, text_input


def _values(**values):
    return RunInputValue.from_mapping(values)


def _typed_app():
    resource = make_resource()
    return make_app(resource, inputs=[
        text_input("name", required=True, max_length=5),
        Input.create("email", InputType.email()),
        Input.create("count", InputType.integer()),
        Input.create("active", InputType.boolean()),
        Input.create("since", InputType.date()),
        Input.create("color", InputType.multi_text(10, ["red", "blue"])),
    ])


# ============================================================================
# INPUT VALIDATION
# ============================================================================

class TestCreateWithValidation:

    def test_valid_inputs_create_pending_run(self):
        app = _typed_app()
        run = Run.create_with_validation(
            app,
            _values(name="Ada", email="a@b.io", count="-3", active="TRUE",
                    since="2026-02-10", color="red"),
            created_by="user-1",
        )
        assert run.status is RunStatus.PENDING
        assert run.app_id == app.id
        assert run.version == 0
        assert run.executable_request is None
        assert [e.event_type for e in run.pending_events] == [EventType.RUN_CREATED]

    def test_duplicate_titles(self):
        app = _typed_app()
        values = [RunInputValue(title="name", value="a"), RunInputValue(title="name", value="b")]
        with pytest.raises(ValidationError, match="Duplicate input values: name"):
            Run.create_with_validation(app, values)

    def test_missing_required_listed(self):
        with pytest.raises(ValidationError) as exc_info:
            Run.create_with_validation(_typed_app(), _values(email="a@b.io"))
        assert str(exc_info.value) == "Missing required inputs: name, active"

    def test_boolean_is_always_required(self):
        app = _typed_app()
        assert app.get_input("active").required is True

    def test_unknown_titles_rejected(self):
        with pytest.raises(ValidationError, match="Invalid inputs not defined in app: extra"):
            Run.create_with_validation(
                _typed_app(), _values(name="Ada", active="true", extra="x")
            )

    def test_type_problems_joined(self):
        with pytest.raises(ValidationError) as exc_info:
            Run.create_with_validation(
                _typed_app(),
                _values(name="toolong", active="yes", email="nope", count="1.5",
                        since="10/02/2026", color="green"),
            )
        message = str(exc_info.value)
        assert "Input 'name' must be text of at most 5 characters" in message
        assert "Input 'active' must be a valid boolean (true or false)" in message
        assert "Input 'email' must be a valid email address" in message
        assert "Input 'count' must be a valid integer" in message
        assert "Input 'since' must be a valid ISO date" in message
        assert "Input 'color' must be one of: red, blue" in message
        assert message.count(";") == 5


class TestInputDefinitions:

    def test_invalid_default_rejected(self):
        with pytest.raises(ValidationError, match="Invalid default value"):
            Input.create("count", InputType.integer(), default_value="abc")

    @pytest.mark.parametrize("value", ["a@b.io\n", " a@b.io", "a@b.io x"])
    def test_email_must_match_whole_value(self, value):
        assert InputType.email().check_value("email", value) == (
            "Input 'email' must be a valid email address"
        )

    @pytest.mark.parametrize("value,valid", [
        ("+7", True),
        (" -12 ", True),
        ("٣", False),
        ("1 2", False),
    ])
    def test_integer_values(self, value, valid):
        assert (InputType.integer().check_value("n", value) is None) is valid

    def test_text_max_length_bounds(self):
        with pytest.raises(ValidationError):
            InputType.text(0)
        with pytest.raises(ValidationError):
            InputType.text(501)

    def test_multi_text_requires_allowed_values(self):
        with pytest.raises(ValidationError, match="at least one allowed value"):
            InputType.multi_text(10, [])

    def test_duplicate_input_titles_rejected(self):
        resource = make_resource()
        with pytest.raises(ValidationError, match="Duplicate input title 'a'"):
            make_app(resource, inputs=[text_input("a"), text_input("a")])


# ============================================================================
# COMPOSITION
# ============================================================================

class TestComposeExecutableRequest:

    def test_composes_with_run_inputs(self):
        resource = make_resource()
        app = make_app(resource, url_path="users/@name", inputs=[text_input("name")])
        run = Run.create_with_validation(app, _values(name="ada"))

        composed = run.compose_executable_request(app, resource, make_user())

        assert composed.executable_request.base_url == "https://api.example.com/users/ada"
        assert composed.status is RunStatus.PENDING

    def test_wrong_app_rejected(self):
        resource = make_resource()
        app = make_app(resource)
        other = make_app(resource, name="Other")
        run = Run.create_with_validation(app, [])
        with pytest.raises(ValidationError, match="App does not match"):
            run.compose_executable_request(other, resource, make_user())

    def test_only_pending_runs_compose(self):
        resource = make_resource()
        app = make_app(resource)
        run = Run.create_with_validation(app, []).mark_as_invalid_configuration("bad")
        with pytest.raises(InvalidOperationError):
            run.compose_executable_request(app, resource, make_user())


# ============================================================================
# STATE MACHINE
# ============================================================================

class TestTransitions:

    def _pending(self):
        return Run.create_with_validation(make_app(make_resource()), [])

    def test_success_path(self):
        run = self._pending().mark_as_running().mark_as_success('{"ok":true}')
        assert run.status is RunStatus.SUCCESS
        assert run.response == '{"ok":true}'
        assert run.started_at is not None
        assert run.completed_at is not None
        assert run.status.is_terminal()

    def test_failure_path(self):
        run = self._pending().mark_as_running().mark_as_failure("boom")
        assert run.status is RunStatus.FAILURE
        assert run.error_message == "boom"

    def test_invalid_configuration_from_pending(self):
        run = self._pending().mark_as_invalid_configuration("Associated resource not found")
        assert run.status is RunStatus.INVALID_CONFIGURATION
        assert run.started_at is None

    @pytest.mark.parametrize("step", [
        lambda r: r.mark_as_success("x"),
        lambda r: r.mark_as_failure("x"),
        lambda r: r.mark_as_running().mark_as_running(),
        lambda r: r.mark_as_running().mark_as_invalid_configuration("x"),
        lambda r: r.mark_as_running().mark_as_success("x").mark_as_failure("y"),
    ])
    def test_illegal_transitions_raise(self, step):
        with pytest.raises(InvalidOperationError, match="Cannot transition run from"):
            step(self._pending())

    def test_each_transition_emits_status_event(self):
        run = self._pending().mark_as_running().mark_as_failure("boom")
        changes = [e for e in run.pending_events if e.event_type is EventType.RUN_STATUS_CHANGED]
        assert [(e.event_data["old_status"], e.event_data["new_status"]) for e in changes] == [
            ("Pending", "Running"),
            ("Running", "Failure"),
        ]
        assert changes[-1].error_message == "boom"

    def test_committed_copy_drops_events(self):
        run = self._pending().with_committed_events(version=3)
        assert run.version == 3
        assert run.pending_events == ()
