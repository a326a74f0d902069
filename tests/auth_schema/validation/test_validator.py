import logging
from dataclasses import replace

from src.auth_schema.validation.diagnostics import (
    Diagnostic,
    DiagnosticLevel,
    ValidationReport,
)
from src.auth_schema.validation.validator import KeyspaceValidator


# --------- Stubs ---------

class RecordingTableRule:
    code = "RECORDING"
    description = "records every table it sees"

    def __init__(self, call_log):
        self.call_log = call_log

    def check(self, table):
        self.call_log.append(("table", table.name))
        return []


class RecordingKeyspaceRule:
    code = "RECORDING_KEYSPACE"
    description = "records the keyspace"

    def __init__(self, call_log):
        self.call_log = call_log

    def check(self, keyspace, replication_floor):
        self.call_log.append(("keyspace", replication_floor))
        return [Diagnostic("", DiagnosticLevel.WARNING, self.code, "seen")]


# --------- Tests ---------

def test_table_rules_run_per_table_before_keyspace_rules(auth_keyspace):
    call_log = []
    validator = KeyspaceValidator(
        table_rules=[RecordingTableRule(call_log)],
        keyspace_rules=[RecordingKeyspaceRule(call_log)],
    )
    report = validator.validate(auth_keyspace, replication_floor=2)

    assert call_log == [("table", t.name) for t in auth_keyspace.tables] + [("keyspace", 2)]
    assert report.ok
    assert len(report.warnings) == 1


def test_default_rules_pass_on_assembled_keyspace(auth_keyspace):
    report = KeyspaceValidator.with_default_rules().validate(auth_keyspace, 1)
    assert report.ok
    assert {d.table_key for d in report.diagnostics} == {
        "system_auth.cidr_permissions",
        "system_auth.cidr_groups",
    }
    assert {d.level for d in report.diagnostics} == {DiagnosticLevel.INFO}


def test_default_rules_fail_when_floor_is_not_met(auth_keyspace):
    report = KeyspaceValidator.with_default_rules().validate(auth_keyspace, 4)
    assert not report.ok
    assert [d.code for d in report.errors] == ["REPLICATION_FLOOR_RESPECTED"]


def test_empty_validator_reports_nothing(auth_keyspace):
    assert KeyspaceValidator().validate(auth_keyspace, 1) == ValidationReport(diagnostics=())


def test_report_ok_and_errors():
    error = Diagnostic("system_auth.roles", DiagnosticLevel.ERROR, "X", "broken")
    info = Diagnostic("", DiagnosticLevel.INFO, "Y", "fine")
    report = ValidationReport(diagnostics=(info, error))
    assert not report.ok
    assert report.errors == (error,)
    assert report.warnings == ()
    assert str(error) == "[X] system_auth.roles: broken"
    assert str(info) == "[Y] fine"


def test_validator_sees_tampered_tables(auth_keyspace):
    tables = tuple(replace(t, description="x") for t in auth_keyspace.tables)
    tampered = replace(auth_keyspace, tables=tables)
    report = KeyspaceValidator.with_default_rules().validate(tampered, 1)
    assert report.ok


def test_levels_map_onto_logging_levels():
    assert DiagnosticLevel.ERROR.log_level == logging.ERROR
    assert DiagnosticLevel.WARNING.log_level == logging.WARNING
    assert DiagnosticLevel.INFO.log_level == logging.INFO
