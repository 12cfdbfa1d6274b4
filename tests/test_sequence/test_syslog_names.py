"""Tests for log target parsing."""

import syslog

import pytest

from sequence.errors import ConfigurationError
from sequence.options import Syslog
from sequence.syslog_names import FACILITIES, LEVELS, parse_log_target


class TestParseLogTarget:
    def test_level_only_defaults_to_user(self):
        assert parse_log_target("info") == Syslog(facility=syslog.LOG_USER, level=syslog.LOG_INFO)

    def test_facility_and_level(self):
        target = parse_log_target("daemon.err")
        assert target.facility == syslog.LOG_DAEMON
        assert target.level == syslog.LOG_ERR

    def test_local_facility(self):
        assert parse_log_target("local7.debug").facility == syslog.LOG_LOCAL7

    def test_case_insensitive(self):
        assert parse_log_target("Cron.Warning") == Syslog(syslog.LOG_CRON, syslog.LOG_WARNING)

    def test_aliases(self):
        assert parse_log_target("warn").level == syslog.LOG_WARNING
        assert parse_log_target("error").level == syslog.LOG_ERR
        assert parse_log_target("panic").level == syslog.LOG_EMERG

    def test_unknown_facility(self):
        with pytest.raises(ConfigurationError, match="facility 'bogus'"):
            parse_log_target("bogus.info")

    def test_unknown_level(self):
        with pytest.raises(ConfigurationError, match="level 'loud'"):
            parse_log_target("user.loud")

    def test_empty_level(self):
        with pytest.raises(ConfigurationError):
            parse_log_target("daemon.")


class TestTables:
    def test_tables_are_immutable(self):
        with pytest.raises(TypeError):
            FACILITIES["new"] = 1
        with pytest.raises(TypeError):
            LEVELS["new"] = 1

    def test_standard_names_present(self):
        for name in ("auth", "cron", "daemon", "kern", "mail", "user", "local0"):
            assert name in FACILITIES
        for name in ("emerg", "alert", "crit", "err", "warning", "notice", "info", "debug"):
            assert name in LEVELS
