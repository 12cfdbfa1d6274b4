"""Syslog facility and severity name tables, and log target parsing."""

from __future__ import annotations

import syslog
from types import MappingProxyType

from sequence.errors import ConfigurationError
from sequence.options import Syslog

DEFAULT_FACILITY = "user"


def _table(names: dict[str, str]) -> MappingProxyType:
    # Some facilities (authpriv, ftp) are not defined on every platform.
    return MappingProxyType({
        name: getattr(syslog, const)
        for name, const in names.items()
        if hasattr(syslog, const)
    })


FACILITIES = _table({
    "auth": "LOG_AUTH",
    "authpriv": "LOG_AUTHPRIV",
    "cron": "LOG_CRON",
    "daemon": "LOG_DAEMON",
    "ftp": "LOG_FTP",
    "kern": "LOG_KERN",
    "lpr": "LOG_LPR",
    "mail": "LOG_MAIL",
    "news": "LOG_NEWS",
    "security": "LOG_AUTH",
    "syslog": "LOG_SYSLOG",
    "user": "LOG_USER",
    "uucp": "LOG_UUCP",
    "local0": "LOG_LOCAL0",
    "local1": "LOG_LOCAL1",
    "local2": "LOG_LOCAL2",
    "local3": "LOG_LOCAL3",
    "local4": "LOG_LOCAL4",
    "local5": "LOG_LOCAL5",
    "local6": "LOG_LOCAL6",
    "local7": "LOG_LOCAL7",
})

LEVELS = _table({
    "emerg": "LOG_EMERG",
    "panic": "LOG_EMERG",
    "alert": "LOG_ALERT",
    "crit": "LOG_CRIT",
    "err": "LOG_ERR",
    "error": "LOG_ERR",
    "warning": "LOG_WARNING",
    "warn": "LOG_WARNING",
    "notice": "LOG_NOTICE",
    "info": "LOG_INFO",
    "debug": "LOG_DEBUG",
})


def parse_log_target(target: str) -> Syslog:
    """Parse a ``[facility.]level`` string into a Syslog sink config.

    Names are matched case-insensitively. A missing facility means ``user``.
    """
    facility_name, _, level_name = target.strip().lower().rpartition(".")
    facility_name = facility_name or DEFAULT_FACILITY

    if facility_name not in FACILITIES:
        raise ConfigurationError(f"Unknown log facility '{facility_name}'")
    if level_name not in LEVELS:
        raise ConfigurationError(f"Unknown log level '{level_name}'")
    return Syslog(facility=FACILITIES[facility_name], level=LEVELS[level_name])
