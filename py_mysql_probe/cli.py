# coding=utf-8
"""
Command line entry point.

Usage:
    py-mysql-probe --host 192.168.1.100 --port 3306 --timeout 3 -v
    python -m py_mysql_probe --config py_mysql_probe/example.conf

Prints one JSON record on stdout and always exits 0; the ``ok`` and
``mysql`` fields carry the result.
"""
import argparse
import configparser
import json
import logging
import math
import sys

from py_mysql_probe.lib.log import init_logger
from py_mysql_probe.probe import probe

DEFAULTS = {
    "Probe": {
        "host": "127.0.0.1",
        "port": "3306",
        "timeout": "3",
        "verbose": "false",
    },
    "Logging": {
        "level": str(logging.WARNING),
        "file": "",
    },
}


def build_parser():
    parser = argparse.ArgumentParser(
        prog='py-mysql-probe',
        description='Read the greeting of a MySQL server without logging in')
    parser.add_argument('--host', help='Target host/IP (default 127.0.0.1)')
    parser.add_argument('--port', type=int, help='Target TCP port (default 3306)')
    parser.add_argument('--timeout', type=float, help='Dial/read timeout in seconds (default 3)')
    parser.add_argument('-v', '--verbose', action='store_true', default=None,
                        help='Verbose output (dump hex preview)')
    parser.add_argument('--config', help='INI file with [Probe] and [Logging] sections')
    parser.add_argument('--log-level', choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help='Log level for stderr output')
    return parser


def load_settings(argv=None):
    """
    Merges defaults, the config file and command line flags, in that order
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    config = configparser.ConfigParser()
    config.read_dict(DEFAULTS)
    if args.config and not config.read(args.config):
        parser.error("cannot read config file %s" % args.config)

    probe_conf = config["Probe"]
    log_conf = config["Logging"]
    try:
        settings = {
            "host": args.host or probe_conf["host"],
            "port": args.port if args.port is not None else probe_conf.getint("port"),
            "timeout": args.timeout if args.timeout is not None else probe_conf.getfloat("timeout"),
            "verbose": args.verbose if args.verbose is not None else probe_conf.getboolean("verbose"),
            "log_level": getattr(logging, args.log_level) if args.log_level else log_conf.getint("level"),
            "log_file": log_conf.get("file") or None,
        }
    except ValueError as e:
        parser.error("bad value in config file: %s" % e)

    if not 0 < settings["port"] < 65536:
        parser.error("port out of range: %d" % settings["port"])
    if not math.isfinite(settings["timeout"]) or settings["timeout"] <= 0:
        parser.error("timeout must be a positive number of seconds")
    return settings


def main(argv=None):
    settings = load_settings(argv)
    init_logger(settings["log_level"], settings["log_file"])

    outcome = probe(settings["host"], settings["port"], settings["timeout"])
    print(json.dumps(outcome.toRecord(settings["verbose"]), separators=(',', ':')))
    return 0


if __name__ == "__main__":
    sys.exit(main())
