#!/usr/bin/env python3
# -*- coding: utf-8 -*-
import argparse
import dataclasses
import json
import logging
import sys
import time
from enum import IntEnum

from wb.mqtt_dm.core.data_model import DataModel, DmOption
from wb.mqtt_dm.core.errors import DataModelError, MissingDeviceNameError
from wb.mqtt_dm.core.models import EventPost, PropertyPost, RecvType, RegisterRequest
from wb.mqtt_dm.lib.config import load_client_config
from wb.mqtt_dm.lib.constants import CLIENT_CONFIG_PATH, WB_MQTT_DM_CLI_LOGGER_NAME
from wb.mqtt_dm.transport.mqtt.adapter import MqttTransport

CONNECT_TIMEOUT = 10.0
PUBLISH_TIMEOUT = 5.0


# Exit codes for CLI
class ExitCode(IntEnum):
    # Common linux codes (0-9)
    GEN_SUCCESS = 0  # Generic success for any command
    GEN_ERROR = 1  # Unexpected errors (broker not reachable, etc)
    INIT_ERROR = 2  # Initialization errors (bad config, bad arguments)

    # Send commands (10-19)
    SEND_FAILED = 10


logger = logging.getLogger(WB_MQTT_DM_CLI_LOGGER_NAME)


def recv_to_json(recv) -> str:
    data = dataclasses.asdict(recv)
    data["type"] = RecvType(recv.recv_type).name.lower()
    return json.dumps(data, ensure_ascii=False)


def print_recv(dm, recv, userdata) -> None:
    print(recv_to_json(recv), flush=True)


def _connect(config_path: str):
    """Build transport + data model from config, connect to the broker"""
    cfg = load_client_config(config_path)
    transport = MqttTransport(cfg=cfg.mqtt)
    dm = DataModel()
    dm.setopt(DmOption.POST_REPLY, cfg.post_reply)
    dm.setopt(DmOption.RECV_HANDLER, print_recv)
    dm.setopt(DmOption.MQTT_HANDLE, transport)
    transport.start()
    if not transport.wait_connected(CONNECT_TIMEOUT):
        transport.stop()
        raise ConnectionError("MQTT broker %s:%s not reachable" % (cfg.mqtt.host, cfg.mqtt.port))
    return transport, dm


def send_one(config_path: str, msg) -> ExitCode:
    try:
        transport, dm = _connect(config_path)
    except (ValueError, MissingDeviceNameError) as e:
        logger.error("Configuration error: %r", e)
        return ExitCode.INIT_ERROR
    except (OSError, DataModelError) as e:
        logger.error("Connect failed: %r", e)
        return ExitCode.GEN_ERROR

    try:
        msg_id = dm.send(msg)
        transport.wait_published(PUBLISH_TIMEOUT)
        logger.info("Sent %s, id=%r", type(msg).__name__, msg_id)
        print(msg_id)
        return ExitCode.GEN_SUCCESS
    except DataModelError as e:
        logger.error("Send failed (code=%d): %r", e.code, e)
        return ExitCode.SEND_FAILED
    finally:
        dm.deinit()
        transport.stop()


def listen(config_path: str) -> ExitCode:
    try:
        transport, dm = _connect(config_path)
    except (ValueError, MissingDeviceNameError) as e:
        logger.error("Configuration error: %r", e)
        return ExitCode.INIT_ERROR
    except (OSError, DataModelError) as e:
        logger.error("Connect failed: %r", e)
        return ExitCode.GEN_ERROR

    logger.info("Listening, press Ctrl+C to stop")
    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        logger.warning("Interrupted by user (Ctrl+C)")
    finally:
        dm.deinit()
        transport.stop()
    return ExitCode.GEN_SUCCESS


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wb-mqtt-dm",
        description="Send and receive thing-model messages over MQTT",
        epilog="""
Example:
  wb-mqtt-dm post-property '{"temperature":23.5}'
  wb-mqtt-dm post-event overheat '{"t":90}'
  wb-mqtt-dm listen
""",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-c", "--config", default=CLIENT_CONFIG_PATH, help="Client configuration file")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", title="Available commands", metavar="<command>")

    p = subparsers.add_parser("register", help="Request device registration info")
    p.add_argument("--time", help="Event time, epoch milliseconds (default: now)")

    p = subparsers.add_parser("post-property", help="Report properties")
    p.add_argument("params", help="JSON object with property values")

    p = subparsers.add_parser("post-event", help="Report an event")
    p.add_argument("identifier", help="Event identifier")
    p.add_argument("params", help="JSON event data")
    p.add_argument("--time", help="Event time, epoch milliseconds (default: now)")

    subparsers.add_parser("listen", help="Print downlink messages as JSON lines")
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    if args.command == "register":
        return int(send_one(args.config, RegisterRequest(time=args.time)))
    if args.command == "post-property":
        return int(send_one(args.config, PropertyPost(params=args.params)))
    if args.command == "post-event":
        return int(send_one(args.config, EventPost(event_id=args.identifier, params=args.params, time=args.time)))
    if args.command == "listen":
        return int(listen(args.config))
    parser.print_help()
    return int(ExitCode.INIT_ERROR)


if __name__ == "__main__":
    sys.exit(main())
