from __future__ import annotations

# Single-entrypoint runner.
#
#     python -m courier_dispatch.app run [--couriers N] [--generate N | --orders-file PATH] [--publish]
#     python -m courier_dispatch.app menu
#     python -m courier_dispatch.app watch [--namespace NS]
#
# `run` is the normal path; `watch` follows a published run from another shell.

import argparse

from .mqtt_topics import DEFAULT_NAMESPACE
from .transit import DEFAULT_TRANSIT_SECONDS


def main() -> None:
    parser = argparse.ArgumentParser(description="Courier Dispatch Simulation - main entrypoint")
    sub = parser.add_subparsers(dest="cmd", required=True)

    def add_mqtt_args(p: argparse.ArgumentParser) -> None:
        p.add_argument("--mqtt-host", default="127.0.0.1")
        p.add_argument("--mqtt-port", type=int, default=1883)
        p.add_argument("--namespace", default=DEFAULT_NAMESPACE)

    # ---- Normal operation ----
    p_run = sub.add_parser("run", help="Take orders and deliver them with N couriers")
    add_mqtt_args(p_run)
    p_run.add_argument("--couriers", type=int, default=3)
    p_run.add_argument("--transit-seconds", type=float, default=DEFAULT_TRANSIT_SECONDS)
    p_run.add_argument("--max-transit-seconds", type=float, default=None)
    p_run.add_argument("--seed", type=int, default=None)
    source = p_run.add_mutually_exclusive_group()
    source.add_argument("--orders-file", default=None, help="CSV with customer_name,food,drink,dessert")
    source.add_argument("--generate", type=int, default=None, help="generate N random orders")
    p_run.add_argument("--no-menu", action="store_true")
    p_run.add_argument("--publish", action="store_true", help="publish deliveries and status to MQTT")
    p_run.add_argument("--publish-status-every", type=float, default=2.0, help="seconds between status snapshots")

    sub.add_parser("menu", help="Print the menu")

    p_watch = sub.add_parser("watch", help="Follow the delivery feed of a published run")
    add_mqtt_args(p_watch)
    p_watch.add_argument("--no-status", action="store_true")

    args = parser.parse_args()

    if args.cmd == "run":
        from .simulation import main as run

        run_args = [
            "--mqtt-host",
            args.mqtt_host,
            "--mqtt-port",
            str(args.mqtt_port),
            "--namespace",
            args.namespace,
            "--couriers",
            str(args.couriers),
            "--transit-seconds",
            str(args.transit_seconds),
            "--publish-status-every",
            str(args.publish_status_every),
        ]
        if args.max_transit_seconds is not None:
            run_args += ["--max-transit-seconds", str(args.max_transit_seconds)]
        if args.seed is not None:
            run_args += ["--seed", str(args.seed)]
        if args.orders_file is not None:
            run_args += ["--orders-file", args.orders_file]
        if args.generate is not None:
            run_args += ["--generate", str(args.generate)]
        if args.no_menu:
            run_args += ["--no-menu"]
        if args.publish:
            run_args += ["--publish"]

        _dispatch_to_module_main(run, run_args)
        return

    if args.cmd == "menu":
        from .menu import render_menu

        print(render_menu())
        return

    if args.cmd == "watch":
        from .feed import main as run

        run_args = ["--mqtt-host", args.mqtt_host, "--mqtt-port", str(args.mqtt_port), "--namespace", args.namespace]
        if args.no_status:
            run_args += ["--no-status"]
        _dispatch_to_module_main(run, run_args)
        return


def _dispatch_to_module_main(module_main, argv: list[str]) -> None:
    import sys

    old_argv = sys.argv[:]
    try:
        sys.argv = [old_argv[0], *argv]
        module_main()
    finally:
        sys.argv = old_argv


if __name__ == "__main__":
    main()
