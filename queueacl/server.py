"""HTTP decision endpoint and CLI entry points."""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any

import uvicorn
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from .acl import ACL
from .audit import configure_logging
from .exceptions import AccessDenied, BadPolicy, MalformedACL
from .guard import QueueGuard
from .policy import load_policy
from .types import Metrics, UserGroup


class CheckRequest(BaseModel):
    queue: str
    user: str = Field(min_length=1)
    groups: list[str] = Field(default_factory=list)
    action: str = "submit"


def create_app(guard: QueueGuard) -> FastAPI:
    app = FastAPI(title="queueacl")
    metrics = Metrics()
    app.state.metrics = metrics

    @app.get("/healthz")
    async def healthz() -> dict[str, bool]:
        return {"ok": True}

    @app.get("/metrics")
    async def get_metrics() -> dict[str, Any]:
        return metrics.to_dict()

    @app.post("/check")
    def check(request: CheckRequest) -> dict[str, Any]:
        identity = UserGroup.of(request.user, request.groups)
        try:
            decision = guard.decide(request.queue, identity, request.action)
        except ValueError as exc:
            metrics.errors += 1
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        metrics.record(decision)
        return decision.to_dict()

    return app


def run_serve(args: argparse.Namespace) -> int:
    policy = load_policy(args.policy)
    configure_logging(policy.logging)
    app = create_app(QueueGuard(policy))
    uvicorn.run(app, host=args.host, port=args.port, log_level="info")
    return 0


def run_check(args: argparse.Namespace) -> int:
    policy = load_policy(args.policy)
    configure_logging(policy.logging)
    guard = QueueGuard(policy)
    identity = UserGroup.of(args.user, args.group)
    try:
        decision = guard.require(args.queue, identity, args.action)
    except AccessDenied as exc:
        print("DENY:", exc)
        return 1
    print("ALLOW", decision.reason)
    return 0


def run_parse(args: argparse.Namespace) -> int:
    try:
        acl = ACL.build(args.acl, silence_warnings=args.silent)
    except MalformedACL as exc:
        print("ERROR:", exc)
        return 1
    print(json.dumps(acl.to_dict()))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="queueacl", description="Queue ACL tools")
    sub = parser.add_subparsers(dest="command")

    serve_cmd = sub.add_parser("serve", help="Run the HTTP decision endpoint")
    serve_cmd.add_argument("--policy", required=True)
    serve_cmd.add_argument("--host", default="127.0.0.1")
    serve_cmd.add_argument("--port", type=int, default=8787)

    check_cmd = sub.add_parser("check", help="Check an identity against a queue policy")
    check_cmd.add_argument("--policy", required=True)
    check_cmd.add_argument("--queue", required=True)
    check_cmd.add_argument("--user", required=True)
    check_cmd.add_argument("--group", action="append", default=[])
    check_cmd.add_argument("--action", choices=["submit", "admin"], default="submit")

    parse_cmd = sub.add_parser("parse", help="Parse an ACL string and print it as JSON")
    parse_cmd.add_argument("acl")
    parse_cmd.add_argument("--silent", action="store_true")

    return parser


def cli_main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        if args.command == "serve":
            return run_serve(args)
        if args.command == "check":
            return run_check(args)
        if args.command == "parse":
            return run_parse(args)
    except (BadPolicy, ValueError) as exc:
        print("ERROR:", exc, file=sys.stderr)
        return 2
    parser.print_help()
    return 0
