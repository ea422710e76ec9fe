#!/usr/bin/env python3
"""
workflow-helper: Command-line interface for the AI Workflow Helper.

Usage:
    workflow-helper submit "Draft weekly client status reports from raw project notes"
    workflow-helper send --email you@example.com --id 1
    workflow-helper status
    workflow-helper init-db
    workflow-helper serve --port 8000
"""
import argparse
import asyncio
import os
import sys
from urllib.parse import urljoin

import requests

DEFAULT_BASE = os.environ.get("WORKFLOW_HELPER_URL", "http://localhost:8000")
REQUEST_TIMEOUT = 120  # The server waits on the LLM and email API


def _error_message(resp: requests.Response) -> str:
    try:
        return resp.json().get("error") or resp.text[:200]
    except ValueError:
        return resp.text[:200]


def cmd_submit(args):
    """Submit a workflow description and print the suggested steps."""
    resp = requests.post(
        urljoin(args.url, "/process-workflow"),
        json={"workflow_text": args.workflow_text},
        timeout=REQUEST_TIMEOUT,
    )
    if resp.status_code != 200:
        print(f"❌ Error ({resp.status_code}): {_error_message(resp)}")
        sys.exit(1)

    data = resp.json()
    print(f"Workflow ID: {data['workflowId']}")
    steps = data.get("steps") or []
    if not steps:
        print("No specific AI steps were suggested for this workflow.")
        return
    for i, step in enumerate(steps, start=1):
        print(f"  {i}. {step}")


def cmd_send(args):
    """Email the instructions for a stored workflow."""
    resp = requests.post(
        urljoin(args.url, "/send-instructions"),
        json={"user_email": args.email, "workflow_id": args.id},
        timeout=REQUEST_TIMEOUT,
    )
    if resp.status_code != 200:
        print(f"❌ Error ({resp.status_code}): {_error_message(resp)}")
        sys.exit(1)
    print(f"✅ {resp.json().get('message', 'Instructions sent.')}")


def cmd_status(args):
    """Check the server is up."""
    try:
        resp = requests.get(urljoin(args.url, "/health"), timeout=10)
    except requests.RequestException as e:
        print(f"❌ Could not reach {args.url}: {e}")
        sys.exit(1)
    if resp.status_code != 200:
        print(f"❌ Unhealthy ({resp.status_code})")
        sys.exit(1)
    print(f"✅ {resp.json().get('app', 'server')} is up")


def cmd_init_db(args):
    """Create the database tables for the configured DATABASE_URL."""
    from workflow_helper.config import get_settings
    from workflow_helper.db.database import Database

    async def _init():
        database = Database(get_settings())
        try:
            await database.init_db()
        finally:
            await database.dispose()

    print("Creating database tables...")
    asyncio.run(_init())
    print("Database initialized successfully!")


def cmd_serve(args):
    """Run the API server."""
    import uvicorn

    uvicorn.run(
        "workflow_helper.main:create_app",
        factory=True,
        host=args.host,
        port=args.port,
        reload=args.reload,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="workflow-helper",
        description="AI Workflow Helper CLI: suggest AI steps and email instructions",
    )
    parser.add_argument("--url", default=DEFAULT_BASE, help="API base URL")

    sub = parser.add_subparsers(dest="command", help="Command")

    # submit
    p_submit = sub.add_parser("submit", help="Get suggested AI steps for a workflow")
    p_submit.add_argument("workflow_text", help="Description of the workflow")
    p_submit.set_defaults(func=cmd_submit)

    # send
    p_send = sub.add_parser("send", help="Email instructions for a workflow")
    p_send.add_argument("--email", required=True, help="Recipient email address")
    p_send.add_argument("--id", required=True, type=int, help="Workflow ID from submit")
    p_send.set_defaults(func=cmd_send)

    # status
    p_status = sub.add_parser("status", help="Check server health")
    p_status.set_defaults(func=cmd_status)

    # init-db
    p_init = sub.add_parser("init-db", help="Create database tables")
    p_init.set_defaults(func=cmd_init_db)

    # serve
    p_serve = sub.add_parser("serve", help="Run the API server")
    p_serve.add_argument("--host", default="0.0.0.0")
    p_serve.add_argument("--port", type=int, default=8000)
    p_serve.add_argument("--reload", action="store_true")
    p_serve.set_defaults(func=cmd_serve)

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return

    args.func(args)


if __name__ == "__main__":
    main()
