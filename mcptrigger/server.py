"""HTTP transport for MCP components: configuration, routing and serving."""

from __future__ import annotations

import argparse
import ipaddress
import json
import logging
import os
import socket
import sys
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from http import HTTPStatus
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any
from urllib.parse import urlsplit

from . import demo, template
from .handler import handle_mcp_request
from .jsonrpc import JsonRpcRequest, parse_request
from .types import Component

log = logging.getLogger(__name__)

TRIGGER_TYPE = "mcp"
DEFAULT_ADDRESS = "127.0.0.1:3000"
LISTEN_ENV_VAR = "SPIN_MCP_LISTEN_ADDR"

Address = tuple[str, int]

# Components that the command line can mount by name.
BUILTIN_COMPONENTS: dict[str, Component] = {
    "demo": demo.handle_request,
    "template": template.handle_request,
}


class ConfigError(ValueError):
    """Raised when the trigger configuration is invalid."""


def parse_address(text: str) -> Address:
    """Parse ``ip:port`` or ``[ipv6]:port`` into a (host, port) pair."""
    if not isinstance(text, str):
        raise ConfigError(f"invalid socket address: {text!r}")
    if text.startswith("["):
        host, sep, port = text[1:].partition("]:")
        version = 6
    else:
        host, sep, port = text.rpartition(":")
        version = 4
    if not sep:
        raise ConfigError(f"invalid socket address: {text!r}")
    try:
        ip = ipaddress.ip_address(host)
    except ValueError as exc:
        raise ConfigError(f"invalid socket address: {text!r}") from exc
    if ip.version != version:
        raise ConfigError(f"invalid socket address: {text!r}")
    if not (port.isascii() and port.isdigit()) or int(port) > 65535:
        raise ConfigError(f"invalid socket address: {text!r}")
    return str(ip), int(port)


def _format_address(address: Address) -> str:
    host, port = address
    return f"[{host}]:{port}" if ":" in host else f"{host}:{port}"


def _check_fields(kind: str, data: Any, allowed: set[str]) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise ConfigError(f"{kind} must be a table")
    unknown = sorted(set(data) - allowed)
    if unknown:
        raise ConfigError(f"unknown field `{unknown[0]}` in {kind}")
    return data


@dataclass(frozen=True)
class ComponentConfig:
    """Per-component trigger configuration."""

    component: str
    route: str


@dataclass(frozen=True)
class TriggerMetadata:
    """Trigger-level settings."""

    address: Address = field(default_factory=lambda: parse_address(DEFAULT_ADDRESS))


def parse_trigger_metadata(data: Mapping[str, Any] | None) -> TriggerMetadata:
    """Read trigger metadata; missing data gives the defaults."""
    if data is None:
        return TriggerMetadata()
    fields = _check_fields("trigger metadata", data, {"address"})
    if "address" not in fields:
        return TriggerMetadata()
    return TriggerMetadata(parse_address(fields["address"]))


def parse_component_config(data: Mapping[str, Any] | ComponentConfig) -> ComponentConfig:
    """Read one component's trigger configuration."""
    if isinstance(data, ComponentConfig):
        return data
    fields = _check_fields("component config", data, {"component", "route"})
    for name in ("component", "route"):
        if name not in fields:
            raise ConfigError(f"missing field `{name}` in component config")
        if not isinstance(fields[name], str):
            raise ConfigError(f"field `{name}` in component config must be a string")
    return ComponentConfig(component=fields["component"], route=fields["route"])


class _Server4(ThreadingHTTPServer):
    address_family = socket.AF_INET
    daemon_threads = True


class _Server6(ThreadingHTTPServer):
    address_family = socket.AF_INET6
    daemon_threads = True


@dataclass
class McpTrigger:
    """Routes HTTP requests to MCP components."""

    listen_addr: Address
    component_routes: dict[str, str]
    components: dict[str, Component]

    def handle_http(
        self, method: str, path: str, body: bytes
    ) -> tuple[int, dict[str, str], bytes]:
        """Answer one HTTP request with (status, headers, body).

        Raises LookupError for an unknown route and JsonRpcParseError for a
        body that is not a JSON-RPC request.
        """
        component_id = self.component_routes.get(path)
        if component_id is None:
            raise LookupError(f"No MCP component found for route: {path}")
        if method != "POST":
            return HTTPStatus.METHOD_NOT_ALLOWED, {}, b""
        request: JsonRpcRequest = parse_request(body)
        response = handle_mcp_request(self.components[component_id], request)
        if response is None:
            return HTTPStatus.NO_CONTENT, {}, b""
        return (
            HTTPStatus.OK,
            {"content-type": "application/json"},
            response.to_json().encode("utf-8"),
        )

    def make_server(self) -> ThreadingHTTPServer:
        """Bind a threaded HTTP server to the listen address."""
        trigger = self

        class _Handler(BaseHTTPRequestHandler):
            protocol_version = "HTTP/1.1"

            def _dispatch(self) -> None:
                length = int(self.headers.get("Content-Length") or 0)
                body = self.rfile.read(length) if length > 0 else b""
                path = urlsplit(self.path).path
                try:
                    status, headers, payload = trigger.handle_http(self.command, path, body)
                except Exception as exc:  # the connection is dropped, as on any failure
                    log.warning("Error serving MCP connection: %r", exc)
                    self.close_connection = True
                    return
                self.send_response(status)
                for name, value in headers.items():
                    self.send_header(name, value)
                self.send_header("Content-Length", str(len(payload)))
                self.end_headers()
                if self.command != "HEAD":
                    self.wfile.write(payload)

            do_GET = do_POST = do_PUT = do_DELETE = do_PATCH = _dispatch
            do_HEAD = do_OPTIONS = _dispatch

            def log_message(self, format: str, *args: Any) -> None:
                log.debug(format, *args)

        host, _ = self.listen_addr
        server_cls = _Server6 if ":" in host else _Server4
        return server_cls(self.listen_addr, _Handler)

    def serve(self) -> None:
        """Serve requests until interrupted."""
        with self.make_server() as server:
            host, port = server.server_address[:2]
            log.info("MCP trigger listening on http://%s", _format_address((host, port)))
            server.serve_forever()


def load_trigger(
    trigger_configs: Mapping[str, Any] | Iterable[tuple[str, Any]],
    components: Mapping[str, Component],
    metadata: Mapping[str, Any] | None = None,
    address: str | Address | None = None,
) -> McpTrigger:
    """Build a trigger from trigger configs keyed by trigger id."""
    meta = parse_trigger_metadata(metadata)
    pairs = trigger_configs.items() if isinstance(trigger_configs, Mapping) else trigger_configs
    routes: dict[str, str] = {}
    for trigger_id, data in pairs:
        config = parse_component_config(data)
        if config.component not in components:
            raise ConfigError(f"unknown component: {config.component}")
        log.info(
            "Registering MCP route %s -> component %s (id: %s)",
            config.route,
            config.component,
            trigger_id,
        )
        routes[config.route] = config.component
    if not routes:
        raise ConfigError("No MCP components found in application")
    log.info("Found %d MCP component(s)", len(routes))
    if address is None:
        listen = meta.address
    elif isinstance(address, str):
        listen = parse_address(address)
    else:
        listen = address
    return McpTrigger(
        listen_addr=listen,
        component_routes=routes,
        components={cid: components[cid] for cid in set(routes.values())},
    )


def build_info(environ: Mapping[str, str] | None = None) -> str:
    """Describe the hosting build as ``version (sha date)``."""
    env = os.environ if environ is None else environ
    version = env.get("SPIN_VERSION", "unknown")
    sha = env.get("SPIN_COMMIT_SHA", "unknown")
    date = env.get("SPIN_COMMIT_DATE", "unknown")
    return f"{version} ({sha} {date})"


def _run_tests(trigger: McpTrigger) -> None:
    for route, component_id in sorted(trigger.component_routes.items()):
        ping = JsonRpcRequest(jsonrpc="2.0", method="ping", id=1)
        response = handle_mcp_request(trigger.components[component_id], ping)
        text = response.to_json() if response is not None else ""
        print(f"{route} ({component_id}): {text}")


def main(argv: list[str] | None = None) -> int:
    """Run the MCP trigger from the command line."""
    parser = argparse.ArgumentParser(prog="mcptrigger", description="Serve MCP components over HTTP.")
    parser.add_argument(
        "--listen",
        dest="address",
        default=os.environ.get(LISTEN_ENV_VAR),
        help="IP address and port to listen on",
    )
    parser.add_argument(
        "--route",
        action="append",
        default=[],
        metavar="ROUTE=COMPONENT",
        help=f"mount a component ({', '.join(sorted(BUILTIN_COMPONENTS))}) at a route",
    )
    parser.add_argument(
        "--test", action="store_true", help="Run a test request against each MCP component"
    )
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    log.info("build: %s", build_info())

    configs: list[tuple[str, dict[str, str]]] = []
    for spec in args.route:
        route, sep, component = spec.partition("=")
        if not sep or not route or not component:
            print(f"error: invalid route {spec!r}, expected ROUTE=COMPONENT", file=sys.stderr)
            return 2
        configs.append((f"{component}-{len(configs)}", {"component": component, "route": route}))

    try:
        trigger = load_trigger(configs, BUILTIN_COMPONENTS, address=args.address)
    except ConfigError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    if args.test:
        _run_tests(trigger)
        return 0
    try:
        trigger.serve()
    except KeyboardInterrupt:
        pass
    return 0


if __name__ == "__main__":
    sys.exit(main())