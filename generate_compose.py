#!/usr/bin/env python3
# generate_compose.py
#
# This script auto-generates:
#  1) A Dockerfile in the project root (if not present), shared by every
#     service listed in config.yml.
#  2) A hypercorn.toml carrying the server settings from config.yml
#     (currently websocket_max_message_size).
#  3) A docker-compose.yml in the project root with one container per
#     service, each running its own app factory under Hypercorn.
#
# Usage:
#   cd project-root
#   python3 generate_compose.py

import os
import textwrap

import yaml

# ─── Paths and constants ───────────────────────────────────────────────────────
ROOT_DIR = os.path.abspath(os.path.dirname(__file__))
CONFIG_PATH = os.path.join(ROOT_DIR, "config.yml")
DOCKERFILE_PATH = os.path.join(ROOT_DIR, "Dockerfile")
OUTPUT_COMPOSE = os.path.join(ROOT_DIR, "docker-compose.yml")
HYPERCORN_CONFIG_PATH = os.path.join(ROOT_DIR, "hypercorn.toml")

DEFAULT_MAX_MESSAGE_SIZE = 1024

# Single image for all services; the compose entry picks the app factory.
DOCKERFILE_TEMPLATE = textwrap.dedent("""
    # Dockerfile for the clockdemo services

    # Stage 1: install the package and its dependencies
    FROM python:3.11-slim AS builder

    WORKDIR /app

    COPY pyproject.toml .
    COPY clockdemo ./clockdemo
    RUN pip install --no-cache-dir .

    # Stage 2: runtime image
    FROM python:3.11-slim

    WORKDIR /app

    # Copy installed packages from builder
    COPY --from=builder /usr/local/lib/python3.11/site-packages /usr/local/lib/python3.11/site-packages
    COPY --from=builder /usr/local/bin /usr/local/bin

    # Runtime config and static files
    COPY config.yml hypercorn.toml ./
    COPY assets ./assets
""")

COMMAND_TEMPLATE = [
    "hypercorn", "clockdemo.{service}:create_app()",
    "--bind", "0.0.0.0:{port}",
    "--workers", "4",
    "--worker-class", "uvloop",
    "--config", "hypercorn.toml",
]


def load_config(path):
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def load_services_config(path):
    """
    Load config.yml and return its list of dicts:
       [{'name': 'clock_service', 'port': 8080}, ...]
    """
    return load_config(path).get("services", [])


def build_hypercorn_toml(config):
    """
    Render the Hypercorn settings that config.yml controls as TOML.
    """
    size = config.get("websocket_max_message_size") or DEFAULT_MAX_MESSAGE_SIZE
    try:
        size = int(size)
    except (TypeError, ValueError):
        print(f"Warning: invalid websocket_max_message_size '{size}', using {DEFAULT_MAX_MESSAGE_SIZE}.")
        size = DEFAULT_MAX_MESSAGE_SIZE
    return (
        "# Generated from config.yml by generate_compose.py\n"
        f"websocket_max_message_size = {size}\n"
    )


def write_hypercorn_config(config, path=HYPERCORN_CONFIG_PATH):
    with open(path, "w", encoding="utf-8") as f:
        f.write(build_hypercorn_toml(config))
    print(f"Generated '{path}'.")


def ensure_dockerfile(path=DOCKERFILE_PATH):
    """
    If the Dockerfile does not exist, create it from the template.
    """
    if os.path.exists(path):
        print(f"Dockerfile already exists at '{path}', skipping creation.")
        return False

    with open(path, "w", encoding="utf-8") as f:
        f.write(DOCKERFILE_TEMPLATE.strip() + "\n")
    print(f"Created Dockerfile at '{path}'.")
    return True


def build_compose(services):
    """
    Build the docker-compose structure with one entry per service.
    Entries without a name or with an invalid port are skipped.
    """
    compose = {"services": {}}

    for svc in services:
        service_name = svc.get("name")
        if not service_name:
            print(f"Warning: service entry without a name: {svc!r}. Skipping.")
            continue

        try:
            port = int(svc.get("port", 8080))
        except (TypeError, ValueError):
            print(f"Warning: invalid port '{svc.get('port')}' for service '{service_name}'. Skipping.")
            continue

        command = [part.format(service=service_name, port=port) for part in COMMAND_TEMPLATE]
        compose["services"][service_name] = {
            "build": {
                "context": ".",
                "dockerfile": "Dockerfile"
            },
            "container_name": service_name,
            "command": command,
            "environment": {"CLOCKDEMO_PORT": str(port)},
            "ports": [f"{port}:{port}"]
        }

    return compose


def generate_docker_compose(services, output=OUTPUT_COMPOSE):
    compose = build_compose(services)
    with open(output, "w", encoding="utf-8") as f:
        yaml.dump(compose, f, sort_keys=False)
    print(f"Generated '{output}' with services: {list(compose['services'].keys())}")
    return compose


if __name__ == "__main__":
    # 1) Read config.yml
    config = load_config(CONFIG_PATH)
    # 2) Generate the Dockerfile, hypercorn.toml and docker-compose.yml
    ensure_dockerfile()
    write_hypercorn_config(config)
    generate_docker_compose(config.get("services", []))
