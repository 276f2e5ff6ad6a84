#!/usr/bin/env python3
"""
Webapp EC2 Deploy — CDK App Entry Point

Usage:
  1. Copy .env.example to .env at the repo root and fill in all values.
  2. From the repo root:
       pip install -e .
       cdk bootstrap aws://ACCOUNT_ID/REGION
       cdk deploy --all
"""
import logging
import os
import sys

import aws_cdk as cdk
from dotenv import load_dotenv
from pydantic import ValidationError

# Load .env from repo root (one level up from infra/)
load_dotenv(dotenv_path=os.path.join(os.path.dirname(__file__), "..", ".env"))

from settings import get_settings  # noqa: E402

# ---------------------------------------------------------------------------
# Resolve configuration
# ---------------------------------------------------------------------------

try:
    settings = get_settings()
except ValidationError as exc:
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"]).upper()
        print(f"ERROR: {field}: {error['msg']}", file=sys.stderr)
    print("       Copy .env.example → .env and fill in all values.", file=sys.stderr)
    sys.exit(1)

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    stream=sys.stderr,
)

from deployment import build_stacks  # noqa: E402

app = cdk.App()
build_stacks(app, settings)
app.synth()
