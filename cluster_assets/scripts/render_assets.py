#!/usr/bin/env python3
"""Render compact cluster assets (certificates, keys, tokens) as JSON."""

import argparse
import json
import sys
from pathlib import Path

from cluster_assets.lib.assets import (
    load_or_create_encrypted_bundle,
    load_or_create_unencrypted_bundle,
)
from cluster_assets.lib.config import AssetsConfig, KMSConfig
from cluster_assets.lib.errors import AssetsError
from cluster_assets.lib.logging_config import LOGGER
from cluster_assets.lib.models import CompactAssets


def render_assets(
    assets_dir: Path,
    allow_create: bool,
    kms_key_arn: str | None,
    region: str,
    config: AssetsConfig | None = None,
) -> CompactAssets:
    """Build the encrypted bundle when a KMS key is given, the plaintext one otherwise."""
    if kms_key_arn:
        kms_config = KMSConfig(key_arn=kms_key_arn, region=region)
        return load_or_create_encrypted_bundle(assets_dir, allow_create, kms_config, config=config)
    return load_or_create_unencrypted_bundle(assets_dir, allow_create, config=config)


def main(argv: list[str] | None = None) -> int:
    """Render compact assets for an assets directory.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    parser = argparse.ArgumentParser(description="Render compact cluster assets")
    parser.add_argument(
        "--assets-dir",
        type=Path,
        default=Path("credentials"),
        help="Directory caching PEM and ciphertext files (default: credentials)",
    )
    parser.add_argument(
        "--kms-key-arn",
        default=None,
        help="KMS key ARN; keys are left unencrypted when omitted",
    )
    parser.add_argument("--region", default="eu-west-2", help="AWS region of the KMS key")
    parser.add_argument(
        "--no-create",
        action="store_true",
        help="Fail instead of generating missing keys, certificates and tokens",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write JSON here instead of stdout",
    )
    args = parser.parse_args(argv)

    try:
        LOGGER.info("Rendering assets from %s", args.assets_dir)
        assets = render_assets(
            assets_dir=args.assets_dir,
            allow_create=not args.no_create,
            kms_key_arn=args.kms_key_arn,
            region=args.region,
        )
    except AssetsError as e:
        LOGGER.error("Rendering assets failed: %s", e, extra=e.log_context())
        return 1

    payload = json.dumps(assets.to_dict(), indent=2, sort_keys=True)
    if args.output is None:
        print(payload)
    else:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(payload)
        LOGGER.info("Wrote compact assets to %s", args.output)

    LOGGER.info(
        "Assets rendered (encrypted=%s, auth tokens=%s, bootstrap token=%s)",
        bool(args.kms_key_arn),
        assets.has_auth_tokens(),
        assets.has_tls_bootstrap_token(),
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
