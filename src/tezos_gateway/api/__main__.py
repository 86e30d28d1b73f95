"""Allow running the server as: python -m tezos_gateway.api [--config path]."""

import argparse

from tezos_gateway.api.runner import main

parser = argparse.ArgumentParser(description="Tezos data gateway")
parser.add_argument("--config", default=None, help="Path to config.yaml")
args = parser.parse_args()
main(config_path=args.config)
