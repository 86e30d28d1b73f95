"""Tezos data gateway: cached aggregation of explorer, swap-routing and storage APIs."""

__version__ = "0.1.0"
