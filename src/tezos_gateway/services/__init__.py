"""Domain services owning the cached data providers."""

from tezos_gateway.services.dapps import (
    ContractTokensKey,
    DAppKey,
    DAppsService,
    TokensMetadataKey,
    merge_dapps,
)
from tezos_gateway.services.exchange_rates import ExchangeRatesService, compute_token_exchange_rates

__all__ = [
    "ContractTokensKey",
    "DAppKey",
    "DAppsService",
    "ExchangeRatesService",
    "TokensMetadataKey",
    "compute_token_exchange_rates",
    "merge_dapps",
]
