"""Fee quote configuration — plain frozen dataclass, no pydantic.

The host application builds this from its own settings (env vars, CLI
flags, etc.) and passes it to the live quote tool.
"""

from dataclasses import dataclass, field

from feequote.snapshot import FALLBACK_SNAPSHOT, FeeRateSnapshot


@dataclass(frozen=True)
class FeeQuoteConfig:
    mempool_host: str = "https://mempool.space"
    price_api_url: str = "https://api.blink.sv/graphql"
    price_range: str = "ONE_DAY"
    fetch_retries: int = 3
    retry_delay_secs: float = 0.5
    fallback_snapshot: FeeRateSnapshot = field(default=FALLBACK_SNAPSHOT)
