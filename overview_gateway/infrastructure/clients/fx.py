"""FX rate service HTTP client for batched currency-pair lookups"""

import httpx
from typing import Dict, List
from overview_gateway.domain.exceptions import FxRateError
from overview_gateway.domain.money import RatePair, rate_key
from overview_gateway.config import settings


class FxRateClient:
    """Client for the external exchange-rate service"""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url or settings.fx_api_base
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    async def get_rate_batch(self, pairs: List[RatePair]) -> Dict[str, float]:
        """
        Fetch rates for every pair in one round trip.

        Same-currency pairs resolve to 1.0 locally; when nothing else is
        requested no HTTP call is made. Pairs the service does not know are
        simply absent from the result.

        Raises:
            FxRateError: On timeout, HTTP errors, or invalid response
        """
        rates: Dict[str, float] = {}
        remote = []
        for from_currency, to_currency in pairs:
            key = rate_key(from_currency, to_currency)
            if from_currency == to_currency:
                rates[key] = 1.0
            elif key not in remote:
                remote.append(key)

        if not remote:
            return rates

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                response = await client.get(
                    f"{self.base_url}/rates",
                    params={"pairs": ",".join(remote)},
                )
                response.raise_for_status()
                data = response.json()

                for key, rate in data.get("rates", {}).items():
                    if key in remote and rate is not None:
                        rates[key] = float(rate)
                return rates

            except httpx.TimeoutException as e:
                raise FxRateError(f"FX rate service timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                raise FxRateError(f"FX rate service error: {e.response.status_code}") from e
            except httpx.RequestError as e:
                raise FxRateError(f"FX rate service unreachable: {e}") from e
            except (KeyError, ValueError, TypeError, AttributeError) as e:
                raise FxRateError(f"Invalid rate data from FX service: {e}") from e
