from decimal import Decimal, InvalidOperation

import requests

from pricegame.errors import UpstreamFetchFailure


class PriceFeedClient:
    """Fetches the current spot price from a Binance-compatible ticker API.

    The ticker returns the price as a decimal string; it is parsed with
    ``Decimal`` and never goes through float. Any failure raises
    ``UpstreamFetchFailure`` so callers cannot mistake it for a price.
    """

    def __init__(self, base_url: str, symbol: str, timeout: float = 10.0, session=None):
        self.base_url = base_url.rstrip('/')
        self.symbol = symbol
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_config(cls, config):
        return cls(
            base_url=config.get('PRICE_FEED_BASE_URL', 'https://api.binance.com/api/v3'),
            symbol=config.get('PRICE_SYMBOL', 'BTCUSDT'),
            timeout=float(config.get('PRICE_FETCH_TIMEOUT_SEC', 10)),
        )

    def fetch_price(self) -> Decimal:
        url = f"{self.base_url}/ticker/price"
        try:
            res = self.session.get(url, params={'symbol': self.symbol}, timeout=self.timeout)
        except requests.RequestException as exc:
            raise UpstreamFetchFailure('Error during price feed request!', detail=str(exc)) from exc

        if not res.ok:
            raise UpstreamFetchFailure(
                f'Price feed responded with HTTP {res.status_code}', detail=res.text
            )

        try:
            body = res.json()
        except ValueError as exc:
            raise UpstreamFetchFailure('Price feed returned malformed JSON', detail=res.text) from exc

        raw = body.get('price') if isinstance(body, dict) else None
        if raw is None:
            raise UpstreamFetchFailure('Price feed response has no price', detail=body)
        try:
            price = Decimal(str(raw))
        except InvalidOperation as exc:
            raise UpstreamFetchFailure('Price feed returned an unparseable price', detail=raw) from exc
        if not price.is_finite() or price < 0:
            raise UpstreamFetchFailure('Price feed returned an invalid price', detail=raw)
        return price
