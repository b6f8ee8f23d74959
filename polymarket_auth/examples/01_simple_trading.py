"""
Example 1: Simple Trading

This example shows:
- Reading market data without authentication
- Upgrading to a wallet client and deriving API credentials
- Signing, posting and cancelling a limit order

Set POLYMARKET_PRIVATE_KEY and POLYMARKET_TOKEN_ID before running.
"""

import os

from polymarket_auth import (
    OrderArgs,
    OrderType,
    RequestsTransport,
    Side,
    UnauthenticatedClient,
)
from polymarket_auth.logging_config import setup_logging


def main():
    """Simple trading bot example."""
    setup_logging(level="INFO")

    private_key = os.getenv("POLYMARKET_PRIVATE_KEY")
    token_id = os.getenv("POLYMARKET_TOKEN_ID")
    if not private_key or not token_id:
        raise ValueError("Set POLYMARKET_PRIVATE_KEY and POLYMARKET_TOKEN_ID")

    # 1. Anonymous client: public market data only
    client = UnauthenticatedClient(RequestsTransport("https://clob.polymarket.com"))
    print(f"Server time: {client.get_server_time()}")

    book = client.get_order_book(token_id)
    bids = book.get("bids") or []
    print(f"Best bid: {bids[-1]['price'] if bids else 'none'}")

    # 2. Wallet-proven client (L1)
    wallet = client.upgrade(private_key)
    print(f"Wallet: {wallet.address}")

    # 3. API-key client (L2): derive existing credentials for nonce 0
    trader = wallet.derive_api_key()
    print(f"API key: {trader.credentials.api_key}")

    # 4. Sign and post a GTC limit order
    neg_risk = bool(client.get_neg_risk(token_id).get("neg_risk"))
    order = trader.create_order(
        OrderArgs(token_id=token_id, price="0.05", size="10", side=Side.BUY),
        neg_risk=neg_risk,
    )
    response = trader.post_order(order, OrderType.GTC)
    print(f"Posted: {response}")

    # 5. Cancel it again
    order_id = response.get("orderID")
    if order_id:
        print(f"Cancelled: {trader.cancel_order(order_id)}")


if __name__ == "__main__":
    main()
