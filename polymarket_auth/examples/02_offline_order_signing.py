"""
Example 2: Offline Order Signing

Builds and signs an order without any network access, then checks the
signature the same way the exchange contract does.

Uses Hardhat's well-known test key; never fund it.
"""

from polymarket_auth import Side, create_limit_order
from polymarket_auth.trading.order_builder import hash_order, verify_order_signature

TEST_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"


def main():
    order = create_limit_order(
        TEST_KEY,
        token_id="1234",
        side=Side.BUY,
        price="0.65",
        size="100",
    )

    print(f"Maker:        {order.maker}")
    print(f"Maker amount: {order.maker_amount}")
    print(f"Taker amount: {order.taker_amount}")
    print(f"Order hash:   {hash_order(order)}")
    print(f"Signature:    {order.signature}")
    print(f"Valid:        {verify_order_signature(order)}")


if __name__ == "__main__":
    main()
