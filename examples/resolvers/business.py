"""Example resolvers for examples/order.yaml."""

import asyncio


def CustomerIsVIP():
    return True


async def PaymentProcessed():
    await asyncio.sleep(0)
    return True


fraud_resolvers = {
    "FraudSuspected": lambda: False,
}
