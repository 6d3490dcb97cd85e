import asyncio
import os

from plaid_coinflow_bridge import RetryPolicy, WalletAuthenticator, WalletKeypair, poll


async def main():
    authenticator = WalletAuthenticator(
        os.getenv("COINFLOW_BASE_URL", "https://api-sandbox.coinflow.cash")
    )
    keypair = WalletKeypair.generate()

    # The auth endpoint has no retry of its own; wrap it in the poller.
    outcome = await poll(
        lambda: authenticator.authenticate(keypair),
        RetryPolicy(delay_ms=500, max_attempts=3),
    )
    if not outcome.ok:
        print(f"Authentication failed: {outcome.reason}: {outcome.last_error}")
        return
    credential = outcome.value
    print(f"Wallet {credential.public_key} authenticated")


if __name__ == "__main__":
    asyncio.run(main())
