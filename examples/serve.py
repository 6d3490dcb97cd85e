from plaid_coinflow_bridge import run

# Reads PLAID_CLIENT_ID, PLAID_SECRET, COINFLOW_API_KEY, ... from the environment.
if __name__ == "__main__":
    run()
