"""Development entry point for running the Storelens API."""

import os

from dotenv import load_dotenv

from storelens.app import create_app

load_dotenv()

app = create_app()

if __name__ == "__main__":
    app.run(host="127.0.0.1", port=int(os.getenv("STORELENS_PORT", "5000")))
