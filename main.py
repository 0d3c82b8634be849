"""
Sheet To-Do Bot — Entry Point.

`python main.py` starts the always-on polling bot.
For the webhook deployment run `uvicorn src.bot.webhook:app` instead.
"""

import logging

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

from src.bot.telegram_bot import main

if __name__ == "__main__":
    main()
