import sys
import asyncio
import logging
import threading

from telegram import Bot
from waitress import serve
from flask import Flask, jsonify

import bot
import config
from checker import run_checker_once
from gauge import GaugeReader
from repository import Repository

logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=config.LOG_LEVEL,
)

# Every getUpdates request is logged by httpx otherwise
logging.getLogger("httpx").setLevel(logging.WARNING)

logger = logging.getLogger(__name__)

# initialize Flask app
app = Flask(__name__)


@app.route("/", methods=["GET"])
def health_check():
    return jsonify(status="UP"), 200


def run_flask_in_background() -> None:
    port = 80 if len(sys.argv) == 1 else int(sys.argv[1])
    run_serve = lambda: serve(app, host="0.0.0.0", port=port)
    threading.Thread(target=run_serve, daemon=True).start()


async def run_check(token: str, repository: Repository, gauge_reader: GaugeReader) -> None:
    async with Bot(token) as telegram_bot:
        await run_checker_once(repository, gauge_reader, telegram_bot.send_message)


def main() -> None:
    token = config.TOKEN

    if not token:
        sys.exit("TOKEN environment variable is not set")

    repository = Repository(config.CONFIG_FILE)
    repository.load()

    gauge_reader = GaugeReader.from_url(config.RPC_URL)

    if config.RUN_ONCE:
        asyncio.run(run_check(token, repository, gauge_reader))
        logger.info("Done.")
        return

    run_flask_in_background()

    logger.info("Bot started")
    bot.run_polling(token, repository, gauge_reader)


if __name__ == "__main__":
    main()
