import multiprocessing
import os
import signal
import sys
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from fastapi import BackgroundTasks, Depends, FastAPI, Request

from api.auth import verify_telegram_auth_key
from di.di import DI
from util import log
from util.config import config
from util.functions import mask_secret

di = DI()


# noinspection PyUnusedLocal
@asynccontextmanager
async def lifespan(owner: FastAPI):
    process_name = multiprocessing.current_process().name
    worker_type = "main" if process_name == "MainProcess" else "worker"
    worker_info = f"[{worker_type}-{os.getpid()}] {process_name}"
    log.i(f"Lifecycle: Starting up {worker_info}", bot_token = mask_secret(config.telegram_bot_token))
    yield  # this holds the app alive until the server is shut down
    log.i(f"Lifecycle: Shutting down {worker_info}...")


app = FastAPI(
    docs_url = None,
    redoc_url = None,
    title = "Bot Update Dispatcher",
    description = "Receives Telegram webhook pushes and routes them to the registered handlers.",
    debug = config.log_level in ["local", "trace", "debug"],
    lifespan = lifespan,
)


@app.get("/health")
def health() -> dict:
    return {"status": "ok", "version": config.version}


@app.post("/telegram/chat-update")
async def telegram_chat_update(
    request: Request,
    offloader: BackgroundTasks,
    _ = Depends(verify_telegram_auth_key),
) -> dict:
    # the payload is validated while dispatching, Telegram only needs a quick 200
    raw_body = await request.body()
    offloader.add_task(di.update_dispatcher.run_webhook, raw_body)
    return {"status": "ok"}


def run_polling():
    dispatcher = di.update_dispatcher

    # noinspection PyUnusedLocal
    def request_stop(signum, frame):
        log.i(f"Received signal {signum}, finishing the current round...")
        dispatcher.stop()

    signal.signal(signal.SIGTERM, request_stop)
    signal.signal(signal.SIGINT, request_stop)
    log.i("Launching in polling mode", bot_token = mask_secret(config.telegram_bot_token))
    dispatcher.run_polling()


if __name__ == "__main__":
    # get the service version
    if (version_file := Path("./.version")).exists():
        version_name = version_file.read_text().strip()
        if version_name:
            os.environ["VERSION"] = version_name
            config.version = version_name
            print("INFO:     Version file found", f"v{config.version}")
        else:
            print("ERROR:    Version file empty", file = sys.stderr)

    if "poll" in sys.argv[1:]:
        run_polling()
        sys.exit(0)

    uvicorn_log_level = "debug" if config.log_level == "local" else config.log_level
    reload = "--dev" in sys.argv
    print(f"INFO:     Launching in {'dev' if reload else 'production'} mode...")
    uvicorn.run(
        "main:app",
        host = "0.0.0.0",
        port = int(os.environ.get("PORT", "80")),
        log_level = uvicorn_log_level,
        workers = 1,
        reload = reload,
    )
