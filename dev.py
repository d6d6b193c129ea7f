#!/usr/bin/env python3
"""
Development server with hot reload support for promptlog.

Restarts uvicorn whenever a source file under promptlog/ changes.
"""

import os
import signal
import subprocess
import sys
import time
from pathlib import Path
from typing import Optional

from watchdog.events import FileModifiedEvent, FileSystemEventHandler
from watchdog.observers import Observer

from promptlog.config import get_settings


class ServerReloader(FileSystemEventHandler):
    def __init__(self, host: str, port: int):
        self.host = host
        self.port = port
        self.process: Optional[subprocess.Popen] = None
        self.last_restart = 0.0
        self.restart_delay = 1.0
        self.watch_extensions = {".py", ".toml", ".env"}
        self.ignore_parts = {"__pycache__", ".pytest_cache", ".venv"}

    def should_reload(self, path: str) -> bool:
        path_obj = Path(path)
        if any(part in self.ignore_parts for part in path_obj.parts):
            return False
        return path_obj.suffix in self.watch_extensions

    def on_modified(self, event):
        if isinstance(event, FileModifiedEvent) and not event.is_directory:
            if self.should_reload(event.src_path):
                now = time.time()
                if now - self.last_restart > self.restart_delay:
                    print(f"\n🔄 File changed: {event.src_path}")
                    self.restart_server()
                    self.last_restart = now

    def start_server(self):
        env = os.environ.copy()
        env["PYTHONUNBUFFERED"] = "1"

        self.process = subprocess.Popen(
            [
                sys.executable, "-m", "uvicorn",
                "promptlog.server.main:create_app",
                "--host", self.host,
                "--port", str(self.port),
                "--factory",
            ],
            env=env,
            stdout=sys.stdout,
            stderr=sys.stderr,
        )
        print(f"✅ Server started on http://{self.host}:{self.port}")

    def stop_server(self):
        if self.process:
            self.process.terminate()
            try:
                self.process.wait(timeout=5)
            except subprocess.TimeoutExpired:
                self.process.kill()
                self.process.wait()
            self.process = None

    def restart_server(self):
        self.stop_server()
        time.sleep(0.5)
        self.start_server()

    def run(self):
        self.start_server()

        observer = Observer()
        observer.schedule(self, path="promptlog", recursive=True)
        observer.start()

        try:
            while True:
                time.sleep(1)
                if self.process and self.process.poll() is not None:
                    print("⚠️  Server exited, restarting...")
                    self.start_server()
        except KeyboardInterrupt:
            observer.stop()
            self.stop_server()
        observer.join()


def main():
    signal.signal(signal.SIGTERM, lambda sig, frame: sys.exit(0))

    settings = get_settings()
    ServerReloader(settings.host, settings.port).run()


if __name__ == "__main__":
    main()
