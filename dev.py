#!/usr/bin/env python3
"""
Dev mode runner for mcp-seraphim

Runs the HTTP/SSE server (mcp_seraphim.server_http) as a child process and
restarts it whenever a source file under mcp_seraphim/ changes.

Usage:
  python dev.py                                # PORT / SERAPHIM_CACHE_DIR from env
  python dev.py --port 5010 --cache-dir /tmp/seraphim-dev
  python dev.py --fresh-cache                  # empty cache dir on every restart
"""
import argparse
import os
import shutil
import subprocess
import sys
import threading
import time
from pathlib import Path
from typing import Optional

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

PACKAGE_DIR = Path(__file__).resolve().parent / "mcp_seraphim"
SERVER_MODULE = "mcp_seraphim.server_http"
DEBOUNCE_SECONDS = 0.5


def server_env(port: Optional[int], cache_dir: Optional[str]) -> dict[str, str]:
    """Environment for the child server; CLI options override the parent env"""
    env = dict(os.environ)
    if port is not None:
        env["PORT"] = str(port)
    if cache_dir:
        env["SERAPHIM_CACHE_DIR"] = cache_dir
    # Child output is relayed line by line
    env["PYTHONUNBUFFERED"] = "1"
    return env


def is_source_change(event: FileSystemEvent) -> bool:
    """Only .py files count; editor temp files and bytecode don't"""
    if event.is_directory:
        return False
    paths = [event.src_path, getattr(event, "dest_path", "") or ""]
    return any(
        str(p).endswith(".py") and "__pycache__" not in str(p)
        for p in paths
    )


class SeraphimServerRunner(FileSystemEventHandler):
    """Owns the server process and restarts it on source changes."""

    def __init__(self, env: dict[str, str], fresh_cache: bool = False):
        self.env = env
        self.fresh_cache = fresh_cache
        self.process: Optional[subprocess.Popen] = None
        self._last_restart = 0.0
        self._lock = threading.Lock()

    def _reset_cache_dir(self) -> None:
        cache_dir = self.env.get("SERAPHIM_CACHE_DIR")
        if cache_dir and Path(cache_dir).is_dir():
            print(f"Clearing cache dir {cache_dir}")
            shutil.rmtree(cache_dir)

    def _stop(self) -> None:
        if self.process and self.process.poll() is None:
            self.process.terminate()
            try:
                self.process.wait(timeout=5)
            except subprocess.TimeoutExpired:
                self.process.kill()
                self.process.wait()

    def start(self) -> None:
        with self._lock:
            self._stop()
            if self.fresh_cache:
                self._reset_cache_dir()

            self.process = subprocess.Popen(
                [sys.executable, "-m", SERVER_MODULE],
                env=self.env,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                bufsize=1
            )
            self._last_restart = time.monotonic()
            port = self.env.get("PORT", "5002")
            print(f"seraphim server PID {self.process.pid} on http://127.0.0.1:{port}/sse")

    def on_any_event(self, event: FileSystemEvent) -> None:
        if not is_source_change(event):
            return
        # One save often fires several events
        if time.monotonic() - self._last_restart < DEBOUNCE_SECONDS:
            return
        print(f"\n{event.src_path} changed - restarting...")
        self.start()

    def relay_output(self) -> None:
        """Copy child output to our stdout until the child exits"""
        process = self.process
        if process is None or process.stdout is None:
            time.sleep(0.1)
            return
        line = process.stdout.readline()
        if line:
            print(line, end="")
        elif process.poll() is not None:
            # Crashed (e.g. syntax error); wait for the next edit
            time.sleep(0.5)

    def stop(self) -> None:
        with self._lock:
            self._stop()


def main():
    parser = argparse.ArgumentParser(description="Auto-restarting seraphim HTTP/SSE server")
    parser.add_argument("--port", type=int, default=None, help="Server port (default: $PORT or 5002)")
    parser.add_argument("--cache-dir", default=None, help="Cache directory (default: $SERAPHIM_CACHE_DIR)")
    parser.add_argument(
        "--fresh-cache",
        action="store_true",
        help="Delete the cache directory before each start"
    )
    args = parser.parse_args()

    print("mcp-seraphim dev mode (Ctrl+C to stop)")
    print(f"Watching {PACKAGE_DIR}\n")

    runner = SeraphimServerRunner(server_env(args.port, args.cache_dir), fresh_cache=args.fresh_cache)
    runner.start()

    observer = Observer()
    observer.schedule(runner, str(PACKAGE_DIR), recursive=True)
    observer.start()

    try:
        while True:
            runner.relay_output()
    except KeyboardInterrupt:
        print("\nStopping dev server...")
    finally:
        observer.stop()
        runner.stop()
        observer.join()


if __name__ == "__main__":
    main()
