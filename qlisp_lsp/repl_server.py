from __future__ import annotations

"""
Simple TCP REPL server for qlisp.

Protocol: JSON per line over TCP.
- Request: {"cmd": "eval", "code": "def {x} 10"}
- Response: {"ok": true, "result": <rendered value>} or {"ok": false, "error": <message>}

Language errors are values, so `(/ 1 0)` answers {"ok": true, "result": "Error: Division by zero"}.
Only requests the server cannot run at all (bad JSON, unknown cmd, syntax errors, runaway nesting)
answer ok=false.

One Interpreter is shared by every client so that definitions persist; each
evaluation holds a lock because the Environment is not safe to mutate concurrently.
"""

import json
import logging
import socket
import threading
from typing import Any, Dict, Tuple

from qlisp import config
from qlisp.interpreter import Interpreter
from qlisp.logging_config import setup_logging
from qlisp.types.errors import QLispSyntaxError

logger = logging.getLogger(__name__)


class ReplServer:
    def __init__(self, host: str | None = None, port: int | None = None):
        default_host, default_port = config.get_repl_address()
        self.host = host or default_host
        self.port = port if port is not None else default_port
        # Keep a single interpreter to maintain session state
        self.interp = Interpreter()
        self._lock = threading.Lock()

    def handle_request(self, line: bytes) -> Dict[str, Any]:
        """Answer one request line."""
        try:
            req = json.loads(line.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as ex:
            return {"ok": False, "error": f"Invalid request: {ex}"}
        if not isinstance(req, dict) or req.get("cmd") != "eval":
            cmd = req.get("cmd") if isinstance(req, dict) else None
            return {"ok": False, "error": f"Unknown cmd: {cmd}"}

        code = req.get("code", "")
        if not isinstance(code, str):
            return {"ok": False, "error": "Field 'code' must be a string"}
        try:
            with self._lock:
                result = self.interp.eval_to_string(code)
        except QLispSyntaxError as ex:
            return {"ok": False, "error": str(ex)}
        except RecursionError:
            return {"ok": False, "error": "Expression nested too deeply"}
        return {"ok": True, "result": result}

    def serve_forever(self):
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
            s.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            s.bind((self.host, self.port))
            s.listen(5)
            logger.info("REPL server listening on %s:%d", self.host, self.port)
            while True:
                conn, addr = s.accept()
                threading.Thread(target=self._handle_client, args=(conn, addr), daemon=True).start()

    def _handle_client(self, conn: socket.socket, addr: Tuple[str, int]):
        logger.info("client connected: %s:%d", *addr)
        with conn:
            buf = b""
            while True:
                data = conn.recv(4096)
                if not data:
                    break
                buf += data
                while b"\n" in buf:
                    line, buf = buf.split(b"\n", 1)
                    line = line.strip()
                    if not line:
                        continue
                    resp = self.handle_request(line)
                    if not resp["ok"]:
                        logger.warning("request from %s:%d failed: %s", *addr, resp["error"])
                    conn.sendall((json.dumps(resp) + "\n").encode("utf-8"))
        logger.info("client disconnected: %s:%d", *addr)


def main() -> None:
    setup_logging(config.get_log_level(), config.get_log_file())
    ReplServer().serve_forever()


if __name__ == "__main__":
    main()
