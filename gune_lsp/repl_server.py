from __future__ import annotations

"""
Simple TCP REPL server for gune.

Protocol: JSON per line over TCP.
- Request: {"cmd": "eval", "code": "2 + 3 * 4"}
- Response: {"ok": true, "result": "14"} or
            {"ok": false, "error": <message>, "kind": <error class name>}

Each client connection gets its own Interpreter, so clients never share scope
frames and a failing input only affects its own response line.
"""

import json
import logging
import socket
import threading
from typing import Any, Dict, Optional, Tuple

from gune import config
from gune.interpreter import Interpreter

logger = logging.getLogger(__name__)


class ReplServer:
    def __init__(self, host: Optional[str] = None, port: Optional[int] = None, keep_bindings: bool = False):
        default_host, default_port = config.get_repl_address()
        self.host = default_host if host is None else host
        self.port = default_port if port is None else port
        self.keep_bindings = keep_bindings

    def new_interpreter(self) -> Interpreter:
        return Interpreter(isolate_inputs=not self.keep_bindings)

    def handle_request(self, interp: Interpreter, line: bytes) -> Dict[str, Any]:
        try:
            req = json.loads(line.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as ex:
            return {"ok": False, "error": f"Invalid request: {ex}"}
        if not isinstance(req, dict):
            return {"ok": False, "error": "Invalid request: expected a JSON object"}
        if req.get("cmd") != "eval":
            return {"ok": False, "error": f"Unknown cmd: {req.get('cmd')}"}

        code = req.get("code", "")
        if not isinstance(code, str):
            return {"ok": False, "error": "Invalid request: code must be a string"}
        outcome = interp.run(code)
        if outcome.ok:
            return {"ok": True, "result": outcome.render()}
        return {"ok": False, "error": str(outcome.error), "kind": outcome.error.kind}

    def serve_forever(self):
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
            s.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            s.bind((self.host, self.port))
            s.listen(5)
            logger.info("gune REPL server listening on %s:%d", self.host, self.port)
            while True:
                conn, addr = s.accept()
                threading.Thread(target=self._handle_client, args=(conn, addr), daemon=True).start()

    def _handle_client(self, conn: socket.socket, addr: Tuple[str, int]):
        logger.info("client connected: %s:%d", *addr)
        interp = self.new_interpreter()
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
                    resp = self.handle_request(interp, line)
                    conn.sendall((json.dumps(resp) + "\n").encode("utf-8"))
        logger.info("client disconnected: %s:%d", *addr)


def main() -> None:
    logging.basicConfig(level=config.get_log_level())
    ReplServer().serve_forever()


if __name__ == "__main__":
    main()
