import json
import socket
import threading

import pytest

from qlisp_lsp.repl_server import ReplServer


@pytest.fixture
def server():
    return ReplServer(host="127.0.0.1", port=0)


def _req(**kw) -> bytes:
    return json.dumps(kw).encode("utf-8")


def test_eval_request(server):
    assert server.handle_request(_req(cmd="eval", code="(+ 1 2)")) == {"ok": True, "result": "3"}


def test_state_persists_between_requests(server):
    server.handle_request(_req(cmd="eval", code="def {x} 5"))
    assert server.handle_request(_req(cmd="eval", code="* x x")) == {"ok": True, "result": "25"}


def test_language_errors_are_results(server):
    resp = server.handle_request(_req(cmd="eval", code="(/ 1 0)"))
    assert resp == {"ok": True, "result": "Error: Division by zero"}


def test_deep_nesting_is_an_error_response(server):
    deep = "(" * 5000 + "5" + ")" * 5000
    resp = server.handle_request(_req(cmd="eval", code=deep))
    assert resp == {"ok": False, "error": "Expression nested too deeply"}
    assert server.handle_request(_req(cmd="eval", code="+ 1 2")) == {"ok": True, "result": "3"}


def test_runaway_eval_is_an_error_response(server):
    server.handle_request(_req(cmd="eval", code="def {f} {eval f}"))
    resp = server.handle_request(_req(cmd="eval", code="eval f"))
    assert resp["ok"] is False


def test_syntax_error(server):
    resp = server.handle_request(_req(cmd="eval", code="(+ 1"))
    assert resp["ok"] is False
    assert "Unmatched" in resp["error"]


@pytest.mark.parametrize(
    "line,fragment",
    [
        (b"not json", "Invalid request"),
        (_req(cmd="quit"), "Unknown cmd: quit"),
        (b"[1, 2]", "Unknown cmd: None"),
        (_req(cmd="eval", code=5), "must be a string"),
    ]
)
def test_bad_requests(server, line, fragment):
    resp = server.handle_request(line)
    assert resp["ok"] is False
    assert fragment in resp["error"]


def test_concurrent_defs_are_serialized(server):
    def worker(i):
        for _ in range(20):
            server.handle_request(_req(cmd="eval", code=f"def {{v{i}}} {i}"))

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    resp = server.handle_request(_req(cmd="eval", code="+ v0 v1 v2 v3 v4 v5 v6 v7"))
    assert resp == {"ok": True, "result": "28"}


def test_client_roundtrip_over_socket(server):
    a, b = socket.socketpair()
    t = threading.Thread(target=server._handle_client, args=(b, ("127.0.0.1", 0)), daemon=True)
    t.start()
    with a:
        a.sendall(_req(cmd="eval", code="list 1 2") + b"\n\n" + _req(cmd="eval", code="(") + b"\n")
        f = a.makefile("rb")
        first = json.loads(f.readline())
        second = json.loads(f.readline())
        f.close()
        a.shutdown(socket.SHUT_WR)
    t.join(timeout=5)
    assert first == {"ok": True, "result": "{1 2}"}
    assert second["ok"] is False
