"""Entry point: protoc-gen-tools / python -m protoc_gen_tools

Reads a CodeGeneratorRequest from stdin, writes a CodeGeneratorResponse to
stdout. Logs go to stderr, since stdout carries the protocol.
"""

from __future__ import annotations

import logging
import sys

from .loader import load_request
from .options import get_log_level
from .plugin import generate


def main() -> None:
    logging.basicConfig(
        stream=sys.stderr,
        level=get_log_level(),
        format="protoc-gen-tools: %(levelname)s %(name)s: %(message)s",
    )
    request = load_request(sys.stdin.buffer)
    response = generate(request)
    sys.stdout.buffer.write(response.SerializeToString())
    sys.stdout.buffer.flush()


if __name__ == "__main__":
    main()
